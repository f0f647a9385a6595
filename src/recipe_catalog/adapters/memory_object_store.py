"""In-process object store for local development and tests."""

from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from uuid import UUID, uuid4

from recipe_catalog.domain.objects import (
    AccessDescriptor,
    StoredObject,
    UploadTarget,
    object_path_for,
)
from recipe_catalog.services.images import ObjectStore


@dataclass
class InMemoryObjectStore(ObjectStore):
    """Keeps object bytes, descriptors and issued targets in dictionaries."""

    upload_base_url: str
    objects: dict[str, StoredObject] = field(default_factory=dict)
    descriptors: dict[str, AccessDescriptor] = field(default_factory=dict)
    targets: dict[str, UploadTarget] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def issue_write_target(self, owner_id: UUID, expires_at: datetime) -> UploadTarget:
        object_id = str(uuid4())
        target = UploadTarget(
            object_path=object_path_for(object_id),
            upload_url=f"{self.upload_base_url.rstrip('/')}/{object_id}",
            owner_id=owner_id,
            expires_at=expires_at,
        )
        with self._lock:
            self.targets[target.object_path] = target
        return target

    def get_upload_target(self, object_path: str) -> UploadTarget | None:
        with self._lock:
            return self.targets.get(object_path)

    def write(self, object_path: str, data: bytes, content_type: str) -> None:
        with self._lock:
            self.objects[object_path] = StoredObject(
                object_path=object_path,
                content_type=content_type,
                size=len(data),
                data=data,
            )

    def exists(self, object_path: str) -> bool:
        with self._lock:
            return object_path in self.objects

    def set_access_descriptor(
        self, object_path: str, descriptor: AccessDescriptor
    ) -> None:
        with self._lock:
            self.descriptors[object_path] = descriptor

    def get_access_descriptor(self, object_path: str) -> AccessDescriptor | None:
        with self._lock:
            return self.descriptors.get(object_path)

    def read(self, object_path: str) -> StoredObject | None:
        with self._lock:
            return self.objects.get(object_path)
