"""Supabase Storage backed object store for recipe images."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from supabase import Client

from recipe_catalog.adapters.supabase_errors import supabase_errors
from recipe_catalog.domain.objects import (
    AccessDescriptor,
    StoredObject,
    UploadTarget,
    Visibility,
    object_path_for,
    storage_key,
)
from recipe_catalog.services.images import ObjectStore

_OBJECT_COLUMNS = (
    "object_path, upload_url, target_owner_id, expires_at, content_type, size, "
    "uploaded_at, owner_id, visibility"
)


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Object bytes live in a storage bucket, lifecycle rows in ``stored_objects``.

    A row is created when a target is issued, marked uploaded once bytes land in
    the bucket, and carries the access descriptor after attach.
    """

    client: Client
    bucket: str
    upload_base_url: str

    def issue_write_target(self, owner_id: UUID, expires_at: datetime) -> UploadTarget:
        object_id = str(uuid4())
        target = UploadTarget(
            object_path=object_path_for(object_id),
            upload_url=f"{self.upload_base_url.rstrip('/')}/{object_id}",
            owner_id=owner_id,
            expires_at=expires_at,
        )
        with supabase_errors("issue_upload_target"):
            self.client.table("stored_objects").insert(
                {
                    "object_path": target.object_path,
                    "upload_url": target.upload_url,
                    "target_owner_id": str(owner_id),
                    "expires_at": expires_at.isoformat(),
                }
            ).execute()
        return target

    def get_upload_target(self, object_path: str) -> UploadTarget | None:
        row = self._get_row(object_path)
        if row is None or not row.get("target_owner_id"):
            return None
        return UploadTarget(
            object_path=object_path,
            upload_url=str(row.get("upload_url") or ""),
            owner_id=UUID(row["target_owner_id"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
        )

    def write(self, object_path: str, data: bytes, content_type: str) -> None:
        """Upload bytes to the bucket and mark the object uploaded.

        The row is written first and ``uploaded_at`` is set only once the bytes
        are in the bucket. A failed final update leaves the object unreported;
        retrying the upload overwrites the same key.
        """
        with supabase_errors("write_object"):
            self.client.table("stored_objects").upsert(
                {
                    "object_path": object_path,
                    "content_type": content_type,
                    "size": len(data),
                },
                on_conflict="object_path",
            ).execute()
            self.client.storage.from_(self.bucket).upload(
                storage_key(object_path),
                data,
                file_options={"content-type": content_type, "upsert": "true"},
            )
            self.client.table("stored_objects").update(
                {"uploaded_at": datetime.now(tz=UTC).isoformat()}
            ).eq("object_path", object_path).execute()

    def exists(self, object_path: str) -> bool:
        row = self._get_row(object_path)
        return row is not None and row.get("uploaded_at") is not None

    def set_access_descriptor(
        self, object_path: str, descriptor: AccessDescriptor
    ) -> None:
        owner = str(descriptor.owner) if descriptor.owner is not None else None
        with supabase_errors("set_access_descriptor"):
            self.client.table("stored_objects").upsert(
                {
                    "object_path": object_path,
                    "owner_id": owner,
                    "visibility": descriptor.visibility.value,
                },
                on_conflict="object_path",
            ).execute()

    def get_access_descriptor(self, object_path: str) -> AccessDescriptor | None:
        row = self._get_row(object_path)
        if row is None or not row.get("visibility"):
            return None
        owner = row.get("owner_id")
        return AccessDescriptor(
            owner=UUID(owner) if owner else None,
            visibility=Visibility(row["visibility"]),
        )

    def read(self, object_path: str) -> StoredObject | None:
        row = self._get_row(object_path)
        if row is None or row.get("uploaded_at") is None:
            return None
        with supabase_errors("read_object"):
            data = self.client.storage.from_(self.bucket).download(
                storage_key(object_path)
            )
        return StoredObject(
            object_path=object_path,
            content_type=str(row.get("content_type") or "application/octet-stream"),
            size=len(data),
            data=data,
        )

    def _get_row(self, object_path: str) -> dict[str, object] | None:
        with supabase_errors("get_object"):
            response = (
                self.client.table("stored_objects")
                .select(_OBJECT_COLUMNS)
                .eq("object_path", object_path)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return response.data[0]
