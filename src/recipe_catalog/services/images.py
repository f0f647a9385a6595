"""Recipe image uploads: upload target, upload, attach, and access-checked reads."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from recipe_catalog.domain.access import Actor, Outcome
from recipe_catalog.domain.errors import ExpiredTarget
from recipe_catalog.domain.objects import (
    AccessDescriptor,
    AttachResult,
    ObjectRead,
    StoredObject,
    UploadState,
    UploadTarget,
    Visibility,
    normalize_object_path,
)
from recipe_catalog.services.access import AccessPolicy
from recipe_catalog.services.aggregator import RecipeRepository

_logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Interface for the image object store."""

    def issue_write_target(self, owner_id: UUID, expires_at: datetime) -> UploadTarget:
        """Create a write-only destination valid until ``expires_at``."""

    def get_upload_target(self, object_path: str) -> UploadTarget | None:
        """Return the target issued for an object path, if any."""

    def write(self, object_path: str, data: bytes, content_type: str) -> None:
        """Store object bytes."""

    def exists(self, object_path: str) -> bool:
        """Return True when the object has been uploaded."""

    def set_access_descriptor(
        self, object_path: str, descriptor: AccessDescriptor
    ) -> None:
        """Record owner and visibility for an object."""

    def get_access_descriptor(self, object_path: str) -> AccessDescriptor | None:
        """Return the recorded descriptor, if any."""

    def read(self, object_path: str) -> StoredObject | None:
        """Return object bytes and metadata, if present."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ImageService:
    """Drives the upload, attach and read flow for recipe images."""

    object_store: ObjectStore
    recipe_repository: RecipeRepository
    policy: AccessPolicy
    upload_ttl_seconds: int = 900
    clock: Callable[[], datetime] = _utcnow

    def issue_upload_target(self, actor: Actor) -> UploadTarget | None:
        """Issue a short-lived upload destination to a signed-in actor."""
        if actor.user_id is None:
            return None
        expires_at = self.clock() + timedelta(seconds=self.upload_ttl_seconds)
        return self.object_store.issue_write_target(actor.user_id, expires_at)

    def upload_object(
        self, actor: Actor, object_ref: str, data: bytes, content_type: str
    ) -> Outcome:
        """Write bytes through an issued target or over an owned object."""
        object_path = normalize_object_path(object_ref)
        if object_path is None:
            return Outcome.NOT_FOUND
        descriptor = self.object_store.get_access_descriptor(object_path)
        if descriptor is not None:
            if not self.policy.can_write_object(actor, descriptor):
                return Outcome.DENIED
            self.object_store.write(object_path, data, content_type)
            return Outcome.OK
        target = self.object_store.get_upload_target(object_path)
        if target is None:
            return Outcome.NOT_FOUND
        if actor.user_id is None or target.owner_id != actor.user_id:
            return Outcome.DENIED
        if target.is_expired(self.clock()):
            raise ExpiredTarget(f"Upload target expired at {target.expires_at}")
        self.object_store.write(object_path, data, content_type)
        return Outcome.OK

    def confirm_attach(
        self, actor: Actor, object_ref: str, recipe_id: UUID
    ) -> AttachResult:
        """Set an uploaded object as the recipe image and stamp it public.

        Nothing is stamped or written unless every check passes, and the
        object is never stamped if the recipe vanished before the write.
        """
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return AttachResult(Outcome.NOT_FOUND)
        if not self.policy.can_write_recipe(actor, recipe):
            return AttachResult(Outcome.DENIED)
        object_path = normalize_object_path(object_ref)
        if object_path is None or not self.object_store.exists(object_path):
            return AttachResult(Outcome.NOT_FOUND)
        descriptor = self.object_store.get_access_descriptor(object_path)
        if descriptor is not None and not self.policy.can_write_object(
            actor, descriptor
        ):
            return AttachResult(Outcome.DENIED)
        target = self.object_store.get_upload_target(object_path)
        if target is not None and target.owner_id != actor.user_id:
            return AttachResult(Outcome.DENIED)

        # The recipe write doubles as an existence check; stamp only after it lands.
        if not self.recipe_repository.update_recipe_image(recipe_id, object_path):
            return AttachResult(Outcome.NOT_FOUND)
        self.object_store.set_access_descriptor(
            object_path,
            AccessDescriptor(owner=actor.user_id, visibility=Visibility.PUBLIC),
        )
        _logger.info("Image attached: recipe=%s object=%s", recipe_id, object_path)
        return AttachResult(Outcome.OK, object_path)

    def read_object(self, actor: Actor, object_ref: str) -> ObjectRead:
        """Return an object when the actor may read it."""
        object_path = normalize_object_path(object_ref)
        if object_path is None or not self.object_store.exists(object_path):
            return ObjectRead(Outcome.NOT_FOUND)
        descriptor = self.object_store.get_access_descriptor(object_path)
        if not self.policy.can_read_object(actor, descriptor):
            return ObjectRead(Outcome.DENIED)
        stored = self.object_store.read(object_path)
        if stored is None:
            return ObjectRead(Outcome.NOT_FOUND)
        return ObjectRead(
            Outcome.OK,
            stored_object=stored,
            cacheable=self.policy.is_publicly_cacheable(descriptor),
        )

    def upload_state(self, object_ref: str) -> UploadState | None:
        """Report where an object is in the upload lifecycle."""
        object_path = normalize_object_path(object_ref)
        if object_path is None:
            return None
        if self.object_store.get_access_descriptor(object_path) is not None:
            return UploadState.ATTACHED
        if self.object_store.exists(object_path):
            return UploadState.UPLOADED
        if self.object_store.get_upload_target(object_path) is not None:
            return UploadState.UPLOADING
        return None
