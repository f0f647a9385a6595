"""Models for stored image objects and their access descriptors."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from recipe_catalog.domain.access import Outcome

OBJECT_PATH_PREFIX = "/objects/"
UPLOADS_DIR = "uploads"


class Visibility(StrEnum):
    """Who may read a stored object."""

    PUBLIC = "public"
    PRIVATE = "private"


class UploadState(StrEnum):
    """Lifecycle of an uploaded image."""

    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    ATTACHED = "attached"


@dataclass(frozen=True)
class AccessDescriptor:
    """Owner and visibility recorded on a stored object."""

    owner: UUID | None
    visibility: Visibility


@dataclass(frozen=True)
class UploadTarget:
    """Time-limited, write-only destination for a new object."""

    object_path: str
    upload_url: str
    owner_id: UUID
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class StoredObject:
    """Object bytes with basic metadata."""

    object_path: str
    content_type: str
    size: int
    data: bytes


@dataclass(frozen=True)
class AttachResult:
    """Outcome of binding an uploaded object to a recipe."""

    outcome: Outcome
    object_path: str | None = None


@dataclass(frozen=True)
class ObjectRead:
    """Outcome of an access-checked object read."""

    outcome: Outcome
    stored_object: StoredObject | None = None
    cacheable: bool = False


def object_path_for(object_id: str) -> str:
    """Return the public object path for an upload id."""
    return f"{OBJECT_PATH_PREFIX}{UPLOADS_DIR}/{object_id}"


def normalize_object_path(raw: str) -> str | None:
    """Normalize an upload URL or object path to ``/objects/uploads/<id>``.

    Accepts signed upload URLs (any host, query string ignored), bare storage
    keys such as ``uploads/<id>`` and already-normalized object paths.
    """
    value = raw.strip()
    if not value:
        return None
    value = value.split("?", 1)[0]
    marker = f"/{UPLOADS_DIR}/"
    if marker in value:
        object_id = value.rsplit(marker, 1)[1]
    elif value.startswith(f"{UPLOADS_DIR}/"):
        object_id = value[len(UPLOADS_DIR) + 1 :]
    else:
        return None
    object_id = object_id.strip("/")
    if not object_id or "/" in object_id:
        return None
    return object_path_for(object_id)


def storage_key(object_path: str) -> str:
    """Return the bucket key for an object path."""
    return object_path.removeprefix(OBJECT_PATH_PREFIX)


def detect_mime_type(data: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "application/octet-stream"
