"""Error types raised by the recipe catalog core.

Absent entities and permission denials are ordinary results (``None`` and
``Outcome`` values), not exceptions. The classes here cover caller-input
problems and backing-store faults.
"""


class RecipeCatalogError(Exception):
    """Base class for recipe catalog errors."""


class DuplicateKey(RecipeCatalogError):
    """A write violated a uniqueness constraint."""


class ValidationFailed(RecipeCatalogError):
    """Input failed validation before any write was attempted."""

    def __init__(self, errors: list[dict[str, object]]) -> None:
        super().__init__(_summarize(errors))
        self.errors = errors


class StorageUnavailable(RecipeCatalogError):
    """The backing store failed transiently; the caller may retry."""


class ExpiredTarget(RecipeCatalogError):
    """A write was attempted against an expired upload target."""


def _summarize(errors: list[dict[str, object]]) -> str:
    parts = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ()) or ())
        msg = str(error.get("msg", "invalid"))
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "validation failed"
