"""Domain models for users and authorship."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    email: str
    password_hash: str
    display_name: str | None
    photo_url: str | None
    created_at: datetime


@dataclass(frozen=True)
class AuthorSummary:
    """Public view of a recipe author."""

    id: UUID | None
    display_name: str | None
    photo_url: str | None


UNKNOWN_AUTHOR = AuthorSummary(id=None, display_name="Unknown", photo_url=None)


def normalize_email(email: str) -> str:
    """Return the canonical form used for email comparisons."""
    return email.strip().lower()


def author_summary(user: UserRecord) -> AuthorSummary:
    """Project a user record onto its public author fields."""
    return AuthorSummary(
        id=user.id,
        display_name=user.display_name,
        photo_url=user.photo_url,
    )
