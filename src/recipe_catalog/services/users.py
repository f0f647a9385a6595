"""User account business logic."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from werkzeug.security import check_password_hash, generate_password_hash

from recipe_catalog.domain.errors import DuplicateKey
from recipe_catalog.domain.inputs import SignupInput, parse_input
from recipe_catalog.domain.models import (
    AuthorSummary,
    UserRecord,
    author_summary,
    normalize_email,
)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for a normalized email, if present."""

    def create_user(
        self,
        email: str,
        password_hash: str,
        display_name: str | None,
        photo_url: str | None,
    ) -> UserRecord:
        """Create a user, raising ``DuplicateKey`` if the email is taken."""

    def delete_user(self, user_id: UUID) -> bool:
        """Delete a user and everything they own; return True if it existed."""


@dataclass
class UserService:
    """Application service for account lifecycle actions."""

    repository: UserRepository

    def register(self, payload: SignupInput | Mapping[str, object]) -> UserRecord:
        """Create an account with a hashed password."""
        signup = parse_input(SignupInput, payload)
        email = normalize_email(signup.email)
        if self.repository.get_by_email(email) is not None:
            raise DuplicateKey(f"Email already registered: {email}")
        return self.repository.create_user(
            email=email,
            password_hash=generate_password_hash(signup.password),
            display_name=signup.display_name,
            photo_url=None,
        )

    def authenticate(self, email: str, password: str) -> UserRecord | None:
        """Return the user when the credentials match."""
        user = self.repository.get_by_email(normalize_email(email))
        if user is None or not check_password_hash(user.password_hash, password):
            return None
        return user

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id."""
        return self.repository.get_user(user_id)

    def get_profile(self, user_id: UUID) -> AuthorSummary | None:
        """Return the public profile for a user."""
        user = self.repository.get_user(user_id)
        return author_summary(user) if user else None

    def delete_account(self, user_id: UUID) -> bool:
        """Delete a user along with their recipes and favorites."""
        return self.repository.delete_user(user_id)
