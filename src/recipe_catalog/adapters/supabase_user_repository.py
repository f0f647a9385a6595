"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_catalog.adapters.supabase_errors import supabase_errors
from recipe_catalog.domain.errors import StorageUnavailable
from recipe_catalog.domain.models import UserRecord, normalize_email
from recipe_catalog.services.users import UserRepository

_USER_COLUMNS = "id, email, password_hash, display_name, photo_url, created_at"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""
        with supabase_errors("get_user"):
            response = (
                self.client.table("users")
                .select(_USER_COLUMNS)
                .eq("id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for an email, if present."""
        with supabase_errors("get_user_by_email"):
            response = (
                self.client.table("users")
                .select(_USER_COLUMNS)
                .eq("email", normalize_email(email))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def create_user(
        self,
        email: str,
        password_hash: str,
        display_name: str | None,
        photo_url: str | None,
    ) -> UserRecord:
        """Create a new user row and return it."""
        with supabase_errors("create_user"):
            response = (
                self.client.table("users")
                .insert(
                    {
                        "email": normalize_email(email),
                        "password_hash": password_hash,
                        "display_name": display_name,
                        "photo_url": photo_url,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StorageUnavailable("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def delete_user(self, user_id: UUID) -> bool:
        """Delete a user; recipes and favorites cascade in the database."""
        with supabase_errors("delete_user"):
            response = (
                self.client.table("users").delete().eq("id", str(user_id)).execute()
            )
        return bool(response.data)


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(row["id"]),
        email=str(row["email"]),
        password_hash=str(row.get("password_hash", "")),
        display_name=row.get("display_name"),
        photo_url=row.get("photo_url"),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
