"""Supabase repository for recipe share grants."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_catalog.adapters.supabase_errors import supabase_errors
from recipe_catalog.domain.errors import StorageUnavailable
from recipe_catalog.domain.models import normalize_email
from recipe_catalog.domain.recipes import ShareGrant
from recipe_catalog.services.access import ShareRepository


@dataclass
class SupabaseShareRepository(ShareRepository):
    """Supabase implementation for share grants."""

    client: Client

    def create_share(self, recipe_id: UUID, email: str) -> ShareGrant:
        """Create a grant; an existing grant for the pair is returned as is."""
        with supabase_errors("create_share"):
            response = (
                self.client.table("shared_recipes")
                .upsert(
                    {
                        "recipe_id": str(recipe_id),
                        "shared_with_email": normalize_email(email),
                    },
                    on_conflict="recipe_id,shared_with_email",
                )
                .execute()
            )
        if not response.data:
            raise StorageUnavailable("Failed to create share grant")
        return _parse_grant(response.data[0])

    def delete_share(self, recipe_id: UUID, email: str) -> bool:
        """Revoke a grant."""
        with supabase_errors("delete_share"):
            response = (
                self.client.table("shared_recipes")
                .delete()
                .eq("recipe_id", str(recipe_id))
                .eq("shared_with_email", normalize_email(email))
                .execute()
            )
        return bool(response.data)

    def has_share(self, recipe_id: UUID, email: str) -> bool:
        """Return True when a grant exists for the pair."""
        with supabase_errors("has_share"):
            response = (
                self.client.table("shared_recipes")
                .select("id")
                .eq("recipe_id", str(recipe_id))
                .eq("shared_with_email", normalize_email(email))
                .limit(1)
                .execute()
            )
        return bool(response.data)

    def list_shares(self, recipe_id: UUID) -> list[ShareGrant]:
        """Return grants for a recipe."""
        with supabase_errors("list_shares"):
            response = (
                self.client.table("shared_recipes")
                .select("id, recipe_id, shared_with_email, created_at")
                .eq("recipe_id", str(recipe_id))
                .order("created_at")
                .execute()
            )
        return [_parse_grant(row) for row in response.data or []]

    def list_shared_recipe_ids(self, email: str) -> list[UUID]:
        """Return recipe ids shared with an email."""
        with supabase_errors("list_shared_recipes"):
            response = (
                self.client.table("shared_recipes")
                .select("recipe_id")
                .eq("shared_with_email", normalize_email(email))
                .order("created_at")
                .execute()
            )
        return [UUID(row["recipe_id"]) for row in response.data or []]


def _parse_grant(row: dict[str, object]) -> ShareGrant:
    return ShareGrant(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        shared_with_email=str(row["shared_with_email"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
