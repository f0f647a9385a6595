"""Supabase repository for favorites."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from recipe_catalog.adapters.supabase_errors import supabase_errors
from recipe_catalog.services.favorites import FavoriteRepository


@dataclass
class SupabaseFavoriteRepository(FavoriteRepository):
    """Supabase implementation for favorites."""

    client: Client

    def toggle_favorite(self, user_id: UUID, recipe_id: UUID) -> bool | None:
        """Flip the pair inside the ``toggle_favorite`` Postgres function."""
        with supabase_errors("toggle_favorite"):
            response = self.client.rpc(
                "toggle_favorite",
                {"p_user_id": str(user_id), "p_recipe_id": str(recipe_id)},
            ).execute()
        if response.data is None:
            return None
        return bool(response.data)

    def count_favorites(self, recipe_id: UUID) -> int:
        """Return the live favorite count for a recipe."""
        with supabase_errors("count_favorites"):
            response = (
                self.client.table("favorites")
                .select("id", count="exact")
                .eq("recipe_id", str(recipe_id))
                .execute()
            )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def is_favorited(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return True when the pair exists."""
        with supabase_errors("is_favorited"):
            response = (
                self.client.table("favorites")
                .select("id")
                .eq("user_id", str(user_id))
                .eq("recipe_id", str(recipe_id))
                .limit(1)
                .execute()
            )
        return bool(response.data)

    def list_favorited_recipe_ids(self, user_id: UUID) -> list[UUID]:
        """Return favorited recipe ids in favorite-creation order."""
        with supabase_errors("list_favorites"):
            response = (
                self.client.table("favorites")
                .select("recipe_id")
                .eq("user_id", str(user_id))
                .order("created_at")
                .execute()
            )
        return [UUID(row["recipe_id"]) for row in response.data or []]
