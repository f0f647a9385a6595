"""Supabase repository for recipes, ingredients and photos."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from recipe_catalog.adapters.supabase_errors import supabase_errors
from recipe_catalog.domain.errors import StorageUnavailable
from recipe_catalog.domain.recipes import (
    IngredientRecord,
    RecipePhotoRecord,
    RecipeRecord,
)
from recipe_catalog.services.aggregator import RecipeRepository

_RECIPE_COLUMNS = (
    "id, user_id, title, prep_time, servings, directions, is_private, image_url, "
    "created_at, updated_at"
)
_INGREDIENT_COLUMNS = (
    'id, recipe_id, amount, measurement, name, description, link, "order", sequence'
)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed recipe persistence.

    Multi-row writes go through Postgres functions so a recipe and its child
    rows change in a single transaction.
    """

    client: Client

    def get_recipe(self, recipe_id: UUID) -> RecipeRecord | None:
        """Return the base recipe row, if present."""
        with supabase_errors("get_recipe"):
            response = (
                self.client.table("recipes")
                .select(_RECIPE_COLUMNS)
                .eq("id", str(recipe_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def create_recipe(
        self,
        user_id: UUID,
        fields: dict[str, object],
        ingredients: list[dict[str, object]],
        photos: list[str],
    ) -> RecipeRecord:
        """Create a recipe with its ingredients and photos atomically."""
        with supabase_errors("create_recipe"):
            response = self.client.rpc(
                "create_recipe_with_children",
                {
                    "p_user_id": str(user_id),
                    "p_fields": fields,
                    "p_ingredients": ingredients,
                    "p_photos": photos,
                },
            ).execute()
        if not response.data:
            raise StorageUnavailable("Failed to create recipe")
        return _parse_recipe(response.data[0])

    def update_recipe(
        self,
        recipe_id: UUID,
        fields: dict[str, object],
        ingredients: list[dict[str, object]] | None,
        photos: list[str] | None,
    ) -> RecipeRecord | None:
        """Patch a recipe and replace supplied child lists atomically."""
        with supabase_errors("update_recipe"):
            response = self.client.rpc(
                "update_recipe_with_children",
                {
                    "p_recipe_id": str(recipe_id),
                    "p_fields": fields,
                    "p_ingredients": ingredients,
                    "p_photos": photos,
                },
            ).execute()
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def update_recipe_image(self, recipe_id: UUID, image_url: str) -> bool:
        """Set the primary image of a recipe."""
        with supabase_errors("update_recipe_image"):
            response = (
                self.client.table("recipes")
                .update(
                    {
                        "image_url": image_url,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .eq("id", str(recipe_id))
                .execute()
            )
        return bool(response.data)

    def delete_recipe(self, recipe_id: UUID) -> bool:
        """Delete a recipe; dependents cascade in the database."""
        with supabase_errors("delete_recipe"):
            response = (
                self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()
            )
        return bool(response.data)

    def list_ingredients(self, recipe_id: UUID) -> list[IngredientRecord]:
        """Return ingredients in display order."""
        with supabase_errors("list_ingredients"):
            response = (
                self.client.table("ingredients")
                .select(_INGREDIENT_COLUMNS)
                .eq("recipe_id", str(recipe_id))
                .order("order")
                .order("sequence")
                .execute()
            )
        return [_parse_ingredient(row) for row in response.data or []]

    def list_photos(self, recipe_id: UUID) -> list[RecipePhotoRecord]:
        """Return photos in display order."""
        with supabase_errors("list_photos"):
            response = (
                self.client.table("recipe_photos")
                .select('id, recipe_id, image_url, "order", created_at')
                .eq("recipe_id", str(recipe_id))
                .order("order")
                .execute()
            )
        return [_parse_photo(row) for row in response.data or []]

    def list_recipe_ids_by_user(self, user_id: UUID) -> list[UUID]:
        """Return a user's recipe ids, newest first."""
        with supabase_errors("list_recipes_by_user"):
            response = (
                self.client.table("recipes")
                .select("id")
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        return [UUID(row["id"]) for row in response.data or []]

    def list_public_recipe_ids(self) -> list[UUID]:
        """Return public recipe ids, newest first."""
        with supabase_errors("list_public_recipes"):
            response = (
                self.client.table("recipes")
                .select("id")
                .eq("is_private", False)
                .order("created_at", desc=True)
                .execute()
            )
        return [UUID(row["id"]) for row in response.data or []]


def _parse_recipe(row: dict[str, object]) -> RecipeRecord:
    return RecipeRecord(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        title=str(row.get("title", "")),
        prep_time=str(row.get("prep_time", "")),
        servings=int(row.get("servings", 0)),
        directions=str(row.get("directions", "")),
        is_private=bool(row.get("is_private", False)),
        image_url=row.get("image_url"),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _parse_ingredient(row: dict[str, object]) -> IngredientRecord:
    return IngredientRecord(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        amount=str(row.get("amount") or ""),
        measurement=str(row.get("measurement") or ""),
        name=str(row.get("name", "")),
        description=row.get("description"),
        link=row.get("link"),
        order=int(row.get("order", 0)),
        sequence=int(row.get("sequence", 0)),
    )


def _parse_photo(row: dict[str, object]) -> RecipePhotoRecord:
    return RecipePhotoRecord(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        image_url=str(row["image_url"]),
        order=int(row.get("order", 0)),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
