"""Recipe aggregation from normalized storage."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_catalog.domain.models import UNKNOWN_AUTHOR, author_summary
from recipe_catalog.domain.recipes import (
    IngredientRecord,
    RecipeDetail,
    RecipePhotoRecord,
    RecipeRecord,
)
from recipe_catalog.services.favorites import FavoriteRepository
from recipe_catalog.services.users import UserRepository

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes and their child rows."""

    def get_recipe(self, recipe_id: UUID) -> RecipeRecord | None:
        """Return the base recipe row, if present."""

    def create_recipe(
        self,
        user_id: UUID,
        fields: dict[str, object],
        ingredients: list[dict[str, object]],
        photos: list[str],
    ) -> RecipeRecord:
        """Create a recipe together with its ingredients and photos."""

    def update_recipe(
        self,
        recipe_id: UUID,
        fields: dict[str, object],
        ingredients: list[dict[str, object]] | None,
        photos: list[str] | None,
    ) -> RecipeRecord | None:
        """Patch a recipe and replace supplied child lists in one unit."""

    def update_recipe_image(self, recipe_id: UUID, image_url: str) -> bool:
        """Set the primary image reference of a recipe."""

    def delete_recipe(self, recipe_id: UUID) -> bool:
        """Delete a recipe and its dependents; return True if it existed."""

    def list_ingredients(self, recipe_id: UUID) -> list[IngredientRecord]:
        """Return ingredients ordered by display order then insertion."""

    def list_photos(self, recipe_id: UUID) -> list[RecipePhotoRecord]:
        """Return photos ordered by display order."""

    def list_recipe_ids_by_user(self, user_id: UUID) -> list[UUID]:
        """Return a user's recipe ids, newest first."""

    def list_public_recipe_ids(self) -> list[UUID]:
        """Return public recipe ids, newest first."""


@dataclass
class RecipeAggregator:
    """Assembles detailed recipe views."""

    recipe_repository: RecipeRepository
    user_repository: UserRepository
    favorite_repository: FavoriteRepository

    def get_recipe_detail(
        self, recipe_id: UUID, viewer_id: UUID | None = None
    ) -> RecipeDetail | None:
        """Return the hydrated recipe, or None when it does not exist."""
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return None
        ingredients = sorted(
            self.recipe_repository.list_ingredients(recipe_id),
            key=lambda item: (item.order, item.sequence),
        )
        photos = sorted(
            self.recipe_repository.list_photos(recipe_id), key=lambda photo: photo.order
        )
        author = self.user_repository.get_user(recipe.user_id)
        if author is None:
            _logger.warning(
                "Recipe %s references missing author %s", recipe.id, recipe.user_id
            )
        is_favorited = False
        if viewer_id is not None:
            is_favorited = self.favorite_repository.is_favorited(viewer_id, recipe_id)
        return RecipeDetail(
            recipe=recipe,
            ingredients=ingredients,
            photos=photos,
            author=author_summary(author) if author else UNKNOWN_AUTHOR,
            favorite_count=self.favorite_repository.count_favorites(recipe_id),
            is_favorited=is_favorited,
        )
