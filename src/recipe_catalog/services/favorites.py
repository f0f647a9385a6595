"""Favorite toggling."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_catalog.domain.recipes import FavoriteToggleResult

_logger = logging.getLogger(__name__)


class FavoriteRepository(Protocol):
    """Persistence interface for favorites."""

    def toggle_favorite(self, user_id: UUID, recipe_id: UUID) -> bool | None:
        """Atomically flip the favorite pair.

        Returns the new favorited state, or ``None`` when the recipe does not
        exist. At most one row per (user, recipe) may ever exist.
        """

    def count_favorites(self, recipe_id: UUID) -> int:
        """Return the live number of favorites for a recipe."""

    def is_favorited(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return True when the user has favorited the recipe."""

    def list_favorited_recipe_ids(self, user_id: UUID) -> list[UUID]:
        """Return favorited recipe ids in favorite-creation order."""


@dataclass
class FavoriteService:
    """Service for favoriting recipes."""

    repository: FavoriteRepository

    def toggle_favorite(
        self, user_id: UUID, recipe_id: UUID
    ) -> FavoriteToggleResult | None:
        """Flip the favorite state and return it with a fresh count."""
        is_favorited = self.repository.toggle_favorite(user_id, recipe_id)
        if is_favorited is None:
            return None
        count = self.repository.count_favorites(recipe_id)
        _logger.info(
            "Favorite toggled: user=%s recipe=%s favorited=%s count=%s",
            user_id,
            recipe_id,
            is_favorited,
            count,
        )
        return FavoriteToggleResult(is_favorited=is_favorited, favorite_count=count)
