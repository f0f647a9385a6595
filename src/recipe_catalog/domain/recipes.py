"""Domain models for recipes and their dependent rows."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from recipe_catalog.domain.models import AuthorSummary


@dataclass(frozen=True)
class RecipeRecord:
    """Base recipe row."""

    id: UUID
    user_id: UUID
    title: str
    prep_time: str
    servings: int
    directions: str
    is_private: bool
    image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class IngredientRecord:
    """Ingredient row belonging to a recipe."""

    id: UUID
    recipe_id: UUID
    amount: str
    measurement: str
    name: str
    description: str | None
    link: str | None
    order: int
    sequence: int


@dataclass(frozen=True)
class RecipePhotoRecord:
    """Additional photo attached to a recipe."""

    id: UUID
    recipe_id: UUID
    image_url: str
    order: int
    created_at: datetime


@dataclass(frozen=True)
class ShareGrant:
    """Read grant for a recipe to an email address."""

    id: UUID
    recipe_id: UUID
    shared_with_email: str
    created_at: datetime


@dataclass(frozen=True)
class RecipeDetail:
    """Fully hydrated recipe view."""

    recipe: RecipeRecord
    ingredients: list[IngredientRecord]
    photos: list[RecipePhotoRecord]
    author: AuthorSummary
    favorite_count: int
    is_favorited: bool

    @property
    def id(self) -> UUID:
        return self.recipe.id


@dataclass(frozen=True)
class FavoriteToggleResult:
    """State of a favorite pair after a toggle."""

    is_favorited: bool
    favorite_count: int


@dataclass(frozen=True)
class ShareLinks:
    """Outbound links for sharing a recipe."""

    recipe_url: str
    email_url: str
    pinterest_url: str
    twitter_url: str
    facebook_url: str
