"""Validated input models for recipe and account operations."""

from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recipe_catalog.domain.errors import ValidationFailed

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class IngredientInput(_Input):
    """Single ingredient line as entered by the author."""

    amount: str = ""
    measurement: str = ""
    name: str = Field(min_length=1)
    description: str | None = None
    link: str | None = None


class RecipeInput(_Input):
    """Fields required to create a recipe."""

    title: str = Field(min_length=1)
    prep_time: str = Field(min_length=1)
    servings: int = Field(gt=0)
    directions: str = Field(min_length=1)
    is_private: bool = False
    image_url: str | None = None
    ingredients: list[IngredientInput] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)


class RecipeUpdateInput(_Input):
    """Partial recipe update.

    ``ingredients`` and ``photos`` replace the stored lists wholesale when
    given; ``None`` leaves them untouched.
    """

    title: str | None = Field(default=None, min_length=1)
    prep_time: str | None = Field(default=None, min_length=1)
    servings: int | None = Field(default=None, gt=0)
    directions: str | None = Field(default=None, min_length=1)
    is_private: bool | None = None
    image_url: str | None = None
    ingredients: list[IngredientInput] | None = None
    photos: list[str] | None = None

    def base_fields(self) -> dict[str, object]:
        """Return the explicitly supplied recipe columns.

        Only ``image_url`` may be cleared with an explicit null.
        """
        fields = self.model_dump(exclude_unset=True, exclude={"ingredients", "photos"})
        return {
            key: value
            for key, value in fields.items()
            if value is not None or key == "image_url"
        }


class SignupInput(_Input):
    """Account registration payload."""

    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    display_name: str | None = None


class ShareInput(_Input):
    """Target of a share grant."""

    email: str = Field(pattern=EMAIL_PATTERN)


def parse_input(model: type[ModelT], payload: ModelT | Mapping[str, object]) -> ModelT:
    """Validate a payload into ``model``, raising ``ValidationFailed``."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(
            exc.errors(include_url=False, include_context=False, include_input=False)
        ) from exc


def ingredient_rows(ingredients: list[IngredientInput]) -> list[dict[str, object]]:
    """Build ordered ingredient payloads; order is the list position."""
    return [
        {**ingredient.model_dump(), "order": index}
        for index, ingredient in enumerate(ingredients)
    ]
