"""Request bodies and JSON serializers for the HTTP API."""

from pydantic import BaseModel

from recipe_catalog.domain.models import AuthorSummary, UserRecord
from recipe_catalog.domain.objects import UploadTarget
from recipe_catalog.domain.recipes import (
    FavoriteToggleResult,
    IngredientRecord,
    RecipeDetail,
    RecipePhotoRecord,
    ShareGrant,
    ShareLinks,
)


class SigninRequest(BaseModel):
    """Credentials posted to the sign-in endpoint."""

    email: str
    password: str


class ShareRequest(BaseModel):
    """Email address to grant read access to."""

    email: str


class AttachImageRequest(BaseModel):
    """Uploaded object reference to set as a recipe's image."""

    image_url: str


def serialize_author(author: AuthorSummary) -> dict[str, object]:
    return {
        "id": str(author.id) if author.id else None,
        "display_name": author.display_name,
        "photo_url": author.photo_url,
    }


def serialize_user(user: UserRecord) -> dict[str, object]:
    """Serialize the signed-in user; never includes the password hash."""
    return {
        "id": str(user.id),
        "email": user.email,
        "display_name": user.display_name,
        "photo_url": user.photo_url,
    }


def serialize_ingredient(ingredient: IngredientRecord) -> dict[str, object]:
    return {
        "id": str(ingredient.id),
        "amount": ingredient.amount,
        "measurement": ingredient.measurement,
        "name": ingredient.name,
        "description": ingredient.description,
        "link": ingredient.link,
        "order": ingredient.order,
    }


def serialize_photo(photo: RecipePhotoRecord) -> dict[str, object]:
    return {"id": str(photo.id), "image_url": photo.image_url, "order": photo.order}


def serialize_recipe(detail: RecipeDetail) -> dict[str, object]:
    """Serialize a hydrated recipe for API responses."""
    recipe = detail.recipe
    return {
        "id": str(recipe.id),
        "user_id": str(recipe.user_id),
        "title": recipe.title,
        "prep_time": recipe.prep_time,
        "servings": recipe.servings,
        "directions": recipe.directions,
        "is_private": recipe.is_private,
        "image_url": recipe.image_url,
        "created_at": recipe.created_at.isoformat(),
        "updated_at": recipe.updated_at.isoformat(),
        "ingredients": [serialize_ingredient(item) for item in detail.ingredients],
        "photos": [serialize_photo(photo) for photo in detail.photos],
        "author": serialize_author(detail.author),
        "favorite_count": detail.favorite_count,
        "is_favorited": detail.is_favorited,
    }


def serialize_share(grant: ShareGrant) -> dict[str, object]:
    return {
        "id": str(grant.id),
        "recipe_id": str(grant.recipe_id),
        "shared_with_email": grant.shared_with_email,
        "created_at": grant.created_at.isoformat(),
    }


def serialize_favorite(result: FavoriteToggleResult) -> dict[str, object]:
    return {
        "is_favorited": result.is_favorited,
        "favorite_count": result.favorite_count,
    }


def serialize_share_links(links: ShareLinks) -> dict[str, str]:
    return {
        "recipe_url": links.recipe_url,
        "email_url": links.email_url,
        "pinterest_url": links.pinterest_url,
        "twitter_url": links.twitter_url,
        "facebook_url": links.facebook_url,
    }


def serialize_upload_target(target: UploadTarget) -> dict[str, str]:
    return {
        "upload_url": target.upload_url,
        "object_path": target.object_path,
        "expires_at": target.expires_at.isoformat(),
    }
