"""Recipe, favorite, sharing and image-attach endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from recipe_catalog.api.dependencies import (
    get_actor,
    raise_for_read,
    raise_for_write,
    require_actor,
)
from recipe_catalog.api.schemas import (
    AttachImageRequest,
    ShareRequest,
    serialize_favorite,
    serialize_recipe,
    serialize_share,
    serialize_share_links,
)
from recipe_catalog.domain.access import Actor, Outcome
from recipe_catalog.services.collections import CollectionMode
from recipe_catalog.services.recipes import build_share_links

if TYPE_CHECKING:
    from recipe_catalog.containers import AppContainer

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    request: Request,
    type: str | None = None,  # noqa: A002
    email: str | None = None,
    actor: Actor = Depends(get_actor),
) -> list[dict[str, object]]:
    """List recipes for a collection mode; unknown modes list public recipes."""
    container: AppContainer = request.app.state.container
    try:
        mode = CollectionMode(type) if type else CollectionMode.PUBLIC
    except ValueError:
        mode = CollectionMode.PUBLIC
    details = container.collection_resolver.resolve(mode, actor, email)
    return [serialize_recipe(detail) for detail in details]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    request: Request,
    payload: dict[str, Any] = Body(...),
    actor: Actor = Depends(require_actor),
) -> dict[str, object]:
    """Create a recipe owned by the signed-in user."""
    container: AppContainer = request.app.state.container
    result = container.recipe_service.create_recipe(actor, payload)
    raise_for_write(result.outcome, actor)
    return serialize_recipe(result.detail)


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    """Return a recipe the caller may read."""
    container: AppContainer = request.app.state.container
    result = container.recipe_service.get_recipe(actor, recipe_id)
    raise_for_read(result.outcome)
    return serialize_recipe(result.detail)


@router.patch("/{recipe_id}")
async def update_recipe(
    recipe_id: UUID,
    request: Request,
    payload: dict[str, Any] = Body(...),
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Patch an owned recipe."""
    container: AppContainer = request.app.state.container
    result = container.recipe_service.update_recipe(actor, recipe_id, payload)
    _raise_for_owner_action(container, result.outcome, actor, recipe_id)
    return serialize_recipe(result.detail)


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, str]:
    """Delete an owned recipe and everything attached to it."""
    container: AppContainer = request.app.state.container
    outcome = container.recipe_service.delete_recipe(actor, recipe_id)
    _raise_for_owner_action(container, outcome, actor, recipe_id)
    return {"status": "deleted"}


@router.post("/{recipe_id}/favorite")
async def toggle_favorite(
    recipe_id: UUID, request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Flip the caller's favorite on a readable recipe."""
    container: AppContainer = request.app.state.container
    readable = container.recipe_service.get_recipe(actor, recipe_id)
    raise_for_read(readable.outcome)
    result = container.favorite_service.toggle_favorite(actor.user_id, recipe_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return serialize_favorite(result)


@router.post("/{recipe_id}/share", status_code=status.HTTP_201_CREATED)
async def share_recipe(
    recipe_id: UUID,
    payload: ShareRequest,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Grant read access on an owned recipe to an email address."""
    container: AppContainer = request.app.state.container
    result = container.recipe_service.share_recipe(actor, recipe_id, payload.email)
    _raise_for_owner_action(container, result.outcome, actor, recipe_id)
    return serialize_share(result.grant)


@router.delete("/{recipe_id}/share")
async def revoke_share(
    recipe_id: UUID, email: str, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, str]:
    """Revoke a share grant."""
    container: AppContainer = request.app.state.container
    outcome = container.recipe_service.revoke_share(actor, recipe_id, email)
    _raise_for_owner_action(container, outcome, actor, recipe_id)
    return {"status": "revoked"}


@router.get("/{recipe_id}/shares")
async def list_shares(
    recipe_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> list[dict[str, object]]:
    """List share grants on an owned recipe."""
    container: AppContainer = request.app.state.container
    result = container.recipe_service.list_shares(actor, recipe_id)
    _raise_for_owner_action(container, result.outcome, actor, recipe_id)
    return [serialize_share(grant) for grant in result.grants]


@router.get("/{recipe_id}/share-links")
async def share_links(
    recipe_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, str]:
    """Return copy-link and social share URLs for a readable recipe."""
    container: AppContainer = request.app.state.container
    result = container.recipe_service.get_recipe(actor, recipe_id)
    raise_for_read(result.outcome)
    links = build_share_links(result.detail, container.settings.public_base_url)
    return serialize_share_links(links)


@router.put("/{recipe_id}/image")
async def attach_image(
    recipe_id: UUID,
    payload: AttachImageRequest,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, str]:
    """Make an uploaded object public and set it as the recipe image."""
    container: AppContainer = request.app.state.container
    result = container.image_service.confirm_attach(
        actor, payload.image_url, recipe_id
    )
    _raise_for_owner_action(container, result.outcome, actor, recipe_id)
    return {"object_path": result.object_path}


def _raise_for_owner_action(
    container: AppContainer, outcome: Outcome, actor: Actor, recipe_id: UUID
) -> None:
    """Owner-only actions on unreadable recipes report 404, never 403."""
    if outcome == Outcome.DENIED and not actor.is_anonymous:
        readable = container.recipe_service.get_recipe(actor, recipe_id)
        if readable.outcome != Outcome.OK:
            raise_for_read(readable.outcome)
    raise_for_write(outcome, actor)
