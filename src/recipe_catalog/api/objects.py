"""Image upload and object-serving endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from recipe_catalog.api.dependencies import (
    get_actor,
    raise_for_read,
    raise_for_write,
    require_actor,
)
from recipe_catalog.api.schemas import serialize_upload_target
from recipe_catalog.domain.access import Actor  # noqa: TC001
from recipe_catalog.domain.objects import (
    OBJECT_PATH_PREFIX,
    detect_mime_type,
    object_path_for,
)

if TYPE_CHECKING:
    from recipe_catalog.containers import AppContainer

OBJECT_CACHE_TTL_SECONDS = 3600

router = APIRouter(tags=["objects"])


@router.post("/api/objects/upload")
async def request_upload(
    request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, str]:
    """Issue a short-lived upload target to the signed-in user."""
    container: AppContainer = request.app.state.container
    target = container.image_service.issue_upload_target(actor)
    if target is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return serialize_upload_target(target)


@router.put("/api/objects/uploads/{object_id}")
async def upload_object(
    object_id: str, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, str]:
    """Receive image bytes for an issued upload target."""
    container: AppContainer = request.app.state.container
    data = await request.body()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload"
        )
    content_type = _resolve_content_type(data, request.headers.get("content-type"))
    object_path = object_path_for(object_id)
    outcome = container.image_service.upload_object(
        actor, object_path, data, content_type
    )
    raise_for_write(outcome, actor)
    return {"object_path": object_path}


@router.get(OBJECT_PATH_PREFIX + "{object_path:path}")
async def serve_object(
    object_path: str, request: Request, actor: Actor = Depends(get_actor)
) -> Response:
    """Serve an object the caller may read."""
    container: AppContainer = request.app.state.container
    result = container.image_service.read_object(
        actor, OBJECT_PATH_PREFIX + object_path
    )
    raise_for_read(result.outcome)
    stored = result.stored_object
    scope = "public" if result.cacheable else "private"
    return Response(
        content=stored.data,
        media_type=stored.content_type,
        headers={"Cache-Control": f"{scope}, max-age={OBJECT_CACHE_TTL_SECONDS}"},
    )


def _resolve_content_type(data: bytes, declared: str | None) -> str:
    detected = detect_mime_type(data)
    if detected != "application/octet-stream" or not declared:
        return detected
    return declared.split(";", 1)[0].strip() or detected
