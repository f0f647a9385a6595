"""Account endpoints backed by a signed session cookie."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from recipe_catalog.api.dependencies import (
    SESSION_USER_KEY,
    get_actor,
    require_actor,
)
from recipe_catalog.api.schemas import (
    SigninRequest,
    serialize_author,
    serialize_user,
)
from recipe_catalog.domain.access import Actor  # noqa: TC001

if TYPE_CHECKING:
    from recipe_catalog.containers import AppContainer

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Create an account and sign it in."""
    container: AppContainer = request.app.state.container
    user = container.user_service.register(payload)
    request.session[SESSION_USER_KEY] = str(user.id)
    return {"user": serialize_user(user)}


@router.post("/auth/signin")
async def signin(payload: SigninRequest, request: Request) -> dict[str, object]:
    """Check credentials and start a session."""
    container: AppContainer = request.app.state.container
    user = container.user_service.authenticate(payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    request.session[SESSION_USER_KEY] = str(user.id)
    return {"user": serialize_user(user)}


@router.post("/auth/signout")
async def signout(request: Request) -> dict[str, str]:
    """End the current session."""
    request.session.clear()
    return {"status": "ok"}


@router.get("/auth/session")
async def session(
    request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    """Return the signed-in user, or null."""
    if actor.user_id is None:
        return {"user": None}
    container: AppContainer = request.app.state.container
    user = container.user_service.get_user(actor.user_id)
    return {"user": serialize_user(user) if user else None}


@router.get("/users/{user_id}")
async def user_profile(user_id: UUID, request: Request) -> dict[str, object]:
    """Return a user's public profile."""
    container: AppContainer = request.app.state.container
    profile = container.user_service.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return serialize_author(profile)


@router.delete("/users/me")
async def delete_me(
    request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, str]:
    """Delete the signed-in account with its recipes and favorites."""
    container: AppContainer = request.app.state.container
    container.user_service.delete_account(actor.user_id)
    request.session.clear()
    return {"status": "deleted"}
