"""Request-scoped dependencies: container lookup, identity and outcome mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status

from recipe_catalog.domain.access import ANONYMOUS, Actor, Outcome

if TYPE_CHECKING:
    from recipe_catalog.containers import AppContainer

SESSION_USER_KEY = "user_id"


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


def get_actor(request: Request) -> Actor:
    """Resolve the session cookie to an actor; stale sessions are cleared."""
    raw_user_id = request.session.get(SESSION_USER_KEY)
    if not raw_user_id:
        return ANONYMOUS
    try:
        user_id = UUID(str(raw_user_id))
    except ValueError:
        request.session.clear()
        return ANONYMOUS
    container = get_container(request)
    user = container.user_service.get_user(user_id)
    if user is None:
        request.session.clear()
        return ANONYMOUS
    return Actor(user_id=user.id, email=user.email)


def require_actor(actor: Actor = Depends(get_actor)) -> Actor:
    """Reject anonymous callers."""
    if actor.is_anonymous:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return actor


def raise_for_read(outcome: Outcome) -> None:
    """Denied reads look exactly like missing entities."""
    if outcome != Outcome.OK:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


def raise_for_write(outcome: Outcome, actor: Actor) -> None:
    """Map write outcomes to 404, 401 for anonymous callers, or 403."""
    if outcome == Outcome.OK:
        return
    if outcome == Outcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if actor.is_anonymous:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
