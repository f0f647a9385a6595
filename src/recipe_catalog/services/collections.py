"""Recipe listing queries."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from recipe_catalog.domain.access import Actor
from recipe_catalog.domain.models import normalize_email
from recipe_catalog.domain.recipes import RecipeDetail
from recipe_catalog.services.access import AccessPolicy, ShareRepository
from recipe_catalog.services.aggregator import RecipeAggregator, RecipeRepository
from recipe_catalog.services.favorites import FavoriteRepository


class CollectionMode(StrEnum):
    """Supported listing modes."""

    OWNED = "my-recipes"
    PUBLIC = "public"
    FAVORITED = "favorites"
    SHARED = "shared"


@dataclass
class CollectionResolver:
    """Resolves recipe listings and hydrates each entry.

    Every hydrated recipe is re-checked against the read policy, so a recipe
    made private after it was favorited drops out of the listing.
    """

    aggregator: RecipeAggregator
    recipe_repository: RecipeRepository
    favorite_repository: FavoriteRepository
    share_repository: ShareRepository
    policy: AccessPolicy

    def list_owned(
        self, viewer_id: UUID, actor: Actor | None = None
    ) -> list[RecipeDetail]:
        """Return the viewer's recipes, newest first."""
        ids = self.recipe_repository.list_recipe_ids_by_user(viewer_id)
        return self._hydrate(ids, actor or Actor(user_id=viewer_id))

    def list_public(
        self, viewer_id: UUID | None = None, actor: Actor | None = None
    ) -> list[RecipeDetail]:
        """Return all public recipes, newest first."""
        ids = self.recipe_repository.list_public_recipe_ids()
        return self._hydrate(ids, actor or Actor(user_id=viewer_id))

    def list_favorited(
        self, viewer_id: UUID, actor: Actor | None = None
    ) -> list[RecipeDetail]:
        """Return favorited recipes the viewer can still read, in favorite order.

        Pass ``actor`` to include private recipes shared with the viewer's email.
        """
        ids = self.favorite_repository.list_favorited_recipe_ids(viewer_id)
        return self._hydrate(ids, actor or Actor(user_id=viewer_id))

    def list_shared(
        self, email: str, viewer_id: UUID | None = None
    ) -> list[RecipeDetail]:
        """Return recipes shared with an email address.

        The email is asserted by the caller and is not verified here.
        """
        normalized = normalize_email(email)
        ids = self.share_repository.list_shared_recipe_ids(normalized)
        return self._hydrate(ids, Actor(user_id=viewer_id, email=normalized))

    def resolve(
        self, mode: CollectionMode, actor: Actor, email: str | None = None
    ) -> list[RecipeDetail]:
        """Dispatch a listing request for an actor."""
        if mode == CollectionMode.PUBLIC:
            return self.list_public(actor.user_id, actor)
        if mode == CollectionMode.SHARED:
            target = email or actor.email
            return self.list_shared(target, actor.user_id) if target else []
        if actor.user_id is None:
            return []
        if mode == CollectionMode.OWNED:
            return self.list_owned(actor.user_id, actor)
        return self.list_favorited(actor.user_id, actor)

    def _hydrate(self, recipe_ids: Iterable[UUID], viewer: Actor) -> list[RecipeDetail]:
        details = []
        seen: set[UUID] = set()
        for recipe_id in recipe_ids:
            if recipe_id in seen:
                continue
            seen.add(recipe_id)
            detail = self.aggregator.get_recipe_detail(recipe_id, viewer.user_id)
            if detail is None:
                continue
            if self.policy.can_read_recipe(viewer, detail.recipe):
                details.append(detail)
        return details
