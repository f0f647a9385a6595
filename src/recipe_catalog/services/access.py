"""Visibility and access policy for recipes and stored objects.

Every check is a pure decision over an explicit ``Actor``. Recipe reads are
evaluated in a fixed order (public, owner, share grant) and the first
matching rule wins; anything else is denied. Checks never raise for missing
or forbidden resources: callers decide how a denial is surfaced.
"""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_catalog.domain.access import DENY, AccessDecision, Actor
from recipe_catalog.domain.objects import AccessDescriptor, Visibility
from recipe_catalog.domain.recipes import RecipeRecord, ShareGrant


class ShareRepository(Protocol):
    """Persistence interface for recipe share grants."""

    def create_share(self, recipe_id: UUID, email: str) -> ShareGrant:
        """Create (or return the existing) grant for a normalized email."""

    def delete_share(self, recipe_id: UUID, email: str) -> bool:
        """Revoke a grant; return True if one existed."""

    def has_share(self, recipe_id: UUID, email: str) -> bool:
        """Return True when the email holds a grant for the recipe."""

    def list_shares(self, recipe_id: UUID) -> list[ShareGrant]:
        """Return grants for a recipe in creation order."""

    def list_shared_recipe_ids(self, email: str) -> list[UUID]:
        """Return recipe ids granted to an email in creation order."""


@dataclass
class AccessPolicy:
    """Decides read and write access for actors."""

    share_repository: ShareRepository

    def can_read_recipe(self, actor: Actor, recipe: RecipeRecord) -> AccessDecision:
        """Return whether the actor may view the recipe."""
        if not recipe.is_private:
            return AccessDecision(allowed=True, rule="public")
        if _is_owner(actor, recipe.user_id):
            return AccessDecision(allowed=True, rule="owner")
        email = actor.normalized_email
        if email and self.share_repository.has_share(recipe.id, email):
            return AccessDecision(allowed=True, rule="share_grant")
        return DENY

    def can_write_recipe(self, actor: Actor, recipe: RecipeRecord) -> AccessDecision:
        """Return whether the actor may update or delete the recipe."""
        if _is_owner(actor, recipe.user_id):
            return AccessDecision(allowed=True, rule="owner")
        return DENY

    def can_read_object(
        self, actor: Actor, descriptor: AccessDescriptor | None
    ) -> AccessDecision:
        """Return whether the actor may read a stored object."""
        if descriptor is None:
            return DENY
        if descriptor.visibility == Visibility.PUBLIC:
            return AccessDecision(allowed=True, rule="public")
        if descriptor.owner is not None and _is_owner(actor, descriptor.owner):
            return AccessDecision(allowed=True, rule="owner")
        return DENY

    def can_write_object(
        self, actor: Actor, descriptor: AccessDescriptor | None
    ) -> AccessDecision:
        """Return whether the actor may overwrite a stored object."""
        if descriptor is None or descriptor.owner is None:
            return DENY
        if _is_owner(actor, descriptor.owner):
            return AccessDecision(allowed=True, rule="owner")
        return DENY

    @staticmethod
    def is_publicly_cacheable(descriptor: AccessDescriptor | None) -> bool:
        """Return True when shared caches may store the object."""
        return descriptor is not None and descriptor.visibility == Visibility.PUBLIC


def _is_owner(actor: Actor, owner_id: UUID) -> bool:
    return actor.user_id is not None and actor.user_id == owner_id
