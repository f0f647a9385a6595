"""Recipe authoring and sharing."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote, urlencode
from uuid import UUID

from recipe_catalog.domain.access import Actor, Outcome
from recipe_catalog.domain.inputs import (
    RecipeInput,
    RecipeUpdateInput,
    ShareInput,
    ingredient_rows,
    parse_input,
)
from recipe_catalog.domain.models import normalize_email
from recipe_catalog.domain.recipes import RecipeDetail, ShareGrant, ShareLinks
from recipe_catalog.services.access import AccessPolicy, ShareRepository
from recipe_catalog.services.aggregator import RecipeAggregator, RecipeRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeMutation:
    """Result of a recipe read or write."""

    outcome: Outcome
    detail: RecipeDetail | None = None


@dataclass(frozen=True)
class ShareResult:
    """Result of granting access to a recipe."""

    outcome: Outcome
    grant: ShareGrant | None = None


@dataclass(frozen=True)
class ShareList:
    """Grants for a recipe, visible to its owner only."""

    outcome: Outcome
    grants: list[ShareGrant] = field(default_factory=list)


@dataclass
class RecipeService:
    """Application service for recipe lifecycle and sharing."""

    recipe_repository: RecipeRepository
    share_repository: ShareRepository
    aggregator: RecipeAggregator
    policy: AccessPolicy

    def create_recipe(
        self, actor: Actor, payload: RecipeInput | Mapping[str, object]
    ) -> RecipeMutation:
        """Create a recipe owned by the actor."""
        recipe_input = parse_input(RecipeInput, payload)
        if actor.user_id is None:
            return RecipeMutation(Outcome.DENIED)
        fields = recipe_input.model_dump(exclude={"ingredients", "photos"})
        recipe = self.recipe_repository.create_recipe(
            actor.user_id,
            fields,
            ingredient_rows(recipe_input.ingredients),
            list(recipe_input.photos),
        )
        _logger.info("Recipe created: id=%s user=%s", recipe.id, actor.user_id)
        return self._detail(recipe.id, actor)

    def get_recipe(self, actor: Actor, recipe_id: UUID) -> RecipeMutation:
        """Return the recipe detail when the actor may read it."""
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return RecipeMutation(Outcome.NOT_FOUND)
        if not self.policy.can_read_recipe(actor, recipe):
            return RecipeMutation(Outcome.DENIED)
        return self._detail(recipe_id, actor)

    def update_recipe(
        self,
        actor: Actor,
        recipe_id: UUID,
        payload: RecipeUpdateInput | Mapping[str, object],
    ) -> RecipeMutation:
        """Patch a recipe; supplied ingredient and photo lists replace the old."""
        update = parse_input(RecipeUpdateInput, payload)
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return RecipeMutation(Outcome.NOT_FOUND)
        if not self.policy.can_write_recipe(actor, recipe):
            return RecipeMutation(Outcome.DENIED)
        ingredients = (
            ingredient_rows(update.ingredients)
            if update.ingredients is not None
            else None
        )
        photos = list(update.photos) if update.photos is not None else None
        updated = self.recipe_repository.update_recipe(
            recipe_id, update.base_fields(), ingredients, photos
        )
        if updated is None:
            return RecipeMutation(Outcome.NOT_FOUND)
        return self._detail(recipe_id, actor)

    def delete_recipe(self, actor: Actor, recipe_id: UUID) -> Outcome:
        """Delete a recipe owned by the actor."""
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return Outcome.NOT_FOUND
        if not self.policy.can_write_recipe(actor, recipe):
            return Outcome.DENIED
        if not self.recipe_repository.delete_recipe(recipe_id):
            return Outcome.NOT_FOUND
        _logger.info("Recipe deleted: id=%s user=%s", recipe_id, actor.user_id)
        return Outcome.OK

    def share_recipe(
        self, actor: Actor, recipe_id: UUID, email: str
    ) -> ShareResult:
        """Grant read access on a recipe to an email address."""
        share = parse_input(ShareInput, {"email": email})
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return ShareResult(Outcome.NOT_FOUND)
        if not self.policy.can_write_recipe(actor, recipe):
            return ShareResult(Outcome.DENIED)
        grant = self.share_repository.create_share(
            recipe_id, normalize_email(share.email)
        )
        return ShareResult(Outcome.OK, grant)

    def revoke_share(self, actor: Actor, recipe_id: UUID, email: str) -> Outcome:
        """Remove a share grant."""
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return Outcome.NOT_FOUND
        if not self.policy.can_write_recipe(actor, recipe):
            return Outcome.DENIED
        if not self.share_repository.delete_share(recipe_id, normalize_email(email)):
            return Outcome.NOT_FOUND
        return Outcome.OK

    def list_shares(self, actor: Actor, recipe_id: UUID) -> ShareList:
        """Return the grants on a recipe."""
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            return ShareList(Outcome.NOT_FOUND)
        if not self.policy.can_write_recipe(actor, recipe):
            return ShareList(Outcome.DENIED)
        return ShareList(Outcome.OK, self.share_repository.list_shares(recipe_id))

    def _detail(self, recipe_id: UUID, actor: Actor) -> RecipeMutation:
        detail = self.aggregator.get_recipe_detail(recipe_id, actor.user_id)
        if detail is None:
            return RecipeMutation(Outcome.NOT_FOUND)
        return RecipeMutation(Outcome.OK, detail)


def build_share_links(detail: RecipeDetail, base_url: str) -> ShareLinks:
    """Build copy-link, email and social share URLs for a recipe."""
    recipe_url = f"{base_url.rstrip('/')}/recipe/{detail.id}"
    title = detail.recipe.title
    image = detail.recipe.image_url or ""
    if image.startswith("/"):
        image = f"{base_url.rstrip('/')}{image}"
    email_query = urlencode(
        {"subject": title, "body": f"{title}\n{recipe_url}"}, quote_via=quote
    )
    return ShareLinks(
        recipe_url=recipe_url,
        email_url=f"mailto:?{email_query}",
        pinterest_url="https://pinterest.com/pin/create/button/?"
        + urlencode(
            {"url": recipe_url, "media": image, "description": title},
            quote_via=quote,
        ),
        twitter_url="https://twitter.com/intent/tweet?"
        + urlencode({"text": title, "url": recipe_url}, quote_via=quote),
        facebook_url="https://www.facebook.com/sharer/sharer.php?"
        + urlencode({"u": recipe_url}, quote_via=quote),
    )
