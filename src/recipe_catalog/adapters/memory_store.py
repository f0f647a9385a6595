"""In-process entity store.

Every operation runs under one re-entrant lock, so multi-row writes such as
a favorite toggle or an ingredient replacement are atomic with respect to
concurrent readers in the same process.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from itertools import count
from threading import RLock
from uuid import UUID, uuid4

from recipe_catalog.domain.errors import DuplicateKey
from recipe_catalog.domain.models import UserRecord, normalize_email
from recipe_catalog.domain.recipes import (
    IngredientRecord,
    RecipePhotoRecord,
    RecipeRecord,
    ShareGrant,
)
from recipe_catalog.services.access import ShareRepository
from recipe_catalog.services.aggregator import RecipeRepository
from recipe_catalog.services.favorites import FavoriteRepository
from recipe_catalog.services.users import UserRepository

_RECIPE_COLUMNS = {
    "title",
    "prep_time",
    "servings",
    "directions",
    "is_private",
    "image_url",
}


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryEntityStore(
    UserRepository, RecipeRepository, FavoriteRepository, ShareRepository
):
    """Lock-guarded in-memory implementation of every repository."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)
    recipes: dict[UUID, RecipeRecord] = field(default_factory=dict)
    ingredients: dict[UUID, IngredientRecord] = field(default_factory=dict)
    photos: dict[UUID, RecipePhotoRecord] = field(default_factory=dict)
    favorites: dict[tuple[UUID, UUID], datetime] = field(default_factory=dict)
    shares: dict[tuple[UUID, str], ShareGrant] = field(default_factory=dict)
    clock: Callable[[], datetime] = _utcnow
    _recipe_sequence: dict[UUID, int] = field(default_factory=dict, repr=False)
    _counter: count = field(default_factory=count, repr=False)
    _lock: RLock = field(default_factory=RLock, repr=False)

    # Users

    def get_user(self, user_id: UUID) -> UserRecord | None:
        with self._lock:
            return self.users.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        normalized = normalize_email(email)
        with self._lock:
            for user in self.users.values():
                if user.email == normalized:
                    return user
        return None

    def create_user(
        self,
        email: str,
        password_hash: str,
        display_name: str | None,
        photo_url: str | None,
    ) -> UserRecord:
        normalized = normalize_email(email)
        with self._lock:
            if any(user.email == normalized for user in self.users.values()):
                raise DuplicateKey(f"Email already registered: {normalized}")
            user = UserRecord(
                id=uuid4(),
                email=normalized,
                password_hash=password_hash,
                display_name=display_name,
                photo_url=photo_url,
                created_at=self.clock(),
            )
            self.users[user.id] = user
            return user

    def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            if user_id not in self.users:
                return False
            owned = [r.id for r in self.recipes.values() if r.user_id == user_id]
            for recipe_id in owned:
                self.delete_recipe(recipe_id)
            for key in [key for key in self.favorites if key[0] == user_id]:
                del self.favorites[key]
            del self.users[user_id]
            return True

    # Recipes

    def get_recipe(self, recipe_id: UUID) -> RecipeRecord | None:
        with self._lock:
            return self.recipes.get(recipe_id)

    def create_recipe(
        self,
        user_id: UUID,
        fields: dict[str, object],
        ingredients: list[dict[str, object]],
        photos: list[str],
    ) -> RecipeRecord:
        now = self.clock()
        with self._lock:
            recipe = RecipeRecord(
                id=uuid4(),
                user_id=user_id,
                title=str(fields["title"]),
                prep_time=str(fields["prep_time"]),
                servings=int(fields["servings"]),
                directions=str(fields["directions"]),
                is_private=bool(fields.get("is_private", False)),
                image_url=fields.get("image_url"),
                created_at=now,
                updated_at=now,
            )
            self.recipes[recipe.id] = recipe
            self._recipe_sequence[recipe.id] = next(self._counter)
            self._insert_ingredients(recipe.id, ingredients)
            self._insert_photos(recipe.id, photos)
            return recipe

    def update_recipe(
        self,
        recipe_id: UUID,
        fields: dict[str, object],
        ingredients: list[dict[str, object]] | None,
        photos: list[str] | None,
    ) -> RecipeRecord | None:
        with self._lock:
            current = self.recipes.get(recipe_id)
            if current is None:
                return None
            changes = {k: v for k, v in fields.items() if k in _RECIPE_COLUMNS}
            updated = replace(current, **changes, updated_at=self.clock())
            self.recipes[recipe_id] = updated
            if ingredients is not None:
                self._delete_children(self.ingredients, recipe_id)
                self._insert_ingredients(recipe_id, ingredients)
            if photos is not None:
                self._delete_children(self.photos, recipe_id)
                self._insert_photos(recipe_id, photos)
            return updated

    def update_recipe_image(self, recipe_id: UUID, image_url: str) -> bool:
        with self._lock:
            current = self.recipes.get(recipe_id)
            if current is None:
                return False
            self.recipes[recipe_id] = replace(
                current, image_url=image_url, updated_at=self.clock()
            )
            return True

    def delete_recipe(self, recipe_id: UUID) -> bool:
        with self._lock:
            if recipe_id not in self.recipes:
                return False
            self._delete_children(self.ingredients, recipe_id)
            self._delete_children(self.photos, recipe_id)
            for key in [key for key in self.favorites if key[1] == recipe_id]:
                del self.favorites[key]
            for key in [key for key in self.shares if key[0] == recipe_id]:
                del self.shares[key]
            del self.recipes[recipe_id]
            self._recipe_sequence.pop(recipe_id, None)
            return True

    def list_ingredients(self, recipe_id: UUID) -> list[IngredientRecord]:
        with self._lock:
            items = [i for i in self.ingredients.values() if i.recipe_id == recipe_id]
        return sorted(items, key=lambda item: (item.order, item.sequence))

    def list_photos(self, recipe_id: UUID) -> list[RecipePhotoRecord]:
        with self._lock:
            items = [p for p in self.photos.values() if p.recipe_id == recipe_id]
        return sorted(items, key=lambda photo: photo.order)

    def list_recipe_ids_by_user(self, user_id: UUID) -> list[UUID]:
        with self._lock:
            return self._newest_first(
                r for r in self.recipes.values() if r.user_id == user_id
            )

    def list_public_recipe_ids(self) -> list[UUID]:
        with self._lock:
            return self._newest_first(
                r for r in self.recipes.values() if not r.is_private
            )

    # Favorites

    def toggle_favorite(self, user_id: UUID, recipe_id: UUID) -> bool | None:
        key = (user_id, recipe_id)
        with self._lock:
            if recipe_id not in self.recipes:
                return None
            if key in self.favorites:
                del self.favorites[key]
                return False
            self.favorites[key] = self.clock()
            return True

    def count_favorites(self, recipe_id: UUID) -> int:
        with self._lock:
            return sum(1 for key in self.favorites if key[1] == recipe_id)

    def is_favorited(self, user_id: UUID, recipe_id: UUID) -> bool:
        with self._lock:
            return (user_id, recipe_id) in self.favorites

    def list_favorited_recipe_ids(self, user_id: UUID) -> list[UUID]:
        with self._lock:
            return [key[1] for key in self.favorites if key[0] == user_id]

    # Shares

    def create_share(self, recipe_id: UUID, email: str) -> ShareGrant:
        key = (recipe_id, normalize_email(email))
        with self._lock:
            existing = self.shares.get(key)
            if existing is not None:
                return existing
            grant = ShareGrant(
                id=uuid4(),
                recipe_id=recipe_id,
                shared_with_email=key[1],
                created_at=self.clock(),
            )
            self.shares[key] = grant
            return grant

    def delete_share(self, recipe_id: UUID, email: str) -> bool:
        with self._lock:
            return self.shares.pop((recipe_id, normalize_email(email)), None) is not None

    def has_share(self, recipe_id: UUID, email: str) -> bool:
        with self._lock:
            return (recipe_id, normalize_email(email)) in self.shares

    def list_shares(self, recipe_id: UUID) -> list[ShareGrant]:
        with self._lock:
            return [g for key, g in self.shares.items() if key[0] == recipe_id]

    def list_shared_recipe_ids(self, email: str) -> list[UUID]:
        normalized = normalize_email(email)
        with self._lock:
            return [key[0] for key in self.shares if key[1] == normalized]

    # Internals

    def _insert_ingredients(
        self, recipe_id: UUID, ingredients: list[dict[str, object]]
    ) -> None:
        for index, row in enumerate(ingredients):
            ingredient = IngredientRecord(
                id=uuid4(),
                recipe_id=recipe_id,
                amount=str(row.get("amount") or ""),
                measurement=str(row.get("measurement") or ""),
                name=str(row["name"]),
                description=row.get("description"),
                link=row.get("link"),
                order=int(row.get("order", index)),
                sequence=next(self._counter),
            )
            self.ingredients[ingredient.id] = ingredient

    def _insert_photos(self, recipe_id: UUID, photos: list[str]) -> None:
        now = self.clock()
        for index, image_url in enumerate(photos):
            photo = RecipePhotoRecord(
                id=uuid4(),
                recipe_id=recipe_id,
                image_url=image_url,
                order=index,
                created_at=now,
            )
            self.photos[photo.id] = photo

    @staticmethod
    def _delete_children(rows: dict, recipe_id: UUID) -> None:
        for row_id in [k for k, row in rows.items() if row.recipe_id == recipe_id]:
            del rows[row_id]

    def _newest_first(self, recipes: Iterable[RecipeRecord]) -> list[UUID]:
        ordered = sorted(
            recipes,
            key=lambda r: (r.created_at, self._recipe_sequence.get(r.id, 0)),
            reverse=True,
        )
        return [recipe.id for recipe in ordered]
