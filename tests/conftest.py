"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from recipe_catalog.adapters.memory_object_store import InMemoryObjectStore
from recipe_catalog.adapters.memory_store import InMemoryEntityStore
from recipe_catalog.config import Settings
from recipe_catalog.containers import AppContainer, Repositories, build_container
from recipe_catalog.domain.access import Actor
from recipe_catalog.domain.models import UserRecord
from recipe_catalog.domain.recipes import RecipeRecord
from recipe_catalog.services.access import AccessPolicy
from recipe_catalog.services.aggregator import RecipeAggregator
from recipe_catalog.services.collections import CollectionResolver
from recipe_catalog.services.favorites import FavoriteService
from recipe_catalog.services.images import ImageService
from recipe_catalog.services.recipes import RecipeService


@dataclass
class FakeClock:
    """Manually advanced clock for expiry tests."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_user(
    store: InMemoryEntityStore,
    email: str = "cook@example.com",
    display_name: str | None = "Cook",
) -> UserRecord:
    return store.create_user(
        email=email,
        password_hash="not-a-real-hash",
        display_name=display_name,
        photo_url=None,
    )


def make_recipe(
    store: InMemoryEntityStore,
    owner_id: UUID,
    ingredients: list[dict[str, object]] | None = None,
    photos: list[str] | None = None,
    **overrides: object,
) -> RecipeRecord:
    fields: dict[str, object] = {
        "title": "Pancakes",
        "prep_time": "20 min",
        "servings": 4,
        "directions": "Mix and fry.",
        "is_private": False,
        "image_url": None,
    }
    fields.update(overrides)
    return store.create_recipe(owner_id, fields, ingredients or [], photos or [])


def actor_for(user: UserRecord) -> Actor:
    return Actor(user_id=user.id, email=user.email)


def recipe_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "title": "Shakshuka",
        "prep_time": "30 min",
        "servings": 2,
        "directions": "Simmer sauce, add eggs.",
        "ingredients": [
            {"amount": "4", "measurement": "", "name": "eggs"},
            {"amount": "1", "measurement": "can", "name": "tomatoes"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        session_secret="test-session-secret",
        public_base_url="http://testserver",
        environment="test",
    )


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def object_store(settings: Settings) -> InMemoryObjectStore:
    return InMemoryObjectStore(settings.upload_base_url)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy(store: InMemoryEntityStore) -> AccessPolicy:
    return AccessPolicy(store)


@pytest.fixture
def aggregator(store: InMemoryEntityStore) -> RecipeAggregator:
    return RecipeAggregator(store, store, store)


@pytest.fixture
def recipe_service(
    store: InMemoryEntityStore, aggregator: RecipeAggregator, policy: AccessPolicy
) -> RecipeService:
    return RecipeService(
        recipe_repository=store,
        share_repository=store,
        aggregator=aggregator,
        policy=policy,
    )


@pytest.fixture
def collection_resolver(
    store: InMemoryEntityStore, aggregator: RecipeAggregator, policy: AccessPolicy
) -> CollectionResolver:
    return CollectionResolver(
        aggregator=aggregator,
        recipe_repository=store,
        favorite_repository=store,
        share_repository=store,
        policy=policy,
    )


@pytest.fixture
def favorite_service(store: InMemoryEntityStore) -> FavoriteService:
    return FavoriteService(store)


@pytest.fixture
def image_service(
    store: InMemoryEntityStore,
    object_store: InMemoryObjectStore,
    policy: AccessPolicy,
    clock: FakeClock,
) -> ImageService:
    return ImageService(
        object_store=object_store,
        recipe_repository=store,
        policy=policy,
        upload_ttl_seconds=900,
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryEntityStore,
    object_store: InMemoryObjectStore,
) -> AppContainer:
    return build_container(
        settings,
        Repositories(
            users=store,
            recipes=store,
            favorites=store,
            shares=store,
            objects=object_store,
        ),
    )
