"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass

from supabase import create_client

from recipe_catalog.adapters.memory_object_store import InMemoryObjectStore
from recipe_catalog.adapters.memory_store import InMemoryEntityStore
from recipe_catalog.adapters.supabase_favorite_repository import (
    SupabaseFavoriteRepository,
)
from recipe_catalog.adapters.supabase_object_store import SupabaseObjectStore
from recipe_catalog.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_catalog.adapters.supabase_share_repository import (
    SupabaseShareRepository,
)
from recipe_catalog.adapters.supabase_user_repository import SupabaseUserRepository
from recipe_catalog.config import Settings
from recipe_catalog.services.access import AccessPolicy, ShareRepository
from recipe_catalog.services.aggregator import RecipeAggregator, RecipeRepository
from recipe_catalog.services.collections import CollectionResolver
from recipe_catalog.services.favorites import FavoriteRepository, FavoriteService
from recipe_catalog.services.images import ImageService, ObjectStore
from recipe_catalog.services.recipes import RecipeService
from recipe_catalog.services.users import UserRepository, UserService

_logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    """Storage adapters behind the services."""

    users: UserRepository
    recipes: RecipeRepository
    favorites: FavoriteRepository
    shares: ShareRepository
    objects: ObjectStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    recipe_service: RecipeService
    aggregator: RecipeAggregator
    policy: AccessPolicy
    collection_resolver: CollectionResolver
    favorite_service: FavoriteService
    image_service: ImageService


def build_repositories(settings: Settings) -> Repositories:
    """Create storage adapters for the configured backend."""
    if settings.storage_backend == "memory":
        _logger.info("Using in-memory storage backend")
        store = InMemoryEntityStore()
        return Repositories(
            users=store,
            recipes=store,
            favorites=store,
            shares=store,
            objects=InMemoryObjectStore(settings.upload_base_url),
        )
    supabase_client = create_client(
        settings.supabase_url, settings.supabase_service_key
    )
    return Repositories(
        users=SupabaseUserRepository(supabase_client),
        recipes=SupabaseRecipeRepository(supabase_client),
        favorites=SupabaseFavoriteRepository(supabase_client),
        shares=SupabaseShareRepository(supabase_client),
        objects=SupabaseObjectStore(
            supabase_client,
            bucket=settings.storage_bucket,
            upload_base_url=settings.upload_base_url,
        ),
    )


def build_container(
    settings: Settings | None = None,
    repositories: Repositories | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    repos = repositories or build_repositories(resolved_settings)
    policy = AccessPolicy(repos.shares)
    aggregator = RecipeAggregator(repos.recipes, repos.users, repos.favorites)
    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(repos.users),
        recipe_service=RecipeService(
            recipe_repository=repos.recipes,
            share_repository=repos.shares,
            aggregator=aggregator,
            policy=policy,
        ),
        aggregator=aggregator,
        policy=policy,
        collection_resolver=CollectionResolver(
            aggregator=aggregator,
            recipe_repository=repos.recipes,
            favorite_repository=repos.favorites,
            share_repository=repos.shares,
            policy=policy,
        ),
        favorite_service=FavoriteService(repos.favorites),
        image_service=ImageService(
            object_store=repos.objects,
            recipe_repository=repos.recipes,
            policy=policy,
            upload_ttl_seconds=resolved_settings.upload_target_ttl_seconds,
        ),
    )
