"""Tests for recipe detail aggregation."""

import logging
from uuid import uuid4

from recipe_catalog.domain.models import UNKNOWN_AUTHOR
from tests.conftest import make_recipe, make_user


def test_detail_orders_ingredients_by_position(store, aggregator) -> None:
    owner = make_user(store)
    recipe = make_recipe(
        store,
        owner.id,
        ingredients=[
            {"name": "salt", "order": 2},
            {"name": "flour", "order": 0},
            {"name": "milk", "order": 1},
        ],
    )

    detail = aggregator.get_recipe_detail(recipe.id)

    assert detail is not None
    assert [item.name for item in detail.ingredients] == ["flour", "milk", "salt"]


def test_detail_breaks_order_ties_by_insertion(store, aggregator) -> None:
    owner = make_user(store)
    recipe = make_recipe(
        store,
        owner.id,
        ingredients=[
            {"name": "first", "order": 0},
            {"name": "second", "order": 0},
            {"name": "third", "order": 0},
        ],
    )

    detail = aggregator.get_recipe_detail(recipe.id)

    assert [item.name for item in detail.ingredients] == ["first", "second", "third"]


def test_detail_includes_author_and_photos(store, aggregator) -> None:
    owner = make_user(store, display_name="Ana")
    recipe = make_recipe(
        store, owner.id, photos=["/objects/uploads/a", "/objects/uploads/b"]
    )

    detail = aggregator.get_recipe_detail(recipe.id)

    assert detail.author.id == owner.id
    assert detail.author.display_name == "Ana"
    assert [photo.image_url for photo in detail.photos] == [
        "/objects/uploads/a",
        "/objects/uploads/b",
    ]


def test_detail_missing_recipe_returns_none(aggregator) -> None:
    assert aggregator.get_recipe_detail(uuid4()) is None


def test_detail_missing_author_uses_sentinel(
    store, aggregator, caplog, monkeypatch
) -> None:
    monkeypatch.setattr(logging.getLogger("recipe_catalog"), "propagate", True)
    owner = make_user(store)
    recipe = make_recipe(store, owner.id)
    del store.users[owner.id]

    with caplog.at_level(logging.WARNING):
        detail = aggregator.get_recipe_detail(recipe.id)

    assert detail is not None
    assert detail.author == UNKNOWN_AUTHOR
    assert "missing author" in caplog.text


def test_favorite_count_is_live(store, aggregator) -> None:
    owner = make_user(store)
    fan = make_user(store, email="fan@example.com")
    recipe = make_recipe(store, owner.id)

    assert aggregator.get_recipe_detail(recipe.id).favorite_count == 0
    store.toggle_favorite(fan.id, recipe.id)
    assert aggregator.get_recipe_detail(recipe.id).favorite_count == 1
    store.toggle_favorite(owner.id, recipe.id)
    assert aggregator.get_recipe_detail(recipe.id).favorite_count == 2
    store.toggle_favorite(fan.id, recipe.id)
    assert aggregator.get_recipe_detail(recipe.id).favorite_count == 1


def test_is_favorited_depends_on_viewer(store, aggregator) -> None:
    owner = make_user(store)
    fan = make_user(store, email="fan@example.com")
    recipe = make_recipe(store, owner.id)
    store.toggle_favorite(fan.id, recipe.id)

    assert aggregator.get_recipe_detail(recipe.id, fan.id).is_favorited is True
    assert aggregator.get_recipe_detail(recipe.id, owner.id).is_favorited is False
    assert aggregator.get_recipe_detail(recipe.id).is_favorited is False
