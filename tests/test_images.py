"""Tests for the upload, attach and read flow of recipe images."""

from uuid import UUID, uuid4

import pytest

from recipe_catalog.domain.access import ANONYMOUS, Outcome
from recipe_catalog.domain.errors import ExpiredTarget
from recipe_catalog.domain.objects import (
    AccessDescriptor,
    UploadState,
    Visibility,
    normalize_object_path,
)
from tests.conftest import actor_for, make_recipe, make_user

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def _uploaded(image_service, actor) -> str:
    target = image_service.issue_upload_target(actor)
    outcome = image_service.upload_object(
        actor, target.upload_url, PNG_BYTES, "image/png"
    )
    assert outcome == Outcome.OK
    return target.object_path


def test_issue_upload_target_requires_user(store, image_service, clock) -> None:
    owner = make_user(store)

    target = image_service.issue_upload_target(actor_for(owner))

    assert image_service.issue_upload_target(ANONYMOUS) is None
    assert target.owner_id == owner.id
    assert target.object_path.startswith("/objects/uploads/")
    assert target.upload_url.startswith("http://testserver/api/objects/uploads/")
    assert (target.expires_at - clock()).total_seconds() == 900
    assert image_service.upload_state(target.object_path) == UploadState.UPLOADING


def test_upload_after_expiry_fails(store, image_service, clock) -> None:
    owner = make_user(store)
    target = image_service.issue_upload_target(actor_for(owner))
    clock.advance(901)

    with pytest.raises(ExpiredTarget):
        image_service.upload_object(
            actor_for(owner), target.upload_url, PNG_BYTES, "image/png"
        )

    assert image_service.upload_state(target.object_path) == UploadState.UPLOADING


def test_upload_by_other_user_is_denied(store, image_service) -> None:
    owner = make_user(store)
    other = make_user(store, email="other@example.com")
    target = image_service.issue_upload_target(actor_for(owner))

    outcome = image_service.upload_object(
        actor_for(other), target.object_path, PNG_BYTES, "image/png"
    )

    assert outcome == Outcome.DENIED
    assert image_service.upload_object(
        actor_for(owner), "/objects/uploads/unknown", PNG_BYTES, "image/png"
    ) == Outcome.NOT_FOUND


def test_uploaded_object_is_unreadable_until_attached(store, image_service) -> None:
    owner = make_user(store)
    object_path = _uploaded(image_service, actor_for(owner))

    read = image_service.read_object(actor_for(owner), object_path)

    assert image_service.upload_state(object_path) == UploadState.UPLOADED
    assert read.outcome == Outcome.DENIED


def test_confirm_attach_stamps_public_and_sets_image(
    store, image_service, object_store
) -> None:
    owner = make_user(store)
    recipe = make_recipe(store, owner.id)
    object_path = _uploaded(image_service, actor_for(owner))
    upload_url = f"https://storage.example.com{object_path}?X-Signature=abc"

    result = image_service.confirm_attach(actor_for(owner), upload_url, recipe.id)

    assert result.outcome == Outcome.OK
    assert result.object_path == object_path
    assert store.get_recipe(recipe.id).image_url == object_path
    assert object_store.get_access_descriptor(object_path) == AccessDescriptor(
        owner=owner.id, visibility=Visibility.PUBLIC
    )
    assert image_service.upload_state(object_path) == UploadState.ATTACHED

    read = image_service.read_object(ANONYMOUS, object_path)
    assert read.outcome == Outcome.OK
    assert read.cacheable is True
    assert read.stored_object.data == PNG_BYTES
    assert read.stored_object.content_type == "image/png"


def test_confirm_attach_by_non_owner_changes_nothing(
    store, image_service, object_store
) -> None:
    owner = make_user(store)
    stranger = make_user(store, email="stranger@example.com")
    recipe = make_recipe(store, owner.id)
    object_path = _uploaded(image_service, actor_for(stranger))

    result = image_service.confirm_attach(actor_for(stranger), object_path, recipe.id)

    assert result.outcome == Outcome.DENIED
    assert store.get_recipe(recipe.id).image_url is None
    assert object_store.get_access_descriptor(object_path) is None


def test_confirm_attach_rejects_someone_elses_upload(
    store, image_service, object_store
) -> None:
    owner = make_user(store)
    other = make_user(store, email="other@example.com")
    recipe = make_recipe(store, owner.id)
    object_path = _uploaded(image_service, actor_for(other))

    result = image_service.confirm_attach(actor_for(owner), object_path, recipe.id)

    assert result.outcome == Outcome.DENIED
    assert object_store.get_access_descriptor(object_path) is None
    assert store.get_recipe(recipe.id).image_url is None


def test_confirm_attach_missing_recipe_or_object(store, image_service) -> None:
    owner = make_user(store)
    recipe = make_recipe(store, owner.id)
    object_path = _uploaded(image_service, actor_for(owner))

    missing_recipe = image_service.confirm_attach(
        actor_for(owner), object_path, uuid4()
    )
    missing_object = image_service.confirm_attach(
        actor_for(owner), "/objects/uploads/never-uploaded", recipe.id
    )

    assert missing_recipe.outcome == Outcome.NOT_FOUND
    assert missing_object.outcome == Outcome.NOT_FOUND
    assert store.get_recipe(recipe.id).image_url is None


def test_attached_object_can_be_replaced_by_owner_only(store, image_service) -> None:
    owner = make_user(store)
    other = make_user(store, email="other@example.com")
    recipe = make_recipe(store, owner.id)
    object_path = _uploaded(image_service, actor_for(owner))
    image_service.confirm_attach(actor_for(owner), object_path, recipe.id)

    denied = image_service.upload_object(
        actor_for(other), object_path, b"GIF89a...", "image/gif"
    )
    allowed = image_service.upload_object(
        actor_for(owner), object_path, b"GIF89a...", "image/gif"
    )

    assert denied == Outcome.DENIED
    assert allowed == Outcome.OK
    assert image_service.read_object(ANONYMOUS, object_path).stored_object.data == (
        b"GIF89a..."
    )


def test_private_object_readable_by_owner_only(
    store, image_service, object_store
) -> None:
    owner = make_user(store)
    object_path = _uploaded(image_service, actor_for(owner))
    object_store.set_access_descriptor(
        object_path, AccessDescriptor(owner=owner.id, visibility=Visibility.PRIVATE)
    )

    own_read = image_service.read_object(actor_for(owner), object_path)
    anon_read = image_service.read_object(ANONYMOUS, object_path)

    assert own_read.outcome == Outcome.OK
    assert own_read.cacheable is False
    assert anon_read.outcome == Outcome.DENIED


def test_normalize_object_path_forms() -> None:
    assert normalize_object_path("/objects/uploads/abc") == "/objects/uploads/abc"
    assert normalize_object_path("uploads/abc") == "/objects/uploads/abc"
    assert (
        normalize_object_path("https://host/bucket/uploads/abc?token=1")
        == "/objects/uploads/abc"
    )
    assert normalize_object_path("") is None
    assert normalize_object_path("/objects/other/abc") is None
    assert normalize_object_path("/objects/uploads/a/b") is None


def test_confirm_attach_leaves_object_unstamped_when_recipe_vanishes(
    store, image_service, object_store, monkeypatch
) -> None:
    owner = make_user(store)
    recipe = make_recipe(store, owner.id)
    object_path = _uploaded(image_service, actor_for(owner))
    update_image = store.update_recipe_image

    def delete_then_update(recipe_id: UUID, image_url: str) -> bool:
        store.delete_recipe(recipe_id)
        return update_image(recipe_id, image_url)

    monkeypatch.setattr(store, "update_recipe_image", delete_then_update)

    result = image_service.confirm_attach(actor_for(owner), object_path, recipe.id)

    assert result.outcome == Outcome.NOT_FOUND
    assert object_store.get_access_descriptor(object_path) is None
    assert image_service.upload_state(object_path) == UploadState.UPLOADED
