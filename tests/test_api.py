"""Tests for the HTTP API."""

from uuid import uuid4

from fastapi.testclient import TestClient

from recipe_catalog.api.app import create_app
from tests.conftest import recipe_payload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def _signup(client: TestClient, email: str) -> dict[str, object]:
    response = client.post(
        "/api/auth/signup",
        json={"email": email, "password": "secret1", "display_name": email[:4]},
    )
    assert response.status_code == 201
    return response.json()["user"]


def _create_recipe(client: TestClient, **overrides: object) -> dict[str, object]:
    response = client.post("/api/recipes", json=recipe_payload(**overrides))
    assert response.status_code == 201
    return response.json()


def test_health_endpoints(container) -> None:
    client = _client(container)

    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/healthz").json() == {"status": "ok"}


def test_signup_session_and_signout(container) -> None:
    client = _client(container)

    user = _signup(client, "cook@example.com")
    session = client.get("/api/auth/session").json()
    client.post("/api/auth/signout")
    after = client.get("/api/auth/session").json()

    assert "password_hash" not in user
    assert session["user"]["id"] == user["id"]
    assert after == {"user": None}


def test_signup_duplicate_email_conflicts(container) -> None:
    client = _client(container)
    _signup(client, "cook@example.com")

    response = client.post(
        "/api/auth/signup", json={"email": "COOK@example.com", "password": "secret1"}
    )

    assert response.status_code == 409


def test_signin_checks_credentials(container) -> None:
    client = _client(container)
    _signup(client, "cook@example.com")
    client.post("/api/auth/signout")

    bad = client.post(
        "/api/auth/signin", json={"email": "cook@example.com", "password": "nope"}
    )
    good = client.post(
        "/api/auth/signin", json={"email": "cook@example.com", "password": "secret1"}
    )

    assert bad.status_code == 401
    assert good.status_code == 200


def test_create_recipe_requires_session(container) -> None:
    client = _client(container)

    response = client.post("/api/recipes", json=recipe_payload())

    assert response.status_code == 401


def test_create_recipe_validation_error(container) -> None:
    client = _client(container)
    _signup(client, "cook@example.com")

    response = client.post("/api/recipes", json=recipe_payload(servings=-1))

    assert response.status_code == 422
    assert response.json()["errors"][0]["loc"] == ["servings"]


def test_recipe_crud_flow(container) -> None:
    client = _client(container)
    user = _signup(client, "cook@example.com")

    created = _create_recipe(client)
    recipe_id = created["id"]
    fetched = client.get(f"/api/recipes/{recipe_id}").json()
    patched = client.patch(
        f"/api/recipes/{recipe_id}",
        json={"servings": 3, "ingredients": [{"name": "chili"}]},
    ).json()
    deleted = client.delete(f"/api/recipes/{recipe_id}")

    assert created["author"]["id"] == user["id"]
    assert fetched["title"] == "Shakshuka"
    assert patched["servings"] == 3
    assert [item["name"] for item in patched["ingredients"]] == ["chili"]
    assert deleted.status_code == 200
    assert client.get(f"/api/recipes/{recipe_id}").status_code == 404


def test_private_recipe_hidden_and_write_statuses(container) -> None:
    owner_client = _client(container)
    other_client = _client(container)
    anon_client = _client(container)
    _signup(owner_client, "owner@example.com")
    _signup(other_client, "other@example.com")
    private = _create_recipe(owner_client, is_private=True)
    public = _create_recipe(owner_client)

    assert other_client.get(f"/api/recipes/{private['id']}").status_code == 404
    assert anon_client.get(f"/api/recipes/{private['id']}").status_code == 404
    assert other_client.patch(
        f"/api/recipes/{private['id']}", json={"title": "x"}
    ).status_code == 404
    assert other_client.patch(
        f"/api/recipes/{public['id']}", json={"title": "x"}
    ).status_code == 403
    assert anon_client.delete(f"/api/recipes/{public['id']}").status_code == 401
    assert owner_client.get(f"/api/recipes/{uuid4()}").status_code == 404


def test_list_recipes_by_type(container) -> None:
    owner_client = _client(container)
    friend_client = _client(container)
    _signup(owner_client, "owner@example.com")
    _signup(friend_client, "friend@example.com")
    private = _create_recipe(owner_client, title="Secret", is_private=True)
    public = _create_recipe(owner_client, title="Open")
    owner_client.post(
        f"/api/recipes/{private['id']}/share", json={"email": "friend@example.com"}
    )
    friend_client.post(f"/api/recipes/{public['id']}/favorite")

    def titles(client: TestClient, query: str) -> list[str]:
        return [recipe["title"] for recipe in client.get(f"/api/recipes{query}").json()]

    assert titles(owner_client, "?type=my-recipes") == ["Open", "Secret"]
    assert titles(friend_client, "") == ["Open"]
    assert titles(friend_client, "?type=unknown") == ["Open"]
    assert titles(friend_client, "?type=favorites") == ["Open"]
    assert titles(friend_client, "?type=shared") == ["Secret"]
    assert titles(_client(container), "?type=my-recipes") == []


def test_favorite_toggle_endpoint(container) -> None:
    owner_client = _client(container)
    fan_client = _client(container)
    _signup(owner_client, "owner@example.com")
    _signup(fan_client, "fan@example.com")
    recipe = _create_recipe(owner_client)
    private = _create_recipe(owner_client, is_private=True)

    first = fan_client.post(f"/api/recipes/{recipe['id']}/favorite").json()
    second = fan_client.post(f"/api/recipes/{recipe['id']}/favorite").json()

    assert first == {"is_favorited": True, "favorite_count": 1}
    assert second == {"is_favorited": False, "favorite_count": 0}
    assert fan_client.post(f"/api/recipes/{private['id']}/favorite").status_code == 404
    assert _client(container).post(
        f"/api/recipes/{recipe['id']}/favorite"
    ).status_code == 401


def test_share_endpoints(container) -> None:
    owner_client = _client(container)
    friend_client = _client(container)
    _signup(owner_client, "owner@example.com")
    _signup(friend_client, "friend@example.com")
    recipe = _create_recipe(owner_client, is_private=True)
    recipe_id = recipe["id"]

    shared = owner_client.post(
        f"/api/recipes/{recipe_id}/share", json={"email": "Friend@Example.com"}
    )
    readable = friend_client.get(f"/api/recipes/{recipe_id}")
    shares = owner_client.get(f"/api/recipes/{recipe_id}/shares").json()
    friend_shares = friend_client.get(f"/api/recipes/{recipe_id}/shares")
    links = friend_client.get(f"/api/recipes/{recipe_id}/share-links").json()
    revoked = owner_client.delete(
        f"/api/recipes/{recipe_id}/share", params={"email": "friend@example.com"}
    )

    assert shared.status_code == 201
    assert readable.status_code == 200
    assert [grant["shared_with_email"] for grant in shares] == ["friend@example.com"]
    assert friend_shares.status_code == 403
    assert links["recipe_url"] == f"http://testserver/recipe/{recipe_id}"
    assert revoked.status_code == 200
    assert friend_client.get(f"/api/recipes/{recipe_id}").status_code == 404


def test_image_upload_attach_and_serve(container) -> None:
    owner_client = _client(container)
    other_client = _client(container)
    _signup(owner_client, "owner@example.com")
    _signup(other_client, "other@example.com")
    recipe = _create_recipe(owner_client)

    target = owner_client.post("/api/objects/upload").json()
    upload_path = target["upload_url"].removeprefix("http://testserver")
    put = owner_client.put(
        upload_path, content=PNG_BYTES, headers={"content-type": "image/png"}
    )
    before = owner_client.get(target["object_path"])
    hijack = other_client.put(
        f"/api/recipes/{recipe['id']}/image", json={"image_url": target["upload_url"]}
    )
    attached = owner_client.put(
        f"/api/recipes/{recipe['id']}/image", json={"image_url": target["upload_url"]}
    )
    served = _client(container).get(target["object_path"])

    assert put.status_code == 200
    assert before.status_code == 404
    assert hijack.status_code == 403
    assert attached.json() == {"object_path": target["object_path"]}
    assert served.status_code == 200
    assert served.content == PNG_BYTES
    assert served.headers["content-type"] == "image/png"
    assert served.headers["cache-control"] == "public, max-age=3600"
    detail = owner_client.get(f"/api/recipes/{recipe['id']}").json()
    assert detail["image_url"] == target["object_path"]


def test_upload_target_requires_session(container) -> None:
    client = _client(container)

    assert client.post("/api/objects/upload").status_code == 401


def test_expired_upload_target_is_gone(container) -> None:
    client = _client(container)
    _signup(client, "owner@example.com")
    container.image_service.upload_ttl_seconds = 0
    target = client.post("/api/objects/upload").json()

    response = client.put(
        target["upload_url"].removeprefix("http://testserver"), content=PNG_BYTES
    )

    assert response.status_code == 410


def test_user_profile_and_account_deletion(container) -> None:
    client = _client(container)
    user = _signup(client, "cook@example.com")
    recipe = _create_recipe(client)

    profile = _client(container).get(f"/api/users/{user['id']}").json()
    deleted = client.delete("/api/users/me")

    assert profile == {"id": user["id"], "display_name": "cook", "photo_url": None}
    assert deleted.status_code == 200
    assert _client(container).get(f"/api/recipes/{recipe['id']}").status_code == 404
    assert client.get("/api/auth/session").json() == {"user": None}
