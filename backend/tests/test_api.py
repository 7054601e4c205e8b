import pytest
from jose import jwt

from storerate.core.config import settings
from storerate.schemas.enums import Role

PASSWORD = "Abc!2345"


@pytest.mark.asyncio
async def test_register_then_login(client):
    response = await client.post("/api/register", json={"name": "A", "email": "a@x.com", "password": PASSWORD})
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["role"] == "NORMAL_USER"
    assert "password" not in body["user"]

    response = await client.post("/api/login", json={"email": "a@x.com", "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert isinstance(body["token"], str) and body["token"]
    assert body["user"]["id"] > 0
    assert "createdAt" in body["user"]


@pytest.mark.asyncio
async def test_register_ignores_requested_role(client):
    response = await client.post(
        "/api/register",
        json={"name": "Sneaky", "email": "sneaky@x.com", "password": PASSWORD, "role": "SYSTEM_ADMIN"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "NORMAL_USER"


@pytest.mark.asyncio
async def test_register_missing_fields(client):
    response = await client.post("/api/register", json={"email": "a@x.com"})
    assert response.status_code == 400
    assert "name" in response.json()["message"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    payload = {"name": "A", "email": "a@x.com", "password": PASSWORD}
    assert (await client.post("/api/register", json=payload)).status_code == 201

    response = await client.post("/api/register", json={**payload, "name": "B"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, create_user):
    await create_user("known@x.com")

    wrong_password = await client.post("/api/login", json={"email": "known@x.com", "password": "Nope!1234"})
    unknown_email = await client.post("/api/login", json={"email": "nobody@x.com", "password": PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials."}


@pytest.mark.asyncio
async def test_users_listing_requires_admin(client, create_user, auth_headers):
    user = await create_user("user@x.com")
    admin = await create_user("admin@x.com", role=Role.SYSTEM_ADMIN)

    assert (await client.get("/api/users")).status_code == 401
    assert (await client.get("/api/users", headers=auth_headers(user))).status_code == 403

    response = await client.get("/api/users", headers=auth_headers(admin), params={"limit": 1})
    assert response.status_code == 200
    assert [u["email"] for u in response.json()] == ["user@x.com"]
    assert "password" not in response.json()[0]


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/api/users/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_read_current_user(client, create_user, auth_headers):
    user = await create_user("me@x.com", name="Me")

    response = await client.get("/api/users/me", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["name"] == "Me"


@pytest.mark.asyncio
async def test_store_creation_requires_admin(client, create_user, auth_headers):
    user = await create_user("user@x.com")
    admin = await create_user("admin@x.com", role=Role.SYSTEM_ADMIN)
    owner = await create_user("owner@x.com", role=Role.STORE_OWNER)
    payload = {"name": "Corner Shop", "address": "1 High St", "ownerId": owner.id, "email": "shop@x.com"}

    assert (await client.post("/api/stores", json=payload)).status_code == 401
    assert (await client.post("/api/stores", json=payload, headers=auth_headers(user))).status_code == 403

    response = await client.post("/api/stores", json=payload, headers=auth_headers(admin))
    assert response.status_code == 201
    store = response.json()["store"]
    assert store["ownerId"] == owner.id
    assert store["name"] == "Corner Shop"

    listing = await client.get("/api/stores")
    assert listing.status_code == 200
    assert [s["id"] for s in listing.json()] == [store["id"]]


@pytest.mark.asyncio
async def test_store_creation_with_unknown_owner(client, create_user, auth_headers):
    admin = await create_user("admin@x.com", role=Role.SYSTEM_ADMIN)

    response = await client.post("/api/stores", json={"name": "Nobody's", "ownerId": 77}, headers=auth_headers(admin))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_limit_is_bounded(client):
    assert (await client.get("/api/stores", params={"limit": 1000})).status_code == 400


@pytest.mark.asyncio
async def test_rate_store_flow(client, create_user, auth_headers):
    admin = await create_user("admin@x.com", role=Role.SYSTEM_ADMIN)
    user = await create_user("user@x.com")
    created = await client.post("/api/stores", json={"name": "Cafe"}, headers=auth_headers(admin))
    store_id = created.json()["store"]["id"]

    assert (await client.post(f"/api/stores/{store_id}/ratings", json={"score": 4})).status_code == 401

    response = await client.post(
        f"/api/stores/{store_id}/ratings",
        json={"score": 4, "comment": "Good coffee"},
        headers=auth_headers(user),
    )
    assert response.status_code == 201
    assert response.json()["rating"]["userId"] == user.id

    duplicate = await client.post(f"/api/stores/{store_id}/ratings", json={"score": 2}, headers=auth_headers(user))
    assert duplicate.status_code == 409

    out_of_range = await client.post(f"/api/stores/{store_id}/ratings", json={"score": 6}, headers=auth_headers(admin))
    assert out_of_range.status_code == 400

    detail = (await client.get(f"/api/stores/{store_id}")).json()
    assert detail["averageRating"] == 4.0
    assert detail["ratingCount"] == 1

    ratings = (await client.get(f"/api/stores/{store_id}/ratings")).json()
    assert [r["comment"] for r in ratings] == ["Good coffee"]


@pytest.mark.asyncio
async def test_missing_store_is_404(client, create_user, auth_headers):
    user = await create_user("user@x.com")

    assert (await client.get("/api/stores/5")).status_code == 404
    assert (await client.get("/api/stores/5/ratings")).status_code == 404
    assert (await client.post("/api/stores/5/ratings", json={"score": 3}, headers=auth_headers(user))).status_code == 404


@pytest.mark.asyncio
async def test_update_password(client, create_user, auth_headers):
    user = await create_user("me@x.com")
    headers = auth_headers(user)

    weak = await client.post("/api/update-password", json={"email": "me@x.com", "newPassword": "abcdefgh"}, headers=headers)
    assert weak.status_code == 400

    missing = await client.post("/api/update-password", json={"email": "me@x.com"}, headers=headers)
    assert missing.status_code == 400

    ok = await client.post("/api/update-password", json={"email": "me@x.com", "newPassword": "Abcdefg!"}, headers=headers)
    assert ok.status_code == 200

    login = await client.post("/api/login", json={"email": "me@x.com", "password": "Abcdefg!"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_password_of_another_user(client, create_user, auth_headers):
    user = await create_user("me@x.com")
    await create_user("victim@x.com")
    admin = await create_user("admin@x.com", role=Role.SYSTEM_ADMIN)
    payload = {"email": "victim@x.com", "newPassword": "Abcdefg!"}

    assert (await client.post("/api/update-password", json=payload)).status_code == 401
    assert (await client.post("/api/update-password", json=payload, headers=auth_headers(user))).status_code == 403
    assert (await client.post("/api/update-password", json=payload, headers=auth_headers(admin))).status_code == 200


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


@pytest.mark.asyncio
async def test_login_with_mixed_case_domain(client):
    payload = {"name": "Alice", "email": "Alice@Example.COM", "password": PASSWORD}
    registered = await client.post("/api/register", json=payload)
    assert registered.status_code == 201

    response = await client.post("/api/login", json={"email": "Alice@Example.COM", "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered.json()["user"]["id"]

    headers = {"Authorization": f"Bearer {response.json()['token']}"}
    changed = await client.post(
        "/api/update-password",
        json={"email": "Alice@Example.COM", "newPassword": "Abcdefg!"},
        headers=headers,
    )
    assert changed.status_code == 200


@pytest.mark.asyncio
async def test_token_with_non_numeric_user_id_is_rejected(client):
    token = jwt.encode({"userId": "abc", "role": "NORMAL_USER"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    response = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == {"message": "Could not validate credentials."}
