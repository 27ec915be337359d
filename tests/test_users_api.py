"""
Integration tests for /api/v1/users over the ASGI app.
"""
import pytest

from league_api.services.user_service import user_service

from tests.conftest import PASSWORD, user_params


@pytest.mark.asyncio
async def test_create_user_without_token(client):
    response = await client.post("/api/v1/users", json={"user": user_params()})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["type"] == "users"
    assert data["attributes"]["email"] == "player@example.com"
    assert data["attributes"]["firstName"] == "Ada"
    assert "password" not in data["attributes"]
    assert "passwordDigest" not in data["attributes"]


@pytest.mark.asyncio
async def test_create_user_accepts_flat_body(client):
    response = await client.post("/api/v1/users", json=user_params(email="flat@example.com"))

    assert response.status_code == 201
    assert response.json()["data"]["attributes"]["email"] == "flat@example.com"


@pytest.mark.asyncio
async def test_create_user_invalid(client):
    response = await client.post("/api/v1/users", json={"user": {"email": "bad"}})

    assert response.status_code == 422
    body = response.json()["data"]
    assert body["errorName"] == "invalid_record"
    assert body["errorMessage"]["email"] == ["is invalid"]
    assert body["errorMessage"]["password"] == ["can't be blank"]


@pytest.mark.asyncio
async def test_create_user_duplicate_email(client, user):
    response = await client.post("/api/v1/users", json={"user": user_params(email="Player@Example.com")})

    assert response.status_code == 422
    assert response.json()["data"]["errorMessage"] == {"email": ["has already been taken"]}


@pytest.mark.asyncio
async def test_create_user_wrong_attribute_type(client):
    response = await client.post("/api/v1/users", json={"user": user_params(team_id="not-a-number")})

    assert response.status_code == 422
    assert response.json()["data"]["errorMessage"] == {"team_id": ["is invalid"]}


@pytest.mark.asyncio
async def test_list_users_requires_token(client, user):
    response = await client.get("/api/v1/users")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"].startswith("Bearer")
    assert response.json() == {"data": {"errorName": "unauthorized"}}


@pytest.mark.asyncio
async def test_garbage_token_rejected(client):
    response = await client.get("/api/v1/users", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_users(client, db, user, issue_token, bearer):
    for i in range(2):
        await user_service.create_user(db, user_params(email=f"other{i}@example.com"))
    issued = await issue_token(user, "read")

    response = await client.get("/api/v1/users", headers=bearer(issued))

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 3
    assert data[0]["id"] == str(user.id)


@pytest.mark.asyncio
async def test_list_users_paginated(client, db, user, issue_token, bearer):
    for i in range(4):
        await user_service.create_user(db, user_params(email=f"other{i}@example.com"))
    issued = await issue_token(user, "read")

    response = await client.get("/api/v1/users?page=2&per_page=2", headers=bearer(issued))

    assert response.status_code == 200
    body = response.json()
    assert [item["attributes"]["email"] for item in body["data"]] == [
        "other1@example.com",
        "other2@example.com",
    ]
    assert body["meta"] == {"page": 2, "perPage": 2}


@pytest.mark.asyncio
async def test_list_users_bad_page(client, user, issue_token, bearer):
    issued = await issue_token(user, "read")

    response = await client.get("/api/v1/users?page=0&per_page=2", headers=bearer(issued))

    assert response.status_code == 422
    assert response.json()["data"]["errorName"] == "invalid_record"


@pytest.mark.asyncio
async def test_show_user(client, user, issue_token, bearer):
    issued = await issue_token(user, "read")

    response = await client.get(f"/api/v1/users/{user.id}", headers=bearer(issued))

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(user.id)


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["999999", "abc", "99999999999999999999999"])
async def test_show_unknown_user(client, user, issue_token, bearer, user_id):
    issued = await issue_token(user, "read")

    response = await client.get(f"/api/v1/users/{user_id}", headers=bearer(issued))

    assert response.status_code == 404
    assert response.json() == {"data": {"errorName": "record_not_found", "errorMessage": "User not found"}}


@pytest.mark.asyncio
async def test_update_user(client, user, issue_token, bearer):
    issued = await issue_token(user, "read write")

    response = await client.put(
        f"/api/v1/users/{user.id}",
        json={"user": {"first_name": "Grace"}},
        headers=bearer(issued),
    )

    assert response.status_code == 200
    assert response.json()["data"]["attributes"]["firstName"] == "Grace"


@pytest.mark.asyncio
async def test_patch_user_invalid(client, user, issue_token, bearer):
    issued = await issue_token(user, "read write")

    response = await client.patch(
        f"/api/v1/users/{user.id}",
        json={"user": {"last_name": ""}},
        headers=bearer(issued),
    )

    assert response.status_code == 422
    assert response.json()["data"]["errorMessage"] == {"last_name": ["can't be blank"]}


@pytest.mark.asyncio
async def test_update_requires_write_scope(client, user, issue_token, bearer):
    issued = await issue_token(user, "read")

    response = await client.put(
        f"/api/v1/users/{user.id}",
        json={"user": {"first_name": "Grace"}},
        headers=bearer(issued),
    )

    assert response.status_code == 403
    assert response.json()["data"]["errorName"] == "forbidden"


@pytest.mark.asyncio
async def test_delete_user(client, db, user, issue_token, bearer):
    other = await user_service.create_user(db, user_params(email="other@example.com"))
    issued = await issue_token(user, "read write")

    response = await client.delete(f"/api/v1/users/{other.id}", headers=bearer(issued))

    assert response.status_code == 204
    assert response.content == b""

    response = await client.get(f"/api/v1/users/{other.id}", headers=bearer(issued))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_revoked_token_rejected(client, db, user, issue_token, bearer):
    issued = await issue_token(user, "read")
    issued.record.revoke()
    await db.commit()

    response = await client.get("/api/v1/users", headers=bearer(issued))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_rejected(client, db, user, issue_token, bearer):
    issued = await issue_token(user, "read")
    issued.record.expires_in = 0
    await db.commit()

    response = await client.get("/api/v1/users", headers=bearer(issued))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_password_grant_then_read(client, user, application):
    response = await client.post(
        "/oauth/token",
        data={
            "grant_type": "password",
            "username": user.email,
            "password": PASSWORD,
            "client_id": application.uid,
            "client_secret": application.plaintext_secret,
        },
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = await client.get("/api/v1/users", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_correlation_id_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.json()["status"] == "healthy"
