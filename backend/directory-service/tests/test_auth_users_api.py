from staffdir.core.security import create_access_token


async def test_login_then_profile(client, seed):
    user_id = await seed.user("admin", "s3cret")

    resp = await client.post(
        "/api/auth/login", json={"username": "admin", "password": "s3cret"}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["user"] == {"id": user_id, "username": "admin", "role": "admin"}

    profile = await client.get(
        "/api/auth/profile", headers={"Authorization": f"Bearer {body['token']}"}
    )
    assert profile.status_code == 200
    assert profile.json()["user"] == {"userId": user_id, "username": "admin", "role": "admin"}


async def test_login_with_wrong_password(client, seed):
    await seed.user("admin", "s3cret")

    resp = await client.post(
        "/api/auth/login", json={"username": "admin", "password": "nope"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid credentials"


async def test_login_with_unknown_user(client):
    resp = await client.post(
        "/api/auth/login", json={"username": "ghost", "password": "nope"}
    )
    assert resp.status_code == 401


async def test_login_requires_both_fields(client):
    resp = await client.post("/api/auth/login", json={"username": "admin"})
    assert resp.status_code == 400


async def test_profile_requires_token(client):
    resp = await client.get("/api/auth/profile")
    assert resp.status_code == 401


async def test_users_require_admin_role(client):
    token = create_access_token(7, "viewer", "viewer")

    resp = await client.get(
        "/api/users", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


async def test_create_and_list_users(client, auth_headers):
    created = await client.post(
        "/api/users",
        json={"username": "ops", "password": "pw"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    assert created.json()["username"] == "ops"
    assert created.json()["role"] == "admin"

    duplicate = await client.post(
        "/api/users",
        json={"username": "ops", "password": "other"},
        headers=auth_headers,
    )
    assert duplicate.status_code == 409

    listing = await client.get("/api/users", headers=auth_headers)
    assert listing.status_code == 200
    rows = listing.json()
    assert [row["username"] for row in rows] == ["ops"]
    assert rows[0]["createdAt"]


async def test_create_user_requires_password(client, auth_headers):
    resp = await client.post(
        "/api/users", json={"username": "ops"}, headers=auth_headers
    )
    assert resp.status_code == 400
