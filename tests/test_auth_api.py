"""Tests for signup, login, logout and session handling on protected routes."""

import pytest
from httpx import AsyncClient

VALID_PASSWORD = "secret1!"

SIGNUP_PAYLOAD = {
    "name": "Alice",
    "username": "alice",
    "email": "alice@example.com",
    "password": VALID_PASSWORD,
}


@pytest.mark.asyncio
class TestSignup:
    """Test account registration."""

    async def test_signup_creates_user_and_session(self, client: AsyncClient, test_db):
        response = await client.post("/api/v1/auth/signup", json=SIGNUP_PAYLOAD)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Registration & Login successful"
        assert data["token"]
        assert data["user"]["username"] == "alice"
        assert data["user"]["role"] == "user"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

        assert await test_db.count_users() == 1

    async def test_signup_sets_http_only_cookie(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/signup", json=SIGNUP_PAYLOAD)

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"token={response.json()['token']}")
        assert "httponly" in cookie.lower()
        assert "max-age=3600" in cookie.lower()
        assert "samesite=lax" in cookie.lower()

    async def test_signup_stores_password_hashed(self, client: AsyncClient, test_db):
        response = await client.post("/api/v1/auth/signup", json=SIGNUP_PAYLOAD)

        stored = await test_db.get_password_hash(response.json()["user"]["id"])
        assert stored != VALID_PASSWORD
        assert stored.startswith("$2")

    async def test_signup_token_authenticates(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/signup", json=SIGNUP_PAYLOAD)
        token = response.json()["token"]
        client.cookies.clear()

        response = await client.get(
            "/api/v1/user/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    async def test_duplicate_username_rejected(self, client: AsyncClient, make_user):
        await make_user("alice")

        response = await client.post(
            "/api/v1/auth/signup", json={**SIGNUP_PAYLOAD, "email": "other@example.com"}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Username already exists"

    async def test_duplicate_email_rejected(self, client: AsyncClient, make_user):
        await make_user("alice")

        response = await client.post(
            "/api/v1/auth/signup", json={**SIGNUP_PAYLOAD, "username": "alice2"}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Email already exists"

    async def test_invalid_payload_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signup", json={**SIGNUP_PAYLOAD, "password": "weakpass"}
        )

        assert response.status_code == 422

    async def test_multibyte_password_over_byte_limit(self, client: AsyncClient, test_db):
        response = await client.post(
            "/api/v1/auth/signup", json={**SIGNUP_PAYLOAD, "password": "1!" + "é" * 70}
        )

        assert response.status_code == 422
        assert await test_db.count_users() == 0

    async def test_multibyte_password_signup_and_login(self, client: AsyncClient):
        password = "1!" + "é" * 35

        response = await client.post(
            "/api/v1/auth/signup", json={**SIGNUP_PAYLOAD, "password": password}
        )
        assert response.status_code == 201

        response = await client.post(
            "/api/v1/auth/login", json={"email": "alice@example.com", "password": password}
        )
        assert response.status_code == 200


@pytest.mark.asyncio
class TestLogin:
    """Test email and password login."""

    async def test_login_success(self, client: AsyncClient, make_user):
        await make_user("alice")

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": VALID_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["token"]
        assert "token=" in response.headers["set-cookie"]

    async def test_login_email_case_insensitive(self, client: AsyncClient, make_user):
        await make_user("alice")

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "ALICE@example.com", "password": VALID_PASSWORD},
        )

        assert response.status_code == 200

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": VALID_PASSWORD},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    async def test_login_wrong_password(self, client: AsyncClient, make_user):
        await make_user("alice")

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "wrong1!pass"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"
        assert "set-cookie" not in response.headers


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    """Test that logout expires the session cookie."""
    response = await client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"
    cookie = response.headers["set-cookie"].lower()
    assert cookie.startswith("token=")
    assert "max-age=0" in cookie


@pytest.mark.asyncio
class TestProtectedRoutes:
    """Test the authentication chain as seen through the HTTP surface."""

    async def test_no_token(self, client: AsyncClient):
        response = await client.get("/api/v1/user/profile")

        assert response.status_code == 401
        assert response.json() == {"detail": "No credential supplied", "code": "unauthenticated"}
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/user/profile", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    async def test_token_expires_after_one_hour(self, client: AsyncClient, login_as, clock):
        _, headers = await login_as("alice")

        clock.advance(minutes=59, seconds=59)
        response = await client.get("/api/v1/user/profile", headers=headers)
        assert response.status_code == 200

        clock.advance(seconds=1)
        response = await client.get("/api/v1/user/profile", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"detail": "Token Expired", "code": "token_expired"}

    async def test_token_of_deleted_user_rejected(self, client: AsyncClient, login_as, test_db):
        user, headers = await login_as("alice")
        await test_db.delete_user(user["id"])

        response = await client.get("/api/v1/user/profile", headers=headers)

        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"

    async def test_cookie_authenticates(self, client: AsyncClient, make_user, authenticator):
        user = await make_user("alice")
        client.cookies.set("token", authenticator.issue(user["id"]))

        response = await client.get("/api/v1/user/profile")

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user["id"]

    async def test_cookie_takes_precedence_over_header(
        self, client: AsyncClient, make_user, authenticator
    ):
        alice = await make_user("alice")
        bob = await make_user("bob")
        client.cookies.set("token", authenticator.issue(alice["id"]))

        response = await client.get(
            "/api/v1/user/profile",
            headers={"Authorization": f"Bearer {authenticator.issue(bob['id'])}"},
        )

        assert response.json()["user"]["id"] == alice["id"]
