"""Tests for registration, login and token handling."""
from app.core.security import create_token_pair
from app.services.user_auth import slugify

REGISTRATION = {"name": "Jane Doe", "email": "jane@example.com", "password": "secret123"}


def register_and_login(client):
    client.post("/auth/register", json=REGISTRATION)
    response = client.post(
        "/auth/login", json={"email": REGISTRATION["email"], "password": REGISTRATION["password"]}
    )
    return response.json()


class TestSlugify:

    def test_slugify(self):
        assert slugify("Jane Doe") == "jane-doe"
        assert slugify("  Ünïcode & Co!! ") == "n-code-co"
        assert slugify("!!!") == "user"


class TestRegistration:

    def test_register(self, anonymous_client):
        response = anonymous_client.post("/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        data = response.json()
        assert data["handle"] == "jane-doe"
        assert data["email"] == "jane@example.com"
        assert "password" not in data and "password_hash" not in data

    def test_duplicate_email(self, anonymous_client):
        anonymous_client.post("/auth/register", json=REGISTRATION)
        response = anonymous_client.post("/auth/register", json=REGISTRATION)
        assert response.status_code == 409

    def test_same_name_gets_distinct_handle(self, anonymous_client):
        anonymous_client.post("/auth/register", json=REGISTRATION)
        response = anonymous_client.post(
            "/auth/register", json={**REGISTRATION, "email": "jane2@example.com"}
        )
        assert response.json()["handle"] == "jane-doe-1"

    def test_weak_password(self, anonymous_client):
        response = anonymous_client.post(
            "/auth/register", json={**REGISTRATION, "password": "onlyletters"}
        )
        assert response.status_code == 422

    def test_registration_creates_empty_profile(self, anonymous_client):
        tokens = register_and_login(anonymous_client)
        response = anonymous_client.get(
            "/profile/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
        )
        assert response.status_code == 200
        assert response.json()["profile"]["country"] is None


class TestLogin:

    def test_login_and_me(self, anonymous_client):
        tokens = register_and_login(anonymous_client)

        assert tokens["token_type"] == "bearer"
        me = anonymous_client.get(
            "/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["email"] == "jane@example.com"

    def test_wrong_password(self, anonymous_client):
        anonymous_client.post("/auth/register", json=REGISTRATION)
        response = anonymous_client.post(
            "/auth/login", json={"email": REGISTRATION["email"], "password": "wrong1234"}
        )

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_refresh(self, anonymous_client):
        tokens = register_and_login(anonymous_client)

        response = anonymous_client.post(
            "/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )

        assert response.status_code == 200
        assert response.json()["user"]["handle"] == "jane-doe"

    def test_refresh_token_is_not_an_access_token(self, anonymous_client):
        tokens = register_and_login(anonymous_client)

        response = anonymous_client.get(
            "/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )
        assert response.status_code == 401

    def test_token_for_unknown_user(self, anonymous_client):
        access_token, _ = create_token_pair(12345)

        response = anonymous_client.get(
            "/auth/me", headers={"Authorization": f"Bearer {access_token}"}
        )
        assert response.status_code == 401

    def test_garbage_token(self, anonymous_client):
        response = anonymous_client.get("/auth/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
