"""Integration tests for registration, login and profiles."""

import pytest


def _register(client, **overrides):
    payload = {
        "email": "Sneha@Example.com",
        "password": "password123",
        "full_name": "Sneha Gupta",
        "age": 24,
        "gender": "Female",
        "interests": ["Culture", "Museums"],
        "travel_style": "cultural",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


@pytest.mark.integration
class TestAuthAPI:
    def test_register(self, client) -> None:
        response = _register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "sneha@example.com"
        assert body["user"]["total_points"] == 0
        assert "password_hash" not in body["user"]

    def test_duplicate_email(self, client) -> None:
        _register(client)

        response = _register(client, email="sneha@example.com")

        assert response.status_code == 409
        assert response.json() == {"error": "User with this email already exists"}

    def test_short_password(self, client) -> None:
        response = _register(client, password="short")

        assert response.status_code == 400
        assert "at least 8" in response.json()["error"]

    def test_invalid_email(self, client) -> None:
        response = _register(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["error"].startswith("email:")

    def test_login_and_me(self, client) -> None:
        _register(client)

        login = client.post(
            "/api/auth/login", json={"email": "sneha@example.com", "password": "password123"}
        )
        assert login.status_code == 200
        tokens = login.json()
        assert tokens["token_type"] == "bearer"
        assert tokens["expires_in"] == 900

        me = client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["user"]["full_name"] == "Sneha Gupta"

        refreshed = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert refreshed.status_code == 200
        assert refreshed.json()["access_token"]

    def test_wrong_password(self, client) -> None:
        _register(client)

        response = client.post(
            "/api/auth/login", json={"email": "sneha@example.com", "password": "password999"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_me_requires_token(self, client) -> None:
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_access_token_cannot_refresh(self, client, test_user, auth_headers) -> None:
        access = auth_headers(test_user)["Authorization"].split()[1]

        response = client.post("/api/auth/refresh", json={"refresh_token": access})

        assert response.status_code == 401


@pytest.mark.integration
class TestUsersAPI:
    def test_public_profile(self, client, test_user) -> None:
        response = client.get(f"/api/users/{test_user.user_id}")

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["full_name"] == "Priya Sharma"
        assert user["total_points"] == 0
        assert "email" not in user

    def test_unknown_user(self, client) -> None:
        response = client.get("/api/users/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404

    def test_update_own_profile(self, client, test_user, auth_headers) -> None:
        response = client.put(
            f"/api/users/{test_user.user_id}",
            json={"bio": "Chasing terracotta temples", "interests": ["Temples"]},
            headers=auth_headers(test_user),
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["bio"] == "Chasing terracotta temples"
        assert user["interests"] == ["Temples"]
        assert user["full_name"] == "Priya Sharma"

    def test_cannot_update_someone_else(self, client, test_user, other_user, auth_headers) -> None:
        response = client.put(
            f"/api/users/{other_user.user_id}",
            json={"bio": "hijacked"},
            headers=auth_headers(test_user),
        )

        assert response.status_code == 403
        assert response.json() == {"error": "You can only update your own profile"}

    def test_user_badges_split(self, client, test_user, badges, heritage_sites, auth_headers) -> None:
        for site in heritage_sites[:5]:
            client.post(f"/api/heritage-sites/{site.site_id}/visit", headers=auth_headers(test_user))

        body = client.get(f"/api/users/{test_user.user_id}/badges").json()

        assert body["total_unlocked"] == 1
        assert body["unlocked"][0]["badge"]["name"] == "The Bhadralok"
        assert [b["badge"]["name"] for b in body["in_progress"]] == ["Heritage Master"]
        assert body["in_progress"][0]["progress"] == 5
