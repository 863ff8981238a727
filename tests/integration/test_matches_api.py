"""Integration tests for companion matching."""

import pytest


@pytest.mark.integration
class TestMatchesAPI:
    def test_candidates(self, client, test_user, other_user, auth_headers) -> None:
        body = client.get("/api/matches", headers=auth_headers(test_user)).json()

        assert body["total"] == 1
        candidate = body["matches"][0]
        assert candidate["user"]["full_name"] == "Vikram Patel"
        assert candidate["compatibility_score"] == 28
        assert candidate["common_interests"] == ["Photography"]
        assert "email" not in candidate["user"]

    def test_like_then_like_back_matches(self, client, test_user, other_user, auth_headers) -> None:
        first = client.post(
            f"/api/matches/{other_user.user_id}/like", headers=auth_headers(test_user)
        ).json()
        assert first["message"] == "Like recorded"
        assert first["matched"] is False

        second = client.post(
            f"/api/matches/{test_user.user_id}/like", headers=auth_headers(other_user)
        ).json()
        assert second["message"] == "It's a match!"
        assert second["matched"] is True

        mutual = client.get("/api/matches/mutual", headers=auth_headers(test_user)).json()
        assert mutual["total"] == 1
        assert mutual["matches"][0]["user"]["user_id"] == str(other_user.user_id)

        remaining = client.get("/api/matches", headers=auth_headers(test_user)).json()
        assert remaining["total"] == 0

    def test_pass_hides_candidate(self, client, test_user, other_user, auth_headers) -> None:
        response = client.post(
            f"/api/matches/{other_user.user_id}/pass", headers=auth_headers(test_user)
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Pass recorded"}
        assert client.get("/api/matches", headers=auth_headers(test_user)).json()["total"] == 0

    def test_like_self(self, client, test_user, auth_headers) -> None:
        response = client.post(
            f"/api/matches/{test_user.user_id}/like", headers=auth_headers(test_user)
        )

        assert response.status_code == 400

    def test_like_unknown_user(self, client, test_user, auth_headers) -> None:
        response = client.post(
            "/api/matches/00000000-0000-0000-0000-000000000000/like",
            headers=auth_headers(test_user),
        )

        assert response.status_code == 404

    def test_requires_auth(self, client) -> None:
        assert client.get("/api/matches").status_code == 401
