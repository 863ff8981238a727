"""Integration tests for the admin back office and culture submissions."""

import pytest

from backend.app.db.models import HeritageSite
from backend.app.metrics import get_metrics


SITE = {
    "name": "Prinsep Ghat",
    "description": "Palladian porch on the Hooghly",
    "category": "Monument",
    "latitude": 22.5552,
    "longitude": 88.3304,
    "address": "Strand Road, Kolkata",
    "entry_fee": 0,
}


@pytest.mark.integration
class TestAdminAuth:
    def test_login_status_logout(self, client) -> None:
        login = client.post("/api/admin/auth", json={"password": "admin123"})
        assert login.status_code == 200
        token = login.json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert client.get("/api/admin/auth", headers=headers).json() == {
            "success": True,
            "valid": True,
        }

        assert client.delete("/api/admin/auth", headers=headers).json() == {"message": "Logged out"}
        assert client.get("/api/admin/auth", headers=headers).json()["valid"] is False
        assert client.get("/api/admin/stats", headers=headers).status_code == 401

    def test_wrong_password(self, client) -> None:
        response = client.post("/api/admin/auth", json={"password": "guess"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}

    def test_missing_token(self, client) -> None:
        response = client.get("/api/admin/stats")

        assert response.status_code == 401
        assert response.json() == {"error": "Admin authentication required"}

    def test_user_token_is_not_admin(self, client, test_user, auth_headers) -> None:
        response = client.get("/api/admin/stats", headers=auth_headers(test_user))

        assert response.status_code == 401


@pytest.mark.integration
class TestAdminContent:
    def test_stats(self, client, admin_headers, test_user, heritage_sites, restaurants, badges) -> None:
        stats = client.get("/api/admin/stats", headers=admin_headers).json()["stats"]

        assert stats["users"] == 1
        assert stats["heritage_sites"] == 6
        assert stats["restaurants"] == 6
        assert stats["badges"] == 5
        assert stats["visits"] == 0
        assert stats["pending_culture_submissions"] == 0

    def test_site_crud(self, client, admin_headers, test_session) -> None:
        created = client.post("/api/admin/sites", json=SITE, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["message"] == "Site created successfully"
        site_id = created.json()["site"]["site_id"]

        listing = client.get("/api/admin/sites", headers=admin_headers).json()
        assert listing["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

        updated = client.put(
            f"/api/admin/sites/{site_id}", json={"entry_fee": 20}, headers=admin_headers
        ).json()
        assert updated["site"]["entry_fee"] == 20
        assert updated["site"]["name"] == "Prinsep Ghat"

        deleted = client.delete(f"/api/admin/sites/{site_id}", headers=admin_headers)
        assert deleted.json() == {"message": "Site deleted successfully"}
        assert test_session.query(HeritageSite).count() == 0

    def test_site_validation(self, client, admin_headers) -> None:
        response = client.post(
            "/api/admin/sites", json={**SITE, "latitude": 120}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("latitude:")

    def test_badge_requirement_type_checked(self, client, admin_headers) -> None:
        response = client.post(
            "/api/admin/badges",
            json={
                "name": "Night Owl",
                "description": "Visit after dark",
                "requirement_type": "nights",
                "requirement_value": 3,
            },
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_delete_unknown_restaurant(self, client, admin_headers) -> None:
        response = client.delete(
            "/api/admin/restaurants/00000000-0000-0000-0000-000000000000", headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Restaurant not found"}

    def test_delete_user(self, client, admin_headers, test_user, other_user, auth_headers) -> None:
        client.post(f"/api/matches/{other_user.user_id}/like", headers=auth_headers(test_user))

        response = client.delete(f"/api/admin/users/{test_user.user_id}", headers=admin_headers)

        assert response.json() == {"message": "User deleted successfully"}
        assert client.get(f"/api/users/{test_user.user_id}").status_code == 404
        users = client.get("/api/admin/users", headers=admin_headers).json()
        assert [u["email"] for u in users["users"]] == ["vikram@example.com"]

    def test_user_list_counts(
        self, client, admin_headers, test_user, trip, heritage_sites, restaurants, badges, auth_headers
    ) -> None:
        headers = auth_headers(test_user)
        client.post(f"/api/heritage-sites/{heritage_sites[0].site_id}/visit", headers=headers)
        client.post(
            f"/api/restaurants/{restaurants[0].restaurant_id}/reviews",
            json={"rating": 5, "text": "Flawless fish fry"},
            headers=headers,
        )

        users = client.get("/api/admin/users", headers=admin_headers).json()["users"]

        assert len(users) == 1
        assert users[0]["email"] == "priya@example.com"
        assert (users[0]["badges"], users[0]["trips"], users[0]["reviews"]) == (3, 1, 1)


@pytest.mark.integration
class TestCultureSubmissions:
    def _submit(self, client, headers):
        return client.post(
            "/api/culture",
            json={
                "title": "Sindoor Khela",
                "description": "Vijaya Dashami at Bagbazar",
                "image_url": "https://example.com/sindoor.jpg",
            },
            headers=headers,
        )

    def test_submit_and_list(self, client, test_user, auth_headers) -> None:
        response = self._submit(client, auth_headers(test_user))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Submission received and pending review"
        assert body["submission"]["status"] == "pending"
        assert body["submission"]["reward_points"] == 50

        mine = client.get("/api/culture", headers=auth_headers(test_user)).json()
        assert [s["title"] for s in mine["submissions"]] == ["Sindoor Khela"]

    def test_approve_awards_points_once(
        self, client, test_user, auth_headers, admin_headers
    ) -> None:
        submission_id = self._submit(client, auth_headers(test_user)).json()["submission"][
            "submission_id"
        ]

        pending = client.get(
            "/api/admin/culture", params={"status": "pending"}, headers=admin_headers
        ).json()
        assert pending["pagination"]["total"] == 1

        approved = client.post(
            f"/api/admin/culture/{submission_id}/approve", headers=admin_headers
        )
        assert approved.status_code == 200
        assert approved.json()["submission"]["status"] == "approved"
        assert get_metrics().snapshot()["culture_approvals"] == 1

        again = client.post(f"/api/admin/culture/{submission_id}/approve", headers=admin_headers)
        assert again.status_code == 409
        assert again.json() == {"error": "Submission already approved"}

        me = client.get("/api/auth/me", headers=auth_headers(test_user)).json()["user"]
        assert me["total_points"] == 50

    def test_reject_requires_note(self, client, test_user, auth_headers, admin_headers) -> None:
        submission_id = self._submit(client, auth_headers(test_user)).json()["submission"][
            "submission_id"
        ]
        url = f"/api/admin/culture/{submission_id}/reject"

        assert client.post(url, json={}, headers=admin_headers).status_code == 400

        rejected = client.post(url, json={"note": "Blurry photo"}, headers=admin_headers).json()
        assert rejected["message"] == "Submission rejected"
        assert rejected["submission"]["admin_note"] == "Blurry photo"

        me = client.get("/api/auth/me", headers=auth_headers(test_user)).json()["user"]
        assert me["total_points"] == 0
