"""
Tests for the HTTP API: feed and radius search, job posting with
moderation, favorites, profiles and admin user management.
"""

import pytest

from conftest import ADMIN_UID, OTHER_UID, USER_UID

NEW_JOB = {
    "title": "QA Engineer",
    "company": "Moniepoint",
    "location": "Lagos",
    "category": "IT",
    "salary": "350k",
    "description": "Own the regression suite.",
    "application_link": "https://example.com/jobs/qa",
}


def feed_titles(response):
    return [job["title"] for job in response.get_json()["jobs"]]


@pytest.fixture
def job_ids(app):
    return app.config["SEEDED_JOB_IDS"]


# ===== FEED =====

def test_feed_lists_approved_jobs(client):
    response = client.get("/api/feed")
    payload = response.get_json()

    assert response.status_code == 200
    assert payload["count"] == 4
    assert payload["full_scan"] is True
    assert payload["radius"]["state"] == "inactive"
    assert "Data Analyst" not in feed_titles(response)


def test_feed_location_and_salary(client):
    response = client.get("/api/feed", query_string={"location": "Lagos", "salary": "300k+"})
    assert feed_titles(response) == ["Backend Engineer"]
    assert response.get_json()["full_scan"] is False


def test_feed_text_search(client):
    response = client.get("/api/feed?q=andela")
    assert feed_titles(response) == ["Frontend Engineer"]


def test_feed_bad_salary_bucket(client):
    response = client.get("/api/feed?salary=lots")
    assert response.status_code == 400
    assert "Unrecognized salary bucket" in response.get_json()["error"]


def test_radius_search_and_reset(client):
    headers = {"X-Session-Id": "map-tab"}

    response = client.post("/api/feed/center", json={"lon": 3.42, "lat": 6.44}, headers=headers)
    assert response.get_json()["radius"]["state"] == "center_set"

    response = client.post("/api/feed/radius", json={"km": 20}, headers=headers)
    payload = response.get_json()
    assert feed_titles(response) == ["Backend Engineer", "Accounts Officer"]
    assert payload["radius"]["state"] == "active"
    assert payload["map"]["center"] == {"lon": 3.42, "lat": 6.44, "radius_km": 20.0}

    # The radius stays active for later feed reads in the same session
    response = client.get("/api/feed?category=Finance", headers=headers)
    assert feed_titles(response) == ["Accounts Officer"]

    response = client.post("/api/feed/reset", headers=headers)
    payload = response.get_json()
    assert payload["count"] == 4
    assert payload["radius"]["state"] == "inactive"
    assert payload["radius"]["lon"] == 3.3792


def test_sessions_are_independent(client):
    client.post("/api/feed/center", json={"lon": 3.42, "lat": 6.44},
                headers={"X-Session-Id": "one"})
    client.post("/api/feed/radius", json={"km": 5}, headers={"X-Session-Id": "one"})

    response = client.get("/api/feed", headers={"X-Session-Id": "two"})
    assert response.get_json()["count"] == 4


def test_radius_with_filters(client):
    headers = {"X-Session-Id": "filters"}
    client.post("/api/feed/center", json={"lon": 3.42, "lat": 6.44}, headers=headers)

    response = client.post(
        "/api/feed/radius",
        json={"km": 20, "filters": {"salary": "300k+"}},
        headers=headers,
    )
    assert feed_titles(response) == ["Backend Engineer"]


@pytest.mark.parametrize("km", [0, -1, "far"])
def test_radius_rejects_bad_km(client, km):
    response = client.post("/api/feed/radius", json={"km": km})
    assert response.status_code == 400


def test_radius_with_bad_filters_leaves_state_unchanged(client):
    headers = {"X-Session-Id": "bad-filters"}
    response = client.post(
        "/api/feed/radius",
        json={"km": 20, "filters": {"salary": "lots"}},
        headers=headers,
    )
    assert response.status_code == 400

    payload = client.get("/api/feed", headers=headers).get_json()
    assert payload["radius"]["state"] == "inactive"
    assert payload["count"] == 4


def test_locate_with_bad_km_leaves_state_unchanged(client):
    headers = {"X-Session-Id": "bad-km"}
    response = client.post(
        "/api/feed/locate",
        json={"lon": 7.49, "lat": 9.07, "apply": True, "km": "far"},
        headers=headers,
    )
    assert response.status_code == 400

    radius = client.get("/api/feed", headers=headers).get_json()["radius"]
    assert radius["state"] == "inactive"
    assert radius["lon"] == 3.3792


def test_anonymous_callers_do_not_share_radius(client):
    client.post("/api/feed/center", json={"lon": 3.42, "lat": 6.44})
    client.post("/api/feed/radius", json={"km": 5})

    payload = client.get("/api/feed").get_json()
    assert payload["radius"]["state"] == "inactive"
    assert payload["count"] == 4


def test_center_rejects_bad_coordinates(client):
    response = client.post("/api/feed/center", json={"lon": 500, "lat": 6.44})
    assert response.status_code == 400


def test_locate_with_client_position(client):
    headers = {"X-Session-Id": "locate"}
    response = client.post("/api/feed/locate", json={"lon": 3.42, "lat": 6.44}, headers=headers)
    payload = response.get_json()

    assert payload["located"] is True
    assert payload["radius"]["state"] == "center_set"


def test_locate_and_apply(client):
    response = client.post(
        "/api/feed/locate",
        json={"lon": 7.49, "lat": 9.07, "apply": True, "km": 30},
    )
    assert feed_titles(response) == ["Product Designer"]


def test_locate_failure_keeps_state(client):
    """Test that an unavailable position leaves the radius search alone."""
    response = client.post("/api/feed/locate", json={})
    payload = response.get_json()

    assert response.status_code == 200
    assert payload["located"] is False
    assert payload["radius"]["state"] == "inactive"


def test_filter_options(client):
    payload = client.get("/api/filters/options").get_json()

    assert payload["categories"] == ["IT", "Finance", "Marketing"]
    assert payload["salary_buckets"][1] == {"value": "300k+", "label": "₦300,000+"}
    assert payload["default_center"] == {"lon": 3.3792, "lat": 6.5244}
    assert payload["debounce_ms"] == 300


# ===== JOBS AND MODERATION =====

def test_posting_requires_login(client):
    response = client.post("/api/jobs", json=NEW_JOB)
    assert response.status_code == 401


def test_posting_validation_error(client, auth_headers):
    response = client.post("/api/jobs", json={"title": "Half a job"}, headers=auth_headers())
    assert response.status_code == 400
    assert "Missing required fields" in response.get_json()["error"]


def test_new_posting_waits_for_moderation(client, auth_headers):
    response = client.post("/api/jobs", json=NEW_JOB, headers=auth_headers(OTHER_UID))
    assert response.status_code == 201
    payload = response.get_json()
    assert payload["approved"] is False
    job_id = payload["job_id"]

    assert "QA Engineer" not in feed_titles(client.get("/api/feed"))

    # Hidden from strangers, visible to the poster and admins
    assert client.get(f"/api/jobs/{job_id}").status_code == 404
    assert client.get(f"/api/jobs/{job_id}", headers=auth_headers(USER_UID)).status_code == 404
    assert client.get(f"/api/jobs/{job_id}", headers=auth_headers(OTHER_UID)).status_code == 200
    assert client.get(f"/api/jobs/{job_id}", headers=auth_headers(ADMIN_UID)).status_code == 200

    response = client.post(f"/api/admin/jobs/{job_id}/approve", headers=auth_headers(ADMIN_UID))
    assert response.get_json()["approved"] is True
    assert feed_titles(client.get("/api/feed"))[0] == "QA Engineer"


def test_reject_hides_job(client, auth_headers, job_ids):
    job_id = job_ids["Backend Engineer"]
    client.post(f"/api/admin/jobs/{job_id}/reject", headers=auth_headers(ADMIN_UID))
    assert "Backend Engineer" not in feed_titles(client.get("/api/feed"))


def test_job_detail_saved_flag(client, auth_headers, job_ids):
    job_id = job_ids["Backend Engineer"]
    payload = client.get(f"/api/jobs/{job_id}", headers=auth_headers(OTHER_UID)).get_json()
    assert payload["saved"] is False

    client.put(f"/api/favorites/{job_id}", headers=auth_headers(OTHER_UID))
    payload = client.get(f"/api/jobs/{job_id}", headers=auth_headers(OTHER_UID)).get_json()
    assert payload["saved"] is True


def test_owner_can_edit(client, auth_headers, job_ids):
    job_id = job_ids["Backend Engineer"]
    response = client.patch(f"/api/jobs/{job_id}", json={"salary": "₦700,000"},
                            headers=auth_headers(USER_UID))
    assert response.status_code == 200
    assert response.get_json()["salary"] == "₦700,000"


def test_non_owner_cannot_edit_or_delete(client, auth_headers, job_ids):
    job_id = job_ids["Backend Engineer"]
    headers = auth_headers(OTHER_UID)

    assert client.patch(f"/api/jobs/{job_id}", json={"title": "x"}, headers=headers).status_code == 403
    assert client.delete(f"/api/jobs/{job_id}", headers=headers).status_code == 403


def test_admin_can_delete(client, auth_headers, job_ids):
    job_id = job_ids["Product Designer"]
    response = client.delete(f"/api/jobs/{job_id}", headers=auth_headers(ADMIN_UID))
    assert response.status_code == 200
    assert client.get(f"/api/jobs/{job_id}").status_code == 404


def test_missing_job(client):
    response = client.get("/api/jobs/does-not-exist")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Job does-not-exist not found"


# ===== ADMIN =====

def test_admin_routes_require_admin(client, auth_headers):
    assert client.get("/api/admin/jobs").status_code == 401
    assert client.get("/api/admin/jobs", headers=auth_headers(USER_UID)).status_code == 403


def test_moderation_queue(client, auth_headers):
    payload = client.get("/api/admin/jobs", headers=auth_headers(ADMIN_UID)).get_json()
    assert payload["pending"] == 1
    assert len(payload["jobs"]) == 5


def test_admin_delete_route(client, auth_headers, job_ids):
    job_id = job_ids["Accounts Officer"]
    response = client.delete(f"/api/admin/jobs/{job_id}", headers=auth_headers(ADMIN_UID))
    assert response.get_json() == {"success": True}
    assert "Accounts Officer" not in feed_titles(client.get("/api/feed"))


def test_block_user_stops_posting(client, auth_headers):
    response = client.post(f"/api/admin/users/{OTHER_UID}/block", json={"status": True},
                           headers=auth_headers(ADMIN_UID))
    assert response.get_json()["success"] is True

    response = client.post("/api/jobs", json=NEW_JOB, headers=auth_headers(OTHER_UID))
    assert response.status_code == 403

    users = client.get("/api/admin/users", headers=auth_headers(ADMIN_UID)).get_json()["users"]
    assert {u["uid"]: u["is_blocked"] for u in users}[OTHER_UID] is True


def test_admin_cannot_block_self(client, auth_headers):
    response = client.post(f"/api/admin/users/{ADMIN_UID}/block", json={"status": True},
                           headers=auth_headers(ADMIN_UID))
    assert response.status_code == 403


def test_block_requires_boolean_status(client, auth_headers):
    response = client.post(f"/api/admin/users/{OTHER_UID}/block", json={"status": "yes"},
                           headers=auth_headers(ADMIN_UID))
    assert response.status_code == 400


# ===== FAVORITES AND PROFILES =====

def test_favorites_flow(client, auth_headers, job_ids):
    headers = auth_headers(OTHER_UID)
    job_id = job_ids["Frontend Engineer"]

    assert client.put(f"/api/favorites/{job_id}", headers=headers).get_json() == {"saved": True}
    assert client.get(f"/api/favorites/{job_id}", headers=headers).get_json() == {"saved": True}
    assert feed_titles(client.get("/api/favorites", headers=headers)) == ["Frontend Engineer"]

    assert client.delete(f"/api/favorites/{job_id}", headers=headers).get_json() == {"saved": False}
    assert client.get("/api/favorites", headers=headers).get_json() == {"jobs": []}


def test_cannot_save_unapproved_job(client, auth_headers, job_ids):
    response = client.put(f"/api/favorites/{job_ids['Data Analyst']}",
                          headers=auth_headers(OTHER_UID))
    assert response.status_code == 404


def test_favorites_require_login(client):
    assert client.get("/api/favorites").status_code == 401


def test_profile_sync(client, auth_headers):
    headers = auth_headers("new-user")
    assert client.get("/api/users/me", headers=headers).status_code == 404

    response = client.post("/api/users/me", json={"email": "new@example.com",
                                                  "display_name": "Ada"}, headers=headers)
    assert response.get_json()["display_name"] == "Ada"

    payload = client.get("/api/users/me", headers=headers).get_json()
    assert payload["is_admin"] is False
    assert payload["is_blocked"] is False


def test_profile_sync_requires_email(client, auth_headers):
    response = client.post("/api/users/me", json={}, headers=auth_headers("new-user"))
    assert response.status_code == 400


# ===== MISC =====

def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["checks"]["database"]["approved_jobs"] == 4


def test_unknown_api_path(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}
