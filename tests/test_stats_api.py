from datetime import timedelta

import pytest

from app.utils.time import utc_now
from tests.conftest import auth_headers, candidate_payload, set_candidate_times

pytestmark = pytest.mark.api


def add(client, user, n, **overrides):
    payload = candidate_payload(
        email=f"person{n}@example.com", phone=f"55500{n:05d}", full_name=f"Person {n}", **overrides
    )
    response = client.post("/candidates", headers=auth_headers(user), json=payload)
    assert response.status_code == 201, response.text
    return response.json()["candidate"]


def test_overview_for_super_admin(client, super_admin, sub_admin, other_sub_admin):
    add(client, sub_admin, 1)
    add(client, sub_admin, 2, stage="Round 2")
    add(client, other_sub_admin, 3, stage="Round 2")
    old = add(client, other_sub_admin, 4)
    set_candidate_times(old["id"], created_at=utc_now() - timedelta(days=100))

    response = client.get("/stats/overview", headers=auth_headers(super_admin))
    assert response.status_code == 200
    body = response.json()
    assert body["total_candidates"] == 4
    assert body["total_admins"] == 2
    assert body["this_month"] == 3
    assert body["this_week"] == 3
    assert sorted((row["name"], row["value"], row["color"]) for row in body["stage_distribution"]) == [
        ("Round 2", 2, "hsl(120, 60%, 50%)"),
        ("Screening", 2, "hsl(200, 70%, 50%)"),
    ]
    top = [(a["name"], a["count"]) for a in body["top_admins"]]
    assert sorted(top) == [("Olga Other", 2), ("Sam Sub", 2)]


def test_overview_is_super_admin_only(client, sub_admin):
    assert client.get("/stats/overview", headers=auth_headers(sub_admin)).status_code == 403


def test_my_stats_growth(client, sub_admin, other_sub_admin):
    add(client, sub_admin, 1)
    old = add(client, sub_admin, 2, stage="Offer")
    set_candidate_times(old["id"], created_at=utc_now() - timedelta(days=100))
    add(client, other_sub_admin, 3)

    body = client.get("/stats/me", headers=auth_headers(sub_admin)).json()
    assert body["total"] == 2
    assert body["this_month"] == 1
    assert body["this_week"] == 1
    assert body["total_growth"] == 100
    assert body["month_growth"] == 100
    assert body["week_growth"] == 100
    assert {row["name"]: row["value"] for row in body["stage_distribution"]} == {"Screening": 1, "Offer": 1}


def test_my_stats_empty(client, sub_admin):
    body = client.get("/stats/me", headers=auth_headers(sub_admin)).json()
    assert body["total"] == 0
    assert body["total_growth"] == 0
    assert body["stage_distribution"] == []


def test_admin_performance(client, super_admin, sub_admin):
    add(client, sub_admin, 1, stage="Interview")
    recent = add(client, sub_admin, 2, stage="Joined")
    set_candidate_times(recent["id"], created_at=utc_now() - timedelta(days=3))
    old = add(client, sub_admin, 3, stage="CV Shared")
    set_candidate_times(old["id"], created_at=utc_now() - timedelta(days=45))

    response = client.get(f"/stats/admins/{sub_admin.id}", headers=auth_headers(super_admin))
    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Sam Sub"
    assert body["total"] == 3
    assert body["today"] == 1
    assert len(body["daily_trend"]) == 30
    assert body["daily_trend"][-1]["count"] == 1
    assert sum(point["count"] for point in body["daily_trend"]) == 2
    assert body["avg_per_day"] == 0.1
    assert {c["stage"] for c in body["key_stage_candidates"]} == {"Interview", "Joined"}
    assert {row["name"] for row in body["stage_data"]} == {"Interview", "Joined", "CV Shared"}


def test_admin_performance_unknown_user(client, super_admin):
    response = client.get(
        "/stats/admins/8d3c1b0e-2f7b-4b6e-9f1e-0e5b3c7a9d21", headers=auth_headers(super_admin)
    )
    assert response.status_code == 404


def test_day_planner(client, sub_admin, other_sub_admin):
    add(client, sub_admin, 1, stage="Interview")
    stale = add(client, sub_admin, 2, stage="CV Shared")
    set_candidate_times(stale["id"], updated_at=utc_now() - timedelta(days=10))
    add(client, sub_admin, 3, stage="Joined")
    add(client, other_sub_admin, 4, stage="Round 1")

    body = client.get("/stats/day-planner", headers=auth_headers(sub_admin)).json()
    assert [item["stage"] for item in body["urgent"]] == ["Interview"]
    assert body["urgent"][0]["action"] == "Prepare & follow up"
    assert [item["stage"] for item in body["follow_up"]] == ["CV Shared"]
    assert body["follow_up"][0]["days_since_update"] == 10
    assert body["updated_today"] == 2
    assert body["stale"] == 1
    assert body["active"] == 2
    assert body["total"] == 3
    assert body["conversion_rate"] == 33
    assert [g["label"] for g in body["groups"]] == ["Screening", "Interview", "Joining"]
