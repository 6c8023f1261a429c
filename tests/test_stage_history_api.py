import asyncio

import pytest
from sqlalchemy import delete

from app.core.permissions import Roles
from app.db.session import get_async_session_context
from app.models import User
from tests.conftest import auth_headers, candidate_payload, create_user

pytestmark = pytest.mark.api


def new_candidate(client, user):
    response = client.post("/candidates", headers=auth_headers(user), json=candidate_payload())
    return response.json()["candidate"]


def test_any_stage_can_follow_any_other(client, sub_admin):
    candidate = new_candidate(client, sub_admin)
    headers = auth_headers(sub_admin)

    for stage in ("Joined", "Screening", "Offer Rejected", "Round 3"):
        response = client.post(f"/candidates/{candidate['id']}/stage", headers=headers, json={"new_stage": stage})
        assert response.status_code == 200
        assert response.json()["stage"] == stage

    history = client.get(f"/candidates/{candidate['id']}/history", headers=headers).json()
    assert [(h["old_stage"], h["new_stage"]) for h in history] == [
        ("Offer Rejected", "Round 3"),
        ("Screening", "Offer Rejected"),
        ("Joined", "Screening"),
        ("Screening", "Joined"),
    ]


def test_same_stage_without_comment_is_a_no_op(client, sub_admin):
    candidate = new_candidate(client, sub_admin)
    headers = auth_headers(sub_admin)

    response = client.post(f"/candidates/{candidate['id']}/stage", headers=headers, json={"new_stage": "Screening"})
    assert response.status_code == 200
    assert response.json()["updated_at"] == candidate["updated_at"]
    assert client.get(f"/candidates/{candidate['id']}/history", headers=headers).json() == []


def test_same_stage_with_comment_is_logged(client, sub_admin):
    candidate = new_candidate(client, sub_admin)
    headers = auth_headers(sub_admin)

    client.post(
        f"/candidates/{candidate['id']}/stage",
        headers=headers,
        json={"new_stage": "Screening", "comment": "Left a voicemail"},
    )
    history = client.get(f"/candidates/{candidate['id']}/history", headers=headers).json()
    assert len(history) == 1
    assert history[0]["old_stage"] == history[0]["new_stage"] == "Screening"
    assert history[0]["comment"] == "Left a voicemail"
    assert history[0]["changer_name"] == "Sam Sub"


def test_unknown_stage_is_rejected(client, sub_admin):
    candidate = new_candidate(client, sub_admin)
    response = client.post(
        f"/candidates/{candidate['id']}/stage", headers=auth_headers(sub_admin), json={"new_stage": "Hired"}
    )
    assert response.status_code == 422


def test_history_is_limited_to_latest_entries(client, sub_admin):
    candidate = new_candidate(client, sub_admin)
    headers = auth_headers(sub_admin)
    for i in range(23):
        stage = "Round 1" if i % 2 == 0 else "Round 2"
        client.post(f"/candidates/{candidate['id']}/stage", headers=headers, json={"new_stage": stage})

    history = client.get(f"/candidates/{candidate['id']}/history", headers=headers).json()
    assert len(history) == 20
    assert history[0]["new_stage"] == "Round 1"


def test_history_changer_unknown_when_user_missing(client, super_admin, sub_admin):
    candidate = new_candidate(client, sub_admin)
    ghost = create_user("ghost@example.com", Roles.SUPER_ADMIN, full_name="Ghost")
    client.post(f"/candidates/{candidate['id']}/stage", headers=auth_headers(ghost), json={"new_stage": "Offer"})

    # Deleting the user row leaves the history pointing at a missing account
    async def _drop():
        async with get_async_session_context() as session:
            await session.execute(delete(User).where(User.id == ghost.id))

    asyncio.run(_drop())

    history = client.get(f"/candidates/{candidate['id']}/history", headers=auth_headers(super_admin)).json()
    assert history[0]["changer_name"] == "Unknown"


def test_delete_history_entry(client, sub_admin, other_sub_admin):
    candidate = new_candidate(client, sub_admin)
    headers = auth_headers(sub_admin)
    client.post(f"/candidates/{candidate['id']}/stage", headers=headers, json={"new_stage": "Interview"})
    entry = client.get(f"/candidates/{candidate['id']}/history", headers=headers).json()[0]

    url = f"/candidates/{candidate['id']}/history/{entry['id']}"
    assert client.delete(url, headers=auth_headers(other_sub_admin)).status_code == 404
    assert client.delete(url, headers=headers).status_code == 204
    assert client.get(f"/candidates/{candidate['id']}/history", headers=headers).json() == []
    assert client.delete(url, headers=headers).status_code == 404
