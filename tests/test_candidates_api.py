import pytest

from app.models import Candidate
from tests.conftest import auth_headers, candidate_payload

pytestmark = pytest.mark.api


def create(client, user, **overrides):
    response = client.post("/candidates", headers=auth_headers(user), json=candidate_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["candidate"]


def test_create_candidate_defaults(client, sub_admin):
    response = client.post("/candidates", headers=auth_headers(sub_admin), json=candidate_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["warnings"] == []
    candidate = body["candidate"]
    assert candidate["stage"] == "Screening"
    assert candidate["stage_group"] == "Screening"
    assert candidate["stage_color"] == "hsl(200, 70%, 50%)"
    assert candidate["suggested_action"] == "Review profile & schedule call"
    assert candidate["created_by"] == str(sub_admin.id)


def test_create_requires_authentication(client, db_schema):
    assert client.post("/candidates", json=candidate_payload()).status_code == 401


def test_create_validation_errors(client, sub_admin):
    headers = auth_headers(sub_admin)
    assert client.post("/candidates", headers=headers, json=candidate_payload(stage="Foobar")).status_code == 422
    assert client.post("/candidates", headers=headers, json=candidate_payload(full_name="")).status_code == 422
    assert client.post("/candidates", headers=headers, json=candidate_payload(email="nope")).status_code == 422


def test_duplicate_email_and_phone_are_rejected_across_owners(client, sub_admin, other_sub_admin):
    create(client, sub_admin)

    response = client.post(
        "/candidates",
        headers=auth_headers(other_sub_admin),
        json=candidate_payload(phone="1112223333", email="ASHA.VERMA@example.com"),
    )
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "DUPLICATE_EMAIL"
    assert "Asha Verma" in error["message"]

    response = client.post(
        "/candidates",
        headers=auth_headers(other_sub_admin),
        json=candidate_payload(email="someone.else@example.com"),
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_PHONE"


def test_duplicate_resume_url_is_a_warning(client, sub_admin):
    create(client, sub_admin, resume_url="https://files.example.com/cv.pdf")
    response = client.post(
        "/candidates",
        headers=auth_headers(sub_admin),
        json=candidate_payload(email="ravi@example.com", phone="5550001111", resume_url="https://files.example.com/cv.pdf"),
    )
    assert response.status_code == 201
    warnings = response.json()["warnings"]
    assert len(warnings) == 1
    assert warnings[0].startswith("Resume already exists for candidate: Asha Verma")


def test_sub_admins_only_see_their_own(client, super_admin, sub_admin, other_sub_admin):
    mine = create(client, sub_admin)
    theirs = create(client, other_sub_admin, email="ravi@example.com", phone="5550001111", full_name="Ravi Kumar")

    listed = client.get("/candidates", headers=auth_headers(sub_admin)).json()
    assert [c["id"] for c in listed] == [mine["id"]]
    assert listed[0]["added_by_name"] is None

    assert client.get(f"/candidates/{theirs['id']}", headers=auth_headers(sub_admin)).status_code == 404
    response = client.put(
        f"/candidates/{theirs['id']}", headers=auth_headers(sub_admin), json={"city": "Goa"}
    )
    assert response.status_code == 404
    assert client.delete(f"/candidates/{theirs['id']}", headers=auth_headers(sub_admin)).status_code == 404

    everyone = client.get("/candidates", headers=auth_headers(super_admin)).json()
    assert [c["id"] for c in everyone] == [theirs["id"], mine["id"]]
    assert {c["added_by_name"] for c in everyone} == {"Sam Sub", "Olga Other"}


def test_list_filters_and_pagination(client, super_admin, sub_admin, other_sub_admin):
    create(client, sub_admin)
    create(client, sub_admin, email="ravi@example.com", phone="5550001111", full_name="Ravi Kumar",
           city="Goa", stage="Round 1")
    create(client, other_sub_admin, email="meera@example.com", phone="5550002222", full_name="Meera Iyer",
           client_name="Initech")
    headers = auth_headers(super_admin)

    by_search = client.get("/candidates", headers=headers, params={"search": "goa"}).json()
    assert [c["full_name"] for c in by_search] == ["Ravi Kumar"]

    by_client = client.get("/candidates", headers=headers, params={"search": "INITECH"}).json()
    assert [c["full_name"] for c in by_client] == ["Meera Iyer"]

    by_stage = client.get("/candidates", headers=headers, params={"stage": "Round 1"}).json()
    assert [c["stage_group"] for c in by_stage] == ["Interview"]

    by_owner = client.get("/candidates", headers=headers, params={"created_by": str(other_sub_admin.id)}).json()
    assert [c["full_name"] for c in by_owner] == ["Meera Iyer"]

    page = client.get("/candidates", headers=headers, params={"limit": 2, "offset": 1}).json()
    assert [c["full_name"] for c in page] == ["Ravi Kumar", "Asha Verma"]

    assert client.get("/candidates", headers=headers, params={"limit": 500}).status_code == 422


def test_search_matches_wildcard_characters_literally(client, super_admin, sub_admin):
    create(client, sub_admin, full_name="John Doe", email="johnxdoe@example.com", phone="5550003333")
    create(client, sub_admin, full_name="Jane Roe", email="jane.roe@example.com", phone="5550004444")
    create(client, sub_admin, full_name="Percy Shah", email="percy@example.com", phone="5550005555",
           position_name="QA_Lead 100%")
    headers = auth_headers(super_admin)

    def names(term):
        listed = client.get("/candidates", headers=headers, params={"search": term}).json()
        return sorted(c["full_name"] for c in listed)

    assert names("john_doe") == []
    assert names("hn_doe") == []
    assert names("qa_lead") == ["Percy Shah"]
    assert names("%") == ["Percy Shah"]
    assert names("100%") == ["Percy Shah"]
    assert names("\\") == []


def test_sub_admin_created_by_filter_cannot_widen_scope(client, sub_admin, other_sub_admin):
    create(client, other_sub_admin)
    listed = client.get(
        "/candidates", headers=auth_headers(sub_admin), params={"created_by": str(other_sub_admin.id)}
    ).json()
    assert listed == []


def test_update_candidate_keeps_owner_and_logs_stage_change(client, super_admin, sub_admin):
    candidate = create(client, sub_admin)

    response = client.put(
        f"/candidates/{candidate['id']}",
        headers=auth_headers(super_admin),
        json={"stage": "Round 2", "comment": "Strong first round", "city": "Mumbai"},
    )
    assert response.status_code == 200
    updated = response.json()["candidate"]
    assert updated["stage"] == "Round 2"
    assert updated["city"] == "Mumbai"
    assert updated["created_by"] == str(sub_admin.id)
    assert updated["suggested_action"] == "Follow up on results"

    history = client.get(f"/candidates/{candidate['id']}/history", headers=auth_headers(sub_admin)).json()
    assert len(history) == 1
    assert history[0]["old_stage"] == "Screening"
    assert history[0]["new_stage"] == "Round 2"
    assert history[0]["comment"] == "Strong first round"
    assert history[0]["changer_name"] == "Root Admin"


def test_stage_only_update_records_current_comment(client, sub_admin):
    candidate = create(client, sub_admin, comment="Strong Java background")
    headers = auth_headers(sub_admin)

    response = client.put(f"/candidates/{candidate['id']}", headers=headers, json={"stage": "Interview"})
    assert response.status_code == 200

    history = client.get(f"/candidates/{candidate['id']}/history", headers=headers).json()
    assert [(h["new_stage"], h["comment"]) for h in history] == [("Interview", "Strong Java background")]


def test_update_without_stage_change_adds_no_history(client, sub_admin):
    candidate = create(client, sub_admin)
    client.put(f"/candidates/{candidate['id']}", headers=auth_headers(sub_admin), json={"notes": "Call back"})
    history = client.get(f"/candidates/{candidate['id']}/history", headers=auth_headers(sub_admin)).json()
    assert history == []


def test_update_duplicate_checks_exclude_self(client, sub_admin):
    first = create(client, sub_admin)
    create(client, sub_admin, email="ravi@example.com", phone="5550001111", full_name="Ravi Kumar")
    headers = auth_headers(sub_admin)

    same = client.put(f"/candidates/{first['id']}", headers=headers, json={"email": "asha.verma@example.com"})
    assert same.status_code == 200

    clash = client.put(f"/candidates/{first['id']}", headers=headers, json={"phone": "5550001111"})
    assert clash.status_code == 409
    assert clash.json()["error"]["code"] == "DUPLICATE_PHONE"


def test_update_rejects_unknown_stage_and_nulls(client, sub_admin):
    candidate = create(client, sub_admin)
    headers = auth_headers(sub_admin)
    assert client.put(f"/candidates/{candidate['id']}", headers=headers, json={"stage": "Foobar"}).status_code == 422
    assert client.put(f"/candidates/{candidate['id']}", headers=headers, json={"city": None}).status_code == 422


def test_delete_candidate(client, sub_admin):
    candidate = create(client, sub_admin)
    headers = auth_headers(sub_admin)
    client.post(f"/candidates/{candidate['id']}/stage", headers=headers, json={"new_stage": "Interview"})

    assert client.delete(f"/candidates/{candidate['id']}", headers=headers).status_code == 204
    response = client.get(f"/candidates/{candidate['id']}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_bulk_delete_ignores_invisible_ids(client, sub_admin, other_sub_admin):
    mine = create(client, sub_admin)
    second = create(client, sub_admin, email="ravi@example.com", phone="5550001111", full_name="Ravi Kumar")
    theirs = create(client, other_sub_admin, email="meera@example.com", phone="5550002222", full_name="Meera Iyer")

    response = client.post(
        "/candidates/bulk-delete",
        headers=auth_headers(sub_admin),
        json={"ids": [mine["id"], second["id"], theirs["id"]]},
    )
    assert response.status_code == 200
    assert response.json() == {"deleted": 2}
    assert client.get("/candidates", headers=auth_headers(sub_admin)).json() == []
    assert len(client.get("/candidates", headers=auth_headers(other_sub_admin)).json()) == 1


def test_bulk_delete_requires_ids(client, sub_admin):
    response = client.post("/candidates/bulk-delete", headers=auth_headers(sub_admin), json={"ids": []})
    assert response.status_code == 422


def test_history_relationship_uses_supported_loader():
    assert Candidate.stage_history.property.lazy == "select"
