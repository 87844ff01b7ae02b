from recommendation.logic import runner
from utils.crud_profile import ProfileStoreError


def test_recommendations_for_current_user(client, make_profile, auth):
    me = make_profile("Ada Lovelace", cohort="Cohort 5", graduation_year=2026,
                      links={"skills": ["Python", "React"], "interests": ["AI"]}, classes=["CS101"])
    peer = make_profile("Grace Hopper", cohort="Cohort 5", graduation_year=2027,
                        links={"skills": ["Python", "Go"], "interests": ["AI", "Music"]}, classes=["CS101"])
    classmate = make_profile("Alan Turing", graduation_year=2026)
    make_profile("Nobody Shared", cohort="Cohort 1", graduation_year=2020)

    resp = client.get("/recommendations", headers=auth(me))

    assert resp.status_code == 200
    body = resp.json()
    assert body["subject_id"] == me
    assert body["summary"]["total_evaluated"] == 3
    assert body["summary"]["total_recommended"] == 2
    assert [r["candidateId"] for r in body["recommendations"]] == [peer, classmate]

    top = body["recommendations"][0]
    assert top["matchScore"] == 49
    assert top["reason"] == "Shared skills: Python"
    assert len(top["connectionPoints"]) == 5
    assert body["recommendations"][1]["reason"] == "Potential connection"


def test_only_active_members_are_candidates(client, make_profile, auth):
    me = make_profile("Ada Lovelace", cohort="Cohort 5")
    make_profile("Pending Peer", status="pending", cohort="Cohort 5")
    make_profile("Suspended Peer", status="suspended", cohort="Cohort 5")
    active = make_profile("Active Peer", cohort="Cohort 5")

    body = client.get("/recommendations", headers=auth(me)).json()

    assert [r["candidateId"] for r in body["recommendations"]] == [active]
    assert body["summary"]["total_evaluated"] == 1


def test_no_matches_is_an_empty_success(client, make_profile, auth):
    me = make_profile("Ada Lovelace", cohort="Cohort 5")
    make_profile("Someone Else", cohort="Cohort 9")

    resp = client.get("/recommendations", headers=auth(me))

    assert resp.status_code == 200
    assert resp.json()["recommendations"] == []
    assert resp.json()["message"] == "No suggestions yet"


def test_store_failure_is_not_an_empty_list(client, make_profile, auth, monkeypatch):
    me = make_profile("Ada Lovelace")

    def broken(*args, **kwargs):
        raise ProfileStoreError("Failed to fetch profiles")

    monkeypatch.setattr(runner, "list_active_profiles", broken)

    resp = client.get("/recommendations", headers=auth(me))

    assert resp.status_code == 503
    assert "Failed to fetch profiles" in resp.json()["detail"]


def test_pending_member_cannot_get_recommendations(client, make_profile, auth):
    me = make_profile("New Member", status="pending")

    assert client.get("/recommendations", headers=auth(me)).status_code == 403


def test_missing_or_bad_token_is_rejected(client):
    assert client.get("/recommendations").status_code == 401
    assert client.get("/recommendations", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_match_endpoint_scores_supplied_profiles(client, make_profile, auth):
    me = make_profile("Ada Lovelace")
    payload = {
        "subject": {"id": "s", "skills": ["Python", "React"], "cohort": "Cohort 5",
                    "graduationYear": 2026, "classes": ["CS101"], "tags": ["AI"]},
        "candidates": [
            {"id": "c1", "skills": ["Python", "Go"], "cohort": "Cohort 5",
             "graduationYear": 2027, "classes": ["CS101"], "tags": ["AI", "Music"]},
            {"id": "c2", "graduationYear": 2026},
            {"id": "c3"},
        ],
    }

    resp = client.post("/recommendations/match", json=payload, headers=auth(me))

    assert resp.status_code == 200
    recs = resp.json()["recommendations"]
    assert [(r["candidateId"], r["matchScore"]) for r in recs] == [("c1", 49), ("c2", 15)]


def test_match_endpoint_rejects_profile_without_id(client, make_profile, auth):
    me = make_profile("Ada Lovelace")

    resp = client.post("/recommendations/match", json={"subject": {"skills": ["Python"]}}, headers=auth(me))

    assert resp.status_code == 422


def test_health(client):
    assert client.get("/recommendations/health").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "ok"}
