from models.models import ActivityLog, Profile, Project
from utils import crud_profile
from utils.crud_profile import ProfileStoreError


def test_approve_pending_member_writes_activity_log(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    newcomer = make_profile("New Member", status="pending")

    resp = client.post(f"/api/admin/users/{newcomer}/approve", headers=auth(admin))

    assert resp.status_code == 200
    assert resp.json()["status"] == "active"

    entry = db.query(ActivityLog).filter_by(entity_id=newcomer).one()
    assert entry.action == "approve_user"
    assert entry.actor_id == admin
    assert entry.entity_type == "profile"
    assert entry.details == {"previous_status": "pending"}


def test_approved_member_can_browse(client, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    newcomer = make_profile("New Member", status="pending")
    assert client.get("/api/directory", headers=auth(newcomer)).status_code == 403

    client.post(f"/api/admin/users/{newcomer}/approve", headers=auth(admin))

    assert client.get("/api/directory", headers=auth(newcomer)).status_code == 200


def test_suspend_and_promote(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    member = make_profile("Grace Hopper")

    assert client.post(f"/api/admin/users/{member}/suspend", headers=auth(admin)).json()["status"] == "suspended"
    assert client.post(f"/api/admin/users/{member}/activate", headers=auth(admin)).json()["status"] == "active"
    assert client.post(f"/api/admin/users/{member}/promote", headers=auth(admin)).json()["role"] == "admin"

    actions = [e.action for e in db.query(ActivityLog).filter_by(entity_id=member).order_by(ActivityLog.id)]
    assert actions == ["suspend_user", "activate_user", "promote_to_admin"]
    promoted = db.query(ActivityLog).filter_by(action="promote_to_admin").one()
    assert promoted.details == {"previous_role": "user"}

    # the new admin can now use the admin endpoints
    assert client.get("/api/admin/users", headers=auth(member)).status_code == 200


def test_list_users_by_status(client, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    make_profile("First Pending", status="pending")
    make_profile("Someone Active")
    make_profile("Second Pending", status="pending")
    headers = auth(admin)

    resp = client.get("/api/admin/users", params={"status": "pending"}, headers=headers)
    assert [u["full_name"] for u in resp.json()] == ["Second Pending", "First Pending"]

    assert len(client.get("/api/admin/users", headers=headers).json()) == 4
    assert client.get("/api/admin/users", params={"status": "banned"}, headers=headers).status_code == 400


def test_non_admin_is_forbidden(client, make_profile, auth):
    member = make_profile("Grace Hopper")
    other = make_profile("New Member", status="pending")

    assert client.post(f"/api/admin/users/{other}/approve", headers=auth(member)).status_code == 403
    assert client.get("/api/admin/users", headers=auth(member)).status_code == 403


def test_unknown_target_or_action_is_not_found(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    member = make_profile("Grace Hopper")

    assert client.post("/api/admin/users/missing-id/approve", headers=auth(admin)).status_code == 404
    assert client.post(f"/api/admin/users/{member}/delete", headers=auth(admin)).status_code == 404
    assert db.query(ActivityLog).count() == 0


def test_delete_member_removes_projects_and_logs_snapshot(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    member = make_profile("Grace Hopper", classes=["CS101"])
    client.post("/api/profile/me/projects", json={"title": "Compiler"}, headers=auth(member))

    resp = client.delete(f"/api/admin/users/{member}", headers=auth(admin))

    assert resp.status_code == 200, resp.text
    assert db.get(Profile, member) is None
    assert db.query(Project).filter_by(owner_id=member).count() == 0
    entry = db.query(ActivityLog).filter_by(entity_id=member, action="delete_user").one()
    assert entry.actor_id == admin
    assert entry.details["full_name"] == "Grace Hopper"
    assert entry.details["role"] == "user"


def test_admin_cannot_delete_self(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    make_profile("Second Admin", role="admin")

    resp = client.delete(f"/api/admin/users/{admin}", headers=auth(admin))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot delete your own account"
    assert db.get(Profile, admin) is not None


def test_delete_unknown_member_or_as_non_admin(client, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    member = make_profile("Grace Hopper")

    assert client.delete("/api/admin/users/missing-id", headers=auth(admin)).status_code == 404
    assert client.delete(f"/api/admin/users/{admin}", headers=auth(member)).status_code == 403


def test_failed_admin_action_rolls_back(client, db, make_profile, auth, monkeypatch):
    admin = make_profile("Site Admin", role="admin")
    newcomer = make_profile("New Member", status="pending")

    def broken(*args, **kwargs):
        raise ProfileStoreError("Failed to log activity")

    monkeypatch.setattr(crud_profile, "log_activity", broken)

    resp = client.post(f"/api/admin/users/{newcomer}/approve", headers=auth(admin))

    assert resp.status_code == 503
    assert db.get(Profile, newcomer).status == "pending"


def test_admin_edits_member_details(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    member = make_profile("Grace Hopper")

    resp = client.patch(f"/api/admin/users/{member}", headers=auth(admin),
                        json={"full_name": "Grace B. Hopper", "email": "grace.hopper@usc.edu", "graduation_year": 2027})

    assert resp.status_code == 200, resp.text
    assert resp.json()["full_name"] == "Grace B. Hopper"
    assert resp.json()["email"] == "grace.hopper@usc.edu"
    assert db.get(Profile, member).graduation_year == 2027
    entry = db.query(ActivityLog).filter_by(entity_id=member, action="update_profile").one()
    assert entry.details == {"updates": {
        "full_name": "Grace B. Hopper", "email": "grace.hopper@usc.edu", "graduation_year": 2027,
    }}


def test_admin_edit_rejects_bad_input(client, db, make_profile, auth):
    admin = make_profile("Site Admin", role="admin")
    member = make_profile("Grace Hopper")
    make_profile("Ada Lovelace", email="ada@usc.edu")
    headers = auth(admin)

    assert client.patch(f"/api/admin/users/{member}", json={"email": "not-an-email"}, headers=headers).status_code == 422

    resp = client.patch(f"/api/admin/users/{member}", json={"full_name": None}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == ["Full name cannot be empty"]

    resp = client.patch(f"/api/admin/users/{member}", json={"email": "ADA@usc.edu"}, headers=headers)
    assert resp.status_code == 409

    assert client.patch("/api/admin/users/missing-id", json={"bio": "hi"}, headers=headers).status_code == 404
    assert client.patch(f"/api/admin/users/{member}", json={"bio": "hi"}, headers=auth(member)).status_code == 403
    assert db.query(ActivityLog).filter_by(action="update_profile").count() == 0
