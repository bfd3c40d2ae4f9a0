"""Tests for identity resolution, activation and role checks."""
from meatup.models.activity import ActivityLog, ActivityType
from meatup.models.user import User, MemberStatus
from tests.conftest import auth_headers, create_test_user


class TestAuthenticate:
    """Only provisioned members get in; profiles refresh on sign-in."""

    def test_missing_identity_is_unauthorized(self, client):
        resp = client.get("/api/me")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    def test_unknown_email_is_rejected(self, client, db):
        resp = client.get("/api/me", headers=auth_headers("stranger@example.com", name="Stranger"))
        assert resp.status_code == 401
        assert "error" in resp.json()
        # Never auto-created
        assert db.query(User).filter(User.email == "stranger@example.com").first() is None

    def test_me_returns_profile(self, client, admin):
        resp = client.get("/api/me", headers=auth_headers(admin.email))
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == admin.id
        assert data["email"] == "admin@meatup.club"
        assert data["is_admin"] is True

    def test_email_match_is_case_sensitive(self, client, member):
        resp = client.get("/api/me", headers=auth_headers("MEMBER@meatup.club"))
        assert resp.status_code == 401

    def test_profile_refreshed_from_identity(self, client, db, member):
        resp = client.get("/api/me", headers=auth_headers(
            member.email, name="Renamed Member", picture="https://img.example/p.png",
        ))
        assert resp.status_code == 200
        assert resp.json()["name"] == "Renamed Member"
        assert resp.json()["picture"] == "https://img.example/p.png"

        db.expire_all()
        stored = db.query(User).filter(User.id == member.id).one()
        assert stored.name == "Renamed Member"
        entries = db.query(ActivityLog).filter(ActivityLog.user_id == member.id).all()
        assert [e.action_type for e in entries] == [ActivityType.profile_refresh]

    def test_unchanged_profile_writes_nothing(self, client, db, member):
        client.get("/api/me", headers=auth_headers(member.email, name="Member"))
        assert db.query(ActivityLog).count() == 0


class TestActivation:
    """invited -> active happens once, by the member's own request."""

    def test_invited_member_cannot_vote_or_rsvp(self, client, db, admin):
        invited = create_test_user(db, "new@meatup.club", status=MemberStatus.invited)
        headers = auth_headers(invited.email)

        assert client.get("/api/me", headers=headers).status_code == 200
        assert client.get("/api/restaurants/", headers=headers).status_code == 403
        assert client.get("/api/dates/", headers=headers).status_code == 403
        assert client.post("/api/restaurants/vote", headers=headers, json={"suggestion_id": 1}).status_code == 403
        assert client.get("/api/rsvp/?event_id=1", headers=headers).status_code == 403
        assert client.get("/api/events/", headers=headers).status_code == 403

    def test_invite_accept_flow(self, client, db, admin):
        resp = client.post("/api/members/", headers=auth_headers(admin.email), json={"email": "a@x.com"})
        assert resp.status_code == 201
        assert resp.json()["member"]["status"] == "invited"

        headers = auth_headers("a@x.com", name="Ana")
        assert client.get("/api/me", headers=headers).json()["status"] == "invited"

        resp = client.post("/api/accept-invite", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Account activated successfully", "status": "active", "changed": True}
        assert client.get("/api/me", headers=headers).json()["status"] == "active"

        # Repeating is a no-op, not an error
        resp = client.post("/api/accept-invite", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["changed"] is False

        db.expire_all()
        accepted = db.query(ActivityLog).filter(ActivityLog.action_type == ActivityType.accept_invite).count()
        assert accepted == 1

    def test_accept_invite_without_member_row(self, client):
        resp = client.post("/api/accept-invite", headers=auth_headers("ghost@example.com"))
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    def test_accept_invite_requires_identity(self, client):
        assert client.post("/api/accept-invite").status_code == 401


class TestAdminGate:
    """Admin-only operations reject regular members."""

    def test_member_cannot_create_event(self, client, member):
        resp = client.post("/api/events/", headers=auth_headers(member.email), json={
            "restaurant_name": "Nope", "event_date": "2099-01-01",
        })
        assert resp.status_code == 403
        assert resp.json()["error"] == "Forbidden: Admin access required"

    def test_member_cannot_manage_members(self, client, member):
        headers = auth_headers(member.email)
        assert client.get("/api/members/", headers=headers).status_code == 403
        assert client.post("/api/members/", headers=headers, json={"email": "x@y.z"}).status_code == 403
        assert client.delete("/api/members/?user_id=1", headers=headers).status_code == 403

    def test_member_cannot_read_activity(self, client, member):
        assert client.get("/api/activity/", headers=auth_headers(member.email)).status_code == 403
