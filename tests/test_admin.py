"""Tests for /admin endpoints and the role-specific /dashboard."""

from datetime import date, time

from models import db
from models.booking import Booking
from utils.roles import Role


class TestAccess:
    def test_member_forbidden(self, login):
        assert login().get("/admin/bookings").status_code == 403

    def test_coach_forbidden(self, login):
        assert login(role=Role.COACH).get("/admin/users").status_code == 403

    def test_anonymous(self, client):
        assert client.get("/admin/bookings").status_code == 401


class TestBookingStatus:
    def test_confirm_then_complete(self, app, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        member = make_user()
        booking_id = add_booking(member, courts["Court 1"], date(2026, 3, 12), time(10, 0), status="pending")

        resp = admin.post(f"/admin/bookings/{booking_id}/confirm")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "confirmed"

        resp = admin.post(f"/admin/bookings/{booking_id}/complete")
        assert resp.get_json()["status"] == "completed"

        # terminal
        resp = admin.post(f"/admin/bookings/{booking_id}/confirm")
        assert resp.status_code == 400
        assert resp.get_json()["code"] == "INVALID_STATUS_TRANSITION"

    def test_pending_cannot_complete(self, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        booking_id = add_booking(make_user(), courts["Court 1"], date(2026, 3, 12), time(10, 0), status="pending")
        assert admin.post(f"/admin/bookings/{booking_id}/complete").status_code == 400

    def test_admin_cancel_ignores_window(self, app, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        booking_id = add_booking(make_user(), courts["Court 1"], date(2026, 3, 10), time(10, 0))

        resp = admin.post(f"/admin/bookings/{booking_id}/cancel", json={"reason": "Court flooded"})
        assert resp.status_code == 200
        with app.app_context():
            row = db.session.get(Booking, booking_id)
            assert row.status == "cancelled"
            assert row.cancel_reason == "Court flooded"

    def test_unknown_action_and_booking(self, login):
        admin = login("admin@example.com", Role.ADMIN)
        assert admin.post("/admin/bookings/1/refund").status_code == 404
        assert admin.post("/admin/bookings/999/confirm").status_code == 404

    def test_list_filters(self, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        member = make_user()
        add_booking(member, courts["Court 1"], date(2026, 3, 12), time(10, 0), status="pending")
        add_booking(member, courts["Court 2"], date(2026, 3, 13), time(10, 0))

        assert len(admin.get("/admin/bookings").get_json()) == 2
        assert len(admin.get("/admin/bookings", query_string={"status": "pending"}).get_json()) == 1
        assert len(admin.get("/admin/bookings", query_string={"date": "2026-03-13"}).get_json()) == 1
        assert admin.get("/admin/bookings", query_string={"status": "lost"}).status_code == 400


class TestUsersAndCourts:
    def test_promote_to_coach(self, login, make_user):
        admin = login("admin@example.com", Role.ADMIN)
        uid = make_user("coach@example.com")

        resp = admin.post(f"/admin/users/{uid}/role", json={"role": "COACH"})
        assert resp.status_code == 200
        assert resp.get_json()["role"] == "coach"
        coaches = admin.get("/admin/users", query_string={"role": "coach"}).get_json()
        assert [u["email"] for u in coaches] == ["coach@example.com"]

    def test_invalid_role(self, login, make_user):
        admin = login("admin@example.com", Role.ADMIN)
        uid = make_user("x@example.com")
        assert admin.post(f"/admin/users/{uid}/role", json={"role": "owner"}).status_code == 400

    def test_cannot_demote_self(self, login):
        admin = login("admin@example.com", Role.ADMIN)
        assert admin.post(f"/admin/users/{admin.user_id}/role", json={"role": "member"}).status_code == 400

    def test_court_status(self, login, courts, client):
        admin = login("admin@example.com", Role.ADMIN)
        resp = admin.post(f"/admin/courts/{courts['Court 2']}/status", json={"status": "maintenance"})
        assert resp.status_code == 200
        statuses = {c["name"]: c["status"] for c in client.get("/courts").get_json()}
        assert statuses == {"Court 1": "active", "Court 2": "maintenance"}

    def test_bad_court_status(self, login, courts):
        admin = login("admin@example.com", Role.ADMIN)
        assert admin.post(f"/admin/courts/{courts['Court 2']}/status", json={"status": "flooded"}).status_code == 400


class TestDashboard:
    def test_member_summary(self, login, courts, add_booking):
        member = login()
        add_booking(member.user_id, courts["Court 1"], date(2026, 3, 9), time(10, 0), status="completed")
        add_booking(member.user_id, courts["Court 1"], date(2026, 3, 12), time(10, 0))

        body = member.get("/dashboard").get_json()
        assert body["role"] == "member"
        assert body["path"] == "/member/dashboard"
        assert body["summary"]["upcoming_count"] == 1
        assert body["summary"]["played_count"] == 1

    def test_coach_sees_todays_grid(self, login, make_user, courts, add_booking):
        coach = login("coach@example.com", Role.COACH)
        add_booking(make_user(), courts["Court 2"], date(2026, 3, 10), time(16, 0))

        summary = coach.get("/dashboard").get_json()["summary"]
        assert summary["date"] == "2026-03-10"
        free = {s["court"]["name"]: s["free_slots"] for s in summary["schedule"]}
        # 08:00 and 09:00 are past at 09:30
        assert free == {"Court 1": 12, "Court 2": 11}

    def test_admin_stats(self, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        member = make_user()
        add_booking(member, courts["Court 1"], date(2026, 3, 10), time(16, 0), status="pending")
        add_booking(member, courts["Court 1"], date(2026, 3, 10), time(17, 0), status="cancelled")

        summary = admin.get("/dashboard").get_json()["summary"]
        assert summary["bookings_by_status"]["pending"] == 1
        assert summary["bookings_by_status"]["cancelled"] == 1
        assert summary["bookings_today"] == 1
        assert summary["users_by_role"] == {"member": 1, "coach": 0, "admin": 1}


class TestAuditLogs:
    def test_filters_by_action(self, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        booking_id = add_booking(make_user(), courts["Court 1"], date(2026, 3, 12), time(10, 0), status="pending")
        admin.post(f"/admin/bookings/{booking_id}/confirm")

        rows = admin.get("/admin/audit-logs", query_string={"action": "admin_booking_confirm"}).get_json()
        assert len(rows) == 1
        assert rows[0]["entity"] == "booking"
        assert rows[0]["entity_id"] == str(booking_id)
        assert rows[0]["user_id"] == admin.user_id

    def test_member_forbidden(self, login):
        assert login().get("/admin/audit-logs").status_code == 403


class TestPayloadTypes:
    def test_numeric_role_rejected(self, login, make_user):
        admin = login("admin@example.com", Role.ADMIN)
        uid = make_user("x@example.com")
        resp = admin.post(f"/admin/users/{uid}/role", json={"role": 5})
        assert resp.status_code == 400
        assert "role must be one of" in resp.get_json()["error"]

    def test_numeric_cancel_reason_rejected(self, app, login, make_user, courts, add_booking):
        admin = login("admin@example.com", Role.ADMIN)
        booking_id = add_booking(make_user(), courts["Court 1"], date(2026, 3, 12), time(10, 0))

        assert admin.post(f"/admin/bookings/{booking_id}/cancel", json={"reason": 7}).status_code == 400
        with app.app_context():
            assert db.session.get(Booking, booking_id).status == "confirmed"

    def test_numeric_court_status_rejected(self, login, courts):
        admin = login("admin@example.com", Role.ADMIN)
        assert admin.post(f"/admin/courts/{courts['Court 1']}/status", json={"status": 1}).status_code == 400

    def test_list_body_rejected(self, login, courts):
        admin = login("admin@example.com", Role.ADMIN)
        assert admin.post(f"/admin/courts/{courts['Court 1']}/status", json=["closed"]).status_code == 400

    def test_maintenance_court_has_no_free_slots(self, login, courts):
        admin = login("admin@example.com", Role.ADMIN)
        admin.post(f"/admin/courts/{courts['Court 2']}/status", json={"status": "maintenance"})

        coach = login("coach@example.com", Role.COACH)
        schedule = coach.get("/dashboard").get_json()["summary"]["schedule"]
        assert {s["court"]["name"]: s["free_slots"] for s in schedule} == {"Court 1": 12, "Court 2": 0}
