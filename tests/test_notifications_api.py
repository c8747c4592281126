"""
Tests for /notifications: scoping, read receipts and unread counts.
"""

from conftest import make_notification
from taskdesk.models import Department, NotificationRead

MARKETING = Department.MARKETING.value


class TestCreate:
    def test_admin_creates_global(self, client, admin, admin_headers):
        response = client.post(
            "/notifications",
            json={"title": "Hello", "message": "Welcome aboard", "type": "success"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        notification = response.json()["notification"]
        assert notification["isGlobal"] is True
        assert notification["targetDepartment"] is None
        assert notification["createdBy"]["id"] == admin.id

    def test_global_drops_target_department(self, client, admin_headers):
        response = client.post(
            "/notifications",
            json={"title": "All", "message": "Everyone", "isGlobal": True, "targetDepartment": MARKETING},
            headers=admin_headers,
        )
        assert response.json()["notification"]["targetDepartment"] is None

    def test_department_notification_needs_department(self, client, admin_headers):
        response = client.post(
            "/notifications",
            json={"title": "Team", "message": "Meeting", "isGlobal": False},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unknown_type(self, client, admin_headers):
        response = client.post(
            "/notifications",
            json={"title": "x", "message": "y", "type": "urgent"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_employee_cannot_create(self, client, developer_headers):
        response = client.post("/notifications", json={"title": "x", "message": "y"}, headers=developer_headers)
        assert response.status_code == 403


class TestScoping:
    def test_department_notifications_reach_only_that_department(
        self, client, db_session, admin, developer_headers, marketer_headers, marketer,
    ):
        everyone = make_notification(db_session, admin, "Everyone")
        team = make_notification(db_session, admin, "Marketing only", department=Department.MARKETING)

        seen_by_marketer = [n["id"] for n in client.get("/notifications", headers=marketer_headers).json()["notifications"]]
        seen_by_developer = [n["id"] for n in client.get("/notifications", headers=developer_headers).json()["notifications"]]

        assert sorted(seen_by_marketer) == sorted([everyone.id, team.id])
        assert seen_by_developer == [everyone.id]

    def test_hidden_notification_cannot_be_marked(self, client, db_session, admin, developer_headers):
        team = make_notification(db_session, admin, "Marketing only", department=Department.MARKETING)

        response = client.put(f"/notifications/{team.id}/read", headers=developer_headers)

        assert response.status_code == 404
        assert db_session.query(NotificationRead).count() == 0

    def test_missing_notification(self, client, developer_headers):
        assert client.put("/notifications/999/read", headers=developer_headers).status_code == 404


class TestReadReceipts:
    def test_mark_read_twice_keeps_one_receipt(self, client, db_session, admin, developer, developer_headers):
        notification = make_notification(db_session, admin, "Twice")

        assert client.put(f"/notifications/{notification.id}/read", headers=developer_headers).status_code == 200
        assert client.put(f"/notifications/{notification.id}/read", headers=developer_headers).status_code == 200

        receipts = db_session.query(NotificationRead).filter(NotificationRead.notification_id == notification.id).all()
        assert [receipt.user_id for receipt in receipts] == [developer.id]

    def test_read_status_is_per_user(self, client, db_session, admin, developer_headers, second_developer_headers):
        notification = make_notification(db_session, admin, "Per user")
        client.put(f"/notifications/{notification.id}/read", headers=developer_headers)

        mine = client.get("/notifications", headers=developer_headers).json()["notifications"][0]
        theirs = client.get("/notifications", headers=second_developer_headers).json()["notifications"][0]

        assert mine["isRead"] is True
        assert mine["readAt"] is not None
        assert theirs["isRead"] is False
        assert theirs["readAt"] is None

    def test_unread_count(self, client, db_session, admin, developer_headers):
        first = make_notification(db_session, admin, "One")
        make_notification(db_session, admin, "Two")
        make_notification(db_session, admin, "Hidden", department=Department.MARKETING)

        assert client.get("/notifications/unread-count", headers=developer_headers).json()["count"] == 2

        client.put(f"/notifications/{first.id}/read", headers=developer_headers)
        assert client.get("/notifications/unread-count", headers=developer_headers).json()["count"] == 1


class TestDelete:
    def test_admin_deletes_with_receipts(self, client, db_session, admin, admin_headers, developer_headers):
        notification = make_notification(db_session, admin, "Bye")
        client.put(f"/notifications/{notification.id}/read", headers=developer_headers)

        assert client.delete(f"/notifications/{notification.id}", headers=developer_headers).status_code == 403
        assert client.delete(f"/notifications/{notification.id}", headers=admin_headers).status_code == 200
        assert client.get("/notifications", headers=developer_headers).json()["notifications"] == []
        assert db_session.query(NotificationRead).count() == 0
