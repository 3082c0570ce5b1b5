import pytest

from app.domain.notifications import NotificationType, create_notification, notify_admins
from app.models import Notification
from tests.conftest import auth_headers


@pytest.fixture
def inbox(db, make_tourist):
    """A tourist with three notifications, one already read"""
    tourist = make_tourist()
    for index in range(3):
        create_notification(db, tourist.id, NotificationType.CUSTOM, f"Title {index}", f"Message {index}")
    first = db.query(Notification).filter(Notification.title == "Title 0").one()
    first.is_read = True
    db.commit()
    return tourist


def test_create_notification_skips_missing_recipient(db):
    assert create_notification(db, None, NotificationType.CUSTOM, "Hello", "World") is None
    assert db.query(Notification).count() == 0


def test_create_notification_failure_is_swallowed(db, monkeypatch):
    def broken_commit():
        raise RuntimeError("database went away")

    monkeypatch.setattr(db, "commit", broken_commit)

    assert create_notification(db, "user-1", NotificationType.CUSTOM, "Hello", "World") is None


def test_notify_admins_reaches_every_admin(db, make_user):
    make_user(role="admin")
    make_user(role="admin")
    make_user(role="tourist")

    sent = notify_admins(db, NotificationType.GUIDE_REGISTERED, "New guide", "Please review")

    assert sent == 2
    assert db.query(Notification).count() == 2


def test_list_notifications_with_counts(client, inbox):
    response = client.get("/api/get-notifications", headers=auth_headers(inbox))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["unread_count"] == 2
    assert len(body["notifications"]) == 3


def test_list_notifications_paginates(client, inbox):
    body = client.get("/api/get-notifications?limit=2&offset=2", headers=auth_headers(inbox)).json()
    assert len(body["notifications"]) == 1
    assert body["total"] == 3


def test_unread_count(client, inbox):
    response = client.get("/api/get-unread-notification-count", headers=auth_headers(inbox))
    assert response.json() == {"unread_count": 2}


def test_mark_one_read(client, db, inbox):
    notification = db.query(Notification).filter(Notification.title == "Title 1").one()

    response = client.put(
        "/api/mark-notification-read",
        json={"notificationId": notification.id},
        headers=auth_headers(inbox),
    )

    assert response.status_code == 200
    assert response.json()["data"]["is_read"] is True
    assert client.get("/api/get-unread-notification-count", headers=auth_headers(inbox)).json()["unread_count"] == 1


def test_mark_all_read(client, inbox):
    response = client.put("/api/mark-notification-read", json={"markAll": True}, headers=auth_headers(inbox))

    assert response.json()["count"] == 2
    assert client.get("/api/get-unread-notification-count", headers=auth_headers(inbox)).json()["unread_count"] == 0


def test_mark_read_requires_target(client, inbox):
    response = client.put("/api/mark-notification-read", json={}, headers=auth_headers(inbox))
    assert response.status_code == 400


def test_cannot_mark_someone_elses_notification(client, db, inbox, make_tourist):
    notification = db.query(Notification).first()
    response = client.put(
        "/api/mark-notification-read",
        json={"notificationId": notification.id},
        headers=auth_headers(make_tourist(name="Other")),
    )
    assert response.status_code == 404


def test_delete_read_notifications(client, db, inbox):
    response = client.delete("/api/delete-notification?deleteRead=true", headers=auth_headers(inbox))

    assert response.json()["count"] == 1
    assert db.query(Notification).count() == 2


def test_delete_all_notifications(client, db, inbox):
    response = client.delete("/api/delete-notification?deleteAll=true", headers=auth_headers(inbox))

    assert response.json()["count"] == 3
    assert db.query(Notification).count() == 0


def test_delete_single_notification(client, db, inbox):
    notification_id = db.query(Notification).first().id

    response = client.delete(
        f"/api/delete-notification?notificationId={notification_id}", headers=auth_headers(inbox)
    )

    assert response.status_code == 200
    assert db.query(Notification).filter(Notification.id == notification_id).first() is None


def test_admin_sends_custom_notification(client, admin, make_tourist):
    tourist = make_tourist()

    response = client.post(
        "/api/create-notification",
        json={"user_id": tourist.id, "title": "Welcome", "message": "Enjoy your trip"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["type"] == "custom"
    assert client.get("/api/get-unread-notification-count", headers=auth_headers(tourist)).json()["unread_count"] == 1


def test_create_notification_rejects_unknown_type(client, admin):
    response = client.post(
        "/api/create-notification",
        json={"user_id": "u1", "type": "spam", "title": "Hi", "message": "There"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 422


def test_only_admin_sends_custom_notification(client, make_tourist):
    tourist = make_tourist()
    response = client.post(
        "/api/create-notification",
        json={"user_id": tourist.id, "title": "Hi", "message": "There"},
        headers=auth_headers(tourist),
    )
    assert response.status_code == 403
