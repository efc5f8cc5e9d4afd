# tests/test_notifications_api.py
import pytest

from schoolhub.models import NotificationType, Role
from schoolhub.services.notification_service import NotificationService
from tests.factories import auth_headers, make_user

pytestmark = pytest.mark.anyio


async def test_inbox_read_and_delete(client, db):
    user, _ = await make_user(db, Role.PARENT, "pat@school.test")
    other, _ = await make_user(db, Role.PARENT, "paul@school.test")
    service = NotificationService(db)
    first = await service.create_notification(user.id, "Hello", "First", NotificationType.GENERAL)
    await service.create_notification(user.id, "Again", "Second", NotificationType.GRADE)
    foreign = await service.create_notification(other.id, "Not yours", "Hidden")
    headers = auth_headers(user)

    res = await client.get("/api/notifications", headers=headers)
    assert res.status_code == 200
    assert res.json()["unreadCount"] == 2
    assert len(res.json()["notifications"]) == 2

    res = await client.put(f"/api/notifications/{first.id}/read", headers=headers)
    assert res.status_code == 200
    assert res.json()["read"] is True

    res = await client.get("/api/notifications", params={"unreadOnly": "true"}, headers=headers)
    assert [n["title"] for n in res.json()["notifications"]] == ["Again"]
    assert res.json()["unreadCount"] == 1

    res = await client.put(f"/api/notifications/{foreign.id}/read", headers=headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Notification not found"}

    res = await client.put("/api/notifications/read-all", headers=headers)
    assert res.status_code == 200
    res = await client.get("/api/notifications", headers=headers)
    assert res.json()["unreadCount"] == 0

    res = await client.delete(f"/api/notifications/{first.id}", headers=headers)
    assert res.status_code == 200
    res = await client.delete(f"/api/notifications/{first.id}", headers=headers)
    assert res.status_code == 404


async def test_notify_admins_reaches_every_admin(db):
    await make_user(db, Role.ADMIN, "ada@school.test")
    await make_user(db, Role.ADMIN, "alan@school.test")
    await make_user(db, Role.TEACHER, "tina@school.test")

    sent = await NotificationService(db).notify_admins("Heads up", "Something happened")

    assert sent == 2
