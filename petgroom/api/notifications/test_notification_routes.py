# petgroom/api/notifications/test_notification_routes.py
from datetime import datetime, timezone

from petgroom.models.notification import NotificationType


def seed_notification(fake_db, notification_id, recipient_id, created_at):
    fake_db.collection('notifications').document(notification_id).set({
        "notification_id": notification_id,
        "recipient_id": recipient_id,
        "sender_id": "admin-1",
        "type": NotificationType.APPOINTMENT_CONFIRMED.value,
        "target_id": "a1",
        "target_summary": "2024-05-15 09:00",
        "is_read": False,
        "created_at": created_at,
    })


def test_list_returns_own_notifications_newest_first(client, fake_db, auth_headers):
    seed_notification(fake_db, "n1", "u1", datetime(2024, 5, 1, tzinfo=timezone.utc))
    seed_notification(fake_db, "n2", "u1", datetime(2024, 5, 2, tzinfo=timezone.utc))
    seed_notification(fake_db, "n3", "u2", datetime(2024, 5, 3, tzinfo=timezone.utc))

    res = client.get('/api/notifications/', headers=auth_headers("u1"))
    assert res.status_code == 200
    assert [n["notification_id"] for n in res.get_json()] == ["n2", "n1"]


def test_mark_as_read(client, fake_db, auth_headers):
    seed_notification(fake_db, "n1", "u1", datetime(2024, 5, 1, tzinfo=timezone.utc))

    assert client.patch('/api/notifications/n1/read', headers=auth_headers("u2")).status_code == 403
    assert client.patch('/api/notifications/n1/read', headers=auth_headers("u1")).status_code == 200
    assert fake_db.docs('notifications')["n1"]["is_read"] is True
    assert client.patch('/api/notifications/nope/read', headers=auth_headers("u1")).status_code == 404


def test_limit_is_clamped_to_at_least_one(client, fake_db, auth_headers):
    seed_notification(fake_db, "n1", "u1", datetime(2024, 5, 1, tzinfo=timezone.utc))
    seed_notification(fake_db, "n2", "u1", datetime(2024, 5, 2, tzinfo=timezone.utc))

    for limit in (-5, 0):
        res = client.get(f'/api/notifications/?limit={limit}', headers=auth_headers("u1"))
        assert res.status_code == 200
        assert [n["notification_id"] for n in res.get_json()] == ["n2"]
