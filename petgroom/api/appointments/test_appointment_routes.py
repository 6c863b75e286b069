# petgroom/api/appointments/test_appointment_routes.py
"""
예약 API 통합 테스트 (메모리 Firestore 사용)

사용법: python -m pytest petgroom/api/appointments/test_appointment_routes.py -v
"""

import pytest
from datetime import date, timedelta

from petgroom.models.appointment import Appointment, AppointmentStatus
from petgroom.models.profile import UserRole
from petgroom.utils.datetime_utils import DateTimeUtils


@pytest.fixture
def booking_data(seed):
    seed.profile("client-1", full_name="Maria")
    seed.profile("client-2", full_name="Joao")
    seed.profile("admin-1", role=UserRole.ADMIN, full_name="Admin")
    seed.pet("pet-1", "client-1", name="Rex")
    seed.pet("pet-2", "client-2", name="Luna")
    seed.service("svc-1", name="Banho", price=60.0)
    seed.service("svc-2", name="Tosa", price=45.0)


@pytest.fixture
def client_headers(auth_headers):
    return auth_headers("client-1")


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers("admin-1", UserRole.ADMIN)


def book(client, headers, scheduled_date, pet_id="pet-1", service_id="svc-1", time="09:00"):
    return client.post('/api/appointments/', headers=headers, json={
        "pet_id": pet_id,
        "service_id": service_id,
        "scheduled_date": scheduled_date.isoformat(),
        "scheduled_time": time,
    })


def change_status(client, headers, appointment_id, status):
    return client.patch(f'/api/admin/appointments/{appointment_id}/status', headers=headers, json={"status": status})


def test_create_confirm_complete_then_locked(client, booking_data, client_headers, admin_headers, booking_day):
    res = book(client, client_headers, booking_day)
    assert res.status_code == 201
    created = res.get_json()
    assert created["status"] == "PENDING"
    assert created["scheduled_date"] == booking_day.isoformat()
    appointment_id = created["appointment_id"]

    res = change_status(client, admin_headers, appointment_id, "CONFIRMED")
    assert res.status_code == 200
    assert res.get_json()["status"] == "CONFIRMED"

    res = change_status(client, admin_headers, appointment_id, "COMPLETED")
    assert res.status_code == 200
    assert res.get_json()["status"] == "COMPLETED"

    for status in ("CONFIRMED", "CANCELED", "COMPLETED"):
        res = change_status(client, admin_headers, appointment_id, status)
        assert res.status_code == 409
        assert res.get_json()["error_code"] == "INVALID_STATUS_TRANSITION"

    # 완료된 예약은 수정/삭제 불가
    res = client.delete(f'/api/appointments/{appointment_id}', headers=client_headers)
    assert res.status_code == 409
    res = client.patch(f'/api/appointments/{appointment_id}', headers=client_headers, json={"notes": "x"})
    assert res.status_code == 409


def test_client_cannot_change_status(client, booking_data, client_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]
    res = change_status(client, client_headers, appointment_id, "CONFIRMED")
    assert res.status_code == 403


def test_in_progress_is_not_admin_settable(client, booking_data, client_headers, admin_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]
    res = change_status(client, admin_headers, appointment_id, "IN_PROGRESS")
    assert res.status_code == 400


def test_booking_notifies_admins(client, fake_db, booking_data, client_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]

    notifications = list(fake_db.docs('notifications').values())
    assert len(notifications) == 1
    assert notifications[0]["recipient_id"] == "admin-1"
    assert notifications[0]["type"] == "NEW_APPOINTMENT"
    assert notifications[0]["target_id"] == appointment_id


def test_booking_notification_respects_admin_setting(client, fake_db, booking_data, client_headers, admin_headers, booking_day):
    res = client.put('/api/admin/settings/notifications', headers=admin_headers, json={
        "enabled": True, "new_appointment": False, "cancel": True, "reminder": True,
    })
    assert res.status_code == 200

    assert book(client, client_headers, booking_day).status_code == 201
    assert fake_db.docs('notifications') == {}


def test_cannot_book_someone_elses_pet(client, booking_data, client_headers, booking_day):
    res = book(client, client_headers, booking_day, pet_id="pet-2")
    assert res.status_code == 403


def test_cannot_book_missing_service(client, booking_data, client_headers, booking_day):
    res = book(client, client_headers, booking_day, service_id="nope")
    assert res.status_code == 404


def test_cannot_book_past_date(client, booking_data, client_headers):
    res = book(client, client_headers, DateTimeUtils.today() - timedelta(days=1))
    assert res.status_code == 400
    assert res.get_json()["error_code"] == "INVALID_SCHEDULE"


def test_invalid_time_format_rejected(client, booking_data, client_headers, booking_day):
    res = book(client, client_headers, booking_day, time="9h")
    assert res.status_code == 400
    assert "scheduled_time" in res.get_json()["details"]


def test_status_cannot_be_set_on_create(client, booking_data, client_headers, booking_day):
    res = client.post('/api/appointments/', headers=client_headers, json={
        "pet_id": "pet-1", "service_id": "svc-1",
        "scheduled_date": booking_day.isoformat(), "scheduled_time": "09:00",
        "status": "CONFIRMED",
    })
    assert res.status_code == 400


def test_delete_pending_removes_from_agenda_and_client_list(client, fake_db, booking_data, client_headers, admin_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]

    res = client.delete(f'/api/appointments/{appointment_id}', headers=client_headers)
    assert res.status_code == 204

    agenda = client.get('/api/admin/agenda', headers=admin_headers).get_json()
    assert agenda["items"] == []
    assert agenda["pending_count"] == 0

    mine = client.get('/api/appointments/', headers=client_headers).get_json()
    assert mine == []

    types = sorted(n["type"] for n in fake_db.docs('notifications').values())
    assert types == ["APPOINTMENT_CANCELED_BY_CLIENT", "NEW_APPOINTMENT"]


def test_other_client_cannot_delete(client, booking_data, client_headers, auth_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]
    res = client.delete(f'/api/appointments/{appointment_id}', headers=auth_headers("client-2"))
    assert res.status_code == 403


def test_admin_can_delete_confirmed(client, booking_data, client_headers, admin_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]
    change_status(client, admin_headers, appointment_id, "CONFIRMED")

    res = client.delete(f'/api/admin/appointments/{appointment_id}', headers=admin_headers)
    assert res.status_code == 204
    res = client.get(f'/api/appointments/{appointment_id}', headers=client_headers)
    assert res.status_code == 404


def test_update_pending_appointment(client, booking_data, client_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]
    later = booking_day + timedelta(days=7)

    res = client.patch(f'/api/appointments/{appointment_id}', headers=client_headers, json={
        "service_id": "svc-2", "scheduled_date": later.isoformat(), "scheduled_time": "14:00",
    })
    assert res.status_code == 200
    body = res.get_json()
    assert body["service_id"] == "svc-2"
    assert body["scheduled_date"] == later.isoformat()
    assert body["status"] == "PENDING"


def test_list_views_partition_by_date(client, seed, booking_data, client_headers):
    today = DateTimeUtils.today()
    for appointment_id, offset in (("past", -3), ("today", 0), ("future", 5)):
        seed.appointment(Appointment(
            appointment_id=appointment_id, user_id="client-1", pet_id="pet-1", service_id="svc-1",
            scheduled_date=today + timedelta(days=offset), scheduled_time="10:00",
        ))

    def ids(view):
        res = client.get(f'/api/appointments/?view={view}', headers=client_headers)
        assert res.status_code == 200
        return [item["appointment"]["appointment_id"] for item in res.get_json()]

    assert ids("upcoming") == ["today", "future"]
    assert ids("history") == ["past"]
    assert ids("all") == ["past", "today", "future"]

    item = client.get('/api/appointments/?view=upcoming', headers=client_headers).get_json()[0]
    assert item["pet"]["name"] == "Rex"
    assert item["service"]["name"] == "Banho"

    res = client.get('/api/appointments/?view=soon', headers=client_headers)
    assert res.status_code == 400
    assert "view" in res.get_json()["details"]


def test_time_slots_for_saturday(client, booking_data, client_headers):
    res = client.get('/api/appointments/time-slots?date=2024-05-18', headers=client_headers)
    assert res.status_code == 200
    assert res.get_json()["time_slots"] == ["09:00", "10:00", "11:00"]


def test_requires_login(client, booking_data):
    assert client.get('/api/appointments/').status_code == 401


def next_weekday(weekday):
    """내일 이후 처음 오는 해당 요일 (월=0 ... 일=6)"""
    day = DateTimeUtils.today() + timedelta(days=1)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


def test_cannot_book_on_closed_day(client, booking_data, client_headers):
    sunday = next_weekday(6)
    assert client.get(f'/api/appointments/time-slots?date={sunday.isoformat()}',
                      headers=client_headers).get_json()["time_slots"] == []

    res = book(client, client_headers, sunday, time="09:00")
    assert res.status_code == 400
    assert res.get_json()["error_code"] == "INVALID_SCHEDULE"


@pytest.mark.parametrize("time", ["23:30", "09:30", "12:00"])
def test_cannot_book_outside_time_slots(client, booking_data, client_headers, booking_day, time):
    res = book(client, client_headers, booking_day, time=time)
    assert res.status_code == 400
    assert res.get_json()["error_code"] == "INVALID_SCHEDULE"


def test_saturday_afternoon_is_closed(client, booking_data, client_headers):
    saturday = next_weekday(5)
    assert book(client, client_headers, saturday, time="11:00").status_code == 201
    assert book(client, client_headers, saturday, time="14:00").status_code == 400


def test_booking_follows_business_hours_setting(client, booking_data, client_headers, admin_headers):
    sunday = next_weekday(6)
    hours = client.get('/api/admin/settings/', headers=admin_headers).get_json()["business_hours"]
    hours["sun"] = {"open": "09:00", "close": "12:00", "enabled": True}
    assert client.put('/api/admin/settings/business_hours', headers=admin_headers, json=hours).status_code == 200

    assert book(client, client_headers, sunday, time="10:00").status_code == 201


def test_update_rejects_unavailable_schedule(client, fake_db, booking_data, client_headers, booking_day):
    appointment_id = book(client, client_headers, booking_day).get_json()["appointment_id"]
    url = f'/api/appointments/{appointment_id}'

    res = client.patch(url, headers=client_headers, json={"scheduled_time": "13:00"})
    assert res.status_code == 400
    res = client.patch(url, headers=client_headers, json={"scheduled_date": next_weekday(6).isoformat()})
    assert res.status_code == 400

    stored = fake_db.docs('appointments')[appointment_id]
    assert stored["scheduled_date"] == booking_day.isoformat()
    assert stored["scheduled_time"] == "09:00"

    res = client.patch(url, headers=client_headers, json={"scheduled_time": "15:00"})
    assert res.status_code == 200
    assert res.get_json()["scheduled_time"] == "15:00"


def test_modifiable_view_excludes_finished(client, seed, booking_data, client_headers):
    today = DateTimeUtils.today()
    for appointment_id, status in (("done", AppointmentStatus.COMPLETED), ("open", AppointmentStatus.PENDING),
                                   ("rejected", AppointmentStatus.CANCELED), ("ok", AppointmentStatus.CONFIRMED)):
        seed.appointment(Appointment(
            appointment_id=appointment_id, user_id="client-1", pet_id="pet-1", service_id="svc-1",
            scheduled_date=today, scheduled_time="10:00", status=status,
        ))

    res = client.get('/api/appointments/?view=modifiable', headers=client_headers)
    assert res.status_code == 200
    assert sorted(item["appointment"]["appointment_id"] for item in res.get_json()) == ["ok", "open"]


def test_corrupt_stored_status_is_server_error(client, fake_db, seed, booking_data, client_headers, booking_day):
    seed.appointment(Appointment(
        appointment_id="broken", user_id="client-1", pet_id="pet-1", service_id="svc-1",
        scheduled_date=booking_day, scheduled_time="10:00",
    ))
    fake_db.collection('appointments').document("broken").update({"status": "ON_HOLD"})

    res = client.get('/api/appointments/?view=all', headers=client_headers)
    assert res.status_code == 500
    assert res.get_json()["error_code"] == "FETCH_FAILED"
