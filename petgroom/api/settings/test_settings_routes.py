# petgroom/api/settings/test_settings_routes.py
import pytest

from petgroom.models.admin_setting import SettingCategory, default_value
from petgroom.models.profile import UserRole


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers("admin-1", UserRole.ADMIN)


def test_missing_settings_fall_back_to_defaults(client, admin_headers):
    res = client.get('/api/admin/settings/', headers=admin_headers)
    assert res.status_code == 200
    body = res.get_json()
    assert body["notifications"] == default_value(SettingCategory.NOTIFICATIONS)
    assert body["business_hours"]["sun"]["enabled"] is False

    res = client.get('/api/admin/settings/payment_methods', headers=admin_headers)
    assert res.get_json() == default_value(SettingCategory.PAYMENT_METHODS)


def test_upsert_payment_methods(client, fake_db, admin_headers):
    value = {"pix": True, "cash": False, "credit_card": True, "debit_card": False}
    res = client.put('/api/admin/settings/payment_methods', headers=admin_headers, json=value)
    assert res.status_code == 200
    assert fake_db.docs('admin_settings')["payment_methods"]["value"] == value

    res = client.get('/api/admin/settings/payment_methods', headers=admin_headers)
    assert res.get_json() == value


def test_business_hours_validation(client, admin_headers):
    hours = default_value(SettingCategory.BUSINESS_HOURS)
    hours["mon"] = {"open": "18:00", "close": "08:00", "enabled": True}
    res = client.put('/api/admin/settings/business_hours', headers=admin_headers, json=hours)
    assert res.status_code == 400

    hours["mon"] = {"open": "8am", "close": "18:00", "enabled": True}
    res = client.put('/api/admin/settings/business_hours', headers=admin_headers, json=hours)
    assert res.status_code == 400


def test_closed_day_has_no_time_slots(client, admin_headers, auth_headers):
    hours = default_value(SettingCategory.BUSINESS_HOURS)
    hours["wed"]["enabled"] = False
    assert client.put('/api/admin/settings/business_hours', headers=admin_headers, json=hours).status_code == 200

    # 2024-05-15는 수요일
    res = client.get('/api/appointments/time-slots?date=2024-05-15', headers=auth_headers("u1"))
    assert res.get_json()["time_slots"] == []


def test_unknown_category(client, admin_headers):
    assert client.get('/api/admin/settings/theme', headers=admin_headers).status_code == 404
