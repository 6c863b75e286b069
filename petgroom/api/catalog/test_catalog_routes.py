# petgroom/api/catalog/test_catalog_routes.py
import io

import pytest

from petgroom.models.profile import UserRole


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers("admin-1", UserRole.ADMIN)


def test_list_services_ordered_by_name(client, seed, auth_headers):
    seed.service("s1", name="Tosa", price=45)
    seed.service("s2", name="Banho", price=60)
    res = client.get('/api/catalog/', headers=auth_headers("u1"))
    assert res.status_code == 200
    assert [s["name"] for s in res.get_json()] == ["Banho", "Tosa"]


def test_admin_creates_service_with_default_rating(client, admin_headers):
    res = client.post('/api/catalog/', headers=admin_headers, json={"name": "Hidratacao", "price": 80})
    assert res.status_code == 201
    body = res.get_json()
    assert body["rating"] == 5.0
    assert body["price"] == 80.0


def test_negative_price_rejected(client, admin_headers):
    res = client.post('/api/catalog/', headers=admin_headers, json={"name": "Banho", "price": -1})
    assert res.status_code == 400


def test_client_cannot_manage_catalog(client, seed, auth_headers):
    seed.service("s1")
    headers = auth_headers("u1")
    assert client.post('/api/catalog/', headers=headers, json={"name": "X", "price": 1}).status_code == 403
    assert client.delete('/api/catalog/s1', headers=headers).status_code == 403


def test_update_and_delete_service(client, seed, admin_headers):
    seed.service("s1", name="Banho", price=60)
    res = client.patch('/api/catalog/s1', headers=admin_headers, json={"price": 70})
    assert res.get_json()["price"] == 70.0

    assert client.delete('/api/catalog/s1', headers=admin_headers).status_code == 204
    assert client.get('/api/catalog/s1', headers=admin_headers).status_code == 404


def test_service_image_upload(client, seed, fake_bucket, admin_headers):
    seed.service("s1")
    res = client.post('/api/catalog/s1/image', headers=admin_headers,
                      data={"file": (io.BytesIO(b"img"), "banho.JPG")},
                      content_type='multipart/form-data')
    assert res.status_code == 200
    assert "services/s1.jpg" in fake_bucket.public
    assert res.get_json()["image_url"].endswith("services/s1.jpg")
