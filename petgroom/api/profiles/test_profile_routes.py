# petgroom/api/profiles/test_profile_routes.py
import io


def test_missing_profile_is_null_not_error(client, auth_headers):
    res = client.get('/api/profiles/me', headers=auth_headers("nobody"))
    assert res.status_code == 200
    assert res.get_json() is None


def test_upsert_creates_then_updates(client, fake_db, auth_headers):
    headers = auth_headers("u1")
    res = client.put('/api/profiles/me', headers=headers, json={"full_name": "Maria", "phone": "1199"})
    assert res.status_code == 200
    assert res.get_json()["role"] == "CLIENT"

    res = client.put('/api/profiles/me', headers=headers, json={"neighborhood": "Centro"})
    body = res.get_json()
    assert body["full_name"] == "Maria"
    assert body["neighborhood"] == "Centro"
    assert fake_db.docs('profiles')["u1"]["neighborhood"] == "Centro"


def test_role_is_not_client_writable(client, fake_db, seed, auth_headers):
    seed.profile("u1")
    res = client.put('/api/profiles/me', headers=auth_headers("u1"), json={"role": "ADMIN"})
    assert res.status_code == 400
    assert fake_db.docs('profiles')["u1"]["role"] == "CLIENT"


def test_avatar_upload_overwrites_same_path(client, fake_bucket, seed, auth_headers):
    seed.profile("u1")
    headers = auth_headers("u1")
    for content in (b"first", b"second"):
        res = client.post('/api/profiles/me/avatar', headers=headers,
                          data={"file": (io.BytesIO(content), "me.png")},
                          content_type='multipart/form-data')
        assert res.status_code == 200

    assert list(fake_bucket.files) == ["avatars/u1/avatar.png"]
    assert fake_bucket.files["avatars/u1/avatar.png"][0] == b"second"
    assert res.get_json()["avatar_url"].endswith("avatars/u1/avatar.png")


def test_avatar_rejects_unsupported_extension(client, seed, auth_headers):
    seed.profile("u1")
    res = client.post('/api/profiles/me/avatar', headers=auth_headers("u1"),
                      data={"file": (io.BytesIO(b"x"), "me.gif")},
                      content_type='multipart/form-data')
    assert res.status_code == 400
    assert res.get_json()["error_code"] == "INVALID_UPLOAD"


def test_avatar_requires_file(client, auth_headers):
    res = client.post('/api/profiles/me/avatar', headers=auth_headers("u1"), data={},
                      content_type='multipart/form-data')
    assert res.status_code == 400
