# petgroom/api/pets/test_pet_routes.py
import io


def test_register_and_list_own_pets(client, auth_headers):
    headers = auth_headers("u1")
    res = client.post('/api/pets/', headers=headers, json={"name": "Rex", "breed": "Poodle"})
    assert res.status_code == 201
    assert res.get_json()["species"] == "dog"

    client.post('/api/pets/', headers=auth_headers("u2"), json={"name": "Luna", "species": "cat"})

    res = client.get('/api/pets/', headers=headers)
    assert [p["name"] for p in res.get_json()] == ["Rex"]


def test_invalid_species_rejected(client, auth_headers):
    res = client.post('/api/pets/', headers=auth_headers("u1"), json={"name": "Rex", "species": "dragon"})
    assert res.status_code == 400


def test_only_owner_can_edit_or_delete(client, seed, auth_headers):
    seed.pet("p1", "u1")
    other = auth_headers("u2")
    assert client.patch('/api/pets/p1', headers=other, json={"name": "X"}).status_code == 403
    assert client.delete('/api/pets/p1', headers=other).status_code == 403

    owner = auth_headers("u1")
    res = client.patch('/api/pets/p1', headers=owner, json={"age": "2 anos"})
    assert res.status_code == 200
    assert res.get_json()["age"] == "2 anos"
    assert client.delete('/api/pets/p1', headers=owner).status_code == 204
    assert client.get('/api/pets/p1', headers=owner).status_code == 403


def test_pet_image_path(client, seed, fake_bucket, auth_headers):
    seed.pet("p1", "u1")
    res = client.post('/api/pets/p1/image', headers=auth_headers("u1"),
                      data={"file": (io.BytesIO(b"img"), "rex.webp")},
                      content_type='multipart/form-data')
    assert res.status_code == 200
    assert list(fake_bucket.files) == ["pets/u1/p1.webp"]
