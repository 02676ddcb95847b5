import uuid

import pytest

from conftest import VALID_PASSWORD

pytestmark = pytest.mark.integration


def test_create_user(client):
    response = client.post(
        "/usercreate",
        json={"name": "Ana", "email": "Ana@Example.com", "password": VALID_PASSWORD, "adm": True},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "ana@example.com"
    assert body["isAdmin"] is True
    assert body["profileImage"] is None
    assert "password" not in body and "passwordHash" not in body


def test_create_user_weak_password(client):
    response = client.post("/usercreate", json={"name": "Ana", "email": "ana@example.com", "password": "fraca"})

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"field": "password"}


def test_create_user_missing_fields(client):
    response = client.post("/usercreate", json={"name": "Ana"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Name, email, and password are required."


def test_create_user_duplicate_email(client, api):
    api.user(email="ana@example.com")

    response = client.post(
        "/usercreate", json={"name": "Outra", "email": "ana@example.com", "password": VALID_PASSWORD}
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_list_and_get_users(client, api):
    ana = api.user(name="Ana")
    post = api.post(ana)
    api.comment(ana, post)

    users = client.get("/users").json()
    assert [u["id"] for u in users] == [ana["id"]]

    detail = client.get(f"/user/{ana['id']}").json()
    assert detail["posts"][0]["id"] == post["id"]
    assert detail["posts"][0]["comments"][0]["postId"] == post["id"]
    assert detail["comments"][0]["post"]["title"] == "Titulo"
    assert "password" not in str(detail)


def test_get_unknown_user(client):
    response = client.get(f"/user/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["details"]["resource"] == "User"


def test_update_user(client, api):
    ana = api.user(name="Ana")

    response = client.put("/userupdate/", json={"id": ana["id"], "name": "Ana Clara"})

    assert response.status_code == 200
    assert response.json()["name"] == "Ana Clara"
    assert response.json()["email"] == ana["email"]


def test_update_user_weak_password(client, api):
    ana = api.user()

    response = client.put("/userupdate/", json={"id": ana["id"], "password": "123"})

    assert response.status_code == 400


def test_upload_profile_image(client, api, upload_dir):
    ana = api.user()

    response = client.put(
        f"/userimage/{ana['id']}",
        files={"file": ("perfil.PNG", b"\x89PNG data", "image/png")},
    )

    assert response.status_code == 200
    filename = response.json()["profileImage"]
    assert filename.endswith(".png")
    assert (upload_dir / filename).read_bytes() == b"\x89PNG data"


def test_upload_profile_image_for_unknown_user_leaves_no_file(client, upload_dir):
    response = client.put(
        f"/userimage/{uuid.uuid4()}",
        files={"file": ("perfil.png", b"data", "image/png")},
    )

    assert response.status_code == 404
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_upload_profile_image_requires_image(client, api):
    ana = api.user()

    response = client.put(f"/userimage/{ana['id']}", files={"file": ("notes.txt", b"text", "text/plain")})

    assert response.status_code == 400


def test_upload_too_large(client, api, monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "8")
    ana = api.user()

    response = client.put(f"/userimage/{ana['id']}", files={"file": ("big.png", b"0123456789", "image/png")})

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "UPLOAD_TOO_LARGE"


def test_delete_user_cascades(client, api):
    ana = api.user()
    bia = api.user()
    post = api.post(ana)
    api.comment(bia, post)

    response = client.request("DELETE", "/user/", json={"id": ana["id"]})

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully."}
    assert client.get("/posts").json() == []
    assert client.get(f"/user/{bia['id']}").json()["comments"] == []

    again = client.request("DELETE", "/user/", json={"id": ana["id"]})
    assert again.status_code == 404
