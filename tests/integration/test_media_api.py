import pytest

from app.core.config import settings

pytestmark = pytest.mark.integration

MEDIA = "/api/v1/admin/media"


def test_upload_list_delete(admin_client):
    upload = admin_client.post(
        MEDIA, files={"file": ("Kajian Subuh.JPG", b"\xff\xd8jpeg-data", "image/jpeg")}
    )

    assert upload.status_code == 201
    body = upload.json()
    assert body["name"].endswith(".jpg")
    assert body["url"] == f"http://testserver/storage/media/{body['name']}"
    assert body["size"] == 11

    listing = admin_client.get(MEDIA).json()
    assert listing["total"] == 1
    assert listing["objects"][0]["name"] == body["name"]
    assert listing["objects"][0]["mimetype"] == "image/jpeg"

    removed = admin_client.request("DELETE", MEDIA, json={"paths": [body["name"]]})
    assert removed.json() == {"removed": [body["name"]]}
    assert admin_client.get(MEDIA).json()["total"] == 0


def test_unsupported_type_rejected(admin_client):
    response = admin_client.post(
        MEDIA, files={"file": ("run.sh", b"#!/bin/sh", "application/x-sh")}
    )
    assert response.status_code == 415


def test_oversized_file_rejected(admin_client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 4)
    response = admin_client.post(
        MEDIA, files={"file": ("a.png", b"12345", "image/png")}
    )
    assert response.status_code == 413


def test_delete_requires_paths(admin_client):
    assert admin_client.request("DELETE", MEDIA, json={"paths": []}).status_code == 422


def test_media_requires_admin(client):
    assert client.get(MEDIA).status_code == 401
