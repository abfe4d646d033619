"""
Admin content editor over HTTP: every successful mutation leaves exactly one
activity log entry, and a failing log write never changes the response.
"""
import pytest

from app.services.audit_logger import AuditLogger
from app.services.data_store import DataStoreError

pytestmark = pytest.mark.integration

CONTENT = "/api/v1/admin/content"
LOGS = "/api/v1/admin/logs"


def _create_fasilitas(admin_client, nama="Masjid"):
    response = admin_client.post(
        f"{CONTENT}/fasilitas", json={"nama": nama, "deskripsi": "Masjid utama yayasan"}
    )
    assert response.status_code == 201
    return response.json()


def test_update_writes_one_update_entry(admin_client, admin_user):
    record = _create_fasilitas(admin_client)

    response = admin_client.put(f"{CONTENT}/fasilitas/{record['id']}", json={"nama": "Masjid Baru"})

    assert response.status_code == 200
    assert response.json()["nama"] == "Masjid Baru"

    logs = admin_client.get(LOGS, params={"limit": 1}).json()["logs"]
    assert len(logs) == 1
    entry = logs[0]
    assert entry["action"] == "UPDATE"
    assert entry["target_table"] == "fasilitas"
    assert entry["target_record_id"] == record["id"]
    assert entry["old_payload"]["nama"] == "Masjid"
    assert entry["new_payload"] == {"nama": "Masjid Baru"}
    assert entry["actor_id"] == admin_user["id"]
    assert entry["actor_email"] == "admin@wakaf.or.id"


def test_create_update_delete_each_logged_once(admin_client, store):
    record = _create_fasilitas(admin_client)
    admin_client.put(f"{CONTENT}/fasilitas/{record['id']}", json={"deskripsi": "Baru"})
    assert admin_client.delete(f"{CONTENT}/fasilitas/{record['id']}").status_code == 200

    rows = store.select("admin_logs")
    assert sorted(r["action"] for r in rows) == ["CREATE", "DELETE", "UPDATE"]
    delete_row = next(r for r in rows if r["action"] == "DELETE")
    assert delete_row["new_data"] is None
    assert delete_row["description"] == "Hapus fasilitas: Masjid"


def test_toggle_program_logged(admin_client, store):
    program = admin_client.post(
        f"{CONTENT}/programs", json={"nama": "Tahfidz", "deskripsi": "Program hafalan"}
    ).json()

    response = admin_client.post(f"{CONTENT}/programs/{program['id']}/toggle")

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    toggle = [r for r in store.select("admin_logs") if r["action"] == "UPDATE"]
    assert len(toggle) == 1
    assert toggle[0]["description"] == "Toggle status program: Nonaktif"
    assert toggle[0]["new_data"] == {"is_active": False}


def test_failed_mutation_writes_no_entry(admin_client, store):
    assert admin_client.put(f"{CONTENT}/fasilitas/missing", json={"nama": "x"}).status_code == 404
    assert admin_client.delete(f"{CONTENT}/fasilitas/missing").status_code == 404
    assert admin_client.post(f"{CONTENT}/fasilitas", json={"nama": ""}).status_code == 422
    assert admin_client.post(f"{CONTENT}/users", json={}).status_code == 404
    assert store.select("admin_logs") == []


def test_log_write_failure_does_not_change_response(admin_client, store, monkeypatch, caplog):
    def broken_insert(self, collection, record):
        raise DataStoreError("connection reset", collection)

    original_insert = type(store).insert

    def insert(self, collection, record):
        if collection == "admin_logs":
            return broken_insert(self, collection, record)
        return original_insert(self, collection, record)

    monkeypatch.setattr(type(store), "insert", insert)

    response = admin_client.post(
        f"{CONTENT}/fasilitas", json={"nama": "Aula", "deskripsi": "Aula serbaguna"}
    )

    assert response.status_code == 201
    assert store.get("fasilitas", response.json()["id"]) is not None
    assert store.select("admin_logs") == []
    assert "Audit write failed" in caplog.text


def test_audit_exception_is_contained(admin_client, monkeypatch):
    def explode(self, entry):
        raise RuntimeError("boom")

    monkeypatch.setattr(AuditLogger, "record", explode)

    response = admin_client.post(
        f"{CONTENT}/fasilitas", json={"nama": "Aula", "deskripsi": "Aula serbaguna"}
    )

    assert response.status_code == 201


def test_extra_fields_are_rejected(admin_client):
    response = admin_client.post(
        f"{CONTENT}/fasilitas", json={"nama": "x", "deskripsi": "y", "id": "forced"}
    )
    assert response.status_code == 422


@pytest.mark.parametrize(
    "collection,create_body,field",
    [
        ("fasilitas", {"nama": "Masjid", "deskripsi": "Masjid utama"}, "nama"),
        ("kegiatan", {"nama_kegiatan": "Kajian", "deskripsi": "Rutin", "tanggal": "2026-10-01"}, "tanggal"),
        ("dokumentasi", {"jenis_media": "foto", "media_url": "https://cdn.test/a.jpg"}, "media_url"),
    ],
)
def test_null_for_required_column_is_rejected(admin_client, store, collection, create_body, field):
    record = admin_client.post(f"{CONTENT}/{collection}", json=create_body).json()

    response = admin_client.put(f"{CONTENT}/{collection}/{record['id']}", json={field: None})

    assert response.status_code == 422
    assert store.get(collection, record["id"])[field] is not None
    assert [r["action"] for r in store.select("admin_logs")] == ["CREATE"]


def test_null_for_optional_column_clears_it(admin_client):
    record = admin_client.post(
        f"{CONTENT}/fasilitas",
        json={"nama": "Aula", "deskripsi": "Aula serbaguna", "foto_url": "https://cdn.test/aula.jpg"},
    ).json()

    response = admin_client.put(f"{CONTENT}/fasilitas/{record['id']}", json={"foto_url": None})

    assert response.status_code == 200
    assert response.json()["foto_url"] is None


def test_content_requires_admin(client, make_token):
    assert client.post(f"{CONTENT}/fasilitas", json={}).status_code == 401
    token = make_token(email="warga@example.com")
    response = client.post(
        f"{CONTENT}/fasilitas",
        json={"nama": "x", "deskripsi": "y"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403


def test_public_listing_reflects_admin_edits(admin_client):
    _create_fasilitas(admin_client, "Perpustakaan")

    response = admin_client.get("/api/v1/content/fasilitas")

    assert response.status_code == 200
    assert [r["nama"] for r in response.json()] == ["Perpustakaan"]
    assert admin_client.get("/api/v1/content/unknown").status_code == 404
