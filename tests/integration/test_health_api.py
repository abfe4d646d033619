import pytest

from app.services.data_store import DataStoreError, SqlDataStore

pytestmark = pytest.mark.integration


def test_basic_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health(client):
    body = client.get("/api/v1/health/detailed").json()

    assert body["status"] == "healthy"
    assert body["services"]["database"]["status"] == "healthy"
    assert body["services"]["storage"]["status"] == "healthy"


def test_keep_alive_records_ping(client, store):
    response = client.post("/api/v1/health/keep-alive")

    assert response.status_code == 200
    assert response.json()["success"] is True
    rows = store.select("keep_alive_logs")
    assert [r["status"] for r in rows] == ["success"]


def test_keep_alive_failure(client, store, monkeypatch):
    original_select = SqlDataStore.select

    def select(self, collection, **kwargs):
        if collection == "profil":
            raise DataStoreError("timeout", collection)
        return original_select(self, collection, **kwargs)

    monkeypatch.setattr(SqlDataStore, "select", select)

    response = client.post("/api/v1/health/keep-alive")

    assert response.status_code == 500
    assert response.json()["error"] == "timeout"
    assert [r["status"] for r in store.select("keep_alive_logs")] == ["error"]


def test_monitoring_history(admin_client):
    admin_client.post("/api/v1/health/keep-alive")
    admin_client.post("/api/v1/health/keep-alive")

    body = admin_client.get("/api/v1/admin/monitoring").json()

    assert body["total"] == 2
    assert body["success"] == 2
    assert body["last_ping"] is not None


def test_monitoring_requires_admin(client):
    assert client.get("/api/v1/admin/monitoring").status_code == 401
