import time
from typing import Generator, Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api import deps as api_deps
from app.core.config import settings
from app.main import app
from app.models import Base
from app.services import supabase_auth
from app.services.data_store import SqlDataStore
from app.services.identity import CurrentUser
from app.services.storage_service import StorageService

TEST_SUPABASE_URL = "https://test.supabase.co"
TEST_JWT_SECRET = "test-jwt-secret-for-hs256-signing"

# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="function")
def db_engine():
    """
    Fresh in-memory SQLite database per test, schema from the ORM metadata.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def store(db_session) -> SqlDataStore:
    return SqlDataStore(db_session)


# -----------------------------------------------------------------------------
# Identity Fixtures
# -----------------------------------------------------------------------------


class StaticIdentity:
    """Identity provider double with a fixed user and role set."""

    def __init__(self, user: Optional[CurrentUser] = None, roles=()):
        self.user = user
        self.roles = set(roles)
        self.calls = 0

    def get_current_user(self):
        self.calls += 1
        return self.user

    def get_session(self):
        return None

    def has_role(self, user_id, role):
        return self.user is not None and user_id == self.user.id and role in self.roles


@pytest.fixture
def identity_factory():
    return StaticIdentity


@pytest.fixture
def admin_identity() -> StaticIdentity:
    return StaticIdentity(
        CurrentUser(id=str(uuid4()), email="admin@wakaf.or.id"), roles={"admin"}
    )


@pytest.fixture
def supabase_settings(monkeypatch):
    """Point token verification at a local HS256 secret."""
    monkeypatch.setattr(settings, "SUPABASE_URL", TEST_SUPABASE_URL)
    monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", SecretStr(TEST_JWT_SECRET))
    monkeypatch.setattr(settings, "SUPABASE_JWT_AUDIENCE", "authenticated")
    monkeypatch.setattr(settings, "SUPABASE_ANON_KEY", SecretStr("anon-key"))
    supabase_auth._JWKS_CACHE["keys"] = None
    supabase_auth._JWKS_CACHE["fetched_at"] = 0.0
    return settings


@pytest.fixture
def make_token(supabase_settings):
    def _make(sub: Optional[str] = None, email: str = "admin@wakaf.or.id", expires_in: int = 3600):
        now = int(time.time())
        payload = {
            "sub": sub or str(uuid4()),
            "email": email,
            "aud": "authenticated",
            "iss": f"{TEST_SUPABASE_URL}/auth/v1",
            "role": "authenticated",
            "iat": now,
            "exp": now + expires_in,
        }
        return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")

    return _make


# -----------------------------------------------------------------------------
# Client Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="function")
def storage(tmp_path) -> StorageService:
    return StorageService(
        backend="local",
        local_root=str(tmp_path / "storage"),
        public_url_base="http://testserver/storage",
        default_bucket="media",
    )


@pytest.fixture(scope="function")
def client(session_factory, storage) -> Generator[TestClient, None, None]:
    """
    TestClient with get_db and the storage service overridden.
    """

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[api_deps.get_db] = override_get_db
    app.dependency_overrides[api_deps.get_storage] = lambda: storage

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(store, make_token):
    """An admin account: role row in user_roles and a valid bearer token."""
    user_id = str(uuid4())
    store.insert("user_roles", {"user_id": user_id, "role": "admin"})
    token = make_token(sub=user_id, email="admin@wakaf.or.id")
    return {
        "id": user_id,
        "email": "admin@wakaf.or.id",
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture
def admin_client(client, admin_user):
    """Client sending the admin bearer token."""
    client.headers.update(admin_user["headers"])
    return client
