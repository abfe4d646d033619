import base64
import time
from uuid import uuid4

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jose import jwt

from app.core.config import settings
from app.services import supabase_auth

pytestmark = pytest.mark.integration


def _b64url_uint(value: int) -> str:
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("utf-8")


def _generate_es256_token(sub: str):
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_key = private_key.public_key()
    numbers = public_key.public_numbers()

    jwk_dict = {
        "kty": "EC",
        "crv": "P-256",
        "x": _b64url_uint(numbers.x),
        "y": _b64url_uint(numbers.y),
        "use": "sig",
        "kid": "test-kid",
        "alg": "ES256",
    }

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )

    payload = {
        "sub": sub,
        "email": "pengurus@wakaf.or.id",
        "aud": "authenticated",
        "iss": "https://test.supabase.co/auth/v1",
        "iat": int(time.time()),
        "exp": int(time.time()) + 3600,
    }

    token = jwt.encode(
        payload,
        private_pem,
        algorithm="ES256",
        headers={"kid": "test-kid"},
    )

    return token, jwk_dict


class MockResponse:
    def __init__(self, payload):
        self._payload = payload
        self.status_code = 200

    def json(self):
        return self._payload

    def raise_for_status(self):
        return None


def test_admin_logs_require_authorization(client):
    response = client.get("/api/v1/admin/logs")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_admin_logs_reject_garbage_token(client, supabase_settings):
    response = client.get(
        "/api/v1/admin/logs", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_non_admin_is_forbidden(client, make_token):
    token = make_token(email="warga@example.com")
    response = client.get(
        "/api/v1/admin/logs", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Akses admin diperlukan"


def test_expired_admin_token_is_rejected(client, store, make_token):
    user_id = str(uuid4())
    store.insert("user_roles", {"user_id": user_id, "role": "admin"})
    token = make_token(sub=user_id, expires_in=-30)

    response = client.get(
        "/api/v1/admin/logs", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


def test_admin_accepts_valid_es256_supabase_jwt(client, store, monkeypatch):
    user_id = str(uuid4())
    store.insert("user_roles", {"user_id": user_id, "role": "admin"})
    token, jwk_dict = _generate_es256_token(user_id)

    monkeypatch.setattr(settings, "SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_JWT_AUDIENCE", "authenticated")
    supabase_auth._JWKS_CACHE["keys"] = None
    supabase_auth._JWKS_CACHE["fetched_at"] = 0.0

    calls = []

    def mock_get(url, timeout=5):
        calls.append(url)
        return MockResponse({"keys": [jwk_dict]})

    monkeypatch.setattr(supabase_auth.requests, "get", mock_get)

    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/v1/admin/logs", headers=headers).status_code == 200
    assert client.get("/api/v1/admin/logs", headers=headers).status_code == 200

    # JWKS is cached between requests
    assert calls == ["https://test.supabase.co/auth/v1/.well-known/jwks.json"]
