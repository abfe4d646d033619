"""
Supabase authentication helpers for the Waqf Portal.

Token verification (HS256 project secret or ES256/RS256 via JWKS) and thin
wrappers over the GoTrue password grant and logout endpoints.
"""
import logging
import time
import traceback
from typing import Any, Dict

import requests
from jose import JWTError, jwk, jwt

from app.core.config import settings

ASYMMETRIC_ALGORITHMS = ("ES256", "RS256")
JWKS_CACHE_TTL_SECONDS = 600
_JWKS_CACHE: dict = {"fetched_at": 0.0, "keys": None}
logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Authentication error."""

    def __init__(self, message: str, status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def _normalize_secret(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _auth_base_url() -> str:
    if not settings.SUPABASE_URL:
        raise AuthError("Supabase URL belum dikonfigurasi", 401)
    return settings.SUPABASE_URL.rstrip("/") + "/auth/v1"


def _supabase_jwks_url() -> str:
    return _auth_base_url() + "/.well-known/jwks.json"


def _fetch_jwks() -> list[dict]:
    response = requests.get(_supabase_jwks_url(), timeout=5)
    response.raise_for_status()
    keys = response.json().get("keys")
    if not keys:
        raise AuthError("JWKS tanpa kunci", 401)
    return keys


def _get_jwks() -> tuple[list[dict], bool]:
    now = time.time()
    cached_keys = _JWKS_CACHE.get("keys")
    if cached_keys and now - _JWKS_CACHE.get("fetched_at", 0) < JWKS_CACHE_TTL_SECONDS:
        return cached_keys, True

    try:
        keys = _fetch_jwks()
        _JWKS_CACHE["keys"] = keys
        _JWKS_CACHE["fetched_at"] = now
        return keys, False
    except Exception as exc:  # pragma: no cover - network failures
        if cached_keys:
            logger.warning(
                "JWKS fetch failed; using cached keys. error=%s",
                type(exc).__name__,
            )
            return cached_keys, True
        if isinstance(exc, AuthError):
            raise
        raise AuthError("JWKS tidak dapat diambil", 401) from exc


def _verification_key(header: dict) -> tuple[Any, str]:
    alg = header.get("alg")
    if alg == "HS256":
        if not settings.SUPABASE_JWT_SECRET:
            raise AuthError("Algoritma JWT tidak valid", 401)
        return _normalize_secret(settings.SUPABASE_JWT_SECRET.get_secret_value()), alg

    if alg not in ASYMMETRIC_ALGORITHMS:
        raise AuthError("Algoritma JWT tidak valid", 401)

    kid = header.get("kid")
    if not kid:
        raise AuthError("Token tidak valid", 401)

    keys, cache_hit = _get_jwks()
    key_dict = next((key for key in keys if key.get("kid") == kid), None)
    if not key_dict:
        raise AuthError("Token tidak valid", 401)
    logger.info("JWKS lookup | cache_hit=%s | kid=%s", cache_hit, kid)
    return jwk.construct(key_dict, alg).to_pem(), alg


def decode_supabase_token(token: str) -> dict:
    """Decode and validate a Supabase JWT access token."""
    expected_issuer = _auth_base_url()
    audience = settings.SUPABASE_JWT_AUDIENCE

    try:
        header = jwt.get_unverified_header(token)
    except JWTError as exc:
        logger.warning(
            "JWT header parse failed | error_type=%s | error=%s",
            type(exc).__name__,
            str(exc),
        )
        raise AuthError("Token tidak valid", 401) from exc

    key, alg = _verification_key(header)

    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=[alg],
            issuer=expected_issuer,
            audience=audience,
            options={"verify_aud": bool(audience), "verify_iss": True},
        )
    except JWTError as exc:
        logger.warning(
            "JWT decode failed | error_type=%s | error=%s | traceback=%s",
            type(exc).__name__,
            str(exc),
            traceback.format_exc(limit=3),
        )
        if "expired" in str(exc).lower():
            raise AuthError("Token kedaluwarsa", 401) from exc
        raise AuthError("Token tidak valid", 401) from exc

    if not payload.get("sub"):
        raise AuthError("Token tidak valid", 401)
    return payload


def _gotrue_headers(access_token: str | None = None) -> Dict[str, str]:
    if not settings.SUPABASE_ANON_KEY:
        raise AuthError("Supabase anon key belum dikonfigurasi", 503)
    headers = {
        "apikey": settings.SUPABASE_ANON_KEY.get_secret_value(),
        "Content-Type": "application/json",
    }
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def sign_in_with_password(email: str, password: str) -> dict:
    """Password grant against Supabase Auth. Returns the GoTrue session payload."""
    try:
        response = requests.post(
            _auth_base_url() + "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers=_gotrue_headers(),
            timeout=settings.SUPABASE_HTTP_TIMEOUT,
        )
    except requests.RequestException as exc:
        logger.warning("Supabase sign-in unreachable | error_type=%s", type(exc).__name__)
        raise AuthError("Layanan autentikasi tidak dapat dihubungi", 503) from exc

    if response.status_code in (400, 401, 422):
        raise AuthError("Email atau password salah", 401)
    if response.status_code >= 400:
        logger.warning("Supabase sign-in failed | status=%s", response.status_code)
        raise AuthError("Layanan autentikasi tidak dapat dihubungi", 503)

    data = response.json()
    if not data.get("access_token"):
        raise AuthError("Respons autentikasi tidak valid", 503)
    return data


def sign_out(access_token: str) -> None:
    """Revoke the session behind ``access_token``. Failures are logged only."""
    try:
        response = requests.post(
            _auth_base_url() + "/logout",
            headers=_gotrue_headers(access_token),
            timeout=settings.SUPABASE_HTTP_TIMEOUT,
        )
        if response.status_code >= 400:
            logger.warning("Supabase sign-out failed | status=%s", response.status_code)
    except requests.RequestException as exc:
        logger.warning("Supabase sign-out unreachable | error_type=%s", type(exc).__name__)
