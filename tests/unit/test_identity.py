"""
Tests for Supabase token verification and the request identity provider.
"""
import pytest
from jose import jwt

from app.services.data_store import DataStoreError
from app.services.identity import CurrentUser, SupabaseIdentityProvider
from app.services.supabase_auth import AuthError, decode_supabase_token


class TestDecodeToken:
    def test_valid_hs256_token(self, make_token):
        token = make_token(sub="user-1", email="admin@wakaf.or.id")

        payload = decode_supabase_token(token)

        assert payload["sub"] == "user-1"
        assert payload["email"] == "admin@wakaf.or.id"

    def test_expired_token(self, make_token):
        token = make_token(expires_in=-60)
        with pytest.raises(AuthError) as exc_info:
            decode_supabase_token(token)
        assert exc_info.value.message == "Token kedaluwarsa"

    def test_wrong_secret(self, make_token, supabase_settings):
        claims = jwt.get_unverified_claims(make_token())
        forged = jwt.encode(claims, "another-secret", algorithm="HS256")
        with pytest.raises(AuthError):
            decode_supabase_token(forged)

    def test_wrong_issuer(self, make_token, monkeypatch, supabase_settings):
        token = make_token()
        monkeypatch.setattr(supabase_settings, "SUPABASE_URL", "https://other.supabase.co")
        with pytest.raises(AuthError):
            decode_supabase_token(token)

    def test_garbage(self, supabase_settings):
        with pytest.raises(AuthError):
            decode_supabase_token("not-a-jwt")

    def test_unsupported_algorithm(self, supabase_settings):
        token = jwt.encode({"sub": "x"}, "k", algorithm="HS512")
        with pytest.raises(AuthError, match="Algoritma"):
            decode_supabase_token(token)


class TestSupabaseIdentityProvider:
    def test_resolves_user_from_token(self, store, make_token):
        token = make_token(sub="user-1", email="admin@wakaf.or.id")
        provider = SupabaseIdentityProvider(token, store)

        assert provider.get_current_user() == CurrentUser(id="user-1", email="admin@wakaf.or.id")
        session = provider.get_session()
        assert session.access_token == token
        assert session.expires_at is not None

    def test_missing_token(self, store):
        provider = SupabaseIdentityProvider(None, store)
        assert provider.get_current_user() is None
        assert provider.get_session() is None

    def test_invalid_token_yields_no_user(self, store, supabase_settings):
        assert SupabaseIdentityProvider("bad", store).get_current_user() is None

    def test_token_is_decoded_once(self, store):
        calls = []

        def decoder(token):
            calls.append(token)
            return {"sub": "u", "email": None}

        provider = SupabaseIdentityProvider("t", store, decoder=decoder)
        provider.get_current_user()
        provider.get_current_user()
        provider.get_session()

        assert calls == ["t"]

    def test_has_role(self, store):
        store.insert("user_roles", {"user_id": "user-1", "role": "admin"})
        store.insert("user_roles", {"user_id": "user-2", "role": "user"})
        provider = SupabaseIdentityProvider(None, store)

        assert provider.has_role("user-1", "admin")
        assert not provider.has_role("user-2", "admin")
        assert not provider.has_role("user-3", "admin")

    def test_has_role_store_failure_is_false(self):
        class BrokenStore:
            def select(self, *args, **kwargs):
                raise DataStoreError("down", "user_roles")

        assert not SupabaseIdentityProvider(None, BrokenStore()).has_role("u", "admin")
