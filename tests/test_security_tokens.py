from __future__ import annotations

import pytest
from jose import jwt

from fintrack.core import config as core_config
from fintrack.core.security import hash_password, hash_scheme, needs_rehash, verify_password
from fintrack.core.tokens import TokenError, decode_token, issue_token


@pytest.fixture()
def settings_env(monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("PASSWORD_SCHEME", raising=False)
    core_config.get_settings.cache_clear()
    yield
    core_config.get_settings.cache_clear()


def test_bcrypt_hash_is_salted_and_verifies(settings_env):
    first = hash_password("s3cret")
    second = hash_password("s3cret")

    assert hash_scheme(first) == "bcrypt"
    assert first != second
    assert verify_password("s3cret", first)
    assert not verify_password("wrong", first)
    assert not needs_rehash(first)


def test_default_cost_factor_is_ten(monkeypatch):
    monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
    core_config.get_settings.cache_clear()
    try:
        assert core_config.get_settings().bcrypt_rounds == 10
    finally:
        core_config.get_settings.cache_clear()


def test_argon2_hash_verifies_and_needs_rehash_under_bcrypt(settings_env, monkeypatch):
    monkeypatch.setenv("PASSWORD_SCHEME", "argon2")
    core_config.get_settings.cache_clear()
    stored = hash_password("s3cret")
    assert hash_scheme(stored) == "argon2"
    assert verify_password("s3cret", stored)

    monkeypatch.setenv("PASSWORD_SCHEME", "bcrypt")
    core_config.get_settings.cache_clear()
    assert verify_password("s3cret", stored)
    assert needs_rehash(stored)


def test_unknown_hash_never_verifies(settings_env):
    assert not verify_password("s3cret", "plain-text")
    assert not verify_password("s3cret", None)


def test_issue_token_sets_issuer_subject_and_claims():
    token = issue_token({"id": "u1", "user_claims": {"id": "u1", "role": "USER"}}, secret="k", issuer="iss", algorithm="HS256")

    claims = decode_token(token, secret="k", issuer="iss", algorithms=["HS256"])
    assert claims["id"] == "u1"
    assert claims["user_claims"]["role"] == "USER"
    assert claims["sub"] == "access"
    assert "exp" not in claims


def test_decode_rejects_wrong_issuer_secret_and_algorithm():
    token = issue_token({"id": "u1"}, secret="k", issuer="iss", algorithm="HS256")

    with pytest.raises(TokenError):
        decode_token(token, secret="k", issuer="other", algorithms=["HS256"])
    with pytest.raises(TokenError):
        decode_token(token, secret="not-k", issuer="iss", algorithms=["HS256"])
    with pytest.raises(TokenError):
        decode_token(token, secret="k", issuer="iss", algorithms=["HS512"])


def test_decode_rejects_expired_token():
    token = issue_token({"id": "u1"}, secret="k", issuer="iss", algorithm="HS256", expires_in=-30)

    with pytest.raises(TokenError):
        decode_token(token, secret="k", issuer="iss", algorithms=["HS256"])


def test_decode_requires_identity_claim():
    token = jwt.encode({"iss": "iss", "sub": "access"}, "k", algorithm="HS256")

    with pytest.raises(TokenError):
        decode_token(token, secret="k", issuer="iss", algorithms=["HS256"])
