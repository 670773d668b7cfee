"""
Security tests for bearer token verification.

We assert that only the configured HMAC algorithm is accepted, that expiry is
mandatory, and that tokens signed with another secret are rejected.
"""

from __future__ import annotations

import time

import pytest
from jose import jwt

from identity_access.tokens import (
    AccessTokenVerificationError,
    TokenConfig,
    issue_access_token,
    verify_access_token,
)
from identity_access import tokens as tokens_mod

CFG = TokenConfig(secret="unit-test-secret")


def test_issued_token_round_trips_claims():
    token = issue_access_token({"role": "STUDENT", "studentId": "S1"}, cfg=CFG)
    claims = verify_access_token(token=token, cfg=CFG)
    assert claims["role"] == "STUDENT"
    assert claims["studentId"] == "S1"
    assert isinstance(claims["exp"], int)


def test_wrong_secret_is_rejected():
    token = issue_access_token({"role": "ADMIN"}, cfg=TokenConfig(secret="other"))
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token=token, cfg=CFG)
    assert exc.value.code == "invalid_token"


def test_expired_token_is_rejected():
    now = int(time.time())
    token = jwt.encode({"role": "ADMIN", "exp": now - 60, "iat": now - 120}, CFG.secret, algorithm="HS256")
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token=token, cfg=CFG)
    assert exc.value.code == "token_expired"


def test_token_without_exp_is_rejected():
    token = jwt.encode({"role": "ADMIN"}, CFG.secret, algorithm="HS256")
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token=token, cfg=CFG)
    assert exc.value.code == "missing_exp"


def test_future_nbf_is_rejected():
    now = int(time.time())
    token = jwt.encode({"role": "ADMIN", "exp": now + 600, "nbf": now + 300}, CFG.secret, algorithm="HS256")
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token=token, cfg=CFG)
    assert exc.value.code == "token_not_yet_valid"


def test_other_algorithm_in_header_is_rejected():
    token = jwt.encode({"role": "ADMIN", "exp": int(time.time()) + 60}, CFG.secret, algorithm="HS512")
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token=token, cfg=CFG)
    assert exc.value.code == "unexpected_algorithm"


def test_garbage_token_is_rejected():
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token="not-a-jwt", cfg=CFG)
    assert exc.value.code == "malformed_token"


def test_verify_enforces_configured_alg(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(tokens_mod.jwt, "get_unverified_header", lambda _: {"alg": "HS256"})
    captured = {}

    def fake_decode(token, key, algorithms=None, **kwargs):
        captured["algorithms"] = list(algorithms or [])
        from jose.exceptions import JOSEError
        raise JOSEError("boom")

    monkeypatch.setattr(tokens_mod.jwt, "decode", fake_decode)

    with pytest.raises(AccessTokenVerificationError):
        verify_access_token(token="dummy", cfg=CFG)

    assert captured.get("algorithms") == ["HS256"], "Expected HS256-only enforcement"


def test_non_hmac_config_is_refused():
    with pytest.raises(AccessTokenVerificationError) as exc:
        verify_access_token(token="x.y.z", cfg=TokenConfig(secret="s", algorithm="none"))
    assert exc.value.code == "unsupported_algorithm"
