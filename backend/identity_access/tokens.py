"""
JWT verification helpers for the identity_access bounded context.

Why: Keep cryptographic validation of bearer tokens outside the web adapter so
we can unit test it independently of FastAPI.

Security: Tokens are HMAC-signed with a shared secret. Only the configured
algorithm is accepted, expiry is mandatory, and temporal claims are checked
with a small clock-skew allowance.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping
import time

from jose import jwt
from jose.exceptions import JOSEError

HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


class AccessTokenVerificationError(Exception):
    """Raised when the bearer token fails verification."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class TokenConfig:
    secret: str
    algorithm: str = "HS256"
    leeway_seconds: int = 5  # Allow minimal skew between servers


def verify_access_token(*, token: str, cfg: TokenConfig) -> Dict[str, object]:
    """Validate a bearer token and return its claims.

    Raises
    ------
    AccessTokenVerificationError:
        When the token is malformed, signed with another key or algorithm,
        lacks `exp`, or is outside its validity window.
    """
    if not token or not isinstance(token, str):
        raise AccessTokenVerificationError("missing_token")
    if cfg.algorithm not in HMAC_ALGORITHMS:
        raise AccessTokenVerificationError("unsupported_algorithm")
    try:
        header = jwt.get_unverified_header(token)
    except JOSEError as exc:
        raise AccessTokenVerificationError("malformed_token") from exc
    if header.get("alg") != cfg.algorithm:
        raise AccessTokenVerificationError("unexpected_algorithm")
    try:
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.algorithm],
            options={
                "verify_signature": True,
                "verify_aud": False,
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except JOSEError as exc:
        raise AccessTokenVerificationError("invalid_token") from exc

    _validate_temporal_claims(claims, leeway=cfg.leeway_seconds)
    return claims


def issue_access_token(
    claims: Mapping[str, object],
    *,
    cfg: TokenConfig,
    ttl_seconds: int = 3600,
) -> str:
    """Sign a token for local development and tests.

    End-user login lives outside this service; this helper only mirrors the
    claim layout the verifier expects.
    """
    now = int(time.time())
    payload = dict(claims)
    payload.setdefault("iat", now)
    payload.setdefault("exp", now + ttl_seconds)
    return jwt.encode(payload, cfg.secret, algorithm=cfg.algorithm)


def _validate_temporal_claims(claims: Dict[str, object], *, leeway: int) -> None:
    now = time.time()
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        raise AccessTokenVerificationError("missing_exp")
    if exp + leeway < now:
        raise AccessTokenVerificationError("token_expired")

    iat = claims.get("iat")
    if isinstance(iat, (int, float)) and iat - leeway > now:
        raise AccessTokenVerificationError("invalid_token")

    nbf = claims.get("nbf")
    if isinstance(nbf, (int, float)) and nbf - leeway > now:
        raise AccessTokenVerificationError("token_not_yet_valid")
