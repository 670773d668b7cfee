"""
Configuration and startup security checks for the enrollment service.

Why: Bearer tokens are HMAC-signed with a shared secret. A placeholder or weak
secret in production would let anyone mint admin tokens, so this module
provides a single guard that enforces minimal production safety without
burdening local development.

Permissions: The caller needs no special privileges. The functions simply read
environment variables and raise `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os

from identity_access.tokens import HMAC_ALGORITHMS, TokenConfig

DEV_JWT_SECRET = "dev-only-secret-CHANGE_ME"
MIN_SECRET_LENGTH = 32


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def current_environment() -> str:
    return (os.getenv("ENROLLMENT_ENV", "dev") or "dev").strip().lower()


def load_token_config() -> TokenConfig:
    """Read the token settings from the environment (dev defaults)."""
    secret = (os.getenv("JWT_SECRET") or "").strip() or DEV_JWT_SECRET
    algorithm = (os.getenv("JWT_ALGORITHM") or "HS256").strip().upper()
    return TokenConfig(secret=secret, algorithm=algorithm)


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (production-like environments only):
    - JWT_SECRET must be set, not a placeholder, and at least 32 characters.
    - JWT_ALGORITHM must be an HMAC algorithm (HS256/HS384/HS512).
    """
    if not _is_prod_like(current_environment()):
        return  # dev/test remain permissive

    secret = (os.getenv("JWT_SECRET", "") or "").strip()
    if not secret or "CHANGE_ME" in secret.upper() or secret == DEV_JWT_SECRET:
        raise SystemExit(
            "Refusing to start: JWT_SECRET is unset or a placeholder in production."
        )
    if len(secret) < MIN_SECRET_LENGTH:
        raise SystemExit(
            f"Refusing to start: JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters in production."
        )

    algorithm = (os.getenv("JWT_ALGORITHM", "HS256") or "").strip().upper()
    if algorithm not in HMAC_ALGORITHMS:
        raise SystemExit(
            f"Refusing to start: JWT_ALGORITHM={algorithm or '<empty>'} is not an allowed HMAC algorithm."
        )
