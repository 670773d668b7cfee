"Enrollment service"
from __future__ import annotations

import os
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from identity_access.domain import InvalidPrincipalError, principal_from_claims
from identity_access.tokens import AccessTokenVerificationError, TokenConfig, verify_access_token
from web import config as _cfg
from web.routes.enrollments import enrollments_router


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via ENROLLMENT_ENABLE_DOTENV (default true
      outside pytest).
    """
    import sys
    # Under pytest, do not load .env – tests provide their own env.
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("ENROLLMENT_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    from dotenv import load_dotenv

    load_dotenv()

# Minimal production safety checks (fail-fast on insecure config)
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------

logger = logging.getLogger("enrollment.identity_access")
TOKEN_CFG: TokenConfig = _cfg.load_token_config()

app = FastAPI(title="Enrollment service", description="Student course enrollments", version="2.0.0")
app.include_router(enrollments_router)

# --- Auth Helpers & Middleware --------------------------------------------------

_PUBLIC_PATHS = ("/health", "/docs", "/openapi.json", "/favicon.ico")


def _is_public_path(path: str) -> bool:
    return path in _PUBLIC_PATHS or path.startswith("/docs/")


def _unauthenticated(message: str) -> JSONResponse:
    headers = {"Cache-Control": "private, no-store", "WWW-Authenticate": "Bearer"}
    return JSONResponse({"success": False, "message": message}, status_code=401, headers=headers)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@app.middleware("http")
async def auth_enforcement(request: Request, call_next):
    if _is_public_path(request.url.path):
        return await call_next(request)

    token = _bearer_token(request)
    if token is None:
        return _unauthenticated("Authorization header is required")
    try:
        claims = verify_access_token(token=token, cfg=TOKEN_CFG)
        principal = principal_from_claims(claims)
    except (AccessTokenVerificationError, InvalidPrincipalError) as exc:
        # Log the reason code only; never the token itself.
        logger.info("Bearer token rejected: code=%s", exc.code)
        return _unauthenticated("Invalid or expired token")

    # Expose a read-only principal for downstream handlers.
    request.state.principal = principal
    return await call_next(request)

# --- Security Headers Middleware ----------------------------------------------

@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    return response

# --- Operations -----------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok"}
