"""
Identity domain: roles and the per-request principal.

Why:
- Centralize allowed roles to avoid drift between the token layer and routes.
- Model the caller as a tagged variant so authorization can dispatch on the
  variant instead of comparing role strings in every handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

ROLE_ADMIN = "ADMIN"
ROLE_STUDENT = "STUDENT"

# Keep roles minimal and explicit. Immutable to prevent accidental mutation.
ALLOWED_ROLES = frozenset({ROLE_ADMIN, ROLE_STUDENT})


class InvalidPrincipalError(Exception):
    """Raised when verified claims do not describe a usable principal."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class AdminPrincipal:
    username: str = ""

    @property
    def role(self) -> str:
        return ROLE_ADMIN


@dataclass(frozen=True)
class StudentPrincipal:
    student_id: str
    username: str = ""

    @property
    def role(self) -> str:
        return ROLE_STUDENT


Principal = Union[AdminPrincipal, StudentPrincipal]


def principal_from_claims(claims: Mapping[str, object]) -> Principal:
    """Build the principal variant from verified token claims.

    Expects `role` to equal one of ALLOWED_ROLES exactly and, for students,
    a non-empty `studentId`, kept verbatim so it compares exactly against
    the path parameter. `username` is optional and only used for audit logs.
    """
    role = claims.get("role")
    username = str(claims.get("username") or "")
    if not isinstance(role, str) or role not in ALLOWED_ROLES:
        raise InvalidPrincipalError("invalid_role")
    if role == ROLE_ADMIN:
        return AdminPrincipal(username=username)
    student_id = claims.get("studentId")
    if not isinstance(student_id, str) or not student_id:
        raise InvalidPrincipalError("missing_student_id")
    return StudentPrincipal(student_id=student_id, username=username)


def describe_principal(principal: Principal) -> str:
    """Short, log-safe label for a principal."""
    if isinstance(principal, StudentPrincipal):
        return f"{ROLE_STUDENT}:{principal.student_id}"
    return f"{ROLE_ADMIN}:{principal.username or '-'}"


__all__ = [
    "ALLOWED_ROLES",
    "ROLE_ADMIN",
    "ROLE_STUDENT",
    "AdminPrincipal",
    "StudentPrincipal",
    "Principal",
    "InvalidPrincipalError",
    "principal_from_claims",
    "describe_principal",
]
