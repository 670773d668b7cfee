"""
Authorization predicates for enrollment access.

Pure functions of (principal variant, requested student). The service layer
consults only these, so the access rules live in one place and can be unit
tested without HTTP or storage.
"""

from __future__ import annotations

from .domain import AdminPrincipal, Principal, StudentPrincipal


def can_list_enrollments(principal: Principal) -> bool:
    return isinstance(principal, AdminPrincipal)


def can_reset_enrollments(principal: Principal) -> bool:
    return isinstance(principal, AdminPrincipal)


def can_read_enrollments_of(principal: Principal, student_id: str) -> bool:
    """Admins read everyone; students read only their own record."""
    if isinstance(principal, AdminPrincipal):
        return True
    return isinstance(principal, StudentPrincipal) and principal.student_id == student_id


def can_modify_enrollments_of(principal: Principal, student_id: str) -> bool:
    """Only the student themself may add or drop their enrollments."""
    return isinstance(principal, StudentPrincipal) and principal.student_id == student_id
