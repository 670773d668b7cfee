"""Authorization predicates: admin vs. student, own vs. foreign record."""
from __future__ import annotations

from identity_access.domain import AdminPrincipal, StudentPrincipal
from identity_access import policy

ADMIN = AdminPrincipal(username="admin")
S1 = StudentPrincipal(student_id="S1")


def test_only_admin_lists_and_resets():
    assert policy.can_list_enrollments(ADMIN)
    assert policy.can_reset_enrollments(ADMIN)
    assert not policy.can_list_enrollments(S1)
    assert not policy.can_reset_enrollments(S1)


def test_read_allows_admin_and_matching_student():
    assert policy.can_read_enrollments_of(ADMIN, "S2")
    assert policy.can_read_enrollments_of(S1, "S1")
    assert not policy.can_read_enrollments_of(S1, "S2")


def test_modify_allows_only_matching_student():
    assert policy.can_modify_enrollments_of(S1, "S1")
    assert not policy.can_modify_enrollments_of(S1, "S2")
    assert not policy.can_modify_enrollments_of(ADMIN, "S1")
