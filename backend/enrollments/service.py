"""Enrollment service layer (Clean Architecture boundary).

Why:
    Encapsulates the enrollment use cases (list/reset/get/add/delete) so the
    web adapter stays thin and access rules can be unit tested without
    FastAPI. The caller's principal is passed explicitly into every operation.

Errors:
    Each failure is an `EnrollmentError` subclass carrying the HTTP status and
    the user-facing message. The web layer maps them 1:1 into the response
    envelope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from identity_access.domain import Principal, describe_principal
from identity_access import policy

from .directory import StudentDirectoryProtocol
from .store import Enrollment, EnrollmentStoreProtocol

logger = logging.getLogger("enrollment.service")

FORBIDDEN_MESSAGE = "Forbidden access"
FORBIDDEN_MODIFY_MESSAGE = "You are not allowed to modify another student's data"
COURSE_ID_REQUIRED = "courseId is required"


class EnrollmentError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Forbidden(EnrollmentError, PermissionError):
    status_code = 403


class BadRequest(EnrollmentError, ValueError):
    status_code = 400


class Conflict(EnrollmentError):
    # The public contract reports duplicates as 400, not 409.
    status_code = 400


class NotFound(EnrollmentError, LookupError):
    status_code = 404


def _require_course_id(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise BadRequest(COURSE_ID_REQUIRED)
    return value


@dataclass
class StudentEnrollments:
    student_id: str
    first_name: str
    last_name: str
    program: str
    courses: List[str]


@dataclass
class EnrollmentService:
    """Use cases for the enrollment relation (framework-independent)."""

    store: EnrollmentStoreProtocol
    directory: StudentDirectoryProtocol

    def list_all(self, principal: Principal) -> List[Enrollment]:
        if not policy.can_list_enrollments(principal):
            raise Forbidden(FORBIDDEN_MESSAGE)
        return self.store.list_all()

    def reset(self, principal: Principal) -> int:
        """Empty the store (admin only) and return the number of dropped records."""
        if not policy.can_reset_enrollments(principal):
            raise Forbidden(FORBIDDEN_MESSAGE)
        removed = self.store.clear()
        logger.info("enrollments reset by=%s removed=%d", describe_principal(principal), removed)
        return removed

    def get_by_student(self, principal: Principal, student_id: str) -> StudentEnrollments:
        if not policy.can_read_enrollments_of(principal, student_id):
            raise Forbidden(FORBIDDEN_MESSAGE)
        courses = [e.course_id for e in self.store.list_for_student(student_id)]
        if not courses:
            raise NotFound("No enrollments found")
        student = self.directory.get_student(student_id)
        return StudentEnrollments(
            student_id=student_id,
            first_name=(student.first_name if student else "") or "",
            last_name=(student.last_name if student else "") or "",
            program=(student.program if student else "") or "",
            courses=courses,
        )

    def add_enrollment(self, principal: Principal, student_id: str, course_id: object) -> Enrollment:
        if not policy.can_modify_enrollments_of(principal, student_id):
            raise Forbidden(FORBIDDEN_MESSAGE)
        course = _require_course_id(course_id)
        created = self.store.add(student_id, course)
        if created is None:
            raise Conflict(f"Student {student_id} and course {course} is already exists")
        return created

    def delete_enrollment(self, principal: Principal, student_id: str, course_id: object) -> List[Enrollment]:
        """Drop one enrollment and return the student's remaining records."""
        if not policy.can_modify_enrollments_of(principal, student_id):
            raise Forbidden(FORBIDDEN_MODIFY_MESSAGE)
        course = _require_course_id(course_id)
        if not self.store.remove(student_id, course):
            raise NotFound("Enrollment does not exist")
        return self.store.list_for_student(student_id)


def serialize_enrollment(enrollment: Enrollment) -> Dict[str, Any]:
    return {"studentId": enrollment.student_id, "courseId": enrollment.course_id}


def serialize_student_enrollments(record: StudentEnrollments) -> Dict[str, Any]:
    return {
        "studentId": record.student_id,
        "firstName": record.first_name,
        "lastName": record.last_name,
        "program": record.program,
        "courses": list(record.courses),
    }
