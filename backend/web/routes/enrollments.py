"""
Enrollment API routes.

Why:
    Expose the enrollment use cases over HTTP. The auth middleware verifies the
    bearer token and attaches the principal to `request.state`; handlers pass it
    explicitly into the service, which owns every access rule.

Notes:
    - Responses use the envelope {success, message?, data?, error?}.
    - Service errors map 1:1 to status codes; anything else is a logged 500.
    - Tests can call `set_store` / `set_directory` to swap collaborators.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from enrollments.directory import StudentDirectoryProtocol, build_default_directory
from enrollments.service import (
    EnrollmentError,
    EnrollmentService,
    serialize_enrollment,
    serialize_student_enrollments,
)
from enrollments.store import EnrollmentStoreProtocol, InMemoryEnrollmentStore
from identity_access.domain import Principal

enrollments_router = APIRouter(prefix="/api/v2/enrollments", tags=["Enrollments"])
logger = logging.getLogger("enrollment.web.enrollments")

INTERNAL_ERROR_MESSAGE = "Something is wrong, please try again"


# --- Collaborators (swappable) --------------------------------------------------

_STORE: EnrollmentStoreProtocol = InMemoryEnrollmentStore()
_DIRECTORY: StudentDirectoryProtocol = build_default_directory()


def set_store(store: EnrollmentStoreProtocol) -> None:
    """Allow tests to swap the enrollment store implementation."""
    global _STORE
    _STORE = store


def set_directory(directory: StudentDirectoryProtocol) -> None:
    """Allow tests to provide a student directory (e.g., fake roster)."""
    global _DIRECTORY
    _DIRECTORY = directory


def _get_service() -> EnrollmentService:
    return EnrollmentService(store=_STORE, directory=_DIRECTORY)


# --- Request models -------------------------------------------------------------

class EnrollmentPayload(BaseModel):
    # Loosely typed; the service decides whether the value is usable.
    courseId: Any = None


_PAYLOAD_DOC = {
    "requestBody": {
        "required": False,
        "content": {"application/json": {"schema": EnrollmentPayload.model_json_schema()}},
    }
}


async def _course_id_from_body(request: Request) -> Any:
    """Read `courseId` from the JSON body without letting FastAPI reject it.

    Unreadable JSON and non-object bodies yield None, so the service still
    runs its authorization check first and answers 403 or 400 in the
    envelope instead of a framework 422.
    """
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return EnrollmentPayload.model_validate(body).courseId


# --- Response helpers -----------------------------------------------------------

def _envelope(
    *,
    status_code: int,
    success: bool,
    message: Optional[str] = None,
    data: Any = None,
    error: Any = None,
    include_data: bool = False,
) -> JSONResponse:
    """Return the JSON envelope with private, no-store cache headers.

    Enrollment data is user-scoped; keep it out of shared caches.
    """
    body: dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if include_data or data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return JSONResponse(content=body, status_code=status_code, headers={"Cache-Control": "private, no-store"})


def _principal(request: Request) -> Principal:
    # Set by the auth middleware for every non-public path.
    return request.state.principal


def _run(operation: str, action: Callable[[], JSONResponse]) -> JSONResponse:
    """Execute a handler body, translating service errors and unexpected faults.

    A 500 reports only the exception class as `error`; the message and stack
    go to the log, so internal details are not echoed to clients.
    """
    try:
        return action()
    except EnrollmentError as exc:
        return _envelope(status_code=exc.status_code, success=False, message=exc.message)
    except Exception as exc:
        logger.exception("%s failed: err=%s", operation, exc.__class__.__name__)
        return _envelope(
            status_code=500,
            success=False,
            message=INTERNAL_ERROR_MESSAGE,
            error=exc.__class__.__name__,
        )


# --- Routes ---------------------------------------------------------------------

@enrollments_router.get("")
async def list_enrollments(request: Request):
    """List every enrollment (admin only)."""
    principal = _principal(request)

    def action() -> JSONResponse:
        items = _get_service().list_all(principal)
        return _envelope(
            status_code=200,
            success=True,
            data=[serialize_enrollment(e) for e in items],
            include_data=True,
        )

    return _run("list_enrollments", action)


@enrollments_router.post("/reset")
async def reset_enrollments(request: Request):
    """Remove all enrollments (admin only).

    Behavior:
        - 200 even when the store is already empty (idempotent)
        - 403 for non-admin callers
    """
    principal = _principal(request)

    def action() -> JSONResponse:
        _get_service().reset(principal)
        return _envelope(status_code=200, success=True, message="Enrollments database has been reset")

    return _run("reset_enrollments", action)


@enrollments_router.get("/{student_id}")
async def get_student_enrollments(request: Request, student_id: str):
    """Return a student's profile joined with their courses.

    Permissions:
        Admins, or the student whose id matches the path.

    Behavior:
        - 200 with {studentId, firstName, lastName, program, courses}
        - 403 for other students; 404 when the student has no enrollments
    """
    principal = _principal(request)

    def action() -> JSONResponse:
        record = _get_service().get_by_student(principal, student_id)
        return _envelope(
            status_code=200,
            success=True,
            message="Student Information",
            data=serialize_student_enrollments(record),
        )

    return _run("get_student_enrollments", action)


@enrollments_router.post("/{student_id}", openapi_extra=_PAYLOAD_DOC)
async def add_enrollment(request: Request, student_id: str):
    """Enroll the calling student in a course.

    Behavior:
        - 200 with {newEnroll} on success
        - 400 when courseId is missing or the enrollment already exists
        - 403 when the caller is not the matching student
    """
    principal = _principal(request)
    course_id = await _course_id_from_body(request)

    def action() -> JSONResponse:
        created = _get_service().add_enrollment(principal, student_id, course_id)
        return _envelope(
            status_code=200,
            success=True,
            message=f"Student {student_id} && course {created.course_id} has been added successfully",
            data={"newEnroll": serialize_enrollment(created)},
        )

    return _run("add_enrollment", action)


@enrollments_router.delete("/{student_id}", openapi_extra=_PAYLOAD_DOC)
async def delete_enrollment(request: Request, student_id: str):
    """Drop one of the calling student's enrollments.

    Behavior:
        - 200 with the student's remaining enrollments
        - 400 when courseId is missing; 404 when the enrollment does not exist
        - 403 when the caller is not the matching student
    """
    principal = _principal(request)
    course_id = await _course_id_from_body(request)

    def action() -> JSONResponse:
        remaining = _get_service().delete_enrollment(principal, student_id, course_id)
        return _envelope(
            status_code=200,
            success=True,
            message=f"Student {student_id} && course {course_id} has been deleted successfully",
            data=[serialize_enrollment(e) for e in remaining],
            include_data=True,
        )

    return _run("delete_enrollment", action)
