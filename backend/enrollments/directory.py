"""
Student directory adapter (read-only lookup by studentId).

Why:
    Enrollment responses join the caller's courses with basic profile data.
    The directory is owned elsewhere; this module only defines the lookup
    contract and a small in-memory roster for local development.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol


@dataclass(frozen=True)
class Student:
    student_id: str
    first_name: str = ""
    last_name: str = ""
    program: str = ""


class StudentDirectoryProtocol(Protocol):
    def get_student(self, student_id: str) -> Optional[Student]:
        ...


class InMemoryStudentDirectory:
    def __init__(self, students: Iterable[Student] = ()) -> None:
        self._by_id: Dict[str, Student] = {s.student_id: s for s in students}

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)


# Local roster used when no other directory is wired.
DEFAULT_STUDENTS = (
    Student(student_id="650610001", first_name="Matt", last_name="Damon", program="CPE"),
    Student(student_id="650610002", first_name="Cillian", last_name="Murphy", program="CPE"),
    Student(student_id="650610003", first_name="Emily", last_name="Blunt", program="ISNE"),
)


def build_default_directory() -> InMemoryStudentDirectory:
    return InMemoryStudentDirectory(DEFAULT_STUDENTS)
