"""
In-memory enrollment store.

Why:
    The enrollment relation is small and process-local. An insertion-ordered
    dict keyed by (student_id, course_id) gives O(1) existence checks while
    keeping listing order deterministic for clients and tests.

Concurrency:
    Each check-then-act sequence (add, remove) runs under one lock so that
    concurrent requests for the same student cannot insert duplicates or lose
    a removal, even when handlers run in a thread pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Dict, Iterable, List, Optional, Protocol, Tuple


@dataclass(frozen=True)
class Enrollment:
    student_id: str
    course_id: str


class EnrollmentStoreProtocol(Protocol):
    def list_all(self) -> List[Enrollment]:
        ...

    def clear(self) -> int:
        ...

    def list_for_student(self, student_id: str) -> List[Enrollment]:
        ...

    def add(self, student_id: str, course_id: str) -> Optional[Enrollment]:
        ...

    def remove(self, student_id: str, course_id: str) -> bool:
        ...


class InMemoryEnrollmentStore:
    def __init__(self, initial: Iterable[Enrollment] = ()) -> None:
        self._lock = Lock()
        self._items: Dict[Tuple[str, str], Enrollment] = {}
        for item in initial:
            self._items.setdefault((item.student_id, item.course_id), item)

    def list_all(self) -> List[Enrollment]:
        with self._lock:
            return list(self._items.values())

    def clear(self) -> int:
        """Drop every record and return how many were removed."""
        with self._lock:
            removed = len(self._items)
            self._items = {}
            return removed

    def list_for_student(self, student_id: str) -> List[Enrollment]:
        # Simple scan; keeps store order for the student's courses
        with self._lock:
            return [e for e in self._items.values() if e.student_id == student_id]

    def add(self, student_id: str, course_id: str) -> Optional[Enrollment]:
        """Insert the pair; return None when it is already present."""
        key = (student_id, course_id)
        with self._lock:
            if key in self._items:
                return None
            enrollment = Enrollment(student_id=student_id, course_id=course_id)
            self._items[key] = enrollment
            return enrollment

    def remove(self, student_id: str, course_id: str) -> bool:
        with self._lock:
            return self._items.pop((student_id, course_id), None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
