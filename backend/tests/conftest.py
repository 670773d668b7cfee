"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend and give every test a fresh,
empty enrollment store so API tests do not leak state into each other.
"""
import os
import sys
from pathlib import Path

import pytest

# Tests sign their own tokens; pin the secret before the app module loads.
os.environ.setdefault("JWT_SECRET", "test-secret-for-enrollment-service-suite")
os.environ.setdefault("ENROLLMENT_ENV", "dev")

# Ensure modules in backend/ are importable across tests
REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(BACKEND_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_enrollment_collaborators():
    """Swap in an empty store and the default roster for every test.

    Behavior:
        - Replaces the router's store with a fresh `InMemoryEnrollmentStore`.
        - Restores the default student directory (tests may override it).
    """
    from enrollments.directory import build_default_directory
    from enrollments.store import InMemoryEnrollmentStore
    from web.routes import enrollments as routes

    routes.set_store(InMemoryEnrollmentStore())
    routes.set_directory(build_default_directory())
    yield
