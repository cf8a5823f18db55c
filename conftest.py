"""
conftest.py placed at the project root so pytest finds it automatically.

Selects the in-memory store before any application module is imported,
so importing ``seminar_review_api.app.main`` never touches a database
file.  Each test gets a fresh ``ServiceContainer`` of its own.
"""
import os

os.environ.setdefault("STORE_BACKEND", "memory")

import pytest  # noqa: E402

from seminar_review_api.app.container import ServiceContainer  # noqa: E402
from seminar_review_api.app.core.store import InMemoryRecordStore  # noqa: E402


@pytest.fixture
def container() -> ServiceContainer:
    return ServiceContainer(InMemoryRecordStore())
