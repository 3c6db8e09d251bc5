"""Fixtures shared by the backend tests."""

from __future__ import annotations

import mongomock
import pytest

from src.backend.common.database.record_store import RecordStore


@pytest.fixture
def record_store() -> RecordStore:
    return RecordStore(mongomock.MongoClient().db.records)
