"""Shared fixtures."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from dayboard.adapters.sqlite_store import SQLiteSettingsStore, SQLiteTaskStore

TZ = ZoneInfo("America/Toronto")


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def now(today):
    return datetime(today.year, today.month, today.day, 9, 0, tzinfo=TZ)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "dayboard.sqlite3"


@pytest.fixture
def store(db_path):
    return SQLiteTaskStore(db_path)


@pytest.fixture
def settings(db_path):
    return SQLiteSettingsStore(db_path)
