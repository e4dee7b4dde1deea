"""Shared pytest fixtures for finboard tests."""

import tempfile
import os
from datetime import date
import pytest

from finboard.domain.entities import User
from finboard.domain.profile import ProfileService
from finboard.domain.record_service import RecordService
from finboard.domain.session import StaticSessionProvider
from finboard.gateway.factories import create_sqlite_gateway
from finboard.gateway.memory import MemoryGateway


@pytest.fixture
def temp_gateway():
    """Create a gateway over a temporary SQLite database."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    gateway = create_sqlite_gateway(database_path=db_path)
    # Store the path for tests that need it
    gateway.database_path = db_path
    gateway.connect()

    yield gateway

    gateway.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_gateway():
    """Create an empty in-memory gateway."""
    return MemoryGateway()


@pytest.fixture
def alice():
    return User(id="alice")


@pytest.fixture
def session(alice):
    """Session provider with alice signed in."""
    return StaticSessionProvider(alice)


@pytest.fixture
def today():
    """Fixed current date used by aggregation tests."""
    return date(2024, 6, 15)


@pytest.fixture
def record_service(temp_gateway):
    """Create a RecordService with a temporary database."""
    return RecordService(temp_gateway)


@pytest.fixture
def profile_service(temp_gateway):
    """Create a ProfileService with a temporary database."""
    return ProfileService(temp_gateway)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
