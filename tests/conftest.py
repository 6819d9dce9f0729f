"""
Pytest configuration and fixtures.

Store-backed tests run against an in-memory SQLite database shared through a
StaticPool. Tests marked ``db`` use a throwaway PostgreSQL container and are
skipped when Docker is unavailable.
"""

import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base
from database.repository import ScoringRepository


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring PostgreSQL (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def sqlite_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=sqlite_engine)


@pytest.fixture
def repo(session_factory):
    session = session_factory()
    try:
        yield ScoringRepository(session)
    finally:
        session.close()


@pytest.fixture(scope="session")
def test_database():
    """
    Session-scoped PostgreSQL URL.

    Uses TEST_DATABASE_URL when set, otherwise starts a container with
    testcontainers. Skips when neither is available.
    """
    external_url = os.environ.get("TEST_DATABASE_URL")
    if external_url:
        yield external_url
        return

    try:
        from testcontainers.postgres import PostgresContainer

        postgres = PostgresContainer(
            image="postgres:16-alpine",
            username="testuser",
            password="testpass",
            dbname="scorer_test",
        )
        postgres.start()
    except Exception as e:
        pytest.skip(f"Could not start test database container: {e}")

    try:
        db_url = postgres.get_connection_url()
        engine = create_engine(db_url)
        Base.metadata.create_all(engine)
        engine.dispose()
        print(f"\n✓ Test database started: {db_url}")
        yield db_url
    finally:
        postgres.stop()
        print("\n✓ Test database stopped")


@pytest.fixture
def pg_session_factory(test_database):
    engine = create_engine(test_database)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()
