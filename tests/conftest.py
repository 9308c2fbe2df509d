"""Shared fixtures: in-memory SQLite and a TestClient wired to it."""

import os
import tempfile

# Settings are read at import time, so point them somewhere harmless first.
os.environ.setdefault("TJ_DATABASE_URL", "sqlite://")
os.environ.setdefault("TJ_UPLOAD_DIR", tempfile.mkdtemp(prefix="journal-uploads-"))
os.environ.setdefault("TJ_TIMEZONE", "America/New_York")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import journal.models  # noqa: F401
from journal.database import get_session
from journal.services.repository import TradeRepository


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repo(session):
    return TradeRepository(session)


@pytest.fixture
def client(engine):
    from journal.main import app

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    # No context manager: the lifespan would create tables on the real engine
    yield TestClient(app)
    app.dependency_overrides.clear()
