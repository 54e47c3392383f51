# flake8: noqa
import sys
from itertools import count
from pathlib import Path

# Ensure project root is on sys.path so `cuisine_api` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from fastapi.testclient import TestClient  # noqa: E402

from cuisine_api import crud
from cuisine_api.app import create_app
from cuisine_api.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_PATH=tmp_path / "recipes.db",
        UPLOADS_DIR=tmp_path / "uploads",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # entering the client runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture
def clock(monkeypatch):
    """Strictly increasing millisecond clock for timestamp ordering."""
    ticks = count(1_700_000_000_000)
    monkeypatch.setattr(crud, "now_ms", lambda: next(ticks))


@pytest.fixture
def db(client, app):
    session = app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
