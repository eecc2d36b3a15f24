"""Pytest configuration: isolated database, storage and auth for every test."""
import os
import tempfile

# Settings are read at import time; point them at throwaway locations first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="journal-storage-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Base, get_db, settings
from app.core.security import get_current_user
from app.core.storage import LocalStorage, get_storage
from app.crud.user_auth import crud_user
from main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(root=tmp_path / "public", base_url=settings.STORAGE_URL)


@pytest.fixture
def user(db):
    return crud_user.create(
        db, name="Test User", handle="test-user", email="test@example.com", password="secret123"
    )


@pytest.fixture
def other_user(db):
    return crud_user.create(
        db, name="Other User", handle="other-user", email="other@example.com", password="secret123"
    )


@pytest.fixture
def anonymous_client(db, storage):
    """Client with real token authentication."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client(db, storage, user):
    """Client signed in as ``user``."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_current_user] = lambda: user
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
