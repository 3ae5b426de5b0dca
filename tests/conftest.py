import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.main import app
from app.core.config import settings
from app.core.security import create_access_token
from app.db import mongo
from app.services.logo_storage import LogoStorage, get_logo_storage


@pytest.fixture
def database(monkeypatch):
    """In-memory database with the same unique index as production."""
    db = AsyncMongoMockClient()["profileshare_test"]
    asyncio.run(
        db[mongo.PROFILE_SHARES_COLLECTION].create_index("userId", unique=True, name="userId_unique")
    )
    monkeypatch.setattr(mongo, "_database", db)
    return db


@pytest.fixture
def collection(database):
    return database[mongo.PROFILE_SHARES_COLLECTION]


@pytest.fixture
def storage(tmp_path):
    store = LogoStorage(
        directory=tmp_path / "profile-share",
        url_prefix=settings.logo_url_prefix,
        max_bytes=settings.LOGO_MAX_BYTES,
        allowed_extensions=settings.ALLOWED_LOGO_EXTENSIONS,
    )
    app.dependency_overrides[get_logo_storage] = lambda: store
    yield store
    app.dependency_overrides.pop(get_logo_storage, None)


@pytest.fixture
def client(database, storage):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def make(user_id: str = "u1"):
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return make
