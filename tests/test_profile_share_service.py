import asyncio
import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import StorageError
from app.models.profile_share import new_profile_share
from app.services import profile_share_service
from app.services.logo_storage import StoredLogo


class RacingCollection:
    """Loses the first-time insert to a request that got there first."""

    def __init__(self, collection):
        self.collection = collection
        self.lookups = 0

    async def find_one(self, query):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return await self.collection.find_one(query)

    async def insert_one(self, document):
        raise DuplicateKeyError("E11000 duplicate key error collection: profile_shares index: userId_unique")


class BrokenCollection:
    async def find_one(self, query):
        raise PyMongoError("connection reset")


def test_concurrent_create_falls_back_to_lookup(collection, monkeypatch):
    result = asyncio.run(collection.insert_one(new_profile_share("u1")))
    racing = RacingCollection(collection)
    monkeypatch.setattr(profile_share_service, "get_profile_shares_collection", lambda: racing)

    document = asyncio.run(profile_share_service.get_or_create_profile_share("u1"))

    assert document["_id"] == result.inserted_id
    assert racing.lookups == 2


def test_storage_failure_is_reported(database, monkeypatch):
    monkeypatch.setattr(profile_share_service, "get_profile_shares_collection", lambda: BrokenCollection())

    with pytest.raises(StorageError) as exc_info:
        asyncio.run(profile_share_service.get_or_create_profile_share("u1"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == "connection reset"


def test_failed_attach_removes_stored_file(database, storage, monkeypatch):
    async def failing_attach(user_id, stored):
        raise StorageError(details="write conflict")

    monkeypatch.setattr(profile_share_service, "attach_logo", failing_attach)
    upload = UploadFile(
        file=io.BytesIO(b"\x89PNG"),
        filename="logo.png",
        headers=Headers({"content-type": "image/png"}),
    )

    with pytest.raises(StorageError):
        asyncio.run(profile_share_service.upload_logo("u1", upload, storage))

    assert list(storage.directory.iterdir()) == []


def test_attach_and_detach_keep_flags_exclusive(database, storage):
    stored = StoredLogo(
        filename="a.png",
        path=storage.directory / "a.png",
        url="/uploads/profile-share/a.png",
        size=3,
    )

    attached = asyncio.run(profile_share_service.attach_logo("u1", stored))
    assert attached["profileData"]["logo"] == "/uploads/profile-share/a.png"
    assert attached["logoFile"] == "a.png"
    assert attached["displaySettings"] == {"showAvatarInQR": False, "showLogoInQR": True}

    detached = asyncio.run(profile_share_service.detach_logo("u1"))
    assert detached["profileData"]["logo"] == ""
    assert detached["logoFile"] == ""
    assert detached["displaySettings"] == {"showAvatarInQR": True, "showLogoInQR": False}
    assert detached["_id"] == attached["_id"]


def test_remove_deletes_only_the_recorded_file(collection, storage):
    mine = storage.write("mine.png", b"1")
    theirs = storage.write("theirs.png", b"2")
    document = new_profile_share("u1")
    document["profileData"]["logo"] = theirs.url
    document["logoFile"] = mine.filename
    asyncio.run(collection.insert_one(document))

    result = asyncio.run(profile_share_service.remove_logo("u1", storage))

    assert result["profileData"]["logo"] == ""
    assert theirs.path.exists()
    assert mine.path.exists()
