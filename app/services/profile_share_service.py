"""
app/services/profile_share_service.py

Purpose: Profile-share record management

- Get-or-create the per-user record
- Partial updates from the dashboard (only sent fields are written)
- Saving the client-rendered QR snapshot
- Attaching / detaching the uploaded logo together with the display flags
"""

from typing import Any, Dict, Optional, Tuple

from fastapi import UploadFile
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import StorageError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_profile_shares_collection
from app.models.profile_share import display_flags, display_state, new_profile_share, utcnow
from app.schemas.profile_share import ProfileSharePatch
from app.services.logo_storage import LogoStorage, StoredLogo

logger = get_logger(__name__)


async def get_or_create_profile_share(user_id: str) -> Dict[str, Any]:
    """
    Retrieves the user's record, creating a default one on first access.

    Two first-time requests racing on the unique userId index both end up
    with the record that won the insert.

    Args:
        user_id: Authenticated user ID

    Returns:
        Profile-share document
    """
    collection = get_profile_shares_collection()

    try:
        document = await collection.find_one({"userId": user_id})
        if document:
            return document

        document = new_profile_share(user_id)
        try:
            result = await collection.insert_one(document)
            document["_id"] = result.inserted_id
            logger.info(f"Profile share record created for {user_id}")
        except DuplicateKeyError:
            logger.info(f"Profile share record for {user_id} created concurrently, reading it back")
            document = await collection.find_one({"userId": user_id})
            if document is None:
                raise StorageError("Server error", details="Record vanished after duplicate key")

        return document

    except PyMongoError as e:
        logger.error(f"Failed to load profile share: {e}", exc_info=True)
        raise StorageError("Server error", details=str(e)) from e


async def _apply_update(user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Writes dotted $set fields to the user's record, creating it first if needed.

    Returns:
        The updated document
    """
    await get_or_create_profile_share(user_id)
    collection = get_profile_shares_collection()

    try:
        document = await collection.find_one_and_update(
            {"userId": user_id},
            {"$set": {**fields, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
    except PyMongoError as e:
        logger.error(f"Failed to update profile share: {e}", exc_info=True)
        raise StorageError("Server error", details=str(e)) from e

    if document is None:
        raise StorageError("Server error", details="Record not found after create")

    logger.debug(f"Display state after update: {display_state(document)}")

    return document


async def update_profile_share(user_id: str, patch: ProfileSharePatch) -> Dict[str, Any]:
    """
    Merges a partial update into the user's record.

    Args:
        user_id: Authenticated user ID
        patch: Sections and fields sent by the client

    Returns:
        Updated document
    """
    fields = patch.to_set_document()

    with LogContext(user_id=user_id):
        logger.info(f"Updating profile share fields: {sorted(fields)}")

        if not fields:
            return await get_or_create_profile_share(user_id)

        return await _apply_update(user_id, fields)


async def set_qr_snapshot(user_id: str, qr_code_image: str) -> Dict[str, Any]:
    """
    Stores the client-rendered QR code image.

    Args:
        user_id: Authenticated user ID
        qr_code_image: Data URL or path, stored as-is

    Returns:
        Updated document
    """
    with LogContext(user_id=user_id):
        logger.info("Saving QR snapshot", extra={"size": len(qr_code_image)})
        return await _apply_update(user_id, {"qrCodeImage": qr_code_image})


def _logo_fields(stored: Optional[StoredLogo]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "profileData.logo": stored.url if stored else "",
        # Name of the file this user uploaded; remove-logo only ever deletes it
        "logoFile": stored.filename if stored else "",
    }
    for key, value in display_flags(stored is not None).items():
        fields[f"displaySettings.{key}"] = value
    return fields


async def attach_logo(user_id: str, stored: StoredLogo) -> Dict[str, Any]:
    """Points the record at a stored logo and shows it in the QR code."""
    return await _apply_update(user_id, _logo_fields(stored))


async def detach_logo(user_id: str) -> Dict[str, Any]:
    """Clears the logo and switches the QR code back to the avatar."""
    return await _apply_update(user_id, _logo_fields(None))


async def upload_logo(
    user_id: str,
    upload: Optional[UploadFile],
    storage: LogoStorage,
) -> Tuple[StoredLogo, Dict[str, Any]]:
    """
    Validates and stores a logo, then attaches it to the user's record.

    Rejected uploads leave both the record and the directory untouched.

    Args:
        user_id: Authenticated user ID
        upload: Multipart file (None if the field was missing)
        storage: Logo directory

    Returns:
        (stored logo, updated document)
    """
    with LogContext(user_id=user_id):
        stored = await storage.save(upload)

        try:
            document = await attach_logo(user_id, stored)
        except StorageError:
            await storage.remove(stored.url)
            raise

        logger.info(f"Logo attached: {stored.url}")
        return stored, document


def _owned_logo_url(document: Dict[str, Any], storage: LogoStorage) -> Optional[str]:
    """
    The record's logo URL if it points at the file this user uploaded.
    """
    logo_url = (document.get("profileData") or {}).get("logo")
    logo_file = document.get("logoFile")
    if not logo_url or not logo_file:
        return None

    path = storage.path_for_url(logo_url)
    if path is None or path.name != logo_file:
        return None

    return logo_url


async def remove_logo(user_id: str, storage: LogoStorage) -> Dict[str, Any]:
    """
    Deletes the user's uploaded logo file (if still present) and resets the record.

    Never fails because the file is already gone. A logo URL that does not
    match the file recorded at upload is cleared without touching the disk.

    Args:
        user_id: Authenticated user ID
        storage: Logo directory

    Returns:
        Updated document
    """
    with LogContext(user_id=user_id):
        document = await get_or_create_profile_share(user_id)

        logo_url = _owned_logo_url(document, storage)
        if logo_url:
            await storage.remove(logo_url)
        elif (document.get("profileData") or {}).get("logo"):
            logger.warning("Logo not uploaded by this user, leaving the file in place")

        logger.info("Logo removed")
        return await detach_logo(user_id)
