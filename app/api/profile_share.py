"""
app/api/profile_share.py

Purpose: Profile-share endpoints for the premium dashboard

- Read / update the caller's profile-share record
- Upload and remove the QR logo
- Save the client-rendered QR code
- All responses use the {success, message?, data} envelope
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.security import CurrentUserId
from app.models.profile_share import serialize_profile_share
from app.schemas.profile_share import ProfileSharePatch, SaveQRRequest
from app.schemas.response import LogoUploadResponse, SuccessResponse
from app.services import profile_share_service
from app.services.logo_storage import LogoStorage, get_logo_storage
from utils.constants import LOGO_REMOVED, LOGO_UPLOADED, PROFILE_SHARE_UPDATED, QR_SAVED

router = APIRouter(prefix="/profile-share")


@router.get("", response_model=SuccessResponse, response_model_exclude_none=True)
async def get_profile_share(user_id: CurrentUserId):
    """
    Returns the caller's record, creating it with defaults on first access.
    """
    document = await profile_share_service.get_or_create_profile_share(user_id)
    return SuccessResponse(data=serialize_profile_share(document))


@router.put("", response_model=SuccessResponse, response_model_exclude_none=True)
async def update_profile_share(patch: ProfileSharePatch, user_id: CurrentUserId):
    """
    Merges any subset of profileData, qrSettings, displaySettings and
    qrCodeImage into the caller's record. Omitted fields are untouched.
    """
    document = await profile_share_service.update_profile_share(user_id, patch)
    return SuccessResponse(
        message=PROFILE_SHARE_UPDATED,
        data=serialize_profile_share(document),
    )


@router.post("/upload-logo", response_model=LogoUploadResponse, response_model_exclude_none=True)
async def upload_logo(
    user_id: CurrentUserId,
    logo: Optional[UploadFile] = File(default=None),
    storage: LogoStorage = Depends(get_logo_storage),
):
    """
    Stores an image logo (jpg, jpeg, png, gif, webp, bmp; max 5MB) and
    switches the QR overlay from avatar to logo.
    """
    stored, document = await profile_share_service.upload_logo(user_id, logo, storage)
    return LogoUploadResponse(
        message=LOGO_UPLOADED,
        logoUrl=stored.url,
        data=serialize_profile_share(document),
    )


@router.delete("/remove-logo", response_model=SuccessResponse, response_model_exclude_none=True)
async def remove_logo(
    user_id: CurrentUserId,
    storage: LogoStorage = Depends(get_logo_storage),
):
    """
    Deletes the logo file (if any) and switches the QR overlay back to avatar.
    """
    document = await profile_share_service.remove_logo(user_id, storage)
    return SuccessResponse(message=LOGO_REMOVED, data=serialize_profile_share(document))


@router.post("/save-qr", response_model=SuccessResponse, response_model_exclude_none=True)
async def save_qr(payload: SaveQRRequest, user_id: CurrentUserId):
    """
    Stores the QR code image rendered by the browser.
    """
    document = await profile_share_service.set_qr_snapshot(user_id, payload.qrCodeImage)
    return SuccessResponse(message=QR_SAVED, data=serialize_profile_share(document))
