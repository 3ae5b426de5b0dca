"""
app/models/profile_share.py

Purpose: Profile-share document model

- Default document for a new user
- Display-flag state (avatar vs. logo overlay in the QR code)
- Serialization of stored documents for API responses
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


DEFAULT_PROFILE_DATA: Dict[str, Any] = {
    "fullName": "",
    "designation": "",
    "profilePicture": "",
    "logo": "",
    "city": "",
    "socialMedias": [],
    "profileUrl": "",
}

DEFAULT_QR_SETTINGS: Dict[str, str] = {
    "dotColor": "#06b6d4",
    "bgColor": "transparent",
    "pattern": "square",
}


class DisplayState(str, Enum):
    """
    What the QR code overlays in its centre.
    """
    AVATAR = "AVATAR"
    LOGO = "LOGO"


def display_flags(show_logo: bool) -> Dict[str, bool]:
    """
    Single source of the avatar/logo flag pair.

    Every write to displaySettings goes through here so the two flags
    are always each other's inverse.
    """
    return {
        "showAvatarInQR": not show_logo,
        "showLogoInQR": show_logo,
    }


def display_state(document: Dict[str, Any]) -> Optional[DisplayState]:
    """Returns the display state of a stored document, None if flags disagree."""
    flags = document.get("displaySettings") or {}
    avatar = flags.get("showAvatarInQR", True)
    logo = flags.get("showLogoInQR", False)
    if avatar == logo:
        return None
    return DisplayState.LOGO if logo else DisplayState.AVATAR


def utcnow() -> datetime:
    """Current UTC time at the millisecond precision MongoDB stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def new_profile_share(user_id: str) -> Dict[str, Any]:
    """
    Builds the default document inserted on first access.
    """
    now = utcnow()
    return {
        "userId": user_id,
        "profileData": {**DEFAULT_PROFILE_DATA, "socialMedias": []},
        "qrSettings": dict(DEFAULT_QR_SETTINGS),
        "displaySettings": display_flags(False),
        "qrCodeImage": "",
        "logoFile": "",
        "createdAt": now,
        "updatedAt": now,
    }


def _isoformat(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


def serialize_profile_share(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Converts a stored document into its JSON shape.
    Missing sub-fields (older documents) are filled with defaults.
    """
    profile_data = {**DEFAULT_PROFILE_DATA, **(document.get("profileData") or {})}
    qr_settings = {**DEFAULT_QR_SETTINGS, **(document.get("qrSettings") or {})}
    display_settings = {**display_flags(False), **(document.get("displaySettings") or {})}

    return {
        "id": str(document["_id"]) if document.get("_id") is not None else None,
        "userId": document.get("userId"),
        "profileData": profile_data,
        "qrSettings": qr_settings,
        "displaySettings": display_settings,
        "qrCodeImage": document.get("qrCodeImage", ""),
        "createdAt": _isoformat(document.get("createdAt")),
        "updatedAt": _isoformat(document.get("updatedAt")),
    }
