"""
app/schemas/profile_share.py

Pydantic models for profile-share request bodies.
Each section is a partial update: only the fields a client sends are written.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Optional

from app.models.profile_share import display_flags


class PatchModel(BaseModel):
    """Base for partial-update sections."""

    model_config = ConfigDict(extra="ignore")

    def provided_fields(self) -> Dict[str, Any]:
        """Fields the client actually sent, without explicit nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProfileDataPatch(PatchModel):
    """
    Editable profile fields. The logo is not among them: it only changes
    through upload-logo and remove-logo, and a sent value is ignored.
    """
    fullName: Optional[str] = None
    designation: Optional[str] = None
    profilePicture: Optional[str] = None
    city: Optional[str] = None
    socialMedias: Optional[List[str]] = None
    profileUrl: Optional[str] = None


class QRSettingsPatch(PatchModel):
    dotColor: Optional[str] = Field(default=None, min_length=1)
    bgColor: Optional[str] = Field(default=None, min_length=1)
    pattern: Optional[str] = Field(default=None, min_length=1)


class DisplaySettingsPatch(PatchModel):
    """
    Avatar and logo overlays are mutually exclusive.

    Sending one flag implies the other; sending both with the same value
    is rejected.
    """
    showAvatarInQR: Optional[bool] = None
    showLogoInQR: Optional[bool] = None

    @model_validator(mode="after")
    def check_exclusive(self) -> "DisplaySettingsPatch":
        if (
            self.showAvatarInQR is not None
            and self.showLogoInQR is not None
            and self.showAvatarInQR == self.showLogoInQR
        ):
            raise ValueError("showAvatarInQR and showLogoInQR cannot have the same value")
        return self

    def resolved(self) -> Optional[Dict[str, bool]]:
        """Full flag pair implied by this patch, None if nothing was sent."""
        if self.showLogoInQR is not None:
            return display_flags(self.showLogoInQR)
        if self.showAvatarInQR is not None:
            return display_flags(not self.showAvatarInQR)
        return None


class ProfileSharePatch(BaseModel):
    """Body of PUT /profile-share."""

    model_config = ConfigDict(extra="ignore")

    profileData: Optional[ProfileDataPatch] = None
    qrSettings: Optional[QRSettingsPatch] = None
    displaySettings: Optional[DisplaySettingsPatch] = None
    qrCodeImage: Optional[str] = None

    def to_set_document(self) -> Dict[str, Any]:
        """
        Flattens the patch into dotted $set paths.
        Omitted sections and omitted fields are left out.
        """
        update: Dict[str, Any] = {}

        if self.profileData is not None:
            for key, value in self.profileData.provided_fields().items():
                update[f"profileData.{key}"] = value

        if self.qrSettings is not None:
            for key, value in self.qrSettings.provided_fields().items():
                update[f"qrSettings.{key}"] = value

        if self.displaySettings is not None:
            flags = self.displaySettings.resolved()
            if flags is not None:
                for key, value in flags.items():
                    update[f"displaySettings.{key}"] = value

        if self.qrCodeImage is not None:
            update["qrCodeImage"] = self.qrCodeImage

        return update


class SaveQRRequest(BaseModel):
    """Body of POST /profile-share/save-qr."""

    qrCodeImage: str = Field(..., description="Client-rendered QR code (data URL or path)")
