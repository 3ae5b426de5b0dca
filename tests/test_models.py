from datetime import datetime

import jwt
import pytest
from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import create_access_token, decode_user_id
from app.models.profile_share import (
    DisplayState,
    display_flags,
    display_state,
    new_profile_share,
    serialize_profile_share,
)
from app.schemas.profile_share import DisplaySettingsPatch, ProfileSharePatch


def test_display_flags_are_inverse():
    assert display_flags(True) == {"showAvatarInQR": False, "showLogoInQR": True}
    assert display_flags(False) == {"showAvatarInQR": True, "showLogoInQR": False}


def test_display_state():
    assert display_state(new_profile_share("u1")) == DisplayState.AVATAR
    assert display_state({"displaySettings": display_flags(True)}) == DisplayState.LOGO
    assert display_state({"displaySettings": {"showAvatarInQR": True, "showLogoInQR": True}}) is None


def test_serialize_fills_missing_fields():
    oid = ObjectId()
    data = serialize_profile_share({
        "_id": oid,
        "userId": "u1",
        "qrSettings": {"pattern": "dots"},
        "createdAt": datetime(2024, 1, 2, 3, 4, 5),
    })

    assert data["id"] == str(oid)
    assert data["qrSettings"] == {"dotColor": "#06b6d4", "bgColor": "transparent", "pattern": "dots"}
    assert data["profileData"]["socialMedias"] == []
    assert data["displaySettings"] == {"showAvatarInQR": True, "showLogoInQR": False}
    assert data["createdAt"] == "2024-01-02T03:04:05+00:00"
    assert data["updatedAt"] is None


def test_new_records_do_not_share_lists():
    first = new_profile_share("a")
    second = new_profile_share("b")
    first["profileData"]["socialMedias"].append("x")

    assert second["profileData"]["socialMedias"] == []


def test_patch_flattens_only_sent_fields():
    patch = ProfileSharePatch.model_validate({
        "profileData": {"fullName": "Ada", "city": None, "logo": "/uploads/profile-share/x.png"},
        "qrSettings": {"bgColor": "#000000"},
        "displaySettings": {"showAvatarInQR": False},
        "unknown": "ignored",
    })

    assert patch.to_set_document() == {
        "profileData.fullName": "Ada",
        "qrSettings.bgColor": "#000000",
        "displaySettings.showAvatarInQR": False,
        "displaySettings.showLogoInQR": True,
    }


def test_empty_patch_sets_nothing():
    assert ProfileSharePatch.model_validate({}).to_set_document() == {}
    assert ProfileSharePatch.model_validate({"displaySettings": {}}).to_set_document() == {}


def test_display_patch_rejects_equal_flags():
    with pytest.raises(PydanticValidationError):
        DisplaySettingsPatch(showAvatarInQR=False, showLogoInQR=False)

    assert DisplaySettingsPatch(showAvatarInQR=True, showLogoInQR=False).resolved() == display_flags(False)


def test_token_round_trip_and_sub_claim():
    assert decode_user_id(create_access_token("65f0c0ffee")) == "65f0c0ffee"

    token = jwt.encode({"sub": "u9"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    assert decode_user_id(token) == "u9"


def test_token_without_user_is_rejected():
    token = jwt.encode({"role": "user"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    with pytest.raises(AuthenticationError):
        decode_user_id(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"user": {"id": "u1"}}, "another-secret", algorithm="HS256")

    with pytest.raises(AuthenticationError):
        decode_user_id(token)
