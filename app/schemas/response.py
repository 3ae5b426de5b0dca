from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    message: str
    code: str
    error: Optional[str] = None
    details: Optional[Any] = None


class SuccessResponse(BaseModel):
    """
    Standard success envelope.
    """
    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None


class LogoUploadResponse(SuccessResponse):
    """
    Success envelope of an accepted logo upload.
    """
    logoUrl: str
