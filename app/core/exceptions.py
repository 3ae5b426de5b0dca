from typing import Optional, Any


class ProfileShareError(Exception):
    """
    Base exception for the profile-share service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(ProfileShareError):
    """
    Raised when client input is rejected (bad upload, inconsistent flags).
    """
    def __init__(self, message: str = "Validation error", code: str = "VALIDATION_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=400, details=details)


class AuthenticationError(ProfileShareError):
    """
    Raised when the caller's token is missing or invalid.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class StorageError(ProfileShareError):
    """
    Raised when the database or the logo directory fails.
    """
    def __init__(self, message: str = "Server error", details: Optional[Any] = None):
        super().__init__(message, code="STORAGE_ERROR", status_code=500, details=details)
