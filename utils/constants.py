"""
utils/constants.py

Purpose: Centralized static content

- All user-facing response messages
- Error codes shared by services and handlers

(Prevents hardcoding across the codebase)
"""

# ============================================================
# SUCCESS MESSAGES
# ============================================================

PROFILE_SHARE_UPDATED = "Profile share data updated successfully"
LOGO_UPLOADED = "Logo uploaded successfully"
LOGO_REMOVED = "Logo removed successfully"
QR_SAVED = "QR code saved successfully"

# ============================================================
# UPLOAD REJECTIONS
# ============================================================

NO_FILE_MESSAGE = "No file uploaded or file type not supported"
INVALID_FILE_TYPE_MESSAGE = "Only image files are allowed!"
INVALID_FILE_EXTENSION_MESSAGE = "Only JPEG, PNG, GIF, WebP, and BMP images are allowed!"
FILE_TOO_LARGE_MESSAGE = "File too large. Maximum size is {max_mb}MB."
FILENAME_TOO_LONG_MESSAGE = "File name too long. Please rename the file and try again."

# ============================================================
# ERROR CODES
# ============================================================

NO_FILE = "NO_FILE"
INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
INVALID_FILE_EXTENSION = "INVALID_FILE_EXTENSION"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
FILENAME_TOO_LONG = "FILENAME_TOO_LONG"

# ============================================================
# STORAGE
# ============================================================

# Read uploads in chunks so an oversized file is rejected early
UPLOAD_CHUNK_SIZE = 64 * 1024

# Longest accepted client file name in UTF-8 bytes
MAX_FILENAME_BYTES = 200
