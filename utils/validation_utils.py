"""
utils/validation_utils.py

Purpose: Upload input validation

- Image MIME type check
- Extension allow-list check
- Client filename sanitization
"""

from pathlib import PurePosixPath
from typing import Iterable, Optional, Tuple


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Strips directory components a client may have sent with the filename.

    Args:
        filename: Original client filename ("C:\\logos\\icon.png", "../x.png")

    Returns:
        Bare file name ("icon.png", "x.png"), or "" if nothing usable remains
    """
    if not filename:
        return ""

    name = PurePosixPath(filename.replace("\\", "/")).name.strip()

    # Control characters never make it to disk
    name = "".join(ch for ch in name if ch.isprintable())

    if name in (".", ".."):
        return ""

    return name


def split_filename(filename: str) -> Tuple[str, str]:
    """
    Splits a filename into (base name, lowercased extension).

    "Logo.PNG" -> ("Logo", ".png"); "archive.tar.gz" -> ("archive.tar", ".gz")
    """
    path = PurePosixPath(filename)
    return path.stem, path.suffix.lower()


def is_image_content_type(content_type: Optional[str]) -> bool:
    """
    Checks that a declared MIME type is an image type.
    """
    if not content_type:
        return False
    return content_type.strip().lower().startswith("image/")


def has_allowed_extension(filename: str, allowed_extensions: Iterable[str]) -> bool:
    """
    Case-insensitive extension allow-list check.

    Args:
        filename: Sanitized file name
        allowed_extensions: Extensions with leading dot, lowercase

    Returns:
        True if the extension is in the allow-list
    """
    _, ext = split_filename(filename)
    return bool(ext) and ext in set(allowed_extensions)
