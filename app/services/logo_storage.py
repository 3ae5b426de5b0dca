"""
app/services/logo_storage.py

Purpose: Logo files on local disk

- Validates uploaded images (MIME type, extension, size)
- Stores them under the original name, disambiguated with "(1)", "(2)", ...
- Maps stored files to their public /uploads URL and back
- Best-effort deletion of removed logos
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional
from urllib.parse import quote, unquote

from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import StorageError, ValidationError
from app.core.logging import get_logger
from utils.constants import (
    FILE_TOO_LARGE,
    FILE_TOO_LARGE_MESSAGE,
    FILENAME_TOO_LONG,
    FILENAME_TOO_LONG_MESSAGE,
    INVALID_FILE_EXTENSION,
    INVALID_FILE_EXTENSION_MESSAGE,
    INVALID_FILE_TYPE,
    INVALID_FILE_TYPE_MESSAGE,
    MAX_FILENAME_BYTES,
    NO_FILE,
    NO_FILE_MESSAGE,
    UPLOAD_CHUNK_SIZE,
)
from utils.validation_utils import (
    has_allowed_extension,
    is_image_content_type,
    sanitize_filename,
    split_filename,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredLogo:
    """A logo written to disk."""
    filename: str
    path: Path
    url: str
    size: int


class LogoStorage:
    """Directory of uploaded profile-share logos."""

    def __init__(
        self,
        directory: Path,
        url_prefix: str,
        max_bytes: int,
        allowed_extensions: Iterable[str],
    ):
        """
        Args:
            directory: Where logos are written (created if missing)
            url_prefix: Public URL prefix the directory is served under
            max_bytes: Size limit per upload
            allowed_extensions: Lowercase extensions with leading dot
        """
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes
        self.allowed_extensions = tuple(allowed_extensions)
        self.directory.mkdir(parents=True, exist_ok=True)

    def available_name(self, filename: str) -> str:
        """
        First free name for `filename` in the directory.

        icon.png -> icon.png, icon(1).png, icon(2).png, ...
        """
        base, ext = split_filename(filename)
        candidate = f"{base}{ext}"
        count = 1
        while (self.directory / candidate).exists():
            candidate = f"{base}({count}){ext}"
            count += 1
        return candidate

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{quote(filename, safe='()')}"

    def path_for_url(self, url: str) -> Optional[Path]:
        """
        Resolves a stored logo URL to a file inside the directory.
        Returns None for URLs that do not point into it.
        """
        if not url or not url.startswith(self.url_prefix + "/"):
            return None

        name = unquote(url[len(self.url_prefix) + 1:])
        if not name or sanitize_filename(name) != name:
            return None

        return self.directory / name

    def validate(self, upload: Optional[UploadFile]) -> str:
        """
        Checks presence, name length, MIME type and extension of an upload.

        Returns:
            The sanitized client filename

        Raises:
            ValidationError: If the upload is missing or not an allowed image
        """
        filename = sanitize_filename(upload.filename) if upload is not None else ""
        if not filename:
            raise ValidationError(NO_FILE_MESSAGE, code=NO_FILE)

        # Leaves room for the "(n)" suffix within the filesystem's name limit
        if len(filename.encode("utf-8")) > MAX_FILENAME_BYTES:
            raise ValidationError(
                FILENAME_TOO_LONG_MESSAGE,
                code=FILENAME_TOO_LONG,
                details={"max_bytes": MAX_FILENAME_BYTES},
            )

        if not is_image_content_type(upload.content_type):
            raise ValidationError(
                INVALID_FILE_TYPE_MESSAGE,
                code=INVALID_FILE_TYPE,
                details={"content_type": upload.content_type},
            )

        if not has_allowed_extension(filename, self.allowed_extensions):
            raise ValidationError(
                INVALID_FILE_EXTENSION_MESSAGE,
                code=INVALID_FILE_EXTENSION,
                details={"filename": filename, "allowed": list(self.allowed_extensions)},
            )

        return filename

    async def read_limited(self, upload: UploadFile) -> bytes:
        """
        Reads the upload, failing as soon as it exceeds max_bytes.
        """
        chunks = []
        total = 0
        while True:
            chunk = await upload.read(UPLOAD_CHUNK_SIZE)
            if not chunk:
                break
            total += len(chunk)
            if total > self.max_bytes:
                raise ValidationError(
                    FILE_TOO_LARGE_MESSAGE.format(max_mb=f"{self.max_bytes / (1024 * 1024):g}"),
                    code=FILE_TOO_LARGE,
                    details={"max_bytes": self.max_bytes},
                )
            chunks.append(chunk)
        return b"".join(chunks)

    def write(self, filename: str, content: bytes) -> StoredLogo:
        """
        Writes content under the first free variant of filename.
        Never overwrites an existing file.
        """
        while True:
            try:
                name = self.available_name(filename)
                path = self.directory / name
                # "x" fails if a concurrent upload claimed the name first
                with open(path, "xb") as f:
                    f.write(content)
            except FileExistsError:
                continue
            except OSError as e:
                logger.error(f"Failed to write logo {filename}: {e}", exc_info=True)
                raise StorageError("Server error during logo upload", details=str(e)) from e

            return StoredLogo(filename=name, path=path, url=self.url_for(name), size=len(content))

    async def _run_in_thread(self, func: Callable, *args):
        """Runs blocking file I/O off the event loop."""
        return await asyncio.to_thread(func, *args)

    async def save(self, upload: Optional[UploadFile]) -> StoredLogo:
        """
        Validates and stores an uploaded logo.

        Raises:
            ValidationError: Missing file, non-image, bad extension, name or size
            StorageError: If the file cannot be written
        """
        filename = self.validate(upload)
        content = await self.read_limited(upload)
        stored = await self._run_in_thread(self.write, filename, content)

        logger.info(
            "Logo stored",
            extra={"stored_file": stored.filename, "size": stored.size},
        )
        return stored

    def delete(self, url: str) -> bool:
        """
        Deletes the file behind a logo URL if it still exists.

        Returns:
            True if a file was removed
        """
        path = self.path_for_url(url)
        if path is None:
            logger.warning(f"Ignoring logo outside the upload directory: {url}")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"Logo already gone: {path.name}")
            return False
        except OSError as e:
            logger.warning(f"Could not delete logo {path.name}: {e}")
            return False

        logger.info("Logo file deleted", extra={"stored_file": path.name})
        return True

    async def remove(self, url: str) -> bool:
        """Async form of delete()."""
        return await self._run_in_thread(self.delete, url)


# Global storage instance, provisioned at startup
_storage: Optional[LogoStorage] = None


def init_logo_storage(directory: Optional[Path] = None) -> LogoStorage:
    """
    Creates the storage and its directory. Called once during startup.
    """
    global _storage
    _storage = LogoStorage(
        directory=directory or settings.logo_dir,
        url_prefix=settings.logo_url_prefix,
        max_bytes=settings.LOGO_MAX_BYTES,
        allowed_extensions=settings.ALLOWED_LOGO_EXTENSIONS,
    )
    logger.info(f"Logo storage ready at {_storage.directory}")
    return _storage


def get_logo_storage() -> LogoStorage:
    """
    Returns the storage instance (FastAPI dependency).
    """
    if _storage is None:
        return init_logo_storage()
    return _storage
