"""Service layer – profile image validation, naming, and storage."""

from __future__ import annotations

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from starlette.datastructures import UploadFile

from src.fridge_fusion.config import PROFILE_URL_PREFIX, settings
from src.fridge_fusion.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    MissingFileError,
    StorageError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
RANDOM_SUFFIX_BOUND = 1_000_000_000

# Identities are interpolated into filenames, so nothing path-like gets through
_SAFE_USER_ID = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class StoredFile:
    """A profile image persisted on local disk."""

    filename: str
    path: Path
    size: int

    @property
    def url(self) -> str:
        return f"{PROFILE_URL_PREFIX}/{self.filename}"


# ──────────────────────────────────────────────
# Naming helpers
# ──────────────────────────────────────────────
def file_extension(original_filename: str | None) -> str:
    """Return the extension of *original_filename* including the dot, or ``""``."""
    if not original_filename:
        return ""
    # Some clients send the full client-side path
    basename = original_filename.replace("\\", "/").rsplit("/", 1)[-1]
    return os.path.splitext(basename)[1]


def build_profile_filename(
    user_id: str,
    original_filename: str | None,
    *,
    timestamp_ms: int | None = None,
    suffix: int | None = None,
) -> str:
    """
    Build ``profile-{user_id}-{timestamp_ms}-{suffix}{ext}``.

    ``timestamp_ms`` defaults to the current Unix time in milliseconds and
    ``suffix`` to a random integer in ``[0, 1e9)``.
    """
    if not _SAFE_USER_ID.fullmatch(user_id):
        raise StorageError(f"Refusing to store a file for user id {user_id!r}")

    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    if suffix is None:
        suffix = secrets.randbelow(RANDOM_SUFFIX_BOUND)

    return f"profile-{user_id}-{timestamp_ms}-{suffix}{file_extension(original_filename)}"


def ensure_directory(directory: Path) -> Path:
    """Create *directory* and its parents; an existing directory is fine."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Could not create {directory}: {exc}") from exc
    return directory


# ──────────────────────────────────────────────
# Uploader
# ──────────────────────────────────────────────
class ProfileImageUploader:
    """Validates an uploaded image and writes it under *storage_dir*."""

    def __init__(self, storage_dir: Path, max_bytes: int | None = None) -> None:
        self.storage_dir = storage_dir
        self.max_bytes = settings.max_upload_size if max_bytes is None else max_bytes

    async def save(self, user_id: str, image: UploadFile | None) -> StoredFile:
        """
        Store *image* as the profile picture of *user_id*.

        Raises
        ------
        MissingFileError      – no file was attached.
        InvalidFileTypeError  – content type does not start with ``image/``.
        FileTooLargeError     – payload is larger than ``max_bytes``.
        StorageError          – the file could not be written.
        """
        ensure_directory(self.storage_dir)

        if image is None:
            raise MissingFileError()

        # ── validate before touching the disk ──
        content_type = image.content_type or ""
        if not content_type.startswith("image/"):
            raise InvalidFileTypeError(image.content_type)

        if image.size is not None and image.size > self.max_bytes:
            raise FileTooLargeError(self.max_bytes)

        filename = build_profile_filename(user_id, image.filename)
        path = self.storage_dir / filename

        try:
            size = await self._write(image, path)
        except FileExistsError as exc:
            raise StorageError(f"{filename} already exists") from exc
        except FileTooLargeError:
            path.unlink(missing_ok=True)
            raise
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise StorageError(str(exc)) from exc

        logger.info("📁 Stored profile image %s (%d bytes)", filename, size)
        return StoredFile(filename=filename, path=path, size=size)

    async def _write(self, image: UploadFile, path: Path) -> int:
        """Copy *image* to *path* in chunks, stopping once the limit is exceeded."""
        written = 0
        await image.seek(0)
        with open(path, "xb") as f:
            while chunk := await image.read(CHUNK_SIZE):
                written += len(chunk)
                if written > self.max_bytes:
                    raise FileTooLargeError(self.max_bytes)
                f.write(chunk)
        return written
