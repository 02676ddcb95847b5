"""
Image upload storage.

Uploads are written to `UPLOAD_DIR` under a random name
(`<32 hex chars><original extension>`). Only that filename is handed to the
services and stored in the database, never a path.

Persisting the filename happens after the file is written, so callers wrap
the database work in `stored_upload()`: if anything fails, the file is
removed again.
"""

from __future__ import annotations

import asyncio
import secrets
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

from core import settings
from core.errors import UploadTooLargeError, ValidationError
from core.logging_config import get_logger

logger = get_logger("uploads")

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".svg"}

READ_CHUNK_BYTES = 1024 * 1024  # 1 MiB


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def generate_filename(original_filename: str) -> str:
    return secrets.token_hex(16) + _file_ext(original_filename)


def validate_upload(file: UploadFile | None) -> str:
    """
    Return the normalized extension if this upload is acceptable.
    """
    if file is None or not file.filename:
        raise ValidationError("An image file is required.", field="file")

    ext = _file_ext(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
            field="file",
        )
    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    buf = bytearray()
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise UploadTooLargeError(max_bytes)
    return bytes(buf)


def upload_path(filename: str) -> Path:
    # Filenames are generated here, but guard against anything path-like anyway.
    return settings.upload_dir() / Path(filename).name


def _write_file(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)


async def store_upload(file: UploadFile | None) -> str:
    """
    Validate and write one upload; return the generated filename.
    """
    validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=settings.max_upload_bytes())

    filename = generate_filename(file.filename or "")
    target = upload_path(filename)
    await asyncio.to_thread(_write_file, target, data)

    logger.info("Stored upload %s (%d bytes)", filename, len(data))
    return filename


async def remove_upload(filename: str | None) -> bool:
    """
    Delete a stored upload. Returns False when there was nothing to delete.
    """
    if not filename:
        return False
    target = upload_path(filename)
    try:
        await asyncio.to_thread(target.unlink)
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Could not remove upload %s: %s", filename, exc)
        return False
    logger.info("Removed upload %s", filename)
    return True


@asynccontextmanager
async def stored_upload(file: UploadFile | None) -> AsyncIterator[str]:
    """
    Store `file` and yield its filename; remove it again if the block raises.
    """
    filename = await store_upload(file)
    try:
        yield filename
    except BaseException:
        await remove_upload(filename)
        raise


@asynccontextmanager
async def optional_stored_upload(file: UploadFile | None) -> AsyncIterator[str | None]:
    """
    Like `stored_upload`, but yields None when no file was sent.
    """
    if file is None or not file.filename:
        yield None
        return
    async with stored_upload(file) as filename:
        yield filename
