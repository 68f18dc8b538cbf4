"""
Local-disk image uploads served back under ``/uploads``.
"""

from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path

from fastapi import UploadFile

from cineghar.core.config import settings
from cineghar.core.exceptions import AppError, BadRequestError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _safe_name(filename: str | None) -> str:
    name = Path(filename or "image").name
    return _UNSAFE_CHARS.sub("_", name) or "image"


async def save_image(file: UploadFile) -> str:
    """Persist an image upload and return its public path."""
    if not (file.content_type or "").startswith("image/"):
        raise BadRequestError("Invalid file type, only images are allowed!")

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise AppError(
            f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_BYTES} bytes",
            status_code=413,
        )

    stored_name = f"{uuid.uuid4()}-{_safe_name(file.filename)}"
    (upload_dir() / stored_name).write_bytes(content)
    logger.info("Stored upload %s (%d bytes)", stored_name, len(content))
    return f"{UPLOAD_URL_PREFIX}/{stored_name}"
