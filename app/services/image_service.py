"""
Image service: stores uploaded images under the public directory so the
static files mount can serve them.
"""
import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from app.config import Settings
from app.errors import BadRequestError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})


async def save_image(upload: UploadFile, settings: Settings) -> str:
    """
    Write *upload* under ``PUBLIC_PATH`` with a random name and return the
    path it is served at, relative to the site root.
    """
    if not (upload.content_type or "").startswith("image/"):
        raise BadRequestError("Only image files are allowed")

    extension = Path(upload.filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise BadRequestError("Only image files are allowed")

    content = await upload.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise BadRequestError("File too large")

    public_dir = Path(settings.PUBLIC_PATH)
    public_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid.uuid4().hex}{extension}"
    (public_dir / filename).write_bytes(content)
    logger.info("Stored upload %r as %s (%d bytes)", upload.filename, filename, len(content))

    return f"{settings.STATIC_PATH.rstrip('/')}/{filename}"
