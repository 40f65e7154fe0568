"""
Image object storage on the local filesystem
"""
import logging
import uuid
from pathlib import Path

import aiofiles
from fastapi import UploadFile

from microfeed.config import settings
from microfeed.services.exceptions import InvalidUpload

logger = logging.getLogger(__name__)


def is_allowed_file(filename: str) -> bool:
    """Check if file extension is allowed"""
    if not filename:
        return False

    file_extension = Path(filename).suffix.lower()
    return file_extension in settings.ALLOWED_EXTENSIONS


async def save_image(upload_file: UploadFile) -> str:
    """
    Store an uploaded image and return its public reference

    Returns:
        URL path to the stored file, e.g. ``/uploads/<uuid>.png``
    """
    if not is_allowed_file(upload_file.filename):
        raise InvalidUpload("Unsupported image type")

    content = await upload_file.read()
    if not content:
        raise InvalidUpload("Empty upload")
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise InvalidUpload("Image is too large")

    file_extension = Path(upload_file.filename).suffix.lower()
    unique_filename = f"{uuid.uuid4()}{file_extension}"

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    file_path = upload_dir / unique_filename
    async with aiofiles.open(file_path, 'wb') as out_file:
        await out_file.write(content)

    logger.info(f"Stored image {unique_filename} ({len(content)} bytes)")
    return f"/uploads/{unique_filename}"


async def delete_image(reference: str) -> bool:
    """Remove a stored image by the reference ``save_image`` returned"""
    file_path = Path(settings.UPLOAD_DIR) / Path(reference).name
    if file_path.exists():
        file_path.unlink()
        return True
    return False
