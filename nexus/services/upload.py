"""
Image upload storage.

Files are written under settings.UPLOAD_DIR as <uuid4><ext> and served back
from settings.UPLOAD_URL_PREFIX. Content-Type and filename are user-controlled,
so the saved bytes are also opened with Pillow before the upload is accepted.
"""

from pathlib import Path as FilePath
from uuid import uuid4

from fastapi import UploadFile
from PIL import Image

from nexus.config import UploadLimits, settings
from nexus.core.errors import PayloadTooLargeError, ValidationError
from nexus.core.logging import get_logger

logger = get_logger(__name__)


def validate_upload_headers(file: UploadFile) -> str:
    """
    Check content type and extension of an upload.

    Returns:
        The lower-cased file extension, including the dot
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise ValidationError("File must be an image")

    if not file.filename:
        raise ValidationError("Filename is required")

    ext = FilePath(file.filename).suffix.lower()
    if ext not in UploadLimits.ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"File extension {ext or '(none)'} not allowed. "
            f"Allowed: {', '.join(sorted(UploadLimits.ALLOWED_EXTENSIONS))}"
        )
    return ext


def verify_image(file_path: FilePath) -> None:
    """Raise ValidationError unless Pillow can parse the file as an image."""
    try:
        with Image.open(file_path) as img:
            img.verify()
    except Exception as e:
        raise ValidationError("File is not a valid image") from e


async def save_upload(file: UploadFile) -> tuple[str, str]:
    """
    Validate and store an uploaded image.

    Returns:
        Tuple of (filename, public_url)

    Raises:
        ValidationError: not an allowed image
        PayloadTooLargeError: larger than settings.MAX_UPLOAD_SIZE
    """
    ext = validate_upload_headers(file)

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise PayloadTooLargeError(f"File size exceeds maximum of {settings.MAX_UPLOAD_SIZE} bytes")
    if not content:
        raise ValidationError("File is empty")

    upload_dir = FilePath(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    filename = f"{uuid4()}{ext}"
    file_path = upload_dir / filename
    file_path.write_bytes(content)

    try:
        verify_image(file_path)
    except ValidationError:
        file_path.unlink(missing_ok=True)
        raise

    url = f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{filename}"
    logger.info("file_uploaded", filename=filename, size=len(content), content_type=file.content_type)
    return filename, url
