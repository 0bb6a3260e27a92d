"""
Cloudinary service: image uploads for listings, avatars and site content.

Cloudinary automatically:
  - Converts to WebP/AVIF per browser (fetch_format=auto)
  - Serves via global CDN

Setup:
  1. Create free Cloudinary account at cloudinary.com
  2. Go to Dashboard → copy Cloud Name, API Key, API Secret
  3. Add CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET to .env
"""
import logging
from typing import Optional

import cloudinary
import cloudinary.uploader
from fastapi import HTTPException, UploadFile, status

from app.config import settings
from app.core.exceptions import BadRequestException, ServiceUnavailableException

logger = logging.getLogger(__name__)

# Configure Cloudinary once at module level
cloudinary.config(
    cloud_name=settings.cloudinary_cloud_name,
    api_key=settings.cloudinary_api_key,
    api_secret=settings.cloudinary_api_secret,
    secure=True,   # always use HTTPS URLs
)

ROOT_FOLDER = "propestate"
UPLOAD_FOLDERS = ("properties", "avatars", "images")

AVATAR_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp"}
IMAGE_CONTENT_TYPES = AVATAR_CONTENT_TYPES | {"image/gif"}
MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024  # 5 MB


async def read_image(file: UploadFile, allowed_types: set[str] = IMAGE_CONTENT_TYPES) -> bytes:
    """Reads an upload after checking its content type and size."""
    if file.content_type not in allowed_types:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"File type '{file.content_type}' not allowed. Use {', '.join(sorted(allowed_types))}.",
        )
    file_bytes = await file.read()
    if not file_bytes:
        raise BadRequestException("File is empty")
    if len(file_bytes) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large. Maximum size is 5 MB.",
        )
    return file_bytes


def upload_image(file_bytes: bytes, folder: str = "images", public_id: Optional[str] = None) -> str:
    """
    Upload an image to Cloudinary under propestate/<folder>.

    Args:
        file_bytes: raw file content (read from UploadFile)
        folder: one of UPLOAD_FOLDERS
        public_id: fixed id so re-uploads overwrite (used for avatars)

    Returns:
        secure_url (str): HTTPS URL of the uploaded image
    """
    if not settings.cloudinary_configured:
        raise ServiceUnavailableException("Image upload")
    if folder not in UPLOAD_FOLDERS:
        raise BadRequestException(f"Invalid folder. Allowed: {', '.join(UPLOAD_FOLDERS)}")

    options = {
        "folder": f"{ROOT_FOLDER}/{folder}",
        "resource_type": "image",
        "transformation": [{"quality": "auto", "fetch_format": "auto"}],
    }
    if public_id:
        options.update(public_id=public_id, overwrite=True, invalidate=True)

    result = cloudinary.uploader.upload(file_bytes, **options)
    logger.info("Image uploaded", extra={"folder": folder, "public_id": result.get("public_id")})
    return result["secure_url"]


def upload_avatar(file_bytes: bytes, user_id: str) -> str:
    """
    Same public_id per user, so the previous avatar is overwritten (no orphans).
    Cropped to 200×200 around the detected face.
    """
    if not settings.cloudinary_configured:
        raise ServiceUnavailableException("Image upload")

    result = cloudinary.uploader.upload(
        file_bytes,
        folder=f"{ROOT_FOLDER}/avatars",
        public_id=f"user_{user_id}",
        overwrite=True,
        invalidate=True,
        transformation=[
            {
                "width": 200,
                "height": 200,
                "crop": "fill",
                "gravity": "face",
            }
        ],
        resource_type="image",
    )
    return result["secure_url"]
