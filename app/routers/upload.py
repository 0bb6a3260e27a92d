"""
Generic image upload used by the listing and back-office forms.
Returns the Cloudinary URL; the caller stores it on whatever it edits.
"""
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.core.dependencies import get_current_user
from app.core.rate_limiter import rate_limit
from app.models.user import User
from app.services.cloudinary_service import IMAGE_CONTENT_TYPES, read_image, upload_image

router = APIRouter()


@router.post("", dependencies=[Depends(rate_limit("sensitive"))])
async def upload(
    file: UploadFile = File(...),
    folder: Literal["properties", "avatars", "images"] = Form(default="images"),
    current_user: User = Depends(get_current_user),
):
    """
    Validation:
      - Only JPEG, PNG, WebP, GIF accepted (415 otherwise)
      - Max 5 MB (413 otherwise)
    """
    contents = await read_image(file, IMAGE_CONTENT_TYPES)
    url = upload_image(contents, folder=folder)
    return {"url": url}
