"""Validation helpers for uploaded plant photos."""

import base64

from fastapi import HTTPException, UploadFile

from agrobot.config import Config
from agrobot.localization import IMAGE_TOO_LARGE, IMAGE_WRONG_TYPE, pick


def validate_image_file(image_file: UploadFile, language: str = "en") -> str:
    """Return the normalized content type, or raise 415 for non-images."""
    content_type = (image_file.content_type or "").lower().split(";", 1)[0].strip()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=415, detail=pick(IMAGE_WRONG_TYPE, language))
    return content_type


async def read_image_data_url(image_file: UploadFile, language: str = "en") -> str:
    """Read a validated upload into memory as a base64 data URL."""
    content_type = validate_image_file(image_file, language)
    image_bytes = await image_file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Uploaded image file is empty.")
    if len(image_bytes) > Config.max_upload_bytes:
        raise HTTPException(status_code=413, detail=pick(IMAGE_TOO_LARGE, language))

    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{content_type};base64,{encoded}"
