"""
Media Service - Cloudinary image hosting.

Images (country photos and flags, university photos, blog covers) are stored
on Cloudinary; documents keep only the returned public_id.

Failure policy:
- upload failures abort the write (UpstreamError -> 502)
- delete failures are logged and ignored so they never block the main write
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

import cloudinary
import cloudinary.uploader
from fastapi import Request

from careerhq.core.config import Settings
from careerhq.core.errors import UpstreamError

logger = logging.getLogger(__name__)

# Folders used on Cloudinary
FOLDERS = {
    "country_images": "country-images",
    "country_flags": "country-flags",
    "university_images": "university-images",
    "blog_images": "blog-images",
}

UPLOAD_TRANSFORMATION = [
    {"width": 1200, "height": 800, "crop": "limit", "quality": "auto"},
    {"fetch_format": "auto"},
]


@dataclass
class UploadedImage:
    public_id: str
    url: str


class MediaService:
    """
    Thin wrapper around the Cloudinary SDK.

    Usage:
        media = MediaService(settings)
        image = media.upload(raw_bytes, FOLDERS["blog_images"])
        media.delete(image.public_id)
    """

    def __init__(self, settings: Settings):
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )

    def upload(self, content: bytes, folder: str) -> UploadedImage:
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(content),
                folder=folder,
                resource_type="auto",
                transformation=UPLOAD_TRANSFORMATION,
            )
        except Exception as e:
            logger.error("Error uploading image to %s: %s", folder, e)
            raise UpstreamError("Failed to upload image") from e
        return UploadedImage(public_id=result["public_id"], url=result["secure_url"])

    def delete(self, public_id: str) -> None:
        try:
            cloudinary.uploader.destroy(public_id)
        except Exception as e:
            logger.warning("Error deleting image %s: %s", public_id, e)

    def replace(self, content: Optional[bytes], current_id: Optional[str], folder: str) -> Optional[str]:
        """
        Upload a new image if one was sent and drop the old one.

        Returns the public_id the document should keep (new, current, or None).
        """
        if not content:
            return current_id
        image = self.upload(content, folder)
        if current_id and current_id != image.public_id:
            self.delete(current_id)
        return image.public_id


def get_media_service(request: Request) -> MediaService:
    return request.app.state.media
