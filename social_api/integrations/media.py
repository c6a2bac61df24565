# social_api/integrations/media.py

import io
import logging
from typing import Optional

import cloudinary.uploader

from social_api.core.config import Settings
from social_api.core.errors import Internal

logger = logging.getLogger(__name__)

PROFILE_FOLDER = "shuvochat_profiles"
POST_FOLDER = "shuvomedia_posts"
GROUP_FOLDER = "shuvomedia_groups"


class MediaUploader:
    """Uploads images to Cloudinary and hands back their public URL."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }

    def upload(self, data: bytes, folder: str) -> str:
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                resource_type="image",
                folder=folder,
                **self._credentials,
            )
        except Exception:
            logger.exception("Image upload to folder %s failed", folder)
            raise Internal("Failed to upload image")

        url = result.get("secure_url")
        if not url:
            logger.error("Image upload to folder %s returned no URL", folder)
            raise Internal("Failed to upload image")
        return url


def build_media_uploader(settings: Settings) -> Optional[MediaUploader]:
    if not (settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET):
        logger.warning("Cloudinary credentials missing; image uploads are disabled")
        return None
    return MediaUploader(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET.get_secret_value(),
    )
