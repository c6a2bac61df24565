# social_api/services/images.py

from dataclasses import dataclass
from typing import Optional

from social_api.core.config import Settings
from social_api.core.errors import Internal, InvalidInput
from social_api.integrations.media import MediaUploader


@dataclass
class ImageUpload:
    content: bytes
    content_type: str
    filename: Optional[str] = None


def check_image(image: ImageUpload, settings: Settings) -> None:
    if image.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise InvalidInput("Only JPEG, JPG, PNG, or GIF images are allowed")
    if not image.content:
        raise InvalidInput("Uploaded image is empty")
    if len(image.content) > settings.MAX_UPLOAD_BYTES:
        raise InvalidInput(f"Image must be at most {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB")


def store_image(
    image: Optional[ImageUpload],
    folder: str,
    uploader: Optional[MediaUploader],
    settings: Settings,
) -> Optional[str]:
    """Validate and upload an image, returning its URL (None when no image was sent)."""
    if image is None:
        return None
    check_image(image, settings)
    if uploader is None:
        raise Internal("Image uploads are not configured")
    return uploader.upload(image.content, folder=folder)
