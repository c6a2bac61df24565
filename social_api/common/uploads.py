# social_api/common/uploads.py
from typing import Optional, Set

from fastapi import Request, UploadFile

from social_api.services.images import ImageUpload


def to_image_upload(file: Optional[UploadFile], max_bytes: int) -> Optional[ImageUpload]:
    # Browsers post an empty part when no file was picked
    if file is None or not file.filename:
        return None
    # One byte past the limit is enough for check_image to reject it
    return ImageUpload(
        content=file.file.read(max_bytes + 1),
        content_type=file.content_type or "",
        filename=file.filename,
    )


async def get_submitted_form_keys(request: Request) -> Set[str]:
    """Names of the form fields the client actually sent.

    FastAPI hands an empty form value to the endpoint as None, the same as an
    absent field; this tells the two apart. The parsed form is cached on the
    request, so the body is only read once.
    """
    form = await request.form()
    return set(form.keys())
