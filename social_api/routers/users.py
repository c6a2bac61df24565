# social_api/routers/users.py

from typing import Optional, Set

from fastapi import APIRouter, Depends, File, Form, UploadFile

from social_api.common.deps import (
    get_chat_service,
    get_current_user,
    get_media_uploader,
    get_settings,
    get_user_repository,
)
from social_api.common.uploads import get_submitted_form_keys, to_image_upload
from social_api.core.config import Settings
from social_api.integrations.chat import ChatService
from social_api.integrations.media import MediaUploader
from social_api.models.user import ProfileUpdate, RelationshipStatus, User, UserRead
from social_api.repositories.users import UserRepository
from social_api.services import accounts

router = APIRouter()


@router.get("/profile/{user_id}")
def read_profile(
    user_id: str,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = accounts.get_profile(user_id, users)
    return {"message": "User profile retrieved successfully", "user": UserRead.model_validate(user)}


@router.patch("/updateProfile")
def update_profile(
    full_name: Optional[str] = Form(None, alias="fullName"),
    bio: Optional[str] = Form(None),
    school: Optional[str] = Form(None),
    college: Optional[str] = Form(None),
    relationship_status: Optional[RelationshipStatus] = Form(None, alias="relationshipStatus"),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    uploader: Optional[MediaUploader] = Depends(get_media_uploader),
    chat: Optional[ChatService] = Depends(get_chat_service),
    settings: Settings = Depends(get_settings),
    submitted: Set[str] = Depends(get_submitted_form_keys),
):
    # An empty value clears the field instead of leaving it untouched
    if bio is None and "bio" in submitted:
        bio = ""
    if school is None and "school" in submitted:
        school = ""
    if college is None and "college" in submitted:
        college = ""
    if relationship_status is None and "relationshipStatus" in submitted:
        relationship_status = RelationshipStatus.UNSPECIFIED

    changes = ProfileUpdate(
        full_name=full_name,
        bio=bio,
        school=school,
        college=college,
        relationship_status=relationship_status,
    )
    user = accounts.update_profile(
        current_user,
        changes,
        to_image_upload(profile_picture, settings.MAX_UPLOAD_BYTES),
        users,
        uploader,
        chat,
        settings,
    )
    return {"message": "Profile updated successfully", "user": UserRead.model_validate(user)}
