# social_api/routers/chat.py

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from social_api.common.deps import (
    get_chat_service,
    get_current_user,
    get_group_repository,
    get_media_uploader,
    get_settings,
    get_user_repository,
)
from social_api.common.uploads import to_image_upload
from social_api.core.config import Settings
from social_api.integrations.chat import ChatService
from social_api.integrations.media import MediaUploader
from social_api.models.user import User
from social_api.repositories.groups import GroupRepository
from social_api.repositories.users import UserRepository
from social_api.services import chat as chat_service

router = APIRouter()


@router.get("/token")
def get_chat_token(
    current_user: User = Depends(get_current_user),
    chat: Optional[ChatService] = Depends(get_chat_service),
):
    return {"token": chat_service.issue_chat_token(current_user, chat)}


@router.post("/groups", status_code=status.HTTP_201_CREATED)
def create_group(
    name: Optional[str] = Form(None),
    members: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    groups: GroupRepository = Depends(get_group_repository),
    users: UserRepository = Depends(get_user_repository),
    chat: Optional[ChatService] = Depends(get_chat_service),
    uploader: Optional[MediaUploader] = Depends(get_media_uploader),
    settings: Settings = Depends(get_settings),
):
    group = chat_service.create_group(
        current_user,
        name,
        chat_service.parse_members(members),
        to_image_upload(image, settings.MAX_UPLOAD_BYTES),
        groups,
        users,
        chat,
        uploader,
        settings,
    )
    return {"message": "Group created successfully", "group": group}


@router.get("/groups")
def get_groups(
    current_user: User = Depends(get_current_user),
    groups: GroupRepository = Depends(get_group_repository),
    users: UserRepository = Depends(get_user_repository),
):
    return {"message": "Groups retrieved successfully", "groups": chat_service.list_groups(current_user, groups, users)}


@router.patch("/groups/{group_id}")
def update_group(
    group_id: str,
    name: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    groups: GroupRepository = Depends(get_group_repository),
    users: UserRepository = Depends(get_user_repository),
    chat: Optional[ChatService] = Depends(get_chat_service),
    uploader: Optional[MediaUploader] = Depends(get_media_uploader),
    settings: Settings = Depends(get_settings),
):
    image_upload = to_image_upload(image, settings.MAX_UPLOAD_BYTES)
    group = chat_service.update_group(
        current_user, group_id, name, image_upload, groups, users, chat, uploader, settings
    )
    return {"message": "Group updated successfully", "group": group}
