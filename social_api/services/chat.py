# social_api/services/chat.py

import json
import logging
import uuid
from typing import List, Optional

from social_api.core.config import Settings
from social_api.core.errors import Forbidden, Internal, InvalidInput, NotFound
from social_api.integrations.chat import ChatService
from social_api.integrations.media import GROUP_FOLDER, MediaUploader
from social_api.models.group import ChatGroup, GroupRead
from social_api.models.user import User
from social_api.repositories.groups import GroupRepository
from social_api.repositories.users import UserRepository
from social_api.services.friends import public_profile
from social_api.services.images import ImageUpload, store_image

logger = logging.getLogger(__name__)


def _require_chat(chat: Optional[ChatService]) -> ChatService:
    if chat is None:
        raise Internal("Chat service is not configured")
    return chat


def parse_members(raw: Optional[str]) -> List[str]:
    """Members arrive as a JSON array of user ids inside a form field."""
    if not raw:
        return []
    try:
        members = json.loads(raw)
    except ValueError:
        raise InvalidInput("Members must be a JSON array of user IDs")
    if not isinstance(members, list) or not all(isinstance(m, str) and m for m in members):
        raise InvalidInput("Members must be a JSON array of user IDs")
    return list(dict.fromkeys(members))


def to_group_read(group: ChatGroup, users: UserRepository) -> GroupRead:
    members = users.list_by_ids(group.member_ids)
    by_id = {u.id: u for u in members}
    return GroupRead(
        id=group.id,
        name=group.name,
        image=group.image,
        created_by=group.created_by,
        members=[public_profile(by_id[m]) for m in group.member_ids if m in by_id],
        created_at=group.created_at,
        updated_at=group.updated_at,
    )


def issue_chat_token(current_user: User, chat: Optional[ChatService]) -> str:
    return _require_chat(chat).create_token(current_user.id)


def create_group(
    current_user: User,
    name: Optional[str],
    members: List[str],
    image: Optional[ImageUpload],
    groups: GroupRepository,
    users: UserRepository,
    chat: Optional[ChatService],
    uploader: Optional[MediaUploader],
    settings: Settings,
) -> GroupRead:
    name = (name or "").strip()
    if not name or not members:
        raise InvalidInput("Group name and at least one member are required")

    found = users.list_by_ids(members)
    if len(found) != len(set(members)):
        raise InvalidInput("One or more member IDs are invalid")

    member_ids = list(dict.fromkeys(members + [current_user.id]))
    chat = _require_chat(chat)
    image_url = store_image(image, GROUP_FOLDER, uploader, settings)

    group_id = str(uuid.uuid4())
    chat.create_channel(group_id, name, member_ids, created_by=current_user.id)
    group = groups.create(
        group_id=group_id,
        name=name,
        image=image_url,
        created_by=current_user.id,
        member_ids=member_ids,
    )
    logger.info("User %s created group %s with %d members", current_user.id, group.id, len(member_ids))
    return to_group_read(group, users)


def list_groups(current_user: User, groups: GroupRepository, users: UserRepository) -> List[GroupRead]:
    return [to_group_read(g, users) for g in groups.list_for_member(current_user.id)]


def update_group(
    current_user: User,
    group_id: str,
    name: Optional[str],
    image: Optional[ImageUpload],
    groups: GroupRepository,
    users: UserRepository,
    chat: Optional[ChatService],
    uploader: Optional[MediaUploader],
    settings: Settings,
) -> GroupRead:
    group = groups.get(group_id)
    if group is None:
        raise NotFound("Group not found")
    if group.created_by != current_user.id:
        raise Forbidden("Only the group creator can update the group")

    name = name.strip() if name else None
    if not name and image is None:
        raise InvalidInput("At least one field must be provided to update")

    image_url = store_image(image, GROUP_FOLDER, uploader, settings)
    if name:
        _require_chat(chat).rename_channel(group.id, name)

    group = groups.update(group, name=name, image=image_url)
    logger.info("User %s updated group %s", current_user.id, group.id)
    return to_group_read(group, users)
