# social_api/common/deps.py

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from social_api.core.config import Settings
from social_api.core.errors import Unauthenticated
from social_api.core.security import PasswordHasher, TokenCodec
from social_api.db.session import get_db
from social_api.integrations.chat import ChatService
from social_api.integrations.media import MediaUploader
from social_api.models.user import User
from social_api.repositories.friend_requests import FriendRequestRepository
from social_api.repositories.groups import GroupRepository
from social_api.repositories.posts import PostRepository
from social_api.repositories.users import UserRepository

# Browsers send the session cookie; API clients may send a bearer token instead
bearer_scheme = OAuth2PasswordBearer(tokenUrl="/api/user/login", auto_error=False)


# --- startup-built components, stored on app.state ---

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_media_uploader(request: Request) -> Optional[MediaUploader]:
    return request.app.state.media_uploader


def get_chat_service(request: Request) -> Optional[ChatService]:
    return request.app.state.chat_service


# --- per-request repositories ---

def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db=db)


def get_friend_request_repository(db: Session = Depends(get_db)) -> FriendRequestRepository:
    return FriendRequestRepository(db=db)


def get_post_repository(db: Session = Depends(get_db)) -> PostRepository:
    return PostRepository(db=db)


def get_group_repository(db: Session = Depends(get_db)) -> GroupRepository:
    return GroupRepository(db=db)


# --- authentication gate ---

def authenticate(token: Optional[str], codec: TokenCodec, users: UserRepository) -> User:
    """Resolve a session token to the current user record, or raise Unauthenticated."""
    user_id = codec.verify(token)
    user = users.get(user_id)
    if user is None:
        raise Unauthenticated("Unauthorized: User no longer exists")
    return user


def get_current_user(
    request: Request,
    bearer_token: Optional[str] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    codec: TokenCodec = Depends(get_token_codec),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    token = request.cookies.get(settings.COOKIE_NAME) or bearer_token
    return authenticate(token, codec, users)
