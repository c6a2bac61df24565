# social_api/routers/auth.py

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from social_api.common.deps import (
    get_chat_service,
    get_current_user,
    get_password_hasher,
    get_settings,
    get_token_codec,
    get_user_repository,
)
from social_api.core.config import Settings
from social_api.core.security import PasswordHasher, TokenCodec
from social_api.integrations.chat import ChatService
from social_api.models.user import LoginRequest, RegisterRequest, User, UserRead
from social_api.repositories.users import UserRepository
from social_api.services import accounts

router = APIRouter()


def set_session_cookie(response: Response, user: User, codec: TokenCodec, settings: Settings) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=codec.issue(user.id),
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="none",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: TokenCodec = Depends(get_token_codec),
    chat: Optional[ChatService] = Depends(get_chat_service),
    settings: Settings = Depends(get_settings),
):
    user = accounts.register(body, users, hasher, chat, settings)
    set_session_cookie(response, user, codec, settings)
    return {"message": "User registered successfully", "user": UserRead.model_validate(user)}


@router.post("/login")
def login(
    body: LoginRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: TokenCodec = Depends(get_token_codec),
    chat: Optional[ChatService] = Depends(get_chat_service),
    settings: Settings = Depends(get_settings),
):
    user = accounts.login(body, users, hasher, chat)
    set_session_cookie(response, user, codec, settings)
    return {"message": "User logged in successfully", "user": UserRead.model_validate(user)}


@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="none",
    )
    return {"message": "User logged out successfully"}


@router.get("/getMe")
def read_users_me(current_user: User = Depends(get_current_user)):
    return {"message": "User profile retrieved successfully", "user": UserRead.model_validate(current_user)}
