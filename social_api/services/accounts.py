# social_api/services/accounts.py

import logging
import uuid
from typing import Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from social_api.core.config import Settings
from social_api.core.errors import Conflict, InvalidInput, NotFound, Unauthenticated
from social_api.core.security import PasswordHasher
from social_api.integrations.chat import ChatService
from social_api.integrations.media import MediaUploader, PROFILE_FOLDER
from social_api.models.user import DEFAULT_AVATAR, LoginRequest, ProfileUpdate, RegisterRequest, User
from social_api.repositories.users import UserRepository
from social_api.services.images import ImageUpload, store_image

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

# Same message for unknown email and wrong password
LOGIN_FAILED = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _check_email(email: str) -> None:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        raise InvalidInput("Invalid email format")


def register(
    body: RegisterRequest,
    users: UserRepository,
    hasher: PasswordHasher,
    chat: Optional[ChatService],
    settings: Settings,
) -> User:
    full_name = (body.full_name or "").strip()
    email = normalize_email(body.email or "")
    password = body.password or ""
    if not full_name or not email or not password:
        raise InvalidInput("All fields are required")

    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long")
    _check_email(email)

    if users.find_by_email(email) is not None:
        raise Conflict("User already exists")

    user_id = str(uuid.uuid4())
    # Chat identity first: a failure here leaves no half-registered account behind
    if chat is not None:
        chat.upsert_identity(user_id, full_name, DEFAULT_AVATAR)

    user = users.create(
        user_id=user_id,
        full_name=full_name,
        email=email,
        hashed_password=hasher.hash(password),
    )
    logger.info("Registered user %s", user.id)
    return user


def login(
    body: LoginRequest,
    users: UserRepository,
    hasher: PasswordHasher,
    chat: Optional[ChatService],
) -> User:
    if not body.email or not body.password:
        raise InvalidInput("Email and password are required")
    email = normalize_email(body.email)
    _check_email(email)

    user = users.find_by_email(email)
    if user is None or not hasher.verify(body.password, user.hashed_password):
        raise Unauthenticated(LOGIN_FAILED)

    if chat is not None:
        chat.upsert_identity(user.id, user.full_name, user.profile_picture)
    logger.info("User %s logged in", user.id)
    return user


def get_profile(user_id: str, users: UserRepository) -> User:
    user = users.get(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(
    current_user: User,
    changes: ProfileUpdate,
    image: Optional[ImageUpload],
    users: UserRepository,
    uploader: Optional[MediaUploader],
    chat: Optional[ChatService],
    settings: Settings,
) -> User:
    if changes.full_name is not None and not changes.full_name.strip():
        raise InvalidInput("Full name cannot be empty")

    picture_url = store_image(image, PROFILE_FOLDER, uploader, settings)
    if picture_url is not None:
        changes = changes.model_copy(update={"profile_picture": picture_url})

    if changes.is_empty():
        raise InvalidInput("At least one field must be provided to update")

    user = users.update(current_user, changes)
    if chat is not None:
        chat.upsert_identity(user.id, user.full_name, user.profile_picture)
    logger.info("Updated profile of user %s", user.id)
    return user
