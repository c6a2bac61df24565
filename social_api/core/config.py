# social_api/core/config.py

from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_TOKEN_DAYS = 15


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./social.db"

    # Session tokens
    JWT_SECRET: SecretStr
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = MAX_TOKEN_DAYS
    COOKIE_NAME: str = "token"

    ENVIRONMENT: str = "development"
    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    BCRYPT_ROUNDS: int = 12
    MIN_PASSWORD_LENGTH: int = 6

    # Uploads
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/jpg", "image/png", "image/gif"]

    # Media host (Cloudinary)
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[SecretStr] = None

    # Chat backend (Stream)
    STREAM_API_KEY: Optional[str] = None
    STREAM_API_SECRET: Optional[SecretStr] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("TOKEN_EXPIRE_DAYS")
    @classmethod
    def check_token_lifetime(cls, v: int) -> int:
        if not 1 <= v <= MAX_TOKEN_DAYS:
            raise ValueError(f"TOKEN_EXPIRE_DAYS must be between 1 and {MAX_TOKEN_DAYS}")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cookie_max_age(self) -> int:
        return self.TOKEN_EXPIRE_DAYS * 24 * 60 * 60
