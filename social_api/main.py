# social_api/main.py

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from social_api.core.config import Settings
from social_api.core.errors import register_exception_handlers
from social_api.core.security import PasswordHasher, TokenCodec
from social_api.db.base_class import Base
from social_api.db.session import build_engine, build_session_factory
from social_api.integrations.chat import build_chat_service
from social_api.integrations.media import build_media_uploader

# Import every model so create_all knows all tables
from social_api.models import user, friend_request, post, group  # noqa: F401

from social_api.routers import auth, users, social, posts, chat

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    media_uploader=None,
    chat_service=None,
) -> FastAPI:
    """
    Build the application.

    Everything process-wide (settings, DB engine, token codec, SDK clients) is
    built here once and kept on app.state. Tests pass their own settings and
    fake collaborators.
    """
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Social API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_codec = TokenCodec(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        expire_days=settings.TOKEN_EXPIRE_DAYS,
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.media_uploader = media_uploader if media_uploader is not None else build_media_uploader(settings)
    app.state.chat_service = chat_service if chat_service is not None else build_chat_service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api/user", tags=["auth"])
    app.include_router(users.router, prefix="/api/user", tags=["users"])
    app.include_router(social.router, prefix="/api/user", tags=["friends"])
    app.include_router(posts.router, prefix="/api/posts", tags=["posts"])
    app.include_router(chat.router, prefix="/api/chats", tags=["chat"])

    @app.get("/")
    def read_root():
        return {"message": "Social API is running!"}

    logger.info("Application configured (environment=%s)", settings.ENVIRONMENT)
    return app
