# social_api/integrations/chat.py

import logging
from typing import Iterable, Optional

from stream_chat import StreamChat

from social_api.core.config import Settings
from social_api.core.errors import Internal

logger = logging.getLogger(__name__)

CHANNEL_TYPE = "messaging"


class ChatService:
    """
    Thin wrapper over the Stream chat backend.

    Every SDK failure is logged and surfaced as Internal; nothing is retried.
    """

    def __init__(self, api_key: str, api_secret: str):
        self._client = StreamChat(api_key=api_key, api_secret=api_secret)

    def upsert_identity(self, user_id: str, name: str, image: Optional[str] = None) -> None:
        try:
            self._client.upsert_user({"id": user_id, "name": name, "image": image})
        except Exception:
            logger.exception("Upserting chat identity %s failed", user_id)
            raise Internal("Error upserting user data to chat service")

    def create_token(self, user_id: str) -> str:
        try:
            return self._client.create_token(user_id)
        except Exception:
            logger.exception("Creating chat token for %s failed", user_id)
            raise Internal()

    def create_channel(self, channel_id: str, name: str, member_ids: Iterable[str], created_by: str) -> None:
        try:
            channel = self._client.channel(CHANNEL_TYPE, channel_id, {
                "name": name,
                "members": list(member_ids),
            })
            channel.create(created_by)
        except Exception:
            logger.exception("Creating chat channel %s failed", channel_id)
            raise Internal("Error creating chat channel")

    def rename_channel(self, channel_id: str, name: str) -> None:
        try:
            self._client.channel(CHANNEL_TYPE, channel_id).update_partial(to_set={"name": name})
        except Exception:
            logger.exception("Renaming chat channel %s failed", channel_id)
            raise Internal("Error updating chat channel")


def build_chat_service(settings: Settings) -> Optional[ChatService]:
    if not (settings.STREAM_API_KEY and settings.STREAM_API_SECRET):
        logger.warning("Stream credentials missing; chat features are disabled")
        return None
    return ChatService(
        api_key=settings.STREAM_API_KEY,
        api_secret=settings.STREAM_API_SECRET.get_secret_value(),
    )
