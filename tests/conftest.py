import pytest
from fastapi.testclient import TestClient

from social_api.core.config import Settings
from social_api.core.errors import Internal
from social_api.main import create_app


class FakeChatService:
    """Records what the API asks of the chat backend."""

    def __init__(self):
        self.identities = {}
        self.channels = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise Internal("Error upserting user data to chat service")

    def upsert_identity(self, user_id, name, image=None):
        self._check()
        self.identities[user_id] = {"name": name, "image": image}

    def create_token(self, user_id):
        self._check()
        return f"chat-token-{user_id}"

    def create_channel(self, channel_id, name, member_ids, created_by):
        self._check()
        self.channels[channel_id] = {"name": name, "members": list(member_ids), "created_by": created_by}

    def rename_channel(self, channel_id, name):
        self._check()
        self.channels[channel_id]["name"] = name


class FakeMediaUploader:

    def __init__(self):
        self.uploads = []

    def upload(self, data, folder):
        self.uploads.append((folder, data))
        return f"https://media.example.com/{folder}/{len(self.uploads)}.png"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def chat():
    return FakeChatService()


@pytest.fixture
def media():
    return FakeMediaUploader()


@pytest.fixture
def app(settings, chat, media):
    return create_app(settings, media_uploader=media, chat_service=chat)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def register(client, full_name, email, password="secret1"):
    """Register a user and return (user json, auth headers)."""
    resp = client.post(
        "/api/user/register",
        json={"fullName": full_name, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    token = resp.cookies.get("token")
    # Keep the shared cookie jar empty so each call picks its user explicitly
    client.cookies.clear()
    return resp.json()["user"], {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return register(client, "Alice", "a@x.com")


@pytest.fixture
def bob(client):
    return register(client, "Bob", "b@x.com")


@pytest.fixture
def carol(client):
    return register(client, "Carol", "c@x.com")
