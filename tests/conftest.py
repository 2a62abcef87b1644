"""Shared pytest fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml
from litestar.testing import AsyncTestClient

from vidshare.asgi import create_app
from vidshare.auth.tokens import create_access_token
from vidshare.config import DatabaseConfig, Settings, StorageConfig, StoreConfig
from vidshare.db.services import comment_service, tweet_service, user_service, video_service
from vidshare.lib.hooks import hooks

TEST_SECRET = "test-secret-key"


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture
def clean_hooks():
    """Save and restore hooks state around a test."""
    original_actions = {name: list(handlers) for name, handlers in hooks._actions.items()}
    yield
    hooks._actions.clear()
    hooks._actions.update(original_actions)


@pytest.fixture
def mock_db_session():
    """Create a mock async database session.

    The session's execute method returns a mock result that supports
    scalar_one_or_none(), first(), scalar() and scalars().all() access.
    """
    session = AsyncMock()

    mock_scalars = MagicMock()
    mock_scalars.all.return_value = []

    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = None
    mock_result.first.return_value = None
    mock_result.scalar.return_value = 0
    mock_result.scalars.return_value = mock_scalars

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()

    return session


# ---------------------------------------------------------------------------
# Application fixtures (SQLite file + local media dir per test)
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path):
    return Settings(
        secret_key=TEST_SECRET,
        db=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", create_all=True),
        storage=StorageConfig(stores={"default": StoreConfig(local_path=str(tmp_path / "media"))}),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
async def client(app):
    async with AsyncTestClient(app=app) as client:
        yield client


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, TEST_SECRET, 3600)}"}

    return _headers


@pytest.fixture
def make_user(app, client):
    async def _make(username: str, **kwargs):
        async with app.state.db_config.get_session() as session:
            return await user_service.create_user(
                session,
                username=username,
                email=f"{username}@example.com",
                password_hash="unused",
                full_name=kwargs.pop("full_name", username.title()),
                **kwargs,
            )

    return _make


@pytest.fixture
def make_video(app, client):
    async def _make(owner, title: str = "A video", **kwargs):
        async with app.state.db_config.get_session() as session:
            return await video_service.create_video(
                session,
                owner_id=owner.id,
                title=title,
                description=kwargs.pop("description", f"About {title}"),
                video_file=kwargs.pop("video_file", "/media/videos/x.mp4"),
                thumbnail=kwargs.pop("thumbnail", "/media/thumbnails/x.png"),
                **kwargs,
            )

    return _make


@pytest.fixture
def make_comment(app, client):
    async def _make(video, owner, content: str = "Nice video"):
        async with app.state.db_config.get_session() as session:
            return await comment_service.create_comment(session, video.id, owner.id, content)

    return _make


@pytest.fixture
def make_tweet(app, client):
    async def _make(owner, content: str = "Hello"):
        async with app.state.db_config.get_session() as session:
            return await tweet_service.create_tweet(session, owner.id, content)

    return _make
