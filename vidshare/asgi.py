"""ASGI application factory for vidshare.

Serve with ``vidshare serve`` or point any ASGI server at the factory, e.g.
``hypercorn "vidshare.asgi:create_app()"``.
"""

import logging
from pathlib import Path

from advanced_alchemy.extensions.litestar import SQLAlchemyPlugin
from litestar import Litestar, Router
from litestar.types import ASGIApp

from vidshare.app_config import (
    EXCEPTION_HANDLERS,
    build_auth_middleware,
    build_cors_config,
    build_db_config,
    build_media_routers,
)
from vidshare.config import Settings, get_settings
from vidshare.controllers.comments import CommentController
from vidshare.controllers.dashboard import DashboardController
from vidshare.controllers.health import HealthController
from vidshare.controllers.likes import LikeController
from vidshare.controllers.subscriptions import SubscriptionController
from vidshare.controllers.tweets import TweetController
from vidshare.controllers.users import UserController
from vidshare.controllers.videos import VideoController
from vidshare.lib import observability
from vidshare.lib.storage import StorageManager

logger = logging.getLogger(__name__)

API_CONTROLLERS = [
    HealthController,
    UserController,
    VideoController,
    CommentController,
    LikeController,
    SubscriptionController,
    DashboardController,
    TweetController,
]


def create_app(settings: Settings | None = None) -> ASGIApp:
    """Create and configure the Litestar application."""
    settings = settings or get_settings()

    observability.configure(settings)

    db_config = build_db_config(settings)
    storage_manager = StorageManager(settings.storage)

    async def on_startup(_app: Litestar) -> None:
        observability.instrument_sqlalchemy(db_config.get_engine())
        logger.info("vidshare started (api prefix %s)", settings.api_prefix)

    async def on_shutdown(_app: Litestar) -> None:
        await storage_manager.close()

    # Static routers need their directories to exist when they are built
    for directory in storage_manager.local_mounts().values():
        Path(directory).mkdir(parents=True, exist_ok=True)

    app = Litestar(
        route_handlers=[
            Router(path=settings.api_prefix, route_handlers=API_CONTROLLERS),
            *build_media_routers(storage_manager),
        ],
        on_startup=[on_startup],
        on_shutdown=[on_shutdown],
        plugins=[SQLAlchemyPlugin(config=db_config)],
        middleware=[build_auth_middleware(settings)],
        cors_config=build_cors_config(settings),
        exception_handlers=EXCEPTION_HANDLERS,
        request_max_body_size=settings.storage.max_upload_size,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.db_config = db_config
    app.state.storage_manager = storage_manager

    return observability.instrument_app(app)
