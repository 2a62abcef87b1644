"""Application configuration helpers for vidshare.

Database, CORS, auth middleware, media serving and exception handling each
live in their own function so ``asgi.create_app`` only wires them together.
"""

from typing import Any

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import AsyncSessionConfig, SQLAlchemyAsyncConfig
from litestar.config.cors import CORSConfig
from litestar.exceptions import HTTPException
from litestar.middleware import DefineMiddleware
from litestar.static_files import create_static_files_router
from sqlalchemy.exc import IntegrityError

from vidshare.auth.middleware import TokenAuthMiddleware
from vidshare.config import Settings
from vidshare.db.base import Base
from vidshare.lib.exceptions import http_exception_handler, integrity_error_handler, internal_server_error_handler
from vidshare.lib.storage import StorageManager

EXCEPTION_HANDLERS: dict[type[Exception], Any] = {
    HTTPException: http_exception_handler,
    IntegrityError: integrity_error_handler,
    Exception: internal_server_error_handler,
}


def build_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    """Build the SQLAlchemy async database configuration."""
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_config = EngineConfig(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            pool_pre_ping=settings.db.pool_pre_ping,
            echo=settings.db.echo,
        )

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


def build_cors_config(settings: Settings) -> CORSConfig:
    return CORSConfig(
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
    )


def build_auth_middleware(settings: Settings) -> DefineMiddleware:
    return DefineMiddleware(
        TokenAuthMiddleware,
        secret_key=settings.secret_key,
        cookie_name=settings.auth.cookie_name,
    )


def build_media_routers(storage_manager: StorageManager) -> list:
    """Serve every local store's directory under its URL prefix."""
    return [
        create_static_files_router(path=url_prefix, directories=[directory], name=f"media:{url_prefix}")
        for url_prefix, directory in storage_manager.local_mounts().items()
    ]
