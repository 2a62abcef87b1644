import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
load_dotenv(Path.cwd() / ".env")

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")

CONFIG_ENV_VAR = "VIDSHARE_CONFIG"


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    """Return the app.yaml path, honouring the VIDSHARE_CONFIG override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.cwd() / "app.yaml"


def load_app_config() -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"app.yaml not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./vidshare.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    pool_pre_ping: bool = True
    echo: bool = False
    # Dev convenience: create tables on startup instead of running migrations
    create_all: bool = False


class CorsConfig(BaseModel):
    """Cross-origin configuration for browser clients."""

    allow_origins: list[str] = ["*"]
    allow_credentials: bool = True

    @field_validator("allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class AuthConfig(BaseModel):
    """Access token settings. Tokens are issued elsewhere; we only verify them."""

    cookie_name: str = "accessToken"
    token_ttl: int = 60 * 60 * 24


class S3Config(BaseModel):
    bucket: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    prefix: str = ""
    public_url: str | None = None
    acl: str | None = None
    # Seconds media objects may be cached by players and CDNs
    cache_max_age: int = 60 * 60 * 24 * 365


class StoreConfig(BaseModel):
    """A single named storage store."""

    backend: str = "local"
    local_path: str = "./media"
    url_prefix: str = "/media"
    s3: S3Config = S3Config()


class StorageConfig(BaseModel):
    """Object storage for uploaded videos and images."""

    default: str = "default"
    stores: dict[str, StoreConfig] = {"default": StoreConfig()}
    max_upload_size: int = 1024 * 1024 * 1024


class LogfireConfig(BaseModel):
    enabled: bool = False
    service_name: str = "vidshare"
    environment: str | None = None
    sample_rate: float = 1.0
    console: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    debug: bool = False
    secret_key: str
    port: int = 8000
    api_prefix: str = "/api/v1"

    # Loaded from app.yaml (CORS_ORIGIN env var also honoured)
    db: DatabaseConfig = DatabaseConfig()
    cors: CorsConfig = CorsConfig()
    auth: AuthConfig = AuthConfig()
    storage: StorageConfig = StorageConfig()
    logfire: LogfireConfig = LogfireConfig()


def _env_overrides() -> dict:
    """Flat env vars that map onto nested sections."""
    updates = {}
    if os.environ.get("DATABASE_URL"):
        updates["db"] = {"url": os.environ["DATABASE_URL"]}
    if os.environ.get("CORS_ORIGIN"):
        updates["cors"] = {"allow_origins": os.environ["CORS_ORIGIN"]}
    return updates


_SECTIONS = {
    "db": DatabaseConfig,
    "cors": CorsConfig,
    "auth": AuthConfig,
    "storage": StorageConfig,
    "logfire": LogfireConfig,
}


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    base_settings = Settings()

    try:
        app_config = load_app_config()
    except FileNotFoundError:
        app_config = {}

    raw: dict = {}
    for key in _SECTIONS:
        if key in app_config:
            raw[key] = dict(app_config[key] or {})
    for key, values in _env_overrides().items():
        raw.setdefault(key, {}).update(values)

    updates = {key: _SECTIONS[key](**values) for key, values in raw.items()}

    if "debug" in app_config:
        updates["debug"] = bool(app_config["debug"])

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings
