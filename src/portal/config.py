import os
from typing import Literal

import structlog
from pydantic import ValidationError
from pydantic_settings import BaseSettings

from portal.errors import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_FALLBACK_ENV_FILE = "portal.env"


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    environment: str = "production"  # "development" disables secure cookies unless cookie_secure is set
    base_path: str = "/portal"  # URL prefix the portal is served under
    cors_origins: list[str] = []
    forwarded_allow_ips: str = "127.0.0.1"  # proxies whose X-Forwarded-* headers are trusted
    cookie_name: str = "investor_session"
    cookie_secure: bool | None = None  # None means derive from environment
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    cookie_domain: str | None = None
    session_max_age: int = 7 * 24 * 60 * 60  # seconds, applies to both cookie and stored session

    model_config = {
        "env_prefix": "PORTAL_",
        "extra": "ignore",
    }


def load_config(fallback_env_file: str | None = None) -> Config:
    """Resolve configuration from the process environment, then from a fallback env file.

    The fallback file defaults to ``PORTAL_CONFIG_FILE`` or ``portal.env``.
    Raises ConfigurationError when neither source yields a valid configuration.
    """
    try:
        return Config(_env_file=None)  # type: ignore[call-arg]
    except ValidationError as exc:
        logger.warning("config_from_environment_failed", errors=exc.error_count())

    env_file = fallback_env_file or os.environ.get("PORTAL_CONFIG_FILE", DEFAULT_FALLBACK_ENV_FILE)
    if not os.path.isfile(env_file):
        raise ConfigurationError(f"Configuration incomplete and fallback file '{env_file}' not found")

    try:
        config = Config(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{env_file}': {exc.error_count()} error(s)") from exc

    logger.info("config_loaded_from_fallback", env_file=env_file)
    return config
