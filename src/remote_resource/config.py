import logging
import sys
import typing
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER_NAME = "remote_resource"


class Settings(BaseSettings):
    """Library defaults loaded from environment variables with REMOTE_RESOURCE_ prefix."""

    # Codecs
    default_format: str = "json"
    query_parser: typing.Literal["nested", "flat"] = "nested"
    # Transport
    timeout: typing.Optional[float] = None
    include_format_in_path: bool = True
    # Logging
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="REMOTE_RESOURCE_")


@lru_cache
def get_settings() -> Settings:
    """Return cached library settings instance."""
    return Settings()


def configure_logging(level: typing.Union[int, str, None] = None) -> logging.Logger:
    """
    Attaches a stream handler to the library's logger.  The library never
    does this on its own; applications that want the request log on stderr
    call this once at startup.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(getattr(h, "_remote_resource", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
        handler._remote_resource = True  # type: ignore
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else get_settings().log_level.upper())
    return logger
