import logging

from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache


class Settings(BaseSettings):
    # Canonical names for auto-extracted credentials
    access_token_alias: str = "user_token"  # Matches {{user_token}} in imported collections
    refresh_token_alias: str = "refresh_token"

    # URL reconstruction
    default_url_protocol: str = "http"
    keep_empty_query_params: bool = False  # If true, empty values serialize as "key="

    # Logging
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("default_url_protocol")
    @classmethod
    def strip_protocol_suffix(cls, value: str) -> str:
        # Accept "https://" or "https:" as well as "https"
        return value.split(":", 1)[0] or "http"

    class Config:
        env_file = ".env"
        env_prefix = "REQVARS_"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
