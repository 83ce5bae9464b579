"""Application configuration, read from ORDERS_* environment variables."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ENV_PREFIX = "ORDERS_"


class EngineConfig(BaseModel):
    """
    Service order backend configuration.

    Durations are in seconds.
    """

    api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Root URL of the persistence API",
    )
    api_token: str | None = Field(
        default=None,
        description="Bearer token for the persistence API",
    )
    request_timeout_seconds: float = Field(
        default=10,
        description="Timeout for each persistence API request",
        gt=0,
        le=120,
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    timezone: str = Field(
        default="America/Sao_Paulo",
        description="Shop timezone, used only when rendering dates",
    )


def load_config(env_file: Path | None = None) -> EngineConfig:
    """
    Build config from the environment.

    A .env file (env_file, or one found from the working directory) is
    loaded first; variables already set in the environment win.

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    values = {}
    for name in EngineConfig.model_fields:
        raw = os.getenv(f"{_ENV_PREFIX}{name.upper()}")
        if raw is not None and raw != "":
            values[name] = raw

    return EngineConfig.model_validate(values)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once, at process start."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
