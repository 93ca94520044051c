"""Settings for the election service, loaded from the environment."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ElectionSettings(BaseModel):
    admin_identity: str = "admin"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=5000, ge=1, le=65535)

    @field_validator("admin_identity")
    @classmethod
    def _strip_admin(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("admin identity cannot be empty")
        return cleaned

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LEVELS)}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ElectionSettings:
    """Build settings from ELECTION_* variables, failing with details."""
    env = os.environ if environ is None else environ
    raw = {
        "admin_identity": env.get("ELECTION_ADMIN"),
        "log_level": env.get("ELECTION_LOG_LEVEL"),
        "host": env.get("ELECTION_HOST"),
        "port": env.get("ELECTION_PORT"),
    }
    try:
        return ElectionSettings(**{k: v for k, v in raw.items() if v is not None})
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)
