# deeptravel/config.py
"""Environment-driven settings for itinerary generation.

Values are read once through :func:`load_settings`; a ``.env`` file in the
working directory is honoured the same way the API process loads it.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Literal, Tuple, get_args

from dotenv import load_dotenv

load_dotenv()

GeneratorType = Literal["default", "chunked", "resilient", "efficient"]
GENERATOR_TYPES: Tuple[str, ...] = get_args(GeneratorType)

DEFAULT_GENERATOR_TYPE = "efficient"
PREMIUM_GENERATOR_TYPE = "efficient"
DEFAULT_OPENAI_MODEL = "gpt-4o"

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def get_logger(name: str) -> logging.Logger:
    """Return a module logger wired like the rest of the service."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    level = os.getenv("DEEPTRAVEL_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False
    return logger


logger = get_logger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logger.warning("Ignoring unrecognised boolean %s=%r; using %s", name, raw, default)
    return default


def _env_generator(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw not in GENERATOR_TYPES:
        logger.warning(
            "Unknown generator type %s=%r (expected one of %s); using %s",
            name,
            raw,
            ", ".join(GENERATOR_TYPES),
            default,
        )
        return default
    return raw


@dataclass(frozen=True)
class LoggingConfig:
    generator_usage: bool = True
    content_generation: bool = True


@dataclass(frozen=True)
class GeneratorSettings:
    default_type: str = DEFAULT_GENERATOR_TYPE
    premium_type: str = PREMIUM_GENERATOR_TYPE
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_settings() -> GeneratorSettings:
    """Build :class:`GeneratorSettings` from the current environment."""
    return GeneratorSettings(
        default_type=_env_generator("DEEPTRAVEL_DEFAULT_GENERATOR", DEFAULT_GENERATOR_TYPE),
        premium_type=_env_generator("DEEPTRAVEL_PREMIUM_GENERATOR", PREMIUM_GENERATOR_TYPE),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("DEEPTRAVEL_OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        logging=LoggingConfig(
            generator_usage=_env_flag("DEEPTRAVEL_LOG_GENERATOR_USAGE", True),
            content_generation=_env_flag("DEEPTRAVEL_LOG_CONTENT_GENERATION", True),
        ),
    )
