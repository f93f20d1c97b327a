# ingreedy/config.py
"""
Environment-driven settings for the parser and its front ends.

Values come from the process environment; a project-level .env is loaded
first so local overrides work without exporting anything.

  INGREEDY_MAX_INPUT_LENGTH    longest accepted line, in characters (1000)
  INGREEDY_MAX_NESTING_DEPTH   deepest grammar rule nesting allowed (64, at most 128)
  INGREEDY_MAX_BATCH_LINES     most lines accepted by the batch endpoint (500)
  INGREEDY_LOG_LEVEL           log level for the CLI and web app (WARNING)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os

from dotenv import load_dotenv

log = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env")

DEFAULT_MAX_INPUT_LENGTH = 1000
DEFAULT_MAX_NESTING_DEPTH = 64
DEFAULT_MAX_BATCH_LINES = 500
DEFAULT_LOG_LEVEL = "WARNING"

# Deepest rule nesting that fits the default interpreter recursion limit
MAX_NESTING_DEPTH_CAP = 128


@dataclass(frozen=True)
class Settings:
    max_input_length: int = DEFAULT_MAX_INPUT_LENGTH
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    max_batch_lines: int = DEFAULT_MAX_BATCH_LINES
    log_level: str = DEFAULT_LOG_LEVEL


def _env_int(name: str, default: int, maximum: Optional[int] = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default
    if value <= 0:
        log.warning("Ignoring %s=%r: must be positive, using %d", name, raw, default)
        return default
    if maximum is not None and value > maximum:
        log.warning("Clamping %s=%r to %d", name, raw, maximum)
        return maximum
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().upper()
    if not raw:
        return default
    if not isinstance(logging.getLevelName(raw), int):
        log.warning("Ignoring %s=%r: unknown log level, using %s", name, raw, default)
        return default
    return raw


def load_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings(
        max_input_length=_env_int("INGREEDY_MAX_INPUT_LENGTH", DEFAULT_MAX_INPUT_LENGTH),
        max_nesting_depth=_env_int(
            "INGREEDY_MAX_NESTING_DEPTH", DEFAULT_MAX_NESTING_DEPTH, maximum=MAX_NESTING_DEPTH_CAP
        ),
        max_batch_lines=_env_int("INGREEDY_MAX_BATCH_LINES", DEFAULT_MAX_BATCH_LINES),
        log_level=_env_log_level("INGREEDY_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )


SETTINGS = load_settings()
