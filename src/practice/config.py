"""
Configuration for the practice engine.

Defaults live on the dataclasses; `load_config()` applies overrides from the
environment (and a project `.env` file when present).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if it exists
project_root = Path(__file__).resolve().parents[2]
env_file = project_root / ".env"
if env_file.exists():
    load_dotenv(env_file)

logger = logging.getLogger(__name__)


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring invalid integer for %s: %r", name, value)
        return default


def _get_env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid float for %s: %r", name, value)
        return default


# Lowest ease factor SM-2 allows; stored records enforce it too.
EASE_FACTOR_FLOOR = 1.3


def _get_env_ease_factor(name: str, default: float) -> float:
    value = _get_env_float(name, default)
    if value < EASE_FACTOR_FLOOR:
        logger.warning(
            "Ignoring %s=%s below the ease factor floor %s", name, value, EASE_FACTOR_FLOOR
        )
        return default
    return value


@dataclass
class PracticeConfig:
    """Settings shared by the scheduler, status classification and the API."""

    min_ease_factor: float = EASE_FACTOR_FLOOR
    initial_ease_factor: float = 2.5
    # Interval thresholds (days) for learning -> learned -> mastered.
    learned_interval_days: int = 7
    mastered_interval_days: int = 30
    max_session_items: int = 100


def load_config(defaults: Optional[PracticeConfig] = None) -> PracticeConfig:
    """Build a PracticeConfig from environment variables, falling back to defaults."""
    base = defaults or PracticeConfig()
    return PracticeConfig(
        min_ease_factor=_get_env_ease_factor("SRS_MIN_EASE_FACTOR", base.min_ease_factor),
        initial_ease_factor=_get_env_ease_factor("SRS_INITIAL_EASE_FACTOR", base.initial_ease_factor),
        learned_interval_days=_get_env_int("SRS_LEARNED_INTERVAL_DAYS", base.learned_interval_days),
        mastered_interval_days=_get_env_int("SRS_MASTERED_INTERVAL_DAYS", base.mastered_interval_days),
        max_session_items=_get_env_int("PRACTICE_MAX_SESSION_ITEMS", base.max_session_items),
    )
