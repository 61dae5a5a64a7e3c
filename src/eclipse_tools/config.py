"""Configuration: data directory and densification step from environment."""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path

from eclipse_tools.constants import DEFAULT_MAX_STEP_KM

logger = logging.getLogger(__name__)

# Env var overrides with sensible defaults.
DEFAULT_DATA_PATH = 'data'


def get_data_path() -> str:
    """Return the directory holding eclipse-<year>.json files.

    Returns:
        Path string (ECLIPSE_DATA_PATH env var or ./data).
    """
    return os.environ.get('ECLIPSE_DATA_PATH', DEFAULT_DATA_PATH)


def get_eclipse_file(year: int) -> Path:
    """Return the path of the data file for an eclipse year.

    Parameters:
        year: Calendar year of the eclipse (e.g. 2026).

    Returns:
        Path to <data path>/eclipse-<year>.json (not checked for existence).
    """
    return Path(get_data_path()) / f'eclipse-{year}.json'


def get_max_step_km() -> float:
    """Return default densification step in km (ECLIPSE_MAX_STEP_KM or 20).

    Non-numeric or non-positive values are ignored with a warning.

    Returns:
        Step length in kilometers.
    """
    raw = os.environ.get('ECLIPSE_MAX_STEP_KM', '').strip()
    if not raw:
        return DEFAULT_MAX_STEP_KM
    try:
        value = float(raw)
    except ValueError:
        logger.warning('Invalid ECLIPSE_MAX_STEP_KM %r; using %s km', raw, DEFAULT_MAX_STEP_KM)
        return DEFAULT_MAX_STEP_KM
    if not math.isfinite(value) or value <= 0:
        logger.warning('Invalid ECLIPSE_MAX_STEP_KM %r; using %s km', raw, DEFAULT_MAX_STEP_KM)
        return DEFAULT_MAX_STEP_KM
    return value
