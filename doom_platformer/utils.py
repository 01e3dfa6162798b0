# utils.py
# Small helpers so core classes stay readable.

from __future__ import annotations
import json
import logging
import os
from typing import Any

from . import settings

logger = logging.getLogger(__name__)


def data_path(*parts: str) -> str:
    """Build a path inside the local data directory (created on demand)."""
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    return os.path.join(settings.DATA_DIR, *parts)


def load_json(path: str, default: Any = None) -> Any:
    """Read a JSON file, returning default when it is missing or unreadable."""
    if not os.path.exists(path):
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return default


def save_json(path: str, data: Any) -> bool:
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return True
    except OSError as e:
        logger.error("Could not write %s: %s", path, e)
        return False


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
