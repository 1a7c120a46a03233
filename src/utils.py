"""Shared helpers: logging setup, profiling, serialisation."""

from __future__ import annotations

import functools
import json
import logging
import re
import time
from typing import Any, Dict

from src.config import CONFIG

logging.basicConfig(
    level=getattr(logging, CONFIG["LOG_LEVEL"], logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
)


def profile_time(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        elapsed = time.time() - start_time
        logging.info("[PROFILE] Function '%s' executed in %.3f seconds", func.__name__, elapsed)
        return result

    return wrapper


def dumps_graph(payload: Dict[str, Any], indent: int = 2) -> str:
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def slugify_filename(value: str) -> str:
    value = re.sub(r"[^A-Za-z0-9]+", "-", value.strip()).strip("-").lower()
    return value or "software-graph"
