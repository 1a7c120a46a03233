"""Application configuration and constants."""

from __future__ import annotations

import os
from typing import Any, Dict, List


def _env_str(key: str, default: str) -> str:
    return str(os.getenv(key, "") or "").strip() or default


def _env_bool(key: str, default: bool) -> bool:
    raw = str(os.getenv(key, "") or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_float(key: str, default: float) -> float:
    raw = str(os.getenv(key, "") or "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


APP_TITLE = "Software Visualization"

STRUCTURE_LABEL = "Structure"
CONTAINER_LABEL = "Container"

# Node labels that mark a graph as method-level (and therefore abstractable).
ABSTRACTION_TRIGGER_LABELS: List[str] = ["Operation", "Constructor", "Script"]

# Node labels kept in the abstract graph.
ABSTRACT_NODE_LABELS: List[str] = ["Container", "Structure", "Primitive", "Problem"]

# Order in which relations are emitted in the abstract graph.
ABSTRACT_RELATION_ORDER: List[str] = [
    "contains",
    "specializes",
    "nests",
    "calls",
    "constructs",
    "holds",
    "accepts",
    "returns",
]

COMPOSE_JOIN_MODES = ("single", "all")

DEFAULT_VISIBLE_INTERACTIONS: List[str] = ["calls"]
DEFAULT_PARENT_RELATION = "contains"

CONFIG: Dict[str, Any] = {
    "DATA_DIR": _env_str("SSE_DATA_DIR", "data"),
    "STYLESHEET_PATH": _env_str("SSE_STYLESHEET", ""),
    "COMPOSE_JOIN": _env_str("SSE_COMPOSE_JOIN", "single"),
    "STRICT_EDGES": _env_bool("SSE_STRICT_EDGES", False),
    "LOG_LEVEL": _env_str("SSE_LOG_LEVEL", "INFO").upper(),
    "HTTP_TIMEOUT": _env_float("SSE_HTTP_TIMEOUT", 30.0),
    "ABSTRACTION_TRIGGER_LABELS": ABSTRACTION_TRIGGER_LABELS,
    "ABSTRACT_NODE_LABELS": ABSTRACT_NODE_LABELS,
    "MAX_TABLE_ROWS": 500,
}
