# src/captionguard/knowledge/loader.py
"""Process-wide, read-only knowledge table.

The table is read from disk on first use and cached as an immutable tuple.
A lock makes concurrent first calls initialize it exactly once; every later
call returns the same object.
"""

from __future__ import annotations

import json
import threading
from importlib import resources
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from captionguard.config import config
from captionguard.core.errors import ConfigurationError
from captionguard.core.logging import get_logger
from captionguard.models.knowledge import KnowledgeItem

logger = get_logger(__name__)

_ITEMS_ADAPTER = TypeAdapter(tuple[KnowledgeItem, ...])

_lock = threading.Lock()
_cache: tuple[KnowledgeItem, ...] | None = None


def knowledge_path() -> Path:
    """Configured knowledge file, or the one shipped with the package."""
    if config.data.knowledge_path:
        return Path(config.data.knowledge_path)
    return Path(str(resources.files("captionguard.data").joinpath("knowledge.json")))


def read_knowledge(path: Path) -> tuple[KnowledgeItem, ...]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Knowledge base not readable: {path}") from exc
    try:
        return _ITEMS_ADAPTER.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid knowledge base {path}: {exc}") from exc


def load_knowledge() -> tuple[KnowledgeItem, ...]:
    """Return the knowledge table, loading it on the first call."""
    global _cache
    cached = _cache
    if cached is not None:
        return cached
    with _lock:
        if _cache is None:
            path = knowledge_path()
            items = read_knowledge(path)
            logger.info("Loaded %d knowledge items from %s", len(items), path)
            _cache = items
        return _cache


def reset_knowledge_cache() -> None:
    """Forget the cached table so the next call reloads it."""
    global _cache
    with _lock:
        _cache = None


def find_knowledge_by_expression(expression: str) -> KnowledgeItem | None:
    """Find an item by its id or its expression name."""
    for item in load_knowledge():
        if item.id == expression or item.name == expression:
            return item
    return None


def search_ng_patterns(text: str) -> list[KnowledgeItem]:
    """Items having at least one search pattern contained in ``text``."""
    return [
        item
        for item in load_knowledge()
        if any(pattern and pattern in text for pattern in item.search_patterns)
    ]


__all__ = [
    "knowledge_path",
    "read_knowledge",
    "load_knowledge",
    "reset_knowledge_cache",
    "find_knowledge_by_expression",
    "search_ng_patterns",
]
