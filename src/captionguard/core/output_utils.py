# src/captionguard/core/output_utils.py
"""Debug snapshots of prompts and raw LLM responses.

Snapshots are only written when ``DEBUG_SNAPSHOTS`` is enabled. Writes run in
a worker thread and never raise: a failed snapshot must not fail a review.
"""

from __future__ import annotations

import asyncio
import os
import re
import time
from pathlib import Path

from captionguard.config import config
from captionguard.core.logging import get_logger

logger = get_logger(__name__)


def _sanitize_name(name: str) -> str:
    """Sanitize a string for safe filename usage."""
    name = name.strip().replace(os.sep, "_").replace("/", "_")
    name = re.sub(r"[^A-Za-z0-9_.\- ]+", "_", name)
    name = re.sub(r"\s+", " ", name).strip()
    return name


def _timestamp_ms() -> str:
    return str(int(time.time() * 1000))


async def _write_text(path: Path, content: str) -> None:
    """Async-friendly text write using UTF-8 encoding."""

    def _sync_write() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    await asyncio.to_thread(_sync_write)


async def write_debug_snapshot(
    *,
    base_slug: str,
    part: str,
    header: str | None,
    body: str,
    debug_dir: str | Path | None = None,
) -> Path | None:
    """Write a debug snapshot file.

    Args:
        base_slug: Logical base name correlating request and response
            (e.g. "review_gpt-4o-mini").
        part: Suffix distinguishing "prompt" from "response".
        header: Optional metadata written above the body.
        body: The main content to write.
        debug_dir: Target directory; defaults to ``config.system.debug_dir``.
    Returns:
        Path to the written file, or None when snapshots are disabled or the
        write failed.
    """
    if debug_dir is None:
        if not config.system.debug_snapshots:
            return None
        debug_dir = config.system.debug_dir

    name = f"{_sanitize_name(base_slug)}_{_sanitize_name(part)}_{_timestamp_ms()}.txt"
    path = Path(debug_dir) / name
    content = f"--- {header.strip()} ---\n\n{body}" if header else body
    try:
        await _write_text(path, content)
    except OSError as exc:
        logger.warning("Could not write debug snapshot %s: %s", path, exc)
        return None
    return path


__all__ = ["write_debug_snapshot"]
