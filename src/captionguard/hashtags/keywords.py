# src/captionguard/hashtags/keywords.py
"""Hashtag keyword list loaded from CSV.

The first row is a header. Column 1 holds the keyword; a second column equal
to ``固定`` marks a hashtag that is always attached.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from captionguard.config import config
from captionguard.core.logging import get_logger

logger = get_logger(__name__)

FIXED_MARKER = "固定"


@dataclass(frozen=True)
class HashtagKeyword:
    keyword: str
    is_fixed: bool


def hashtag_csv_path() -> Path:
    """Configured keyword CSV, or the one shipped with the package."""
    if config.data.hashtag_csv_path:
        return Path(config.data.hashtag_csv_path)
    return Path(str(resources.files("captionguard.data").joinpath("hashtags.csv")))


def parse_hashtag_csv(text: str) -> list[HashtagKeyword]:
    rows = [row for row in csv.reader(io.StringIO(text)) if any(c.strip() for c in row)]
    keywords: list[HashtagKeyword] = []
    for row in rows[1:]:
        keyword = row[0].strip() if row else ""
        if not keyword:
            continue
        is_fixed = len(row) > 1 and row[1].strip() == FIXED_MARKER
        keywords.append(HashtagKeyword(keyword=keyword, is_fixed=is_fixed))
    return keywords


def load_hashtag_keywords(path: Path | None = None) -> list[HashtagKeyword]:
    """Read the keyword CSV; an unreadable file yields an empty list."""
    path = path or hashtag_csv_path()
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        logger.error("Could not read hashtag CSV %s: %s", path, exc)
        return []
    return parse_hashtag_csv(text)


def get_fixed_hashtags(
    keywords: list[HashtagKeyword] | None = None, limit: int | None = None
) -> list[str]:
    """Fixed hashtags, at most ``limit`` (``FIXED_HASHTAG_LIMIT``)."""
    if keywords is None:
        keywords = load_hashtag_keywords()
    limit = config.data.fixed_hashtag_limit if limit is None else limit
    return [k.keyword for k in keywords if k.is_fixed][:limit]


def get_non_fixed_hashtags(keywords: list[HashtagKeyword] | None = None) -> list[str]:
    """Keywords the model may choose from."""
    if keywords is None:
        keywords = load_hashtag_keywords()
    return [k.keyword for k in keywords if not k.is_fixed and k.keyword]


__all__ = [
    "FIXED_MARKER",
    "HashtagKeyword",
    "hashtag_csv_path",
    "parse_hashtag_csv",
    "load_hashtag_keywords",
    "get_fixed_hashtags",
    "get_non_fixed_hashtags",
]
