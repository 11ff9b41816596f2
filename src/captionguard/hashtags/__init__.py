# src/captionguard/hashtags/__init__.py
"""Hashtag keyword list."""

from .keywords import (
    HashtagKeyword,
    get_fixed_hashtags,
    get_non_fixed_hashtags,
    load_hashtag_keywords,
)

__all__ = [
    "HashtagKeyword",
    "get_fixed_hashtags",
    "get_non_fixed_hashtags",
    "load_hashtag_keywords",
]
