# src/captionguard/models/validators.py
"""Custom validators for Pydantic models."""

from __future__ import annotations


def validate_non_empty(value: str) -> str:
    """Ensure ``value`` is not empty or whitespace."""
    if not value.strip():
        raise ValueError("must not be empty")
    return value


__all__ = ["validate_non_empty"]
