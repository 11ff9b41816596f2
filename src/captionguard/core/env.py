# src/captionguard/core/env.py
"""Access to the process-wide settings."""

from __future__ import annotations

from ..config import CaptionGuardConfig, config


def get_settings() -> CaptionGuardConfig:
    """Get the application settings."""
    return config


__all__ = ["get_settings"]
