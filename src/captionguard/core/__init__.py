# src/captionguard/core/__init__.py
"""Core utilities for captionguard."""

from .env import get_settings
from .errors import (
    CaptionGuardError,
    ConfigurationError,
    DifyApiError,
    GenerationServiceError,
    MalformedResponseError,
)
from .llm import call_llm_json
from .logging import get_logger, init_logging

__all__ = [
    "CaptionGuardError",
    "ConfigurationError",
    "DifyApiError",
    "GenerationServiceError",
    "MalformedResponseError",
    "call_llm_json",
    "get_logger",
    "get_settings",
    "init_logging",
]
