# src/captionguard/core/errors.py
"""Exception hierarchy shared by the agents, clients and web layer."""

from __future__ import annotations


class CaptionGuardError(Exception):
    """Base class for all captionguard failures."""

    status_code: int = 500


class ConfigurationError(CaptionGuardError):
    """A required setting (API key, endpoint) is missing."""


class GenerationServiceError(CaptionGuardError):
    """The text-generation service failed or returned something unusable.

    This is a hard failure for the whole call; callers decide on fallbacks.
    """


class MalformedResponseError(GenerationServiceError):
    """The service answered, but not with the expected JSON structure."""

    def __init__(self, reason: str, content: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.content = content


class DifyApiError(CaptionGuardError):
    """Error raised by the caption generation (Dify) client."""

    def __init__(self, status: int, code: str, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return self.status


__all__ = [
    "CaptionGuardError",
    "ConfigurationError",
    "GenerationServiceError",
    "MalformedResponseError",
    "DifyApiError",
]
