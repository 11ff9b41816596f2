# src/captionguard/models/__init__.py
"""Pydantic models for the review, hashtag and caption payloads."""

from .base_model import CaptionGuardBaseModel
from .caption import (
    CaptionAnswer,
    CaptionInputs,
    CaptionWorkflowResult,
    ReferenceFile,
    ReviseRequest,
)
from .hashtags import HashtagResult, HashtagSelection
from .knowledge import KnowledgeItem
from .review import DetectedIssue, Position, ReviewResponse, ReviewResult

__all__ = [
    "CaptionGuardBaseModel",
    "CaptionAnswer",
    "CaptionInputs",
    "CaptionWorkflowResult",
    "ReferenceFile",
    "ReviseRequest",
    "HashtagResult",
    "HashtagSelection",
    "KnowledgeItem",
    "DetectedIssue",
    "Position",
    "ReviewResponse",
    "ReviewResult",
]
