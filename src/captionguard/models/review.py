# src/captionguard/models/review.py
"""Models for the compliance review payloads (LLM answer and API result)."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .base_model import CaptionGuardBaseModel as BaseModel


class Position(BaseModel):
    """Half-open character range ``[start, end)`` inside the caption."""

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)


class DetectedIssue(BaseModel):
    """A verified finding, ready for highlighting."""

    expression: str
    name: str = ""
    reason: str = ""
    position: Position
    matched_text: str = Field(..., alias="matchedText")
    knowledge_id: str = Field(..., alias="knowledgeId")


class ReviewResult(BaseModel):
    """Outcome of a compliance review."""

    passed: bool
    issues: list[DetectedIssue] = Field(default_factory=list)
    total_issues: int = Field(0, alias="totalIssues", ge=0)

    @classmethod
    def permissive(cls) -> ReviewResult:
        """Result used when the review itself is unavailable."""
        return cls(passed=True, issues=[], totalIssues=0)


class ReviewResponse(BaseModel):
    """Raw JSON answer of the review model.

    Issue entries stay untyped: they are untrusted and are parsed one by one
    by the reconciliation engine, which drops what it cannot use.
    """

    passed: bool | None = None
    issues: list[Any] = Field(default_factory=list)

    @field_validator("passed", mode="before")
    @classmethod
    def _only_real_booleans(cls, value: Any) -> bool | None:
        return value if isinstance(value, bool) else None

    @field_validator("issues", mode="before")
    @classmethod
    def _missing_issues_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


__all__ = ["Position", "DetectedIssue", "ReviewResult", "ReviewResponse"]
