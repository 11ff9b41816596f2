# src/captionguard/models/caption.py
"""Models for caption generation requests and results."""

from __future__ import annotations

from pydantic import Field, field_validator

from .base_model import CaptionGuardBaseModel as BaseModel
from .hashtags import HashtagResult
from .review import ReviewResult
from .validators import validate_non_empty


class CaptionInputs(BaseModel):
    """Planning inputs forwarded to the caption generator."""

    planning_proposal: str = ""
    planning_intent: str = ""
    ref_url1: str = ""
    ref_url2: str = ""
    ref_url3: str = ""


class ReferenceFile(BaseModel):
    """An uploaded reference document held in memory."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def dify_type(self) -> str:
        return "image" if self.content_type.startswith("image/") else "document"


class CaptionAnswer(BaseModel):
    """Text returned by the caption generator."""

    answer: str
    conversation_id: str = Field("", alias="conversationId")


class ReviseRequest(BaseModel):
    """Edit-mode request: an instruction applied to the previous caption."""

    query: str
    conversation_id: str | None = Field(None, alias="conversationId")
    inputs: CaptionInputs | None = None

    @field_validator("query")
    @classmethod
    def _query_required(cls, value: str) -> str:
        return validate_non_empty(value)


class CaptionWorkflowResult(BaseModel):
    """Create-mode result: caption plus its review and hashtags."""

    caption: str
    conversation_id: str = Field("", alias="conversationId")
    review: ReviewResult
    hashtags: HashtagResult | None = None


__all__ = [
    "CaptionInputs",
    "ReferenceFile",
    "CaptionAnswer",
    "ReviseRequest",
    "CaptionWorkflowResult",
]
