# src/captionguard/models/knowledge.py
"""Knowledge base entries describing regulated expressions."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from .base_model import CaptionGuardBaseModel as BaseModel


class KnowledgeItem(BaseModel):
    """One regulated expression with its Markdown rule sheet."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    content: str = ""
    ng_patterns: tuple[str, ...] = Field(default=(), alias="ngPatterns")
    search_patterns: tuple[str, ...] = Field(default=(), alias="searchPatterns")


__all__ = ["KnowledgeItem"]
