# src/captionguard/models/hashtags.py
"""Models for hashtag selection."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .base_model import CaptionGuardBaseModel as BaseModel


class HashtagSelection(BaseModel):
    """Raw JSON answer of the hashtag model."""

    selected_hashtags: list[Any] = Field(default_factory=list, alias="selectedHashtags")

    @field_validator("selected_hashtags", mode="before")
    @classmethod
    def _missing_selection_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class HashtagResult(BaseModel):
    """Fixed hashtags followed by the ones chosen for the caption."""

    hashtags: list[str] = Field(default_factory=list)
    fixed_hashtags: list[str] = Field(default_factory=list, alias="fixedHashtags")
    selected_hashtags: list[str] = Field(default_factory=list, alias="selectedHashtags")


__all__ = ["HashtagSelection", "HashtagResult"]
