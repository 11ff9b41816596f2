# src/captionguard/models/base_model.py
"""Shared Pydantic base model tolerant of LLM and client quirks."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CaptionGuardBaseModel(BaseModel):
    """Base model that ignores unexpected keys and accepts field names or aliases."""

    # LLMs and browsers add keys we never asked for; drop them instead of failing.
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["CaptionGuardBaseModel"]
