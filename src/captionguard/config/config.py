# src/captionguard/config/config.py
"""Configuration system for captionguard."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _env(name: str) -> dict[str, Any]:
    """Field metadata naming the environment variable that feeds a setting."""
    return {"env": name}


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    api_base: str | None = Field(default=None, json_schema_extra=_env("OPENAI_API_BASE"))
    api_key: str = Field(default="", json_schema_extra=_env("OPENAI_API_KEY"))
    # Sampling temperature for JSON-mode calls; provider default when unset.
    temperature: float | None = Field(default=None, json_schema_extra=_env("TEMPERATURE"))
    timeout: float = Field(default=60.0, json_schema_extra=_env("LLM_TIMEOUT"))


class AgentModelConfig(BaseModel):
    """Agent model configuration."""

    compliance_reviewer: str = Field(
        default="gpt-4o-mini", json_schema_extra=_env("REVIEW_MODEL")
    )
    hashtag_selector: str = Field(
        default="gpt-4o-mini", json_schema_extra=_env("HASHTAG_MODEL")
    )


class DifyConfig(BaseModel):
    """Caption generation service (Dify chat app) settings."""

    api_endpoint: str = Field(default="", json_schema_extra=_env("DIFY_API_ENDPOINT"))
    api_key: str = Field(default="", json_schema_extra=_env("DIFY_API_KEY"))
    user: str = Field(default="user", json_schema_extra=_env("DIFY_USER"))
    timeout: float = Field(default=120.0, json_schema_extra=_env("DIFY_TIMEOUT"))


class DataConfig(BaseModel):
    """Locations of the read-only data files and selection limits."""

    # Empty paths fall back to the files shipped in ``captionguard/data``.
    knowledge_path: str = Field(default="", json_schema_extra=_env("KNOWLEDGE_PATH"))
    hashtag_csv_path: str = Field(default="", json_schema_extra=_env("HASHTAG_CSV_PATH"))
    fixed_hashtag_limit: int = Field(default=4, json_schema_extra=_env("FIXED_HASHTAG_LIMIT"))
    selected_hashtag_limit: int = Field(
        default=17, json_schema_extra=_env("SELECTED_HASHTAG_LIMIT")
    )


class RetryConfig(BaseModel):
    """Retry configuration settings."""

    retry_attempts: int = Field(default=3, json_schema_extra=_env("RETRY_ATTEMPTS"))
    retry_backoff: float = Field(default=0.5, json_schema_extra=_env("RETRY_BACKOFF"))
    retry_max_interval: float = Field(
        default=10.0, json_schema_extra=_env("RETRY_MAX_INTERVAL")
    )


class SystemConfig(BaseModel):
    """System configuration settings."""

    log_level: str = Field(default="INFO", json_schema_extra=_env("LOG_LEVEL"))
    log_format: str = Field(default="", json_schema_extra=_env("LOG_FORMAT"))
    port: int = Field(default=8000, json_schema_extra=_env("PORT"))
    debug_snapshots: bool = Field(default=False, json_schema_extra=_env("DEBUG_SNAPSHOTS"))
    debug_dir: str = Field(default="./debug", json_schema_extra=_env("DEBUG_DIR"))


def _section_from_env(section: type[BaseModel], environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect the raw values of ``section`` from ``environ``.

    Empty strings are treated as unset so a blank line in ``.env`` keeps the
    default. Type coercion is left to pydantic.
    """
    values: dict[str, Any] = {}
    for field_name, field in section.model_fields.items():
        extra = field.json_schema_extra
        if not isinstance(extra, dict):
            continue
        env_name = extra.get("env")
        if not isinstance(env_name, str):
            continue
        raw = environ.get(env_name)
        if raw is None or raw.strip() == "":
            continue
        values[field_name] = raw.strip()
    return values


class CaptionGuardConfig(BaseModel):
    """Main configuration class."""

    llm: LLMConfig = LLMConfig()
    agents: AgentModelConfig = AgentModelConfig()
    dify: DifyConfig = DifyConfig()
    data: DataConfig = DataConfig()
    retry: RetryConfig = RetryConfig()
    system: SystemConfig = SystemConfig()

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> CaptionGuardConfig:
        """Load configuration from environment variables."""
        source = os.environ if environ is None else environ
        payload: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            section = field.annotation
            if isinstance(section, type) and issubclass(section, BaseModel):
                payload[name] = _section_from_env(section, source)
        return cls.model_validate(payload)


# Global configuration instance; a local .env never overrides the real environment
load_dotenv()
config = CaptionGuardConfig.load()
