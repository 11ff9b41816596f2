"""Configuration package for captionguard."""

from .config import (
    AgentModelConfig,
    CaptionGuardConfig,
    DataConfig,
    DifyConfig,
    LLMConfig,
    RetryConfig,
    SystemConfig,
    config,
)

__all__ = [
    "AgentModelConfig",
    "CaptionGuardConfig",
    "DataConfig",
    "DifyConfig",
    "LLMConfig",
    "RetryConfig",
    "SystemConfig",
    "config",
]
