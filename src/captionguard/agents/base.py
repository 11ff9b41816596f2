# src/captionguard/agents/base.py
"""Base class for captionguard agents."""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel

from captionguard.config import CaptionGuardConfig, config
from captionguard.core.llm import call_llm_json
from captionguard.core.logging import get_logger

T = TypeVar("T", bound=BaseModel)


class Agent:
    """Base class for LLM-backed agents, providing common utilities."""

    #: System message sent with every call.
    system_prompt: str = ""

    def __init__(
        self,
        *,
        model: str | None = None,
        default_model: str,
        settings: CaptionGuardConfig | None = None,
    ) -> None:
        """Initialize the agent with a model.

        Parameters
        ----------
        model:
            The LLM model name; ``default_model`` is used when omitted.
        default_model:
            Model configured for this agent in ``config.agents``.
        settings:
            Configuration override, mainly for tests.

        Raises
        ------
        ValueError
            If neither ``model`` nor ``default_model`` names a model.
        """
        self.model: str = model or default_model
        if not self.model:
            raise ValueError(f"No model configured for {self.__class__.__name__}")
        self.settings = settings or config
        self.logger = get_logger(f"captionguard.agents.{self.__class__.__name__}")

    async def call_llm_json(
        self,
        prompt: str,
        response_model: type[T],
        *,
        temperature: float | None = None,
    ) -> T:
        """Call the LLM in JSON mode with error logging."""
        try:
            return await call_llm_json(
                self.model,
                prompt,
                response_model,
                system_prompt=self.system_prompt or None,
                temperature=temperature,
                settings=self.settings,
            )
        except Exception as exc:
            self.logger.error("LLM error: %s", exc)
            raise


__all__ = ["Agent"]
