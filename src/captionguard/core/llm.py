# src/captionguard/core/llm.py
"""Lightweight wrapper around LiteLLM for async JSON-mode LLM calls."""

from __future__ import annotations

import json
import re
import time
from typing import Any, TypeVar

import dirtyjson
import litellm
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from captionguard.config import CaptionGuardConfig, config
from captionguard.core.errors import (
    ConfigurationError,
    GenerationServiceError,
    MalformedResponseError,
)
from captionguard.core.logging import get_logger
from captionguard.core.output_utils import write_debug_snapshot

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

# Provider failures worth another attempt; everything else fails fast.
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    litellm.APIConnectionError,
    litellm.Timeout,
    litellm.RateLimitError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
)

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_JSON_BLOCK_RE = re.compile(r"({.*}|\[.*\])", re.DOTALL)


def strip_code_fences(content: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN_RE.sub("", text)
        text = _FENCE_CLOSE_RE.sub("", text).strip()
    return text


def parse_json_content(content: str | None) -> Any:
    """Decode the JSON payload of an LLM response.

    Tries a strict decode first, then salvages the outermost object or array
    from surrounding prose with ``dirtyjson`` (tolerates trailing commas and
    single quotes).

    Raises
    ------
    MalformedResponseError
        If nothing decodable is found.
    """
    if content is None or not content.strip():
        raise MalformedResponseError("Empty response from generation service", content)

    text = strip_code_fences(content)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        match = _JSON_BLOCK_RE.search(text)
        if not match:
            raise MalformedResponseError(
                f"Response is not valid JSON: {exc}", content
            ) from exc
        try:
            salvaged = dirtyjson.loads(match.group(1))
        except Exception as salvage_exc:  # dirtyjson raises its own Error type
            raise MalformedResponseError(
                f"Response is not valid JSON: {salvage_exc}", content
            ) from salvage_exc
        logger.debug("Recovered JSON payload with lenient parsing")
        return _plain(salvaged)


def _plain(value: Any) -> Any:
    """Convert dirtyjson's attributed containers into plain dicts and lists."""
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _extract_content(response: Any) -> str | None:
    try:
        return response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError(
            f"Unexpected completion shape: {type(response).__name__}"
        ) from exc


async def call_llm_json(
    model: str,
    prompt: str,
    response_model: type[T],
    *,
    system_prompt: str | None = None,
    temperature: float | None = None,
    settings: CaptionGuardConfig | None = None,
) -> T:
    """Call the LLM in JSON mode and validate the answer.

    Parameters
    ----------
    model:
        Name of the model to query (any LiteLLM model string).
    prompt:
        User prompt passed to the model.
    response_model:
        Pydantic model the decoded JSON must validate against.
    system_prompt:
        Optional system message sent before the prompt.
    temperature:
        Sampling temperature; falls back to ``LLMConfig.temperature``.
    settings:
        Configuration override, mainly for tests.

    Returns
    -------
    T
        Validated instance of ``response_model``.

    Raises
    ------
    ConfigurationError
        If no API key is configured.
    MalformedResponseError
        If the answer cannot be decoded or validated.
    GenerationServiceError
        If the provider call fails after all retry attempts.
    """
    settings = settings or config
    if not settings.llm.api_key:
        raise ConfigurationError("OPENAI_API_KEY must be set")

    model_name = getattr(response_model, "__name__", str(response_model))
    messages: list[dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    kwargs: dict[str, Any] = {
        "model": model,
        "messages": messages,
        "api_key": settings.llm.api_key,
        "response_format": {"type": "json_object"},
        "timeout": settings.llm.timeout,
    }
    if settings.llm.api_base:
        kwargs["api_base"] = settings.llm.api_base
    effective_temperature = (
        settings.llm.temperature if temperature is None else temperature
    )
    if effective_temperature is not None:
        kwargs["temperature"] = effective_temperature

    await write_debug_snapshot(
        base_slug=f"llm_{model}",
        part="prompt",
        header=f"model={model}; response_model={model_name}",
        body=prompt,
    )

    start_time = time.time()
    retry = settings.retry
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, retry.retry_attempts)),
            wait=wait_exponential(
                multiplier=retry.retry_backoff, max=retry.retry_max_interval
            ),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        ):
            with attempt:
                attempt_no = attempt.retry_state.attempt_number
                if attempt_no > 1:
                    logger.warning(
                        "Retrying LLM call to %s for %s (attempt %d)",
                        model,
                        model_name,
                        attempt_no,
                    )
                response = await litellm.acompletion(**kwargs)
    except TRANSIENT_ERRORS as exc:
        raise GenerationServiceError(
            f"LLM call to {model} failed after {retry.retry_attempts} attempts: {exc}"
        ) from exc
    except Exception as exc:
        raise GenerationServiceError(f"LLM call to {model} failed: {exc}") from exc

    content = _extract_content(response)
    logger.info(
        "LLM call to %s for %s completed in %.2fs (%d chars)",
        model,
        model_name,
        time.time() - start_time,
        len(content or ""),
    )
    await write_debug_snapshot(
        base_slug=f"llm_{model}",
        part="response",
        header=f"model={model}; response_model={model_name}",
        body=content or "",
    )

    payload = parse_json_content(content)
    try:
        return response_model.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Response does not match {model_name}: {exc}", content
        ) from exc


__all__ = [
    "TRANSIENT_ERRORS",
    "call_llm_json",
    "parse_json_content",
    "strip_code_fences",
]
