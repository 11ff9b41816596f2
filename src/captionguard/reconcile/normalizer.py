# src/captionguard/reconcile/normalizer.py
"""Turn raw model findings into trimmed, well-typed candidates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .types import Candidate


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_offset(value: Any) -> int | None:
    """Accept integers (and integral floats); anything else counts as absent."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_candidate(raw: Any, index: int) -> Candidate | None:
    """Build a :class:`Candidate` from one raw finding, or None if unusable.

    The claimed text is ``matchedText``, falling back to ``name`` when absent
    or empty. Offsets come from ``position.start``/``position.end``; top-level
    ``start``/``end`` are accepted when ``position`` is missing.
    """
    if not isinstance(raw, Mapping):
        return None

    name = _as_text(raw.get("name"))
    raw_text = _as_text(raw.get("matchedText")) or name
    claimed_text = raw_text.strip()
    if not claimed_text:
        return None

    position = raw.get("position")
    source: Mapping[str, Any] = position if isinstance(position, Mapping) else raw
    return Candidate(
        index=index,
        name=name,
        claimed_text=claimed_text,
        raw_text=raw_text,
        reason=_as_text(raw.get("reason")),
        claimed_start=_as_offset(source.get("start")),
        claimed_end=_as_offset(source.get("end")),
    )


def normalize_candidates(raw_candidates: Iterable[Any] | None) -> list[Candidate]:
    """Parse every raw finding, silently dropping the malformed ones."""
    if raw_candidates is None:
        return []
    candidates: list[Candidate] = []
    for index, raw in enumerate(raw_candidates):
        candidate = parse_candidate(raw, index)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


__all__ = ["parse_candidate", "normalize_candidates"]
