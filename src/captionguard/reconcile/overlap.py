# src/captionguard/reconcile/overlap.py
"""Drop duplicate and nested spans from the verified set."""

from __future__ import annotations

from collections.abc import Iterable

from .types import ResolvedSpan


def is_nested(a: ResolvedSpan, b: ResolvedSpan) -> bool:
    """True if either span contains the other (identical ranges included)."""
    return (a.start >= b.start and a.end <= b.end) or (
        b.start >= a.start and b.end <= a.end
    )


def resolve_overlaps(spans: Iterable[ResolvedSpan]) -> list[ResolvedSpan]:
    """Sort by ``(start, end)`` and keep the first of every nested group.

    Spans that only partially overlap are both kept. Sorting is stable, so
    among identical ranges the earliest input wins. Idempotent.
    """
    ordered = sorted(spans, key=lambda span: (span.start, span.end))
    accepted: list[ResolvedSpan] = []
    seen: set[tuple[int, int]] = set()
    for span in ordered:
        key = (span.start, span.end)
        if key in seen:
            continue
        if any(is_nested(span, kept) for kept in accepted):
            continue
        accepted.append(span)
        seen.add(key)
    return accepted


__all__ = ["is_nested", "resolve_overlaps"]
