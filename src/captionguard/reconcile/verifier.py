# src/captionguard/reconcile/verifier.py
"""Final equality/containment check between resolved offsets and claimed text."""

from __future__ import annotations

from .recovery import lowered_with_offsets
from .types import (
    DEFAULT_REASON,
    Candidate,
    Rejected,
    ResolvedSpan,
    VerificationOutcome,
    Verified,
)


def normalize_text(text: str) -> str:
    return text.strip().lower()


def texts_agree(actual: str, claimed: str) -> bool:
    """Normalized equality, or normalized containment in either direction.

    A slice that normalizes to nothing (only whitespace) never agrees.
    """
    actual_norm = normalize_text(actual)
    claimed_norm = normalize_text(claimed)
    if not actual_norm or not claimed_norm:
        return False
    return (
        actual_norm == claimed_norm
        or claimed_norm in actual_norm
        or actual_norm in claimed_norm
    )


def build_span(candidate: Candidate, start: int, end: int) -> ResolvedSpan:
    return ResolvedSpan(
        start=start,
        end=end,
        expression=candidate.raw_text,
        matched_text=candidate.claimed_text,
        name=candidate.name,
        reason=candidate.reason or DEFAULT_REASON,
        id=f"ai-detected-{candidate.index}",
    )


def _agrees_at(start: int, end: int, document: str, claimed: str) -> bool:
    return 0 <= start < end <= len(document) and texts_agree(
        document[start:end], claimed
    )


def verify_span(
    candidate: Candidate, start: int, end: int, document: str
) -> VerificationOutcome:
    if _agrees_at(start, end, document, candidate.claimed_text):
        return Verified(build_span(candidate, start, end))

    # Last chance: locate the full normalized claimed text anywhere.
    needle = normalize_text(candidate.claimed_text)
    lowered, offsets = lowered_with_offsets(document)
    hit = lowered.find(needle) if needle else -1
    if hit != -1:
        new_start = offsets[hit]
        new_end = offsets[hit + len(needle) - 1] + 1
        if _agrees_at(new_start, new_end, document, candidate.claimed_text):
            return Verified(build_span(candidate, new_start, new_end), relocated=True)
    return Rejected(
        f"text at {start}-{end} does not match {candidate.claimed_text!r}"
    )


__all__ = ["normalize_text", "texts_agree", "build_span", "verify_span"]
