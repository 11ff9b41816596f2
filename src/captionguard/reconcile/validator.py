# src/captionguard/reconcile/validator.py
"""Check a candidate's claimed offsets against the document."""

from __future__ import annotations

from .types import Candidate, PositionCheck, PositionInvalid, PositionValid


def in_bounds(start: int, end: int, document: str) -> bool:
    return 0 <= start < end <= len(document)


def slice_matches(actual: str, claimed: str) -> bool:
    """Exact match, or either text contains the other ignoring case."""
    if actual == claimed:
        return True
    actual_lower = actual.lower()
    claimed_lower = claimed.lower()
    return claimed_lower in actual_lower or actual_lower in claimed_lower


def validate_position(candidate: Candidate, document: str) -> PositionCheck:
    start = candidate.claimed_start
    end = candidate.claimed_end
    if start is None or end is None:
        return PositionInvalid("no claimed offsets")
    if not in_bounds(start, end, document):
        return PositionInvalid(f"offsets {start}-{end} out of bounds")
    if not slice_matches(document[start:end], candidate.claimed_text):
        return PositionInvalid(f"text at {start}-{end} does not match claimed text")
    return PositionValid(start, end)


__all__ = ["in_bounds", "slice_matches", "validate_position"]
