# src/captionguard/reconcile/__init__.py
"""Span reconciliation engine."""

from .engine import reconcile, resolve_candidate
from .normalizer import normalize_candidates, parse_candidate
from .overlap import resolve_overlaps
from .recovery import recover_position
from .types import (
    Candidate,
    PositionInvalid,
    PositionValid,
    ReconciliationResult,
    Recovered,
    Rejected,
    ResolvedSpan,
    Unrecoverable,
    Verified,
)
from .validator import validate_position
from .verifier import verify_span

__all__ = [
    "reconcile",
    "resolve_candidate",
    "normalize_candidates",
    "parse_candidate",
    "validate_position",
    "recover_position",
    "verify_span",
    "resolve_overlaps",
    "Candidate",
    "ResolvedSpan",
    "PositionValid",
    "PositionInvalid",
    "Recovered",
    "Unrecoverable",
    "Verified",
    "Rejected",
    "ReconciliationResult",
]
