# src/captionguard/reconcile/engine.py
"""Span reconciliation: from untrusted model findings to verified highlights.

Each candidate goes through validation, recovery and verification on its
own; the overlap pass then needs the complete verified set. The engine is
pure: no I/O, no shared state beyond the read-only document, and it never
raises for data it cannot use. Unusable candidates are simply dropped.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from captionguard.core.logging import get_logger

from .normalizer import normalize_candidates
from .overlap import resolve_overlaps
from .recovery import recover_position
from .types import (
    Candidate,
    PositionValid,
    ReconciliationResult,
    Rejected,
    ResolvedSpan,
    Unrecoverable,
    VerificationOutcome,
    Verified,
)
from .validator import validate_position
from .verifier import verify_span

logger = get_logger(__name__)


def resolve_candidate(candidate: Candidate, document: str) -> VerificationOutcome:
    """Run one candidate through validation, recovery and verification."""
    checked = validate_position(candidate, document)
    if isinstance(checked, PositionValid):
        start, end = checked.start, checked.end
    else:
        recovered = recover_position(candidate, document)
        if isinstance(recovered, Unrecoverable):
            return Rejected(recovered.reason)
        logger.debug(
            "Recovered candidate %d via %s: %s -> %d-%d",
            candidate.index,
            recovered.strategy,
            checked.reason,
            recovered.start,
            recovered.end,
        )
        start, end = recovered.start, recovered.end
    return verify_span(candidate, start, end, document)


def reconcile(
    document: str,
    candidates: Iterable[Any] | None,
    passed: bool | None = None,
) -> ReconciliationResult:
    """Reconcile raw findings against ``document``.

    Parameters
    ----------
    document:
        The caption the findings refer to.
    candidates:
        Raw findings (``{name, matchedText?, reason?, position?}``) as decoded
        from the model's JSON.
    passed:
        External verdict from the model. When None, the verdict is whether no
        issue survived.
    """
    normalized = normalize_candidates(candidates)
    verified: list[ResolvedSpan] = []
    for candidate in normalized:
        outcome = resolve_candidate(candidate, document)
        if isinstance(outcome, Verified):
            verified.append(outcome.span)
        else:
            logger.debug("Dropped candidate %d: %s", candidate.index, outcome.reason)

    issues = resolve_overlaps(verified)
    if len(issues) != len(verified):
        logger.debug("Overlap resolution removed %d spans", len(verified) - len(issues))
    verdict = (not issues) if passed is None else passed
    return ReconciliationResult(passed=verdict, issues=tuple(issues))


__all__ = ["resolve_candidate", "reconcile"]
