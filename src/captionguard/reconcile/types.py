# src/captionguard/reconcile/types.py
"""Value types flowing through the span reconciliation pipeline.

Every stage returns an explicit tagged result so each contract can be tested
on its own::

    Candidate -> PositionValid | PositionInvalid
              -> Recovered | Unrecoverable      (only after PositionInvalid)
              -> Verified | Rejected
              -> resolve_overlaps -> ReconciliationResult
"""

from __future__ import annotations

from dataclasses import dataclass

from captionguard.models.review import DetectedIssue, Position, ReviewResult

DEFAULT_REASON = "薬機法に抵触する可能性があります"


@dataclass(frozen=True, slots=True)
class Candidate:
    """An untrusted finding after normalization.

    ``claimed_text`` is trimmed and never empty; ``raw_text`` keeps the text
    exactly as the model sent it. ``index`` is the position of the finding in
    the model's original list.
    """

    index: int
    name: str
    claimed_text: str
    raw_text: str
    reason: str = ""
    claimed_start: int | None = None
    claimed_end: int | None = None


@dataclass(frozen=True, slots=True)
class ResolvedSpan:
    """A verified finding with exact offsets into the reference document."""

    start: int
    end: int
    expression: str
    matched_text: str
    name: str
    reason: str
    id: str

    def to_issue(self) -> DetectedIssue:
        return DetectedIssue(
            expression=self.expression,
            name=self.name,
            reason=self.reason,
            position=Position(start=self.start, end=self.end),
            matchedText=self.matched_text,
            knowledgeId=self.id,
        )


@dataclass(frozen=True, slots=True)
class PositionValid:
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class PositionInvalid:
    reason: str


@dataclass(frozen=True, slots=True)
class Recovered:
    start: int
    end: int
    strategy: str
    # Short prefix match whose prefix occurs more than once in the document.
    ambiguous: bool = False


@dataclass(frozen=True, slots=True)
class Unrecoverable:
    reason: str


@dataclass(frozen=True, slots=True)
class Verified:
    span: ResolvedSpan
    relocated: bool = False


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: str


PositionCheck = PositionValid | PositionInvalid
RecoveryOutcome = Recovered | Unrecoverable
VerificationOutcome = Verified | Rejected


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    passed: bool
    issues: tuple[ResolvedSpan, ...] = ()

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    def to_review_result(self) -> ReviewResult:
        return ReviewResult(
            passed=self.passed,
            issues=[span.to_issue() for span in self.issues],
            totalIssues=self.total_issues,
        )


__all__ = [
    "DEFAULT_REASON",
    "Candidate",
    "ResolvedSpan",
    "PositionValid",
    "PositionInvalid",
    "Recovered",
    "Unrecoverable",
    "Verified",
    "Rejected",
    "PositionCheck",
    "RecoveryOutcome",
    "VerificationOutcome",
    "ReconciliationResult",
]
