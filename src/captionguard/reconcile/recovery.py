# src/captionguard/reconcile/recovery.py
"""Re-derive offsets for candidates whose claimed position failed validation.

The model reasons over tokens, not characters, so its offsets are often off
while the phrase itself (or at least its first characters) is right.
Strategies run in order and the first hit wins:

1. exact substring search;
2. case-insensitive search, re-scanning the end offset when lower-casing
   changed the text length;
3. shrinking-prefix search, from 10 characters down to 2.

Short prefixes can land on the wrong occurrence. The first occurrence is
still used; such matches are flagged ``ambiguous`` and logged.
"""

from __future__ import annotations

from collections.abc import Callable

from captionguard.core.logging import get_logger

from .types import Candidate, Recovered, RecoveryOutcome, Unrecoverable

logger = get_logger(__name__)

MAX_PREFIX_LENGTH = 10
MIN_PREFIX_LENGTH = 2
# Prefixes shorter than this are reported as ambiguous when repeated.
AMBIGUOUS_PREFIX_LENGTH = 3

Strategy = Callable[[str, str], Recovered | None]


def lowered_with_offsets(document: str) -> tuple[str, list[int]]:
    """Lower-case ``document`` one character at a time.

    Returns the lowered text and, for each of its characters, the index of the
    source character it came from, so hits in the lowered text map back to
    offsets in ``document`` even when lowering changed the length.
    """
    pieces: list[str] = []
    offsets: list[int] = []
    for index, char in enumerate(document):
        lowered = char.lower()
        pieces.append(lowered)
        offsets.extend([index] * len(lowered))
    return "".join(pieces), offsets


def find_exact(text: str, document: str) -> Recovered | None:
    index = document.find(text)
    if index == -1:
        return None
    return Recovered(index, index + len(text), "exact")


def find_case_insensitive(text: str, document: str) -> Recovered | None:
    needle = text.lower()
    lowered, offsets = lowered_with_offsets(document)
    hit = lowered.find(needle) if needle else -1
    if hit == -1:
        return None

    start = offsets[hit]
    end = start + len(text)
    if end <= len(document) and document[start:end].lower() == needle:
        return Recovered(start, end, "case_insensitive")

    # Case folding changed the length (e.g. "İ" lowers to two characters):
    # grow the end one character at a time within twice the claimed length.
    window_end = min(start + 2 * len(text), len(document))
    for end in range(start + 1, window_end + 1):
        if document[start:end].lower() == needle:
            return Recovered(start, end, "case_insensitive_rescan")
    return None


def find_by_prefix(text: str, document: str) -> Recovered | None:
    lowered, offsets = lowered_with_offsets(document)
    longest = min(MAX_PREFIX_LENGTH, len(text))
    for length in range(longest, MIN_PREFIX_LENGTH - 1, -1):
        prefix = text[:length].lower()
        hit = lowered.find(prefix)
        if hit == -1:
            continue
        start = offsets[hit]
        end = offsets[hit + len(prefix) - 1] + 1
        ambiguous = (
            length < AMBIGUOUS_PREFIX_LENGTH and lowered.find(prefix, hit + 1) != -1
        )
        return Recovered(start, end, "prefix", ambiguous=ambiguous)
    return None


RECOVERY_STRATEGIES: tuple[Strategy, ...] = (
    find_exact,
    find_case_insensitive,
    find_by_prefix,
)


def recover_position(
    candidate: Candidate,
    document: str,
    strategies: tuple[Strategy, ...] = RECOVERY_STRATEGIES,
) -> RecoveryOutcome:
    for strategy in strategies:
        found = strategy(candidate.claimed_text, document)
        if found is None:
            continue
        if found.ambiguous:
            logger.warning(
                "Ambiguous prefix match for candidate %d (%r) at %d-%d",
                candidate.index,
                candidate.claimed_text,
                found.start,
                found.end,
            )
        return found
    return Unrecoverable(f"{candidate.claimed_text!r} not found in document")


__all__ = [
    "MAX_PREFIX_LENGTH",
    "MIN_PREFIX_LENGTH",
    "AMBIGUOUS_PREFIX_LENGTH",
    "RECOVERY_STRATEGIES",
    "lowered_with_offsets",
    "find_exact",
    "find_case_insensitive",
    "find_by_prefix",
    "recover_position",
]
