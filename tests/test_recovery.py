"""Tests for the offset recovery strategies."""

import logging

from captionguard.reconcile import Candidate, Recovered, Unrecoverable, recover_position
from captionguard.reconcile.recovery import (
    find_by_prefix,
    find_case_insensitive,
    find_exact,
    lowered_with_offsets,
)

DOCUMENT = "朝はふんわり、夜はしっとり"


def candidate(text):
    return Candidate(index=0, name=text, claimed_text=text, raw_text=text)


class TestFindExact:
    def test_first_occurrence(self):
        assert find_exact("しっとり", DOCUMENT) == Recovered(9, 13, "exact")

    def test_missing(self):
        assert find_exact("しみ", DOCUMENT) is None


class TestFindCaseInsensitive:
    def test_different_case(self):
        assert find_case_insensitive("uv cut", "Use UV Cut daily") == Recovered(
            4, 10, "case_insensitive"
        )

    def test_rescan_when_lowering_changes_length(self):
        """'İ' lowers to two characters, so the end offset must be re-scanned."""
        result = find_case_insensitive("i\u0307stanbul", "\u0130stanbul")
        assert result == Recovered(0, 8, "case_insensitive_rescan")

    def test_missing(self):
        assert find_case_insensitive("spf", "Use UV Cut daily") is None

    def test_rescan_window_exhausted(self):
        """Lowered hit that no slice within twice the claimed length reproduces."""
        assert find_case_insensitive("\u0307x", "\u0130x") is None

    def test_offsets_after_length_changing_character(self):
        result = find_case_insensitive("ふんわりabc", "İ ふんわりABC")
        assert result == Recovered(2, 9, "case_insensitive")


class TestFindByPrefix:
    def test_longest_prefix_wins(self):
        result = find_by_prefix("ふんわりと優しい肌", DOCUMENT)
        assert result == Recovered(2, 6, "prefix")
        assert result.ambiguous is False

    def test_prefix_capped_at_ten_characters(self):
        document = "abcdefghijXYZ"
        assert find_by_prefix("abcdefghijklmnop", document) == Recovered(0, 10, "prefix")

    def test_two_character_prefix_repeated_is_ambiguous(self):
        result = find_by_prefix("しっXYZ", "しっとり肌としっとり感")
        assert result == Recovered(0, 2, "prefix", ambiguous=True)

    def test_two_character_prefix_unique_is_not_ambiguous(self):
        result = find_by_prefix("夜はXYZ", DOCUMENT)
        assert result == Recovered(7, 9, "prefix", ambiguous=False)

    def test_single_character_overlap_is_not_enough(self):
        assert find_by_prefix("朝日", DOCUMENT) is None

    def test_offsets_after_length_changing_character(self):
        result = find_by_prefix("ふんわりXYZ", "İ ふんわり肌")
        assert result == Recovered(2, 6, "prefix")


class TestRecoverPosition:
    def test_exact_strategy_first(self):
        assert recover_position(candidate("ふんわり"), DOCUMENT).strategy == "exact"

    def test_unrecoverable(self):
        result = recover_position(candidate("シミが消える"), DOCUMENT)
        assert isinstance(result, Unrecoverable)

    def test_ambiguous_match_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="captionguard.reconcile.recovery"):
            result = recover_position(candidate("しっXYZ"), "しっとり肌としっとり感")
        assert result.ambiguous is True
        assert "Ambiguous prefix match" in caplog.text

    def test_custom_strategies(self):
        result = recover_position(candidate("ふんわり"), DOCUMENT, strategies=(find_by_prefix,))
        assert result.strategy == "prefix"

    def test_exhausted_rescan_falls_through_to_prefix(self):
        result = recover_position(candidate("\u0307x"), "\u0130x")
        assert result == Recovered(0, 2, "prefix")


class TestLoweredWithOffsets:
    def test_maps_back_to_source_characters(self):
        lowered, offsets = lowered_with_offsets("İ A")
        assert lowered == "i̇ a"
        assert offsets == [0, 0, 1, 2]
