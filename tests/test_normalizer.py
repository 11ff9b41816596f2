"""Tests for turning raw model findings into candidates."""

from captionguard.reconcile import normalize_candidates, parse_candidate


class TestParseCandidate:
    """Field extraction from one raw finding."""

    def test_full_finding(self):
        """All fields are carried over and the text is trimmed."""
        candidate = parse_candidate(
            {
                "name": "ふんわり",
                "matchedText": " ふんわり ",
                "reason": "効能効果の暗示",
                "position": {"start": 2, "end": 6},
            },
            3,
        )
        assert candidate is not None
        assert candidate.index == 3
        assert candidate.claimed_text == "ふんわり"
        assert candidate.raw_text == " ふんわり "
        assert candidate.reason == "効能効果の暗示"
        assert (candidate.claimed_start, candidate.claimed_end) == (2, 6)

    def test_name_used_when_matched_text_missing(self):
        candidate = parse_candidate({"name": "しっとり"}, 0)
        assert candidate.claimed_text == "しっとり"
        assert candidate.claimed_start is None
        assert candidate.claimed_end is None

    def test_name_used_when_matched_text_empty(self):
        candidate = parse_candidate({"name": "しっとり", "matchedText": ""}, 0)
        assert candidate.claimed_text == "しっとり"

    def test_whitespace_only_text_is_dropped(self):
        assert parse_candidate({"name": "", "matchedText": "   "}, 0) is None

    def test_non_mapping_is_dropped(self):
        assert parse_candidate("ふんわり", 0) is None
        assert parse_candidate(None, 0) is None
        assert parse_candidate(["ふんわり"], 0) is None

    def test_non_string_text_is_ignored(self):
        """A numeric matchedText falls back to name."""
        candidate = parse_candidate({"name": "明るい", "matchedText": 42}, 0)
        assert candidate.claimed_text == "明るい"

    def test_top_level_offsets_when_position_absent(self):
        candidate = parse_candidate({"matchedText": "ふんわり", "start": 2, "end": 6}, 0)
        assert (candidate.claimed_start, candidate.claimed_end) == (2, 6)

    def test_non_integer_offsets_count_as_absent(self):
        candidate = parse_candidate(
            {"matchedText": "ふんわり", "position": {"start": "2", "end": True}}, 0
        )
        assert candidate.claimed_start is None
        assert candidate.claimed_end is None

    def test_integral_float_offsets_are_accepted(self):
        candidate = parse_candidate(
            {"matchedText": "ふんわり", "position": {"start": 2.0, "end": 6.5}}, 0
        )
        assert candidate.claimed_start == 2
        assert candidate.claimed_end is None


class TestNormalizeCandidates:
    """List-level behavior."""

    def test_none_yields_empty(self):
        assert normalize_candidates(None) == []

    def test_malformed_entries_are_skipped_and_indexes_kept(self):
        candidates = normalize_candidates(
            [{"matchedText": "ふんわり"}, "junk", {"name": ""}, {"matchedText": "しっとり"}]
        )
        assert [c.claimed_text for c in candidates] == ["ふんわり", "しっとり"]
        assert [c.index for c in candidates] == [0, 3]
