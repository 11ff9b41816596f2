"""Tests for the compliance reviewer and hashtag selector agents."""

import asyncio

import pytest

from captionguard.agents import ComplianceReviewer, HashtagSelector
from captionguard.agents.compliance_reviewer import build_review_prompt
from captionguard.agents.hashtag_selector import build_hashtag_prompt, filter_selection
from captionguard.core.errors import ConfigurationError, GenerationServiceError
from conftest import CAPTION, completion


class TestComplianceReviewer:
    """Model findings are reconciled against the caption."""

    def make(self, settings, knowledge_items):
        return ComplianceReviewer(settings=settings, knowledge_loader=lambda: knowledge_items)

    def test_prompt_embeds_caption_and_knowledge(self, settings, knowledge_items, fake_llm):
        fake = fake_llm(completion({"passed": True, "issues": []}))
        asyncio.run(self.make(settings, knowledge_items).review(CAPTION))

        messages = fake.calls[0]["messages"]
        assert messages[0]["role"] == "system"
        assert "薬機法審査の専門家" in messages[0]["content"]
        assert CAPTION in messages[1]["content"]
        assert "【表現: ふんわり】" in messages[1]["content"]

    def test_wrong_offsets_are_corrected(self, settings, knowledge_items, fake_llm):
        fake_llm(
            completion(
                {
                    "passed": False,
                    "issues": [
                        {
                            "name": "ふんわり",
                            "matchedText": "ふんわり",
                            "reason": "効能効果の暗示",
                            "position": {"start": 0, "end": 4},
                        },
                        {"name": "シミが消える", "matchedText": "シミが消える"},
                    ],
                }
            )
        )
        result = asyncio.run(self.make(settings, knowledge_items).review(CAPTION))
        assert result.passed is False
        assert result.total_issues == 1
        issue = result.issues[0]
        assert (issue.position.start, issue.position.end) == (2, 6)
        assert issue.reason == "効能効果の暗示"
        assert issue.knowledge_id == "ai-detected-0"

    def test_verdict_derived_when_missing(self, settings, knowledge_items, fake_llm):
        fake_llm(completion({"issues": [{"name": "シミ"}]}))
        result = asyncio.run(self.make(settings, knowledge_items).review(CAPTION))
        assert result.passed is True
        assert result.issues == []

    def test_model_verdict_kept(self, settings, knowledge_items, fake_llm):
        fake_llm(completion({"passed": False, "issues": []}))
        result = asyncio.run(self.make(settings, knowledge_items).review(CAPTION))
        assert result.passed is False

    def test_model_override(self, settings, knowledge_items, fake_llm):
        fake = fake_llm(completion({"passed": True, "issues": []}))
        reviewer = ComplianceReviewer(
            model="gpt-4o", settings=settings, knowledge_loader=lambda: knowledge_items
        )
        asyncio.run(reviewer.review(CAPTION))
        assert fake.calls[0]["model"] == "gpt-4o"

    def test_unparseable_answer_is_hard_failure(self, settings, knowledge_items, fake_llm):
        fake_llm(completion("I cannot help with that."))
        with pytest.raises(GenerationServiceError):
            asyncio.run(self.make(settings, knowledge_items).review(CAPTION))

    def test_missing_key(self, unconfigured_settings, knowledge_items):
        reviewer = self.make(unconfigured_settings, knowledge_items)
        with pytest.raises(ConfigurationError):
            asyncio.run(reviewer.review(CAPTION))

    def test_prompt_example_positions(self):
        prompt = build_review_prompt(CAPTION, "")
        assert '"start": 2, "end": 6' in prompt
        assert '"matchedText": "キャプション内の該当部分"' in prompt


class TestHashtagSelector:
    """Fixed hashtags plus validated model picks."""

    def make(self, settings, keywords):
        return HashtagSelector(settings=settings, keyword_loader=lambda: keywords)

    def test_selection_filtered_and_trimmed(self, settings, hashtag_keywords, fake_llm):
        fake_llm(completion({"selectedHashtags": [" 保湿 ", "新語", 7, "乾燥肌", "コスメ"]}))
        result = asyncio.run(self.make(settings, hashtag_keywords).select(CAPTION))
        assert result.fixed_hashtags == ["コスメ", "スキンケア", "美容", "新作コスメ"]
        assert result.selected_hashtags == ["保湿", "乾燥肌"]
        assert result.hashtags == ["コスメ", "スキンケア", "美容", "新作コスメ", "保湿", "乾燥肌"]

    def test_selection_capped(self, settings, hashtag_keywords, fake_llm):
        settings.data.selected_hashtag_limit = 2
        fake_llm(completion({"selectedHashtags": ["保湿", "乾燥肌", "敏感肌"]}))
        result = asyncio.run(self.make(settings, hashtag_keywords).select(CAPTION))
        assert result.selected_hashtags == ["保湿", "乾燥肌"]

    def test_no_candidates_skips_model(self, settings, hashtag_keywords, fake_llm):
        fake = fake_llm(completion({}))
        fixed_only = [k for k in hashtag_keywords if k.is_fixed]
        result = asyncio.run(self.make(settings, fixed_only).select(CAPTION))
        assert fake.calls == []
        assert result.selected_hashtags == []
        assert result.hashtags == result.fixed_hashtags

    def test_missing_selection(self, settings, hashtag_keywords, fake_llm):
        fake_llm(completion({"selectedHashtags": None}))
        result = asyncio.run(self.make(settings, hashtag_keywords).select(CAPTION))
        assert result.selected_hashtags == []

    def test_wire_form(self, settings, hashtag_keywords, fake_llm):
        fake_llm(completion({"selectedHashtags": ["保湿"]}))
        result = asyncio.run(self.make(settings, hashtag_keywords).select(CAPTION))
        assert set(result.model_dump(by_alias=True)) == {"hashtags", "fixedHashtags", "selectedHashtags"}

    def test_prompt_lists_numbered_candidates(self):
        prompt = build_hashtag_prompt(CAPTION, ["保湿", "乾燥肌"], 17)
        assert "1. 保湿\n2. 乾燥肌" in prompt
        assert "最も関連性の高い17個" in prompt

    def test_filter_selection(self):
        assert filter_selection(["a", " b", None, "c"], ["a", "b"], 5) == ["a", "b"]
