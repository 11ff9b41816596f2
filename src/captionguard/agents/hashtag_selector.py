# src/captionguard/agents/hashtag_selector.py
"""Pick Instagram hashtags for a caption from the curated keyword list."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from captionguard.config import CaptionGuardConfig, config
from captionguard.hashtags import (
    HashtagKeyword,
    get_fixed_hashtags,
    get_non_fixed_hashtags,
    load_hashtag_keywords,
)
from captionguard.models.hashtags import HashtagResult, HashtagSelection

from .base import Agent

HASHTAG_PROMPT_TEMPLATE = """あなたはInstagramのハッシュタグ選定の専門家です。
以下のキャプション本文を分析して、提供されたキーワードリストから、キャプションの内容に最も関連性の高い{limit}個のハッシュタグを選択してください。

## キャプション本文

{caption}

## 選択可能なキーワードリスト

{keywords}

## 選択条件

1. キャプションの内容に最も関連性の高い{limit}個を選択してください
2. 重複は避けてください
3. キャプションの内容と関連性が低いものは避けてください
4. キーワードリストに記載されているもののみを選択してください（新規作成は禁止）
5. 選択したキーワードは、そのままの形式で返してください（#は付けない）

## 出力形式

以下のJSON形式で回答してください：

```json
{{
  "selectedHashtags": ["キーワード1", "キーワード2", "キーワード3", ...]
}}
```

必ず{limit}個のキーワードを選択してください。{limit}個未満の場合は、関連性が高い順に{limit}個になるまで選択してください。"""


def build_hashtag_prompt(caption: str, candidates: Sequence[str], limit: int) -> str:
    numbered = "\n".join(f"{i}. {keyword}" for i, keyword in enumerate(candidates, 1))
    return HASHTAG_PROMPT_TEMPLATE.format(caption=caption, keywords=numbered, limit=limit)


def filter_selection(
    selection: Sequence[object], candidates: Sequence[str], limit: int
) -> list[str]:
    """Keep string entries naming a candidate keyword, trimmed, at most ``limit``."""
    allowed = set(candidates)
    chosen: list[str] = []
    for entry in selection:
        if not isinstance(entry, str):
            continue
        keyword = entry.strip()
        if keyword in allowed:
            chosen.append(keyword)
    return chosen[:limit]


class HashtagSelector(Agent):
    """Fixed hashtags plus the model's picks from the non-fixed keywords."""

    def __init__(
        self,
        *,
        model: str | None = None,
        settings: CaptionGuardConfig | None = None,
        keyword_loader: Callable[[], Sequence[HashtagKeyword]] = load_hashtag_keywords,
    ) -> None:
        settings = settings or config
        super().__init__(
            model=model,
            default_model=settings.agents.hashtag_selector,
            settings=settings,
        )
        self.system_prompt = (
            "あなたはInstagramのハッシュタグ選定の専門家です。"
            "提供されたキャプションを分析し、キーワードリストから最も関連性の高い"
            f"{settings.data.selected_hashtag_limit}個のハッシュタグを選択して"
            "JSON形式で返してください。"
        )
        self._keyword_loader = keyword_loader

    async def select(self, caption: str) -> HashtagResult:
        """Choose hashtags for ``caption``.

        When the keyword list has no non-fixed entries the fixed hashtags are
        returned without calling the model.
        """
        keywords = list(self._keyword_loader())
        limits = self.settings.data
        fixed = get_fixed_hashtags(keywords, limit=limits.fixed_hashtag_limit)
        candidates = get_non_fixed_hashtags(keywords)

        if not candidates:
            self.logger.info("No selectable keywords; returning %d fixed hashtags", len(fixed))
            return HashtagResult(hashtags=fixed, fixed_hashtags=fixed, selected_hashtags=[])

        limit = limits.selected_hashtag_limit
        prompt = build_hashtag_prompt(caption, candidates, limit)
        response = await self.call_llm_json(prompt, HashtagSelection)

        selected = filter_selection(response.selected_hashtags, candidates, limit)
        if len(selected) < len(response.selected_hashtags):
            self.logger.debug(
                "Dropped %d hashtags outside the keyword list",
                len(response.selected_hashtags) - len(selected),
            )
        return HashtagResult(
            hashtags=[*fixed, *selected],
            fixed_hashtags=fixed,
            selected_hashtags=selected,
        )


__all__ = ["build_hashtag_prompt", "filter_selection", "HashtagSelector"]
