# src/captionguard/agents/compliance_reviewer.py
"""薬機法 compliance review of a caption."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from captionguard.config import CaptionGuardConfig, config
from captionguard.knowledge import load_knowledge, summarize_knowledge
from captionguard.models.knowledge import KnowledgeItem
from captionguard.models.review import ReviewResponse, ReviewResult
from captionguard.reconcile import reconcile

from .base import Agent

SYSTEM_PROMPT = (
    "あなたは薬機法審査の専門家です。提供されたキャプションを厳密に審査し、"
    "JSON形式で結果を返してください。"
)

REVIEW_PROMPT_TEMPLATE = """あなたは化粧品広告の薬機法審査の専門家です。
以下のナレッジベースを参照して、提供されたキャプション本文を厳密に審査してください。

## ナレッジベース（薬機法違反の可能性がある表現とルール）

{knowledge}

## 審査対象のキャプション

{caption}

## 審査タスク

1. **詳細な検索**: キャプション本文内で、ナレッジベースに記載されているNG表現が含まれているかチェックしてください
   - 各表現の「検索パターン」を参照して、部分一致も含めて検出してください
   - 例：「明るい」「明るく」「明るさ」「明るかった」「明るくない」など、すべてのバリエーションを検出

2. **コンテキストの考慮**:
   - キャプションが「感想・口コミ」的な表現か「商品説明」的な表現かを判断してください
   - ナレッジベースの「感想・口コミコンテキスト」と「商品説明コンテキスト」を参照し、適切に判定してください
   - コンテキストによってはOK表現の場合もあるため、慎重に判断してください

3. **正確な位置特定**:
   - 検出されたNG表現について、キャプション本文内での正確な開始位置と終了位置を特定してください
   - 文字数は0から始まるインデックスで指定してください
   - **重要**: matchedTextは、キャプション本文内のposition.startからposition.endまでのテキストと完全に一致する必要があります
   - 例：キャプションが「朝はふんわり、夜はしっとり」の場合、「ふんわり」を検出したら、matchedText: "ふんわり"、position: {{ "start": 2, "end": 6 }}と正確に指定してください

4. **詳細な情報提供**:
   - 表現名（ナレッジベースの「表現」フィールド）
   - 該当箇所のテキスト（matchedText）: キャプション内の該当部分を**完全に一致する形で**抽出してください
   - 理由（ナレッジベースの「ルール」フィールドの内容）
   - 位置（position.startとposition.end）

## 重要な注意事項

- コンテキストによっては同じ表現でもOKの場合があります（例：メーキャップ効果の場合）
- 部分一致も含めて、すべてのバリエーションを検出してください
- **位置情報は正確に特定してください（文字列のインデックス）**
- 改行文字や空白文字も含めて、正確な位置を特定してください

## 出力形式

以下のJSON形式で回答してください：

{{
  "passed": false,
  "issues": [
    {{
      "name": "表現名",
      "matchedText": "キャプション内の該当部分",
      "reason": "NG理由（ルールの内容）",
      "position": {{ "start": 0, "end": 0 }}
    }}
  ]
}}

NG表現が1つも検出されない場合は、"passed": true, "issues": [] を返してください。
必ず有効なJSON形式で回答してください。"""


def build_review_prompt(caption: str, knowledge_summary: str) -> str:
    return REVIEW_PROMPT_TEMPLATE.format(knowledge=knowledge_summary, caption=caption)


class ComplianceReviewer(Agent):
    """Ask the model for 薬機法 findings and reconcile them with the caption."""

    system_prompt = SYSTEM_PROMPT

    def __init__(
        self,
        *,
        model: str | None = None,
        settings: CaptionGuardConfig | None = None,
        knowledge_loader: Callable[[], Sequence[KnowledgeItem]] = load_knowledge,
    ) -> None:
        settings = settings or config
        super().__init__(
            model=model,
            default_model=settings.agents.compliance_reviewer,
            settings=settings,
        )
        self._knowledge_loader = knowledge_loader

    async def review(self, caption: str) -> ReviewResult:
        """Review ``caption``.

        The model's own ``passed`` verdict wins when it sends one; otherwise
        the caption passes when no finding could be located.

        Raises
        ------
        ConfigurationError
            If no API key is configured.
        GenerationServiceError
            If the model call fails or its answer cannot be parsed.
        """
        knowledge = self._knowledge_loader()
        prompt = build_review_prompt(caption, summarize_knowledge(knowledge))
        response = await self.call_llm_json(prompt, ReviewResponse)

        result = reconcile(caption, response.issues, passed=response.passed)
        self.logger.info(
            "Review finished: %d raw findings, %d issues, passed=%s",
            len(response.issues),
            result.total_issues,
            result.passed,
        )
        return result.to_review_result()


__all__ = ["SYSTEM_PROMPT", "build_review_prompt", "ComplianceReviewer"]
