"""Shared fixtures for the captionguard test suite."""

import json

import pytest

from captionguard.config import (
    CaptionGuardConfig,
    DifyConfig,
    LLMConfig,
    RetryConfig,
)
from captionguard.hashtags import HashtagKeyword
from captionguard.knowledge import reset_knowledge_cache
from captionguard.models.knowledge import KnowledgeItem

CAPTION = "朝はふんわり、夜はしっとり"

FUNWARI_CONTENT = """# 表現：ふんわり

## ルール（備考）
- 使用感の表現であれば可
- 効能効果を暗示する場合は不可

## コンテキスト：感想・口コミ
- **OK例**: 「ふんわりした付け心地」
- **NG例**: 「肌がふんわり若返る」

## コンテキスト：商品説明
- **OK例**: 「ふんわり仕上がるパウダー」
- **NG例**: 「ふんわりハリのある肌へ導く」
"""


@pytest.fixture
def settings() -> CaptionGuardConfig:
    """Configuration with keys set and retries that never sleep."""
    return CaptionGuardConfig(
        llm=LLMConfig(api_key="test-key"),
        dify=DifyConfig(api_endpoint="https://dify.example/v1", api_key="app-key"),
        retry=RetryConfig(retry_attempts=3, retry_backoff=0, retry_max_interval=0),
    )


@pytest.fixture
def unconfigured_settings() -> CaptionGuardConfig:
    return CaptionGuardConfig()


@pytest.fixture
def knowledge_items() -> tuple[KnowledgeItem, ...]:
    return (
        KnowledgeItem(
            id="knowledge-004",
            name="ふんわり",
            content=FUNWARI_CONTENT,
            searchPatterns=("ふんわり",),
        ),
        KnowledgeItem(
            id="knowledge-001",
            name="明るい",
            content="# 表現：明るい\n",
            searchPatterns=("明るい", "明るく", "明るさ"),
        ),
    )


@pytest.fixture
def hashtag_keywords() -> list[HashtagKeyword]:
    fixed = ["コスメ", "スキンケア", "美容", "新作コスメ", "プチプラコスメ"]
    free = ["保湿", "乾燥肌", "敏感肌", "ベースメイク"]
    return [HashtagKeyword(k, True) for k in fixed] + [HashtagKeyword(k, False) for k in free]


@pytest.fixture(autouse=True)
def _fresh_knowledge_cache():
    reset_knowledge_cache()
    yield
    reset_knowledge_cache()


def completion(payload) -> dict:
    """A LiteLLM-shaped completion whose message content is ``payload``."""
    content = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class FakeCompletion:
    """Stand-in for ``litellm.acompletion`` recording every call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def fake_llm(monkeypatch):
    """Patch ``litellm.acompletion``; call with the responses to return in order."""
    import litellm

    def install(*responses) -> FakeCompletion:
        fake = FakeCompletion(*responses)
        monkeypatch.setattr(litellm, "acompletion", fake)
        return fake

    return install
