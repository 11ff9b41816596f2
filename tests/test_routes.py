"""Tests for the HTTP API."""

import httpx
import pytest
from fastapi.testclient import TestClient

from captionguard.agents import ComplianceReviewer, HashtagSelector
from captionguard.clients import DifyClient
from captionguard.orchestrator import CaptionWorkflow
from captionguard.web.main import create_app
from captionguard.web.routes import get_reviewer, get_selector, get_workflow
from conftest import CAPTION, completion

REVIEW_ANSWER = {
    "passed": False,
    "issues": [{"name": "ふんわり", "matchedText": "ふんわり", "position": {"start": 0, "end": 4}}],
}


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def reviewer(settings, knowledge_items):
    return ComplianceReviewer(settings=settings, knowledge_loader=lambda: knowledge_items)


@pytest.fixture
def selector(settings, hashtag_keywords):
    return HashtagSelector(settings=settings, keyword_loader=lambda: hashtag_keywords)


@pytest.fixture
def dify_handler():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/files/upload"):
            return httpx.Response(201, json={"id": "file-1"})
        return httpx.Response(200, json={"answer": CAPTION, "conversation_id": "conv-1"})

    handler.requests = requests
    return handler


@pytest.fixture
def wired(app, settings, reviewer, selector, dify_handler):
    """Override every dependency with test-configured instances."""
    dify = DifyClient(settings, transport=httpx.MockTransport(dify_handler))
    app.dependency_overrides[get_reviewer] = lambda: reviewer
    app.dependency_overrides[get_selector] = lambda: selector
    app.dependency_overrides[get_workflow] = lambda: CaptionWorkflow(
        client=dify, reviewer=reviewer, selector=selector
    )
    yield app
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestReviewRoute:
    def test_review(self, wired, client, fake_llm):
        fake_llm(completion(REVIEW_ANSWER))
        response = client.post("/api/review", json={"caption": CAPTION})
        assert response.status_code == 200
        body = response.json()
        assert body["passed"] is False
        assert body["totalIssues"] == 1
        assert body["issues"][0]["position"] == {"start": 2, "end": 6}
        assert body["issues"][0]["matchedText"] == "ふんわり"
        assert body["issues"][0]["knowledgeId"] == "ai-detected-0"

    @pytest.mark.parametrize("payload", [{}, {"caption": ""}, {"caption": 12}, "ふんわり", [], None])
    def test_caption_required(self, wired, client, payload):
        response = client.post("/api/review", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Caption is required"}

    def test_api_key_missing(self, app, client, unconfigured_settings, knowledge_items):
        app.dependency_overrides[get_reviewer] = lambda: ComplianceReviewer(
            settings=unconfigured_settings, knowledge_loader=lambda: knowledge_items
        )
        response = client.post("/api/review", json={"caption": CAPTION})
        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API key is not configured"}

    def test_generation_failure(self, wired, client, fake_llm):
        fake_llm(completion("not json"))
        response = client.post("/api/review", json={"caption": CAPTION})
        assert response.status_code == 500
        assert "error" in response.json()


class TestHashtagRoute:
    def test_hashtags(self, wired, client, fake_llm):
        fake_llm(completion({"selectedHashtags": ["保湿", "存在しない"]}))
        response = client.post("/api/hashtags", json={"caption": CAPTION})
        assert response.status_code == 200
        assert response.json() == {
            "hashtags": ["コスメ", "スキンケア", "美容", "新作コスメ", "保湿"],
            "fixedHashtags": ["コスメ", "スキンケア", "美容", "新作コスメ"],
            "selectedHashtags": ["保湿"],
        }

    @pytest.mark.parametrize("payload", [{"text": CAPTION}, [CAPTION]])
    def test_caption_required(self, wired, client, payload):
        response = client.post("/api/hashtags", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Caption is required"}


class TestCaptionRoutes:
    def test_create_caption(self, wired, client, fake_llm, dify_handler):
        fake_llm(completion(REVIEW_ANSWER))
        response = client.post(
            "/api/captions",
            data={"planning_proposal": "新作リップ", "planning_intent": "春の保湿"},
            files=[("files", ("look.png", b"png", "image/png"))],
        )
        assert response.status_code == 200
        body = response.json()
        assert body["caption"] == CAPTION
        assert body["conversationId"] == "conv-1"
        assert body["review"]["totalIssues"] == 1
        assert body["hashtags"]["fixedHashtags"] == ["コスメ", "スキンケア", "美容", "新作コスメ"]
        assert [r.url.path for r in dify_handler.requests] == ["/v1/files/upload", "/v1/chat-messages"]

    def test_create_caption_degrades_when_model_fails(self, wired, client, fake_llm):
        fake_llm(ValueError("model down"))
        response = client.post("/api/captions", data={"planning_proposal": "新作リップ"})
        assert response.status_code == 200
        body = response.json()
        assert body["review"] == {"passed": True, "issues": [], "totalIssues": 0}
        assert body["hashtags"] is None

    def test_create_caption_generation_error(self, app, client, unconfigured_settings, reviewer, selector):
        app.dependency_overrides[get_workflow] = lambda: CaptionWorkflow(
            client=DifyClient(unconfigured_settings), reviewer=reviewer, selector=selector
        )
        response = client.post("/api/captions", data={"planning_proposal": "新作リップ"})
        assert response.status_code == 500
        assert response.json()["code"] == "CONFIG_ERROR"

    def test_revise(self, wired, client, dify_handler):
        response = client.post(
            "/api/captions/revise", json={"query": "もっと短く", "conversationId": "conv-1"}
        )
        assert response.status_code == 200
        assert response.json() == {"answer": CAPTION, "conversationId": "conv-1"}
        assert len(dify_handler.requests) == 1
