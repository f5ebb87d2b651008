"""
Tests for the generative assistant.

Tests validate:
- every operation returns its fallback instead of raising
- suggestion payload parsing
- related article de-duplication
- the /api/assistant endpoints
"""

import asyncio
import base64
import json

import pytest

from inkflow.api.http.assistant import get_assistant_service
from inkflow.domains.assistant.generator import Attachment
from inkflow.domains.assistant.services import (
    DRAFT_ERROR,
    FACT_CHECK_ERROR,
    INSIGHTS_EMPTY,
    AssistantService,
)
from inkflow.main import app

LONG_TEXT = "The quick brown fox jumps over the lazy dog, then runs away quickly."


@pytest.fixture
def assistant(fake_generator):
    return AssistantService(fake_generator, fast_model="fast", pro_model="pro", timeout=1.0)


class TestCompletion:
    @pytest.mark.asyncio
    async def test_short_input_skips_model(self, assistant, fake_generator):
        result = await assistant.complete("Hi there")

        assert result.text == ""
        assert not result.used_fallback
        assert fake_generator.calls == []

    @pytest.mark.asyncio
    async def test_completion_uses_fast_model(self, assistant, fake_generator):
        fake_generator.text = " and then some.  \n"

        result = await assistant.complete("Once upon a time")

        assert result.text == " and then some."
        assert fake_generator.calls[0]["model"] == "fast"

    @pytest.mark.asyncio
    async def test_failure_returns_empty_string(self, assistant, fake_generator):
        fake_generator.error = RuntimeError("quota exceeded")

        result = await assistant.complete("Once upon a time")

        assert result.text == ""
        assert result.used_fallback


class TestFallbacks:
    """Tests for typed fallbacks on failure."""

    @pytest.mark.asyncio
    async def test_rewrite_returns_selection(self, assistant, fake_generator):
        fake_generator.error = RuntimeError("boom")

        result = await assistant.rewrite("bad sentence", "Fix grammar", "context")

        assert result.text == "bad sentence"
        assert result.used_fallback

    @pytest.mark.asyncio
    async def test_draft_returns_error_text(self, assistant, fake_generator):
        fake_generator.error = RuntimeError("boom")
        result = await assistant.generate("Write about cats")
        assert result.text == DRAFT_ERROR

    @pytest.mark.asyncio
    async def test_fact_check_error(self, assistant, fake_generator):
        fake_generator.error = RuntimeError("boom")
        result = await assistant.check_facts(LONG_TEXT)
        assert result.text == FACT_CHECK_ERROR

    @pytest.mark.asyncio
    async def test_empty_insights(self, assistant, fake_generator):
        fake_generator.text = ""
        result = await assistant.article_insights("https://example.org", "Title")
        assert result.text == INSIGHTS_EMPTY

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, fake_generator):
        fake_generator.gate = asyncio.Event()
        assistant = AssistantService(fake_generator, timeout=0.05)

        result = await assistant.social_share("Title", "Summary")

        assert result.text == ""
        assert result.used_fallback

    @pytest.mark.asyncio
    async def test_no_generator_configured(self):
        assistant = AssistantService()
        assistant.generator = None

        assert (await assistant.rewrite("keep me", "shorten")).text == "keep me"
        assert await assistant.find_related_articles("python") == []
        assert await assistant.suggest(LONG_TEXT) is None


class TestDraft:
    @pytest.mark.asyncio
    async def test_draft_passes_attachments(self, assistant, fake_generator):
        data = base64.b64encode(b"resume").decode()
        attachment = Attachment(name="cv.txt", mime_type="text/plain", data=f"data:text/plain;base64,{data}")

        result = await assistant.generate("Draft a cover letter", "context", [attachment])

        assert result.text == "generated text"
        assert fake_generator.calls[0]["attachments"][0].raw_bytes() == b"resume"
        assert fake_generator.calls[0]["model"] == "pro"


class TestSuggestions:
    """Tests for proactive suggestions."""

    @pytest.mark.asyncio
    async def test_short_text_gets_no_suggestion(self, assistant, fake_generator):
        assert await assistant.suggest("too short") is None
        assert fake_generator.calls == []

    @pytest.mark.asyncio
    async def test_parses_suggestion(self, assistant, fake_generator):
        fake_generator.text = json.dumps({
            "should_suggest": True,
            "original_text": "runs away quickly",
            "suggestion": "bolts",
            "rationale": "Stronger verb",
            "type": "style",
        })

        suggestion = await assistant.suggest(LONG_TEXT)

        assert suggestion.original_text == "runs away quickly"
        assert suggestion.text == "bolts"
        assert suggestion.type == "style"

    @pytest.mark.asyncio
    async def test_declined_suggestion(self, assistant, fake_generator):
        fake_generator.text = json.dumps({"should_suggest": False})
        assert await assistant.suggest(LONG_TEXT) is None

    @pytest.mark.asyncio
    async def test_malformed_payload(self, assistant, fake_generator):
        fake_generator.text = "not json"
        assert await assistant.suggest(LONG_TEXT) is None


class TestRelatedArticles:
    @pytest.mark.asyncio
    async def test_deduplicates_and_limits(self, assistant, fake_generator):
        fake_generator.sources = [
            ("A", "https://www.a.example/1"),
            ("A again", "https://www.a.example/1"),
        ] + [(f"T{i}", f"https://site{i}.example/post") for i in range(10)]

        articles = await assistant.find_related_articles("python")

        assert len(articles) == 5
        assert articles[0].title == "A"
        assert articles[0].domain == "a.example"
        assert len({a.url for a in articles}) == 5
        assert fake_generator.calls[0]["use_search"]


class TestAssistantEndpoints:
    """Tests for /api/assistant routes with a fake generator."""

    @pytest.fixture(autouse=True)
    def override_assistant(self, fake_generator):
        app.dependency_overrides[get_assistant_service] = lambda: AssistantService(fake_generator)
        yield
        app.dependency_overrides.pop(get_assistant_service, None)

    def test_requires_auth(self, client):
        response = client.post("/api/assistant/complete", json={"text": "Once upon a time"})
        assert response.status_code == 401

    def test_complete(self, client, auth_headers, fake_generator):
        fake_generator.text = " there lived a fox."

        response = client.post(
            "/api/assistant/complete", json={"text": "Once upon a time"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"text": " there lived a fox.", "used_fallback": False}

    def test_rewrite_fallback(self, client, auth_headers, fake_generator):
        fake_generator.error = RuntimeError("down")

        response = client.post(
            "/api/assistant/rewrite",
            json={"selection": "teh cat", "instruction": "Fix grammar"},
            headers=auth_headers
        )

        assert response.json() == {"text": "teh cat", "used_fallback": True}

    def test_suggest_empty_envelope(self, client, auth_headers):
        response = client.post("/api/assistant/suggest", json={"text": "short"}, headers=auth_headers)
        assert response.json() == {"suggestion": None}

    def test_related(self, client, auth_headers, fake_generator):
        fake_generator.sources = [("Guide", "https://docs.example/guide")]

        response = client.post("/api/assistant/related", json={"topic": "asyncio"}, headers=auth_headers)

        assert response.json() == [
            {"title": "Guide", "url": "https://docs.example/guide", "domain": "docs.example"}
        ]
