"""Вызовы генеративного ассистента с гарантированным fallback-значением.

Каждая операция возвращает результат даже при недоступной модели: сбой
логируется, а вызывающий код получает безопасное значение по умолчанию.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel

from inkflow.core.config import settings
from inkflow.domains.assistant import prompts
from inkflow.domains.assistant.generator import Attachment, GenerationResult, get_text_generator
from inkflow.domains.library.entities import domain_from_url

logger = logging.getLogger(__name__)

DRAFT_ERROR = "Error generating draft. Please check your API key or connection."
FACT_CHECK_ERROR = "Could not verify facts at this time."
SEO_ERROR = "Error generating SEO content."
RESUME_ERROR = "Error optimizing resume. Please ensure the Job URL is accessible or paste the description directly."
INSIGHTS_ERROR = "Error generating insights."
INSIGHTS_EMPTY = "Could not generate insights."

MIN_COMPLETION_INPUT = 10
MIN_SUGGESTION_INPUT = 50
MAX_RELATED_ARTICLES = 5


class TextGenerator(Protocol):
    async def generate(
        self,
        model: str,
        prompt: str,
        *,
        attachments: Sequence[Attachment] = (),
        system_instruction: Optional[str] = None,
        use_search: bool = False,
        response_schema: Optional[type] = None,
    ) -> GenerationResult:
        ...


@dataclass
class AssistantResult:
    text: str
    used_fallback: bool = False


@dataclass
class Suggestion:
    original_text: str
    text: str
    rationale: str
    type: str


@dataclass
class RelatedArticle:
    title: str
    url: str
    domain: str


class SuggestionPayload(BaseModel):
    """Схема JSON-ответа модели для проактивных подсказок"""
    should_suggest: bool
    original_text: Optional[str] = None
    suggestion: Optional[str] = None
    rationale: Optional[str] = None
    type: Optional[str] = None


class AssistantService:
    """Операции ассистента: дополнение, переписывание, черновики и исследование"""

    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        *,
        fast_model: Optional[str] = None,
        pro_model: Optional[str] = None,
        timeout: float = 60.0,
    ) -> None:
        self.generator = generator if generator is not None else get_text_generator()
        self.fast_model = fast_model or settings.fast_model
        self.pro_model = pro_model or settings.pro_model
        self.timeout = timeout

    async def complete(self, prefix_text: str) -> AssistantResult:
        """Короткое продолжение текста; пустая строка при любой ошибке"""
        if not prefix_text or len(prefix_text) < MIN_COMPLETION_INPUT:
            return AssistantResult("", used_fallback=False)

        result = await self._generate("completion", self.fast_model, prompts.completion_prompt(prefix_text))
        if result is None:
            return AssistantResult("", used_fallback=True)
        return AssistantResult(result.text.rstrip())

    async def rewrite(self, selection: str, instruction: str, full_context: str = "") -> AssistantResult:
        """Замена выделенного фрагмента; при сбое фрагмент возвращается без изменений"""
        result = await self._generate(
            "rewrite", self.pro_model, prompts.rewrite_prompt(selection, instruction, full_context)
        )
        if result is None or not result.text:
            return AssistantResult(selection, used_fallback=True)
        return AssistantResult(result.text)

    async def generate(
        self,
        prompt: str,
        context: str = "",
        attachments: Sequence[Attachment] = (),
    ) -> AssistantResult:
        """Черновик по запросу пользователя"""
        result = await self._generate(
            "draft",
            self.pro_model,
            prompts.draft_prompt(prompt, context),
            attachments=attachments,
            system_instruction=prompts.DRAFT_SYSTEM_INSTRUCTION,
        )
        if result is None:
            return AssistantResult(DRAFT_ERROR, used_fallback=True)
        return AssistantResult(result.text)

    async def suggest(self, text: str) -> Optional[Suggestion]:
        """Проактивная правка конца документа, если она действительно полезна"""
        if not text or len(text) < MIN_SUGGESTION_INPUT:
            return None

        result = await self._generate(
            "suggestion",
            self.fast_model,
            prompts.suggestion_prompt(text),
            response_schema=SuggestionPayload,
        )
        if result is None:
            return None

        try:
            payload = SuggestionPayload.model_validate(json.loads(result.text or "{}"))
        except ValueError as exc:
            logger.warning("Malformed suggestion payload: %s", exc)
            return None

        if not (payload.should_suggest and payload.suggestion and payload.original_text):
            return None
        return Suggestion(
            original_text=payload.original_text,
            text=payload.suggestion,
            rationale=payload.rationale or "",
            type=payload.type or "clarity",
        )

    async def check_facts(self, text: str) -> AssistantResult:
        result = await self._generate(
            "fact check", self.fast_model, prompts.fact_check_prompt(text), use_search=True
        )
        if result is None:
            return AssistantResult(FACT_CHECK_ERROR, used_fallback=True)
        return AssistantResult(result.text)

    async def generate_seo_article(self, topic: str, keywords: str, audience: str, tone: str) -> AssistantResult:
        result = await self._generate(
            "seo article", self.pro_model, prompts.seo_article_prompt(topic, keywords, audience, tone)
        )
        if result is None:
            return AssistantResult(SEO_ERROR, used_fallback=True)
        return AssistantResult(result.text)

    async def optimize_resume(self, job_input: str, attachments: Sequence[Attachment] = ()) -> AssistantResult:
        result = await self._generate(
            "resume",
            self.pro_model,
            prompts.resume_prompt(job_input),
            attachments=attachments,
            use_search=True,
        )
        if result is None:
            return AssistantResult(RESUME_ERROR, used_fallback=True)
        return AssistantResult(result.text)

    async def article_insights(self, url: str, title: str) -> AssistantResult:
        result = await self._generate(
            "insights", self.fast_model, prompts.article_insights_prompt(url, title), use_search=True
        )
        if result is None:
            return AssistantResult(INSIGHTS_ERROR, used_fallback=True)
        if not result.text:
            return AssistantResult(INSIGHTS_EMPTY, used_fallback=True)
        return AssistantResult(result.text)

    async def find_related_articles(self, topic: str) -> List[RelatedArticle]:
        """Статьи по теме из поисковой выдачи модели, без дубликатов"""
        result = await self._generate(
            "discovery", self.fast_model, prompts.related_articles_prompt(topic), use_search=True
        )
        if result is None:
            return []

        articles: List[RelatedArticle] = []
        seen = set()
        for title, url in result.sources:
            if url in seen:
                continue
            seen.add(url)
            articles.append(RelatedArticle(title=title, url=url, domain=domain_from_url(url)))
        return articles[:MAX_RELATED_ARTICLES]

    async def social_share(self, title: str, summary: str) -> AssistantResult:
        result = await self._generate("social share", self.fast_model, prompts.social_share_prompt(title, summary))
        if result is None:
            return AssistantResult("", used_fallback=True)
        return AssistantResult(result.text)

    async def _generate(self, operation: str, model: str, prompt: str, **options) -> Optional[GenerationResult]:
        if self.generator is None:
            logger.debug("No text generator configured; %s falls back", operation)
            return None
        try:
            return await asyncio.wait_for(
                self.generator.generate(model, prompt, **options), timeout=self.timeout
            )
        except Exception as exc:
            logger.warning("Assistant %s failed; using fallback. Error: %s", operation, exc)
            return None
