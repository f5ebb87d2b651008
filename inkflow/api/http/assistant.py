from functools import lru_cache
from typing import List

from fastapi import APIRouter, Depends

from inkflow.core.auth import get_current_user
from inkflow.domains.assistant.generator import Attachment
from inkflow.domains.assistant.schemas import (
    AttachmentPayload, TextResponse, CompletionRequest, RewriteRequest, DraftRequest,
    SuggestionRequest, SuggestionResponse, SuggestionEnvelope, FactCheckRequest,
    SeoArticleRequest, ResumeRequest, InsightsRequest, RelatedRequest,
    RelatedArticleResponse, SocialShareRequest
)
from inkflow.domains.assistant.services import AssistantResult, AssistantService
from inkflow.domains.identity.entities import User

router = APIRouter(prefix="/assistant", tags=["assistant"])


@lru_cache(maxsize=1)
def get_assistant_service() -> AssistantService:
    """Один экземпляр ассистента на процесс"""
    return AssistantService()


def _attachments(files: List[AttachmentPayload]) -> List[Attachment]:
    return [Attachment(name=f.name, mime_type=f.type, data=f.data) for f in files]


def _text(result: AssistantResult) -> TextResponse:
    return TextResponse(text=result.text, used_fallback=result.used_fallback)


@router.post("/complete", response_model=TextResponse)
async def complete(
    request: CompletionRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    """Ghost-text продолжение"""
    return _text(await assistant.complete(request.text))


@router.post("/rewrite", response_model=TextResponse)
async def rewrite(
    request: RewriteRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    return _text(await assistant.rewrite(request.selection, request.instruction, request.context))


@router.post("/draft", response_model=TextResponse)
async def draft(
    request: DraftRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    """Черновик с учётом контекста документа и приложенных файлов"""
    result = await assistant.generate(request.prompt, request.context, _attachments(request.files))
    return _text(result)


@router.post("/suggest", response_model=SuggestionEnvelope)
async def suggest(
    request: SuggestionRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    suggestion = await assistant.suggest(request.text)
    if suggestion is None:
        return SuggestionEnvelope()
    return SuggestionEnvelope(
        suggestion=SuggestionResponse(
            original_text=suggestion.original_text,
            text=suggestion.text,
            rationale=suggestion.rationale,
            type=suggestion.type
        )
    )


@router.post("/fact-check", response_model=TextResponse)
async def fact_check(
    request: FactCheckRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    return _text(await assistant.check_facts(request.text))


@router.post("/seo", response_model=TextResponse)
async def seo_article(
    request: SeoArticleRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    result = await assistant.generate_seo_article(
        request.topic, request.keywords, request.audience, request.tone
    )
    return _text(result)


@router.post("/resume", response_model=TextResponse)
async def optimize_resume(
    request: ResumeRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    result = await assistant.optimize_resume(request.job_input, _attachments(request.files))
    return _text(result)


@router.post("/insights", response_model=TextResponse)
async def article_insights(
    request: InsightsRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    return _text(await assistant.article_insights(request.url, request.title))


@router.post("/related", response_model=List[RelatedArticleResponse])
async def related_articles(
    request: RelatedRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    """Статьи по теме для списка чтения"""
    articles = await assistant.find_related_articles(request.topic)
    return [
        RelatedArticleResponse(title=a.title, url=a.url, domain=a.domain)
        for a in articles
    ]


@router.post("/social", response_model=TextResponse)
async def social_share(
    request: SocialShareRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service)
):
    return _text(await assistant.social_share(request.title, request.summary))
