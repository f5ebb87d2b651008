from pydantic import BaseModel, Field
from typing import Optional, List


class AttachmentPayload(BaseModel):
    name: str
    type: str
    data: str  # base64


class TextResponse(BaseModel):
    """Ответ ассистента; used_fallback=True, если модель не ответила"""
    text: str
    used_fallback: bool = False


class CompletionRequest(BaseModel):
    text: str


class RewriteRequest(BaseModel):
    selection: str = Field(..., min_length=1)
    instruction: str = Field(..., min_length=1)
    context: str = ""


class DraftRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    context: str = ""
    files: List[AttachmentPayload] = Field(default_factory=list)


class SuggestionRequest(BaseModel):
    text: str


class SuggestionResponse(BaseModel):
    original_text: str
    text: str
    rationale: str
    type: str


class FactCheckRequest(BaseModel):
    text: str = Field(..., min_length=1)


class SeoArticleRequest(BaseModel):
    topic: str = Field(..., min_length=1)
    keywords: str = ""
    audience: str = ""
    tone: str = ""


class ResumeRequest(BaseModel):
    job_input: str = Field(..., min_length=1)
    files: List[AttachmentPayload] = Field(default_factory=list)


class InsightsRequest(BaseModel):
    url: str
    title: str


class RelatedRequest(BaseModel):
    topic: str = Field(..., min_length=1)


class RelatedArticleResponse(BaseModel):
    title: str
    url: str
    domain: str


class SocialShareRequest(BaseModel):
    title: str
    summary: str = ""


class SuggestionEnvelope(BaseModel):
    suggestion: Optional[SuggestionResponse] = None
