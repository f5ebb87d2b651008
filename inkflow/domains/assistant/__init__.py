"""Генеративный ассистент редактора."""

from inkflow.domains.assistant.generator import Attachment, GeminiGenerator, GenerationResult  # noqa: F401
from inkflow.domains.assistant.prompts import DEFAULT_PROMPT_SETTINGS  # noqa: F401
from inkflow.domains.assistant.services import (  # noqa: F401
    AssistantResult,
    AssistantService,
    RelatedArticle,
    Suggestion,
    TextGenerator,
)

__all__ = [
    "Attachment",
    "AssistantResult",
    "AssistantService",
    "DEFAULT_PROMPT_SETTINGS",
    "GeminiGenerator",
    "GenerationResult",
    "RelatedArticle",
    "Suggestion",
    "TextGenerator",
]
