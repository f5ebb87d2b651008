import base64
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from inkflow.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    """Файл, приложенный к запросу (base64, допускается префикс data:...;base64,)"""
    name: str
    mime_type: str
    data: str

    def raw_bytes(self) -> bytes:
        _, _, payload = self.data.rpartition(",")
        return base64.b64decode(payload)


@dataclass
class GenerationResult:
    text: str
    # (title, uri) из поисковой выдачи, если модель использовала поиск
    sources: List[Tuple[str, str]] = field(default_factory=list)


class GeminiGenerator:
    """Обёртка над google-genai с асинхронным вызовом generate_content"""

    def __init__(self, api_key: str) -> None:
        self._client = genai.Client(api_key=api_key)

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
        contents = [types.Part.from_text(text=prompt)]
        for attachment in attachments:
            contents.append(
                types.Part.from_bytes(data=attachment.raw_bytes(), mime_type=attachment.mime_type)
            )

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            tools=[types.Tool(google_search=types.GoogleSearch())] if use_search else None,
            response_mime_type="application/json" if response_schema else None,
            response_schema=response_schema,
        )
        response = await self._client.aio.models.generate_content(
            model=model, contents=contents, config=config
        )
        return GenerationResult(text=response.text or "", sources=_grounding_sources(response))


def _grounding_sources(response) -> List[Tuple[str, str]]:
    candidates = response.candidates or []
    metadata = candidates[0].grounding_metadata if candidates else None
    chunks = (metadata.grounding_chunks if metadata else None) or []
    return [
        (chunk.web.title, chunk.web.uri)
        for chunk in chunks
        if chunk.web is not None and chunk.web.uri and chunk.web.title
    ]


_generator: Optional[GeminiGenerator] = None


def get_text_generator() -> Optional[GeminiGenerator]:
    """Ленивое создание клиента; без API-ключа ассистент работает на fallback-ответах"""
    global _generator
    if _generator is None and settings.gemini_api_key:
        _generator = GeminiGenerator(settings.gemini_api_key)
        logger.info("Gemini backend enabled (fast=%s, pro=%s)", settings.fast_model, settings.pro_model)
    return _generator
