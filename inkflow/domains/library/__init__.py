from inkflow.domains.library.entities import Prompt, ReadingItem, ReadingSource, ReadingStatus
from inkflow.domains.library.schemas import (
    PromptCreate, PromptUpdate, PromptResponse, PromptBatchCreate, PromptBatchDelete, BatchResult,
    ReadingItemCreate, ReadingItemUpdate, ReadingItemResponse
)
from inkflow.domains.library.services import PromptService, ReadingListService

__all__ = [
    "Prompt", "ReadingItem", "ReadingSource", "ReadingStatus",
    "PromptCreate", "PromptUpdate", "PromptResponse", "PromptBatchCreate", "PromptBatchDelete",
    "BatchResult", "ReadingItemCreate", "ReadingItemUpdate", "ReadingItemResponse",
    "PromptService", "ReadingListService"
]
