from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse


class ReadingStatus(str, Enum):
    UNREAD = "unread"
    ARCHIVED = "archived"
    FAVORITE = "favorite"


class ReadingSource(str, Enum):
    MANUAL = "manual"
    RSS = "rss"
    DISCOVERY = "discovery"


DEFAULT_PROMPT_CATEGORY = "General"


@dataclass
class Prompt:
    id: str
    title: str
    content: str
    user_id: str
    description: Optional[str] = None
    category: str = DEFAULT_PROMPT_CATEGORY
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ReadingItem:
    id: str
    url: str
    title: str
    user_id: str
    domain: str = ""
    excerpt: Optional[str] = None
    image: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    status: ReadingStatus = ReadingStatus.UNREAD
    ai_summary: Optional[str] = None
    source_type: ReadingSource = ReadingSource.MANUAL
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


def domain_from_url(url: str) -> str:
    """Домен без www. для отображения в списке чтения"""
    hostname = urlparse(url).hostname or ""
    return hostname[4:] if hostname.startswith("www.") else hostname
