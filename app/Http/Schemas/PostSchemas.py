from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class TranslationCompleteness(BaseModel):
    """Share of configured locales x translatable attributes holding a value."""

    percentage: float = Field(..., ge=0, le=100)
    missing: List[str] = Field(default_factory=list, description="Entries such as 'fr.title'")
    completed: int
    total: int


class PostTitlesResponse(BaseModel):
    """Post titles in one locale, keyed by slug."""

    locale: str
    titles: Dict[str, Optional[str]]


class TranslatedPostResponse(BaseModel):
    """A post with its translatable attributes resolved in the request locale."""

    id: str
    slug: str
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    locale: str
    completeness: TranslationCompleteness
