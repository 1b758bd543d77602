from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import Select

from app.Models.BaseModel import BaseModel
from app.Traits.HasTranslations import HasTranslations
from app.Traits.SoftDeletes import SoftDeletes


class Post(SoftDeletes, HasTranslations, BaseModel):
    """
    Laravel-style Post Model.

    Title, content and excerpt are translatable; the columns of the same name
    keep the text the post was written in and are used when no translation
    exists for the current or the fallback locale.
    """

    __tablename__ = 'posts'

    __fillable__ = ['title', 'slug', 'content', 'excerpt', 'status', 'published_at']

    __translatable__ = ['title', 'content', 'excerpt']

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    content: Mapped[Optional[str]] = mapped_column(Text)
    excerpt: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default='draft', index=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __init__(self, **kwargs: Any) -> None:
        if 'slug' not in kwargs and kwargs.get('title'):
            kwargs['slug'] = self._generate_slug(kwargs['title'])
        super().__init__(**kwargs)

    @staticmethod
    def _generate_slug(title: str) -> str:
        slug = re.sub(r'[^\w\s-]', '', title.lower()).strip()
        return re.sub(r'[-\s]+', '-', slug)

    @property
    def is_published(self) -> bool:
        return self.status == 'published' and self.published_at is not None

    @property
    def url(self) -> str:
        return f"/posts/{self.slug}"

    @classmethod
    def scope_published(cls, query: Select[Any]) -> Select[Any]:
        return query.where(cls.status == 'published', cls.published_at.is_not(None))

    def __repr__(self) -> str:
        return f"<Post(id='{self.id}', slug='{self.slug}', status='{self.status}')>"
