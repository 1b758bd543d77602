from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, Session, mapped_column

from app.Models.BaseModel import BaseModel
from config.translatable import get_translations_table

if TYPE_CHECKING:
    from app.Traits.HasTranslations import HasTranslations

TRANSLATIONS_TABLE = get_translations_table()


class Translation(BaseModel):
    """One localized value of one attribute of one translatable model."""

    __tablename__ = TRANSLATIONS_TABLE

    __fillable__ = ['translatable_type', 'translatable_id', 'locale', 'attribute_name', 'value']

    translatable_type: Mapped[str] = mapped_column(String(255), nullable=False)
    translatable_id: Mapped[str] = mapped_column(String(36), nullable=False)
    locale: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    attribute_name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            'translatable_type', 'translatable_id', 'locale', 'attribute_name',
            name=f'unq_{TRANSLATIONS_TABLE}_translation',
        ),
        Index(f'idx_{TRANSLATIONS_TABLE}_translatable', 'translatable_type', 'translatable_id'),
    )

    def translatable(self, session: Session) -> Optional[HasTranslations]:
        """Resolve the owning model through the translatable model registry."""
        from app.Traits.HasTranslations import translatable_models

        model_class = translatable_models().get(self.translatable_type)
        if model_class is None:
            return None
        return session.get(model_class, self.translatable_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'translatable_type': self.translatable_type,
            'translatable_id': self.translatable_id,
            'locale': self.locale,
            'attribute_name': self.attribute_name,
            'value': self.value,
        }
