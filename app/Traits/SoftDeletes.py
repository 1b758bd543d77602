from __future__ import annotations

from typing import Any, Optional
from datetime import datetime, timezone
from sqlalchemy import DateTime, select
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, object_session
from sqlalchemy.sql import Select
from sqlalchemy.ext.hybrid import hybrid_property
import logging

from app.Exceptions import ModelNotPersistedException
from app.Models.Observer import observer_registry


class SoftDeletes:
    """
    Laravel-style SoftDeletes trait for logical deletion of records.

    ``delete()`` stamps ``deleted_at`` instead of removing the row and fires
    the ``deleting``/``deleted`` observer hooks itself. ``force_delete()`` and
    a plain ``session.delete()`` remove the row for good.

    Usage:
        class Article(SoftDeletes, HasTranslations, BaseModel):
            ...

        article.delete()          # soft delete
        article.restore()
        article.force_delete()    # permanent

        session.scalars(Article.without_trashed())
    """

    @declared_attr
    def deleted_at(cls) -> Mapped[Optional[datetime]]:
        """Soft delete timestamp; null means not deleted."""
        return mapped_column(DateTime(timezone=True), nullable=True, default=None, index=True)

    @hybrid_property
    def trashed(self) -> bool:
        return self.deleted_at is not None

    @trashed.expression  # type: ignore
    def trashed(cls) -> Any:
        return cls.deleted_at.is_not(None)

    def delete(self, force: bool = False) -> bool:
        """
        Delete the model instance (soft delete by default).

        @param force: If True, permanently delete instead of soft delete
        @return: True if the model was deleted
        """
        if force:
            return self.force_delete()

        if self.trashed:
            logging.warning(f"Attempted to soft delete already deleted {self.__class__.__name__} id={self.id}")
            return False

        observer_registry.fire('deleting', self)
        self.deleted_at = datetime.now(timezone.utc)

        session = object_session(self)
        if session is not None:
            session.flush()

        observer_registry.fire('deleted', self)
        logging.info(f"Soft deleted {self.__class__.__name__} id={self.id}")
        return True

    def restore(self) -> bool:
        """Restore a soft deleted model instance."""
        if not self.trashed:
            logging.warning(f"Attempted to restore non-deleted {self.__class__.__name__} id={self.id}")
            return False

        observer_registry.fire('restoring', self)
        self.deleted_at = None

        session = object_session(self)
        if session is not None:
            session.flush()

        observer_registry.fire('restored', self)
        logging.info(f"Restored {self.__class__.__name__} id={self.id}")
        return True

    def force_delete(self) -> bool:
        """
        Permanently delete the model instance from the database.

        @raise ModelNotPersistedException: when the model has no session
        """
        session = object_session(self)
        if session is None:
            raise ModelNotPersistedException(self.__class__.__name__)

        self._force_deleting = True
        try:
            observer_registry.fire('force_deleting', self)
            session.delete(self)
            session.flush()
            observer_registry.fire('force_deleted', self)
        finally:
            self._force_deleting = False

        logging.info(f"Force deleted {self.__class__.__name__} id={self.id}")
        return True

    def is_force_deleting(self) -> bool:
        """True while the row itself is being removed rather than stamped."""
        if getattr(self, '_force_deleting', False):
            return True
        session = object_session(self)
        return session is not None and self in session.deleted

    @classmethod
    def with_trashed(cls) -> Select[Any]:
        """Select including soft deleted records."""
        return select(cls)

    @classmethod
    def only_trashed(cls) -> Select[Any]:
        """Select only soft deleted records."""
        return select(cls).where(cls.deleted_at.is_not(None))

    @classmethod
    def without_trashed(cls) -> Select[Any]:
        """Select excluding soft deleted records."""
        return select(cls).where(cls.deleted_at.is_(None))

    def get_deleted_at_column(self) -> str:
        return 'deleted_at'
