from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

from sqlalchemy import String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import Select


def generate_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class BaseModel(Base):
    __abstract__ = True

    # Laravel-style hidden/fillable attributes
    __fillable__: ClassVar[List[str]] = []
    __guarded__: ClassVar[List[str]] = ['id', 'created_at', 'updated_at']
    __hidden__: ClassVar[List[str]] = []
    __casts__: ClassVar[Dict[str, str]] = {}

    # Name stored in polymorphic ``*_type`` columns; defaults to the class name
    __morph_class__: ClassVar[Optional[str]] = None

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    created_at: Mapped[Optional[datetime]] = mapped_column(server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __init__(self, **kwargs: Any) -> None:
        if 'id' not in kwargs:
            kwargs['id'] = generate_id()
        super().__init__(**kwargs)

    @classmethod
    def get_morph_class(cls) -> str:
        return cls.__morph_class__ or cls.__name__

    def get_key(self) -> str:
        return str(self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary, respecting hidden attributes."""
        result = {c.key: getattr(self, c.key) for c in self.__mapper__.column_attrs}

        for attr in self.__hidden__:
            result.pop(attr, None)

        return result

    def fill(self, attributes: Dict[str, Any]) -> BaseModel:
        """Laravel-style mass assignment with fillable/guarded protection."""
        for key, value in attributes.items():
            if self._is_fillable(key):
                self.set_attribute(key, value)
        return self

    def _is_fillable(self, key: str) -> bool:
        if self.__fillable__:
            return key in self.__fillable__
        return key not in self.__guarded__

    # Laravel-style Attribute Casting
    def get_attribute(self, key: str) -> Any:
        """Get attribute value with casting."""
        value = getattr(self, key, None)

        if key in self.__casts__:
            return self._cast_attribute(value, self.__casts__[key])

        return value

    def _cast_attribute(self, value: Any, cast_type: str) -> Any:
        if value is None:
            return None

        cast_map = {
            'json': lambda v: json.loads(v) if isinstance(v, str) else v,
            'boolean': lambda v: bool(v),
            'int': lambda v: int(v),
            'float': lambda v: float(v),
            'string': lambda v: str(v),
        }

        if cast_type in cast_map:
            return cast_map[cast_type](value)

        return value

    def set_attribute(self, key: str, value: Any) -> None:
        """Set attribute value, encoding json casts for storage."""
        if self.__casts__.get(key) == 'json' and value is not None and not isinstance(value, str):
            value = json.dumps(value)

        setattr(self, key, value)

    # Laravel-style Scopes
    @classmethod
    def scope_where_in(cls, query: Select[Any], column: str, values: List[Any]) -> Select[Any]:
        return query.where(getattr(cls, column).in_(values))

    @classmethod
    def scope_latest(cls, query: Select[Any], column: str = 'created_at') -> Select[Any]:
        return query.order_by(getattr(cls, column).desc())

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"
