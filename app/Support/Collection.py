from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar('T')
U = TypeVar('U')


class Collection(Generic[T]):
    """
    Ordered wrapper over model lists, Laravel style.

    Traits extend it at import time through ``Collection.macro(name, fn)``;
    a macro is called with the collection as its first argument.
    """

    _macros: Dict[str, Callable[..., Any]] = {}

    def __init__(self, items: Optional[Iterable[T]] = None) -> None:
        self._items: List[T] = list(items) if items is not None else []

    @classmethod
    def make(cls, items: Optional[Iterable[T]] = None) -> Collection[T]:
        return cls(items)

    def all(self) -> List[T]:
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def first(self, callback: Optional[Callable[[T], bool]] = None, default: Any = None) -> Any:
        return next((item for item in self._items if callback is None or callback(item)), default)

    def map(self, callback: Callable[[T], U]) -> Collection[U]:
        return Collection(callback(item) for item in self._items)

    def pluck(self, value: str, key: Optional[str] = None) -> Any:
        """Attribute (or dict key) ``value`` of every item; a dict when ``key`` is given."""
        if key is None:
            return Collection(_read(item, value) for item in self._items)
        return {_read(item, key): _read(item, value) for item in self._items}

    @classmethod
    def macro(cls, name: str, method: Callable[..., Any]) -> None:
        cls._macros[name] = method

    @classmethod
    def has_macro(cls, name: str) -> bool:
        return name in cls._macros

    def __getattr__(self, name: str) -> Any:
        method = type(self)._macros.get(name)
        if method is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return lambda *args, **kwargs: method(self, *args, **kwargs)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"


def _read(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def collect(items: Optional[Iterable[T]] = None) -> Collection[T]:
    return Collection.make(items)
