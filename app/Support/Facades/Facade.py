from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Any, Dict


class FacadeMeta(ABCMeta):
    """Forwards unknown class attribute lookups to the facade root."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith('__'):
            raise AttributeError(name)
        return getattr(cls.get_facade_root(), name)


class Facade(metaclass=FacadeMeta):
    """
    Base facade class similar to Laravel's Facade.

    Provides static-like access to services registered in the container.
    """

    _resolved_instances: Dict[str, Any] = {}

    @classmethod
    @abstractmethod
    def get_facade_accessor(cls) -> str:
        """
        Get the registered name of the component.

        Returns:
            The binding name in the service container
        """
        pass

    @classmethod
    def get_facade_root(cls) -> Any:
        """
        Resolve the root object behind the facade, caching it per accessor.

        Raises:
            RuntimeError: when nothing is bound under the accessor
        """
        from app.Support.ServiceContainer import container

        accessor = cls.get_facade_accessor()
        if accessor in cls._resolved_instances:
            return cls._resolved_instances[accessor]

        if not container.bound(accessor):
            raise RuntimeError(f"A facade root has not been set for '{accessor}'")

        instance = container.make(accessor)
        cls._resolved_instances[accessor] = instance
        return instance

    @classmethod
    def clear_resolved_instance(cls) -> None:
        cls._resolved_instances.pop(cls.get_facade_accessor(), None)

    @classmethod
    def clear_resolved_instances(cls) -> None:
        """Clear all resolved facade instances."""
        cls._resolved_instances.clear()
