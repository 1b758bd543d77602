from __future__ import annotations

import importlib
import inspect
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, Union


class ServiceProvider(ABC):
    """Service provider base class."""

    def __init__(self, container: ServiceContainer) -> None:
        self.container = container

    @abstractmethod
    def register(self) -> None:
        """Register services in the container."""
        pass

    def boot(self) -> None:
        """Boot the service provider."""
        pass


class ServiceContainer:
    """Minimal Laravel-style IoC container: bindings, shared instances and providers."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._bindings: Dict[str, Dict[str, Any]] = {}
        self._instances: Dict[str, Any] = {}
        self._aliases: Dict[str, str] = {}
        self._providers: List[ServiceProvider] = []
        self._booted: bool = False
        self._lock = threading.RLock()

    def bind(self, abstract: str, concrete: Optional[Callable[..., Any]] = None, shared: bool = False) -> None:
        """Bind a service to the container."""
        with self._lock:
            self._instances.pop(abstract, None)
            self._bindings[abstract] = {
                'concrete': concrete if concrete is not None else abstract,
                'shared': shared,
            }
        self.logger.debug(f"Bound service: {abstract} ({'shared' if shared else 'transient'})")

    def singleton(self, abstract: str, concrete: Optional[Callable[..., Any]] = None) -> None:
        """Bind a singleton service to the container."""
        self.bind(abstract, concrete, shared=True)

    def instance(self, abstract: str, instance: Any) -> Any:
        """Register an existing instance as shared in the container."""
        with self._lock:
            self._instances[abstract] = instance
        return instance

    def alias(self, abstract: str, alias: str) -> None:
        self._aliases[alias] = abstract

    def bound(self, abstract: str) -> bool:
        """Check if a service is bound."""
        abstract = self._aliases.get(abstract, abstract)
        return abstract in self._bindings or abstract in self._instances

    def make(self, abstract: str, parameters: Optional[Dict[str, Any]] = None) -> Any:
        """Resolve a service from the container."""
        abstract = self._aliases.get(abstract, abstract)

        with self._lock:
            if abstract in self._instances:
                return self._instances[abstract]

            if abstract not in self._bindings:
                raise ValueError(f"Service '{abstract}' not bound in container")

            binding = self._bindings[abstract]
            concrete: Union[str, Callable[..., Any]] = binding['concrete']

            if isinstance(concrete, str) and concrete != abstract:
                instance = self.make(concrete, parameters)
            elif inspect.isclass(concrete):
                instance = concrete(**(parameters or {}))
            elif callable(concrete):
                instance = concrete(self)
            else:
                raise ValueError(f"Cannot resolve '{abstract}'")

            if binding['shared']:
                self._instances[abstract] = instance

        return instance

    def forget_instance(self, abstract: str) -> None:
        """Drop a resolved shared instance so the next make() rebuilds it."""
        with self._lock:
            self._instances.pop(self._aliases.get(abstract, abstract), None)

    def register_provider(self, provider: Union[ServiceProvider, Type[ServiceProvider], str]) -> ServiceProvider:
        """Register a provider instance, class or dotted ``module.Class`` path."""
        if isinstance(provider, str):
            module_name, class_name = provider.rsplit('.', 1)
            provider = getattr(importlib.import_module(module_name), class_name)
        if inspect.isclass(provider):
            provider = provider(self)

        provider.register()
        self._providers.append(provider)
        self.logger.debug(f"Registered provider: {provider.__class__.__name__}")

        if self._booted:
            provider.boot()
        return provider

    def boot_providers(self) -> None:
        """Boot all registered service providers."""
        if self._booted:
            return
        for provider in self._providers:
            provider.boot()
        self._booted = True

    def is_booted(self) -> bool:
        return self._booted

    def flush(self) -> None:
        """Flush all bindings, instances and providers."""
        with self._lock:
            self._bindings.clear()
            self._instances.clear()
            self._aliases.clear()
            self._providers.clear()
            self._booted = False


container = ServiceContainer()


def app(abstract: Optional[str] = None) -> Any:
    """Get the application container or resolve a service from it."""
    if abstract is None:
        return container
    return container.make(abstract)
