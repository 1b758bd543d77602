from .ServiceContainer import ServiceContainer, ServiceProvider, container, app
from .Facades import Facade
from .Collection import Collection, collect

__all__ = [
    "ServiceContainer",
    "ServiceProvider",
    "container",
    "app",
    "Facade",
    "Collection",
    "collect",
]
