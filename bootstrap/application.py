from __future__ import annotations

from typing import List, Optional

from app.Config import config
from app.Support.ServiceContainer import ServiceContainer, container


def create_app(providers: Optional[List[str]] = None) -> ServiceContainer:
    """
    Create the Laravel-style application container.

    Registers the providers listed in ``app.providers`` (dotted class paths),
    then boots them.
    """
    for provider in providers if providers is not None else config('app.providers', []):
        container.register_provider(provider)

    container.boot_providers()
    return container


__all__ = ['create_app']
