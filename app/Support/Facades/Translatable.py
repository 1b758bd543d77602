"""
Translatable Facade
"""
from __future__ import annotations

from .Facade import Facade


class Translatable(Facade):
    """Static access to the translation resolver bound as ``translatable``."""

    @classmethod
    def get_facade_accessor(cls) -> str:
        return 'translatable'
