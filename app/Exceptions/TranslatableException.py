from __future__ import annotations

from typing import List, Optional


class TranslatableException(Exception):
    """Base exception for translatable models"""
    pass


class InvalidLocaleException(TranslatableException, ValueError):
    """Exception raised when a locale outside the configured list is written"""

    def __init__(self, locale: str, allowed_locales: List[str]) -> None:
        self.locale = locale
        self.allowed_locales = allowed_locales

        allowed_str = ", ".join(allowed_locales)

        super().__init__(
            f"Locale `{locale}` is not supported. "
            f"Supported locale(s) are `{allowed_str}`."
        )


class SchemaProbeException(TranslatableException):
    """Exception raised when the table schema cannot be inspected"""

    def __init__(self, table: str, reason: Optional[str] = None) -> None:
        self.table = table
        self.reason = reason

        message = f"Unable to inspect columns of table `{table}`"
        if reason:
            message += f": {reason}"

        super().__init__(message)


class ModelNotPersistedException(TranslatableException):
    """Exception raised when a translation write needs a session the model does not have"""

    def __init__(self, model: str) -> None:
        self.model = model

        super().__init__(
            f"Model `{model}` is not attached to a session; "
            f"add it to a session before writing translations."
        )
