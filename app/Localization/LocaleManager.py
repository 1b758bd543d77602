"""
Laravel-style Locale Manager for FastAPI
Handles locale detection, validation and the request-local current locale
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Iterator, List, Optional

# Locale of the running request or ``using_locale`` block; None means "use the default"
current_locale: ContextVar[Optional[str]] = ContextVar('current_locale', default=None)


class LocaleDetector:
    """Detects locale from various sources"""

    def __init__(self) -> None:
        self.detection_order = [
            'url_parameter',
            'path_prefix',
            'cookie',
            'accept_language_header',
        ]

    def detect_from_url_parameter(self, request: Any, param_name: str = 'locale') -> Optional[str]:
        """Detect locale from URL parameter"""
        if hasattr(request, 'query_params'):
            param_value = request.query_params.get(param_name)
            return str(param_value) if param_value is not None else None
        return None

    def detect_from_path_prefix(self, request: Any, supported_locales: List[str]) -> Optional[str]:
        """Detect locale from path prefix (e.g., /fr/products)"""
        if not hasattr(request, 'url') or not hasattr(request.url, 'path'):
            return None

        path = request.url.path.strip('/')
        if not path:
            return None

        prefix = path.split('/')[0]
        return prefix if prefix in supported_locales else None

    def detect_from_cookie(self, request: Any, cookie_name: str = 'locale') -> Optional[str]:
        """Detect locale from cookie"""
        if hasattr(request, 'cookies'):
            cookie_value = request.cookies.get(cookie_name)
            return str(cookie_value) if cookie_value is not None else None
        return None

    def detect_from_accept_language(self, request: Any, supported_locales: List[str]) -> Optional[str]:
        """Detect locale from Accept-Language header"""
        if not hasattr(request, 'headers'):
            return None

        accept_language = request.headers.get('Accept-Language')
        if not accept_language:
            return None

        return self.parse_accept_language(accept_language, supported_locales)

    def parse_accept_language(self, accept_language: str, supported_locales: List[str]) -> Optional[str]:
        """Parse an Accept-Language header, returning the best supported language"""
        languages = []

        for lang_item in accept_language.split(','):
            lang_item = lang_item.strip()
            if not lang_item:
                continue

            quality = 1.0
            if ';' in lang_item:
                lang_item, quality_str = lang_item.split(';', 1)
                try:
                    quality = float(quality_str.split('=', 1)[1]) if '=' in quality_str else 1.0
                except ValueError:
                    quality = 0.0

            lang_code = lang_item.split('-')[0].strip().lower()
            languages.append((lang_code, quality))

        # sorted() is stable, so equal qualities keep header order
        for lang_code, quality in sorted(languages, key=lambda x: x[1], reverse=True):
            if quality > 0 and lang_code in supported_locales:
                return lang_code

        return None


class LocaleValidator:
    """Validates locale codes and formats"""

    def normalize_locale_code(self, locale: str) -> str:
        """Normalize locale code to standard format (``pt_br`` -> ``pt-BR``)"""
        if not locale:
            return locale

        parts = locale.replace('_', '-').split('-')
        parts[0] = parts[0].lower()

        if len(parts) > 1 and len(parts[1]) == 2:
            parts[1] = parts[1].upper()

        return '-'.join(parts)

    def extract_language_code(self, locale: str) -> str:
        """Extract primary language code from locale"""
        return locale.replace('_', '-').split('-')[0].lower() if locale else ''


class LocaleManager:
    """
    Locale management for translatable models.

    The current locale lives in a ContextVar, so every request (thread or
    asyncio task) sees its own value.
    """

    def __init__(
        self,
        default_locale: str = 'en',
        fallback_locale: str = 'en',
        supported_locales: Optional[List[str]] = None
    ):
        self.default_locale = default_locale
        self.fallback_locale = fallback_locale
        self.supported_locales = supported_locales or [default_locale]

        self.detector = LocaleDetector()
        self.validator = LocaleValidator()

    @classmethod
    def from_config(cls) -> 'LocaleManager':
        """Build a manager from ``app.locale`` and the translatable locale list."""
        from app.Config import config

        default_locale = config('app.locale', 'en')
        return cls(
            default_locale=default_locale,
            fallback_locale=config('translatable.fallback_locale') or config('app.fallback_locale', default_locale),
            supported_locales=list(config('translatable.locales', [default_locale])),
        )

    def detect_locale(self, request: Any, methods: Optional[List[str]] = None) -> str:
        """
        Detect locale from request using specified methods

        Args:
            request: FastAPI request object
            methods: List of detection methods to use (uses default order if None)

        Returns:
            Detected locale code, or the default locale
        """
        methods = methods or self.detector.detection_order

        for method in methods:
            detected_locale = None

            if method == 'url_parameter':
                detected_locale = self.detector.detect_from_url_parameter(request)
            elif method == 'path_prefix':
                detected_locale = self.detector.detect_from_path_prefix(request, self.supported_locales)
            elif method == 'cookie':
                detected_locale = self.detector.detect_from_cookie(request)
            elif method == 'accept_language_header':
                detected_locale = self.detector.detect_from_accept_language(request, self.supported_locales)

            if detected_locale and self.is_supported_locale(detected_locale):
                return self.get_fallback_locale(detected_locale)

        return self.default_locale

    def is_supported_locale(self, locale: Optional[str]) -> bool:
        """Check if a locale, or its language code, is supported"""
        if not locale:
            return False

        normalized = self.validator.normalize_locale_code(locale)
        if normalized in self.supported_locales:
            return True

        return self.validator.extract_language_code(normalized) in self.supported_locales

    def get_current_locale(self) -> str:
        """Get the current locale from context"""
        return current_locale.get() or self.default_locale

    def has_current_locale(self) -> bool:
        return current_locale.get() is not None

    def set_current_locale(self, locale: str) -> Token:
        """Set the current locale in context; unsupported locales fall back to the default"""
        if self.is_supported_locale(locale):
            locale = self.get_fallback_locale(locale)
        else:
            locale = self.default_locale
        return current_locale.set(locale)

    def reset_current_locale(self, token: Token) -> None:
        current_locale.reset(token)

    @contextmanager
    def using_locale(self, locale: str) -> Iterator[str]:
        """Temporarily override the current locale, restoring it on exit"""
        token = current_locale.set(locale)
        try:
            yield locale
        finally:
            current_locale.reset(token)

    def get_fallback_locale(self, locale: Optional[str] = None) -> str:
        """
        Map a locale onto a supported one.

        Without an argument this is the configured fallback locale.
        """
        if locale is None:
            return self.fallback_locale

        normalized = self.validator.normalize_locale_code(locale)
        if normalized in self.supported_locales:
            return normalized

        lang_code = self.validator.extract_language_code(normalized)
        if lang_code in self.supported_locales:
            return lang_code

        return self.fallback_locale

    def get_supported_locales(self) -> List[str]:
        """Get list of supported locales"""
        return self.supported_locales.copy()


_locale_manager: Optional[LocaleManager] = None


def get_locale_manager() -> LocaleManager:
    """Resolve the locale manager from the container, or build one from config."""
    global _locale_manager
    from app.Support.ServiceContainer import container

    if container.bound('locale_manager'):
        return container.make('locale_manager')

    if _locale_manager is None:
        _locale_manager = LocaleManager.from_config()
    return _locale_manager
