"""
Laravel-style Locale Middleware for automatic locale detection and setting
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.Localization.LocaleManager import LocaleManager, get_locale_manager


class LocaleMiddleware(BaseHTTPMiddleware):
    """
    Sets the current locale for the duration of each request.

    The locale is detected from the ``locale`` query parameter, the locale
    cookie, then the Accept-Language header, and restored once the response
    is produced, so translatable models resolved inside a request read that
    request's locale only.
    """

    def __init__(
        self,
        app: Any,
        locale_manager: Optional[LocaleManager] = None,
        cookie_name: str = "locale",
        detection_methods: Optional[List[str]] = None,
        cookie_max_age: int = 60 * 60 * 24 * 365,
        enable_path_prefix: bool = False
    ) -> None:
        super().__init__(app)
        self._locale_manager = locale_manager
        self.cookie_name = cookie_name
        self.cookie_max_age = cookie_max_age

        detection_list = ['url_parameter', 'cookie', 'accept_language_header']
        if enable_path_prefix:
            detection_list.insert(1, 'path_prefix')
        self.detection_methods = detection_methods or detection_list

    @property
    def locale_manager(self) -> LocaleManager:
        return self._locale_manager or get_locale_manager()

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        manager = self.locale_manager
        locale = manager.detect_locale(request, self.detection_methods)

        token = manager.set_current_locale(locale)
        locale = manager.get_current_locale()
        request.state.locale = locale
        try:
            response = await call_next(request)
        finally:
            manager.reset_current_locale(token)

        if request.cookies.get(self.cookie_name) != locale:
            response.set_cookie(
                key=self.cookie_name,
                value=locale,
                max_age=self.cookie_max_age,
                httponly=True,
                samesite="lax",
                secure=request.url.scheme == "https"
            )

        response.headers["Content-Language"] = locale
        response.headers["X-App-Locale"] = locale
        return response
