from .LocaleMiddleware import LocaleMiddleware

__all__ = ["LocaleMiddleware"]
