from .LocaleManager import (
    LocaleManager,
    LocaleDetector,
    LocaleValidator,
    current_locale,
    get_locale_manager,
)

__all__ = [
    'LocaleManager',
    'LocaleDetector',
    'LocaleValidator',
    'current_locale',
    'get_locale_manager',
]
