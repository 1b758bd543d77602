from .TranslationObserver import TranslationObserver, translation_observer

__all__ = ["TranslationObserver", "translation_observer"]
