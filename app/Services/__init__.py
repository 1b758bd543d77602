from .TranslatableService import TranslatableService, TranslationSnapshot, translatable

__all__ = ["TranslatableService", "TranslationSnapshot", "translatable"]
