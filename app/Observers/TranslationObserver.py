from __future__ import annotations

from typing import TYPE_CHECKING

from app.Models.Observer import ModelObserver

if TYPE_CHECKING:
    from app.Traits.HasTranslations import HasTranslations


class TranslationObserver(ModelObserver):
    """Keeps the translation table in step with the lifecycle of translatable models."""

    def saved(self, model: HasTranslations) -> None:
        """Persist the translations staged on the model."""
        model.save_translations()

    def deleting(self, model: HasTranslations) -> None:
        """Remove stored translations, unless the model is only being soft deleted."""
        if hasattr(model, 'is_force_deleting') and not model.is_force_deleting():
            return
        from app.Services.TranslatableService import translatable

        translatable().delete_translations(model)

    def deleted(self, model: HasTranslations) -> None:
        model.clear_translation_cache()


translation_observer = TranslationObserver()
