"""
Artisan commands for translatable models
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.Console.Artisan import Command
from app.Services.TranslatableService import translatable
from app.Support.ServiceContainer import container
from app.Traits.HasTranslations import translatable_models


class TranslatableMissingCommand(Command):
    """List the attribute/locale pairs that have no translation."""

    signature = "translatable:missing {model?} {--locale=}"
    description = "List missing translations of translatable models"
    help = "Checks every translatable model, or only the one named by its morph class."

    def handle(self) -> int:
        models = translatable_models()
        model_name = self.argument('model')
        if model_name:
            if model_name not in models:
                self.error(f"Unknown translatable model: {model_name}")
                return 1
            models = {model_name: models[model_name]}

        service = translatable()
        locale = self.option('locale')
        if locale and not service.is_valid_locale(locale):
            self.error(f"Locale '{locale}' is not configured. Allowed: {', '.join(service.get_locales())}")
            return 1

        if container.bound('db.session'):
            rows = self._collect_missing(container.make('db.session'), models, locale)
        else:
            from config.database import SessionLocal

            with SessionLocal() as session:
                rows = self._collect_missing(session, models, locale)

        if not rows:
            self.success("No missing translations.")
            return 0

        self.table(['Model', 'ID', 'Missing'], rows)
        self.warn(f"{len(rows)} missing translation(s).")
        return 0

    def _collect_missing(self, session: Session, models: Dict[str, Type[Any]], locale: Optional[str]) -> List[List[str]]:
        service = translatable()
        rows: List[List[str]] = []

        for morph_class, model_class in sorted(models.items()):
            query = model_class.without_trashed() if hasattr(model_class, 'without_trashed') else select(model_class)
            entities = session.scalars(query).all()
            service.load_translations(entities, service.get_locales())

            for entity in entities:
                for entry in service.completeness(entity)['missing']:
                    if locale and not entry.startswith(f"{locale}."):
                        continue
                    rows.append([morph_class, entity.get_key(), entry])

        return rows
