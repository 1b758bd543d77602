from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, Iterable, Iterator, List, Optional, Set, Tuple, Type, TypeVar

from sqlalchemy import and_, column as sql_column, inspect as sa_inspect, literal, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session, aliased, object_session
from sqlalchemy.orm.attributes import flag_dirty

from app.Cache import CacheManager, CacheStore
from app.Config import config
from app.Exceptions import InvalidLocaleException, ModelNotPersistedException, SchemaProbeException
from app.Localization import LocaleManager, get_locale_manager
from app.Log import logger
from app.Models.Translation import Translation
from database.Schema.DatabaseInspector import DatabaseInspector

if TYPE_CHECKING:
    from app.Traits.HasTranslations import HasTranslations

T = TypeVar('T')


@dataclass
class TranslationSnapshot:
    """Translations preloaded for a fixed set of locales."""
    locales: Set[str]
    values: Dict[Tuple[str, str], Optional[str]] = field(default_factory=dict)

    def covers(self, locale: str) -> bool:
        return locale in self.locales

    def get(self, attribute: str, locale: str) -> Optional[str]:
        return self.values.get((locale, attribute))


class TranslatableService:
    """
    Translation resolver for models using the ``HasTranslations`` trait.

    Reads fall back in a fixed order: the requested locale (the current
    locale by default), then the configured fallback locale, then the
    model's own column of the same name, then None. Lookups never raise.

    Writes go to the ``model_translations`` table through the model's
    session: ``set_translation`` writes now, ``stage`` keeps the value on
    the model until its next save.
    """

    # "{table}.{column}" -> whether the column exists; shared by every service
    _column_cache: ClassVar[Dict[str, bool]] = {}

    def __init__(
        self,
        cache: Optional[CacheManager] = None,
        locale_manager: Optional[LocaleManager] = None
    ) -> None:
        self._cache = cache
        self._locale_manager = locale_manager
        self.logger = logger('translatable')

    @property
    def cache(self) -> CacheManager:
        if self._cache is None:
            self._cache = CacheManager(config('cache'))
        return self._cache

    @property
    def locale_manager(self) -> LocaleManager:
        return self._locale_manager or get_locale_manager()

    # Locales

    def get_locales(self) -> List[str]:
        return list(config('translatable.locales') or [])

    def get_fallback_locale(self) -> Optional[str]:
        return config('translatable.fallback_locale') or config('app.fallback_locale')

    def get_current_locale(self) -> str:
        return self.locale_manager.get_current_locale()

    def is_valid_locale(self, locale: str) -> bool:
        return locale in self.get_locales()

    def validate_locale(self, locale: str) -> None:
        """
        Raises:
            InvalidLocaleException: when the locale is not configured
        """
        if not self.is_valid_locale(locale):
            raise InvalidLocaleException(locale, self.get_locales())

    @contextmanager
    def using_locale(self, locale: str) -> Iterator[str]:
        """Override the current locale inside the block; restored on exit, errors included."""
        with self.locale_manager.using_locale(locale):
            yield locale

    def with_locale(self, locale: str, action: Callable[[], T]) -> T:
        with self.using_locale(locale):
            return action()

    # Reads

    def resolve(self, entity: HasTranslations, attribute: str, locale: Optional[str] = None) -> Any:
        """Resolve a translatable attribute through the fallback chain."""
        locale = locale or self.get_current_locale()

        value = self.get_translation(entity, attribute, locale)
        if value is not None:
            return value

        fallback = self.get_fallback_locale()
        if fallback and fallback != locale:
            value = self.get_translation(entity, attribute, fallback)
            if value is not None:
                return value

        if self.has_column(type(entity), attribute, bind=self._bind_for(entity)):
            return self._plain_value(entity, attribute)

        return None

    def get_translation(self, entity: HasTranslations, attribute: str, locale: Optional[str] = None) -> Optional[str]:
        """Stored value for exactly one locale, without fallback."""
        locale = locale or self.get_current_locale()

        snapshot = self._snapshot(entity)
        if snapshot is None and config('translatable.auto_load_translations', False) and self._session_for(entity):
            self.load_translations([entity])
            snapshot = self._snapshot(entity)

        if snapshot is not None and snapshot.covers(locale):
            return snapshot.get(attribute, locale)

        for translation in self._stored_translations(entity):
            if translation.locale == locale and translation.attribute_name == attribute:
                return translation.value
        return None

    def get_translations(self, entity: HasTranslations, attribute: str) -> Dict[str, Optional[str]]:
        """All stored values of one attribute, keyed by locale."""
        return {
            translation.locale: translation.value
            for translation in self._stored_translations(entity)
            if translation.attribute_name == attribute
        }

    def load_translations(self, entities: Iterable[HasTranslations], locales: Optional[List[str]] = None) -> None:
        """
        Preload translations for many models, one query per model class.

        Each model keeps a snapshot of the loaded locales; later lookups in
        those locales are answered from it without touching the database.
        """
        if locales is None:
            locales = [self.get_current_locale(), self.get_fallback_locale()]
        locales = [locale for locale in dict.fromkeys(locales) if locale]

        groups: Dict[str, List[HasTranslations]] = {}
        for entity in entities:
            if entity is not None:
                groups.setdefault(entity.get_morph_class(), []).append(entity)

        for morph_class, models in groups.items():
            snapshots = {model.get_key(): TranslationSnapshot(set(locales)) for model in models}
            session = next((s for s in map(self._session_for, models) if s is not None), None)

            if session is not None and locales:
                rows = session.execute(
                    select(
                        Translation.translatable_id,
                        Translation.locale,
                        Translation.attribute_name,
                        Translation.value,
                    ).where(
                        Translation.translatable_type == morph_class,
                        Translation.translatable_id.in_(list(snapshots)),
                        Translation.locale.in_(locales),
                    )
                )
                for translatable_id, locale, attribute, value in rows:
                    snapshots[translatable_id].values[(locale, attribute)] = value

            for model in models:
                model._loaded_translations = snapshots[model.get_key()]

            self.logger.debug('Translations loaded', {
                'model': morph_class,
                'count': len(models),
                'locales': locales,
            })

    # Writes

    def set_translation(
        self,
        entity: HasTranslations,
        attribute: str,
        locale: str,
        value: Any,
        flush: bool = True
    ) -> None:
        """
        Insert or update the stored value for (model, attribute, locale).

        Raises:
            InvalidLocaleException: when the locale is not configured; nothing is written
            ModelNotPersistedException: when the model is not in a session
        """
        self.validate_locale(locale)

        session = self._session_for(entity)
        if session is None:
            raise ModelNotPersistedException(type(entity).__name__)

        stored = None if value is None else str(value)
        record = self._find_record(session, entity, attribute, locale)
        if record is None:
            session.add(Translation(
                translatable_type=entity.get_morph_class(),
                translatable_id=entity.get_key(),
                locale=locale,
                attribute_name=attribute,
                value=stored,
            ))
        else:
            record.value = stored

        if flush:
            session.flush()

        self.clear_translation_cache(entity)
        self.logger.debug('Translation stored', {
            'model': entity.get_morph_class(),
            'id': entity.get_key(),
            'attribute': attribute,
            'locale': locale,
        })

    def stage(self, entity: HasTranslations, attribute: str, locale: str, value: Any) -> None:
        """Keep a value on the model until its next save."""
        self.validate_locale(locale)

        pending = getattr(entity, '_pending_translations', None)
        if pending is None:
            pending = {}
            entity._pending_translations = pending
        pending.setdefault(attribute, {})[locale] = value

        # a model whose only change is a staged translation must still reach the flush
        flag_dirty(entity)

    def set_translations(self, entity: HasTranslations, attribute: str, translations: Dict[str, Any]) -> None:
        """Stage several locales of one attribute; every locale is checked before any is staged."""
        for locale in translations:
            self.validate_locale(locale)
        for locale, value in translations.items():
            self.stage(entity, attribute, locale, value)

    def pending_translations(self, entity: HasTranslations) -> Dict[str, Dict[str, Any]]:
        pending = getattr(entity, '_pending_translations', None) or {}
        return {attribute: dict(values) for attribute, values in pending.items()}

    def save_pending(self, entity: HasTranslations, flush: bool = False) -> None:
        """Write staged values, then forget them."""
        pending = getattr(entity, '_pending_translations', None)
        if not pending:
            return

        for attribute, values in pending.items():
            for locale, value in values.items():
                self.set_translation(entity, attribute, locale, value, flush=False)

        entity._pending_translations = {}
        if flush:
            session = self._session_for(entity)
            if session is not None:
                session.flush()
        self.clear_translation_cache(entity)

    def delete_translations(self, entity: HasTranslations) -> int:
        """Delete every stored translation of a model; returns how many rows were removed."""
        entity._pending_translations = {}

        session = self._session_for(entity)
        if session is None:
            return 0

        morph_class, key = entity.get_morph_class(), entity.get_key()
        for obj in list(session.new):
            if isinstance(obj, Translation) and (obj.translatable_type, obj.translatable_id) == (morph_class, key):
                session.expunge(obj)

        rows = session.scalars(self.translations_query(entity)).all()
        for row in rows:
            session.delete(row)

        self.logger.debug('Translations deleted', {'model': morph_class, 'id': key, 'count': len(rows)})
        return len(rows)

    def replicate(self, entity: HasTranslations, except_: Optional[Iterable[str]] = None) -> HasTranslations:
        """Copy a model's columns (fresh id and timestamps) and all of its translations."""
        session = self._session_for(entity)
        if session is None:
            raise ModelNotPersistedException(type(entity).__name__)

        skip = {'id', 'created_at', 'updated_at', *(except_ or [])}
        replica = type(entity)()
        for attr in sa_inspect(type(entity)).column_attrs:
            if attr.key not in skip:
                setattr(replica, attr.key, getattr(entity, attr.key))

        session.add(replica)
        session.flush()

        for translation in session.scalars(self.translations_query(entity)).all():
            session.add(Translation(
                translatable_type=replica.get_morph_class(),
                translatable_id=replica.get_key(),
                locale=translation.locale,
                attribute_name=translation.attribute_name,
                value=translation.value,
            ))
        session.flush()
        return replica

    # Caches

    def clear_translation_cache(self, entity: HasTranslations) -> None:
        """Drop the loaded snapshot, expire the relation and forget the cached attribute list."""
        entity._loaded_translations = None

        state = sa_inspect(entity)
        if state.persistent and state.session is not None:
            state.session.expire(entity, ['translations'])

        self.forget_attribute_cache(type(entity))

    def translatable_attributes(self, model_class: Type[Any]) -> List[str]:
        attributes = list(getattr(model_class, '__translatable__', None) or [])
        if not config('translatable.cache_translations', True):
            return attributes

        return list(self._cache_store().remember(
            self._attributes_cache_key(model_class),
            int(config('translatable.cache_duration', 3600)),
            lambda: attributes,
        ))

    def forget_attribute_cache(self, model_class: Type[Any]) -> None:
        self._cache_store().forget(self._attributes_cache_key(model_class))

    def has_column(
        self,
        model_class: Type[Any],
        column: str,
        bind: Optional[Engine | Connection] = None
    ) -> bool:
        """
        Whether the model's table has a column of that name.

        Mapped columns answer straight away; anything else is probed on the
        database. A failed probe counts as "no such column". Answers are
        cached per process under ``"{table}.{column}"``.
        """
        table = model_class.__table__.name
        cache_key = f"{table}.{column}"
        if cache_key in self._column_cache:
            return self._column_cache[cache_key]

        if column in sa_inspect(model_class).columns.keys():
            exists = True
        else:
            try:
                exists = DatabaseInspector(bind).column_exists(table, column)
            except SchemaProbeException as e:
                self.logger.warning('Column probe failed, treating column as absent', {
                    'table': table,
                    'column': column,
                    'error': str(e),
                })
                exists = False

        self._column_cache[cache_key] = exists
        return exists

    @classmethod
    def flush_column_cache(cls) -> None:
        cls._column_cache.clear()

    # Queries

    def translations_query(self, entity: HasTranslations, locales: Optional[List[str]] = None) -> Any:
        """Select of the model's translation rows, optionally limited to some locales."""
        query = select(Translation).where(
            Translation.translatable_type == entity.get_morph_class(),
            Translation.translatable_id == entity.get_key(),
        )
        if locales:
            query = query.where(Translation.locale.in_(locales))
        return query

    def pluck_translated(
        self,
        model_class: Type[Any],
        session: Session,
        column: str,
        key: Optional[str] = None,
        locale: Optional[str] = None
    ) -> Dict[Any, Any]:
        """``{key: value}`` for every row, translatable columns read in one locale via a join."""
        locale = locale or self.get_current_locale()
        key_column = getattr(model_class, key or 'id')

        if column not in self.translatable_attributes(model_class):
            query = select(key_column, getattr(model_class, column))
        else:
            translation = aliased(Translation)
            query = select(key_column, translation.value).select_from(model_class).outerjoin(
                translation,
                and_(
                    translation.translatable_id == model_class.id,
                    translation.translatable_type == model_class.get_morph_class(),
                    translation.attribute_name == column,
                    translation.locale == locale,
                ),
            )

        query = self._without_trashed(model_class, query)
        return {row_key: value for row_key, value in session.execute(query)}

    def pluck_translated_with_fallback(
        self,
        model_class: Type[Any],
        session: Session,
        column: str,
        key: Optional[str] = None,
        locale: Optional[str] = None
    ) -> Dict[Any, Any]:
        """Like ``pluck_translated`` but each row falls back to the fallback locale, then the column."""
        if column not in self.translatable_attributes(model_class):
            return self.pluck_translated(model_class, session, column, key, locale)

        locale = locale or self.get_current_locale()
        fallback = self.get_fallback_locale()
        locales = [locale] + ([fallback] if fallback and fallback != locale else [])

        plain = self._mapped_column(model_class, column)
        rows_query = self._without_trashed(model_class, select(
            model_class.id,
            getattr(model_class, key or 'id'),
            plain if plain is not None else literal(None),
        ))
        rows = session.execute(rows_query).all()

        found: Dict[Tuple[str, str], Optional[str]] = {}
        translations = session.execute(
            select(Translation.translatable_id, Translation.locale, Translation.value).where(
                Translation.translatable_type == model_class.get_morph_class(),
                Translation.attribute_name == column,
                Translation.locale.in_(locales),
                Translation.translatable_id.in_(rows_query.with_only_columns(model_class.id)),
            )
        )
        for translatable_id, row_locale, value in translations:
            found[(translatable_id, row_locale)] = value

        result: Dict[Any, Any] = {}
        for row_id, row_key, plain_value in rows:
            value = next(
                (found[(row_id, candidate)] for candidate in locales if found.get((row_id, candidate)) is not None),
                plain_value,
            )
            result[row_key] = value
        return result

    def completeness(self, entity: HasTranslations) -> Dict[str, Any]:
        """Share of configured locales x translatable attributes that hold a value."""
        locales = self.get_locales()
        attributes = self.translatable_attributes(type(entity))
        total = len(locales) * len(attributes)

        if total == 0:
            return {'percentage': 100, 'missing': [], 'completed': 0, 'total': 0}

        missing = [
            f"{locale}.{attribute}"
            for locale in locales
            for attribute in attributes
            if not self.get_translation(entity, attribute, locale)
        ]
        completed = total - len(missing)

        return {
            'percentage': round(completed / total * 100, 2),
            'missing': missing,
            'completed': completed,
            'total': total,
        }

    # Helpers

    def _snapshot(self, entity: HasTranslations) -> Optional[TranslationSnapshot]:
        return getattr(entity, '_loaded_translations', None)

    def _stored_translations(self, entity: HasTranslations) -> List[Translation]:
        state = sa_inspect(entity)
        # pending and transient models have no rows yet; touching the relation would cache an empty list
        if state.persistent or 'translations' in state.dict:
            return list(entity.translations)
        return []

    def _find_record(self, session: Session, entity: HasTranslations, attribute: str, locale: str) -> Optional[Translation]:
        identity = (entity.get_morph_class(), entity.get_key(), locale, attribute)
        for obj in session.new:
            if isinstance(obj, Translation) and (
                obj.translatable_type, obj.translatable_id, obj.locale, obj.attribute_name
            ) == identity:
                return obj

        return session.scalars(
            self.translations_query(entity, [locale]).where(Translation.attribute_name == attribute)
        ).first()

    def _session_for(self, entity: Any) -> Optional[Session]:
        return object_session(entity)

    def _bind_for(self, entity: Any) -> Optional[Engine | Connection]:
        session = self._session_for(entity)
        return session.get_bind() if session is not None else None

    def _plain_value(self, entity: Any, attribute: str) -> Any:
        """Value of the same-named column; columns outside the mapping are read from the row."""
        if self._mapped_column(type(entity), attribute) is not None:
            return getattr(entity, attribute, None)

        session = self._session_for(entity)
        if session is None or entity.id is None:
            return None

        table = type(entity).__table__
        query = select(sql_column(attribute)).select_from(table).where(table.c.id == entity.id)
        with session.no_autoflush:
            return session.execute(query).scalar()

    def _mapped_column(self, model_class: Type[Any], column: str) -> Any:
        if column in sa_inspect(model_class).columns.keys():
            return getattr(model_class, column)
        return None

    def _without_trashed(self, model_class: Type[Any], query: Any) -> Any:
        if self._mapped_column(model_class, 'deleted_at') is not None:
            return query.where(model_class.deleted_at.is_(None))
        return query

    def _cache_store(self) -> CacheStore:
        return self.cache.store(config('translatable.cache_store') or None)

    def _attributes_cache_key(self, model_class: Type[Any]) -> str:
        return self.cache.key(f"{model_class.__module__}.{model_class.__qualname__}_translatable_attributes")


_default_service: Optional[TranslatableService] = None


def translatable() -> TranslatableService:
    """Resolve the translation resolver from the container, or a process default."""
    global _default_service
    from app.Support.ServiceContainer import container

    if container.bound('translatable'):
        return container.make('translatable')

    if _default_service is None:
        _default_service = TranslatableService()
    return _default_service
