from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, List, Optional, Type, TypeVar

from sqlalchemy import and_
from sqlalchemy.orm import Mapped, Session, aliased, declared_attr, foreign, relationship, selectinload
from sqlalchemy.sql import Select

from app.Models.Observer import observer_registry
from app.Models.Translation import Translation
from app.Observers.TranslationObserver import translation_observer
from app.Support.Collection import Collection

if TYPE_CHECKING:
    from app.Services.TranslatableService import TranslatableService

T = TypeVar('T')

# morph class -> model class, filled as translatable models are declared
_translatable_models: Dict[str, Type[Any]] = {}


def translatable_models() -> Dict[str, Type[Any]]:
    """Every concrete model class using HasTranslations, keyed by morph class."""
    return dict(_translatable_models)


def translatable() -> TranslatableService:
    # imported on call: the service module imports the models
    from app.Services.TranslatableService import translatable as resolve

    return resolve()


class HasTranslations:
    """
    Laravel-style trait storing localized attribute values in the translations table.

    Declare the localized attributes in ``__translatable__`` and mix the trait in
    before ``BaseModel``:

        class Product(HasTranslations, BaseModel):
            __tablename__ = 'products'
            __translatable__ = ['name', 'description']

            name: Mapped[Optional[str]] = mapped_column(String(255))

    ``get_attribute``/``set_attribute`` read and write translatable attributes in
    the current locale; ``get``/``set`` take the locale explicitly. Values set
    on the model are kept pending and written when the model is saved. A
    same-named column, when the model has one, keeps a non-localized value
    used as the last fallback.
    """

    __translatable__: ClassVar[List[str]] = []

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get('__abstract__', False):
            return
        _translatable_models[cls.get_morph_class()] = cls
        observer_registry.observe(cls, translation_observer)

    @declared_attr
    def translations(cls) -> Mapped[List[Translation]]:
        """Stored translation rows of this model, every locale and attribute."""
        return relationship(
            Translation,
            primaryjoin=lambda: and_(
                foreign(Translation.translatable_id) == cls.id,
                Translation.translatable_type == cls.get_morph_class(),
            ),
            viewonly=True,
        )

    def __init__(self, **kwargs: Any) -> None:
        translated = {
            key: kwargs.pop(key)
            for key in list(kwargs)
            if self.is_translatable_attribute(key)
        }
        super().__init__(**kwargs)
        for key, value in translated.items():
            self.set_attribute(key, value)

    # Attribute access

    def get_attribute(self, key: str) -> Any:
        if self.is_translatable_attribute(key):
            return self.get(key)
        return super().get_attribute(key)  # type: ignore[misc]

    def set_attribute(self, key: str, value: Any) -> None:
        """Stage a translatable value for the current locale; other keys are set as usual."""
        if not self.is_translatable_attribute(key):
            super().set_attribute(key, value)  # type: ignore[misc]
            return

        service = translatable()
        locale = service.get_current_locale()
        service.validate_locale(locale)

        if key in self.__mapper__.columns.keys():  # type: ignore[attr-defined]
            super().set_attribute(key, value)  # type: ignore[misc]
        service.stage(self, key, locale, value)

    def get(self, attribute: str, locale: Optional[str] = None) -> Any:
        """Translated value with fallback to the fallback locale, then the plain column."""
        return translatable().resolve(self, attribute, locale)

    def set(self, attribute: str, locale: str, value: Any) -> HasTranslations:
        """Stage a value for an explicit locale."""
        translatable().stage(self, attribute, locale, value)
        return self

    # Translation API

    def get_translation(self, attribute: str, locale: Optional[str] = None) -> Optional[str]:
        return translatable().get_translation(self, attribute, locale)

    def set_translation(self, attribute: str, locale: str, value: Any) -> HasTranslations:
        translatable().set_translation(self, attribute, locale, value)
        return self

    def set_translations(self, attribute: str, translations: Dict[str, Any]) -> HasTranslations:
        translatable().set_translations(self, attribute, translations)
        return self

    def get_translations(self, attribute: str) -> Dict[str, Optional[str]]:
        return translatable().get_translations(self, attribute)

    def get_pending_translations(self) -> Dict[str, Dict[str, Any]]:
        return translatable().pending_translations(self)

    def load_translations(self, locales: Optional[List[str]] = None) -> HasTranslations:
        translatable().load_translations([self], locales)
        return self

    def save_translations(self, flush: bool = False) -> None:
        translatable().save_pending(self, flush=flush)

    def clear_translation_cache(self) -> None:
        translatable().clear_translation_cache(self)

    def get_translation_completeness(self) -> Dict[str, Any]:
        return translatable().completeness(self)

    def replicate_with_translations(self, session: Session, except_: Optional[List[str]] = None) -> HasTranslations:
        if self not in session:
            session.add(self)
        return translatable().replicate(self, except_)

    def translations_query(self, locales: Optional[List[str]] = None) -> Select[Any]:
        return translatable().translations_query(self, locales)

    @classmethod
    def with_locale(cls, locale: str, action: Callable[[], T]) -> T:
        return translatable().with_locale(locale, action)

    @classmethod
    def get_translatable_attributes(cls) -> List[str]:
        return translatable().translatable_attributes(cls)

    @classmethod
    def is_translatable_attribute(cls, key: str) -> bool:
        return key in cls.get_translatable_attributes()

    # Scopes

    @classmethod
    def scope_with_translations(cls, query: Select[Any], locales: Optional[List[str]] = None) -> Select[Any]:
        """Eager load translations, limited to the given locales (current and fallback by default)."""
        if locales is None:
            service = translatable()
            locales = [service.get_current_locale(), service.get_fallback_locale()]
        locales = [locale for locale in dict.fromkeys(locales) if locale]

        return query.options(selectinload(cls.translations.and_(Translation.locale.in_(locales))))

    @classmethod
    def scope_join_translation(cls, query: Select[Any], attribute: str, locale: Optional[str] = None) -> Select[Any]:
        """Left join one attribute's translation; the value is selected as ``{attribute}_translation``."""
        locale = locale or translatable().get_current_locale()
        joined = aliased(Translation, name=f"{attribute}_translations")

        return query.outerjoin(
            joined,
            and_(
                joined.translatable_id == cls.id,  # type: ignore[attr-defined]
                joined.translatable_type == cls.get_morph_class(),  # type: ignore[attr-defined]
                joined.attribute_name == attribute,
                joined.locale == locale,
            ),
        ).add_columns(joined.value.label(f"{attribute}_translation"))

    @classmethod
    def pluck_translated(
        cls,
        session: Session,
        column: str,
        key: Optional[str] = None,
        locale: Optional[str] = None
    ) -> Dict[Any, Any]:
        return translatable().pluck_translated(cls, session, column, key, locale)

    @classmethod
    def pluck_translated_with_fallback(
        cls,
        session: Session,
        column: str,
        key: Optional[str] = None,
        locale: Optional[str] = None
    ) -> Dict[Any, Any]:
        return translatable().pluck_translated_with_fallback(cls, session, column, key, locale)

    @classmethod
    def new_collection(cls, models: Optional[List[Any]] = None) -> Collection[Any]:
        return Collection(models or [])


def _pluck_translated(collection: Collection[Any], attribute: str, locale: Optional[str] = None, key: Optional[str] = None) -> Any:
    """Collection macro: translated values of the items, keyed by ``key`` when given."""
    if key is None:
        return [item.get(attribute, locale) for item in collection]
    return {getattr(item, key): item.get(attribute, locale) for item in collection}


Collection.macro('pluck_translated', _pluck_translated)
