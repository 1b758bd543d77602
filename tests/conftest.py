from __future__ import annotations

import importlib
import os

# Read by the config modules at import time
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['APP_LOCALE'] = 'en'
os.environ['APP_FALLBACK_LOCALE'] = 'en'
os.environ['TRANSLATABLE_LOCALES'] = 'en,fr,de'
os.environ['TRANSLATABLE_FALLBACK_LOCALE'] = 'en'
os.environ['TRANSLATABLE_CACHE_STORE'] = 'array'
os.environ['TRANSLATABLE_LOG_DRIVER'] = 'null'

from typing import Generator, List

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.Config import set_config_repository
from app.Localization import current_locale
from app.Models import Base
from app.Services.TranslatableService import TranslatableService, translatable
from app.Support.Facades import Facade
from app.Support.ServiceContainer import container
from tests.models import Article, Category, Product  # noqa: F401

# The packages re-export classes under the module names, so bind the modules explicitly
locale_module = importlib.import_module('app.Localization.LocaleManager')
service_module = importlib.import_module('app.Services.TranslatableService')


@pytest.fixture(autouse=True)
def fresh_application() -> Generator[None, None, None]:
    """Every test starts from default config, an empty container and empty caches."""
    set_config_repository(None)
    container.flush()
    Facade.clear_resolved_instances()
    TranslatableService.flush_column_cache()
    service_module._default_service = None
    locale_module._locale_manager = None
    token = current_locale.set(None)

    yield

    current_locale.reset(token)
    container.flush()
    Facade.clear_resolved_instances()
    TranslatableService.flush_column_cache()
    service_module._default_service = None
    locale_module._locale_manager = None
    set_config_repository(None)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite shared by every connection of the test."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    """Session configured like ``SessionLocal``."""
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def service() -> TranslatableService:
    return translatable()


@pytest.fixture
def statements(engine: Engine) -> Generator[List[str], None, None]:
    """SQL statements executed on the engine while the test runs."""
    executed: List[str] = []

    def record(conn, cursor, statement, parameters, context, executemany) -> None:  # type: ignore[no-untyped-def]
        executed.append(statement)

    event.listen(engine, 'before_cursor_execute', record)
    yield executed
    event.remove(engine, 'before_cursor_execute', record)
