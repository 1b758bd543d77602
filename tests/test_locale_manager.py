from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, Optional

import pytest

from app.Config import config
from app.Localization import LocaleDetector, LocaleManager, LocaleValidator, current_locale, get_locale_manager
from app.Support.ServiceContainer import container


def make_request(
    query: Optional[Dict[str, str]] = None,
    cookies: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    path: str = '/',
) -> Any:
    return SimpleNamespace(
        query_params=query or {},
        cookies=cookies or {},
        headers=headers or {},
        url=SimpleNamespace(path=path),
    )


@pytest.fixture
def manager() -> LocaleManager:
    return LocaleManager(default_locale='en', fallback_locale='en', supported_locales=['en', 'fr', 'de'])


class TestLocaleDetector:

    def test_accept_language_prefers_highest_quality(self) -> None:
        detector = LocaleDetector()

        assert detector.parse_accept_language('en;q=0.5, fr-CA;q=0.9, de;q=0.7', ['en', 'fr', 'de']) == 'fr'

    def test_accept_language_keeps_header_order_on_ties(self) -> None:
        detector = LocaleDetector()

        assert detector.parse_accept_language('de, fr', ['en', 'fr', 'de']) == 'de'

    def test_accept_language_ignores_unsupported_and_zero_quality(self) -> None:
        detector = LocaleDetector()

        assert detector.parse_accept_language('es, fr;q=0', ['en', 'fr']) is None
        assert detector.parse_accept_language('fr;q=bad, en;q=0.1', ['en', 'fr']) == 'en'

    def test_path_prefix(self) -> None:
        detector = LocaleDetector()

        assert detector.detect_from_path_prefix(make_request(path='/fr/posts'), ['en', 'fr']) == 'fr'
        assert detector.detect_from_path_prefix(make_request(path='/posts'), ['en', 'fr']) is None


class TestLocaleValidator:

    def test_normalizes_region_codes(self) -> None:
        validator = LocaleValidator()

        assert validator.normalize_locale_code('pt_br') == 'pt-BR'
        assert validator.extract_language_code('pt_BR') == 'pt'


class TestLocaleManager:

    def test_detection_order(self, manager: LocaleManager) -> None:
        request = make_request(query={'locale': 'de'}, cookies={'locale': 'fr'}, headers={'Accept-Language': 'en'})

        assert manager.detect_locale(request) == 'de'
        assert manager.detect_locale(make_request(cookies={'locale': 'fr'}, headers={'Accept-Language': 'de'})) == 'fr'
        assert manager.detect_locale(make_request(headers={'Accept-Language': 'de-AT'})) == 'de'
        assert manager.detect_locale(make_request()) == 'en'

    def test_unsupported_detection_is_skipped(self, manager: LocaleManager) -> None:
        request = make_request(query={'locale': 'es'}, cookies={'locale': 'fr'})

        assert manager.detect_locale(request) == 'fr'

    def test_region_maps_to_language(self, manager: LocaleManager) -> None:
        assert manager.is_supported_locale('fr_CA')
        assert manager.get_fallback_locale('fr_CA') == 'fr'
        assert manager.get_fallback_locale('es') == 'en'
        assert manager.get_fallback_locale() == 'en'

    def test_current_locale_defaults(self, manager: LocaleManager) -> None:
        assert manager.get_current_locale() == 'en'
        assert not manager.has_current_locale()

    def test_set_and_reset_current_locale(self, manager: LocaleManager) -> None:
        token = manager.set_current_locale('fr')
        assert manager.get_current_locale() == 'fr'

        manager.reset_current_locale(token)
        assert manager.get_current_locale() == 'en'

    def test_unsupported_current_locale_becomes_default(self, manager: LocaleManager) -> None:
        token = manager.set_current_locale('es')
        try:
            assert current_locale.get() == 'en'
        finally:
            manager.reset_current_locale(token)

    def test_using_locale_restores_on_error(self, manager: LocaleManager) -> None:
        with pytest.raises(KeyError):
            with manager.using_locale('de'):
                assert manager.get_current_locale() == 'de'
                raise KeyError('locale')

        assert manager.get_current_locale() == 'en'

    def test_concurrent_tasks_see_their_own_locale(self, manager: LocaleManager) -> None:
        async def read_in(locale: str) -> str:
            with manager.using_locale(locale):
                await asyncio.sleep(0)
                return manager.get_current_locale()

        async def run() -> list:
            return list(await asyncio.gather(read_in('fr'), read_in('de'), read_in('en')))

        assert asyncio.run(run()) == ['fr', 'de', 'en']
        assert manager.get_current_locale() == 'en'

    def test_from_config(self) -> None:
        config().set('translatable.locales', ['en', 'nl'])
        config().set('app.locale', 'nl')

        manager = LocaleManager.from_config()

        assert manager.default_locale == 'nl'
        assert manager.get_supported_locales() == ['en', 'nl']
        assert manager.get_fallback_locale() == 'en'


class TestGetLocaleManager:

    def test_container_binding_wins(self, manager: LocaleManager) -> None:
        container.instance('locale_manager', manager)

        assert get_locale_manager() is manager

    def test_default_manager_is_cached(self) -> None:
        assert get_locale_manager() is get_locale_manager()
