from __future__ import annotations

import pytest

from app.Config import ConfigRepository, config, set_config_repository


class TestConfigRepository:

    @pytest.fixture
    def repository(self) -> ConfigRepository:
        return ConfigRepository({'translatable': {'locales': ['en', 'fr'], 'fallback_locale': 'en'}})

    def test_dot_notation(self, repository: ConfigRepository) -> None:
        assert repository.get('translatable.locales') == ['en', 'fr']
        assert repository.get('translatable.missing', 'default') == 'default'

        repository.set('cache.prefix', 'app')

        assert repository['cache.prefix'] == 'app'
        assert 'cache.prefix' in repository

    def test_forget(self, repository: ConfigRepository) -> None:
        repository.forget('translatable.fallback_locale')

        assert not repository.has('translatable.fallback_locale')
        with pytest.raises(KeyError):
            del repository['translatable.fallback_locale']

    def test_merge_config_from_keeps_existing_values(self, repository: ConfigRepository) -> None:
        repository.merge_config_from('translatable', lambda: {'locales': ['en'], 'cache_duration': 60})

        assert repository.get('translatable.locales') == ['en', 'fr']
        assert repository.get('translatable.cache_duration') == 60

    def test_all_returns_a_copy(self, repository: ConfigRepository) -> None:
        repository.all()['translatable']['locales'].append('de')

        assert repository.get('translatable.locales') == ['en', 'fr']


class TestConfigHelper:

    def test_defaults_are_loaded_from_config_modules(self) -> None:
        assert config('translatable.locales') == ['en', 'fr', 'de']
        assert config('translatable.translations_table') == 'model_translations'
        assert config('app.locale') == 'en'

    def test_repository_can_be_swapped(self) -> None:
        set_config_repository(ConfigRepository({'app': {'locale': 'nl'}}))

        assert config('app.locale') == 'nl'

    def test_changes_do_not_leak_into_config_modules(self) -> None:
        config().set('translatable.locales', ['en'])
        set_config_repository(None)

        assert config('translatable.locales') == ['en', 'fr', 'de']
