from __future__ import annotations

"""
Translatable Models Configuration
"""
import os
from typing import Any, Dict, List, cast


def _env_list(key: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(key, default).split(',') if item.strip()]


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() in ('1', 'true', 'yes', 'on')


TRANSLATABLE_CONFIG: Dict[str, Any] = {
    # Locales a translation may be written in
    'locales': _env_list('TRANSLATABLE_LOCALES', 'en,fr'),

    # Locale used when the requested one has no translation
    'fallback_locale': os.getenv('TRANSLATABLE_FALLBACK_LOCALE', os.getenv('APP_FALLBACK_LOCALE', 'en')),

    # Storage table for translation rows
    'translations_table': os.getenv('TRANSLATABLE_TABLE', 'model_translations'),

    # Load the current and fallback locales on first access
    'auto_load_translations': _env_bool('TRANSLATABLE_AUTO_LOAD', 'false'),

    # Cache the list of translatable attributes per model class
    'cache_translations': _env_bool('TRANSLATABLE_CACHE', 'true'),

    # Seconds
    'cache_duration': int(os.getenv('TRANSLATABLE_CACHE_DURATION', '3600')),

    # Cache store used for the attribute cache
    'cache_store': os.getenv('TRANSLATABLE_CACHE_STORE', 'array'),
}


def get_translatable_config() -> Dict[str, Any]:
    """Get translatable configuration"""
    config = TRANSLATABLE_CONFIG.copy()
    config['locales'] = list(config['locales'])
    return config


def get_locales() -> List[str]:
    """Get the locales translations may be written in"""
    return cast(List[str], TRANSLATABLE_CONFIG['locales']).copy()


def get_fallback_locale() -> str:
    """Get fallback locale"""
    return cast(str, TRANSLATABLE_CONFIG['fallback_locale'])


def get_translations_table() -> str:
    """Get translation storage table name"""
    return cast(str, TRANSLATABLE_CONFIG['translations_table'])
