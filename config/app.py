from __future__ import annotations

import os
from typing import Dict, Any


def get_app_config() -> Dict[str, Any]:
    """
    Laravel-style application configuration.

    Only the options the translatable package reads are kept here: the
    application name, environment, and locale settings.
    """

    return {
        # Application Name
        'name': os.getenv('APP_NAME', 'FastAPI Laravel Translatable'),

        # Application Environment
        'env': os.getenv('APP_ENV', 'production'),

        # Application Debug Mode
        'debug': os.getenv('APP_DEBUG', 'false').lower() == 'true',

        # Application Locale Configuration
        # The application locale is the ambient locale used when no request
        # or explicit override has set one.
        'locale': os.getenv('APP_LOCALE', 'en'),

        # Application Fallback Locale
        # The fallback locale determines the locale to use when the current one
        # has no translation.
        'fallback_locale': os.getenv('APP_FALLBACK_LOCALE', 'en'),

        # Available Locales
        # Locales the application accepts from requests.
        'available_locales': [
            locale.strip()
            for locale in os.getenv('APP_AVAILABLE_LOCALES', 'en,fr').split(',')
            if locale.strip()
        ],

        # Autoloaded Service Providers
        'providers': [
            'app.Providers.TranslatableServiceProvider.TranslatableServiceProvider',
        ],

        # Class Aliases
        'aliases': {
            'Translatable': 'app.Support.Facades.Translatable',
        },
    }
