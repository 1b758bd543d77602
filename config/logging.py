from __future__ import annotations

import os
from typing import Dict, Any

# Default logging channel
default = os.getenv('LOG_CHANNEL', 'stderr')

channels: Dict[str, Dict[str, Any]] = {
    'stack': {
        'driver': 'stack',
        'channels': ['stderr'],
        'ignore_exceptions': False,
    },

    'single': {
        'driver': 'single',
        'path': 'storage/logs/laravel.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
    },

    'daily': {
        'driver': 'daily',
        'path': 'storage/logs/laravel.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'days': 14,
    },

    'stderr': {
        'driver': 'stderr',
        'level': os.getenv('LOG_LEVEL', 'warning'),
        'formatter': 'laravel',
    },

    'json': {
        'driver': 'stderr',
        'level': os.getenv('LOG_LEVEL', 'warning'),
        'formatter': 'json',
    },

    'translatable': {
        'driver': os.getenv('TRANSLATABLE_LOG_DRIVER', 'stderr'),
        'path': 'storage/logs/translatable.log',
        'level': os.getenv('TRANSLATABLE_LOG_LEVEL', os.getenv('LOG_LEVEL', 'warning')),
        'formatter': 'laravel',
    },

    'null': {
        'driver': 'null',
    },
}

# Default logging level
level = os.getenv('LOG_LEVEL', 'warning')


def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration for the log manager"""
    return {
        'default': default,
        'channels': channels,
        'level': level,
    }
