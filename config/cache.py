from __future__ import annotations

import os
from typing import Dict, Any

CACHE_CONFIG: Dict[str, Any] = {
    # Default cache store
    'default': os.getenv('CACHE_STORE', 'array'),

    'stores': {
        'array': {
            'driver': 'array',
        },

        'file': {
            'driver': 'file',
            'path': os.getenv('CACHE_PATH', 'storage/framework/cache'),
        },
    },

    # Key prefix shared by every store
    'prefix': os.getenv('CACHE_PREFIX', 'laravel_cache'),
}


def get_cache_config() -> Dict[str, Any]:
    """Get cache configuration"""
    return CACHE_CONFIG.copy()
