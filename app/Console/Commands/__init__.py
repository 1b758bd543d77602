from __future__ import annotations

"""
Console Commands Package

Artisan commands shipped with the application; the service provider
registers them with the kernel when it boots.
"""

from .TranslatableCommand import TranslatableMissingCommand

__all__ = [
    'TranslatableMissingCommand',
]
