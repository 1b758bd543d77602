from __future__ import annotations

from .LogManager import (
    LogManager,
    LogChannel,
    LaravelFormatter,
    JsonFormatter,
    get_log_manager,
    logger,
)

__all__ = [
    'LogManager',
    'LogChannel',
    'LaravelFormatter',
    'JsonFormatter',
    'get_log_manager',
    'logger',
]
