from .database import get_database, create_tables, engine, SessionLocal
from .translatable import get_translatable_config

__all__ = ["get_database", "create_tables", "engine", "SessionLocal", "get_translatable_config"]
