from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

__all__ = ["engine", "SessionLocal", "get_database", "create_tables", "DATABASE_URL"]

# Any SQLAlchemy URL; the translations table only needs a unique index and text columns
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./storage/database.db")


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": os.getenv("DB_ECHO", "").lower() == "true"}

    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    else:
        options["pool_pre_ping"] = True
        options["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))

    return options


engine: Engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_database() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine = engine) -> None:
    """Create every table registered on the model metadata."""
    from app.Models import Base
    Base.metadata.create_all(bind=bind)
