from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union

from sqlalchemy import MetaData, Table
from sqlalchemy.engine import Connection, Engine

from .Blueprint import Blueprint
from .DatabaseInspector import DatabaseInspector


class Migration(ABC):
    """Laravel-style migration base class executing against a SQLAlchemy bind."""

    def __init__(self, bind: Union[Engine, Connection, None] = None) -> None:
        if bind is None:
            from config.database import engine
            bind = engine
        self.bind = bind
        self.logger = logging.getLogger(self.__class__.__name__)
        self._metadata: MetaData = MetaData()
        self._tables_created: List[str] = []

    @abstractmethod
    def up(self) -> None:
        """Run the migrations."""
        pass

    @abstractmethod
    def down(self) -> None:
        """Reverse the migrations."""
        pass

    def get_migration_name(self) -> str:
        """Get the migration name from class name."""
        name = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', self.__class__.__name__)
        return re.sub('([a-z0-9])([A-Z])', r'\1_\2', name).lower()

    # Schema Builder Methods

    def create_table(self, table_name: str, callback: Callable[[Blueprint], None]) -> Table:
        """Create a new table from a Blueprint callback."""
        blueprint = Blueprint(table_name)
        callback(blueprint)

        table = blueprint.to_table(self._metadata)
        table.create(self.bind, checkfirst=True)
        self._tables_created.append(table_name)
        self.logger.info(f"Created table: {table_name}")
        return table

    def drop_table_if_exists(self, table_name: str) -> None:
        """Drop a table if it exists."""
        if not self.has_table(table_name):
            return
        table = self._metadata.tables.get(table_name)
        if table is None:
            table = Table(table_name, MetaData(), autoload_with=self.bind)
        table.drop(self.bind)
        if table.metadata is self._metadata:
            self._metadata.remove(table)
        self.logger.info(f"Dropped table: {table_name}")

    def has_table(self, table_name: str) -> bool:
        return DatabaseInspector(self.bind).table_exists(table_name)

    def has_column(self, table_name: str, column_name: str) -> bool:
        return DatabaseInspector(self.bind).column_exists(table_name, column_name)


class CreateTableMigration(Migration):
    """Base class for table creation migrations; ``down`` drops ``table_name``."""

    table_name: Optional[str] = None

    def down(self) -> None:
        if not self.table_name:
            raise RuntimeError("Cannot determine table name for rollback")
        self.drop_table_if_exists(self.table_name)
