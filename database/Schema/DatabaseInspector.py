from __future__ import annotations

from typing import List, Any, Optional, Union
from dataclasses import dataclass
from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from app.Exceptions import SchemaProbeException


@dataclass
class ColumnInfo:
    """Information about a database column."""
    name: str
    type: str
    nullable: bool
    default: Optional[Any]
    primary_key: bool


@dataclass
class IndexInfo:
    """Information about a database index."""
    name: str
    columns: List[str]
    unique: bool


class DatabaseInspector:
    """Inspects live database structure through SQLAlchemy's runtime inspector."""

    def __init__(self, bind: Union[Engine, Connection, None] = None) -> None:
        if bind is None:
            from config.database import engine
            bind = engine
        self.bind = bind

    def get_tables(self) -> List[str]:
        """Get list of all table names in the database."""
        try:
            return inspect(self.bind).get_table_names()
        except SQLAlchemyError as e:
            raise SchemaProbeException('*', str(e)) from e

    def table_exists(self, table_name: str) -> bool:
        try:
            return bool(inspect(self.bind).has_table(table_name))
        except SQLAlchemyError as e:
            raise SchemaProbeException(table_name, str(e)) from e

    def get_columns(self, table_name: str) -> List[ColumnInfo]:
        """
        Get column information for a table.

        Raises:
            SchemaProbeException: when the table is missing or cannot be inspected
        """
        try:
            insp = inspect(self.bind)
            if not insp.has_table(table_name):
                raise SchemaProbeException(table_name, 'table does not exist')
            primary = set(insp.get_pk_constraint(table_name).get('constrained_columns') or [])
            raw_columns = insp.get_columns(table_name)
        except SQLAlchemyError as e:
            raise SchemaProbeException(table_name, str(e)) from e

        return [
            ColumnInfo(
                name=column['name'],
                type=str(column['type']),
                nullable=bool(column.get('nullable', True)),
                default=column.get('default'),
                primary_key=column['name'] in primary,
            )
            for column in raw_columns
        ]

    def column_exists(self, table_name: str, column_name: str) -> bool:
        """Check if a column exists in a table."""
        return any(column.name == column_name for column in self.get_columns(table_name))

    def get_indexes(self, table_name: str) -> List[IndexInfo]:
        """Get indexes and unique constraints of a table."""
        try:
            insp = inspect(self.bind)
            indexes = [
                IndexInfo(index['name'], list(index['column_names']), bool(index.get('unique')))
                for index in insp.get_indexes(table_name)
            ]
            indexes.extend(
                IndexInfo(constraint['name'] or '', list(constraint['column_names']), True)
                for constraint in insp.get_unique_constraints(table_name)
            )
        except SQLAlchemyError as e:
            raise SchemaProbeException(table_name, str(e)) from e
        return indexes

    def index_exists(self, table_name: str, index_name: str) -> bool:
        """Check if an index exists on a table."""
        return any(index.name == index_name for index in self.get_indexes(table_name))

