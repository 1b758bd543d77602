from __future__ import annotations

from typing import Any, List, Optional, Union, Dict
from sqlalchemy import Column, DateTime, Index, Integer, MetaData, String, Table, Text, UniqueConstraint, func


class ColumnDefinition:
    """Represents a column definition in Laravel style."""

    def __init__(self, name: str, column_type: Any) -> None:
        if not name or not isinstance(name, str):
            raise ValueError(f"Invalid column name: {name}")

        self.name: str = name
        self.column_type = column_type
        self.nullable_flag: bool = False
        self.default_value: Any = None
        self.primary: bool = False
        self.unique_flag: bool = False
        self.index_flag: bool = False

    def nullable(self, nullable: bool = True) -> ColumnDefinition:
        self.nullable_flag = nullable
        return self

    def default(self, value: Any) -> ColumnDefinition:
        self.default_value = value
        return self

    def primary_key(self) -> ColumnDefinition:
        self.primary = True
        return self

    def unique(self) -> ColumnDefinition:
        self.unique_flag = True
        return self

    def index(self) -> ColumnDefinition:
        self.index_flag = True
        return self

    def to_sqlalchemy_column(self) -> Column:
        """Convert to SQLAlchemy Column."""
        kwargs: Dict[str, Any] = {
            'nullable': self.nullable_flag,
            'primary_key': self.primary,
            'unique': self.unique_flag,
            'index': self.index_flag,
        }
        if self.default_value is not None:
            kwargs['server_default'] = self.default_value
        return Column(self.name, self.column_type, **kwargs)


class Blueprint:
    """Laravel-style database schema blueprint."""

    def __init__(self, table_name: str) -> None:
        if not table_name or not isinstance(table_name, str):
            raise ValueError(f"Invalid table name: {table_name}")

        self.table_name: str = table_name
        self.columns: List[ColumnDefinition] = []
        self.indexes: List[Dict[str, Any]] = []

    def _add(self, name: str, column_type: Any) -> ColumnDefinition:
        col = ColumnDefinition(name, column_type)
        self.columns.append(col)
        return col

    # Column Types

    def id(self, name: str = "id") -> ColumnDefinition:
        """Create a UUID string primary key column."""
        return self._add(name, String(36)).primary_key()

    def increments(self, name: str = "id") -> ColumnDefinition:
        return self._add(name, Integer).primary_key()

    def string(self, name: str, length: int = 255) -> ColumnDefinition:
        if not isinstance(length, int) or length <= 0:
            raise ValueError(f"Length must be a positive integer, got {length}")
        return self._add(name, String(length))

    def text(self, name: str) -> ColumnDefinition:
        return self._add(name, Text)

    def timestamp(self, name: str) -> ColumnDefinition:
        return self._add(name, DateTime(timezone=True))

    def timestamps(self) -> List[ColumnDefinition]:
        """Add created_at and updated_at timestamps."""
        created_at = self.timestamp("created_at").nullable().default(func.now())
        updated_at = self.timestamp("updated_at").nullable().default(func.now())
        return [created_at, updated_at]

    def soft_deletes(self) -> ColumnDefinition:
        """Add soft delete column."""
        return self.timestamp("deleted_at").nullable().index()

    def morphs(self, name: str) -> List[ColumnDefinition]:
        """Add polymorphic columns (type and id) with a composite index."""
        columns = [
            self.string(f"{name}_type"),
            self.string(f"{name}_id", 36),
        ]
        self.index([f"{name}_type", f"{name}_id"], f"idx_{self.table_name}_{name}")
        return columns

    # Indexes and Constraints

    def index(self, columns: Union[str, List[str]], name: Optional[str] = None) -> Blueprint:
        return self._add_index(columns, name, unique=False)

    def unique(self, columns: Union[str, List[str]], name: Optional[str] = None) -> Blueprint:
        return self._add_index(columns, name, unique=True)

    def _add_index(self, columns: Union[str, List[str]], name: Optional[str], unique: bool) -> Blueprint:
        if isinstance(columns, str):
            columns = [columns]

        if not columns or not all(isinstance(col, str) for col in columns):
            raise ValueError(f"Invalid columns for index: {columns}")

        prefix = 'unq' if unique else 'idx'
        self.indexes.append({
            'name': name or f"{prefix}_{self.table_name}_{'_'.join(columns)}",
            'columns': columns,
            'unique': unique,
        })
        return self

    def to_table(self, metadata: MetaData) -> Table:
        """Build the SQLAlchemy table described by this blueprint."""
        table = Table(self.table_name, metadata, *[col.to_sqlalchemy_column() for col in self.columns])
        for index in self.indexes:
            columns = [table.c[column] for column in index['columns']]
            if index['unique']:
                table.append_constraint(UniqueConstraint(*columns, name=index['name']))
            else:
                Index(index['name'], *columns)
        return table
