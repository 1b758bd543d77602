from .Blueprint import Blueprint, ColumnDefinition
from .Migration import Migration, CreateTableMigration
from .DatabaseInspector import DatabaseInspector, ColumnInfo, IndexInfo

__all__ = [
    "Blueprint", "ColumnDefinition",
    "Migration", "CreateTableMigration",
    "DatabaseInspector", "ColumnInfo", "IndexInfo",
]
