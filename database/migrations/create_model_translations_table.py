from __future__ import annotations

from typing import Any

from database.Schema import Blueprint, CreateTableMigration
from config.translatable import get_translations_table


class CreateModelTranslationsTable(CreateTableMigration):
    """Create the polymorphic table holding per-locale attribute values."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.table_name = get_translations_table()

    def up(self) -> None:
        def build(table: Blueprint) -> None:
            table.id()
            table.morphs("translatable")
            table.string("locale", 10).index()
            table.string("attribute_name")
            table.text("value").nullable()
            table.timestamps()

            table.unique(
                ["translatable_type", "translatable_id", "locale", "attribute_name"],
                f"unq_{self.table_name}_translation",
            )

        self.create_table(self.table_name, build)
