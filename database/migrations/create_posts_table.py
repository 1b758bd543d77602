from __future__ import annotations

from database.Schema import Blueprint, CreateTableMigration


class CreatePostsTable(CreateTableMigration):
    """Create posts table migration."""

    table_name = "posts"

    def up(self) -> None:
        def create_posts_table(table: Blueprint) -> None:
            table.id()
            table.string("title")
            table.string("slug").unique()
            table.text("content").nullable()
            table.text("excerpt").nullable()
            table.string("status", 20).default("draft").index()
            table.timestamp("published_at").nullable()
            table.timestamps()
            table.soft_deletes()

        self.create_table(self.table_name, create_posts_table)
