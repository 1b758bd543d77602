from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy import create_engine, insert, table, column
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.Exceptions import SchemaProbeException
from app.Models import Post
from database.migrations.create_model_translations_table import CreateModelTranslationsTable
from database.migrations.create_posts_table import CreatePostsTable
from database.Schema import Blueprint, DatabaseInspector


@pytest.fixture
def bare_engine() -> Generator[Engine, None, None]:
    engine = create_engine('sqlite://', connect_args={'check_same_thread': False}, poolclass=StaticPool)
    yield engine
    engine.dispose()


class TestCreateModelTranslationsTable:

    def test_up_creates_columns_and_indexes(self, bare_engine: Engine) -> None:
        CreateModelTranslationsTable(bare_engine).up()
        inspector = DatabaseInspector(bare_engine)

        indexes = {index.name: index.columns for index in inspector.get_indexes('model_translations')}

        assert [column.name for column in inspector.get_columns('model_translations')] == [
            'id', 'translatable_type', 'translatable_id', 'locale', 'attribute_name', 'value', 'created_at', 'updated_at',
        ]
        assert indexes['idx_model_translations_translatable'] == ['translatable_type', 'translatable_id']
        assert indexes['unq_model_translations_translation'] == [
            'translatable_type', 'translatable_id', 'locale', 'attribute_name',
        ]
        assert inspector.index_exists('model_translations', 'ix_model_translations_locale')

    def test_one_row_per_model_attribute_and_locale(self, bare_engine: Engine) -> None:
        CreateModelTranslationsTable(bare_engine).up()
        translations = table(
            'model_translations',
            column('id'), column('translatable_type'), column('translatable_id'),
            column('locale'), column('attribute_name'), column('value'),
        )
        row = {'translatable_type': 'Post', 'translatable_id': '1', 'locale': 'fr', 'attribute_name': 'title'}

        with bare_engine.begin() as connection:
            connection.execute(insert(translations).values(id='a', value='Bonjour', **row))

        with pytest.raises(IntegrityError):
            with bare_engine.begin() as connection:
                connection.execute(insert(translations).values(id='b', value='Salut', **row))

    def test_down_drops_the_table(self, bare_engine: Engine) -> None:
        migration = CreateModelTranslationsTable(bare_engine)
        migration.up()

        migration.down()

        assert not migration.has_table('model_translations')

    def test_migration_name(self, bare_engine: Engine) -> None:
        assert CreateModelTranslationsTable(bare_engine).get_migration_name() == 'create_model_translations_table'


class TestCreatePostsTable:

    def test_migrated_schema_serves_the_models(self, bare_engine: Engine) -> None:
        CreateModelTranslationsTable(bare_engine).up()
        CreatePostsTable(bare_engine).up()

        with Session(bare_engine) as session:
            post = Post(title='Hello World')
            post.set('title', 'fr', 'Bonjour le monde')
            session.add(post)
            session.commit()

            assert post.slug == 'hello-world'
            assert post.status == 'draft'
            assert post.get('title', 'fr') == 'Bonjour le monde'
            assert post.get('title', 'de') == 'Hello World'

    def test_soft_delete_column(self, bare_engine: Engine) -> None:
        migration = CreatePostsTable(bare_engine)
        migration.up()

        assert migration.has_column('posts', 'deleted_at')
        assert DatabaseInspector(bare_engine).index_exists('posts', 'ix_posts_deleted_at')


class TestDatabaseInspector:

    def test_missing_table_cannot_be_probed(self, bare_engine: Engine) -> None:
        inspector = DatabaseInspector(bare_engine)

        assert not inspector.table_exists('posts')
        with pytest.raises(SchemaProbeException) as exc_info:
            inspector.column_exists('posts', 'title')
        assert exc_info.value.table == 'posts'

    def test_primary_key_is_reported(self, bare_engine: Engine) -> None:
        CreatePostsTable(bare_engine).up()

        columns = {info.name: info for info in DatabaseInspector(bare_engine).get_columns('posts')}

        assert columns['id'].primary_key
        assert not columns['title'].nullable
        assert columns['content'].nullable


class TestBlueprint:

    def test_rejects_invalid_definitions(self) -> None:
        blueprint = Blueprint('posts')

        with pytest.raises(ValueError):
            blueprint.string('title', 0)
        with pytest.raises(ValueError):
            blueprint.index([])

    def test_default_index_names(self) -> None:
        blueprint = Blueprint('posts')
        blueprint.string('slug')
        blueprint.unique('slug')
        blueprint.index(['status', 'published_at'])

        assert [index['name'] for index in blueprint.indexes] == ['unq_posts_slug', 'idx_posts_status_published_at']
