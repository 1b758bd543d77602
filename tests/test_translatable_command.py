from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from app.Console.Artisan import CommandSignatureParser, kernel
from app.Console.Commands import TranslatableMissingCommand
from app.Support.ServiceContainer import container
from tests.models import Article, Category, Product


@pytest.fixture(autouse=True)
def command_session(db: Session) -> Session:
    """The command reads through the session bound in the container."""
    container.instance('db.session', db)
    kernel.register(TranslatableMissingCommand)
    return db


class TestSignature:

    def test_optional_argument_and_value_option(self) -> None:
        parsed = CommandSignatureParser.parse(TranslatableMissingCommand.signature)

        assert parsed['name'] == 'translatable:missing'
        assert parsed['arguments'] == [{'name': 'model', 'required': False, 'default': None}]
        assert parsed['options'] == [{'name': 'locale', 'has_value': True, 'default': None}]

    def test_flags_and_defaults(self) -> None:
        parsed = CommandSignatureParser.parse('demo {name} {count=3} {--force}')

        assert parsed['arguments'][0]['required'] is True
        assert parsed['arguments'][1]['default'] == '3'
        assert parsed['options'][0] == {'name': 'force', 'has_value': False, 'default': False}


class TestTranslatableMissingCommand:

    def test_reports_missing_translations(self, db: Session, capsys: pytest.CaptureFixture[str]) -> None:
        product = Product(name='Widget', sku='W-1')
        db.add(product)
        db.commit()

        exit_code = kernel.call('translatable:missing', {'model': 'Product', 'locale': 'fr'})

        output = capsys.readouterr().out
        assert exit_code == 0
        assert 'fr.name' in output
        assert 'fr.description' in output
        assert 'en.' not in output
        assert '2 missing translation(s).' in output

    def test_every_model_is_checked_by_default(self, db: Session, capsys: pytest.CaptureFixture[str]) -> None:
        db.add_all([Product(name='Widget', sku='W-1'), Category(title='Shoes', slug='shoes')])
        db.commit()

        assert kernel.call('translatable:missing') == 0

        output = capsys.readouterr().out
        assert 'Product' in output
        assert 'category' in output
        assert 'de.title' in output

    def test_trashed_models_are_skipped(self, db: Session, capsys: pytest.CaptureFixture[str]) -> None:
        article = Article(headline='Gone')
        db.add(article)
        db.commit()
        article.delete()
        db.commit()

        assert kernel.call('translatable:missing', {'model': 'Article'}) == 0
        assert 'No missing translations.' in capsys.readouterr().out

    def test_complete_models_report_nothing(self, db: Session, capsys: pytest.CaptureFixture[str]) -> None:
        category = Category(slug='shoes')
        category.set_translations('title', {'en': 'Shoes', 'fr': 'Chaussures', 'de': 'Schuhe'})
        db.add(category)
        db.commit()

        assert kernel.call('translatable:missing', {'model': 'category'}) == 0
        assert 'No missing translations.' in capsys.readouterr().out

    def test_unknown_model(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert kernel.call('translatable:missing', {'model': 'Invoice'}) == 1
        assert 'Unknown translatable model: Invoice' in capsys.readouterr().out

    def test_unknown_locale(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert kernel.call('translatable:missing', {'--locale': 'es'}) == 1
        assert "Locale 'es' is not configured" in capsys.readouterr().out

    def test_command_line_arguments(self, db: Session, capsys: pytest.CaptureFixture[str]) -> None:
        db.add(Product(name='Widget', sku='W-1'))
        db.commit()

        assert kernel.handle(['translatable:missing', 'Product', '--locale=de']) == 0

        output = capsys.readouterr().out
        assert 'de.name' in output
        assert 'fr.name' not in output

    def test_listed_with_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert kernel.handle([]) == 0
        assert 'translatable:missing' in capsys.readouterr().out

        assert kernel.handle(['help', 'translatable:missing']) == 0
        assert 'List missing translations' in capsys.readouterr().out
