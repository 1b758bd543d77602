from __future__ import annotations

from typing import Dict, Generator

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.Http.Middleware import LocaleMiddleware
from app.Localization import LocaleManager
from app.Models import Post
from app.Services.TranslatableService import translatable
from config import get_database


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    manager = LocaleManager(default_locale='en', fallback_locale='en', supported_locales=['en', 'fr', 'de'])
    app.add_middleware(LocaleMiddleware, locale_manager=manager)

    @app.get('/locale')
    async def show_locale(request: Request) -> Dict[str, str]:
        return {'state': request.state.locale, 'current': translatable().get_current_locale()}

    return TestClient(app)


class TestLocaleMiddleware:

    def test_query_parameter(self, client: TestClient) -> None:
        response = client.get('/locale', params={'locale': 'fr'})

        assert response.json() == {'state': 'fr', 'current': 'fr'}
        assert response.headers['Content-Language'] == 'fr'
        assert response.headers['X-App-Locale'] == 'fr'

    def test_cookie(self, client: TestClient) -> None:
        client.cookies.set('locale', 'de')

        response = client.get('/locale')

        assert response.json()['current'] == 'de'
        assert 'set-cookie' not in response.headers

    def test_accept_language(self, client: TestClient) -> None:
        response = client.get('/locale', headers={'Accept-Language': 'de-DE,de;q=0.9,en;q=0.5'})

        assert response.json()['current'] == 'de'

    def test_unsupported_locale_uses_default(self, client: TestClient) -> None:
        response = client.get('/locale', params={'locale': 'es'})

        assert response.json()['current'] == 'en'

    def test_detected_locale_is_remembered_in_cookie(self, client: TestClient) -> None:
        response = client.get('/locale', params={'locale': 'fr'})

        assert response.cookies.get('locale') == 'fr'

    def test_locale_does_not_outlive_the_request(self, client: TestClient) -> None:
        client.get('/locale', params={'locale': 'fr'})

        assert translatable().get_current_locale() == 'en'


class TestPostRoutes:

    @pytest.fixture
    def api(self, db: Session) -> Generator[TestClient, None, None]:
        from main import app

        def override() -> Generator[Session, None, None]:
            yield db

        app.dependency_overrides[get_database] = override
        yield TestClient(app)
        app.dependency_overrides.clear()

    @pytest.fixture
    def post(self, db: Session) -> Post:
        post = Post(title='Hello World', content='Body', status='published')
        post.set('title', 'fr', 'Bonjour le monde')
        db.add(post)
        db.commit()
        return post

    def test_titles_in_request_locale(self, api: TestClient, post: Post) -> None:
        response = api.get('/posts/', params={'locale': 'fr'})

        assert response.json() == {'locale': 'fr', 'titles': {'hello-world': 'Bonjour le monde'}}

    def test_titles_fall_back(self, api: TestClient, post: Post) -> None:
        response = api.get('/posts/', headers={'Accept-Language': 'de'})

        assert response.json() == {'locale': 'de', 'titles': {'hello-world': 'Hello World'}}

    def test_show_post(self, api: TestClient, post: Post) -> None:
        response = api.get(f'/posts/{post.id}', params={'locale': 'fr'})

        body = response.json()
        assert response.status_code == 200
        assert body['title'] == 'Bonjour le monde'
        assert body['content'] == 'Body'
        assert body['completeness']['completed'] == 3

    def test_trashed_post_is_not_found(self, db: Session, api: TestClient, post: Post) -> None:
        post_id = post.id
        post.delete()
        db.commit()

        assert api.get(f'/posts/{post_id}').status_code == 404
