"""
Tests des routes de metadonnees TMDB.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from dependency_injector import providers

from src.adapters.api.tmdb_client import TMDBClient
from tests.conftest import make_movie
from tests.fixtures.web import USER_HEADERS, client, container  # noqa: F401


@pytest.fixture
def tmdb(container, test_settings) -> MagicMock:
    tmdb = MagicMock(spec=TMDBClient)
    tmdb.search_movies = AsyncMock(return_value=[make_movie("Avatar", 7, "19995")])
    tmdb.get_movie = AsyncMock(return_value=None)
    container.config.override(
        providers.Object(test_settings.model_copy(update={"tmdb_api_key": "key"}))
    )
    container.tmdb_client.override(providers.Object(tmdb))
    return tmdb


def test_disabled_without_api_key(client):
    response = client.get("/metadata/movies?q=avatar", headers=USER_HEADERS)

    assert response.status_code == 400
    assert "not configured" in response.json()["message"]


def test_search_movies(client, tmdb):
    response = client.get("/metadata/movies?q=avatar&year=2009", headers=USER_HEADERS)

    assert response.status_code == 200
    assert [m["title"] for m in response.json()["data"]] == ["Avatar"]
    tmdb.search_movies.assert_awaited_once_with("avatar", 2009)


def test_missing_movie(client, tmdb):
    response = client.get("/metadata/movies/42", headers=USER_HEADERS)

    assert response.status_code == 404
