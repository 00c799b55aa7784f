"""
Tests des routes media agregees et d'acces direct a un client.
"""

from src.core.entities.client import Capability, ClientType
from src.core.errors import ProviderError
from tests.conftest import make_movie
from tests.fixtures.fake_providers import FakeMediaProvider, FakeSeriesProvider
from tests.fixtures.web import USER_HEADERS, client, container, resolver  # noqa: F401


def movies_provider() -> FakeMediaProvider:
    return FakeMediaProvider(
        1,
        [
            make_movie("Matrix", 1, "m1", rating=8.2),
            make_movie("Alien", 1, "m2", rating=8.5),
        ],
        client_type=ClientType.JELLYFIN,
    )


def test_search_movies_reports_client_errors(client, resolver):
    broken = FakeMediaProvider(3, error=ProviderError("unreachable", "plex"))
    resolver.resolve_all.return_value = [movies_provider(), broken]

    response = client.get("/movies?sort=rating&limit=1", headers=USER_HEADERS)

    assert response.status_code == 200
    data = response.json()["data"]
    assert [i["title"] for i in data["items"]] == ["Alien"]
    assert data["total"] == 2
    assert data["client_counts"] == {"1": 2}
    assert "unreachable" in data["client_errors"]["3"]


def test_filters_are_forwarded(client, resolver):
    provider = movies_provider()
    resolver.resolve_all.return_value = [provider]

    response = client.get("/movies/genre/Action?limit=5", headers=USER_HEADERS)

    assert response.status_code == 200
    assert provider.received[0].genre == "Action"
    assert provider.received[0].limit == 5


def test_limit_is_bounded(client, resolver):
    response = client.get("/movies?limit=1000", headers=USER_HEADERS)

    assert response.status_code == 400


def test_client_item(client, resolver):
    resolver.resolve.return_value = movies_provider()

    response = client.get("/clients/media/1/movies/m1", headers=USER_HEADERS)

    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Matrix"
    assert resolver.resolve.call_args.args[:2] == (1, 1)


def test_client_item_not_found(client, resolver):
    resolver.resolve.return_value = movies_provider()

    response = client.get("/clients/media/1/movies/absent", headers=USER_HEADERS)

    assert response.status_code == 404


def test_unsupported_domain_on_client(client, resolver):
    resolver.resolve.return_value = movies_provider()

    response = client.get("/clients/media/1/tracks", headers=USER_HEADERS)

    assert response.status_code == 400


def test_unknown_domain(client, resolver):
    response = client.get("/clients/media/1/podcasts", headers=USER_HEADERS)

    assert response.status_code == 400
    assert "unknown media domain" in response.json()["message"]


def test_series_seasons(client, resolver):
    resolver.resolve.return_value = FakeSeriesProvider(1, "bb", seasons=2)

    response = client.get("/clients/media/1/series/bb/seasons", headers=USER_HEADERS)

    assert response.status_code == 200
    assert [s["title"] for s in response.json()["data"]] == ["Saison 1", "Saison 2"]


def test_season_episodes(client, resolver):
    resolver.resolve.return_value = FakeSeriesProvider(1, "bb", episodes_per_season=2)

    response = client.get(
        "/clients/media/1/series/bb/seasons/2/episodes", headers=USER_HEADERS
    )

    assert response.status_code == 200
    assert [e["title"] for e in response.json()["data"]] == ["S02E01", "S02E02"]


def test_seasons_of_unknown_series(client, resolver):
    resolver.resolve.return_value = FakeSeriesProvider(1, "bb")

    response = client.get("/clients/media/1/series/absent/seasons", headers=USER_HEADERS)

    assert response.status_code == 404


def test_play_history(client, resolver):
    history = [make_movie("Matrix", 1, "m1"), make_movie("Alien", 1, "m2")]
    provider = FakeSeriesProvider(1, history=history)
    resolver.resolve.return_value = provider

    response = client.get("/clients/media/1/history?limit=1", headers=USER_HEADERS)

    assert response.status_code == 200
    assert [i["title"] for i in response.json()["data"]] == ["Matrix"]
    assert provider.received[0].limit == 1
    assert resolver.resolve.call_args.args == (1, 1, Capability.HISTORY)
