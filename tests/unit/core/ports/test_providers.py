"""
Tests pour le port IMediaProvider.

Un adaptateur minimal ne surcharge que test_connection : toutes les
autres operations de domaine doivent lever UnsupportedFeatureError.
"""

import pytest

from src.core.entities.client import Capability, ClientConfig, ClientType
from src.core.errors import UnsupportedFeatureError
from src.core.ports.providers import IMediaProvider
from src.core.value_objects.query_options import QueryOptions


class MinimalProvider(IMediaProvider):
    async def test_connection(self) -> bool:
        return True


@pytest.fixture
def provider() -> MinimalProvider:
    return MinimalProvider(
        ClientConfig(
            id=5,
            user_id=1,
            name="Navidrome",
            client_type=ClientType.SUBSONIC,
            base_url="http://navidrome:4533",
            username="alice",
            password="secret",
        )
    )


def test_identity_comes_from_config(provider: MinimalProvider):
    assert provider.client_id == 5
    assert provider.client_type == ClientType.SUBSONIC
    assert provider.config.name == "Navidrome"


def test_supports_follows_capability_registry(provider: MinimalProvider):
    assert provider.supports(Capability.MUSIC)
    assert provider.supports(Capability.PLAYLISTS)
    assert not provider.supports(Capability.MOVIES)
    assert not provider.supports(Capability.COLLECTIONS)


def test_disabled_client_supports_nothing(provider: MinimalProvider):
    provider.config.enabled = False

    assert not provider.supports(Capability.MUSIC)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda p: p.get_movies(QueryOptions()),
        lambda p: p.get_movie("1"),
        lambda p: p.get_series(QueryOptions()),
        lambda p: p.get_seasons("1"),
        lambda p: p.get_tracks(QueryOptions()),
        lambda p: p.get_playlist("1"),
        lambda p: p.create_playlist("Favoris"),
        lambda p: p.reorder_playlist_items("1", ["a"]),
        lambda p: p.get_collections(QueryOptions()),
        lambda p: p.add_collection_item("1", "a"),
        lambda p: p.get_play_history(QueryOptions()),
    ],
)
async def test_default_operations_are_unsupported(provider: MinimalProvider, call):
    with pytest.raises(UnsupportedFeatureError) as exc_info:
        await call(provider)
    assert "subsonic" in str(exc_info.value)


@pytest.mark.asyncio
async def test_close_is_a_noop(provider: MinimalProvider):
    assert await provider.close() is None
