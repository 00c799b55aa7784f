"""
Tests unitaires pour ProviderFactory.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.adapters.api.cache import APICache
from src.adapters.api.tmdb_client import TMDBMediaProvider
from src.adapters.media.emby_client import EmbyClient
from src.adapters.media.factory import ProviderFactory
from src.adapters.media.jellyfin_client import JellyfinClient
from src.adapters.media.plex_client import PlexClient
from src.adapters.media.subsonic_client import SubsonicClient
from src.core.entities.client import ClientConfig, ClientType


@pytest.fixture
def factory(tmp_path: Path) -> ProviderFactory:
    cache = APICache(tmp_path / "cache")
    yield ProviderFactory(cache=cache, timeout=5)
    cache.close()


@pytest.mark.parametrize(
    "client_type,expected",
    [
        (ClientType.JELLYFIN, JellyfinClient),
        (ClientType.EMBY, EmbyClient),
        (ClientType.PLEX, PlexClient),
        (ClientType.SUBSONIC, SubsonicClient),
        (ClientType.TMDB, TMDBMediaProvider),
    ],
)
def test_create_builds_adapter_for_type(factory, client_type, expected) -> None:
    config = ClientConfig(id=1, name="x", client_type=client_type, base_url="http://h")

    provider = factory.create(config)

    assert isinstance(provider, expected)
    assert provider.client_id == 1
    assert provider.client_type == client_type


def test_get_reuses_instance_per_client(factory, jellyfin_config) -> None:
    assert factory.get(jellyfin_config) is factory.get(jellyfin_config)


def test_unsaved_config_is_not_cached(factory) -> None:
    config = ClientConfig(name="essai", client_type=ClientType.PLEX, base_url="http://plex")

    assert factory.get(config) is not factory.get(config)


@pytest.mark.asyncio
async def test_invalidate_closes_and_forgets(factory, jellyfin_config) -> None:
    provider = factory.get(jellyfin_config)
    provider.close = AsyncMock()

    await factory.invalidate(jellyfin_config.id)

    provider.close.assert_awaited_once()
    assert factory.get(jellyfin_config) is not provider


@pytest.mark.asyncio
async def test_close_all(factory, jellyfin_config, subsonic_config) -> None:
    providers = [factory.get(jellyfin_config), factory.get(subsonic_config)]
    for provider in providers:
        provider.close = AsyncMock()

    await factory.close_all()

    for provider in providers:
        provider.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_invalidate_unknown_client_is_noop(factory) -> None:
    await factory.invalidate(404)
