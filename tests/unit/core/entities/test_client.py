"""
Tests pour ClientConfig et le registre des capacites.
"""

import pytest

from src.core.entities.client import (
    Capability,
    ClientCategory,
    ClientConfig,
    ClientType,
    supports,
)
from src.core.entities.media import MediaType


class TestCapabilityRegistry:
    @pytest.mark.parametrize("client_type", [ClientType.PLEX, ClientType.JELLYFIN, ClientType.EMBY])
    def test_video_servers_support_everything(self, client_type):
        assert all(supports(client_type, capability) for capability in Capability)

    def test_subsonic_is_music_only(self):
        assert supports(ClientType.SUBSONIC, Capability.MUSIC)
        assert supports(ClientType.SUBSONIC, Capability.PLAYLISTS)
        assert not supports(ClientType.SUBSONIC, Capability.MOVIES)
        assert not supports(ClientType.SUBSONIC, Capability.COLLECTIONS)

    def test_tmdb_has_no_music_nor_playlists(self):
        assert supports(ClientType.TMDB, Capability.MOVIES)
        assert supports(ClientType.TMDB, Capability.COLLECTIONS)
        assert not supports(ClientType.TMDB, Capability.MUSIC)
        assert not supports(ClientType.TMDB, Capability.PLAYLISTS)

    def test_accepts_string_values(self):
        assert supports("subsonic", "music")

    @pytest.mark.parametrize(
        "media_type,capability",
        [
            (MediaType.EPISODE, Capability.SERIES),
            (MediaType.ALBUM, Capability.MUSIC),
            (MediaType.COLLECTION, Capability.COLLECTIONS),
        ],
    )
    def test_capability_for_media_type(self, media_type, capability):
        assert Capability.for_media_type(media_type) == capability


class TestClientConfig:
    def test_category(self):
        assert ClientType.TMDB.category == ClientCategory.METADATA
        assert ClientConfig(name="x", client_type="plex").category == ClientCategory.MEDIA

    def test_supports_shortcuts(self, subsonic_config):
        assert subsonic_config.supports_music
        assert subsonic_config.supports_playlists
        assert subsonic_config.supports_history
        assert not subsonic_config.supports_movies
        assert not subsonic_config.supports_series
        assert not subsonic_config.supports_collections

    def test_disabled_client_has_no_capability(self, jellyfin_config):
        jellyfin_config.enabled = False

        assert jellyfin_config.capabilities == frozenset()
        assert not jellyfin_config.supports(Capability.MOVIES)
