"""
Tests pour ClientResolver.
"""

from unittest.mock import MagicMock

import pytest

from src.adapters.media.factory import ProviderFactory
from src.core.entities.client import Capability, ClientCategory
from src.core.errors import NotFoundError, PermissionDeniedError, UnsupportedFeatureError
from src.core.ports.repositories import IClientRepository
from src.services.client_resolver import ClientResolver


@pytest.fixture
def client_repo() -> MagicMock:
    return MagicMock(spec=IClientRepository)


@pytest.fixture
def factory() -> MagicMock:
    factory = MagicMock(spec=ProviderFactory)
    factory.get.side_effect = lambda config: f"provider-{config.id}"
    return factory


@pytest.fixture
def resolver(client_repo, factory) -> ClientResolver:
    return ClientResolver(client_repo, factory)


class TestResolve:
    def test_returns_provider_of_owned_client(self, resolver, client_repo, jellyfin_config):
        client_repo.get_by_id.return_value = jellyfin_config

        assert resolver.resolve(1, 1, Capability.MOVIES) == "provider-1"

    def test_unknown_client(self, resolver, client_repo):
        client_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            resolver.resolve(1, 9)

    def test_client_of_another_user(self, resolver, client_repo, jellyfin_config):
        client_repo.get_by_id.return_value = jellyfin_config

        with pytest.raises(PermissionDeniedError):
            resolver.resolve(2, 1)

    def test_missing_capability(self, resolver, client_repo, factory, subsonic_config):
        client_repo.get_by_id.return_value = subsonic_config

        with pytest.raises(UnsupportedFeatureError):
            resolver.resolve(1, 2, Capability.MOVIES)
        factory.get.assert_not_called()

    def test_disabled_client_has_no_capability(self, resolver, client_repo, jellyfin_config):
        jellyfin_config.enabled = False
        client_repo.get_by_id.return_value = jellyfin_config

        with pytest.raises(UnsupportedFeatureError):
            resolver.resolve(1, 1, Capability.MOVIES)


class TestResolveAll:
    def test_filters_on_capability(
        self, resolver, client_repo, jellyfin_config, subsonic_config, plex_config
    ):
        client_repo.get_by_category.return_value = [jellyfin_config, subsonic_config, plex_config]

        movies = resolver.resolve_all(1, Capability.MOVIES)
        music = resolver.resolve_all(1, Capability.MUSIC)

        assert movies == ["provider-1", "provider-3"]
        assert music == ["provider-1", "provider-2", "provider-3"]
        client_repo.get_by_category.assert_called_with(ClientCategory.MEDIA, 1)

    def test_broken_adapter_is_skipped(
        self, resolver, client_repo, factory, jellyfin_config, plex_config
    ):
        client_repo.get_by_category.return_value = [jellyfin_config, plex_config]
        factory.get.side_effect = [RuntimeError("boom"), "provider-3"]

        assert resolver.resolve_all(1, Capability.MOVIES) == ["provider-3"]

    def test_no_client(self, resolver, client_repo):
        client_repo.get_by_category.return_value = []

        assert resolver.resolve_all(1, Capability.MOVIES) == []
