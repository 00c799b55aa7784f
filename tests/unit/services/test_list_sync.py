"""
Tests pour ListSyncService : push d'une liste interne vers des clients.

La liste interne fait foi ; les tests verifient les operations
poussees et l'etat de synchronisation enregistre par client.
"""

from unittest.mock import MagicMock

import pytest

from src.core.entities.client import ClientType
from src.core.entities.lists import SyncClientState, SyncStatus
from src.core.entities.media import MediaType
from src.core.errors import NotFoundError, PermissionDeniedError, ProviderError
from src.infrastructure.persistence.repositories.media_item_repository import (
    SQLModelMediaItemRepository,
)
from src.services.catalog import CatalogService
from src.services.client_resolver import ClientResolver
from src.services.list_sync import ListSyncService
from src.services.lists import ListService
from tests.conftest import make_movie
from tests.fixtures.fake_providers import FakeListProvider, only, remote_ids

USER = 1
JELLYFIN = 1
PLEX = 3


@pytest.fixture
def providers() -> dict[int, FakeListProvider]:
    return {
        JELLYFIN: FakeListProvider(JELLYFIN),
        PLEX: FakeListProvider(PLEX, ClientType.PLEX),
    }


@pytest.fixture
def resolver(providers) -> MagicMock:
    def resolve(user_id, client_id, capability=None):
        if client_id not in providers:
            raise NotFoundError(f"client {client_id} not found")
        return providers[client_id]

    resolver = MagicMock(spec=ClientResolver)
    resolver.resolve.side_effect = resolve
    return resolver


@pytest.fixture
def catalog(session) -> CatalogService:
    return CatalogService(SQLModelMediaItemRepository(session))


@pytest.fixture
def list_service(session, catalog) -> ListService:
    return ListService(SQLModelMediaItemRepository(session), catalog, MediaType.PLAYLIST)


@pytest.fixture
def sync(resolver, list_service) -> ListSyncService:
    return ListSyncService(resolver, list_service)


@pytest.fixture
def movies(catalog) -> list[int]:
    """Matrix et Alien connus des deux clients, Heat uniquement de Jellyfin."""
    matrix = make_movie("Matrix", JELLYFIN, "m1")
    matrix.add_sync_client(PLEX, "plex", "101")
    alien = make_movie("Alien", JELLYFIN, "m2")
    alien.add_sync_client(PLEX, "plex", "102")
    heat = make_movie("Heat", JELLYFIN, "m3")
    return [catalog.upsert_from_provider(m).id for m in (matrix, alien, heat)]


@pytest.fixture
def playlist(list_service, movies):
    return list_service.create(USER, "Soiree", item_ids=movies)


class TestFirstSync:
    @pytest.mark.asyncio
    async def test_creates_remote_list(self, sync, providers, playlist):
        states = await sync.sync(USER, playlist.id, [JELLYFIN])

        state = states[0]
        assert state.status == SyncStatus.SUCCESS
        assert state.client_list_id == "remote-1"
        assert state.items == ["m1", "m2", "m3"]
        assert state.last_synced is not None
        assert remote_ids(providers[JELLYFIN], "remote-1") == ["m1", "m2", "m3"]
        assert only(providers[JELLYFIN].calls, "create") == [("create", "Soiree")]

    @pytest.mark.asyncio
    async def test_state_is_persisted(self, sync, list_service, playlist):
        await sync.sync(USER, playlist.id, [JELLYFIN])

        stored = list_service.get_by_id(playlist.id, USER)
        assert stored.data.item_list.get_sync_state(JELLYFIN).client_list_id == "remote-1"
        assert list_service.get_sync_status(playlist.id, USER)[0].client_id == JELLYFIN

    @pytest.mark.asyncio
    async def test_items_without_mapping_are_reported(self, sync, providers, playlist, movies):
        states = await sync.sync(USER, playlist.id, [PLEX])

        assert states[0].status == SyncStatus.SUCCESS
        assert states[0].items == ["101", "102"]
        assert states[0].missing_item_ids == [movies[2]]


class TestIncrementalSync:
    @pytest.mark.asyncio
    async def test_internal_list_overrides_client_changes(
        self, sync, providers, list_service, playlist, movies
    ):
        await sync.sync(USER, playlist.id, [JELLYFIN])
        jellyfin = providers[JELLYFIN]
        jellyfin.lists["remote-1"] = ["m3", "m9", "m1"]
        jellyfin.calls.clear()
        list_service.reorder_items(playlist.id, USER, [movies[1], movies[0], movies[2]])

        states = await sync.sync(USER, playlist.id, [JELLYFIN])

        assert states[0].client_list_id == "remote-1"
        assert remote_ids(jellyfin, "remote-1") == ["m2", "m1", "m3"]
        assert only(jellyfin.calls, "remove") == [("remove", "remote-1", "m9")]
        assert only(jellyfin.calls, "add") == [("add", "remote-1", "m2")]
        assert only(jellyfin.calls, "create") == []

    @pytest.mark.asyncio
    async def test_no_reorder_when_already_in_order(self, sync, providers, playlist):
        await sync.sync(USER, playlist.id, [JELLYFIN])
        providers[JELLYFIN].calls.clear()

        await sync.sync(USER, playlist.id, [JELLYFIN])

        assert providers[JELLYFIN].calls == []

    @pytest.mark.asyncio
    async def test_deleted_remote_list_is_recreated(self, sync, providers, playlist):
        await sync.sync(USER, playlist.id, [JELLYFIN])
        del providers[JELLYFIN].lists["remote-1"]

        states = await sync.sync(USER, playlist.id, [JELLYFIN])

        assert states[0].client_list_id == "remote-2"
        assert remote_ids(providers[JELLYFIN], "remote-2") == ["m1", "m2", "m3"]


class TestFailures:
    @pytest.mark.asyncio
    async def test_failed_client_does_not_stop_others(self, sync, providers, playlist):
        states = await sync.sync(USER, playlist.id, [99, JELLYFIN])

        by_client = {s.client_id: s for s in states}
        assert by_client[99].status == SyncStatus.FAILED
        assert "not found" in by_client[99].error
        assert by_client[JELLYFIN].status == SyncStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_state(self, sync, list_service, playlist):
        item = list_service.get_by_id(playlist.id, USER)
        version = item.data.item_list.version
        item.data.item_list.set_sync_state(
            SyncClientState(client_id=99, client_list_id="old", items=["x"])
        )
        list_service.save(item, version)

        states = await sync.sync(USER, playlist.id, [99])

        assert states[0].status == SyncStatus.FAILED
        assert states[0].client_list_id == "old"
        assert states[0].items == ["x"]

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_stop_others(
        self, sync, providers, list_service, playlist
    ):
        providers[JELLYFIN].add_errors.append(KeyError("ratingKey"))

        states = await sync.sync(USER, playlist.id, [JELLYFIN, PLEX])

        by_client = {s.client_id: s for s in states}
        assert by_client[JELLYFIN].status == SyncStatus.FAILED
        assert "KeyError" in by_client[JELLYFIN].error
        assert by_client[PLEX].status == SyncStatus.SUCCESS
        assert remote_ids(providers[PLEX], "remote-1") == ["101", "102"]
        stored = list_service.get_sync_status(playlist.id, USER)
        assert {s.client_id: s.status for s in stored} == {
            JELLYFIN: SyncStatus.FAILED,
            PLEX: SyncStatus.SUCCESS,
        }

    @pytest.mark.asyncio
    async def test_created_remote_list_is_reused_after_failure(
        self, sync, providers, list_service, playlist
    ):
        jellyfin = providers[JELLYFIN]
        jellyfin.add_errors.append(ProviderError("boom", client_type="jellyfin"))

        first = await sync.sync(USER, playlist.id, [JELLYFIN])
        second = await sync.sync(USER, playlist.id, [JELLYFIN])

        assert first[0].status == SyncStatus.FAILED
        assert first[0].client_list_id == "remote-1"
        assert second[0].status == SyncStatus.SUCCESS
        assert second[0].client_list_id == "remote-1"
        assert len(only(jellyfin.calls, "create")) == 1
        assert list(jellyfin.lists) == ["remote-1"]
        assert remote_ids(jellyfin, "remote-1") == ["m1", "m2", "m3"]

    @pytest.mark.asyncio
    async def test_read_only_user_cannot_sync(self, sync, list_service, playlist):
        list_service.share_with_user(playlist.id, USER, 2)

        with pytest.raises(PermissionDeniedError):
            await sync.sync(2, playlist.id, [JELLYFIN])

    @pytest.mark.asyncio
    async def test_duplicate_targets_are_synced_once(self, sync, providers, playlist):
        states = await sync.sync(USER, playlist.id, [JELLYFIN, JELLYFIN])

        assert len(states) == 1
        assert len(only(providers[JELLYFIN].calls, "create")) == 1


class TestCollections:
    @pytest.mark.asyncio
    async def test_unsupported_reorder_is_skipped(self, session, catalog, providers, resolver):
        providers[JELLYFIN].can_reorder = False
        collections = ListService(
            SQLModelMediaItemRepository(session), catalog, MediaType.COLLECTION
        )
        ids = [
            catalog.upsert_from_provider(make_movie(t, JELLYFIN, e)).id
            for t, e in (("Matrix", "m1"), ("Alien", "m2"))
        ]
        boxset = collections.create(USER, "Boxset", item_ids=ids)
        sync = ListSyncService(resolver, collections)
        await sync.sync(USER, boxset.id, [JELLYFIN])
        providers[JELLYFIN].lists["remote-1"] = ["m2", "m1"]

        states = await sync.sync(USER, boxset.id, [JELLYFIN])

        assert states[0].status == SyncStatus.SUCCESS
        assert remote_ids(providers[JELLYFIN], "remote-1") == ["m2", "m1"]
