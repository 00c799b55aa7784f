"""
Tests des routes de listes internes et de leur synchronisation.
"""

import pytest

from src.infrastructure.persistence.repositories.media_item_repository import (
    SQLModelMediaItemRepository,
)
from src.services.catalog import CatalogService
from tests.conftest import make_movie
from tests.fixtures.fake_providers import FakeListProvider, remote_ids
from tests.fixtures.web import (  # noqa: F401
    FRIEND_HEADERS,
    USER_HEADERS,
    client,
    container,
    resolver,
)


@pytest.fixture
def movies(session) -> list[int]:
    catalog = CatalogService(SQLModelMediaItemRepository(session))
    return [
        catalog.upsert_from_provider(make_movie(title, 1, external_id)).id
        for title, external_id in (("Matrix", "m1"), ("Alien", "m2"), ("Heat", "m3"))
    ]


@pytest.fixture
def playlist_id(client, movies) -> int:
    response = client.post(
        "/lists/playlists",
        json={"name": "Soiree", "item_ids": movies[:2]},
        headers=USER_HEADERS,
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


def item_ids(response) -> list:
    return response.json()["data"]["data"]["item_list"]["items"]


def ordered_ids(response) -> list[int]:
    items = sorted(item_ids(response), key=lambda i: i["position"])
    return [i["item_id"] for i in items]


class TestListCrud:
    def test_create_and_get(self, client, playlist_id, movies):
        response = client.get(f"/lists/playlists/{playlist_id}", headers=USER_HEADERS)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Soiree"
        assert data["type"] == "playlist"
        assert data["data"]["item_list"]["version"] == 2
        assert ordered_ids(response) == movies[:2]

    def test_list_user_lists(self, client, playlist_id):
        response = client.get("/lists/playlists", headers=USER_HEADERS)

        assert [p["id"] for p in response.json()["data"]] == [playlist_id]
        assert client.get("/lists/collections", headers=USER_HEADERS).json()["data"] == []

    def test_unknown_list_kind(self, client):
        response = client.get("/lists/albums", headers=USER_HEADERS)

        assert response.status_code == 400

    def test_private_list_is_forbidden_to_others(self, client, playlist_id):
        response = client.get(f"/lists/playlists/{playlist_id}", headers=FRIEND_HEADERS)

        assert response.status_code == 403

    def test_update_and_delete(self, client, playlist_id):
        updated = client.put(
            f"/lists/playlists/{playlist_id}",
            json={"name": "Soiree polar", "is_public": True},
            headers=USER_HEADERS,
        )
        assert updated.json()["data"]["title"] == "Soiree polar"
        assert client.get(f"/lists/playlists/{playlist_id}", headers=FRIEND_HEADERS).status_code == 200

        deleted = client.delete(f"/lists/playlists/{playlist_id}", headers=USER_HEADERS)
        assert deleted.status_code == 200
        missing = client.get(f"/lists/playlists/{playlist_id}", headers=USER_HEADERS)
        assert missing.status_code == 404


class TestListItems:
    def test_add_and_remove(self, client, playlist_id, movies):
        added = client.post(
            f"/lists/playlists/{playlist_id}/items",
            json={"item_id": movies[2], "position": 0},
            headers=USER_HEADERS,
        )
        assert ordered_ids(added) == [movies[2], movies[0], movies[1]]

        removed = client.delete(
            f"/lists/playlists/{playlist_id}/items/{movies[0]}", headers=USER_HEADERS
        )
        assert ordered_ids(removed) == [movies[2], movies[1]]

    def test_add_duplicate(self, client, playlist_id, movies):
        response = client.post(
            f"/lists/playlists/{playlist_id}/items",
            json={"item_id": movies[0]},
            headers=USER_HEADERS,
        )

        assert response.status_code == 400

    def test_reorder(self, client, playlist_id, movies):
        response = client.post(
            f"/lists/playlists/{playlist_id}/reorder",
            json={"item_ids": [movies[1], movies[0]]},
            headers=USER_HEADERS,
        )

        assert ordered_ids(response) == [movies[1], movies[0]]

    def test_invalid_reorder(self, client, playlist_id, movies):
        response = client.post(
            f"/lists/playlists/{playlist_id}/reorder",
            json={"item_ids": [movies[1]]},
            headers=USER_HEADERS,
        )

        assert response.status_code == 400
        assert "must include all" in response.json()["message"]

    def test_get_items(self, client, playlist_id):
        response = client.get(f"/lists/playlists/{playlist_id}/items", headers=USER_HEADERS)

        assert [i["title"] for i in response.json()["data"]] == ["Matrix", "Alien"]


class TestSharing:
    def test_share_with_write_permission(self, client, playlist_id, movies):
        shared = client.post(
            f"/lists/playlists/{playlist_id}/share",
            json={"user_id": 2, "permission": "write"},
            headers=USER_HEADERS,
        )
        assert shared.status_code == 200

        added = client.post(
            f"/lists/playlists/{playlist_id}/items",
            json={"item_id": movies[2]},
            headers=FRIEND_HEADERS,
        )
        assert added.status_code == 200
        collaborators = client.get(
            f"/lists/playlists/{playlist_id}/collaborators", headers=USER_HEADERS
        )
        assert [c["user_id"] for c in collaborators.json()["data"]] == [2]
        shared_lists = client.get("/lists/playlists?shared=true", headers=FRIEND_HEADERS)
        assert [p["id"] for p in shared_lists.json()["data"]] == [playlist_id]

    def test_collaborator_cannot_share(self, client, playlist_id):
        client.post(
            f"/lists/playlists/{playlist_id}/share",
            json={"user_id": 2, "permission": "write"},
            headers=USER_HEADERS,
        )

        response = client.post(
            f"/lists/playlists/{playlist_id}/share",
            json={"user_id": 3},
            headers=FRIEND_HEADERS,
        )

        assert response.status_code == 403

    def test_remove_collaborator(self, client, playlist_id):
        client.post(
            f"/lists/playlists/{playlist_id}/share", json={"user_id": 2}, headers=USER_HEADERS
        )

        response = client.delete(
            f"/lists/playlists/{playlist_id}/collaborators/2", headers=USER_HEADERS
        )

        assert response.status_code == 200
        assert client.get(f"/lists/playlists/{playlist_id}", headers=FRIEND_HEADERS).status_code == 403


class TestSync:
    def test_sync_pushes_list_and_records_state(self, client, resolver, playlist_id):
        provider = FakeListProvider(1)
        resolver.resolve.return_value = provider

        response = client.post(
            f"/lists/playlists/{playlist_id}/sync",
            json={"client_ids": [1]},
            headers=USER_HEADERS,
        )

        assert response.status_code == 200
        state = response.json()["data"][0]
        assert state["status"] == "success"
        assert state["items"] == ["m1", "m2"]
        assert remote_ids(provider, state["client_list_id"]) == ["m1", "m2"]

        status = client.get(f"/lists/playlists/{playlist_id}/sync", headers=USER_HEADERS)
        assert status.json()["data"][0]["client_id"] == 1

    def test_sync_requires_targets(self, client, resolver, playlist_id):
        response = client.post(
            f"/lists/playlists/{playlist_id}/sync",
            json={"client_ids": []},
            headers=USER_HEADERS,
        )

        assert response.status_code == 400
