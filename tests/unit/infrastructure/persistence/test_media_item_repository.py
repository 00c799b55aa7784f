"""
Tests pour SQLModelMediaItemRepository.

Verifie la persistance des charges utiles, les recherches par client
ou identifiant externe et le compare-and-swap sur la version des listes.
"""

from datetime import datetime

import pytest

from src.core.entities.lists import ItemList, Playlist
from src.core.entities.media import MediaDetails, MediaItem, MediaType, Movie
from src.core.errors import ConflictError, NotFoundError
from src.core.value_objects.query_options import QueryOptions, SortField, SortOrder
from src.infrastructure.persistence.repositories.media_item_repository import (
    SQLModelMediaItemRepository,
)
from tests.conftest import make_movie, make_track


@pytest.fixture
def repo(session) -> SQLModelMediaItemRepository:
    return SQLModelMediaItemRepository(session)


def movie(title: str, year: int, rating: float, genres: list[str], **kwargs) -> MediaItem:
    item = make_movie(title, rating=rating, **kwargs)
    item.details.release_year = year
    item.details.genres = genres
    return item


@pytest.fixture
def catalog(repo) -> list[MediaItem]:
    """Trois films et une piste en base."""
    return [
        repo.create(movie("Matrix", 1999, 8.2, ["Action", "Science-Fiction"], tmdb_id="603")),
        repo.create(movie("Alien", 1979, 8.5, ["Horreur"], tmdb_id="348")),
        repo.create(movie("Amélie", 2001, 8.3, ["Comédie"], client_id=3, external_id="101")),
        repo.create(make_track("So What")),
    ]


def playlist(owner_id: int = 1) -> MediaItem[Playlist]:
    item_list = ItemList(owner_id=owner_id)
    item_list.add_item(1, user_id=owner_id)
    item_list.add_item(2, user_id=owner_id)
    return MediaItem(
        data=Playlist(details=MediaDetails(title="Soirée"), item_list=item_list),
        owner_id=owner_id,
    )


class TestCreateAndRead:
    def test_round_trip_keeps_payload(self, repo):
        item = make_movie("Matrix", rating=8.2, tmdb_id="603")
        item.data.cast = ["Keanu Reeves"]
        item.details.added_at = datetime(2024, 1, 10, 20, 15)

        saved = repo.create(item)
        loaded = repo.get_by_id(saved.id)

        assert loaded.type == MediaType.MOVIE
        assert loaded.uuid == item.uuid
        assert isinstance(loaded.data, Movie)
        assert loaded.data.cast == ["Keanu Reeves"]
        assert loaded.details.added_at == datetime(2024, 1, 10, 20, 15)
        assert loaded.external_ids == {"tmdb": "603"}
        assert loaded.get_client_item_id(1) == "matrix"

    def test_get_by_ids_keeps_requested_order(self, repo, catalog):
        ids = [catalog[2].id, 999, catalog[0].id]

        assert [i.title for i in repo.get_by_ids(ids)] == ["Amélie", "Matrix"]

    def test_get_by_sync_client(self, repo, catalog):
        found = repo.get_by_sync_client(3, "101")

        assert found.title == "Amélie"
        assert repo.get_by_sync_client(1, "101") is None

    def test_get_by_external_id(self, repo, catalog):
        assert repo.get_by_external_id("tmdb", "348").title == "Alien"
        assert repo.get_by_external_id("imdb", "348") is None

    def test_get_by_type(self, repo, catalog):
        assert [t.title for t in repo.get_by_type(MediaType.TRACK)] == ["So What"]

    def test_get_recent_items(self, repo, catalog):
        recent = repo.get_recent_items(MediaType.MOVIE, days=1, limit=2)
        assert len(recent) == 2

    def test_get_by_user_id(self, repo):
        repo.create(playlist(owner_id=1))
        repo.create(playlist(owner_id=2))

        owned = repo.get_by_user_id(1, MediaType.PLAYLIST)

        assert len(owned) == 1
        assert owned[0].owner_id == 1


class TestSearch:
    def test_filter_by_type_and_query(self, repo, catalog):
        result = repo.search(QueryOptions(query="atri"), MediaType.MOVIE)
        assert [i.title for i in result] == ["Matrix"]

    def test_filter_by_genre_with_accent(self, repo, catalog):
        result = repo.search(QueryOptions(genre="Comédie"))
        assert [i.title for i in result] == ["Amélie"]

    def test_filter_by_year_and_rating(self, repo, catalog):
        assert [i.title for i in repo.search(QueryOptions(year=1979))] == ["Alien"]
        result = repo.search(QueryOptions(min_rating=8.25, max_rating=8.4))
        assert [i.title for i in result] == ["Amélie"]

    def test_sort_and_paginate(self, repo, catalog):
        options = (
            QueryOptions()
            .with_sort(SortField.RATING, SortOrder.DESC)
            .with_limit(2, offset=1)
        )

        result = repo.search(options, MediaType.MOVIE)

        assert [i.title for i in result] == ["Amélie", "Matrix"]

    def test_filter_by_client(self, repo, catalog):
        result = repo.search(QueryOptions(client_id=3))
        assert [i.title for i in result] == ["Amélie"]

    def test_filter_by_external_id(self, repo, catalog):
        result = repo.search(QueryOptions(external_source_id="603"))
        assert [i.title for i in result] == ["Matrix"]

    def test_filter_by_item_ids(self, repo, catalog):
        ids = (catalog[0].id, catalog[3].id)
        result = repo.search(QueryOptions(item_ids=ids).with_sort(SortField.TITLE, "asc"))
        assert [i.title for i in result] == ["Matrix", "So What"]


class TestUpdate:
    def test_update_replaces_links(self, repo, catalog):
        matrix = repo.get_by_id(catalog[0].id)
        matrix.add_sync_client(3, "plex", "555")
        matrix.details.external_ids["imdb"] = "tt0133093"

        updated = repo.update(matrix)

        assert updated.get_client_item_id(3) == "555"
        assert repo.get_by_external_id("imdb", "tt0133093").id == matrix.id

    def test_list_update_with_expected_version(self, repo):
        saved = repo.create(playlist())
        assert saved.data.item_list.version == 2

        saved.data.item_list.add_item(3, user_id=1)
        updated = repo.update(saved, expected_version=2)

        assert updated.data.item_list.version == 3
        assert updated.data.item_list.item_ids == [1, 2, 3]

    def test_stale_version_raises_conflict(self, repo):
        saved = repo.create(playlist())
        first = repo.get_by_id(saved.id)
        second = repo.get_by_id(saved.id)

        first.data.item_list.add_item(3, user_id=1)
        repo.update(first, expected_version=2)

        second.data.item_list.remove_item(1, user_id=1)
        with pytest.raises(ConflictError):
            repo.update(second, expected_version=2)

        assert repo.get_by_id(saved.id).data.item_list.item_ids == [1, 2, 3]

    def test_update_deleted_item_raises_not_found(self, repo):
        saved = repo.create(playlist())
        repo.delete(saved.id)

        with pytest.raises(NotFoundError):
            repo.update(saved, expected_version=2)

    def test_update_unsaved_item(self, repo):
        with pytest.raises(NotFoundError):
            repo.update(make_movie("Jamais vu"))


def test_delete_removes_links(repo, catalog):
    assert repo.delete(catalog[0].id) is True

    assert repo.get_by_sync_client(1, "matrix") is None
    assert repo.get_by_external_id("tmdb", "603") is None
    assert repo.delete(catalog[0].id) is False
