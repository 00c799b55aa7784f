"""
Tests pour UserDataService (favoris, notes, historique, reprise).
"""

import pytest

from src.core.entities.media import MediaType
from src.core.errors import InvalidArgumentError, NotFoundError, PermissionDeniedError
from src.infrastructure.persistence.repositories.media_item_repository import (
    SQLModelMediaItemRepository,
)
from src.infrastructure.persistence.repositories.user_data_repository import (
    SQLModelUserMediaItemDataRepository,
)
from src.services.catalog import CatalogService
from src.services.user_data import UserDataService
from tests.conftest import make_movie, make_track


@pytest.fixture
def catalog(session) -> CatalogService:
    return CatalogService(SQLModelMediaItemRepository(session))


@pytest.fixture
def service(session, catalog) -> UserDataService:
    return UserDataService(SQLModelUserMediaItemDataRepository(session), catalog)


@pytest.fixture
def matrix(catalog) -> int:
    return catalog.upsert_from_provider(make_movie("Matrix")).id


@pytest.fixture
def so_what(catalog) -> int:
    return catalog.upsert_from_provider(make_track("So What")).id


class TestRecordPlay:
    def test_first_play_creates_entry(self, service, matrix):
        data = service.record_play(1, matrix, position_seconds=600, duration_seconds=6000)

        assert data.id is not None
        assert data.media_type == MediaType.MOVIE
        assert data.play_count == 1
        assert data.played_percentage == pytest.approx(0.1)
        assert data.played_at is not None

    def test_plays_accumulate_on_same_entry(self, service, matrix):
        first = service.record_play(1, matrix, 600, 6000)
        second = service.record_play(1, matrix, 6000, 6000, completed=True)

        assert second.id == first.id
        assert second.play_count == 2
        assert second.completed is True
        assert second.played_at == first.played_at

    def test_unknown_item(self, service):
        with pytest.raises(NotFoundError):
            service.record_play(1, 404, 10, 100)

    def test_continue_watching(self, service, matrix, so_what):
        service.record_play(1, matrix, 600, 6000)
        service.record_play(1, so_what, 560, 562)

        in_progress = service.get_continue_watching(1)

        assert [d.media_item_id for d in in_progress] == [matrix]

    def test_history(self, service, matrix, so_what):
        service.record_play(1, matrix, 600, 6000)
        service.record_play(1, so_what, 100, 562)
        service.toggle_favorite(matrix, user_id=2, favorite=True)

        assert {d.media_item_id for d in service.get_history(1)} == {matrix, so_what}
        assert len(service.get_recent_history(1, days=7)) == 2
        assert service.get_history(2) == []


class TestFlags:
    def test_toggle_favorite_is_idempotent(self, service, matrix):
        service.toggle_favorite(matrix, user_id=1, favorite=True)
        service.toggle_favorite(matrix, user_id=1, favorite=True)

        favorites = service.get_favorites(1)
        assert [f.media_item_id for f in favorites] == [matrix]

        service.toggle_favorite(matrix, user_id=1, favorite=False)
        assert service.get_favorites(1) == []
        assert service.get_user_data(1, matrix) is not None

    @pytest.mark.parametrize("rating", [0, 2.5, 5])
    def test_valid_rating(self, service, matrix, rating):
        assert service.update_rating(matrix, user_id=1, rating=rating).rating == rating

    @pytest.mark.parametrize("rating", [-0.5, 5.5, None])
    def test_rating_out_of_range(self, service, matrix, rating):
        with pytest.raises(InvalidArgumentError):
            service.update_rating(matrix, user_id=1, rating=rating)

    @pytest.mark.parametrize("rating", [-0.5, 5.5])
    def test_rejected_rating_keeps_stored_value(self, service, matrix, rating):
        saved = service.update_rating(matrix, user_id=1, rating=4)

        with pytest.raises(InvalidArgumentError):
            service.update_rating(matrix, user_id=1, rating=rating)

        assert service.get_by_id(saved.id).rating == 4.0

    def test_half_rating_is_stored(self, service, matrix):
        saved = service.update_rating(matrix, user_id=1, rating=3.5)

        assert service.get_by_id(saved.id).rating == 3.5

    def test_watchlist(self, service, matrix):
        assert service.set_watchlist(matrix, user_id=1, watchlist=True).watchlist is True

        stored = service.set_watchlist(matrix, user_id=1, watchlist=False)
        assert service.get_by_id(stored.id).watchlist is False

    def test_dislike_clears_favorite(self, service, matrix):
        service.toggle_favorite(matrix, user_id=1, favorite=True)

        data = service.set_disliked(matrix, user_id=1, disliked=True)

        assert data.is_disliked is True
        assert data.is_favorite is False
        assert service.get_favorites(1) == []

    def test_favorite_clears_dislike(self, service, matrix):
        service.set_disliked(matrix, user_id=1, disliked=True)

        data = service.toggle_favorite(matrix, user_id=1, favorite=True)

        assert data.is_favorite is True
        assert data.is_disliked is False


class TestDelete:
    def test_delete_own_entry(self, service, matrix):
        data = service.toggle_favorite(matrix, user_id=1, favorite=True)

        assert service.delete(data.id, user_id=1) is True
        with pytest.raises(NotFoundError):
            service.get_by_id(data.id)

    def test_cannot_delete_other_user_entry(self, service, matrix):
        data = service.toggle_favorite(matrix, user_id=1, favorite=True)

        with pytest.raises(PermissionDeniedError):
            service.delete(data.id, user_id=2)

    def test_clear_user_history(self, service, matrix, so_what):
        service.record_play(1, matrix, 10, 100)
        service.record_play(1, so_what, 10, 100)
        service.record_play(2, matrix, 10, 100)

        assert service.clear_user_history(1) == 2
        assert service.get_history(1) == []
        assert len(service.get_history(2)) == 1
