"""
Service des donnees utilisateur (favoris, notes, historique, reprise).

Les donnees sont rattachees aux elements du catalogue interne et restent
valables quel que soit le client qui a fourni l'element.
"""

from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from src.core.entities.user_data import MAX_RATING, MIN_RATING, UserMediaItemData
from src.core.errors import InvalidArgumentError, NotFoundError, PermissionDeniedError
from src.core.ports.repositories import IUserMediaItemDataRepository
from src.services.catalog import CatalogService


class UserDataService:
    """
    Lecture et mise a jour des donnees utilisateur.

    Les mises a jour creent l'entree (utilisateur, element) au besoin ;
    aucune operation ne supprime implicitement une entree.

    Example:
        service = UserDataService(user_data_repo, catalog)
        service.record_play(user_id=1, media_item_id=42, position_seconds=600,
                            duration_seconds=6000, completed=False)
        service.toggle_favorite(42, user_id=1, favorite=True)
    """

    def __init__(
        self, user_data_repo: IUserMediaItemDataRepository, catalog: CatalogService
    ) -> None:
        self._repo = user_data_repo
        self._catalog = catalog

    def _get_or_new(self, user_id: int, media_item_id: int) -> UserMediaItemData:
        existing = self._repo.get_by_user_and_item(user_id, media_item_id)
        if existing is not None:
            return existing
        item = self._catalog.get_by_id(media_item_id)
        return UserMediaItemData(
            user_id=user_id, media_item_id=media_item_id, media_type=item.type
        )

    def record_play(
        self,
        user_id: int,
        media_item_id: int,
        position_seconds: int = 0,
        duration_seconds: int = 0,
        completed: bool = False,
    ) -> UserMediaItemData:
        """
        Enregistre une lecture.

        Raises:
            NotFoundError: Si l'element n'existe pas dans le catalogue.
        """
        data = self._get_or_new(user_id, media_item_id)
        data.record_play(position_seconds, duration_seconds, completed)
        saved = self._repo.save(data)
        logger.debug(
            f"Lecture enregistree : utilisateur {user_id}, element {media_item_id} "
            f"({saved.play_count} lecture(s), {saved.played_percentage:.0%})"
        )
        return saved

    def toggle_favorite(
        self, media_item_id: int, user_id: int, favorite: bool
    ) -> UserMediaItemData:
        """Definit l'etat favori (idempotent). Un favori n'est plus marque non apprecie."""
        data = self._get_or_new(user_id, media_item_id)
        data.is_favorite = favorite
        if favorite:
            data.is_disliked = False
        return self._repo.save(data)

    def set_disliked(
        self, media_item_id: int, user_id: int, disliked: bool
    ) -> UserMediaItemData:
        data = self._get_or_new(user_id, media_item_id)
        data.is_disliked = disliked
        if disliked:
            data.is_favorite = False
        return self._repo.save(data)

    def update_rating(
        self, media_item_id: int, user_id: int, rating: float
    ) -> UserMediaItemData:
        """
        Note un element.

        Raises:
            InvalidArgumentError: Si la note est hors de l'intervalle [0, 5].
        """
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidArgumentError(
                f"rating must be between {MIN_RATING:g} and {MAX_RATING:g}, got {rating}"
            )
        data = self._get_or_new(user_id, media_item_id)
        data.rating = float(rating)
        return self._repo.save(data)

    def set_watchlist(
        self, media_item_id: int, user_id: int, watchlist: bool
    ) -> UserMediaItemData:
        data = self._get_or_new(user_id, media_item_id)
        data.watchlist = watchlist
        return self._repo.save(data)

    def get_by_id(self, data_id: int) -> UserMediaItemData:
        data = self._repo.get_by_id(data_id)
        if data is None:
            raise NotFoundError(f"user data {data_id} not found")
        return data

    def get_user_data(self, user_id: int, media_item_id: int) -> Optional[UserMediaItemData]:
        return self._repo.get_by_user_and_item(user_id, media_item_id)

    def get_history(
        self, user_id: int, limit: int = 20, offset: int = 0
    ) -> list[UserMediaItemData]:
        return self._repo.list_history(user_id, limit=limit, offset=offset)

    def get_recent_history(
        self, user_id: int, days: int = 7, limit: int = 20
    ) -> list[UserMediaItemData]:
        since = datetime.utcnow() - timedelta(days=days)
        return self._repo.list_history(user_id, limit=limit, since=since)

    def get_continue_watching(self, user_id: int, limit: int = 20) -> list[UserMediaItemData]:
        return self._repo.list_continue_watching(user_id, limit=limit)

    def get_favorites(
        self, user_id: int, limit: int = 20, offset: int = 0
    ) -> list[UserMediaItemData]:
        return self._repo.list_favorites(user_id, limit=limit, offset=offset)

    def delete(self, data_id: int, user_id: int) -> bool:
        data = self.get_by_id(data_id)
        if data.user_id != user_id:
            raise PermissionDeniedError(f"user data {data_id} belongs to another user")
        return self._repo.delete(data_id)

    def clear_user_history(self, user_id: int) -> int:
        count = self._repo.clear_user(user_id)
        logger.info(f"Historique de l'utilisateur {user_id} efface ({count} entrees)")
        return count
