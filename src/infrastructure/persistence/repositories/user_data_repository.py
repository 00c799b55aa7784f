"""
Implementation SQLModel du repository des donnees utilisateur.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete as sa_delete
from sqlmodel import Session, col, select

from src.core.entities.media import MediaType
from src.core.entities.user_data import (
    CONTINUE_WATCHING_THRESHOLD,
    UserMediaItemData,
)
from src.core.ports.repositories import IUserMediaItemDataRepository
from src.infrastructure.persistence.models import UserMediaItemDataModel

_FIELDS = (
    "play_count",
    "position_seconds",
    "duration_seconds",
    "played_percentage",
    "completed",
    "is_favorite",
    "is_disliked",
    "rating",
    "watchlist",
    "played_at",
    "last_played_at",
)


class SQLModelUserMediaItemDataRepository(IUserMediaItemDataRepository):
    """
    Repository SQLModel pour les donnees utilisateur.

    save() est un upsert sur la cle (user_id, media_item_id).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: UserMediaItemDataModel) -> UserMediaItemData:
        return UserMediaItemData(
            id=model.id,
            user_id=model.user_id,
            media_item_id=model.media_item_id,
            media_type=MediaType(model.media_type),
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{name: getattr(model, name) for name in _FIELDS},
        )

    def _find(self, user_id: int, media_item_id: int) -> Optional[UserMediaItemDataModel]:
        statement = (
            select(UserMediaItemDataModel)
            .where(UserMediaItemDataModel.user_id == user_id)
            .where(UserMediaItemDataModel.media_item_id == media_item_id)
        )
        return self._session.exec(statement).first()

    def get_by_id(self, data_id: int) -> Optional[UserMediaItemData]:
        model = self._session.get(UserMediaItemDataModel, data_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_user_and_item(
        self, user_id: int, media_item_id: int
    ) -> Optional[UserMediaItemData]:
        model = self._find(user_id, media_item_id)
        if model:
            return self._to_entity(model)
        return None

    def save(self, data: UserMediaItemData) -> UserMediaItemData:
        model = self._find(data.user_id, data.media_item_id)
        if model is None:
            model = UserMediaItemDataModel(
                user_id=data.user_id,
                media_item_id=data.media_item_id,
                media_type=data.media_type.value,
            )
        for name in _FIELDS:
            setattr(model, name, getattr(data, name))
        model.media_type = data.media_type.value
        model.updated_at = datetime.utcnow()
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def delete(self, data_id: int) -> bool:
        model = self._session.get(UserMediaItemDataModel, data_id)
        if model is None:
            return False
        self._session.delete(model)
        self._session.commit()
        return True

    def list_history(
        self,
        user_id: int,
        limit: int = 20,
        offset: int = 0,
        since: Optional[datetime] = None,
    ) -> list[UserMediaItemData]:
        statement = (
            select(UserMediaItemDataModel)
            .where(UserMediaItemDataModel.user_id == user_id)
            .where(UserMediaItemDataModel.play_count > 0)
        )
        if since is not None:
            statement = statement.where(col(UserMediaItemDataModel.last_played_at) >= since)
        statement = (
            statement.order_by(col(UserMediaItemDataModel.last_played_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def list_continue_watching(
        self, user_id: int, limit: int = 20
    ) -> list[UserMediaItemData]:
        statement = (
            select(UserMediaItemDataModel)
            .where(UserMediaItemDataModel.user_id == user_id)
            .where(UserMediaItemDataModel.completed == False)  # noqa: E712
            .where(UserMediaItemDataModel.played_percentage > 0)
            .where(UserMediaItemDataModel.played_percentage < CONTINUE_WATCHING_THRESHOLD)
            .order_by(col(UserMediaItemDataModel.last_played_at).desc())
            .limit(limit)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def list_favorites(
        self, user_id: int, limit: int = 20, offset: int = 0
    ) -> list[UserMediaItemData]:
        statement = (
            select(UserMediaItemDataModel)
            .where(UserMediaItemDataModel.user_id == user_id)
            .where(UserMediaItemDataModel.is_favorite == True)  # noqa: E712
            .order_by(col(UserMediaItemDataModel.updated_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def clear_user(self, user_id: int) -> int:
        result = self._session.connection().execute(
            sa_delete(UserMediaItemDataModel).where(UserMediaItemDataModel.user_id == user_id)
        )
        self._session.commit()
        return result.rowcount
