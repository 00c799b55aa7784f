"""
Implementation SQLModel du repository des elements media.

Les listes (playlists, collections) sont mises a jour par compare-and-swap
sur la colonne version : l'UPDATE ne touche la ligne que si la version
stockee est celle lue par l'appelant.
"""

import json
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import update as sa_update
from sqlmodel import Session, col, select

from src.core.entities.media import MediaItem, MediaType, SyncClient
from src.core.errors import ConflictError, NotFoundError
from src.core.ports.repositories import IMediaItemRepository
from src.core.value_objects.query_options import QueryOptions, SortField, SortOrder
from src.infrastructure.persistence.models import (
    MediaItemExternalIdModel,
    MediaItemModel,
    MediaItemSyncClientModel,
)
from src.infrastructure.persistence.payloads import dump_payload, load_payload

SORT_COLUMNS = {
    SortField.ADDED_AT: MediaItemModel.added_at,
    SortField.CREATED_AT: MediaItemModel.created_at,
    SortField.UPDATED_AT: MediaItemModel.updated_at,
    SortField.RATING: MediaItemModel.rating,
    SortField.POPULARITY: MediaItemModel.popularity,
    SortField.TITLE: MediaItemModel.title,
    SortField.RELEASE_DATE: MediaItemModel.release_date,
}


class SQLModelMediaItemRepository(IMediaItemRepository):
    """
    Repository SQLModel pour les elements media.

    La charge utile est stockee en JSON ; les correspondances client et
    les identifiants externes sont dans des tables dediees pour permettre
    les recherches indexees.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _sync_rows(self, item_ids: list[int]) -> dict[int, list[MediaItemSyncClientModel]]:
        rows_by_item: dict[int, list[MediaItemSyncClientModel]] = {i: [] for i in item_ids}
        if not item_ids:
            return rows_by_item
        statement = (
            select(MediaItemSyncClientModel)
            .where(col(MediaItemSyncClientModel.media_item_id).in_(item_ids))
            .order_by(MediaItemSyncClientModel.id)
        )
        for row in self._session.exec(statement).all():
            rows_by_item[row.media_item_id].append(row)
        return rows_by_item

    def _to_entity(
        self, model: MediaItemModel, sync_rows: list[MediaItemSyncClientModel]
    ) -> MediaItem:
        media_type = MediaType(model.type)
        return MediaItem(
            data=load_payload(media_type, model.data_json),
            type=media_type,
            id=model.id,
            uuid=model.uuid,
            title=model.title,
            sync_clients=[
                SyncClient(
                    client_id=row.client_id,
                    client_type=row.client_type,
                    item_id=row.item_id,
                    last_synced=row.last_synced,
                )
                for row in sync_rows
            ],
            owner_id=model.owner_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_entities(self, models: list[MediaItemModel]) -> list[MediaItem]:
        sync_rows = self._sync_rows([m.id for m in models])
        return [self._to_entity(m, sync_rows[m.id]) for m in models]

    def _columns(self, item: MediaItem) -> dict[str, Any]:
        """Valeurs de colonnes derivees de l'entite."""
        details = item.details
        values: dict[str, Any] = {
            "type": item.type.value,
            "title": item.title or details.title,
            "owner_id": item.owner_id,
            "release_year": details.release_year,
            "release_date": details.release_date,
            "rating": details.rating,
            "popularity": details.popularity,
            "added_at": details.added_at,
            "genres_json": (
                json.dumps(details.genres, ensure_ascii=False) if details.genres else None
            ),
            "data_json": dump_payload(item.type, item.data),
            "updated_at": datetime.utcnow(),
        }
        if item.is_list:
            values["version"] = item.data.item_list.version
        return values

    def _replace_links(self, model_id: int, item: MediaItem) -> None:
        self._delete_links(model_id)
        for sync_client in item.sync_clients:
            self._session.add(
                MediaItemSyncClientModel(
                    media_item_id=model_id,
                    client_id=sync_client.client_id,
                    client_type=sync_client.client_type,
                    item_id=sync_client.item_id,
                    last_synced=sync_client.last_synced,
                )
            )
        for source, external_id in item.external_ids.items():
            self._session.add(
                MediaItemExternalIdModel(
                    media_item_id=model_id, source=source, external_id=external_id
                )
            )

    def _delete_links(self, model_id: int) -> None:
        connection = self._session.connection()
        connection.execute(
            sa_delete(MediaItemSyncClientModel).where(
                MediaItemSyncClientModel.media_item_id == model_id
            )
        )
        connection.execute(
            sa_delete(MediaItemExternalIdModel).where(
                MediaItemExternalIdModel.media_item_id == model_id
            )
        )

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def get_by_id(self, item_id: int) -> Optional[MediaItem]:
        model = self._session.get(MediaItemModel, item_id)
        if model:
            return self._to_entities([model])[0]
        return None

    def get_by_ids(self, item_ids: list[int]) -> list[MediaItem]:
        if not item_ids:
            return []
        statement = select(MediaItemModel).where(col(MediaItemModel.id).in_(item_ids))
        by_id = {e.id: e for e in self._to_entities(self._session.exec(statement).all())}
        return [by_id[i] for i in item_ids if i in by_id]

    def search(
        self, options: QueryOptions, media_type: Optional[MediaType] = None
    ) -> list[MediaItem]:
        statement = select(MediaItemModel)
        if media_type is not None:
            statement = statement.where(MediaItemModel.type == MediaType(media_type).value)
        if options.query:
            statement = statement.where(col(MediaItemModel.title).contains(options.query))
        if options.genre:
            statement = statement.where(
                col(MediaItemModel.genres_json).contains(f'"{options.genre}"')
            )
        if options.year:
            statement = statement.where(MediaItemModel.release_year == options.year)
        if options.min_rating is not None:
            statement = statement.where(col(MediaItemModel.rating) >= options.min_rating)
        if options.max_rating is not None:
            statement = statement.where(col(MediaItemModel.rating) <= options.max_rating)
        if options.owner_id is not None:
            statement = statement.where(MediaItemModel.owner_id == options.owner_id)
        if options.item_ids:
            statement = statement.where(col(MediaItemModel.id).in_(list(options.item_ids)))
        if options.client_id is not None:
            statement = statement.where(
                col(MediaItemModel.id).in_(
                    select(MediaItemSyncClientModel.media_item_id).where(
                        MediaItemSyncClientModel.client_id == options.client_id
                    )
                )
            )
        if options.external_source_id:
            statement = statement.where(
                col(MediaItemModel.id).in_(
                    select(MediaItemExternalIdModel.media_item_id).where(
                        MediaItemExternalIdModel.external_id == options.external_source_id
                    )
                )
            )

        if options.recently_added:
            statement = statement.order_by(col(MediaItemModel.created_at).desc())
        else:
            column = col(SORT_COLUMNS[options.sort])
            direction = column.desc() if options.sort_order == SortOrder.DESC else column.asc()
            statement = statement.order_by(direction)
        statement = statement.order_by(MediaItemModel.id)

        if options.offset:
            statement = statement.offset(options.offset)
        if options.limit:
            statement = statement.limit(options.limit)
        return self._to_entities(self._session.exec(statement).all())

    def get_recent_items(
        self, media_type: Optional[MediaType] = None, days: int = 30, limit: int = 20
    ) -> list[MediaItem]:
        since = datetime.utcnow() - timedelta(days=days)
        statement = select(MediaItemModel).where(col(MediaItemModel.created_at) >= since)
        if media_type is not None:
            statement = statement.where(MediaItemModel.type == MediaType(media_type).value)
        statement = statement.order_by(col(MediaItemModel.created_at).desc()).limit(limit)
        return self._to_entities(self._session.exec(statement).all())

    def get_by_user_id(
        self, user_id: int, media_type: Optional[MediaType] = None
    ) -> list[MediaItem]:
        statement = select(MediaItemModel).where(MediaItemModel.owner_id == user_id)
        if media_type is not None:
            statement = statement.where(MediaItemModel.type == MediaType(media_type).value)
        statement = statement.order_by(MediaItemModel.id)
        return self._to_entities(self._session.exec(statement).all())

    def get_by_type(self, media_type: MediaType) -> list[MediaItem]:
        statement = (
            select(MediaItemModel)
            .where(MediaItemModel.type == MediaType(media_type).value)
            .order_by(MediaItemModel.id)
        )
        return self._to_entities(self._session.exec(statement).all())

    def get_by_sync_client(self, client_id: int, client_item_id: str) -> Optional[MediaItem]:
        statement = (
            select(MediaItemModel)
            .join(
                MediaItemSyncClientModel,
                MediaItemSyncClientModel.media_item_id == MediaItemModel.id,
            )
            .where(MediaItemSyncClientModel.client_id == client_id)
            .where(MediaItemSyncClientModel.item_id == str(client_item_id))
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entities([model])[0]
        return None

    def get_by_external_id(self, source: str, external_id: str) -> Optional[MediaItem]:
        statement = (
            select(MediaItemModel)
            .join(
                MediaItemExternalIdModel,
                MediaItemExternalIdModel.media_item_id == MediaItemModel.id,
            )
            .where(MediaItemExternalIdModel.source == source)
            .where(MediaItemExternalIdModel.external_id == str(external_id))
            .order_by(MediaItemModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entities([model])[0]
        return None

    # ------------------------------------------------------------------
    # Ecriture
    # ------------------------------------------------------------------

    def create(self, item: MediaItem) -> MediaItem:
        model = MediaItemModel(uuid=item.uuid, type=item.type.value)
        for key, value in self._columns(item).items():
            setattr(model, key, value)
        self._session.add(model)
        self._session.flush()
        self._replace_links(model.id, item)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entities([model])[0]

    def update(self, item: MediaItem, expected_version: Optional[int] = None) -> MediaItem:
        if item.id is None:
            raise NotFoundError("cannot update an item that was never saved")

        statement = sa_update(MediaItemModel).where(MediaItemModel.id == item.id)
        if expected_version is not None:
            statement = statement.where(MediaItemModel.version == expected_version)
        result = self._session.connection().execute(statement.values(**self._columns(item)))

        if result.rowcount == 0:
            self._session.rollback()
            if self._session.get(MediaItemModel, item.id) is None:
                raise NotFoundError(f"media item {item.id} not found")
            raise ConflictError(
                f"media item {item.id} was modified concurrently "
                f"(expected version {expected_version})"
            )

        self._replace_links(item.id, item)
        self._session.commit()
        model = self._session.get(MediaItemModel, item.id, populate_existing=True)
        return self._to_entities([model])[0]

    def delete(self, item_id: int) -> bool:
        model = self._session.get(MediaItemModel, item_id)
        if model is None:
            return False
        self._delete_links(item_id)
        self._session.delete(model)
        self._session.commit()
        return True
