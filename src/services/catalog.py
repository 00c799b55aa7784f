"""
Catalogue interne des elements media.

Les elements fournis par les clients ne sont persistes que lorsqu'ils
sont references (ajout a une liste, import de playlist). L'upsert fusionne
un element fournisseur avec l'element interne deja connu, retrouve par
sa correspondance client ou par un identifiant externe.
"""

from typing import Optional

from loguru import logger

from src.core.entities.media import MediaItem, MediaType
from src.core.errors import NotFoundError
from src.core.ports.repositories import IMediaItemRepository
from src.core.value_objects.query_options import QueryOptions


class CatalogService:
    """Lecture et alimentation du catalogue interne."""

    def __init__(self, media_repo: IMediaItemRepository) -> None:
        self._media_repo = media_repo

    def get_by_id(self, item_id: int) -> MediaItem:
        item = self._media_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError(f"media item {item_id} not found")
        return item

    def get_by_ids(self, item_ids: list[int]) -> list[MediaItem]:
        return self._media_repo.get_by_ids(item_ids)

    def search(
        self, options: QueryOptions, media_type: Optional[MediaType] = None
    ) -> list[MediaItem]:
        return self._media_repo.search(options, media_type)

    def get_recent(
        self, media_type: Optional[MediaType] = None, days: int = 30, limit: int = 20
    ) -> list[MediaItem]:
        return self._media_repo.get_recent_items(media_type, days, limit)

    def find_existing(self, item: MediaItem) -> Optional[MediaItem]:
        """Element interne correspondant a un element fournisseur, s'il existe."""
        for sync_client in item.sync_clients:
            existing = self._media_repo.get_by_sync_client(
                sync_client.client_id, sync_client.item_id
            )
            if existing is not None:
                return existing
        for source, external_id in item.external_ids.items():
            existing = self._media_repo.get_by_external_id(source, external_id)
            if existing is not None and existing.type == item.type:
                return existing
        return None

    def upsert_from_provider(self, item: MediaItem) -> MediaItem:
        """
        Enregistre un element fournisseur dans le catalogue.

        Si l'element est deja connu, ses correspondances client et ses
        identifiants externes sont fusionnes ; la charge utile existante
        est conservee.
        """
        existing = self.find_existing(item)
        if existing is None:
            item.id = None
            item.owner_id = 0
            created = self._media_repo.create(item)
            logger.debug(f"Element {created.type.value} ajoute au catalogue : {created.title}")
            return created

        existing.merge_sync_clients(item.sync_clients)
        for source, external_id in item.external_ids.items():
            existing.external_ids.setdefault(source, external_id)
        return self._media_repo.update(existing)
