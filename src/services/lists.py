"""
Services de listes : listes internes des utilisateurs et listes des clients.

ListService gere les playlists et collections Suasor (persistees dans le
catalogue, partageables, synchronisables). Les mutations passent par la
machine a etats d'ItemList puis sont enregistrees par compare-and-swap
sur la version de la liste.

ClientListService opere directement sur les listes d'un client resolu
(jamais en diffusion vers plusieurs clients).
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from src.core.entities.client import Capability
from src.core.entities.lists import (
    ChangeType,
    CollaboratorPermission,
    Collection,
    ItemId,
    ItemList,
    ListCollaborator,
    Playlist,
    SyncClientState,
    SyncStatus,
)
from src.core.entities.media import MediaDetails, MediaItem, MediaType
from src.core.errors import InvalidArgumentError, NotFoundError, PermissionDeniedError
from src.core.ports.providers import IMediaProvider
from src.core.ports.repositories import IMediaItemRepository
from src.core.value_objects.query_options import QueryOptions, SortField, SortOrder
from src.services.aggregation import COLLECTIONS, PLAYLISTS, AggregationService
from src.services.catalog import CatalogService
from src.services.client_resolver import ClientResolver


@dataclass(frozen=True)
class ListOperations:
    """Noms des methodes IMediaProvider pour un type de liste."""

    capability: Capability
    get_lists: str
    get_list: str
    get_items: str
    create: str
    update: str
    delete: str
    add: str
    remove: str
    reorder: str


LIST_OPERATIONS: dict[MediaType, ListOperations] = {
    MediaType.PLAYLIST: ListOperations(
        capability=Capability.PLAYLISTS,
        get_lists="get_playlists",
        get_list="get_playlist",
        get_items="get_playlist_items",
        create="create_playlist",
        update="update_playlist",
        delete="delete_playlist",
        add="add_playlist_item",
        remove="remove_playlist_item",
        reorder="reorder_playlist_items",
    ),
    MediaType.COLLECTION: ListOperations(
        capability=Capability.COLLECTIONS,
        get_lists="get_collections",
        get_list="get_collection",
        get_items="get_collection_items",
        create="create_collection",
        update="update_collection",
        delete="delete_collection",
        add="add_collection_item",
        remove="remove_collection_item",
        reorder="reorder_collection_items",
    ),
}


def list_media_type(kind) -> MediaType:
    """Convertit 'playlists'/'collections' (ou un MediaType) en type de liste."""
    if isinstance(kind, str) and kind.endswith("s"):
        kind = kind[:-1]
    try:
        media_type = MediaType(kind)
    except ValueError:
        raise InvalidArgumentError(f"unknown list type {kind!r}") from None
    if not media_type.is_list:
        raise InvalidArgumentError(f"{media_type.value} is not a list type")
    return media_type


class ListService:
    """
    Listes internes (playlists ou collections) d'un utilisateur.

    Regles d'acces :
        - lecture : proprietaire, collaborateurs, tout le monde si la liste est publique
        - ecriture (elements, metadonnees) : proprietaire et collaborateurs en ecriture
        - suppression et partage : proprietaire uniquement

    Example:
        service = ListService(media_repo, catalog, MediaType.PLAYLIST)
        playlist = service.create(user_id=1, name="Soiree")
        playlist = service.add_item(playlist.id, user_id=1, item_id=42)
        playlist = service.reorder_items(playlist.id, user_id=1, item_ids=[42])
    """

    def __init__(
        self,
        media_repo: IMediaItemRepository,
        catalog: CatalogService,
        media_type: MediaType = MediaType.PLAYLIST,
    ) -> None:
        self._media_repo = media_repo
        self._catalog = catalog
        self._media_type = list_media_type(media_type)

    @property
    def media_type(self) -> MediaType:
        return self._media_type

    # ------------------------------------------------------------------
    # Chargement et controles d'acces
    # ------------------------------------------------------------------

    def _load(self, list_id: int) -> MediaItem:
        item = self._media_repo.get_by_id(list_id)
        if item is None or item.type != self._media_type:
            raise NotFoundError(f"{self._media_type.value} {list_id} not found")
        return item

    def _check_read(self, item: MediaItem, user_id: int) -> None:
        if not item.data.item_list.can_read(user_id):
            raise PermissionDeniedError(
                f"user {user_id} cannot read {self._media_type.value} {item.id}"
            )

    def _check_write(self, item: MediaItem, user_id: int) -> None:
        if not item.data.item_list.can_write(user_id):
            raise PermissionDeniedError(
                f"user {user_id} cannot modify {self._media_type.value} {item.id}"
            )

    def _check_owner(self, item: MediaItem, user_id: int) -> None:
        if not item.data.item_list.is_owner(user_id):
            raise PermissionDeniedError(
                f"only the owner can do this on {self._media_type.value} {item.id}"
            )

    def save(self, item: MediaItem, expected_version: int) -> MediaItem:
        """
        Enregistre la liste si sa version stockee est expected_version.

        Raises:
            ConflictError: Si la liste a ete modifiee entre-temps.
        """
        return self._media_repo.update(item, expected_version=expected_version)

    def _mutate(
        self,
        list_id: int,
        user_id: int,
        mutation: Callable[[MediaItem], None],
        owner_only: bool = False,
    ) -> MediaItem:
        item = self._load(list_id)
        if owner_only:
            self._check_owner(item, user_id)
        else:
            self._check_write(item, user_id)
        expected_version = item.data.item_list.version
        mutation(item)
        return self.save(item, expected_version)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(
        self,
        user_id: int,
        name: str,
        description: str = "",
        is_public: bool = False,
        item_ids: Optional[list[int]] = None,
        origin_client_id: int = 0,
        collection_type: Optional[str] = None,
    ) -> MediaItem:
        """
        Cree une liste appartenant a l'utilisateur.

        Raises:
            InvalidArgumentError: Nom vide ou element en double.
            NotFoundError: Element inconnu du catalogue.
        """
        if not name or not name.strip():
            raise InvalidArgumentError("list name is required")

        item_list = ItemList(
            owner_id=user_id,
            origin_client_id=origin_client_id,
            is_public=is_public,
        )
        for item_id in item_ids or []:
            self._catalog.get_by_id(item_id)
            item_list.add_item(item_id, user_id=user_id)

        details = MediaDetails(
            title=name.strip(),
            description=description or None,
            added_at=datetime.utcnow(),
        )
        if self._media_type == MediaType.PLAYLIST:
            payload = Playlist(details=details, item_list=item_list)
        else:
            payload = Collection(
                details=details, item_list=item_list, collection_type=collection_type
            )
        created = self._media_repo.create(MediaItem(data=payload, owner_id=user_id))
        logger.info(f"{self._media_type.value} {created.id} creee par l'utilisateur {user_id}")
        return created

    def update(
        self,
        list_id: int,
        user_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
    ) -> MediaItem:
        """Met a jour titre, description ou visibilite."""
        if name is not None and not name.strip():
            raise InvalidArgumentError("list name cannot be empty")

        def apply(item: MediaItem) -> None:
            if name is not None:
                item.title = name.strip()
                item.details.title = name.strip()
            if description is not None:
                item.details.description = description
            if is_public is not None:
                item.data.item_list.is_public = is_public
            item.details.updated_at = datetime.utcnow()
            item.data.item_list.record_update(user_id=user_id)

        return self._mutate(list_id, user_id, apply)

    def get_by_id(self, list_id: int, user_id: int) -> MediaItem:
        item = self._load(list_id)
        self._check_read(item, user_id)
        return item

    def get_by_user(self, user_id: int) -> list[MediaItem]:
        return self._media_repo.get_by_user_id(user_id, self._media_type)

    def delete(self, list_id: int, user_id: int) -> bool:
        item = self._load(list_id)
        self._check_owner(item, user_id)
        deleted = self._media_repo.delete(list_id)
        logger.info(f"{self._media_type.value} {list_id} supprimee par l'utilisateur {user_id}")
        return deleted

    def search(self, user_id: int, options: QueryOptions) -> list[MediaItem]:
        """Recherche parmi les listes de l'utilisateur."""
        return self._media_repo.search(replace(options, owner_id=user_id), self._media_type)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def get_items(self, list_id: int, user_id: int) -> list[MediaItem]:
        """Elements de la liste, dans l'ordre des positions."""
        item = self.get_by_id(list_id, user_id)
        return self._catalog.get_by_ids(item.data.item_list.item_ids)

    def add_item(
        self, list_id: int, user_id: int, item_id: int, position: Optional[int] = None
    ) -> MediaItem:
        self._catalog.get_by_id(item_id)
        return self._mutate(
            list_id,
            user_id,
            lambda item: item.data.item_list.add_item(item_id, user_id=user_id, position=position),
        )

    def remove_item(self, list_id: int, user_id: int, item_id: int) -> MediaItem:
        return self._mutate(
            list_id,
            user_id,
            lambda item: item.data.item_list.remove_item(item_id, user_id=user_id),
        )

    def reorder_items(self, list_id: int, user_id: int, item_ids: list[int]) -> MediaItem:
        return self._mutate(
            list_id,
            user_id,
            lambda item: item.data.item_list.reorder(item_ids, user_id=user_id),
        )

    # ------------------------------------------------------------------
    # Partage
    # ------------------------------------------------------------------

    def share_with_user(
        self,
        list_id: int,
        owner_id: int,
        target_user_id: int,
        permission: CollaboratorPermission = CollaboratorPermission.READ,
    ) -> MediaItem:
        if target_user_id == owner_id:
            raise InvalidArgumentError("cannot share a list with its owner")
        return self._mutate(
            list_id,
            owner_id,
            lambda item: item.data.item_list.add_collaborator(
                target_user_id, CollaboratorPermission(permission), shared_by=owner_id
            ),
            owner_only=True,
        )

    def get_collaborators(self, list_id: int, user_id: int) -> list[ListCollaborator]:
        return list(self.get_by_id(list_id, user_id).data.item_list.shared_with)

    def remove_collaborator(
        self, list_id: int, owner_id: int, target_user_id: int
    ) -> MediaItem:
        return self._mutate(
            list_id,
            owner_id,
            lambda item: item.data.item_list.remove_collaborator(
                target_user_id, removed_by=owner_id
            ),
            owner_only=True,
        )

    def get_shared_with(self, user_id: int) -> list[MediaItem]:
        """Listes d'autres utilisateurs partagees avec user_id."""
        return [
            item
            for item in self._media_repo.get_by_type(self._media_type)
            if item.data.item_list.get_collaborator(user_id) is not None
        ]

    def get_sync_status(self, list_id: int, user_id: int) -> list[SyncClientState]:
        return list(self.get_by_id(list_id, user_id).data.item_list.sync_states)


class ClientListService:
    """
    Listes stockees chez un client (playlists Plex, collections Jellyfin...).

    Chaque operation resout un seul client avec la capacite du type de
    liste. Apres une mutation, la liste est relue pour retourner son etat
    a jour, avec la modification tracee.

    Example:
        service = ClientListService(resolver, aggregation, catalog, list_service)
        playlist = await service.create_client_list(user_id=1, client_id=2, name="Road trip")
        await service.add_client_item(1, 2, playlist_id, "track-42")
    """

    def __init__(
        self,
        resolver: ClientResolver,
        aggregation: AggregationService,
        catalog: CatalogService,
        list_service: ListService,
    ) -> None:
        self._resolver = resolver
        self._aggregation = aggregation
        self._catalog = catalog
        self._list_service = list_service
        self._media_type = list_service.media_type
        self._ops = LIST_OPERATIONS[self._media_type]

    def _provider(self, user_id: int, client_id: int) -> IMediaProvider:
        return self._resolver.resolve(user_id, client_id, self._ops.capability)

    def _call(self, provider: IMediaProvider, operation: str):
        return getattr(provider, getattr(self._ops, operation))

    async def _refetch(
        self,
        provider: IMediaProvider,
        list_id: str,
        user_id: int,
        item_id: Optional[ItemId],
        change_type: ChangeType,
    ) -> MediaItem:
        refreshed = await self._call(provider, "get_list")(list_id)
        item_list = refreshed.data.item_list
        item_list.last_modified = datetime.utcnow()
        item_list.modified_by = user_id
        if item_id is not None:
            item_list.record_change(item_id, provider.client_id, change_type)
            return refreshed
        for entry in list(item_list.items):
            item_list.record_change(entry.item_id, provider.client_id, change_type)
        return refreshed

    async def get_client_list(self, user_id: int, client_id: int, list_id: str) -> MediaItem:
        return await self._call(self._provider(user_id, client_id), "get_list")(list_id)

    async def get_client_lists(
        self, user_id: int, client_id: int, options: Optional[QueryOptions] = None
    ) -> list[MediaItem]:
        provider = self._provider(user_id, client_id)
        return await self._call(provider, "get_lists")(options or QueryOptions())

    async def get_user_client_lists(self, user_id: int, count: int = 20) -> list[MediaItem]:
        """Listes de tous les clients de l'utilisateur, plus recentes d'abord."""
        domain = PLAYLISTS if self._media_type == MediaType.PLAYLIST else COLLECTIONS
        options = QueryOptions(limit=count, sort=SortField.ADDED_AT, sort_order=SortOrder.DESC)
        return await self._aggregation.search_across(user_id, domain, options)

    async def search_client_lists(
        self, user_id: int, client_id: int, query: str
    ) -> list[MediaItem]:
        return await self.get_client_lists(user_id, client_id, QueryOptions(query=query))

    async def create_client_list(
        self, user_id: int, client_id: int, name: str, description: str = ""
    ) -> MediaItem:
        if not name or not name.strip():
            raise InvalidArgumentError("list name is required")
        provider = self._provider(user_id, client_id)
        created = await self._call(provider, "create")(name.strip(), description)
        logger.info(
            f"{self._media_type.value} creee sur le client {client_id} : {created.title}"
        )
        return created

    async def update_client_list(
        self, user_id: int, client_id: int, list_id: str, name: str, description: str = ""
    ) -> MediaItem:
        if not name or not name.strip():
            raise InvalidArgumentError("list name is required")
        provider = self._provider(user_id, client_id)
        await self._call(provider, "update")(list_id, name.strip(), description)
        return await self._refetch(provider, list_id, user_id, None, ChangeType.UPDATE)

    async def delete_client_list(self, user_id: int, client_id: int, list_id: str) -> None:
        provider = self._provider(user_id, client_id)
        await self._call(provider, "delete")(list_id)
        logger.info(f"{self._media_type.value} {list_id} supprimee du client {client_id}")

    async def get_client_items(
        self, user_id: int, client_id: int, list_id: str
    ) -> list[MediaItem]:
        return await self._call(self._provider(user_id, client_id), "get_items")(list_id)

    async def add_client_item(
        self, user_id: int, client_id: int, list_id: str, item_id: str
    ) -> MediaItem:
        provider = self._provider(user_id, client_id)
        await self._call(provider, "add")(list_id, item_id)
        return await self._refetch(provider, list_id, user_id, item_id, ChangeType.ADD)

    async def remove_client_item(
        self, user_id: int, client_id: int, list_id: str, item_id: str
    ) -> MediaItem:
        provider = self._provider(user_id, client_id)
        await self._call(provider, "remove")(list_id, item_id)
        return await self._refetch(provider, list_id, user_id, item_id, ChangeType.REMOVE)

    async def reorder_client_items(
        self, user_id: int, client_id: int, list_id: str, item_ids: list[str]
    ) -> MediaItem:
        """
        Reordonne une liste du client.

        Raises:
            InvalidArgumentError: Si item_ids ne contient pas exactement les elements actuels.
        """
        provider = self._provider(user_id, client_id)
        current = await self._call(provider, "get_list")(list_id)
        current.data.item_list.reorder(list(item_ids), user_id=user_id, client_id=client_id)
        await self._call(provider, "reorder")(list_id, list(item_ids))
        return await self._refetch(provider, list_id, user_id, None, ChangeType.REORDER)

    async def import_client_list(
        self, user_id: int, client_id: int, list_id: str, name: Optional[str] = None
    ) -> MediaItem:
        """
        Copie une liste du client dans une liste interne.

        Les elements sont ajoutes au catalogue (ou fusionnes avec les
        elements deja connus) ; la liste interne garde la correspondance
        avec la liste d'origine pour les synchronisations suivantes.
        """
        provider = self._provider(user_id, client_id)
        remote = await self._call(provider, "get_list")(list_id)
        remote_items = await self._call(provider, "get_items")(list_id)

        internal_ids: list[int] = []
        pushed: list[str] = []
        for remote_item in remote_items:
            stored = self._catalog.upsert_from_provider(remote_item)
            if stored.id in internal_ids:
                continue
            internal_ids.append(stored.id)
            pushed.append(stored.get_client_item_id(client_id) or "")

        created = self._list_service.create(
            user_id,
            name or remote.title,
            description=remote.details.description or "",
            item_ids=internal_ids,
            origin_client_id=client_id,
        )
        expected_version = created.data.item_list.version
        created.data.item_list.set_sync_state(
            SyncClientState(
                client_id=client_id,
                client_list_id=str(list_id),
                last_synced=datetime.utcnow(),
                items=pushed,
                status=SyncStatus.SUCCESS,
            )
        )
        created.add_sync_client(client_id, provider.client_type.value, str(list_id))
        saved = self._list_service.save(created, expected_version)
        logger.info(
            f"{self._media_type.value} {list_id} du client {client_id} importee "
            f"({len(internal_ids)} elements)"
        )
        return saved
