"""
Synchronisation des listes internes vers les clients.

La liste interne fait foi : chaque synchronisation pousse son contenu et
son ordre vers la liste correspondante du client, en ecrasant les
modifications faites cote client depuis le dernier push. Un client en
echec est marque failed sans interrompre les autres.
"""

from datetime import datetime
from typing import Optional

from loguru import logger

from src.core.entities.lists import SyncClientState, SyncStatus
from src.core.entities.media import MediaItem
from src.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    ProviderError,
    SuasorError,
    UnsupportedFeatureError,
)
from src.core.ports.providers import IMediaProvider
from src.services.client_resolver import ClientResolver
from src.services.lists import LIST_OPERATIONS, ListService


class ListSyncService:
    """
    Pousse une liste interne vers un ou plusieurs clients.

    Pour chaque client cible :
        1. retrouve la liste distante (ou la cree si absente)
        2. traduit les elements internes en IDs du client via leurs sync_clients
        3. retire les elements en trop, ajoute les manquants, puis reordonne
        4. enregistre un SyncClientState avec le resultat

    Example:
        sync = ListSyncService(resolver, list_service)
        states = await sync.sync(user_id=1, list_id=10, target_client_ids=[2, 3])
    """

    def __init__(self, resolver: ClientResolver, list_service: ListService) -> None:
        self._resolver = resolver
        self._list_service = list_service
        self._ops = LIST_OPERATIONS[list_service.media_type]

    async def sync(
        self, user_id: int, list_id: int, target_client_ids: list[int]
    ) -> list[SyncClientState]:
        """
        Synchronise la liste vers les clients cibles.

        Raises:
            NotFoundError: Liste absente.
            PermissionDeniedError: Utilisateur sans droit d'ecriture sur la liste.
            ConflictError: Liste modifiee pendant la synchronisation.
        """
        item = self._list_service.get_by_id(list_id, user_id)
        item_list = item.data.item_list
        if not item_list.can_write(user_id):
            raise PermissionDeniedError(f"user {user_id} cannot sync list {list_id}")

        expected_version = item_list.version
        entries = self._list_service.get_items(list_id, user_id)
        found = {entry.id for entry in entries}
        orphan_ids = [i for i in item_list.item_ids if i not in found]

        states: list[SyncClientState] = []
        for client_id in dict.fromkeys(target_client_ids):
            previous = item_list.get_sync_state(client_id)
            # Garde l'ID d'une liste distante creee avant un echec
            attempt = SyncClientState(
                client_id=client_id,
                client_list_id=previous.client_list_id if previous else "",
                last_synced=previous.last_synced if previous else None,
                items=list(previous.items) if previous else [],
            )
            try:
                state = await self._sync_client(user_id, item, entries, attempt)
                state.missing_item_ids = orphan_ids + state.missing_item_ids
            except Exception as e:
                message = str(e) if isinstance(e, SuasorError) else f"{type(e).__name__}: {e}"
                logger.bind(client_id=client_id).warning(
                    f"Synchronisation de la liste {list_id} : {message}"
                )
                attempt.status = SyncStatus.FAILED
                attempt.error = message
                state = attempt
            item_list.set_sync_state(state)
            states.append(state)

        self._list_service.save(item, expected_version)
        return states

    async def _remote_list(
        self, provider: IMediaProvider, item: MediaItem, previous: Optional[SyncClientState]
    ) -> tuple[str, list[str]]:
        """ID et contenu de la liste distante, creee si elle n'existe pas."""
        if previous and previous.client_list_id:
            try:
                remote = await getattr(provider, self._ops.get_list)(previous.client_list_id)
                return previous.client_list_id, [str(i) for i in remote.data.item_list.item_ids]
            except NotFoundError:
                logger.info(
                    f"Liste distante {previous.client_list_id} introuvable sur "
                    f"le client {provider.client_id}, recreation"
                )

        created = await getattr(provider, self._ops.create)(
            item.title, item.details.description or ""
        )
        remote_id = created.get_client_item_id(provider.client_id)
        if not remote_id:
            raise ProviderError(
                "created list has no identifier", client_type=provider.client_type.value
            )
        return remote_id, []

    async def _sync_client(
        self,
        user_id: int,
        item: MediaItem,
        entries: list[MediaItem],
        attempt: SyncClientState,
    ) -> SyncClientState:
        client_id = attempt.client_id
        provider = self._resolver.resolve(user_id, client_id, self._ops.capability)
        remote_id, current = await self._remote_list(provider, item, attempt)
        if remote_id != attempt.client_list_id:
            attempt.client_list_id = remote_id
            attempt.items = []

        translated: list[str] = []
        missing: list[int] = []
        for entry in entries:
            external_id = entry.get_client_item_id(client_id)
            if external_id is None:
                missing.append(entry.id)
            elif external_id not in translated:
                translated.append(external_id)

        for external_id in current:
            if external_id not in translated:
                await getattr(provider, self._ops.remove)(remote_id, external_id)
        remaining = [i for i in current if i in translated]
        for external_id in translated:
            if external_id not in remaining:
                await getattr(provider, self._ops.add)(remote_id, external_id)
                remaining.append(external_id)

        if remaining != translated:
            try:
                await getattr(provider, self._ops.reorder)(remote_id, translated)
            except UnsupportedFeatureError:
                logger.debug(f"Client {client_id} : reordonnancement non supporte, ordre ignore")

        logger.info(
            f"Liste {item.id} synchronisee vers le client {client_id} "
            f"({len(translated)} elements, {len(missing)} sans correspondance)"
        )
        return SyncClientState(
            client_id=client_id,
            client_list_id=remote_id,
            last_synced=datetime.utcnow(),
            items=translated,
            status=SyncStatus.SUCCESS,
            missing_item_ids=missing,
        )
