"""
Listes ordonnees : playlists et collections.

Une liste est une charge utile de MediaItem (Playlist ou Collection) qui
porte un ItemList. L'ItemList est une petite machine a etats :

    absent --add--> present --reorder/update--> present --remove--> absent

Chaque transition ajoute un ChangeRecord a l'historique de l'element et a
celui de la liste, renumerote les positions (0..n-1 sans trou) et
incremente la version de la liste, utilisee pour la concurrence optimiste.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from src.core.entities.media import MediaDetails, MediaType
from src.core.errors import InvalidArgumentError, NotFoundError

# ID interne (int) pour les listes Suasor, ID fournisseur (str) pour les listes client
ItemId = Union[int, str]


class ChangeType(str, Enum):
    """Type de modification appliquee a un element de liste."""

    ADD = "add"
    REMOVE = "remove"
    REORDER = "reorder"
    UPDATE = "update"


class CollaboratorPermission(str, Enum):
    """Droit accorde a un collaborateur (write implique read)."""

    READ = "read"
    WRITE = "write"


class SyncStatus(str, Enum):
    """Etat de la derniere synchronisation d'une liste vers un client."""

    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"


@dataclass
class ChangeRecord:
    """Trace d'une modification (historique en ajout seul)."""

    client_id: int
    item_id: ItemId
    change_type: ChangeType
    timestamp: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ListItem:
    """
    Element d'une liste.

    Attributs :
        item_id : ID de l'element reference
        position : Position (0-based) dans la liste
        last_changed : Date de derniere modification
        change_history : Historique des modifications de cet element
    """

    item_id: ItemId
    position: int
    last_changed: datetime = field(default_factory=datetime.utcnow)
    change_history: list[ChangeRecord] = field(default_factory=list)

    def record(self, client_id: int, change_type: ChangeType) -> ChangeRecord:
        now = datetime.utcnow()
        change = ChangeRecord(client_id, self.item_id, change_type, now)
        self.change_history.append(change)
        self.last_changed = now
        return change


@dataclass
class ListCollaborator:
    """Utilisateur avec qui une liste est partagee."""

    user_id: int
    permission: CollaboratorPermission = CollaboratorPermission.READ
    shared_at: datetime = field(default_factory=datetime.utcnow)
    shared_by: int = 0

    @property
    def can_write(self) -> bool:
        return self.permission == CollaboratorPermission.WRITE


@dataclass
class SyncClientState:
    """
    Etat de synchronisation d'une liste interne vers un client.

    Attributs :
        client_id : Client cible
        client_list_id : ID de la liste chez le client (vide avant creation)
        last_synced : Date du dernier push reussi
        items : IDs externes pousses lors du dernier push
        status : Resultat de la derniere tentative
        missing_item_ids : Elements internes sans correspondance chez le client
        error : Message d'erreur de la derniere tentative en echec
    """

    client_id: int
    client_list_id: str = ""
    last_synced: Optional[datetime] = None
    items: list[str] = field(default_factory=list)
    status: SyncStatus = SyncStatus.PENDING
    missing_item_ids: list[int] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class ItemList:
    """
    Contenu ordonne et metadonnees de partage d'une liste.

    Invariants :
        - positions denses, uniques, de 0 a len(items) - 1 apres chaque mutation
        - un meme item_id n'apparait qu'une fois
        - historique des modifications en ajout seul

    change_history reprend les ChangeRecord de tous les elements, y compris
    ceux qui ont ete retires de la liste.
    """

    items: list[ListItem] = field(default_factory=list)
    change_history: list[ChangeRecord] = field(default_factory=list)
    owner_id: int = 0
    origin_client_id: int = 0
    is_public: bool = False
    shared_with: list[ListCollaborator] = field(default_factory=list)
    sync_states: list[SyncClientState] = field(default_factory=list)
    last_modified: Optional[datetime] = None
    modified_by: int = 0
    version: int = 0
    is_smart: bool = False
    smart_criteria: dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def item_ids(self) -> list[ItemId]:
        """IDs des elements dans l'ordre des positions."""
        return [item.item_id for item in sorted(self.items, key=lambda i: i.position)]

    def contains(self, item_id: ItemId) -> bool:
        return self._find(item_id) is not None

    def _find(self, item_id: ItemId) -> Optional[ListItem]:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def validate_items(self) -> list[str]:
        """
        Verifie l'integrite des positions.

        Returns:
            Liste des problemes detectes (vide si la liste est saine).
        """
        issues: list[str] = []
        seen: dict[int, ItemId] = {}
        seen_ids: set = set()
        for item in self.items:
            if item.position in seen:
                issues.append(
                    f"duplicate position {item.position} for items "
                    f"{seen[item.position]} and {item.item_id}"
                )
            seen[item.position] = item.item_id
            if item.item_id in seen_ids:
                issues.append(f"duplicate item {item.item_id}")
            seen_ids.add(item.item_id)
        for position in range(len(self.items)):
            if position not in seen:
                issues.append(f"missing position {position}")
        return issues

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(
        self,
        item_id: ItemId,
        user_id: int = 0,
        client_id: int = 0,
        position: Optional[int] = None,
    ) -> ListItem:
        """
        Ajoute un element en fin de liste ou a une position donnee.

        Les elements situes a partir de la position sont decales d'un cran.

        Raises:
            InvalidArgumentError: Si l'element est deja present.
        """
        if self.contains(item_id):
            raise InvalidArgumentError(f"item {item_id} is already in the list")

        self.normalize_positions()
        if position is None or position >= len(self.items):
            position = len(self.items)
        position = max(position, 0)

        for item in self.items:
            if item.position >= position:
                item.position += 1

        new_item = ListItem(item_id=item_id, position=position)
        self._record(new_item, client_id, ChangeType.ADD)
        self.items.append(new_item)
        self.normalize_positions()
        self.touch(user_id)
        return new_item

    def remove_item(self, item_id: ItemId, user_id: int = 0, client_id: int = 0) -> None:
        """
        Retire un element de la liste.

        Raises:
            NotFoundError: Si l'element n'est pas dans la liste.
        """
        item = self._find(item_id)
        if item is None:
            raise NotFoundError(f"item {item_id} is not in the list")

        self._record(item, client_id, ChangeType.REMOVE)
        self.items.remove(item)
        self.normalize_positions()
        self.touch(user_id)

    def reorder(self, item_ids: list[ItemId], user_id: int = 0, client_id: int = 0) -> None:
        """
        Reordonne la liste selon item_ids.

        item_ids doit contenir exactement les elements actuels. En cas
        d'ecart, la liste n'est pas modifiee.

        Raises:
            InvalidArgumentError: Si l'ensemble d'IDs differe du contenu actuel.
        """
        current = {item.item_id for item in self.items}
        if len(item_ids) != len(self.items) or set(item_ids) != current:
            raise InvalidArgumentError("reorder operation must include all playlist items")

        by_id = {item.item_id: item for item in self.items}
        reordered = []
        for index, item_id in enumerate(item_ids):
            item = by_id[item_id]
            if item.position != index:
                self._record(item, client_id, ChangeType.REORDER)
            item.position = index
            reordered.append(item)
        self.items = reordered
        self.touch(user_id)

    def record_update(self, user_id: int = 0, client_id: int = 0) -> None:
        """Marque une mise a jour des metadonnees de la liste."""
        for item in self.items:
            self._record(item, client_id, ChangeType.UPDATE)
        self.touch(user_id)

    def _record(self, item: ListItem, client_id: int, change_type: ChangeType) -> None:
        self.change_history.append(item.record(client_id, change_type))

    def record_change(
        self, item_id: ItemId, client_id: int, change_type: ChangeType
    ) -> ChangeRecord:
        """
        Trace une modification faite hors de la liste (chez un client).

        Un element absent (deja retire) n'a d'historique qu'au niveau de la liste.
        """
        item = self._find(item_id)
        if item is not None:
            self._record(item, client_id, change_type)
        else:
            self.change_history.append(ChangeRecord(client_id, item_id, change_type))
        return self.change_history[-1]

    def normalize_positions(self) -> None:
        """Renumerote les positions de 0 a n-1 en conservant l'ordre courant."""
        self.items.sort(key=lambda item: item.position)
        for index, item in enumerate(self.items):
            item.position = index

    def touch(self, user_id: int = 0) -> None:
        self.version += 1
        self.last_modified = datetime.utcnow()
        self.modified_by = user_id

    # ------------------------------------------------------------------
    # Partage
    # ------------------------------------------------------------------

    def is_owner(self, user_id: int) -> bool:
        return self.owner_id == user_id

    def get_collaborator(self, user_id: int) -> Optional[ListCollaborator]:
        for collaborator in self.shared_with:
            if collaborator.user_id == user_id:
                return collaborator
        return None

    def can_read(self, user_id: int) -> bool:
        return (
            self.is_public
            or self.is_owner(user_id)
            or self.get_collaborator(user_id) is not None
        )

    def can_write(self, user_id: int) -> bool:
        if self.is_owner(user_id):
            return True
        collaborator = self.get_collaborator(user_id)
        return collaborator is not None and collaborator.can_write

    def add_collaborator(
        self, user_id: int, permission: CollaboratorPermission, shared_by: int
    ) -> ListCollaborator:
        """Ajoute ou met a jour un collaborateur."""
        collaborator = self.get_collaborator(user_id)
        if collaborator is None:
            collaborator = ListCollaborator(user_id, permission, shared_by=shared_by)
            self.shared_with.append(collaborator)
        else:
            collaborator.permission = permission
            collaborator.shared_by = shared_by
            collaborator.shared_at = datetime.utcnow()
        self.touch(shared_by)
        return collaborator

    def remove_collaborator(self, user_id: int, removed_by: int) -> None:
        collaborator = self.get_collaborator(user_id)
        if collaborator is None:
            raise NotFoundError(f"user {user_id} is not a collaborator of this list")
        self.shared_with.remove(collaborator)
        self.touch(removed_by)

    # ------------------------------------------------------------------
    # Synchronisation
    # ------------------------------------------------------------------

    def get_sync_state(self, client_id: int) -> Optional[SyncClientState]:
        for state in self.sync_states:
            if state.client_id == client_id:
                return state
        return None

    def set_sync_state(self, state: SyncClientState) -> None:
        """Remplace l'etat de synchronisation du client (une entree par client)."""
        self.sync_states = [s for s in self.sync_states if s.client_id != state.client_id]
        self.sync_states.append(state)


@dataclass
class Playlist:
    """Playlist (liste ordonnee de pistes, films ou episodes)."""

    details: MediaDetails = field(default_factory=MediaDetails)
    item_list: ItemList = field(default_factory=ItemList)

    media_type = MediaType.PLAYLIST


@dataclass
class Collection:
    """Collection (regroupement de films ou series)."""

    details: MediaDetails = field(default_factory=MediaDetails)
    item_list: ItemList = field(default_factory=ItemList)
    collection_type: Optional[str] = None

    media_type = MediaType.COLLECTION


LIST_PAYLOADS: dict[MediaType, type] = {
    MediaType.PLAYLIST: Playlist,
    MediaType.COLLECTION: Collection,
}
