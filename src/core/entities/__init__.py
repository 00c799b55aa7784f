"""
Entites metier du domaine Suasor.

Exports :
- MediaItem : Enveloppe generique d'un element media normalise
- MediaType, MediaDetails : Type et metadonnees communes
- Movie, Series, Season, Episode, Artist, Album, Track : Charges utiles
- Playlist, Collection, ItemList : Listes ordonnees
- ClientConfig, ClientType, Capability : Clients et registre des capacites
- UserMediaItemData : Donnees utilisateur (favoris, notes, historique)
"""

from src.core.entities.media import (
    Album,
    Artist,
    Episode,
    MediaDetails,
    MediaItem,
    MediaType,
    Movie,
    Season,
    Series,
    SyncClient,
    Track,
)
from src.core.entities.lists import (
    ChangeRecord,
    ChangeType,
    Collection,
    CollaboratorPermission,
    ItemList,
    ListCollaborator,
    ListItem,
    Playlist,
    SyncClientState,
    SyncStatus,
)
from src.core.entities.client import (
    CAPABILITIES,
    Capability,
    ClientCategory,
    ClientConfig,
    ClientType,
)
from src.core.entities.user_data import UserMediaItemData

__all__ = [
    "Album",
    "Artist",
    "Episode",
    "MediaDetails",
    "MediaItem",
    "MediaType",
    "Movie",
    "Season",
    "Series",
    "SyncClient",
    "Track",
    "ChangeRecord",
    "ChangeType",
    "Collection",
    "CollaboratorPermission",
    "ItemList",
    "ListCollaborator",
    "ListItem",
    "Playlist",
    "SyncClientState",
    "SyncStatus",
    "CAPABILITIES",
    "Capability",
    "ClientCategory",
    "ClientConfig",
    "ClientType",
    "UserMediaItemData",
]
