"""
Configuration des clients et registre des capacites.

Un client est une instance configuree d'un fournisseur (un serveur Plex,
un serveur Jellyfin, le compte TMDB...). Les capacites (films, series,
musique...) sont deduites du type de client et non de l'instance.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from src.core.entities.media import MediaType


class ClientType(str, Enum):
    """Fournisseurs supportes."""

    PLEX = "plex"
    JELLYFIN = "jellyfin"
    EMBY = "emby"
    SUBSONIC = "subsonic"
    TMDB = "tmdb"

    @property
    def category(self) -> "ClientCategory":
        if self == ClientType.TMDB:
            return ClientCategory.METADATA
        return ClientCategory.MEDIA


class ClientCategory(str, Enum):
    """Famille de client : serveur media ou source de metadonnees."""

    MEDIA = "media"
    METADATA = "metadata"


class Capability(str, Enum):
    """Domaine fonctionnel qu'un client peut servir."""

    MOVIES = "movies"
    SERIES = "series"
    MUSIC = "music"
    PLAYLISTS = "playlists"
    COLLECTIONS = "collections"
    HISTORY = "history"

    @classmethod
    def for_media_type(cls, media_type: MediaType) -> "Capability":
        """Capacite necessaire pour servir un type de media."""
        return _MEDIA_TYPE_CAPABILITY[MediaType(media_type)]


_MEDIA_TYPE_CAPABILITY = {
    MediaType.MOVIE: Capability.MOVIES,
    MediaType.SERIES: Capability.SERIES,
    MediaType.SEASON: Capability.SERIES,
    MediaType.EPISODE: Capability.SERIES,
    MediaType.ARTIST: Capability.MUSIC,
    MediaType.ALBUM: Capability.MUSIC,
    MediaType.TRACK: Capability.MUSIC,
    MediaType.PLAYLIST: Capability.PLAYLISTS,
    MediaType.COLLECTION: Capability.COLLECTIONS,
}

_ALL_MEDIA = frozenset(Capability)

CAPABILITIES: dict[ClientType, frozenset[Capability]] = {
    ClientType.JELLYFIN: _ALL_MEDIA,
    ClientType.EMBY: _ALL_MEDIA,
    ClientType.PLEX: _ALL_MEDIA,
    ClientType.SUBSONIC: frozenset(
        {Capability.MUSIC, Capability.PLAYLISTS, Capability.HISTORY}
    ),
    ClientType.TMDB: frozenset(
        {Capability.MOVIES, Capability.SERIES, Capability.COLLECTIONS}
    ),
}


def supports(client_type: ClientType, capability: Capability) -> bool:
    """Indique si un type de client supporte une capacite."""
    return Capability(capability) in CAPABILITIES.get(ClientType(client_type), frozenset())


@dataclass
class ClientConfig:
    """
    Configuration d'un client fournisseur.

    Attributs :
        id : ID en base (None avant persistance)
        user_id : Utilisateur proprietaire (0 pour un client systeme)
        name : Nom affiche
        client_type : Type de fournisseur
        base_url : URL du serveur (vide pour TMDB)
        api_key : Jeton ou cle d'API
        username : Identifiant (Subsonic)
        password : Mot de passe (Subsonic)
        user_identifier : ID utilisateur cote fournisseur (Jellyfin, Emby)
        ssl : Verification TLS active
        enabled : Client actif
    """

    name: str
    client_type: ClientType
    user_id: int = 0
    id: Optional[int] = None
    base_url: str = ""
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    user_identifier: Optional[str] = None
    ssl: bool = True
    enabled: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.client_type = ClientType(self.client_type)

    @property
    def category(self) -> ClientCategory:
        return self.client_type.category

    @property
    def capabilities(self) -> frozenset[Capability]:
        if not self.enabled:
            return frozenset()
        return CAPABILITIES[self.client_type]

    def supports(self, capability: Capability) -> bool:
        return Capability(capability) in self.capabilities

    @property
    def supports_movies(self) -> bool:
        return self.supports(Capability.MOVIES)

    @property
    def supports_series(self) -> bool:
        return self.supports(Capability.SERIES)

    @property
    def supports_music(self) -> bool:
        return self.supports(Capability.MUSIC)

    @property
    def supports_playlists(self) -> bool:
        return self.supports(Capability.PLAYLISTS)

    @property
    def supports_collections(self) -> bool:
        return self.supports(Capability.COLLECTIONS)

    @property
    def supports_history(self) -> bool:
        return self.supports(Capability.HISTORY)
