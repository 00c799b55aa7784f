"""
Entites media normalisees.

Modele interne commun a tous les fournisseurs : chaque enregistrement
Plex, Jellyfin, Emby, Subsonic ou TMDB est converti en MediaItem[T]
ou T est la charge utile typee (Movie, Series, Track...).
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Generic, Optional, TypeVar, Union

from src.core.errors import InvalidArgumentError

if TYPE_CHECKING:
    from src.core.entities.lists import Collection, Playlist


class MediaType(str, Enum):
    """Type de media porte par un MediaItem."""

    MOVIE = "movie"
    SERIES = "series"
    SEASON = "season"
    EPISODE = "episode"
    ARTIST = "artist"
    ALBUM = "album"
    TRACK = "track"
    PLAYLIST = "playlist"
    COLLECTION = "collection"

    @property
    def is_list(self) -> bool:
        """Indique si le type designe une liste (playlist ou collection)."""
        return self in (MediaType.PLAYLIST, MediaType.COLLECTION)


@dataclass
class MediaDetails:
    """
    Metadonnees communes a toutes les charges utiles.

    Attributs :
        title : Titre affiche
        description : Resume ou description
        release_year : Annee de sortie
        release_date : Date de sortie complete
        genres : Genres (ordre du fournisseur)
        studios : Studios ou labels
        rating : Note communautaire (echelle 0-10)
        popularity : Indice de popularite du fournisseur (ou nombre de lectures)
        duration_seconds : Duree en secondes
        artwork_url : URL de la jaquette/pochette
        added_at : Date d'ajout dans la bibliotheque du fournisseur
        external_ids : Identifiants externes par source (tmdb, imdb, tvdb, musicbrainz)
    """

    title: str = ""
    description: Optional[str] = None
    release_year: Optional[int] = None
    release_date: Optional[datetime] = None
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    rating: Optional[float] = None
    popularity: Optional[float] = None
    duration_seconds: Optional[int] = None
    artwork_url: Optional[str] = None
    added_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    external_ids: dict[str, str] = field(default_factory=dict)


@dataclass
class Movie:
    """Film."""

    details: MediaDetails = field(default_factory=MediaDetails)
    tagline: Optional[str] = None
    cast: list[str] = field(default_factory=list)
    directors: list[str] = field(default_factory=list)
    content_rating: Optional[str] = None

    media_type = MediaType.MOVIE


@dataclass
class Series:
    """Serie TV."""

    details: MediaDetails = field(default_factory=MediaDetails)
    season_count: int = 0
    episode_count: int = 0
    status: Optional[str] = None
    network: Optional[str] = None
    cast: list[str] = field(default_factory=list)
    creators: list[str] = field(default_factory=list)

    media_type = MediaType.SERIES


@dataclass
class Season:
    """Saison d'une serie."""

    details: MediaDetails = field(default_factory=MediaDetails)
    number: int = 0
    series_id: Optional[str] = None
    series_name: Optional[str] = None
    episode_count: int = 0

    media_type = MediaType.SEASON


@dataclass
class Episode:
    """Episode d'une serie."""

    details: MediaDetails = field(default_factory=MediaDetails)
    number: int = 0
    season_number: int = 0
    series_id: Optional[str] = None
    season_id: Optional[str] = None
    series_name: Optional[str] = None

    media_type = MediaType.EPISODE


@dataclass
class Artist:
    """Artiste musical."""

    details: MediaDetails = field(default_factory=MediaDetails)
    album_count: int = 0

    media_type = MediaType.ARTIST


@dataclass
class Album:
    """Album musical."""

    details: MediaDetails = field(default_factory=MediaDetails)
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None
    track_count: int = 0

    media_type = MediaType.ALBUM


@dataclass
class Track:
    """Piste audio."""

    details: MediaDetails = field(default_factory=MediaDetails)
    number: int = 0
    disc_number: int = 0
    album_id: Optional[str] = None
    album_name: Optional[str] = None
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None

    media_type = MediaType.TRACK


MediaData = Union[
    Movie, Series, Season, Episode, Artist, Album, Track, "Playlist", "Collection"
]

T = TypeVar("T")


@dataclass
class SyncClient:
    """
    Correspondance entre un element interne et son identifiant chez un client.

    Attributs :
        client_id : ID de la configuration client
        client_type : Type du client (plex, jellyfin...)
        item_id : Identifiant de l'element chez le fournisseur
        last_synced : Date de derniere synchronisation
    """

    client_id: int
    client_type: str
    item_id: str
    last_synced: Optional[datetime] = None


@dataclass
class MediaItem(Generic[T]):
    """
    Enveloppe generique autour d'une charge utile media.

    Invariants :
        - type correspond au type de la charge utile (verifie a la construction)
        - sync_clients contient au plus une entree par client_id

    Attributs :
        data : Charge utile typee (Movie, Series, Playlist...)
        type : Type de media ; deduit de data si absent
        id : ID interne (None tant que non persiste)
        uuid : Identifiant stable utilise pour la synchronisation
        title : Titre (copie de data.details.title)
        sync_clients : Correspondances client -> identifiant externe
        owner_id : Utilisateur proprietaire (0 pour le catalogue systeme)
    """

    data: T
    type: Optional[MediaType] = None
    id: Optional[int] = None
    uuid: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = ""
    sync_clients: list[SyncClient] = field(default_factory=list)
    owner_id: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        payload_type = getattr(self.data, "media_type", None)
        if self.type is None:
            self.type = payload_type
        elif payload_type is not None and MediaType(self.type) != payload_type:
            raise InvalidArgumentError(
                f"media type {self.type} does not match payload {type(self.data).__name__}"
            )
        else:
            self.type = MediaType(self.type)
        if not self.title:
            self.title = self.details.title
        # Une entree par client : la derniere fournie l'emporte
        latest: dict[int, SyncClient] = {}
        for sync_client in self.sync_clients:
            latest[sync_client.client_id] = sync_client
        if len(latest) != len(self.sync_clients):
            self.sync_clients = list(latest.values())

    @property
    def details(self) -> MediaDetails:
        """Metadonnees communes de la charge utile."""
        return self.data.details

    @property
    def external_ids(self) -> dict[str, str]:
        """Identifiants externes (tmdb, imdb...) de l'element."""
        return self.details.external_ids

    @property
    def is_list(self) -> bool:
        """Indique si l'element est une playlist ou une collection."""
        return self.type.is_list

    def add_sync_client(
        self, client_id: int, client_type: str, item_id: str
    ) -> None:
        """
        Enregistre l'identifiant de l'element chez un client.

        Remplace l'entree existante pour le meme client_id.
        """
        now = datetime.utcnow()
        for sync_client in self.sync_clients:
            if sync_client.client_id == client_id:
                sync_client.client_type = client_type
                sync_client.item_id = item_id
                sync_client.last_synced = now
                return
        self.sync_clients.append(
            SyncClient(client_id, client_type, item_id, last_synced=now)
        )

    def get_client_item_id(self, client_id: int) -> Optional[str]:
        """Retourne l'identifiant de l'element chez le client, ou None."""
        for sync_client in self.sync_clients:
            if sync_client.client_id == client_id:
                return sync_client.item_id
        return None

    def merge_sync_clients(self, other: list[SyncClient]) -> None:
        """Fusionne des correspondances provenant d'un autre enregistrement."""
        for sync_client in other:
            self.add_sync_client(
                sync_client.client_id, sync_client.client_type, sync_client.item_id
            )
