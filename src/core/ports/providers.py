"""
Interfaces ports pour les fournisseurs de médias.

IMediaProvider est la frontière unique entre le domaine et les serveurs
média (Plex, Jellyfin, Emby, Subsonic). Chaque méthode de domaine lève
UnsupportedFeatureError par défaut : un adaptateur ne surcharge que ce que
son fournisseur sait faire, en cohérence avec le registre des capacités.

IMetadataProvider couvre les sources de métadonnées de référence (TMDB).
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.client import Capability, ClientConfig, ClientType
from src.core.entities.lists import Collection, Playlist
from src.core.entities.media import (
    Album,
    Artist,
    Episode,
    MediaItem,
    Movie,
    Season,
    Series,
    Track,
)
from src.core.errors import UnsupportedFeatureError
from src.core.value_objects.query_options import QueryOptions


class IMediaProvider(ABC):
    """
    Adaptateur vers un client média configuré.

    Toutes les méthodes de domaine sont asynchrones. Les méthodes
    de lecture unitaire (get_movie, get_playlist...) lèvent NotFoundError
    si l'élément n'existe pas chez le fournisseur.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def client_id(self) -> int:
        return self._config.id or 0

    @property
    def client_type(self) -> ClientType:
        return self._config.client_type

    def supports(self, capability: Capability) -> bool:
        """Prédicat de capacité (registre + état enabled de la configuration)."""
        return self._config.supports(capability)

    def _unsupported(self, feature: str) -> UnsupportedFeatureError:
        return UnsupportedFeatureError(
            f"{feature} is not supported by {self.client_type.value} clients"
        )

    @abstractmethod
    async def test_connection(self) -> bool:
        """
        Vérifie que le fournisseur est joignable avec les identifiants configurés.

        Retourne :
            True si la connexion est valide

        Lève :
            ProviderError si le serveur répond en erreur ou est injoignable
        """
        ...

    async def close(self) -> None:
        """Libère les ressources réseau de l'adaptateur."""
        return None

    # ------------------------------------------------------------------
    # Films
    # ------------------------------------------------------------------

    async def get_movies(self, options: QueryOptions) -> list[MediaItem[Movie]]:
        raise self._unsupported("movies")

    async def get_movie(self, movie_id: str) -> MediaItem[Movie]:
        raise self._unsupported("movies")

    # ------------------------------------------------------------------
    # Séries
    # ------------------------------------------------------------------

    async def get_series(self, options: QueryOptions) -> list[MediaItem[Series]]:
        raise self._unsupported("series")

    async def get_series_by_id(self, series_id: str) -> MediaItem[Series]:
        raise self._unsupported("series")

    async def get_seasons(self, series_id: str) -> list[MediaItem[Season]]:
        raise self._unsupported("series")

    async def get_episodes(
        self, series_id: str, season_number: Optional[int] = None
    ) -> list[MediaItem[Episode]]:
        raise self._unsupported("series")

    # ------------------------------------------------------------------
    # Musique
    # ------------------------------------------------------------------

    async def get_artists(self, options: QueryOptions) -> list[MediaItem[Artist]]:
        raise self._unsupported("music")

    async def get_artist(self, artist_id: str) -> MediaItem[Artist]:
        raise self._unsupported("music")

    async def get_albums(self, options: QueryOptions) -> list[MediaItem[Album]]:
        raise self._unsupported("music")

    async def get_album(self, album_id: str) -> MediaItem[Album]:
        raise self._unsupported("music")

    async def get_tracks(self, options: QueryOptions) -> list[MediaItem[Track]]:
        raise self._unsupported("music")

    async def get_track(self, track_id: str) -> MediaItem[Track]:
        raise self._unsupported("music")

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    async def get_playlists(self, options: QueryOptions) -> list[MediaItem[Playlist]]:
        raise self._unsupported("playlists")

    async def get_playlist(self, playlist_id: str) -> MediaItem[Playlist]:
        raise self._unsupported("playlists")

    async def get_playlist_items(self, playlist_id: str) -> list[MediaItem]:
        raise self._unsupported("playlists")

    async def create_playlist(
        self, name: str, description: str = ""
    ) -> MediaItem[Playlist]:
        raise self._unsupported("playlists")

    async def update_playlist(
        self, playlist_id: str, name: str, description: str = ""
    ) -> MediaItem[Playlist]:
        raise self._unsupported("playlists")

    async def delete_playlist(self, playlist_id: str) -> None:
        raise self._unsupported("playlists")

    async def add_playlist_item(self, playlist_id: str, item_id: str) -> None:
        raise self._unsupported("playlists")

    async def remove_playlist_item(self, playlist_id: str, item_id: str) -> None:
        raise self._unsupported("playlists")

    async def reorder_playlist_items(
        self, playlist_id: str, item_ids: list[str]
    ) -> None:
        raise self._unsupported("playlists")

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def get_collections(
        self, options: QueryOptions
    ) -> list[MediaItem[Collection]]:
        raise self._unsupported("collections")

    async def get_collection(self, collection_id: str) -> MediaItem[Collection]:
        raise self._unsupported("collections")

    async def get_collection_items(self, collection_id: str) -> list[MediaItem]:
        raise self._unsupported("collections")

    async def create_collection(
        self, name: str, description: str = ""
    ) -> MediaItem[Collection]:
        raise self._unsupported("collections")

    async def update_collection(
        self, collection_id: str, name: str, description: str = ""
    ) -> MediaItem[Collection]:
        raise self._unsupported("collections")

    async def delete_collection(self, collection_id: str) -> None:
        raise self._unsupported("collections")

    async def add_collection_item(self, collection_id: str, item_id: str) -> None:
        raise self._unsupported("collections")

    async def remove_collection_item(self, collection_id: str, item_id: str) -> None:
        raise self._unsupported("collections")

    async def reorder_collection_items(
        self, collection_id: str, item_ids: list[str]
    ) -> None:
        raise self._unsupported("collections")

    # ------------------------------------------------------------------
    # Historique
    # ------------------------------------------------------------------

    async def get_play_history(self, options: QueryOptions) -> list[MediaItem]:
        raise self._unsupported("history")


class IMetadataProvider(ABC):
    """
    Source de métadonnées de référence (TMDB).

    Les éléments retournés sont des références catalogue : ils ne sont
    rattachés à aucun serveur média de l'utilisateur.
    """

    @abstractmethod
    async def search_movies(
        self, query: str, year: Optional[int] = None
    ) -> list[MediaItem[Movie]]:
        """
        Recherche des films par titre.

        Args :
            query : Titre recherché
            year : Filtre optionnel par année de sortie

        Retourne :
            Films correspondants (ordre de pertinence du fournisseur)
        """
        ...

    @abstractmethod
    async def get_movie(self, movie_id: str) -> Optional[MediaItem[Movie]]:
        """Récupère un film par son ID fournisseur, None si inconnu."""
        ...

    @abstractmethod
    async def search_series(
        self, query: str, year: Optional[int] = None
    ) -> list[MediaItem[Series]]:
        """Recherche des séries par titre."""
        ...

    @abstractmethod
    async def get_series(self, series_id: str) -> Optional[MediaItem[Series]]:
        """Récupère une série par son ID fournisseur, None si inconnue."""
        ...

    @abstractmethod
    async def get_popular_movies(self, page: int = 1) -> list[MediaItem[Movie]]:
        """Films populaires du moment."""
        ...

    @abstractmethod
    async def get_collection(
        self, collection_id: str
    ) -> Optional[MediaItem[Collection]]:
        """Récupère une collection (saga) et ses films."""
        ...
