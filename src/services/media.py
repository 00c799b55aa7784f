"""
Services par domaine media.

Facades minces au-dessus d'AggregationService : chaque service fixe le
domaine et expose les raccourcis de recherche usuels (par genre, annee,
acteur, note, derniers ajouts, populaires, mieux notes).
"""

from typing import Optional

from src.core.entities.media import MediaItem
from src.core.value_objects.query_options import QueryOptions, SortField, SortOrder
from src.services.aggregation import (
    ALBUMS,
    ARTISTS,
    COLLECTIONS,
    MOVIES,
    PLAYLISTS,
    SERIES,
    TRACKS,
    AggregateResult,
    AggregationService,
    MediaDomain,
)

DEFAULT_LIMIT = 20


class DomainMediaService:
    """Operations de lecture communes a un domaine agrege."""

    domain: MediaDomain

    def __init__(self, aggregation: AggregationService) -> None:
        self._aggregation = aggregation

    async def get_by_id(self, user_id: int, client_id: int, external_id: str) -> MediaItem:
        return await self._aggregation.get_by_id(user_id, self.domain, client_id, external_id)

    async def get_client_items(
        self, user_id: int, client_id: int, options: QueryOptions
    ) -> list[MediaItem]:
        return await self._aggregation.get_client_items(
            user_id, self.domain, client_id, options
        )

    async def search(self, user_id: int, options: QueryOptions) -> list[MediaItem]:
        return await self._aggregation.search_across(user_id, self.domain, options)

    async def aggregate(self, user_id: int, options: QueryOptions) -> AggregateResult:
        return await self._aggregation.aggregate(user_id, self.domain, options)

    async def by_genre(
        self, user_id: int, genre: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search(user_id, QueryOptions(genre=genre, limit=limit))

    async def by_year(
        self, user_id: int, year: int, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search(user_id, QueryOptions(year=year, limit=limit))

    async def by_rating(
        self,
        user_id: int,
        min_rating: Optional[float] = None,
        max_rating: Optional[float] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[MediaItem]:
        options = QueryOptions(limit=limit, sort=SortField.RATING).with_rating_range(
            min_rating, max_rating
        )
        return await self.search(user_id, options)

    async def latest_added(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[MediaItem]:
        options = QueryOptions(
            limit=limit,
            sort=SortField.ADDED_AT,
            sort_order=SortOrder.DESC,
            recently_added=True,
        )
        return await self.search(user_id, options)

    async def popular(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[MediaItem]:
        options = QueryOptions(limit=limit, sort=SortField.POPULARITY)
        return await self.search(user_id, options)

    async def top_rated(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[MediaItem]:
        options = QueryOptions(limit=limit, sort=SortField.RATING)
        return await self.search(user_id, options)


class MovieService(DomainMediaService):
    domain = MOVIES

    async def by_actor(
        self, user_id: int, actor: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search(user_id, QueryOptions(actor=actor, limit=limit))

    async def by_director(
        self, user_id: int, director: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search(user_id, QueryOptions(director=director, limit=limit))


class SeriesService(DomainMediaService):
    domain = SERIES

    async def by_actor(
        self, user_id: int, actor: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search(user_id, QueryOptions(actor=actor, limit=limit))

    async def by_creator(
        self, user_id: int, creator: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search(user_id, QueryOptions(creator=creator, limit=limit))

    async def get_seasons(self, user_id: int, client_id: int, series_id: str) -> list[MediaItem]:
        return await self._aggregation.get_seasons(user_id, client_id, series_id)

    async def get_episodes(
        self, user_id: int, client_id: int, series_id: str, season_number: Optional[int] = None
    ) -> list[MediaItem]:
        return await self._aggregation.get_episodes(user_id, client_id, series_id, season_number)


class PlaylistService(DomainMediaService):
    domain = PLAYLISTS


class CollectionService(DomainMediaService):
    domain = COLLECTIONS


class MusicService:
    """
    Musique : trois domaines (artistes, albums, pistes) sur la meme capacite.

    Example:
        tracks = await music.search_tracks(user_id, QueryOptions(query="Blue"))
    """

    def __init__(self, aggregation: AggregationService) -> None:
        self._aggregation = aggregation

    async def search_artists(self, user_id: int, options: QueryOptions) -> list[MediaItem]:
        return await self._aggregation.search_across(user_id, ARTISTS, options)

    async def search_albums(self, user_id: int, options: QueryOptions) -> list[MediaItem]:
        return await self._aggregation.search_across(user_id, ALBUMS, options)

    async def search_tracks(self, user_id: int, options: QueryOptions) -> list[MediaItem]:
        return await self._aggregation.search_across(user_id, TRACKS, options)

    async def tracks_by_genre(
        self, user_id: int, genre: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search_tracks(user_id, QueryOptions(genre=genre, limit=limit))

    async def albums_by_year(
        self, user_id: int, year: int, limit: int = DEFAULT_LIMIT
    ) -> list[MediaItem]:
        return await self.search_albums(user_id, QueryOptions(year=year, limit=limit))

    async def latest_albums(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[MediaItem]:
        options = QueryOptions(limit=limit, sort=SortField.ADDED_AT, recently_added=True)
        return await self.search_albums(user_id, options)

    async def top_tracks(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[MediaItem]:
        options = QueryOptions(limit=limit, sort=SortField.POPULARITY)
        return await self.search_tracks(user_id, options)

    async def get_track(self, user_id: int, client_id: int, external_id: str) -> MediaItem:
        return await self._aggregation.get_by_id(user_id, TRACKS, client_id, external_id)

    async def get_album(self, user_id: int, client_id: int, external_id: str) -> MediaItem:
        return await self._aggregation.get_by_id(user_id, ALBUMS, client_id, external_id)

    async def get_artist(self, user_id: int, client_id: int, external_id: str) -> MediaItem:
        return await self._aggregation.get_by_id(user_id, ARTISTS, client_id, external_id)
