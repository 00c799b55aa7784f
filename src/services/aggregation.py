"""
Service d'agregation multi-clients.

Interroge en parallele tous les clients d'un utilisateur qui supportent
un domaine (films, series, musique, listes), fusionne les resultats puis
applique tri et pagination. Un client en echec ou trop lent est ignore
et journalise : l'agregation retourne les resultats des autres.

Les operations sur un client unique (get_by_id, get_client_items, saisons,
episodes, historique) propagent les erreurs telles quelles.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from loguru import logger

from src.core.entities.client import Capability
from src.core.entities.media import MediaItem, MediaType
from src.core.ports.providers import IMediaProvider
from src.core.value_objects.query_options import QueryOptions, SortField
from src.services.client_resolver import ClientResolver

T = TypeVar("T")


@dataclass(frozen=True)
class MediaDomain:
    """
    Description d'un domaine media agregeable.

    Attributs :
        name : Nom du domaine (utilise dans les routes)
        media_type : Type des elements retournes
        capability : Capacite requise sur le client
        list_method : Methode IMediaProvider de recherche (prend QueryOptions)
        get_method : Methode IMediaProvider de lecture par ID
    """

    name: str
    media_type: MediaType
    capability: Capability
    list_method: str
    get_method: str


MOVIES = MediaDomain("movies", MediaType.MOVIE, Capability.MOVIES, "get_movies", "get_movie")
SERIES = MediaDomain(
    "series", MediaType.SERIES, Capability.SERIES, "get_series", "get_series_by_id"
)
ARTISTS = MediaDomain("artists", MediaType.ARTIST, Capability.MUSIC, "get_artists", "get_artist")
ALBUMS = MediaDomain("albums", MediaType.ALBUM, Capability.MUSIC, "get_albums", "get_album")
TRACKS = MediaDomain("tracks", MediaType.TRACK, Capability.MUSIC, "get_tracks", "get_track")
PLAYLISTS = MediaDomain(
    "playlists", MediaType.PLAYLIST, Capability.PLAYLISTS, "get_playlists", "get_playlist"
)
COLLECTIONS = MediaDomain(
    "collections",
    MediaType.COLLECTION,
    Capability.COLLECTIONS,
    "get_collections",
    "get_collection",
)

DOMAINS: dict[str, MediaDomain] = {
    domain.name: domain
    for domain in (MOVIES, SERIES, ARTISTS, ALBUMS, TRACKS, PLAYLISTS, COLLECTIONS)
}


@dataclass
class AggregateResult(Generic[T]):
    """
    Resultat d'une agregation.

    Attributs :
        items : Elements fusionnes, tries et pagines
        total : Nombre d'elements fusionnes avant pagination
        counts : Nombre d'elements retournes par client (client_id -> n)
        errors : Message d'erreur par client ignore (client_id -> message)
    """

    items: list[MediaItem[T]] = field(default_factory=list)
    total: int = 0
    counts: dict[int, int] = field(default_factory=dict)
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def failed_clients(self) -> list[int]:
        return list(self.errors)


def sort_value(item: MediaItem, sort: SortField) -> Any:
    """Valeur de tri d'un element, None si le fournisseur ne la renseigne pas."""
    details = item.details
    if sort == SortField.ADDED_AT:
        return details.added_at
    if sort == SortField.CREATED_AT:
        return item.created_at or details.added_at
    if sort == SortField.UPDATED_AT:
        return item.updated_at or details.updated_at
    if sort == SortField.RATING:
        return details.rating
    if sort == SortField.POPULARITY:
        return details.popularity
    if sort == SortField.TITLE:
        return item.title.lower() if item.title else None
    if sort == SortField.RELEASE_DATE:
        if details.release_date is not None:
            return details.release_date
        if details.release_year:
            return datetime(details.release_year, 1, 1)
    return None


def sort_items(items: list[MediaItem], options: QueryOptions) -> list[MediaItem]:
    """
    Tri stable selon options.sort.

    A valeur egale, l'ordre d'entree est conserve. Les elements sans
    valeur de tri sont places en fin de liste.
    """
    valued = []
    missing = []
    for item in items:
        value = sort_value(item, options.sort)
        if value is None:
            missing.append(item)
        else:
            valued.append((value, item))
    valued.sort(key=lambda pair: pair[0], reverse=options.descending)
    return [item for _, item in valued] + missing


def paginate(items: list, options: QueryOptions) -> list:
    start = max(options.offset, 0)
    if options.limit:
        return items[start:start + options.limit]
    return items[start:]


class AggregationService:
    """
    Agregation generique parametree par un MediaDomain.

    Example:
        service = AggregationService(resolver, max_concurrency=4, timeout=20)
        result = await service.aggregate(user_id, MOVIES, QueryOptions(query="Matrix"))
        movie = await service.get_by_id(user_id, MOVIES, client_id=3, external_id="abc")
    """

    def __init__(
        self,
        resolver: ClientResolver,
        max_concurrency: int = 4,
        timeout: float = 20.0,
    ) -> None:
        self._resolver = resolver
        self._max_concurrency = max(max_concurrency, 1)
        self._timeout = timeout

    async def get_by_id(
        self, user_id: int, domain: MediaDomain, client_id: int, external_id: str
    ) -> MediaItem:
        """
        Lit un element sur un client donne.

        Raises:
            NotFoundError: Client ou element absent.
            PermissionDeniedError: Client d'un autre utilisateur.
            UnsupportedFeatureError: Client sans la capacite du domaine.
        """
        provider = self._resolver.resolve(user_id, client_id, domain.capability)
        return await getattr(provider, domain.get_method)(external_id)

    async def get_client_items(
        self, user_id: int, domain: MediaDomain, client_id: int, options: QueryOptions
    ) -> list[MediaItem]:
        """Recherche sur un seul client, erreurs propagees."""
        provider = self._resolver.resolve(user_id, client_id, domain.capability)
        items = await getattr(provider, domain.list_method)(options)
        return paginate(sort_items(items, options), options)

    async def get_seasons(self, user_id: int, client_id: int, series_id: str) -> list[MediaItem]:
        provider = self._resolver.resolve(user_id, client_id, Capability.SERIES)
        seasons = await provider.get_seasons(series_id)
        return sorted(seasons, key=lambda s: s.data.number)

    async def get_episodes(
        self,
        user_id: int,
        client_id: int,
        series_id: str,
        season_number: Optional[int] = None,
    ) -> list[MediaItem]:
        """Episodes d'une serie (ou d'une saison), dans l'ordre de diffusion."""
        provider = self._resolver.resolve(user_id, client_id, Capability.SERIES)
        episodes = await provider.get_episodes(series_id, season_number)
        return sorted(episodes, key=lambda e: (e.data.season_number, e.data.number))

    async def get_play_history(
        self, user_id: int, client_id: int, options: QueryOptions
    ) -> list[MediaItem]:
        """
        Historique de lecture d'un client, dans l'ordre retourne par le client.

        Le client applique lui-meme offset et limit.

        Raises:
            UnsupportedFeatureError: Client sans historique (TMDB).
        """
        provider = self._resolver.resolve(user_id, client_id, Capability.HISTORY)
        return await provider.get_play_history(options)

    async def search_across(
        self, user_id: int, domain: MediaDomain, options: QueryOptions
    ) -> list[MediaItem]:
        """Recherche sur tous les clients capables, clients en echec ignores."""
        result = await self.aggregate(user_id, domain, options)
        return result.items

    async def aggregate(
        self, user_id: int, domain: MediaDomain, options: QueryOptions
    ) -> AggregateResult:
        """
        Interroge les clients capables et fusionne leurs resultats.

        Chaque client recoit les memes filtres avec une limite couvrant
        offset + limit, la pagination etant appliquee apres fusion.
        """
        providers = self._resolver.resolve_all(user_id, domain.capability)
        result: AggregateResult = AggregateResult()
        if not providers:
            logger.debug(f"Aucun client {domain.capability.value} pour l'utilisateur {user_id}")
            return result

        provider_options = options.with_limit(
            options.offset + options.limit if options.limit else 0, 0
        )
        semaphore = asyncio.Semaphore(self._max_concurrency)
        batches = await asyncio.gather(
            *(
                self._fetch(semaphore, provider, domain, provider_options, result)
                for provider in providers
            )
        )

        merged: list[MediaItem] = []
        for provider, batch in zip(providers, batches):
            if batch is None:
                continue
            result.counts[provider.client_id] = len(batch)
            merged.extend(batch)

        result.total = len(merged)
        result.items = paginate(sort_items(merged, options), options)
        logger.debug(
            f"Agregation {domain.name} : {result.total} elements "
            f"depuis {len(result.counts)} client(s), {len(result.errors)} en echec"
        )
        return result

    async def _fetch(
        self,
        semaphore: asyncio.Semaphore,
        provider: IMediaProvider,
        domain: MediaDomain,
        options: QueryOptions,
        result: AggregateResult,
    ) -> Optional[list[MediaItem]]:
        method = getattr(provider, domain.list_method)
        async with semaphore:
            try:
                return await asyncio.wait_for(method(options), timeout=self._timeout)
            except asyncio.TimeoutError:
                message = f"timed out after {self._timeout}s"
            except Exception as e:
                message = str(e) or type(e).__name__
        logger.bind(client_id=provider.client_id).warning(
            f"{provider.client_type.value} ignore pour {domain.name} : {message}"
        )
        result.errors[provider.client_id] = message
        return None
