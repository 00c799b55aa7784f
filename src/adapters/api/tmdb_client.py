"""
Client TMDB pour les metadonnees de reference (films, series, sagas).

TMDBClient implemente IMetadataProvider : recherche et fiches detaillees,
avec cache persistant (payloads JSON bruts) et retry sur rate limiting.

TMDBMediaProvider expose le meme client derriere IMediaProvider, pour
qu'une configuration client de type tmdb soit resolue comme les autres
(capacites films, series et collections, en lecture seule).

Usage:
    cache = APICache()
    client = TMDBClient(api_key="your_key", cache=cache)
    results = await client.search_movies("Matrix", year=1999)
    movie = await client.get_movie("603")
    await client.close()
"""

from typing import Any, Optional

import httpx

from src.adapters.api.cache import APICache
from src.adapters.api.retry import provider_request
from src.adapters.api.dates import parse_datetime
from src.core.entities.client import ClientConfig
from src.core.entities.lists import Collection, ItemList
from src.core.entities.media import (
    Episode,
    MediaDetails,
    MediaItem,
    Movie,
    Season,
    Series,
)
from src.core.errors import NotFoundError
from src.core.ports.providers import IMediaProvider, IMetadataProvider
from src.core.value_objects.query_options import QueryOptions

TMDB_GENRE_MAPPING = {
    28: "Action",
    12: "Aventure",
    16: "Animation",
    35: "Comedie",
    80: "Crime",
    99: "Documentaire",
    18: "Drame",
    10751: "Famille",
    14: "Fantastique",
    36: "Histoire",
    27: "Horreur",
    10402: "Musique",
    9648: "Mystere",
    10749: "Romance",
    878: "Science-Fiction",
    10770: "Telefilm",
    53: "Thriller",
    10752: "Guerre",
    37: "Western",
    10759: "Action & Aventure",
    10762: "Enfants",
    10765: "Science-Fiction & Fantastique",
    10768: "Guerre & Politique",
}


def _year(date_text: Optional[str]) -> Optional[int]:
    if date_text and len(date_text) >= 4 and date_text[:4].isdigit():
        return int(date_text[:4])
    return None


class TMDBClient(IMetadataProvider):
    """
    Client API TMDB v3.

    Supporte les deux modes d'authentification :
    - cle API v3 (32 caracteres hex) passee en parametre api_key
    - jeton Read Access v4 (JWT) passe en en-tete Bearer

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
        TMDB_IMAGE_BASE_URL: URL de base des images
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"

    def __init__(
        self,
        api_key: str,
        cache: APICache,
        language: str = "fr-FR",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._cache = cache
        self._language = language
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def source(self) -> str:
        return "tmdb"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            is_v4_token = len(self._api_key) > 40
            headers = {"Accept": "application/json"}
            params = {}
            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key
            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=self._timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _fetch(self, path: str, params: Optional[dict] = None) -> Optional[dict]:
        """GET sur l'API ; None si la ressource n'existe pas (404)."""
        query = {"language": self._language}
        query.update(params or {})
        try:
            response = await provider_request(
                self._get_client(), "GET", path, self.source, params=query
            )
        except NotFoundError:
            return None
        return response.json()

    async def _cached(
        self, key: str, ttl: int, path: str, params: Optional[dict] = None
    ) -> Optional[dict]:
        return await self._cache.get_or_fetch(key, ttl, lambda: self._fetch(path, params))

    async def test_connection(self) -> bool:
        await provider_request(self._get_client(), "GET", "/configuration", self.source)
        return True

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _image(self, path: Optional[str]) -> Optional[str]:
        return f"{self.TMDB_IMAGE_BASE_URL}{path}" if path else None

    def _genres(self, data: dict) -> list[str]:
        if data.get("genres"):
            return [
                g.get("name") or TMDB_GENRE_MAPPING.get(g.get("id"), "Inconnu")
                for g in data["genres"]
            ]
        return [TMDB_GENRE_MAPPING.get(gid, "Inconnu") for gid in data.get("genre_ids") or []]

    def _external_ids(self, data: dict) -> dict[str, str]:
        external_ids = {"tmdb": str(data["id"])}
        extra = data.get("external_ids") or {}
        imdb_id = data.get("imdb_id") or extra.get("imdb_id")
        if imdb_id:
            external_ids["imdb"] = imdb_id
        if extra.get("tvdb_id"):
            external_ids["tvdb"] = str(extra["tvdb_id"])
        return external_ids

    def _details(self, data: dict, title_key: str, date_key: str) -> MediaDetails:
        runtime = data.get("runtime")
        if runtime is None and data.get("episode_run_time"):
            runtime = data["episode_run_time"][0]
        return MediaDetails(
            title=data.get(title_key) or "",
            description=data.get("overview"),
            release_year=_year(data.get(date_key)),
            release_date=parse_datetime(data.get(date_key)),
            genres=self._genres(data),
            studios=[c.get("name", "") for c in data.get("production_companies") or []],
            rating=data.get("vote_average"),
            popularity=data.get("popularity"),
            duration_seconds=runtime * 60 if runtime else None,
            artwork_url=self._image(data.get("poster_path")),
            external_ids=self._external_ids(data),
        )

    def movie_from_payload(self, data: dict) -> MediaItem[Movie]:
        credits = data.get("credits") or {}
        movie = Movie(
            details=self._details(data, "title", "release_date"),
            tagline=data.get("tagline") or None,
            cast=[a.get("name", "") for a in (credits.get("cast") or [])[:10]],
            directors=[
                c.get("name", "") for c in credits.get("crew") or [] if c.get("job") == "Director"
            ],
        )
        return MediaItem(data=movie)

    def series_from_payload(self, data: dict) -> MediaItem[Series]:
        credits = data.get("credits") or {}
        networks = data.get("networks") or []
        series = Series(
            details=self._details(data, "name", "first_air_date"),
            season_count=data.get("number_of_seasons") or 0,
            episode_count=data.get("number_of_episodes") or 0,
            status=data.get("status"),
            network=networks[0].get("name") if networks else None,
            cast=[a.get("name", "") for a in (credits.get("cast") or [])[:10]],
            creators=[c.get("name", "") for c in data.get("created_by") or []],
        )
        return MediaItem(data=series)

    def collection_from_payload(self, data: dict) -> MediaItem[Collection]:
        details = MediaDetails(
            title=data.get("name") or "",
            description=data.get("overview"),
            artwork_url=self._image(data.get("poster_path")),
            external_ids={"tmdb": str(data["id"])},
        )
        item_list = ItemList()
        for part in data.get("parts") or []:
            item_list.add_item(str(part["id"]))
        item_list.version = 0
        return MediaItem(data=Collection(details=details, item_list=item_list))

    # ------------------------------------------------------------------
    # IMetadataProvider
    # ------------------------------------------------------------------

    async def search_movies(
        self, query: str, year: Optional[int] = None
    ) -> list[MediaItem[Movie]]:
        params: dict[str, Any] = {"query": query, "include_adult": "false"}
        if year:
            params["primary_release_year"] = year
        data = await self._cached(
            f"tmdb:search:movie:{query}:{year}", APICache.SEARCH_TTL, "/search/movie", params
        )
        return [self.movie_from_payload(r) for r in (data or {}).get("results", [])]

    async def get_movie(self, movie_id: str) -> Optional[MediaItem[Movie]]:
        data = await self._cached(
            f"tmdb:movie:{movie_id}",
            APICache.DETAILS_TTL,
            f"/movie/{movie_id}",
            {"append_to_response": "credits,external_ids"},
        )
        return self.movie_from_payload(data) if data else None

    async def search_series(
        self, query: str, year: Optional[int] = None
    ) -> list[MediaItem[Series]]:
        params: dict[str, Any] = {"query": query, "include_adult": "false"}
        if year:
            params["first_air_date_year"] = year
        data = await self._cached(
            f"tmdb:search:tv:{query}:{year}", APICache.SEARCH_TTL, "/search/tv", params
        )
        return [self.series_from_payload(r) for r in (data or {}).get("results", [])]

    async def get_series_payload(self, series_id: str) -> Optional[dict]:
        """Fiche TMDB brute d'une serie (saisons incluses), None si inconnue."""
        return await self._cached(
            f"tmdb:tv:{series_id}",
            APICache.DETAILS_TTL,
            f"/tv/{series_id}",
            {"append_to_response": "credits,external_ids"},
        )

    async def get_series(self, series_id: str) -> Optional[MediaItem[Series]]:
        data = await self.get_series_payload(series_id)
        return self.series_from_payload(data) if data else None

    async def get_popular_movies(self, page: int = 1) -> list[MediaItem[Movie]]:
        data = await self._cached(
            f"tmdb:popular:movie:{page}", APICache.SEARCH_TTL, "/movie/popular", {"page": page}
        )
        return [self.movie_from_payload(r) for r in (data or {}).get("results", [])]

    async def get_popular_series(self, page: int = 1) -> list[MediaItem[Series]]:
        data = await self._cached(
            f"tmdb:popular:tv:{page}", APICache.SEARCH_TTL, "/tv/popular", {"page": page}
        )
        return [self.series_from_payload(r) for r in (data or {}).get("results", [])]

    async def get_collection(self, collection_id: str) -> Optional[MediaItem[Collection]]:
        data = await self._cached(
            f"tmdb:collection:{collection_id}",
            APICache.DETAILS_TTL,
            f"/collection/{collection_id}",
        )
        return self.collection_from_payload(data) if data else None

    async def get_collection_parts(self, collection_id: str) -> list[MediaItem[Movie]]:
        data = await self._cached(
            f"tmdb:collection:{collection_id}",
            APICache.DETAILS_TTL,
            f"/collection/{collection_id}",
        )
        return [self.movie_from_payload(p) for p in (data or {}).get("parts", [])]

    async def search_collections(self, query: str) -> list[MediaItem[Collection]]:
        data = await self._cached(
            f"tmdb:search:collection:{query}",
            APICache.SEARCH_TTL,
            "/search/collection",
            {"query": query},
        )
        return [self.collection_from_payload(r) for r in (data or {}).get("results", [])]

    async def get_season(self, series_id: str, season_number: int) -> Optional[dict]:
        return await self._cached(
            f"tmdb:tv:{series_id}:season:{season_number}",
            APICache.DETAILS_TTL,
            f"/tv/{series_id}/season/{season_number}",
        )


class TMDBMediaProvider(IMediaProvider):
    """
    Configuration client TMDB vue comme un fournisseur media en lecture seule.

    Les listings sans recherche textuelle retournent les titres populaires.
    """

    def __init__(self, config: ClientConfig, client: TMDBClient) -> None:
        super().__init__(config)
        self._tmdb = client

    def _tracked(self, item: MediaItem) -> MediaItem:
        item.add_sync_client(self.client_id, self.client_type.value, item.external_ids["tmdb"])
        return item

    def _required(self, item: Optional[MediaItem], kind: str, item_id: str) -> MediaItem:
        if item is None:
            raise NotFoundError(f"tmdb {kind} {item_id} not found")
        return self._tracked(item)

    async def test_connection(self) -> bool:
        return await self._tmdb.test_connection()

    async def close(self) -> None:
        await self._tmdb.close()

    async def get_movies(self, options: QueryOptions) -> list[MediaItem[Movie]]:
        if options.query:
            movies = await self._tmdb.search_movies(options.query, options.year)
        else:
            movies = await self._tmdb.get_popular_movies()
        return [self._tracked(m) for m in movies]

    async def get_movie(self, movie_id: str) -> MediaItem[Movie]:
        return self._required(await self._tmdb.get_movie(movie_id), "movie", movie_id)

    async def get_series(self, options: QueryOptions) -> list[MediaItem[Series]]:
        if options.query:
            series = await self._tmdb.search_series(options.query, options.year)
        else:
            series = await self._tmdb.get_popular_series()
        return [self._tracked(s) for s in series]

    async def get_series_by_id(self, series_id: str) -> MediaItem[Series]:
        return self._required(await self._tmdb.get_series(series_id), "series", series_id)

    async def get_seasons(self, series_id: str) -> list[MediaItem[Season]]:
        data = await self._tmdb.get_series_payload(series_id)
        if data is None:
            raise NotFoundError(f"tmdb series {series_id} not found")
        seasons = []
        for entry in data.get("seasons") or []:
            season = Season(
                details=MediaDetails(
                    title=entry.get("name") or "",
                    description=entry.get("overview"),
                    release_year=_year(entry.get("air_date")),
                    release_date=parse_datetime(entry.get("air_date")),
                    external_ids={"tmdb": str(entry["id"])},
                ),
                number=entry.get("season_number") or 0,
                series_id=str(series_id),
                series_name=data.get("name"),
                episode_count=entry.get("episode_count") or 0,
            )
            seasons.append(self._tracked(MediaItem(data=season)))
        return seasons

    async def get_episodes(
        self, series_id: str, season_number: Optional[int] = None
    ) -> list[MediaItem[Episode]]:
        if season_number is None:
            numbers = [s.data.number for s in await self.get_seasons(series_id)]
        else:
            numbers = [season_number]
        episodes = []
        for number in numbers:
            data = await self._tmdb.get_season(series_id, number) or {}
            for entry in data.get("episodes") or []:
                episode = Episode(
                    details=MediaDetails(
                        title=entry.get("name") or "",
                        description=entry.get("overview"),
                        release_date=parse_datetime(entry.get("air_date")),
                        rating=entry.get("vote_average"),
                        duration_seconds=(entry.get("runtime") or 0) * 60 or None,
                        external_ids={"tmdb": str(entry["id"])},
                    ),
                    number=entry.get("episode_number") or 0,
                    season_number=entry.get("season_number") or number,
                    series_id=str(series_id),
                )
                episodes.append(self._tracked(MediaItem(data=episode)))
        return episodes

    async def get_collections(self, options: QueryOptions) -> list[MediaItem[Collection]]:
        if not options.query:
            return []
        return [self._tracked(c) for c in await self._tmdb.search_collections(options.query)]

    async def get_collection(self, collection_id: str) -> MediaItem[Collection]:
        return self._required(
            await self._tmdb.get_collection(collection_id), "collection", collection_id
        )

    async def get_collection_items(self, collection_id: str) -> list[MediaItem]:
        return [self._tracked(m) for m in await self._tmdb.get_collection_parts(collection_id)]
