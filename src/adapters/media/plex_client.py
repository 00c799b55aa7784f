"""
Client Plex Media Server.

L'API Plex est organisee par sections de bibliotheque (films, series,
musique). Les requetes de listing interrogent chaque section du bon type
puis concatenent les resultats.

Types numeriques Plex : 1 film, 2 serie, 3 saison, 4 episode,
8 artiste, 9 album, 10 piste.
"""

from typing import Any, Optional

from loguru import logger

from src.adapters.api.dates import parse_datetime
from src.adapters.media.base import HttpMediaProvider, filter_items
from src.core.entities.lists import Collection, ItemList, Playlist
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
    Track,
)
from src.core.errors import InvalidArgumentError, NotFoundError
from src.core.value_objects.query_options import QueryOptions, SortField, SortOrder

PLEX_TYPE_MOVIE = 1
PLEX_TYPE_SHOW = 2
PLEX_TYPE_ARTIST = 8
PLEX_TYPE_ALBUM = 9
PLEX_TYPE_TRACK = 10

SORT_FIELDS = {
    SortField.ADDED_AT: "addedAt",
    SortField.CREATED_AT: "addedAt",
    SortField.UPDATED_AT: "updatedAt",
    SortField.RATING: "rating",
    SortField.POPULARITY: "viewCount",
    SortField.TITLE: "titleSort",
    SortField.RELEASE_DATE: "originallyAvailableAt",
}

ITEM_TYPES = {
    "movie": MediaType.MOVIE,
    "show": MediaType.SERIES,
    "season": MediaType.SEASON,
    "episode": MediaType.EPISODE,
    "artist": MediaType.ARTIST,
    "album": MediaType.ALBUM,
    "track": MediaType.TRACK,
    "playlist": MediaType.PLAYLIST,
    "collection": MediaType.COLLECTION,
}

LIBRARY_URI = "server://{machine}/com.plexapp.plugins.library"


class PlexClient(HttpMediaProvider):
    """
    Adaptateur Plex.

    Authentification par jeton X-Plex-Token. L'identifiant machine du
    serveur, necessaire pour referencer des elements lors de l'ajout
    a une playlist ou une collection, est lu une fois puis memorise.
    """

    def __init__(self, config, timeout: float = 30.0) -> None:
        super().__init__(config, timeout)
        self._machine_id: Optional[str] = None

    def _build_headers(self) -> dict[str, str]:
        headers = super()._build_headers()
        headers["X-Plex-Token"] = self.config.api_key or ""
        headers["X-Plex-Client-Identifier"] = f"suasor-{self.client_id}"
        headers["X-Plex-Product"] = "Suasor"
        return headers

    async def test_connection(self) -> bool:
        await self._machine_identifier()
        return True

    async def _container(self, path: str, params: Optional[dict] = None) -> dict:
        data = await self._get_json(path, params)
        return data.get("MediaContainer") or {}

    async def _machine_identifier(self) -> str:
        if self._machine_id is None:
            container = await self._container("/identity")
            self._machine_id = container.get("machineIdentifier", "")
        return self._machine_id

    async def _item_uri(self, item_id: str) -> str:
        base = LIBRARY_URI.format(machine=await self._machine_identifier())
        return f"{base}/library/metadata/{item_id}"

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _tags(metadata: dict, key: str) -> list[str]:
        return [entry.get("tag", "") for entry in metadata.get(key) or []]

    @staticmethod
    def _external_ids(metadata: dict) -> dict[str, str]:
        external_ids = {}
        for guid in metadata.get("Guid") or []:
            source, _, value = guid.get("id", "").partition("://")
            if source and value:
                external_ids[source] = value
        return external_ids

    def _details(self, metadata: dict) -> MediaDetails:
        duration_ms = metadata.get("duration")
        thumb = metadata.get("thumb")
        studio = metadata.get("studio")
        return MediaDetails(
            title=metadata.get("title") or "",
            description=metadata.get("summary"),
            release_year=metadata.get("year"),
            release_date=parse_datetime(metadata.get("originallyAvailableAt")),
            genres=self._tags(metadata, "Genre"),
            studios=[studio] if studio else [],
            rating=metadata.get("rating", metadata.get("audienceRating")),
            popularity=metadata.get("viewCount"),
            duration_seconds=duration_ms // 1000 if duration_ms else None,
            artwork_url=f"{self.base_url}{thumb}" if thumb else None,
            added_at=parse_datetime(metadata.get("addedAt")),
            updated_at=parse_datetime(metadata.get("updatedAt")),
            external_ids=self._external_ids(metadata),
        )

    def _to_payload(self, metadata: dict) -> Optional[Any]:
        details = self._details(metadata)
        media_type = ITEM_TYPES.get(metadata.get("type", ""))
        if media_type == MediaType.MOVIE:
            return Movie(
                details=details,
                tagline=metadata.get("tagline"),
                cast=self._tags(metadata, "Role"),
                directors=self._tags(metadata, "Director"),
                content_rating=metadata.get("contentRating"),
            )
        if media_type == MediaType.SERIES:
            return Series(
                details=details,
                season_count=metadata.get("childCount") or 0,
                episode_count=metadata.get("leafCount") or 0,
                network=metadata.get("studio"),
                cast=self._tags(metadata, "Role"),
                creators=self._tags(metadata, "Writer"),
            )
        if media_type == MediaType.SEASON:
            return Season(
                details=details,
                number=metadata.get("index") or 0,
                series_id=metadata.get("parentRatingKey"),
                series_name=metadata.get("parentTitle"),
                episode_count=metadata.get("leafCount") or 0,
            )
        if media_type == MediaType.EPISODE:
            return Episode(
                details=details,
                number=metadata.get("index") or 0,
                season_number=metadata.get("parentIndex") or 0,
                series_id=metadata.get("grandparentRatingKey"),
                season_id=metadata.get("parentRatingKey"),
                series_name=metadata.get("grandparentTitle"),
            )
        if media_type == MediaType.ARTIST:
            return Artist(details=details, album_count=metadata.get("childCount") or 0)
        if media_type == MediaType.ALBUM:
            return Album(
                details=details,
                artist_id=metadata.get("parentRatingKey"),
                artist_name=metadata.get("parentTitle"),
                track_count=metadata.get("leafCount") or 0,
            )
        if media_type == MediaType.TRACK:
            return Track(
                details=details,
                number=metadata.get("index") or 0,
                disc_number=metadata.get("parentIndex") or 0,
                album_id=metadata.get("parentRatingKey"),
                album_name=metadata.get("parentTitle"),
                artist_id=metadata.get("grandparentRatingKey"),
                artist_name=metadata.get("grandparentTitle"),
            )
        if media_type == MediaType.PLAYLIST:
            return Playlist(details=details, item_list=ItemList(origin_client_id=self.client_id))
        if media_type == MediaType.COLLECTION:
            return Collection(
                details=details,
                item_list=ItemList(origin_client_id=self.client_id),
                collection_type=metadata.get("subtype"),
            )
        return None

    def _to_media_item(self, metadata: dict) -> Optional[MediaItem]:
        payload = self._to_payload(metadata)
        if payload is None:
            logger.debug(f"plex: type ignore {metadata.get('type')}")
            return None
        return self._track(MediaItem(data=payload), metadata["ratingKey"])

    def _convert_all(self, entries: list[dict]) -> list[MediaItem]:
        items = (self._to_media_item(entry) for entry in entries)
        return [item for item in items if item is not None]

    # ------------------------------------------------------------------
    # Sections et requetes
    # ------------------------------------------------------------------

    async def _section_keys(self, section_type: str) -> list[str]:
        container = await self._container("/library/sections")
        return [
            str(directory["key"])
            for directory in container.get("Directory") or []
            if directory.get("type") == section_type
        ]

    def _filter_params(self, plex_type: int, options: QueryOptions) -> dict:
        direction = "desc" if options.sort_order == SortOrder.DESC else "asc"
        params: dict[str, Any] = {
            "type": plex_type,
            "sort": f"{SORT_FIELDS[options.sort]}:{direction}",
            "includeGuids": 1,
        }
        if options.query:
            params["title"] = options.query
        if options.genre:
            params["genre"] = options.genre
        if options.year:
            params["year"] = options.year
        if options.actor:
            params["actor"] = options.actor
        if options.director:
            params["director"] = options.director
        if options.studio:
            params["studio"] = options.studio
        if options.recently_added:
            params["sort"] = "addedAt:desc"
        if options.limit:
            params["X-Plex-Container-Start"] = options.offset
            params["X-Plex-Container-Size"] = options.limit
        return params

    async def _query_sections(
        self, section_type: str, plex_type: int, options: QueryOptions
    ) -> list[MediaItem]:
        items: list[MediaItem] = []
        params = self._filter_params(plex_type, options)
        for key in await self._section_keys(section_type):
            container = await self._container(f"/library/sections/{key}/all", params)
            items.extend(self._convert_all(container.get("Metadata") or []))
        if options.min_rating is not None or options.max_rating is not None:
            items = filter_items(
                items,
                QueryOptions(min_rating=options.min_rating, max_rating=options.max_rating),
            )
        return items

    async def _get_metadata(self, item_id: str) -> Optional[MediaItem]:
        container = await self._container(f"/library/metadata/{item_id}")
        entries = container.get("Metadata") or []
        return self._to_media_item(entries[0]) if entries else None

    async def _get_typed(self, item_id: str, media_type: MediaType) -> MediaItem:
        item = await self._get_metadata(item_id)
        if item is None or item.type != media_type:
            raise NotFoundError(f"{media_type.value} {item_id} not found on {self.config.name}")
        return item

    # ------------------------------------------------------------------
    # Films, series, musique
    # ------------------------------------------------------------------

    async def get_movies(self, options: QueryOptions) -> list[MediaItem[Movie]]:
        return await self._query_sections("movie", PLEX_TYPE_MOVIE, options)

    async def get_movie(self, movie_id: str) -> MediaItem[Movie]:
        return await self._get_typed(movie_id, MediaType.MOVIE)

    async def get_series(self, options: QueryOptions) -> list[MediaItem[Series]]:
        return await self._query_sections("show", PLEX_TYPE_SHOW, options)

    async def get_series_by_id(self, series_id: str) -> MediaItem[Series]:
        return await self._get_typed(series_id, MediaType.SERIES)

    async def get_seasons(self, series_id: str) -> list[MediaItem[Season]]:
        container = await self._container(f"/library/metadata/{series_id}/children")
        return self._convert_all(container.get("Metadata") or [])

    async def get_episodes(
        self, series_id: str, season_number: Optional[int] = None
    ) -> list[MediaItem[Episode]]:
        container = await self._container(f"/library/metadata/{series_id}/allLeaves")
        episodes = self._convert_all(container.get("Metadata") or [])
        if season_number is not None:
            episodes = [e for e in episodes if e.data.season_number == season_number]
        return episodes

    async def get_artists(self, options: QueryOptions) -> list[MediaItem[Artist]]:
        return await self._query_sections("artist", PLEX_TYPE_ARTIST, options)

    async def get_artist(self, artist_id: str) -> MediaItem[Artist]:
        return await self._get_typed(artist_id, MediaType.ARTIST)

    async def get_albums(self, options: QueryOptions) -> list[MediaItem[Album]]:
        return await self._query_sections("artist", PLEX_TYPE_ALBUM, options)

    async def get_album(self, album_id: str) -> MediaItem[Album]:
        return await self._get_typed(album_id, MediaType.ALBUM)

    async def get_tracks(self, options: QueryOptions) -> list[MediaItem[Track]]:
        return await self._query_sections("artist", PLEX_TYPE_TRACK, options)

    async def get_track(self, track_id: str) -> MediaItem[Track]:
        return await self._get_typed(track_id, MediaType.TRACK)

    async def get_play_history(self, options: QueryOptions) -> list[MediaItem]:
        params: dict[str, Any] = {"sort": "viewedAt:desc"}
        if options.limit:
            params["X-Plex-Container-Start"] = options.offset
            params["X-Plex-Container-Size"] = options.limit
        container = await self._container("/status/sessions/history/all", params)
        return self._convert_all(container.get("Metadata") or [])

    # ------------------------------------------------------------------
    # Listes (playlists et collections partagent la mecanique d'entrees)
    # ------------------------------------------------------------------

    def _with_entries(self, item: MediaItem, entries: list[dict]) -> MediaItem:
        item_list = item.data.item_list
        for entry in entries:
            if not item_list.contains(str(entry["ratingKey"])):
                item_list.add_item(str(entry["ratingKey"]), client_id=self.client_id)
        item_list.version = 0
        item_list.last_modified = item.details.updated_at
        return item

    async def _entries(self, path: str) -> list[dict]:
        container = await self._container(path)
        return container.get("Metadata") or []

    async def _move_all(
        self, list_path: str, entry_ids: dict[str, str], item_ids: list[str]
    ) -> None:
        """Replace chaque entree apres la precedente pour obtenir l'ordre demande."""
        if len(item_ids) != len(entry_ids) or set(item_ids) != set(entry_ids):
            raise InvalidArgumentError("reorder operation must include all playlist items")
        previous: Optional[str] = None
        for item_id in item_ids:
            entry_id = entry_ids[item_id]
            params = {"after": previous} if previous else None
            await self._request("PUT", f"{list_path}/items/{entry_id}/move", params=params)
            previous = entry_id

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    async def get_playlists(self, options: QueryOptions) -> list[MediaItem[Playlist]]:
        container = await self._container("/playlists")
        playlists = self._convert_all(container.get("Metadata") or [])
        if options.query:
            playlists = filter_items(playlists, QueryOptions(query=options.query))
        return playlists

    async def get_playlist(self, playlist_id: str) -> MediaItem[Playlist]:
        entries = await self._entries(f"/playlists/{playlist_id}")
        if not entries:
            raise NotFoundError(f"playlist {playlist_id} not found on {self.config.name}")
        item = self._to_media_item(entries[0])
        return self._with_entries(item, await self._entries(f"/playlists/{playlist_id}/items"))

    async def get_playlist_items(self, playlist_id: str) -> list[MediaItem]:
        return self._convert_all(await self._entries(f"/playlists/{playlist_id}/items"))

    async def create_playlist(self, name: str, description: str = "") -> MediaItem[Playlist]:
        uri = LIBRARY_URI.format(machine=await self._machine_identifier())
        response = await self._request(
            "POST",
            "/playlists",
            params={"type": "video", "title": name, "smart": 0, "uri": uri},
        )
        created = response.json().get("MediaContainer", {}).get("Metadata") or []
        if not created:
            raise NotFoundError("plex did not return the created playlist")
        playlist_id = str(created[0]["ratingKey"])
        if description:
            return await self.update_playlist(playlist_id, name, description)
        return await self.get_playlist(playlist_id)

    async def update_playlist(
        self, playlist_id: str, name: str, description: str = ""
    ) -> MediaItem[Playlist]:
        await self._request(
            "PUT", f"/playlists/{playlist_id}", params={"title": name, "summary": description}
        )
        return await self.get_playlist(playlist_id)

    async def delete_playlist(self, playlist_id: str) -> None:
        await self._request("DELETE", f"/playlists/{playlist_id}")

    async def add_playlist_item(self, playlist_id: str, item_id: str) -> None:
        await self._request(
            "PUT",
            f"/playlists/{playlist_id}/items",
            params={"uri": await self._item_uri(item_id)},
        )

    async def _playlist_entry_ids(self, playlist_id: str) -> dict[str, str]:
        return {
            str(entry["ratingKey"]): str(entry.get("playlistItemID", entry["ratingKey"]))
            for entry in await self._entries(f"/playlists/{playlist_id}/items")
        }

    async def remove_playlist_item(self, playlist_id: str, item_id: str) -> None:
        entry_ids = await self._playlist_entry_ids(playlist_id)
        if item_id not in entry_ids:
            raise NotFoundError(f"item {item_id} is not in playlist {playlist_id}")
        await self._request("DELETE", f"/playlists/{playlist_id}/items/{entry_ids[item_id]}")

    async def reorder_playlist_items(self, playlist_id: str, item_ids: list[str]) -> None:
        await self._move_all(
            f"/playlists/{playlist_id}", await self._playlist_entry_ids(playlist_id), item_ids
        )

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def get_collections(self, options: QueryOptions) -> list[MediaItem[Collection]]:
        collections: list[MediaItem] = []
        for section_type in ("movie", "show"):
            for key in await self._section_keys(section_type):
                container = await self._container(f"/library/sections/{key}/collections")
                collections.extend(self._convert_all(container.get("Metadata") or []))
        if options.query:
            collections = filter_items(collections, QueryOptions(query=options.query))
        return collections

    async def get_collection(self, collection_id: str) -> MediaItem[Collection]:
        item = await self._get_typed(collection_id, MediaType.COLLECTION)
        return self._with_entries(
            item, await self._entries(f"/library/collections/{collection_id}/children")
        )

    async def get_collection_items(self, collection_id: str) -> list[MediaItem]:
        return self._convert_all(
            await self._entries(f"/library/collections/{collection_id}/children")
        )

    async def create_collection(self, name: str, description: str = "") -> MediaItem[Collection]:
        sections = await self._section_keys("movie")
        if not sections:
            raise InvalidArgumentError("plex server has no movie library to hold a collection")
        response = await self._request(
            "POST",
            "/library/collections",
            params={
                "type": PLEX_TYPE_MOVIE,
                "title": name,
                "smart": 0,
                "sectionId": sections[0],
                "uri": LIBRARY_URI.format(machine=await self._machine_identifier()),
            },
        )
        created = response.json().get("MediaContainer", {}).get("Metadata") or []
        if not created:
            raise NotFoundError("plex did not return the created collection")
        collection_id = str(created[0]["ratingKey"])
        if description:
            return await self.update_collection(collection_id, name, description)
        return await self.get_collection(collection_id)

    async def update_collection(
        self, collection_id: str, name: str, description: str = ""
    ) -> MediaItem[Collection]:
        await self._request(
            "PUT",
            f"/library/metadata/{collection_id}",
            params={"title.value": name, "summary.value": description, "title.locked": 1},
        )
        return await self.get_collection(collection_id)

    async def delete_collection(self, collection_id: str) -> None:
        await self._request("DELETE", f"/library/collections/{collection_id}")

    async def add_collection_item(self, collection_id: str, item_id: str) -> None:
        await self._request(
            "PUT",
            f"/library/collections/{collection_id}/items",
            params={"uri": await self._item_uri(item_id)},
        )

    async def remove_collection_item(self, collection_id: str, item_id: str) -> None:
        await self._request("DELETE", f"/library/collections/{collection_id}/items/{item_id}")

    async def reorder_collection_items(self, collection_id: str, item_ids: list[str]) -> None:
        entries = await self._entries(f"/library/collections/{collection_id}/children")
        entry_ids = {str(e["ratingKey"]): str(e["ratingKey"]) for e in entries}
        await self._move_all(f"/library/collections/{collection_id}", entry_ids, item_ids)
