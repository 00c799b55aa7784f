"""
Socle commun Jellyfin / Emby.

Jellyfin est un fork d'Emby : les deux serveurs exposent la meme API REST
(/Users/{userId}/Items, /Shows, /Playlists, /Collections) et le meme format
BaseItemDto. Seuls l'authentification et le prefixe d'URL different.
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

TICKS_PER_SECOND = 10_000_000

ITEM_FIELDS = ",".join(
    [
        "Overview",
        "Genres",
        "Studios",
        "People",
        "ProviderIds",
        "DateCreated",
        "PremiereDate",
        "Taglines",
        "OfficialRating",
        "ChildCount",
        "RecursiveItemCount",
    ]
)

SORT_FIELDS = {
    SortField.ADDED_AT: "DateCreated",
    SortField.CREATED_AT: "DateCreated",
    SortField.UPDATED_AT: "DateLastContentAdded",
    SortField.RATING: "CommunityRating",
    SortField.POPULARITY: "PlayCount",
    SortField.TITLE: "SortName",
    SortField.RELEASE_DATE: "PremiereDate",
}

# Type BaseItemDto -> type de media interne
ITEM_TYPES = {
    "Movie": MediaType.MOVIE,
    "Series": MediaType.SERIES,
    "Season": MediaType.SEASON,
    "Episode": MediaType.EPISODE,
    "MusicArtist": MediaType.ARTIST,
    "MusicAlbum": MediaType.ALBUM,
    "Audio": MediaType.TRACK,
    "Playlist": MediaType.PLAYLIST,
    "BoxSet": MediaType.COLLECTION,
}


class EmbyFamilyClient(HttpMediaProvider):
    """
    Adaptateur commun aux serveurs Jellyfin et Emby.

    Les requetes de bibliotheque sont faites dans le contexte de
    l'utilisateur serveur configure (ClientConfig.user_identifier).
    """

    @property
    def user_id(self) -> str:
        return self.config.user_identifier or ""

    @property
    def _items_path(self) -> str:
        return f"/Users/{self.user_id}/Items"

    async def test_connection(self) -> bool:
        await self._get_json("/System/Info")
        return True

    # ------------------------------------------------------------------
    # Conversion BaseItemDto -> MediaItem
    # ------------------------------------------------------------------

    def _image_url(self, dto: dict) -> Optional[str]:
        if (dto.get("ImageTags") or {}).get("Primary"):
            return f"{self.base_url}/Items/{dto['Id']}/Images/Primary"
        return None

    def _details(self, dto: dict) -> MediaDetails:
        ticks = dto.get("RunTimeTicks")
        user_data = dto.get("UserData") or {}
        return MediaDetails(
            title=dto.get("Name") or "",
            description=dto.get("Overview"),
            release_year=dto.get("ProductionYear"),
            release_date=parse_datetime(dto.get("PremiereDate")),
            genres=list(dto.get("Genres") or []),
            studios=[s.get("Name", "") for s in dto.get("Studios") or []],
            rating=dto.get("CommunityRating"),
            popularity=user_data.get("PlayCount"),
            duration_seconds=ticks // TICKS_PER_SECOND if ticks else None,
            artwork_url=self._image_url(dto),
            added_at=parse_datetime(dto.get("DateCreated")),
            updated_at=parse_datetime(dto.get("DateLastSaved")),
            external_ids={
                key.lower(): str(value)
                for key, value in (dto.get("ProviderIds") or {}).items()
                if value
            },
        )

    @staticmethod
    def _people(dto: dict, person_type: str) -> list[str]:
        return [
            person.get("Name", "")
            for person in dto.get("People") or []
            if person.get("Type") == person_type
        ]

    def _to_payload(self, dto: dict) -> Optional[Any]:
        details = self._details(dto)
        media_type = ITEM_TYPES.get(dto.get("Type", ""))
        if media_type == MediaType.MOVIE:
            taglines = dto.get("Taglines") or []
            return Movie(
                details=details,
                tagline=taglines[0] if taglines else None,
                cast=self._people(dto, "Actor"),
                directors=self._people(dto, "Director"),
                content_rating=dto.get("OfficialRating"),
            )
        if media_type == MediaType.SERIES:
            return Series(
                details=details,
                season_count=dto.get("ChildCount") or 0,
                episode_count=dto.get("RecursiveItemCount") or 0,
                status=dto.get("Status"),
                cast=self._people(dto, "Actor"),
                creators=self._people(dto, "Creator"),
            )
        if media_type == MediaType.SEASON:
            return Season(
                details=details,
                number=dto.get("IndexNumber") or 0,
                series_id=dto.get("SeriesId"),
                series_name=dto.get("SeriesName"),
                episode_count=dto.get("ChildCount") or 0,
            )
        if media_type == MediaType.EPISODE:
            return Episode(
                details=details,
                number=dto.get("IndexNumber") or 0,
                season_number=dto.get("ParentIndexNumber") or 0,
                series_id=dto.get("SeriesId"),
                season_id=dto.get("SeasonId"),
                series_name=dto.get("SeriesName"),
            )
        if media_type == MediaType.ARTIST:
            return Artist(details=details, album_count=dto.get("AlbumCount") or 0)
        if media_type == MediaType.ALBUM:
            artists = dto.get("AlbumArtists") or dto.get("ArtistItems") or []
            return Album(
                details=details,
                artist_id=artists[0].get("Id") if artists else None,
                artist_name=dto.get("AlbumArtist"),
                track_count=dto.get("ChildCount") or 0,
            )
        if media_type == MediaType.TRACK:
            artists = dto.get("ArtistItems") or []
            return Track(
                details=details,
                number=dto.get("IndexNumber") or 0,
                disc_number=dto.get("ParentIndexNumber") or 0,
                album_id=dto.get("AlbumId"),
                album_name=dto.get("Album"),
                artist_id=artists[0].get("Id") if artists else None,
                artist_name=artists[0].get("Name") if artists else dto.get("AlbumArtist"),
            )
        if media_type == MediaType.PLAYLIST:
            return Playlist(
                details=details,
                item_list=ItemList(origin_client_id=self.client_id),
            )
        if media_type == MediaType.COLLECTION:
            return Collection(
                details=details,
                item_list=ItemList(origin_client_id=self.client_id),
            )
        return None

    def _to_media_item(self, dto: dict) -> Optional[MediaItem]:
        payload = self._to_payload(dto)
        if payload is None:
            logger.debug(f"{self.client_type.value}: type ignore {dto.get('Type')}")
            return None
        return self._track(MediaItem(data=payload), dto["Id"])

    def _convert_all(self, dtos: list[dict]) -> list[MediaItem]:
        items = (self._to_media_item(dto) for dto in dtos)
        return [item for item in items if item is not None]

    # ------------------------------------------------------------------
    # Requetes
    # ------------------------------------------------------------------

    def _items_params(self, item_types: str, options: QueryOptions) -> dict:
        params: dict[str, Any] = {
            "IncludeItemTypes": item_types,
            "Recursive": "true",
            "Fields": ITEM_FIELDS,
            "EnableUserData": "true",
            "SortBy": SORT_FIELDS[options.sort],
            "SortOrder": "Descending" if options.sort_order == SortOrder.DESC else "Ascending",
        }
        if options.query:
            params["SearchTerm"] = options.query
        if options.genre:
            params["Genres"] = options.genre
        if options.year:
            params["Years"] = str(options.year)
        if options.actor:
            params["Person"] = options.actor
            params["PersonTypes"] = "Actor"
        elif options.director:
            params["Person"] = options.director
            params["PersonTypes"] = "Director"
        elif options.creator:
            params["Person"] = options.creator
        if options.studio:
            params["Studios"] = options.studio
        if options.min_rating is not None:
            params["MinCommunityRating"] = options.min_rating
        if options.favorites:
            params["IsFavorite"] = "true"
        if options.recently_added:
            params["SortBy"] = "DateCreated"
            params["SortOrder"] = "Descending"
        if options.item_ids:
            params["Ids"] = ",".join(str(i) for i in options.item_ids)
        if options.limit:
            params["Limit"] = options.limit
            params["StartIndex"] = options.offset
        return params

    async def _query_items(self, item_types: str, options: QueryOptions) -> list[MediaItem]:
        data = await self._get_json(self._items_path, self._items_params(item_types, options))
        items = self._convert_all(data.get("Items") or [])
        if options.max_rating is not None:
            items = filter_items(items, QueryOptions(max_rating=options.max_rating))
        return items

    async def _get_item_dto(self, item_id: str) -> dict:
        return await self._get_json(f"{self._items_path}/{item_id}")

    async def _get_typed(self, item_id: str, media_type: MediaType) -> MediaItem:
        item = self._to_media_item(await self._get_item_dto(item_id))
        if item is None or item.type != media_type:
            raise NotFoundError(f"{media_type.value} {item_id} not found on {self.config.name}")
        return item

    # ------------------------------------------------------------------
    # Films, series, musique
    # ------------------------------------------------------------------

    async def get_movies(self, options: QueryOptions) -> list[MediaItem[Movie]]:
        return await self._query_items("Movie", options)

    async def get_movie(self, movie_id: str) -> MediaItem[Movie]:
        return await self._get_typed(movie_id, MediaType.MOVIE)

    async def get_series(self, options: QueryOptions) -> list[MediaItem[Series]]:
        return await self._query_items("Series", options)

    async def get_series_by_id(self, series_id: str) -> MediaItem[Series]:
        return await self._get_typed(series_id, MediaType.SERIES)

    async def get_seasons(self, series_id: str) -> list[MediaItem[Season]]:
        data = await self._get_json(
            f"/Shows/{series_id}/Seasons",
            {"UserId": self.user_id, "Fields": ITEM_FIELDS},
        )
        return self._convert_all(data.get("Items") or [])

    async def get_episodes(
        self, series_id: str, season_number: Optional[int] = None
    ) -> list[MediaItem[Episode]]:
        data = await self._get_json(
            f"/Shows/{series_id}/Episodes",
            {"UserId": self.user_id, "Season": season_number, "Fields": ITEM_FIELDS},
        )
        return self._convert_all(data.get("Items") or [])

    async def get_artists(self, options: QueryOptions) -> list[MediaItem[Artist]]:
        params = self._items_params("MusicArtist", options)
        params["UserId"] = self.user_id
        data = await self._get_json("/Artists", params)
        return self._convert_all(data.get("Items") or [])

    async def get_artist(self, artist_id: str) -> MediaItem[Artist]:
        return await self._get_typed(artist_id, MediaType.ARTIST)

    async def get_albums(self, options: QueryOptions) -> list[MediaItem[Album]]:
        return await self._query_items("MusicAlbum", options)

    async def get_album(self, album_id: str) -> MediaItem[Album]:
        return await self._get_typed(album_id, MediaType.ALBUM)

    async def get_tracks(self, options: QueryOptions) -> list[MediaItem[Track]]:
        return await self._query_items("Audio", options)

    async def get_track(self, track_id: str) -> MediaItem[Track]:
        return await self._get_typed(track_id, MediaType.TRACK)

    async def get_play_history(self, options: QueryOptions) -> list[MediaItem]:
        params = self._items_params("Movie,Episode,Audio", options)
        params.update({"IsPlayed": "true", "SortBy": "DatePlayed", "SortOrder": "Descending"})
        data = await self._get_json(self._items_path, params)
        return self._convert_all(data.get("Items") or [])

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    async def _playlist_entries(self, playlist_id: str) -> list[dict]:
        data = await self._get_json(
            f"/Playlists/{playlist_id}/Items",
            {"UserId": self.user_id, "Fields": ITEM_FIELDS},
        )
        return data.get("Items") or []

    def _with_entries(self, item: MediaItem, entries: list[dict]) -> MediaItem:
        item_list = item.data.item_list
        for dto in entries:
            if not item_list.contains(dto["Id"]):
                item_list.add_item(dto["Id"], client_id=self.client_id)
        # Le remplissage initial ne compte pas comme une modification
        item_list.version = 0
        item_list.last_modified = item.details.updated_at
        return item

    async def get_playlists(self, options: QueryOptions) -> list[MediaItem[Playlist]]:
        return await self._query_items("Playlist", options)

    async def get_playlist(self, playlist_id: str) -> MediaItem[Playlist]:
        item = await self._get_typed(playlist_id, MediaType.PLAYLIST)
        return self._with_entries(item, await self._playlist_entries(playlist_id))

    async def get_playlist_items(self, playlist_id: str) -> list[MediaItem]:
        return self._convert_all(await self._playlist_entries(playlist_id))

    async def create_playlist(self, name: str, description: str = "") -> MediaItem[Playlist]:
        response = await self._request(
            "POST", "/Playlists", params={"Name": name, "UserId": self.user_id}
        )
        playlist_id = response.json()["Id"]
        if description:
            return await self.update_playlist(playlist_id, name, description)
        return await self.get_playlist(playlist_id)

    async def _update_metadata(self, item_id: str, name: str, description: str) -> None:
        dto = await self._get_item_dto(item_id)
        dto["Name"] = name
        dto["Overview"] = description
        await self._request("POST", f"/Items/{item_id}", json=dto)

    async def update_playlist(
        self, playlist_id: str, name: str, description: str = ""
    ) -> MediaItem[Playlist]:
        await self._update_metadata(playlist_id, name, description)
        return await self.get_playlist(playlist_id)

    async def delete_playlist(self, playlist_id: str) -> None:
        await self._request("DELETE", f"/Items/{playlist_id}")

    async def add_playlist_item(self, playlist_id: str, item_id: str) -> None:
        await self._request(
            "POST",
            f"/Playlists/{playlist_id}/Items",
            params={"Ids": item_id, "UserId": self.user_id},
        )

    async def _entry_ids(self, playlist_id: str) -> dict[str, str]:
        """ID d'element -> PlaylistItemId (identifiant de l'entree dans la playlist)."""
        return {
            dto["Id"]: dto.get("PlaylistItemId") or dto["Id"]
            for dto in await self._playlist_entries(playlist_id)
        }

    async def remove_playlist_item(self, playlist_id: str, item_id: str) -> None:
        entries = await self._entry_ids(playlist_id)
        if item_id not in entries:
            raise NotFoundError(f"item {item_id} is not in playlist {playlist_id}")
        await self._request(
            "DELETE",
            f"/Playlists/{playlist_id}/Items",
            params={"EntryIds": entries[item_id]},
        )

    async def reorder_playlist_items(self, playlist_id: str, item_ids: list[str]) -> None:
        entries = await self._entry_ids(playlist_id)
        if len(item_ids) != len(entries) or set(item_ids) != set(entries):
            raise InvalidArgumentError("reorder operation must include all playlist items")
        for index, item_id in enumerate(item_ids):
            await self._request(
                "POST", f"/Playlists/{playlist_id}/Items/{entries[item_id]}/Move/{index}"
            )

    # ------------------------------------------------------------------
    # Collections (BoxSet)
    # ------------------------------------------------------------------

    async def _collection_children(self, collection_id: str) -> list[dict]:
        data = await self._get_json(
            self._items_path, {"ParentId": collection_id, "Fields": ITEM_FIELDS}
        )
        return data.get("Items") or []

    async def get_collections(self, options: QueryOptions) -> list[MediaItem[Collection]]:
        return await self._query_items("BoxSet", options)

    async def get_collection(self, collection_id: str) -> MediaItem[Collection]:
        item = await self._get_typed(collection_id, MediaType.COLLECTION)
        return self._with_entries(item, await self._collection_children(collection_id))

    async def get_collection_items(self, collection_id: str) -> list[MediaItem]:
        return self._convert_all(await self._collection_children(collection_id))

    async def create_collection(self, name: str, description: str = "") -> MediaItem[Collection]:
        response = await self._request("POST", "/Collections", params={"Name": name})
        collection_id = response.json()["Id"]
        if description:
            return await self.update_collection(collection_id, name, description)
        return await self.get_collection(collection_id)

    async def update_collection(
        self, collection_id: str, name: str, description: str = ""
    ) -> MediaItem[Collection]:
        await self._update_metadata(collection_id, name, description)
        return await self.get_collection(collection_id)

    async def delete_collection(self, collection_id: str) -> None:
        await self._request("DELETE", f"/Items/{collection_id}")

    async def add_collection_item(self, collection_id: str, item_id: str) -> None:
        await self._request(
            "POST", f"/Collections/{collection_id}/Items", params={"Ids": item_id}
        )

    async def remove_collection_item(self, collection_id: str, item_id: str) -> None:
        await self._request(
            "DELETE", f"/Collections/{collection_id}/Items", params={"Ids": item_id}
        )

    # reorder_collection_items : les BoxSet sont tries par le serveur,
    # l'implementation par defaut (UnsupportedFeatureError) s'applique.
