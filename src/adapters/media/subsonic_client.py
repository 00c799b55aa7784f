"""
Client Subsonic (et serveurs compatibles : Navidrome, Airsonic, Gonic).

Authentification par jeton : chaque requete porte u (utilisateur),
t = md5(mot de passe + sel), s (sel), v (version d'API), c (client)
et f=json. Le serveur repond toujours en HTTP 200 ; le statut reel est
dans subsonic-response.status.

Subsonic ne gere que la musique, les playlists et l'historique.
"""

import hashlib
import secrets
from typing import Any, Optional

from src.adapters.api.dates import parse_datetime
from src.adapters.media.base import HttpMediaProvider, filter_items
from src.core.entities.lists import ItemList, Playlist
from src.core.entities.media import Album, Artist, MediaDetails, MediaItem, Track
from src.core.errors import InvalidArgumentError, NotFoundError, ProviderError
from src.core.value_objects.query_options import QueryOptions

API_VERSION = "1.16.1"
CLIENT_NAME = "suasor"

# Codes d'erreur Subsonic
ERROR_NOT_FOUND = 70
ERROR_WRONG_CREDENTIALS = 40

DEFAULT_PAGE_SIZE = 500


def make_token(password: str, salt: str) -> str:
    """Jeton d'authentification Subsonic : md5(password + salt) en hexadecimal."""
    return hashlib.md5(f"{password}{salt}".encode("utf-8")).hexdigest()


class SubsonicClient(HttpMediaProvider):
    """
    Adaptateur Subsonic.

    Un nouveau sel est tire pour chaque requete.
    """

    def _auth_params(self) -> dict[str, str]:
        salt = secrets.token_hex(8)
        return {
            "u": self.config.username or "",
            "t": make_token(self.config.password or "", salt),
            "s": salt,
            "v": API_VERSION,
            "c": CLIENT_NAME,
            "f": "json",
        }

    async def _call(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """
        Appelle /rest/{endpoint}.view et retourne le contenu de subsonic-response.

        Raises:
            NotFoundError: Code d'erreur 70 (donnee introuvable)
            ProviderError: Tout autre statut "failed"
        """
        query = self._auth_params()
        query.update({k: v for k, v in (params or {}).items() if v is not None})
        response = await self._request("GET", f"/rest/{endpoint}.view", params=query)
        body = response.json().get("subsonic-response") or {}
        if body.get("status") != "ok":
            error = body.get("error") or {}
            message = error.get("message", "unknown subsonic error")
            if error.get("code") == ERROR_NOT_FOUND:
                raise NotFoundError(f"subsonic: {message}")
            raise ProviderError(message, self.client_type.value, status_code=error.get("code"))
        return body

    async def test_connection(self) -> bool:
        await self._call("ping")
        return True

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _cover_url(self, cover_id: Optional[str]) -> Optional[str]:
        if not cover_id:
            return None
        return f"{self.base_url}/rest/getCoverArt.view?id={cover_id}"

    def _details(self, entry: dict, title_key: str = "name") -> MediaDetails:
        genre = entry.get("genre")
        external_ids = {}
        if entry.get("musicBrainzId"):
            external_ids["musicbrainz"] = entry["musicBrainzId"]
        return MediaDetails(
            title=entry.get(title_key) or entry.get("title") or "",
            release_year=entry.get("year"),
            genres=[genre] if genre else [],
            rating=entry.get("userRating"),
            popularity=entry.get("playCount"),
            duration_seconds=entry.get("duration"),
            artwork_url=self._cover_url(entry.get("coverArt")),
            added_at=parse_datetime(entry.get("created")),
            external_ids=external_ids,
        )

    def _artist(self, entry: dict) -> MediaItem[Artist]:
        artist = Artist(details=self._details(entry), album_count=entry.get("albumCount") or 0)
        return self._track(MediaItem(data=artist), entry["id"])

    def _album(self, entry: dict) -> MediaItem[Album]:
        album = Album(
            details=self._details(entry),
            artist_id=entry.get("artistId"),
            artist_name=entry.get("artist"),
            track_count=entry.get("songCount") or 0,
        )
        return self._track(MediaItem(data=album), entry["id"])

    def _song(self, entry: dict) -> MediaItem[Track]:
        track = Track(
            details=self._details(entry, title_key="title"),
            number=entry.get("track") or 0,
            disc_number=entry.get("discNumber") or 0,
            album_id=entry.get("albumId"),
            album_name=entry.get("album"),
            artist_id=entry.get("artistId"),
            artist_name=entry.get("artist"),
        )
        return self._track(MediaItem(data=track), entry["id"])

    def _playlist(self, entry: dict) -> MediaItem[Playlist]:
        details = self._details(entry)
        details.description = entry.get("comment")
        details.updated_at = parse_datetime(entry.get("changed"))
        item_list = ItemList(origin_client_id=self.client_id, is_public=bool(entry.get("public")))
        for song in entry.get("entry") or []:
            if not item_list.contains(song["id"]):
                item_list.add_item(song["id"], client_id=self.client_id)
        item_list.version = 0
        item_list.last_modified = details.updated_at
        playlist = Playlist(details=details, item_list=item_list)
        return self._track(MediaItem(data=playlist), entry["id"])

    # ------------------------------------------------------------------
    # Musique
    # ------------------------------------------------------------------

    async def _search(self, query: str, artists: int = 0, albums: int = 0, songs: int = 0,
                      offset: int = 0) -> dict:
        body = await self._call(
            "search3",
            {
                "query": query,
                "artistCount": artists,
                "albumCount": albums,
                "songCount": songs,
                "artistOffset": offset,
                "albumOffset": offset,
                "songOffset": offset,
            },
        )
        return body.get("searchResult3") or {}

    @staticmethod
    def _page(options: QueryOptions) -> tuple[int, int]:
        return (options.limit or DEFAULT_PAGE_SIZE, options.offset)

    async def get_artists(self, options: QueryOptions) -> list[MediaItem[Artist]]:
        if options.query:
            size, offset = self._page(options)
            result = await self._search(options.query, artists=size, offset=offset)
            return [self._artist(a) for a in result.get("artist") or []]
        body = await self._call("getArtists")
        artists = [
            self._artist(artist)
            for index in (body.get("artists") or {}).get("index") or []
            for artist in index.get("artist") or []
        ]
        return filter_items(artists, options)

    async def get_artist(self, artist_id: str) -> MediaItem[Artist]:
        body = await self._call("getArtist", {"id": artist_id})
        return self._artist(body["artist"])

    async def get_albums(self, options: QueryOptions) -> list[MediaItem[Album]]:
        size, offset = self._page(options)
        if options.query:
            result = await self._search(options.query, albums=size, offset=offset)
            return filter_items([self._album(a) for a in result.get("album") or []], options)
        params: dict[str, Any] = {"type": "newest", "size": size, "offset": offset}
        if options.genre:
            params.update({"type": "byGenre", "genre": options.genre})
        elif options.year:
            params.update({"type": "byYear", "fromYear": options.year, "toYear": options.year})
        elif options.favorites:
            params["type"] = "starred"
        body = await self._call("getAlbumList2", params)
        albums = [self._album(a) for a in (body.get("albumList2") or {}).get("album") or []]
        return filter_items(albums, options)

    async def get_album(self, album_id: str) -> MediaItem[Album]:
        body = await self._call("getAlbum", {"id": album_id})
        return self._album(body["album"])

    async def get_tracks(self, options: QueryOptions) -> list[MediaItem[Track]]:
        size, offset = self._page(options)
        if options.genre and not options.query:
            body = await self._call(
                "getSongsByGenre", {"genre": options.genre, "count": size, "offset": offset}
            )
            songs = (body.get("songsByGenre") or {}).get("song") or []
        else:
            # Une recherche vide liste toute la bibliotheque (Navidrome, Gonic)
            result = await self._search(options.query or "", songs=size, offset=offset)
            songs = result.get("song") or []
        return filter_items([self._song(s) for s in songs], options)

    async def get_track(self, track_id: str) -> MediaItem[Track]:
        body = await self._call("getSong", {"id": track_id})
        return self._track_or_raise(body.get("song"), track_id)

    def _track_or_raise(self, entry: Optional[dict], track_id: str) -> MediaItem[Track]:
        if not entry:
            raise NotFoundError(f"track {track_id} not found on {self.config.name}")
        return self._song(entry)

    async def get_play_history(self, options: QueryOptions) -> list[MediaItem]:
        size, offset = self._page(options)
        body = await self._call("getAlbumList2", {"type": "recent", "size": size, "offset": offset})
        return [self._album(a) for a in (body.get("albumList2") or {}).get("album") or []]

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    async def get_playlists(self, options: QueryOptions) -> list[MediaItem[Playlist]]:
        body = await self._call("getPlaylists")
        playlists = [self._playlist(p) for p in (body.get("playlists") or {}).get("playlist") or []]
        if options.query:
            playlists = filter_items(playlists, QueryOptions(query=options.query))
        return playlists

    async def _raw_playlist(self, playlist_id: str) -> dict:
        body = await self._call("getPlaylist", {"id": playlist_id})
        return body.get("playlist") or {}

    async def get_playlist(self, playlist_id: str) -> MediaItem[Playlist]:
        return self._playlist(await self._raw_playlist(playlist_id))

    async def get_playlist_items(self, playlist_id: str) -> list[MediaItem]:
        raw = await self._raw_playlist(playlist_id)
        return [self._song(song) for song in raw.get("entry") or []]

    async def create_playlist(self, name: str, description: str = "") -> MediaItem[Playlist]:
        body = await self._call("createPlaylist", {"name": name})
        created = body.get("playlist")
        if created is None:
            # Serveurs < 1.14 : la reponse ne contient pas la playlist creee
            existing = await self.get_playlists(QueryOptions())
            matches = [p for p in existing if p.title == name]
            if not matches:
                raise NotFoundError(f"created playlist {name} not found on {self.config.name}")
            created_id = matches[-1].get_client_item_id(self.client_id)
        else:
            created_id = created["id"]
        if description:
            return await self.update_playlist(created_id, name, description)
        return await self.get_playlist(created_id)

    async def update_playlist(
        self, playlist_id: str, name: str, description: str = ""
    ) -> MediaItem[Playlist]:
        await self._call(
            "updatePlaylist", {"playlistId": playlist_id, "name": name, "comment": description}
        )
        return await self.get_playlist(playlist_id)

    async def delete_playlist(self, playlist_id: str) -> None:
        await self._call("deletePlaylist", {"id": playlist_id})

    async def add_playlist_item(self, playlist_id: str, item_id: str) -> None:
        await self._call("updatePlaylist", {"playlistId": playlist_id, "songIdToAdd": item_id})

    async def remove_playlist_item(self, playlist_id: str, item_id: str) -> None:
        raw = await self._raw_playlist(playlist_id)
        song_ids = [song["id"] for song in raw.get("entry") or []]
        if item_id not in song_ids:
            raise NotFoundError(f"item {item_id} is not in playlist {playlist_id}")
        await self._call(
            "updatePlaylist",
            {"playlistId": playlist_id, "songIndexToRemove": song_ids.index(item_id)},
        )

    async def reorder_playlist_items(self, playlist_id: str, item_ids: list[str]) -> None:
        raw = await self._raw_playlist(playlist_id)
        current = [song["id"] for song in raw.get("entry") or []]
        if len(item_ids) != len(current) or set(item_ids) != set(current):
            raise InvalidArgumentError("reorder operation must include all playlist items")
        # createPlaylist avec playlistId remplace le contenu dans l'ordre donne
        await self._call("createPlaylist", {"playlistId": playlist_id, "songId": item_ids})
