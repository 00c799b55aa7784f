"""
Serialisation JSON des charges utiles media.

Les dataclasses du domaine (Movie, Playlist avec son ItemList...) sont
converties par des TypeAdapter pydantic, qui gerent les dataclasses
imbriquees, les datetimes et les enums dans les deux sens.
"""

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

from src.core.entities.lists import Collection, Playlist
from src.core.entities.media import (
    Album,
    Artist,
    Episode,
    MediaType,
    Movie,
    Season,
    Series,
    Track,
)

PAYLOAD_TYPES: dict[MediaType, type] = {
    MediaType.MOVIE: Movie,
    MediaType.SERIES: Series,
    MediaType.SEASON: Season,
    MediaType.EPISODE: Episode,
    MediaType.ARTIST: Artist,
    MediaType.ALBUM: Album,
    MediaType.TRACK: Track,
    MediaType.PLAYLIST: Playlist,
    MediaType.COLLECTION: Collection,
}


@lru_cache(maxsize=None)
def _adapter(media_type: MediaType) -> TypeAdapter:
    return TypeAdapter(PAYLOAD_TYPES[media_type])


def dump_payload(media_type: MediaType, data: Any) -> str:
    """Serialise une charge utile en JSON."""
    return _adapter(MediaType(media_type)).dump_json(data).decode("utf-8")


def load_payload(media_type: MediaType, raw: str) -> Any:
    """Reconstruit la charge utile typee depuis son JSON."""
    return _adapter(MediaType(media_type)).validate_json(raw)
