"""
Adaptateurs vers les serveurs media (Jellyfin, Emby, Plex, Subsonic).
"""

from src.adapters.media.emby_client import EmbyClient
from src.adapters.media.factory import ProviderFactory
from src.adapters.media.jellyfin_client import JellyfinClient
from src.adapters.media.plex_client import PlexClient
from src.adapters.media.subsonic_client import SubsonicClient

__all__ = [
    "EmbyClient",
    "JellyfinClient",
    "PlexClient",
    "ProviderFactory",
    "SubsonicClient",
]
