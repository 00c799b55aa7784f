"""
Client Jellyfin.

Usage:
    client = JellyfinClient(config)
    movies = await client.get_movies(QueryOptions(genre="Action"))
    await client.close()
"""

from src.adapters.media.emby_family import EmbyFamilyClient

CLIENT_NAME = "Suasor"
CLIENT_VERSION = "1.0.0"


class JellyfinClient(EmbyFamilyClient):
    """
    Adaptateur Jellyfin.

    Authentification par en-tete Authorization au format MediaBrowser,
    qui porte aussi l'identification du client aupres du serveur.
    """

    def _build_headers(self) -> dict[str, str]:
        headers = super()._build_headers()
        headers["Authorization"] = (
            f'MediaBrowser Client="{CLIENT_NAME}", Device="{CLIENT_NAME}", '
            f'DeviceId="suasor-{self.client_id}", Version="{CLIENT_VERSION}", '
            f'Token="{self.config.api_key or ""}"'
        )
        return headers
