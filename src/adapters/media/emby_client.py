"""
Client Emby.

Emby sert son API sous le prefixe /emby et attend la cle d'API dans
l'en-tete X-Emby-Token.
"""

from src.adapters.media.emby_family import EmbyFamilyClient


class EmbyClient(EmbyFamilyClient):
    """Adaptateur Emby."""

    path_prefix = "/emby"

    def _build_headers(self) -> dict[str, str]:
        headers = super()._build_headers()
        headers["X-Emby-Token"] = self.config.api_key or ""
        return headers
