"""
Socle commun des adaptateurs HTTP vers les serveurs media.

Fournit le client httpx paresseux, l'appel avec retry et conversion
d'erreurs, l'enregistrement du SyncClient sur chaque element retourne
et un filtrage local pour les fournisseurs qui n'appliquent pas
eux-memes certains filtres.
"""

from typing import Any, Optional

import httpx

from src.adapters.api.retry import provider_request
from src.core.entities.client import ClientConfig
from src.core.entities.media import MediaItem
from src.core.ports.providers import IMediaProvider
from src.core.value_objects.query_options import QueryOptions


class HttpMediaProvider(IMediaProvider):
    """
    Adaptateur media base sur httpx.AsyncClient.

    Les sous-classes definissent _build_headers() et, au besoin,
    _base_params() et path_prefix.
    """

    path_prefix = ""

    def __init__(self, config: ClientConfig, timeout: float = 30.0) -> None:
        super().__init__(config)
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/") + self.path_prefix

    def _build_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def _base_params(self) -> dict[str, str]:
        return {}

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, cree au premier appel."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._build_headers(),
                params=self._base_params(),
                timeout=self._timeout,
                verify=self.config.ssl,
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        return await provider_request(
            self._get_client(), method, path, self.client_type.value, **kwargs
        )

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        response = await self._request("GET", path, params=_clean(params))
        if not response.content:
            return {}
        return response.json()

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _track(self, item: MediaItem, external_id: str) -> MediaItem:
        """Associe l'element a ce client (SyncClient)."""
        item.add_sync_client(self.client_id, self.client_type.value, str(external_id))
        return item


def _clean(params: Optional[dict]) -> Optional[dict]:
    """Retire les parametres None pour ne pas les envoyer au serveur."""
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None}


def filter_items(items: list[MediaItem], options: QueryOptions) -> list[MediaItem]:
    """
    Applique localement les filtres de contenu de QueryOptions.

    Utilise par les adaptateurs dont l'API ne filtre pas cote serveur
    (Subsonic notamment). Les champs absents de la charge utile ne
    filtrent pas.
    """
    result = []
    for item in items:
        details = item.details
        data = item.data
        if options.query and options.query.lower() not in item.title.lower():
            continue
        if options.genre and options.genre.lower() not in (g.lower() for g in details.genres):
            continue
        if options.year and details.release_year != options.year:
            continue
        if options.min_rating is not None and (details.rating or 0) < options.min_rating:
            continue
        if options.max_rating is not None and (details.rating or 0) > options.max_rating:
            continue
        if options.actor and options.actor not in getattr(data, "cast", [options.actor]):
            continue
        if options.director and options.director not in getattr(
            data, "directors", [options.director]
        ):
            continue
        result.append(item)
    return result
