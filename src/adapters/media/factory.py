"""
Fabrique des adaptateurs fournisseurs.

Construit l'adaptateur correspondant au type d'une configuration client
et conserve une instance par client_id pour reutiliser les connexions
HTTP. Le cache est invalide a la mise a jour ou suppression d'une
configuration, et toutes les instances sont fermees a l'arret.
"""

from typing import Callable

from loguru import logger

from src.adapters.api.cache import APICache
from src.adapters.api.tmdb_client import TMDBClient, TMDBMediaProvider
from src.adapters.media.emby_client import EmbyClient
from src.adapters.media.jellyfin_client import JellyfinClient
from src.adapters.media.plex_client import PlexClient
from src.adapters.media.subsonic_client import SubsonicClient
from src.core.entities.client import ClientConfig, ClientType
from src.core.errors import InvalidArgumentError
from src.core.ports.providers import IMediaProvider


class ProviderFactory:
    """
    Cree et met en cache les IMediaProvider par configuration client.

    Example:
        factory = ProviderFactory(cache=APICache(), timeout=30)
        provider = factory.get(config)
        movies = await provider.get_movies(QueryOptions())
        await factory.close_all()
    """

    def __init__(
        self, cache: APICache, timeout: float = 30.0, tmdb_language: str = "fr-FR"
    ) -> None:
        self._cache = cache
        self._timeout = timeout
        self._tmdb_language = tmdb_language
        self._providers: dict[int, IMediaProvider] = {}
        self._builders: dict[ClientType, Callable[[ClientConfig], IMediaProvider]] = {
            ClientType.JELLYFIN: lambda c: JellyfinClient(c, self._timeout),
            ClientType.EMBY: lambda c: EmbyClient(c, self._timeout),
            ClientType.PLEX: lambda c: PlexClient(c, self._timeout),
            ClientType.SUBSONIC: lambda c: SubsonicClient(c, self._timeout),
            ClientType.TMDB: self._build_tmdb,
        }

    def _build_tmdb(self, config: ClientConfig) -> IMediaProvider:
        client = TMDBClient(
            config.api_key or "", self._cache, self._tmdb_language, self._timeout
        )
        return TMDBMediaProvider(config, client)

    def create(self, config: ClientConfig) -> IMediaProvider:
        """
        Construit un adaptateur neuf, sans le mettre en cache.

        Utilise pour tester une configuration avant de l'enregistrer.

        Raises:
            InvalidArgumentError: Si le type de client n'a pas d'adaptateur.
        """
        builder = self._builders.get(config.client_type)
        if builder is None:
            raise InvalidArgumentError(f"unsupported client type: {config.client_type}")
        return builder(config)

    def get(self, config: ClientConfig) -> IMediaProvider:
        """Adaptateur en cache pour ce client, construit au premier appel."""
        if config.id is None:
            return self.create(config)
        provider = self._providers.get(config.id)
        if provider is None:
            provider = self.create(config)
            self._providers[config.id] = provider
            logger.debug(f"Adaptateur {config.client_type.value} cree pour le client {config.id}")
        return provider

    async def invalidate(self, client_id: int) -> None:
        """Ferme et oublie l'adaptateur d'un client."""
        provider = self._providers.pop(client_id, None)
        if provider is not None:
            await provider.close()

    async def close_all(self) -> None:
        for client_id in list(self._providers):
            await self.invalidate(client_id)
