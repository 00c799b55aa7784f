"""
Service de gestion des configurations client.

Une configuration n'est enregistree (ou modifiee) qu'apres validation
des champs requis par son type et un test de connexion reussi.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from loguru import logger

from src.adapters.media.factory import ProviderFactory
from src.core.entities.client import ClientCategory, ClientConfig, ClientType
from src.core.errors import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    ProviderError,
)
from src.core.ports.repositories import IClientRepository

# Champs d'identification requis par type de client
REQUIRED_CREDENTIALS: dict[ClientType, tuple[str, ...]] = {
    ClientType.JELLYFIN: ("api_key", "user_identifier"),
    ClientType.EMBY: ("api_key", "user_identifier"),
    ClientType.PLEX: ("api_key",),
    ClientType.SUBSONIC: ("username", "password"),
    ClientType.TMDB: ("api_key",),
}


@dataclass
class ClientRequest:
    """Donnees saisies pour creer ou modifier un client."""

    name: str
    client_type: ClientType
    base_url: str = ""
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    user_identifier: Optional[str] = None
    ssl: bool = True
    enabled: bool = True


def validate_request(request: ClientRequest) -> None:
    """
    Verifie les champs requis par le type de client.

    Raises:
        InvalidArgumentError: Au premier champ manquant ou invalide.
    """
    if not request.name or not request.name.strip():
        raise InvalidArgumentError("client name is required")
    client_type = ClientType(request.client_type)

    if client_type.category == ClientCategory.MEDIA:
        parsed = urlparse(request.base_url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidArgumentError(f"invalid base URL: {request.base_url!r}")

    for name in REQUIRED_CREDENTIALS.get(client_type, ()):
        if not getattr(request, name):
            raise InvalidArgumentError(f"{name} is required for {client_type.value} clients")


class ClientConfigService:
    """
    Cycle de vie des configurations client d'un utilisateur.

    Example:
        service = ClientConfigService(client_repo, provider_factory)
        config = await service.create(user_id=1, request=ClientRequest(
            name="Salon", client_type=ClientType.JELLYFIN,
            base_url="http://jellyfin:8096", api_key="...", user_identifier="...",
        ))
    """

    def __init__(
        self, client_repo: IClientRepository, provider_factory: ProviderFactory
    ) -> None:
        self._client_repo = client_repo
        self._factory = provider_factory

    def _owned(self, user_id: int, client_id: int) -> ClientConfig:
        config = self._client_repo.get_by_id(client_id)
        if config is None:
            raise NotFoundError(f"client {client_id} not found")
        if config.user_id != user_id:
            raise PermissionDeniedError(f"client {client_id} does not belong to user {user_id}")
        return config

    def _build(
        self, user_id: int, request: ClientRequest, existing: Optional[ClientConfig] = None
    ) -> ClientConfig:
        return ClientConfig(
            id=existing.id if existing else None,
            user_id=user_id,
            name=request.name.strip(),
            client_type=ClientType(request.client_type),
            base_url=(request.base_url or "").rstrip("/"),
            api_key=request.api_key,
            username=request.username,
            password=request.password,
            user_identifier=request.user_identifier,
            ssl=request.ssl,
            enabled=request.enabled,
            created_at=existing.created_at if existing else None,
        )

    async def _check_connection(self, config: ClientConfig) -> None:
        """Teste la configuration avec un adaptateur neuf, non mis en cache."""
        provider = self._factory.create(config)
        try:
            connected = await provider.test_connection()
        except NotFoundError as e:
            raise ProviderError(
                f"connection test failed: {e.message}",
                client_type=config.client_type.value,
                original_error=e,
            ) from e
        finally:
            await provider.close()
        if not connected:
            raise ProviderError("connection test failed", client_type=config.client_type.value)

    async def create(self, user_id: int, request: ClientRequest) -> ClientConfig:
        """
        Valide, teste puis enregistre un nouveau client.

        Raises:
            InvalidArgumentError: Champ manquant ou invalide.
            ProviderError: Echec du test de connexion.
        """
        validate_request(request)
        config = self._build(user_id, request)
        await self._check_connection(config)
        created = self._client_repo.create(config)
        logger.info(
            f"Client {created.id} ({created.client_type.value}) cree pour l'utilisateur {user_id}"
        )
        return created

    async def update(
        self, user_id: int, client_id: int, request: ClientRequest
    ) -> ClientConfig:
        existing = self._owned(user_id, client_id)
        validate_request(request)
        config = self._build(user_id, request, existing)
        await self._check_connection(config)
        updated = self._client_repo.update(config)
        await self._factory.invalidate(client_id)
        logger.info(f"Client {client_id} mis a jour")
        return updated

    async def delete(self, user_id: int, client_id: int) -> bool:
        self._owned(user_id, client_id)
        deleted = self._client_repo.delete(client_id)
        await self._factory.invalidate(client_id)
        logger.info(f"Client {client_id} supprime")
        return deleted

    def get(self, user_id: int, client_id: int) -> ClientConfig:
        return self._owned(user_id, client_id)

    def list_for_user(self, user_id: int) -> list[ClientConfig]:
        return self._client_repo.get_by_user_id(user_id)

    def list_by_category(self, user_id: int, category: ClientCategory) -> list[ClientConfig]:
        return self._client_repo.get_by_category(ClientCategory(category), user_id)

    async def test_connection(self, user_id: int, client_id: int) -> bool:
        """Teste un client enregistre avec son adaptateur en cache."""
        config = self._owned(user_id, client_id)
        connected = await self._factory.get(config).test_connection()
        logger.info(f"Test de connexion du client {client_id} : {'ok' if connected else 'echec'}")
        return connected
