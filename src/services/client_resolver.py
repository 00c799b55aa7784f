"""
Resolution des configurations client en adaptateurs fournisseurs.

Le ClientResolver est le seul point d'entree vers les adaptateurs : il
verifie l'appartenance de la configuration a l'utilisateur et la
capacite demandee avant de retourner l'IMediaProvider correspondant.
"""

from typing import Optional

from loguru import logger

from src.adapters.media.factory import ProviderFactory
from src.core.entities.client import Capability, ClientCategory
from src.core.errors import NotFoundError, PermissionDeniedError, UnsupportedFeatureError
from src.core.ports.providers import IMediaProvider
from src.core.ports.repositories import IClientRepository


class ClientResolver:
    """
    Resout (utilisateur, client, capacite) en IMediaProvider.

    Example:
        resolver = ClientResolver(client_repo, provider_factory)
        provider = resolver.resolve(user_id=1, client_id=3, capability=Capability.MOVIES)
        providers = resolver.resolve_all(user_id=1, capability=Capability.MUSIC)
    """

    def __init__(
        self, client_repo: IClientRepository, provider_factory: ProviderFactory
    ) -> None:
        self._client_repo = client_repo
        self._factory = provider_factory

    def resolve(
        self, user_id: int, client_id: int, capability: Optional[Capability] = None
    ) -> IMediaProvider:
        """
        Retourne l'adaptateur d'un client de l'utilisateur.

        Raises:
            NotFoundError: Si la configuration n'existe pas.
            PermissionDeniedError: Si la configuration appartient a un autre utilisateur.
            UnsupportedFeatureError: Si la capacite demandee n'est pas supportee.
        """
        config = self._client_repo.get_by_id(client_id)
        if config is None:
            raise NotFoundError(f"client {client_id} not found")
        if config.user_id != user_id:
            raise PermissionDeniedError(f"client {client_id} does not belong to user {user_id}")
        if capability is not None and not config.supports(capability):
            raise UnsupportedFeatureError(
                f"client {client_id} ({config.client_type.value}) "
                f"does not support {capability.value}"
            )
        return self._factory.get(config)

    def resolve_all(self, user_id: int, capability: Capability) -> list[IMediaProvider]:
        """
        Adaptateurs de tous les clients media de l'utilisateur supportant la capacite.

        Les clients dont l'adaptateur ne peut etre construit sont ignores.
        L'ordre suit l'ordre des configurations (ID croissant).
        """
        providers: list[IMediaProvider] = []
        for config in self._client_repo.get_by_category(ClientCategory.MEDIA, user_id):
            if not config.supports(capability):
                continue
            try:
                providers.append(self._factory.get(config))
            except Exception as e:
                logger.bind(client_id=config.id).warning(
                    f"{config.client_type.value} ignore : {e}"
                )
        return providers
