"""
Routes de configuration des clients média.

Les secrets (mot de passe, clé d'API) ne sont jamais renvoyés : seule
leur présence est indiquée.
"""

from typing import Any, Optional

from fastapi import APIRouter

from ...core.entities.client import ClientCategory, ClientConfig
from ..deps import AppContainer, UserId, envelope
from ..schemas import ClientBody

router = APIRouter(prefix="/clients", tags=["clients"])


def client_view(config: ClientConfig) -> dict[str, Any]:
    return {
        "id": config.id,
        "name": config.name,
        "client_type": config.client_type.value,
        "category": config.category.value,
        "base_url": config.base_url,
        "username": config.username,
        "user_identifier": config.user_identifier,
        "has_api_key": bool(config.api_key),
        "has_password": bool(config.password),
        "ssl": config.ssl,
        "enabled": config.enabled,
        "capabilities": sorted(c.value for c in config.capabilities),
        "created_at": config.created_at,
        "updated_at": config.updated_at,
    }


@router.get("")
async def list_clients(
    user_id: UserId, container: AppContainer, category: Optional[ClientCategory] = None
):
    """Clients de l'utilisateur, éventuellement filtrés par catégorie."""
    service = container.client_config_service()
    if category is None:
        configs = service.list_for_user(user_id)
    else:
        configs = service.list_by_category(user_id, category)
    return envelope([client_view(c) for c in configs])


@router.post("", status_code=201)
async def create_client(body: ClientBody, user_id: UserId, container: AppContainer):
    service = container.client_config_service()
    config = await service.create(user_id, body.to_request())
    return envelope(client_view(config), "client created")


@router.get("/{client_id}")
async def get_client(client_id: int, user_id: UserId, container: AppContainer):
    config = container.client_config_service().get(user_id, client_id)
    return envelope(client_view(config))


@router.put("/{client_id}")
async def update_client(
    client_id: int, body: ClientBody, user_id: UserId, container: AppContainer
):
    service = container.client_config_service()
    config = await service.update(user_id, client_id, body.to_request())
    return envelope(client_view(config), "client updated")


@router.delete("/{client_id}")
async def delete_client(client_id: int, user_id: UserId, container: AppContainer):
    await container.client_config_service().delete(user_id, client_id)
    return envelope(message="client deleted")


@router.post("/{client_id}/test")
async def test_client(client_id: int, user_id: UserId, container: AppContainer):
    connected = await container.client_config_service().test_connection(user_id, client_id)
    message = "connection successful" if connected else "connection failed"
    return envelope({"connected": connected}, message)
