"""
Routes des listes stockées chez un client (playlists et collections distantes).

La lecture d'une liste ou du contenu d'un domaine sur un client passe par
les routes média (/clients/media/{client_id}/{domain}[/{id}]).
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from ...services.lists import ClientListService, list_media_type
from ..deps import AppContainer, UserId, envelope
from ..schemas import ClientListBody, ClientListItemBody, ClientReorderBody, ImportBody

router = APIRouter(tags=["client lists"])


def _service(container: AppContainer, kind: str) -> ClientListService:
    list_service = container.list_service(media_type=list_media_type(kind))
    return container.client_list_service(list_service=list_service)


@router.get("/client-lists/{kind}")
async def user_client_lists(
    kind: str,
    user_id: UserId,
    container: AppContainer,
    count: Annotated[int, Query(ge=1, le=200)] = 20,
):
    """Listes de tous les clients de l'utilisateur, plus récentes d'abord."""
    return envelope(await _service(container, kind).get_user_client_lists(user_id, count))


@router.get("/clients/media/{client_id}/{kind}/search")
async def search_client_lists(
    client_id: int, kind: str, q: str, user_id: UserId, container: AppContainer
):
    return envelope(await _service(container, kind).search_client_lists(user_id, client_id, q))


@router.post("/clients/media/{client_id}/{kind}", status_code=201)
async def create_client_list(
    client_id: int, kind: str, body: ClientListBody, user_id: UserId, container: AppContainer
):
    created = await _service(container, kind).create_client_list(
        user_id, client_id, body.name, body.description
    )
    return envelope(created, "list created")


@router.put("/clients/media/{client_id}/{kind}/{list_id}")
async def update_client_list(
    client_id: int,
    kind: str,
    list_id: str,
    body: ClientListBody,
    user_id: UserId,
    container: AppContainer,
):
    updated = await _service(container, kind).update_client_list(
        user_id, client_id, list_id, body.name, body.description
    )
    return envelope(updated, "list updated")


@router.delete("/clients/media/{client_id}/{kind}/{list_id}")
async def delete_client_list(
    client_id: int, kind: str, list_id: str, user_id: UserId, container: AppContainer
):
    await _service(container, kind).delete_client_list(user_id, client_id, list_id)
    return envelope(message="list deleted")


@router.get("/clients/media/{client_id}/{kind}/{list_id}/items")
async def client_list_items(
    client_id: int, kind: str, list_id: str, user_id: UserId, container: AppContainer
):
    items = await _service(container, kind).get_client_items(user_id, client_id, list_id)
    return envelope(items)


@router.post("/clients/media/{client_id}/{kind}/{list_id}/items")
async def add_client_list_item(
    client_id: int,
    kind: str,
    list_id: str,
    body: ClientListItemBody,
    user_id: UserId,
    container: AppContainer,
):
    updated = await _service(container, kind).add_client_item(
        user_id, client_id, list_id, body.item_id
    )
    return envelope(updated, "item added")


@router.delete("/clients/media/{client_id}/{kind}/{list_id}/items/{item_id}")
async def remove_client_list_item(
    client_id: int,
    kind: str,
    list_id: str,
    item_id: str,
    user_id: UserId,
    container: AppContainer,
):
    updated = await _service(container, kind).remove_client_item(
        user_id, client_id, list_id, item_id
    )
    return envelope(updated, "item removed")


@router.post("/clients/media/{client_id}/{kind}/{list_id}/reorder")
async def reorder_client_list(
    client_id: int,
    kind: str,
    list_id: str,
    body: ClientReorderBody,
    user_id: UserId,
    container: AppContainer,
):
    updated = await _service(container, kind).reorder_client_items(
        user_id, client_id, list_id, body.item_ids
    )
    return envelope(updated, "list reordered")


@router.post("/clients/media/{client_id}/{kind}/{list_id}/import", status_code=201)
async def import_client_list(
    client_id: int,
    kind: str,
    list_id: str,
    user_id: UserId,
    container: AppContainer,
    body: Optional[ImportBody] = None,
):
    imported = await _service(container, kind).import_client_list(
        user_id, client_id, list_id, name=body.name if body else None
    )
    return envelope(imported, "list imported")
