"""
Routes des listes internes (playlists et collections Suasor).

{kind} vaut "playlists" ou "collections".
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from ...core.value_objects.query_options import QueryOptions
from ...services.lists import ListService, list_media_type
from ..deps import AppContainer, UserId, envelope
from ..schemas import ListBody, ListItemBody, ListUpdateBody, ReorderBody, ShareBody, SyncBody

router = APIRouter(prefix="/lists", tags=["lists"])


def _service(container: AppContainer, kind: str) -> ListService:
    return container.list_service(media_type=list_media_type(kind))


@router.get("/{kind}")
async def list_lists(
    kind: str,
    user_id: UserId,
    container: AppContainer,
    q: Optional[str] = None,
    shared: bool = False,
    limit: Annotated[int, Query(ge=0)] = 0,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Listes de l'utilisateur, ou listes partagées avec lui (shared=true)."""
    service = _service(container, kind)
    if shared:
        return envelope(service.get_shared_with(user_id))
    if q:
        options = QueryOptions(query=q, limit=limit, offset=offset)
        return envelope(service.search(user_id, options))
    return envelope(service.get_by_user(user_id))


@router.post("/{kind}", status_code=201)
async def create_list(kind: str, body: ListBody, user_id: UserId, container: AppContainer):
    created = _service(container, kind).create(
        user_id,
        body.name,
        description=body.description,
        is_public=body.is_public,
        item_ids=body.item_ids,
    )
    return envelope(created, "list created")


@router.get("/{kind}/{list_id}")
async def get_list(kind: str, list_id: int, user_id: UserId, container: AppContainer):
    return envelope(_service(container, kind).get_by_id(list_id, user_id))


@router.put("/{kind}/{list_id}")
async def update_list(
    kind: str, list_id: int, body: ListUpdateBody, user_id: UserId, container: AppContainer
):
    updated = _service(container, kind).update(
        list_id,
        user_id,
        name=body.name,
        description=body.description,
        is_public=body.is_public,
    )
    return envelope(updated, "list updated")


@router.delete("/{kind}/{list_id}")
async def delete_list(kind: str, list_id: int, user_id: UserId, container: AppContainer):
    _service(container, kind).delete(list_id, user_id)
    return envelope(message="list deleted")


@router.get("/{kind}/{list_id}/items")
async def get_list_items(kind: str, list_id: int, user_id: UserId, container: AppContainer):
    return envelope(_service(container, kind).get_items(list_id, user_id))


@router.post("/{kind}/{list_id}/items")
async def add_list_item(
    kind: str, list_id: int, body: ListItemBody, user_id: UserId, container: AppContainer
):
    updated = _service(container, kind).add_item(
        list_id, user_id, body.item_id, position=body.position
    )
    return envelope(updated, "item added")


@router.delete("/{kind}/{list_id}/items/{item_id}")
async def remove_list_item(
    kind: str, list_id: int, item_id: int, user_id: UserId, container: AppContainer
):
    updated = _service(container, kind).remove_item(list_id, user_id, item_id)
    return envelope(updated, "item removed")


@router.post("/{kind}/{list_id}/reorder")
async def reorder_list(
    kind: str, list_id: int, body: ReorderBody, user_id: UserId, container: AppContainer
):
    updated = _service(container, kind).reorder_items(list_id, user_id, body.item_ids)
    return envelope(updated, "list reordered")


@router.post("/{kind}/{list_id}/share")
async def share_list(
    kind: str, list_id: int, body: ShareBody, user_id: UserId, container: AppContainer
):
    updated = _service(container, kind).share_with_user(
        list_id, user_id, body.user_id, body.permission
    )
    return envelope(updated, "list shared")


@router.get("/{kind}/{list_id}/collaborators")
async def list_collaborators(
    kind: str, list_id: int, user_id: UserId, container: AppContainer
):
    return envelope(_service(container, kind).get_collaborators(list_id, user_id))


@router.delete("/{kind}/{list_id}/collaborators/{collaborator_id}")
async def remove_collaborator(
    kind: str, list_id: int, collaborator_id: int, user_id: UserId, container: AppContainer
):
    updated = _service(container, kind).remove_collaborator(list_id, user_id, collaborator_id)
    return envelope(updated, "collaborator removed")


@router.get("/{kind}/{list_id}/sync")
async def sync_status(kind: str, list_id: int, user_id: UserId, container: AppContainer):
    return envelope(_service(container, kind).get_sync_status(list_id, user_id))


@router.post("/{kind}/{list_id}/sync")
async def sync_list(
    kind: str, list_id: int, body: SyncBody, user_id: UserId, container: AppContainer
):
    list_service = _service(container, kind)
    sync_service = container.list_sync_service(list_service=list_service)
    states = await sync_service.sync(user_id, list_id, body.client_ids)
    return envelope(states, "list synchronized")
