"""
Routes des données utilisateur : lectures, favoris, notes, liste à voir et historique.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from ..deps import AppContainer, UserId, envelope
from ..schemas import DislikeBody, FavoriteBody, PlayBody, RatingBody, WatchlistBody

router = APIRouter(prefix="/user-data", tags=["user data"])


@router.post("/play")
async def record_play(body: PlayBody, user_id: UserId, container: AppContainer):
    data = container.user_data_service().record_play(
        user_id,
        body.media_item_id,
        position_seconds=body.position_seconds,
        duration_seconds=body.duration_seconds,
        completed=body.completed,
    )
    return envelope(data, "play recorded")


@router.get("/history")
async def history(
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1, le=500)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
    days: Optional[int] = Query(default=None, ge=1),
):
    """Historique de lecture ; days restreint aux lectures récentes."""
    service = container.user_data_service()
    if days is not None:
        return envelope(service.get_recent_history(user_id, days=days, limit=limit))
    return envelope(service.get_history(user_id, limit=limit, offset=offset))


@router.delete("/history")
async def clear_history(user_id: UserId, container: AppContainer):
    count = container.user_data_service().clear_user_history(user_id)
    return envelope({"deleted": count}, "history cleared")


@router.get("/continue-watching")
async def continue_watching(
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1, le=500)] = 20,
):
    return envelope(container.user_data_service().get_continue_watching(user_id, limit))


@router.get("/favorites")
async def favorites(
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1, le=500)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    return envelope(container.user_data_service().get_favorites(user_id, limit, offset))


@router.get("/{media_item_id}")
async def get_user_data(media_item_id: int, user_id: UserId, container: AppContainer):
    return envelope(container.user_data_service().get_user_data(user_id, media_item_id))


@router.put("/{media_item_id}/favorite")
async def set_favorite(
    media_item_id: int, body: FavoriteBody, user_id: UserId, container: AppContainer
):
    data = container.user_data_service().toggle_favorite(media_item_id, user_id, body.favorite)
    return envelope(data, "favorite updated")


@router.put("/{media_item_id}/rating")
async def set_rating(
    media_item_id: int, body: RatingBody, user_id: UserId, container: AppContainer
):
    data = container.user_data_service().update_rating(media_item_id, user_id, body.rating)
    return envelope(data, "rating updated")


@router.put("/{media_item_id}/watchlist")
async def set_watchlist(
    media_item_id: int, body: WatchlistBody, user_id: UserId, container: AppContainer
):
    data = container.user_data_service().set_watchlist(media_item_id, user_id, body.watchlist)
    return envelope(data, "watchlist updated")


@router.put("/{media_item_id}/dislike")
async def set_disliked(
    media_item_id: int, body: DislikeBody, user_id: UserId, container: AppContainer
):
    """Marque un élément comme non apprécié ; retire le favori le cas échéant."""
    data = container.user_data_service().set_disliked(media_item_id, user_id, body.disliked)
    return envelope(data, "dislike updated")
