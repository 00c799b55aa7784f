"""
Routes de métadonnées TMDB (recherche, fiches, populaires).

Disponibles uniquement si SUASOR_TMDB_API_KEY est définie.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from ...adapters.api.tmdb_client import TMDBClient
from ...core.errors import NotFoundError, UnsupportedFeatureError
from ..deps import AppContainer, UserId, envelope

router = APIRouter(prefix="/metadata", tags=["metadata"])


def _tmdb(container: AppContainer) -> TMDBClient:
    if not container.config().tmdb_enabled:
        raise UnsupportedFeatureError("TMDB metadata is not configured")
    return container.tmdb_client()


@router.get("/movies")
async def search_movies(
    q: str, user_id: UserId, container: AppContainer, year: Optional[int] = None
):
    return envelope(await _tmdb(container).search_movies(q, year))


@router.get("/movies/popular")
async def popular_movies(
    user_id: UserId, container: AppContainer, page: Annotated[int, Query(ge=1)] = 1
):
    return envelope(await _tmdb(container).get_popular_movies(page))


@router.get("/movies/{movie_id}")
async def get_movie(movie_id: str, user_id: UserId, container: AppContainer):
    movie = await _tmdb(container).get_movie(movie_id)
    if movie is None:
        raise NotFoundError(f"tmdb movie {movie_id} not found")
    return envelope(movie)


@router.get("/series")
async def search_series(
    q: str, user_id: UserId, container: AppContainer, year: Optional[int] = None
):
    return envelope(await _tmdb(container).search_series(q, year))


@router.get("/series/popular")
async def popular_series(
    user_id: UserId, container: AppContainer, page: Annotated[int, Query(ge=1)] = 1
):
    return envelope(await _tmdb(container).get_popular_series(page))


@router.get("/series/{series_id}")
async def get_series(series_id: str, user_id: UserId, container: AppContainer):
    series = await _tmdb(container).get_series(series_id)
    if series is None:
        raise NotFoundError(f"tmdb series {series_id} not found")
    return envelope(series)


@router.get("/collections/{collection_id}")
async def get_collection(collection_id: str, user_id: UserId, container: AppContainer):
    collection = await _tmdb(container).get_collection(collection_id)
    if collection is None:
        raise NotFoundError(f"tmdb collection {collection_id} not found")
    return envelope(collection)
