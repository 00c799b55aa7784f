"""
Routes de consultation des médias agrégés.

Les recherches interrogent tous les clients de l'utilisateur qui
supportent le domaine ; la réponse indique le nombre d'éléments fournis
par chaque client et les clients ignorés suite à une erreur.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from ...core.errors import InvalidArgumentError
from ...core.value_objects.query_options import QueryOptions, SortField, SortOrder
from ...services.aggregation import DOMAINS, AggregateResult, MediaDomain
from ..deps import AppContainer, UserId, envelope

router = APIRouter(tags=["media"])

DEFAULT_LIMIT = 20


def query_options(
    q: Optional[str] = None,
    genre: Optional[str] = None,
    year: Optional[int] = None,
    actor: Optional[str] = None,
    director: Optional[str] = None,
    creator: Optional[str] = None,
    studio: Optional[str] = None,
    min_rating: Optional[float] = None,
    max_rating: Optional[float] = None,
    sort: SortField = SortField.ADDED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    limit: Annotated[int, Query(ge=0, le=500)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> QueryOptions:
    return QueryOptions(
        query=q,
        genre=genre,
        year=year,
        actor=actor,
        director=director,
        creator=creator,
        studio=studio,
        min_rating=min_rating,
        max_rating=max_rating,
        sort=sort,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )


Options = Annotated[QueryOptions, Depends(query_options)]


def domain_for(name: str) -> MediaDomain:
    domain = DOMAINS.get(name)
    if domain is None:
        raise InvalidArgumentError(
            f"unknown media domain {name!r}, expected one of: {', '.join(DOMAINS)}"
        )
    return domain


def aggregate_view(result: AggregateResult) -> dict:
    return {
        "items": result.items,
        "total": result.total,
        "client_counts": result.counts,
        "client_errors": result.errors,
    }


# ----------------------------------------------------------------------
# Films
# ----------------------------------------------------------------------


@router.get("/movies")
async def search_movies(options: Options, user_id: UserId, container: AppContainer):
    result = await container.movie_service().aggregate(user_id, options)
    return envelope(aggregate_view(result))


@router.get("/movies/latest")
async def latest_movies(
    user_id: UserId, container: AppContainer, limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT
):
    return envelope(await container.movie_service().latest_added(user_id, limit))


@router.get("/movies/top-rated")
async def top_rated_movies(
    user_id: UserId, container: AppContainer, limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT
):
    return envelope(await container.movie_service().top_rated(user_id, limit))


@router.get("/movies/popular")
async def popular_movies(
    user_id: UserId, container: AppContainer, limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT
):
    return envelope(await container.movie_service().popular(user_id, limit))


@router.get("/movies/genre/{genre}")
async def movies_by_genre(
    genre: str,
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT,
):
    return envelope(await container.movie_service().by_genre(user_id, genre, limit))


@router.get("/movies/year/{year}")
async def movies_by_year(
    year: int,
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT,
):
    return envelope(await container.movie_service().by_year(user_id, year, limit))


@router.get("/movies/actor/{actor}")
async def movies_by_actor(
    actor: str,
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT,
):
    return envelope(await container.movie_service().by_actor(user_id, actor, limit))


@router.get("/movies/director/{director}")
async def movies_by_director(
    director: str,
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT,
):
    return envelope(await container.movie_service().by_director(user_id, director, limit))


# ----------------------------------------------------------------------
# Séries
# ----------------------------------------------------------------------


@router.get("/series")
async def search_series(options: Options, user_id: UserId, container: AppContainer):
    result = await container.series_service().aggregate(user_id, options)
    return envelope(aggregate_view(result))


@router.get("/series/latest")
async def latest_series(
    user_id: UserId, container: AppContainer, limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT
):
    return envelope(await container.series_service().latest_added(user_id, limit))


@router.get("/series/top-rated")
async def top_rated_series(
    user_id: UserId, container: AppContainer, limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT
):
    return envelope(await container.series_service().top_rated(user_id, limit))


@router.get("/series/genre/{genre}")
async def series_by_genre(
    genre: str,
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_LIMIT,
):
    return envelope(await container.series_service().by_genre(user_id, genre, limit))


# ----------------------------------------------------------------------
# Musique
# ----------------------------------------------------------------------


@router.get("/music/tracks")
async def search_tracks(options: Options, user_id: UserId, container: AppContainer):
    return envelope(await container.music_service().search_tracks(user_id, options))


@router.get("/music/albums")
async def search_albums(options: Options, user_id: UserId, container: AppContainer):
    return envelope(await container.music_service().search_albums(user_id, options))


@router.get("/music/artists")
async def search_artists(options: Options, user_id: UserId, container: AppContainer):
    return envelope(await container.music_service().search_artists(user_id, options))


# ----------------------------------------------------------------------
# Accès direct à un client
# ----------------------------------------------------------------------

# Déclarées avant /clients/media/{client_id}/{domain} qui capturerait "history"


@router.get("/clients/media/{client_id}/history")
async def client_play_history(
    client_id: int,
    user_id: UserId,
    container: AppContainer,
    limit: Annotated[int, Query(ge=0, le=500)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Historique de lecture d'un client, plus récent d'abord."""
    options = QueryOptions(limit=limit, offset=offset)
    items = await container.aggregation_service().get_play_history(user_id, client_id, options)
    return envelope(items)


@router.get("/clients/media/{client_id}/series/{series_id}/seasons")
async def series_seasons(
    client_id: int, series_id: str, user_id: UserId, container: AppContainer
):
    seasons = await container.series_service().get_seasons(user_id, client_id, series_id)
    return envelope(seasons)


@router.get("/clients/media/{client_id}/series/{series_id}/seasons/{season_number}/episodes")
async def season_episodes(
    client_id: int,
    series_id: str,
    season_number: int,
    user_id: UserId,
    container: AppContainer,
):
    episodes = await container.series_service().get_episodes(
        user_id, client_id, series_id, season_number
    )
    return envelope(episodes)


@router.get("/clients/media/{client_id}/{domain}")
async def client_items(
    client_id: int, domain: str, options: Options, user_id: UserId, container: AppContainer
):
    """Éléments d'un domaine sur un seul client."""
    items = await container.aggregation_service().get_client_items(
        user_id, domain_for(domain), client_id, options
    )
    return envelope(items)


@router.get("/clients/media/{client_id}/{domain}/{external_id}")
async def client_item(
    client_id: int, domain: str, external_id: str, user_id: UserId, container: AppContainer
):
    """Un élément lu sur un client par son identifiant fournisseur."""
    item = await container.aggregation_service().get_by_id(
        user_id, domain_for(domain), client_id, external_id
    )
    return envelope(item)
