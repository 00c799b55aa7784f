"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Inclut les repositories SQLModel, la fabrique d'adaptateurs et les services.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.tmdb_client import TMDBClient
from .adapters.media.factory import ProviderFactory
from .config import Settings
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import (
    SQLModelClientRepository,
    SQLModelMediaItemRepository,
    SQLModelUserMediaItemDataRepository,
)
from .services.aggregation import AggregationService
from .services.catalog import CatalogService
from .services.client_resolver import ClientResolver
from .services.clients import ClientConfigService
from .services.list_sync import ListSyncService
from .services.lists import ClientListService, ListService
from .services.media import (
    CollectionService,
    MovieService,
    MusicService,
    PlaylistService,
    SeriesService,
)
from .services.user_data import UserDataService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        movies = container.movie_service()
        playlists = container.list_service(media_type=MediaType.PLAYLIST)
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(lambda: next(get_session()))

    # Repositories - Factory pour nouvelle instance avec session fraiche
    client_repository = providers.Factory(
        SQLModelClientRepository,
        session=session,
    )
    media_item_repository = providers.Factory(
        SQLModelMediaItemRepository,
        session=session,
    )
    user_data_repository = providers.Factory(
        SQLModelUserMediaItemDataRepository,
        session=session,
    )

    # Cache API - Singleton pour partage entre clients
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    # Adaptateurs - Singleton : une instance par client, fermees a l'arret
    provider_factory = providers.Singleton(
        ProviderFactory,
        cache=api_cache,
        timeout=config.provided.http_timeout_seconds,
        tmdb_language=config.provided.tmdb_language,
    )

    # Client TMDB systeme (routes de metadonnees), actif si la cle est definie
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
        cache=api_cache,
        language=config.provided.tmdb_language,
        timeout=config.provided.http_timeout_seconds,
    )

    # Resolution et agregation
    client_resolver = providers.Factory(
        ClientResolver,
        client_repo=client_repository,
        provider_factory=provider_factory,
    )
    aggregation_service = providers.Factory(
        AggregationService,
        resolver=client_resolver,
        max_concurrency=config.provided.aggregation_max_concurrency,
        timeout=config.provided.aggregation_timeout_seconds,
    )

    # Facades par domaine
    movie_service = providers.Factory(MovieService, aggregation=aggregation_service)
    series_service = providers.Factory(SeriesService, aggregation=aggregation_service)
    music_service = providers.Factory(MusicService, aggregation=aggregation_service)
    playlist_service = providers.Factory(PlaylistService, aggregation=aggregation_service)
    collection_service = providers.Factory(CollectionService, aggregation=aggregation_service)

    # Catalogue et donnees utilisateur
    catalog_service = providers.Factory(CatalogService, media_repo=media_item_repository)
    user_data_service = providers.Factory(
        UserDataService,
        user_data_repo=user_data_repository,
        catalog=catalog_service,
    )

    # Listes - Factory : media_type passe a l'appel
    # Utiliser: container.list_service(media_type=MediaType.COLLECTION)
    list_service = providers.Factory(
        ListService,
        media_repo=media_item_repository,
        catalog=catalog_service,
    )
    client_list_service = providers.Factory(
        ClientListService,
        resolver=client_resolver,
        aggregation=aggregation_service,
        catalog=catalog_service,
        list_service=list_service,
    )
    list_sync_service = providers.Factory(
        ListSyncService,
        resolver=client_resolver,
        list_service=list_service,
    )

    # Configuration des clients
    client_config_service = providers.Factory(
        ClientConfigService,
        client_repo=client_repository,
        provider_factory=provider_factory,
    )
