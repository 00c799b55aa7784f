"""
Module de persistance SQLite pour Suasor.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy) :

- database.py : Engine SQLite, generateur de session, initialisation
- models.py : Modeles SQLModel representant les tables
- payloads.py : Serialisation JSON des charges utiles media
- repositories/ : Implementations des ports repository

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from src.infrastructure.persistence import init_db, get_session

    init_db()
    session = next(get_session())
"""

from src.infrastructure.persistence.database import (
    build_engine,
    get_engine,
    get_session,
    init_db,
)
from src.infrastructure.persistence.models import (
    ClientModel,
    MediaItemExternalIdModel,
    MediaItemModel,
    MediaItemSyncClientModel,
    UserMediaItemDataModel,
)

__all__ = [
    "build_engine",
    "get_engine",
    "get_session",
    "init_db",
    "ClientModel",
    "MediaItemExternalIdModel",
    "MediaItemModel",
    "MediaItemSyncClientModel",
    "UserMediaItemDataModel",
]
