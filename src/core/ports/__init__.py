"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports fournisseur : Contrats vers les services externes
- IMediaProvider : Serveur média (Plex, Jellyfin, Emby, Subsonic)
- IMetadataProvider : Source de métadonnées (TMDB)

Ports repository : Contrats de persistance des données
- IClientRepository : Configurations client
- IMediaItemRepository : Éléments média et listes
- IUserMediaItemDataRepository : Données utilisateur
"""

from src.core.ports.providers import IMediaProvider, IMetadataProvider
from src.core.ports.repositories import (
    IClientRepository,
    IMediaItemRepository,
    IUserMediaItemDataRepository,
)

__all__ = [
    # Fournisseurs
    "IMediaProvider",
    "IMetadataProvider",
    # Repositories
    "IClientRepository",
    "IMediaItemRepository",
    "IUserMediaItemDataRepository",
]
