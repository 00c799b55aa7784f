"""
Suasor - Agrégateur de bibliothèques média.

Ce package expose une API unifiée au-dessus de plusieurs serveurs média
(Plex, Jellyfin, Emby, Subsonic) et du fournisseur de métadonnées TMDB,
avec des données utilisateur (favoris, notes, historique, listes)
indépendantes du fournisseur d'origine.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (cas d'utilisation, orchestration)
- adapters/ : Clients HTTP des fournisseurs
- infrastructure/ : Persistance SQLModel
- web/ : API FastAPI
"""
