"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Transport HTTP partagé (retry, cache) et client TMDB
- media/ : Serveurs média (Jellyfin, Emby, Plex, Subsonic) et fabrique

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""
