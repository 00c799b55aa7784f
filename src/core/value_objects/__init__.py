"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- QueryOptions : Filtres, tri et pagination d'une requete media
- SortField : Champ de tri
- SortOrder : Sens du tri
"""

from src.core.value_objects.query_options import QueryOptions, SortField, SortOrder

__all__ = [
    "QueryOptions",
    "SortField",
    "SortOrder",
]
