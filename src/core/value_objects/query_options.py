"""
Options de requete communes a tous les fournisseurs.

QueryOptions est un objet valeur immutable : les methodes with_* retournent
une nouvelle instance. Chaque adaptateur traduit les filtres qu'il sait
appliquer cote serveur et ignore les autres ; l'agregation applique
ensuite tri et pagination sur le resultat fusionne.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Optional


class SortField(str, Enum):
    """Champ de tri."""

    ADDED_AT = "added_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    RATING = "rating"
    POPULARITY = "popularity"
    TITLE = "title"
    RELEASE_DATE = "release_date"


class SortOrder(str, Enum):
    """Sens du tri."""

    ASC = "asc"
    DESC = "desc"


# Champs dont la valeur par defaut signifie "pas de filtre"
_NON_FILTER_FIELDS = {"sort", "sort_order", "limit", "offset"}


@dataclass(frozen=True)
class QueryOptions:
    """
    Filtres, tri et pagination d'une requete media.

    Attributs :
        query : Recherche textuelle
        genre, year, actor, director, creator, studio : Filtres de contenu
        min_rating, max_rating : Bornes de note (echelle 0-10)
        sort, sort_order : Tri applique au resultat fusionne
        limit, offset : Pagination (limit=0 signifie sans limite)
        favorites : Uniquement les favoris du fournisseur
        recently_added : Uniquement les ajouts recents
        external_source_id : ID externe recherche (ex : tmdb id)
        owner_id, client_id : Restriction par proprietaire ou client
        item_ids : Restriction a une liste d'IDs
    """

    query: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[int] = None
    actor: Optional[str] = None
    director: Optional[str] = None
    creator: Optional[str] = None
    studio: Optional[str] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None
    sort: SortField = SortField.ADDED_AT
    sort_order: SortOrder = SortOrder.DESC
    limit: int = 0
    offset: int = 0
    favorites: bool = False
    recently_added: bool = False
    external_source_id: Optional[str] = None
    owner_id: Optional[int] = None
    client_id: Optional[int] = None
    item_ids: tuple[Any, ...] = field(default_factory=tuple)

    def has_filter(self, name: str) -> bool:
        """Indique si le filtre nomme est renseigne."""
        if name in _NON_FILTER_FIELDS:
            return False
        value = getattr(self, name)
        if isinstance(value, bool):
            return value
        if isinstance(value, (tuple, list, str)):
            return len(value) > 0
        return value is not None

    @property
    def active_filters(self) -> dict[str, Any]:
        """Filtres renseignes, par nom."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if self.has_filter(f.name)
        }

    @property
    def descending(self) -> bool:
        return self.sort_order == SortOrder.DESC

    def with_query(self, query: str) -> "QueryOptions":
        return replace(self, query=query)

    def with_genre(self, genre: str) -> "QueryOptions":
        return replace(self, genre=genre)

    def with_year(self, year: int) -> "QueryOptions":
        return replace(self, year=year)

    def with_actor(self, actor: str) -> "QueryOptions":
        return replace(self, actor=actor)

    def with_director(self, director: str) -> "QueryOptions":
        return replace(self, director=director)

    def with_creator(self, creator: str) -> "QueryOptions":
        return replace(self, creator=creator)

    def with_studio(self, studio: str) -> "QueryOptions":
        return replace(self, studio=studio)

    def with_rating_range(
        self, min_rating: Optional[float] = None, max_rating: Optional[float] = None
    ) -> "QueryOptions":
        return replace(self, min_rating=min_rating, max_rating=max_rating)

    def with_sort(
        self, sort: SortField, sort_order: SortOrder = SortOrder.DESC
    ) -> "QueryOptions":
        return replace(self, sort=SortField(sort), sort_order=SortOrder(sort_order))

    def with_limit(self, limit: int, offset: int = 0) -> "QueryOptions":
        return replace(self, limit=max(limit, 0), offset=max(offset, 0))

    def with_favorites(self, favorites: bool = True) -> "QueryOptions":
        return replace(self, favorites=favorites)

    def with_recently_added(self, recently_added: bool = True) -> "QueryOptions":
        return replace(self, recently_added=recently_added)

    def with_external_source_id(self, external_id: str) -> "QueryOptions":
        return replace(self, external_source_id=external_id)

    def with_item_ids(self, item_ids) -> "QueryOptions":
        return replace(self, item_ids=tuple(item_ids))

    def without_pagination(self) -> "QueryOptions":
        """Copie sans limit/offset, utilisee pour interroger chaque fournisseur."""
        return replace(self, limit=0, offset=0)
