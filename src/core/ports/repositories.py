"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fournissent les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.core.entities.client import ClientCategory, ClientConfig
from src.core.entities.media import MediaItem, MediaType
from src.core.entities.user_data import UserMediaItemData
from src.core.value_objects.query_options import QueryOptions


class IClientRepository(ABC):
    """
    Interface de stockage des configurations client.
    """

    @abstractmethod
    def get_by_id(self, client_id: int) -> Optional[ClientConfig]:
        """Récupère une configuration par son ID."""
        ...

    @abstractmethod
    def get_by_user_id(self, user_id: int) -> list[ClientConfig]:
        """Liste les configurations d'un utilisateur (ordre de création)."""
        ...

    @abstractmethod
    def get_by_category(
        self, category: ClientCategory, user_id: Optional[int] = None
    ) -> list[ClientConfig]:
        """Liste les configurations d'une catégorie, optionnellement pour un utilisateur."""
        ...

    @abstractmethod
    def create(self, config: ClientConfig) -> ClientConfig:
        """Insère une configuration et retourne l'entité avec son ID."""
        ...

    @abstractmethod
    def update(self, config: ClientConfig) -> ClientConfig:
        """Met à jour une configuration existante."""
        ...

    @abstractmethod
    def delete(self, client_id: int) -> bool:
        """Supprime une configuration. Retourne True si supprimée."""
        ...


class IMediaItemRepository(ABC):
    """
    Interface de stockage des éléments média (catalogue et listes utilisateur).

    Les listes (playlists, collections) sont des MediaItem comme les autres ;
    leur mise à jour passe par un compare-and-swap sur la version.
    """

    @abstractmethod
    def get_by_id(self, item_id: int) -> Optional[MediaItem]:
        """Récupère un élément par son ID interne."""
        ...

    @abstractmethod
    def get_by_ids(self, item_ids: list[int]) -> list[MediaItem]:
        """Récupère plusieurs éléments ; les IDs inconnus sont ignorés."""
        ...

    @abstractmethod
    def search(
        self, options: QueryOptions, media_type: Optional[MediaType] = None
    ) -> list[MediaItem]:
        """Recherche par titre, genre, année, propriétaire, avec tri et pagination."""
        ...

    @abstractmethod
    def get_recent_items(
        self, media_type: Optional[MediaType] = None, days: int = 30, limit: int = 20
    ) -> list[MediaItem]:
        """Éléments créés durant les `days` derniers jours, plus récents d'abord."""
        ...

    @abstractmethod
    def get_by_user_id(
        self, user_id: int, media_type: Optional[MediaType] = None
    ) -> list[MediaItem]:
        """Éléments appartenant à un utilisateur."""
        ...

    @abstractmethod
    def get_by_type(self, media_type: MediaType) -> list[MediaItem]:
        """Tous les éléments d'un type donné."""
        ...

    @abstractmethod
    def get_by_sync_client(self, client_id: int, client_item_id: str) -> Optional[MediaItem]:
        """Retrouve un élément par son identifiant chez un client."""
        ...

    @abstractmethod
    def get_by_external_id(self, source: str, external_id: str) -> Optional[MediaItem]:
        """Retrouve un élément par un identifiant externe (tmdb, imdb...)."""
        ...

    @abstractmethod
    def create(self, item: MediaItem) -> MediaItem:
        """Insère un élément et retourne l'entité avec son ID."""
        ...

    @abstractmethod
    def update(self, item: MediaItem, expected_version: Optional[int] = None) -> MediaItem:
        """
        Met à jour un élément.

        Args :
            item : Élément modifié
            expected_version : Version lue avant modification (listes uniquement).
                Si la version stockée diffère, lève ConflictError.

        Retourne :
            L'élément persisté
        """
        ...

    @abstractmethod
    def delete(self, item_id: int) -> bool:
        """Supprime un élément. Retourne True si supprimé."""
        ...


class IUserMediaItemDataRepository(ABC):
    """
    Interface de stockage des données utilisateur (favoris, notes, historique).
    """

    @abstractmethod
    def get_by_id(self, data_id: int) -> Optional[UserMediaItemData]:
        """Récupère une entrée par son ID."""
        ...

    @abstractmethod
    def get_by_user_and_item(
        self, user_id: int, media_item_id: int
    ) -> Optional[UserMediaItemData]:
        """Récupère l'entrée d'un utilisateur pour un élément."""
        ...

    @abstractmethod
    def save(self, data: UserMediaItemData) -> UserMediaItemData:
        """Insère ou met à jour une entrée (clé user_id + media_item_id)."""
        ...

    @abstractmethod
    def delete(self, data_id: int) -> bool:
        """Supprime une entrée. Retourne True si supprimée."""
        ...

    @abstractmethod
    def list_history(
        self,
        user_id: int,
        limit: int = 20,
        offset: int = 0,
        since: Optional[datetime] = None,
    ) -> list[UserMediaItemData]:
        """Entrées lues au moins une fois, dernière lecture d'abord."""
        ...

    @abstractmethod
    def list_continue_watching(
        self, user_id: int, limit: int = 20
    ) -> list[UserMediaItemData]:
        """Lectures entamées non terminées, dernière lecture d'abord."""
        ...

    @abstractmethod
    def list_favorites(
        self, user_id: int, limit: int = 20, offset: int = 0
    ) -> list[UserMediaItemData]:
        """Favoris de l'utilisateur, plus récents d'abord."""
        ...

    @abstractmethod
    def clear_user(self, user_id: int) -> int:
        """Supprime toutes les entrées d'un utilisateur. Retourne le nombre supprimé."""
        ...
