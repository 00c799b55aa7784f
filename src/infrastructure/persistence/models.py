"""
Modeles SQLModel pour la base de donnees Suasor.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- clients: Configurations des fournisseurs par utilisateur
- media_items: Elements media normalises et listes utilisateur
- media_item_sync_clients: Identifiant d'un element chez chaque client
- media_item_external_ids: Identifiants externes (tmdb, imdb...) indexes
- user_media_item_data: Favoris, notes, historique et reprise de lecture

La charge utile d'un element (Movie, Playlist...) est stockee en JSON dans
media_items.data_json ; les champs utilises pour filtrer et trier sont
dupliques en colonnes.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from sqlmodel import Field, Index, SQLModel, UniqueConstraint


class ClientModel(SQLModel, table=True):
    """Configuration d'un client fournisseur."""

    __tablename__ = "clients"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(default=0, index=True)
    name: str
    client_type: str = Field(index=True)
    category: str = Field(index=True)
    base_url: str = ""
    api_key: str | None = None
    username: str | None = None
    password: str | None = None
    user_identifier: str | None = None
    ssl: bool = True
    enabled: bool = Field(default=True, index=True)
    created_at: datetime | None = Field(default_factory=datetime.utcnow)
    updated_at: datetime | None = Field(default_factory=datetime.utcnow)


class MediaItemModel(SQLModel, table=True):
    """
    Element media (catalogue ou liste utilisateur).

    version sert au compare-and-swap des listes.
    """

    __tablename__ = "media_items"
    __table_args__ = (Index("ix_media_items_type_owner", "type", "owner_id"),)

    id: int | None = Field(default=None, primary_key=True)
    uuid: str = Field(unique=True, index=True)
    type: str = Field(index=True)
    title: str = Field(default="", index=True)
    owner_id: int = Field(default=0, index=True)
    release_year: int | None = Field(default=None, index=True)
    release_date: datetime | None = None
    rating: float | None = None
    popularity: float | None = None
    added_at: datetime | None = None
    genres_json: str | None = None  # JSON: ["Action", "Drame"]
    data_json: str = "{}"
    version: int = 0
    created_at: datetime | None = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime | None = Field(default_factory=datetime.utcnow)

    @property
    def genres(self) -> list[str]:
        if self.genres_json:
            return json.loads(self.genres_json)
        return []


class MediaItemSyncClientModel(SQLModel, table=True):
    """Identifiant d'un element chez un client (au plus un par client)."""

    __tablename__ = "media_item_sync_clients"
    __table_args__ = (
        UniqueConstraint("media_item_id", "client_id", name="uq_sync_client_item"),
        Index("ix_sync_client_lookup", "client_id", "item_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    media_item_id: int = Field(foreign_key="media_items.id", index=True)
    client_id: int
    client_type: str
    item_id: str
    last_synced: Optional[datetime] = None


class MediaItemExternalIdModel(SQLModel, table=True):
    """Identifiant externe d'un element (tmdb, imdb, tvdb, musicbrainz)."""

    __tablename__ = "media_item_external_ids"
    __table_args__ = (
        UniqueConstraint("media_item_id", "source", name="uq_external_id_source"),
        Index("ix_external_id_lookup", "source", "external_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    media_item_id: int = Field(foreign_key="media_items.id", index=True)
    source: str
    external_id: str


class UserMediaItemDataModel(SQLModel, table=True):
    """Donnees d'un utilisateur pour un element media."""

    __tablename__ = "user_media_item_data"
    __table_args__ = (
        UniqueConstraint("user_id", "media_item_id", name="uq_user_media_item"),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    media_item_id: int = Field(index=True)
    media_type: str
    play_count: int = 0
    position_seconds: int = 0
    duration_seconds: int = 0
    played_percentage: float = 0.0
    completed: bool = False
    is_favorite: bool = Field(default=False, index=True)
    is_disliked: bool = False
    rating: float | None = None
    watchlist: bool = False
    played_at: datetime | None = None
    last_played_at: datetime | None = Field(default=None, index=True)
    created_at: datetime | None = Field(default_factory=datetime.utcnow)
    updated_at: datetime | None = Field(default_factory=datetime.utcnow)
