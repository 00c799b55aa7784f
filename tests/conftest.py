"""
Fixtures pytest partagees pour les tests Suasor.

Ce module contient les fixtures communes utilisees dans les tests:
- Base SQLite temporaire et session SQLModel
- Settings de test avec chemins temporaires
- Configurations client et elements media types
"""

from datetime import datetime
from pathlib import Path
from typing import Iterator

import pytest
from sqlmodel import Session

from src.config import Settings
from src.core.entities.client import ClientConfig, ClientType
from src.core.entities.media import MediaDetails, MediaItem, Movie, Track
from src.infrastructure.persistence.database import build_engine, init_db


@pytest.fixture
def engine(tmp_path: Path):
    """Engine SQLite sur un fichier temporaire, tables creees."""
    engine = build_engine(f"sqlite:///{tmp_path}/test.db")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    """Session SQLModel isolee par test."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler base, cache et logs.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path}/test.db",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
        tmdb_api_key=None,
    )


@pytest.fixture
def jellyfin_config() -> ClientConfig:
    """Client Jellyfin enregistre pour l'utilisateur 1."""
    return ClientConfig(
        id=1,
        user_id=1,
        name="Salon",
        client_type=ClientType.JELLYFIN,
        base_url="http://jellyfin:8096",
        api_key="jf-token",
        user_identifier="u1",
    )


@pytest.fixture
def subsonic_config() -> ClientConfig:
    """Client Subsonic (musique uniquement) de l'utilisateur 1."""
    return ClientConfig(
        id=2,
        user_id=1,
        name="Navidrome",
        client_type=ClientType.SUBSONIC,
        base_url="http://navidrome:4533",
        username="alice",
        password="secret",
    )


@pytest.fixture
def plex_config() -> ClientConfig:
    """Client Plex de l'utilisateur 1."""
    return ClientConfig(
        id=3,
        user_id=1,
        name="Plex",
        client_type=ClientType.PLEX,
        base_url="http://plex:32400",
        api_key="plex-token",
    )


def make_movie(
    title: str,
    client_id: int = 1,
    external_id: str = "",
    rating: float | None = None,
    added_at: datetime | None = None,
    tmdb_id: str | None = None,
) -> MediaItem[Movie]:
    """Film tel que retourne par un adaptateur (avec son SyncClient)."""
    details = MediaDetails(title=title, rating=rating, added_at=added_at)
    if tmdb_id:
        details.external_ids["tmdb"] = tmdb_id
    item = MediaItem(data=Movie(details=details))
    item.add_sync_client(client_id, "jellyfin", external_id or title.lower())
    return item


def make_track(title: str, client_id: int = 2, external_id: str = "") -> MediaItem[Track]:
    item = MediaItem(data=Track(details=MediaDetails(title=title)))
    item.add_sync_client(client_id, "subsonic", external_id or title.lower())
    return item


@pytest.fixture
def movie_factory():
    """Fabrique de films fournisseur."""
    return make_movie


@pytest.fixture
def track_factory():
    """Fabrique de pistes fournisseur."""
    return make_track
