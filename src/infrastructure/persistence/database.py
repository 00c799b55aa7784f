"""
Configuration de la base de donnees SQLite pour Suasor.

Ce module fournit :
- Engine SQLite partage entre threads (FastAPI execute les routes sync en threadpool)
- Generateur de session
- Initialisation des tables

La base de donnees est configuree via SUASOR_DATABASE_URL (defaut: sqlite:///suasor.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, event
from sqlmodel import Session, SQLModel, create_engine

# Engine global - initialise lors du premier appel a get_engine()
_engine: Optional[Engine] = None


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_url: str) -> Engine:
    """
    Cree un engine SQLModel pour l'URL donnee.

    Pour un fichier SQLite, le repertoire parent est cree si besoin.
    """
    if db_url.startswith("sqlite:///") and not db_url.startswith("sqlite:///:memory:"):
        Path(db_url.replace("sqlite:///", "")).parent.mkdir(exist_ok=True, parents=True)

    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def get_engine() -> Engine:
    """Retourne l'engine de l'application, cree depuis la configuration au premier appel."""
    global _engine
    if _engine is None:
        from src.config import Settings

        _engine = build_engine(Settings().database_url)
    return _engine


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation :
        session = next(get_session())

    Ou avec context manager :
        with Session(get_engine()) as session:
            ...
    """
    with Session(get_engine()) as session:
        yield session


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Cree les tables si elles n'existent pas.

    Doit etre appelee une fois au demarrage de l'application.
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from src.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())
