"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe SUASOR_,
et peut optionnellement être fournie via un fichier .env.

La clé API TMDB est optionnelle - les routes de métadonnées sont désactivées si non fournie.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe SUASOR_.
    Exemple : SUASOR_AGGREGATION_MAX_CONCURRENCY=8

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="SUASOR_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///suasor.db")

    # TMDB (OPTIONNEL - métadonnées désactivées si non défini)
    tmdb_api_key: Optional[str] = Field(default=None)
    tmdb_language: str = Field(default="fr-FR")

    # Appels fournisseurs
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    aggregation_timeout_seconds: float = Field(default=20.0, gt=0)
    aggregation_max_concurrency: int = Field(default=4, ge=1)
    cache_dir: Path = Field(default=Path(".cache/api"))

    # Serveur web
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/suasor.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return bool(self.tmdb_api_key)
