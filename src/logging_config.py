"""
Configuration du logging de l'application via loguru.

Deux sorties :
- Console : colorée, préfixée par le client fournisseur concerné (client=3)
  quand le message en porte un, "-" sinon
- Fichier : JSON avec rotation ; le champ extra.client_id permet de filtrer
  les échecs d'un serveur média donné

Les services attachent le client avec logger.bind :
    logger.bind(client_id=provider.client_id).warning("Client ignoré")
"""

import logging
import sys
from pathlib import Path

from loguru import logger

# Bibliothèques HTTP trop bavardes sur le logging standard (une ligne par requête)
_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>client={extra[client_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/suasor.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du fichier de log JSON
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs à conserver
    """
    logger.remove()
    logger.configure(extra={"client_id": "-"})

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    # Fichier : tous les niveaux, y compris les requêtes fournisseurs en DEBUG
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging configuré", log_file=str(log_file), level=log_level)
