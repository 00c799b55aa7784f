"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.client_repository import (
    SQLModelClientRepository,
)
from src.infrastructure.persistence.repositories.media_item_repository import (
    SQLModelMediaItemRepository,
)
from src.infrastructure.persistence.repositories.user_data_repository import (
    SQLModelUserMediaItemDataRepository,
)

__all__ = [
    "SQLModelClientRepository",
    "SQLModelMediaItemRepository",
    "SQLModelUserMediaItemDataRepository",
]
