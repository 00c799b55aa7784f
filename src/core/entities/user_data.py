"""
Donnees utilisateur superposees aux elements media.

Favoris, notes, historique et reprise de lecture sont stockes par couple
(utilisateur, element), independamment du fournisseur d'origine.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.core.entities.media import MediaType

# Seuil au-dela duquel un element n'apparait plus dans "reprendre la lecture"
CONTINUE_WATCHING_THRESHOLD = 0.95

MIN_RATING = 0.0
MAX_RATING = 5.0


@dataclass
class UserMediaItemData:
    """
    Etat d'un element media pour un utilisateur.

    Attributs :
        user_id : Utilisateur
        media_item_id : Element media interne
        media_type : Type de l'element (copie pour filtrer sans jointure)
        play_count : Nombre de lectures
        position_seconds : Position de reprise
        duration_seconds : Duree totale connue
        played_percentage : Progression (0.0 a 1.0)
        completed : Lecture terminee
        is_favorite : Marque comme favori
        is_disliked : Marque comme non apprecie (exclusif avec is_favorite)
        rating : Note utilisateur (0 a 5), None si non notee
        watchlist : A voir plus tard
        played_at : Premiere lecture
        last_played_at : Derniere lecture
    """

    user_id: int
    media_item_id: int
    media_type: MediaType = MediaType.MOVIE
    id: Optional[int] = None
    play_count: int = 0
    position_seconds: int = 0
    duration_seconds: int = 0
    played_percentage: float = 0.0
    completed: bool = False
    is_favorite: bool = False
    is_disliked: bool = False
    rating: Optional[float] = None
    watchlist: bool = False
    played_at: Optional[datetime] = None
    last_played_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.media_type = MediaType(self.media_type)

    def record_play(
        self, position_seconds: int, duration_seconds: int, completed: bool
    ) -> None:
        """Enregistre une lecture et met a jour l'etat de reprise."""
        now = datetime.utcnow()
        if self.played_at is None:
            self.played_at = now
        self.last_played_at = now
        self.play_count += 1
        self.position_seconds = max(position_seconds, 0)
        if duration_seconds > 0:
            self.duration_seconds = duration_seconds
        self.completed = completed
        if completed:
            self.played_percentage = 1.0
        elif self.duration_seconds > 0:
            self.played_percentage = min(self.position_seconds / self.duration_seconds, 1.0)
        else:
            self.played_percentage = 0.0

    @property
    def in_progress(self) -> bool:
        """Vrai si l'element doit apparaitre dans la reprise de lecture."""
        return (
            not self.completed
            and 0.0 < self.played_percentage < CONTINUE_WATCHING_THRESHOLD
        )
