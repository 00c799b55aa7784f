"""
Conversion des dates renvoyees par les fournisseurs.

Partage par les serveurs media et TMDB ; ce module ne depend d'aucun
adaptateur pour rester importable depuis les deux packages.
"""

from datetime import datetime, timezone
from typing import Any, Optional


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Convertit une date fournisseur en datetime naive UTC.

    Accepte un timestamp epoch (Plex), une date ISO 8601 avec ou sans
    fraction de seconde (Jellyfin ecrit 7 decimales) ou une date seule.
    """
    if value in (None, ""):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None)
    text = str(value).replace("Z", "+00:00")
    if "." in text:
        head, _, tail = text.partition(".")
        digits = ""
        rest = ""
        for index, char in enumerate(tail):
            if not char.isdigit():
                rest = tail[index:]
                break
            digits += char
        text = f"{head}.{digits[:6]}{rest}" if digits else f"{head}{rest}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
