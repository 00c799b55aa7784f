"""
Cache persistant des reponses fournisseurs, avec TTL par usage.

diskcache stocke les payloads JSON bruts ; la conversion en entites est
refaite a chaque lecture, de sorte que le cache reste independant du
client qui l'a rempli.

TTL :
- SEARCH_TTL : 24 heures, resultats de recherche TMDB
- DETAILS_TTL : 7 jours, fiches detaillees
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone au-dessus de diskcache.

    Les operations disque sont deleguees a l'executor par defaut pour
    ne pas bloquer la boucle d'evenements.

    Example:
        cache = APICache(cache_dir=".cache/api")
        data = await cache.get_or_fetch("tmdb:movie:603", cache.DETAILS_TTL, fetch)
    """

    SEARCH_TTL = 24 * 60 * 60
    DETAILS_TTL = 7 * 24 * 60 * 60

    def __init__(self, cache_dir: str | Path = ".cache/api") -> None:
        self._cache = Cache(str(cache_dir))

    async def get(self, key: str) -> Optional[Any]:
        """Valeur stockee, ou None si absente ou expiree."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def get_or_fetch(
        self, key: str, ttl: int, fetch: Callable[[], Awaitable[Any]]
    ) -> Any:
        """
        Lecture cache-first.

        Args:
            key: Cle du cache
            ttl: Duree de vie en secondes si la valeur est recuperee
            fetch: Coroutine appelee en cas d'absence

        Returns:
            La valeur en cache ou celle retournee par fetch (None n'est pas mis en cache)
        """
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await fetch()
        if value is not None:
            await self.set(key, value, ttl)
        return value

    async def delete(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.delete, key)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        self._cache.close()
