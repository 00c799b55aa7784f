"""
Retry avec backoff exponentiel pour les appels fournisseurs.

Les reponses 429 (rate limiting) et 503 (serveur temporairement indisponible)
sont relancees avec un delai croissant et du jitter. Les autres erreurs
HTTP sont converties en ProviderError sans nouvelle tentative : les
mutations (ajout a une playlist...) ne sont jamais rejouees.

Usage:
    response = await request_with_retry(client, "GET", "/Items")

    # Conversion des erreurs httpx en erreurs du domaine
    response = await provider_request(client, "GET", url, client_type="plex")
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from src.core.errors import NotFoundError, ProviderError

RETRYABLE_STATUS_CODES = (429, 503)


class RateLimitError(Exception):
    """
    Le fournisseur demande de ralentir (429) ou est momentanement indisponible (503).

    Attributes:
        status_code: Code HTTP recu
        retry_after: Secondes a attendre (header Retry-After), None si absent
    """

    def __init__(self, status_code: int = 429, retry_after: Optional[int] = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(f"HTTP {status_code}, retry after: {retry_after}s")


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """
    Decorateur relancant une coroutine sur RateLimitError.

    Args:
        max_attempts: Nombre maximum de tentatives
        max_wait: Delai maximum entre deux tentatives, en secondes

    Returns:
        Decorateur tenacity a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


def _parse_retry_after(response: httpx.Response) -> Optional[int]:
    header = response.headers.get("Retry-After")
    if header and header.isdigit():
        return int(header)
    return None


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry sur 429/503.

    Args:
        client: Client httpx async
        method: Methode HTTP
        url: URL (absolue ou relative a base_url)
        max_attempts: Nombre maximum de tentatives
        **kwargs: Arguments passes a client.request()

    Returns:
        La reponse en cas de succes

    Raises:
        RateLimitError: Si le fournisseur refuse toujours apres max_attempts
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.debug(f"{method} {url} -> HTTP {response.status_code}, nouvelle tentative")
            raise RateLimitError(response.status_code, _parse_retry_after(response))
        response.raise_for_status()
        return response

    return await _do_request()


async def provider_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    client_type: str,
    max_attempts: int = 5,
    **kwargs,
) -> httpx.Response:
    """
    Variante de request_with_retry qui leve les erreurs du domaine.

    Raises:
        NotFoundError: Si le fournisseur repond 404
        ProviderError: Pour toute autre erreur HTTP ou reseau
    """
    try:
        return await request_with_retry(client, method, url, max_attempts, **kwargs)
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status == 404:
            raise NotFoundError(f"{client_type}: resource not found ({url})") from e
        raise ProviderError(
            f"{method} {url} failed", client_type, status_code=status, original_error=e
        ) from e
    except RateLimitError as e:
        raise ProviderError(
            f"{method} {url} still rate limited after {max_attempts} attempts",
            client_type,
            status_code=e.status_code,
            original_error=e,
        ) from e
    except httpx.HTTPError as e:
        raise ProviderError(
            f"{method} {url} failed: {e}", client_type, original_error=e
        ) from e
