"""
Transport HTTP partage et client de metadonnees.

- APICache : Cache persistant avec TTL differencies (recherche 24h, details 7j)
- RateLimitError, with_retry, request_with_retry : Retry avec backoff sur 429/503
- provider_request : Requete avec conversion des erreurs httpx en erreurs du domaine
- TMDBClient : Metadonnees de reference TMDB
"""

from src.adapters.api.cache import APICache
from src.adapters.api.retry import (
    RateLimitError,
    provider_request,
    request_with_retry,
    with_retry,
)

__all__ = [
    "APICache",
    "RateLimitError",
    "provider_request",
    "request_with_retry",
    "with_retry",
]
