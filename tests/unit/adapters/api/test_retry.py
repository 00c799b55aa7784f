"""
Tests unitaires du retry avec backoff exponentiel.

Ces tests verifient:
- RateLimitError capture le code HTTP et le header Retry-After
- with_retry relance sur RateLimitError uniquement
- request_with_retry relance sur 429 et 503, pas sur les autres erreurs
- provider_request convertit les erreurs httpx en erreurs du domaine
"""

import httpx
import pytest
import respx

from src.adapters.api.retry import (
    RateLimitError,
    provider_request,
    request_with_retry,
    with_retry,
)
from src.core.errors import NotFoundError, ProviderError

URL = "https://media.example.com/Items"


class TestRateLimitError:
    """Tests pour l'exception RateLimitError."""

    def test_stores_status_and_retry_after(self) -> None:
        error = RateLimitError(status_code=503, retry_after=60)
        assert error.status_code == 503
        assert error.retry_after == 60
        assert "60" in str(error)

    def test_defaults_to_429_without_retry_after(self) -> None:
        error = RateLimitError()
        assert error.status_code == 429
        assert error.retry_after is None


class TestWithRetryDecorator:
    """Tests pour le decorateur with_retry."""

    @pytest.mark.asyncio
    async def test_retries_on_rate_limit_error(self) -> None:
        """with_retry relance quand RateLimitError est levee."""
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def flaky() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise RateLimitError(retry_after=1)
            return "success"

        assert await flaky() == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_stops_after_max_attempts(self) -> None:
        call_count = 0

        @with_retry(max_attempts=2, max_wait=1)
        async def always_limited() -> str:
            nonlocal call_count
            call_count += 1
            raise RateLimitError()

        with pytest.raises(RateLimitError):
            await always_limited()
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_other_exceptions(self) -> None:
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def broken() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("not a rate limit error")

        with pytest.raises(ValueError):
            await broken()
        assert call_count == 1


class TestRequestWithRetry:
    """Tests pour request_with_retry avec httpx."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_429_then_succeeds(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(
            side_effect=[
                httpx.Response(429, headers={"Retry-After": "1"}),
                httpx.Response(200, json={"status": "ok"}),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, max_attempts=3)

        assert response.json() == {"status": "ok"}
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_503(self, respx_mock: respx.Router) -> None:
        """Un serveur momentanement indisponible est relance."""
        route = respx_mock.get(URL).mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json={})]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, max_attempts=3)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_raises_rate_limit_after_exhaustion(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(
            return_value=httpx.Response(429, headers={"Retry-After": "30"})
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(RateLimitError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=2)

        assert exc_info.value.retry_after == 30
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_errors_are_not_retried(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await request_with_retry(client, "GET", URL)

        assert route.call_count == 1


class TestProviderRequest:
    """Conversion des erreurs HTTP en erreurs du domaine."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_becomes_not_found(self, respx_mock: respx.Router) -> None:
        respx_mock.get(URL).mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as client:
            with pytest.raises(NotFoundError):
                await provider_request(client, "GET", URL, client_type="jellyfin")

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_becomes_provider_error(self, respx_mock: respx.Router) -> None:
        respx_mock.get(URL).mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as client:
            with pytest.raises(ProviderError) as exc_info:
                await provider_request(client, "GET", URL, client_type="plex")

        assert exc_info.value.status_code == 500
        assert exc_info.value.client_type == "plex"
        assert "[plex]" in str(exc_info.value)

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error_becomes_provider_error(self, respx_mock: respx.Router) -> None:
        respx_mock.get(URL).mock(side_effect=httpx.ConnectError("connection refused"))

        async with httpx.AsyncClient() as client:
            with pytest.raises(ProviderError) as exc_info:
                await provider_request(client, "GET", URL, client_type="emby")

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_success_returns_response(self, respx_mock: respx.Router) -> None:
        respx_mock.get(URL).mock(return_value=httpx.Response(200, json={"Items": []}))

        async with httpx.AsyncClient() as client:
            response = await provider_request(client, "GET", URL, client_type="jellyfin")

        assert response.json() == {"Items": []}
