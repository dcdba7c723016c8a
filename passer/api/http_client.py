"""
Async HTTP client for the secret storage API.

The server only ever sees opaque encrypted bytes. Responses are mapped to
passer exceptions here so no raw transport error reaches the services.
"""

import asyncio
from typing import Any

import httpx
import structlog

from passer.config import PasserConfig
from passer.exceptions import APIError, NetworkError, NotFoundError

logger = structlog.get_logger(__name__)


def redact_id(resource_id: str) -> str:
    """Shorten a resource id for logging so logs cannot be used to fetch it."""
    if len(resource_id) <= 6:
        return "***"
    return f"{resource_id[:6]}..."


class AsyncHttpClient:
    """
    Thin wrapper around ``httpx.AsyncClient`` speaking raw bytes.

    Args:
        config: Base URL, timeout and user agent come from here.
        transport: Replaces the network, used by tests.
    """

    def __init__(
        self,
        config: PasserConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> "AsyncHttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._close()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.api_url,
                    timeout=self._config.timeout,
                    transport=self._transport,
                    follow_redirects=True,
                    headers={"User-Agent": self._config.user_agent},
                )
                logger.debug("HTTP client opened", base_url=self._config.api_url)
        return self._client

    async def _close(self) -> None:
        async with self._client_lock:
            client, self._client = self._client, None
        if client is None:
            logger.debug("Client not open.")
            return
        await client.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        content: bytes | None = None,
        params: dict[str, Any] | None = None,
    ) -> bytes:
        """
        Send a request and return the raw response body.

        Args:
            method: HTTP method (GET, POST).
            endpoint: Path relative to the API base URL.
            content: Raw request body.
            params: Query parameters.

        Raises:
            NotFoundError: If the server answers 404.
            APIError: If the server answers any other non-success status.
            NetworkError: If the request fails at the transport level.
        """
        client = self._client
        if client is None:
            msg = "HTTP client not initialized. Use 'async with' first."
            raise RuntimeError(msg)

        try:
            response = await client.request(method, endpoint, content=content, params=params)
        except httpx.HTTPError as e:
            logger.debug("Transport failure", method=method, error=e.__class__.__name__)
            msg = f"Request failed: {e.__class__.__name__}"
            raise NetworkError(msg, method=method) from e

        if response.is_success:
            return response.content
        raise self._status_error(response.status_code, method)

    @staticmethod
    def _status_error(status: int, method: str) -> APIError:
        # The endpoint may contain a resource id, so only the method is reported.
        match status:
            case httpx.codes.NOT_FOUND:
                return NotFoundError("Resource not found", endpoint=method)
            case _:
                return APIError(f"Request failed (status={status})", code=status, endpoint=method)
