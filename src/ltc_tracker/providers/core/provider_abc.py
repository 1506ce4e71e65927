"""Abstract base class for upstream HTTP providers."""
from abc import ABC

import httpx


class HTTPProviderABC(ABC):
    """Base for providers backed by one shared httpx.AsyncClient.

    Pass ``client`` to reuse an existing client (tests inject one built on
    httpx.MockTransport); otherwise the provider creates and owns its own.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HTTPProviderABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
