"""Translate failures of third-party APIs into HTTP errors for our callers."""
import asyncio
from dataclasses import dataclass

import httpx
from fastapi import HTTPException

_TIMEOUTS = (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)
_BAD_PAYLOAD = (KeyError, TypeError, ValueError)


@dataclass(frozen=True)
class UpstreamErrorMapper:
    """Maps an upstream exception to (status_code, detail).

    One instance per upstream API, e.g.
    ``UpstreamErrorMapper(resource_name="Address", api_name="BlockCypher")``.
    The upstream's 404 stays a 404; its server errors, transport errors and
    unreadable payloads become 502; timeouts become 504.
    """

    resource_name: str = "Resource"
    api_name: str = "API"

    def _missing(self, key: str | None) -> str:
        if key is None:
            return f"{self.resource_name} not found"
        return f"{self.resource_name} '{key}' not found"

    def _timed_out(self, key: str | None) -> str:
        if key is None:
            return f"Request to {self.api_name} timed out"
        return f"Request to {self.api_name} timed out for '{key}'"

    def to_http(self, exc: Exception, key: str | None = None) -> tuple[int, str]:
        """Return (status_code, detail) for ``exc``; ``key`` names the looked-up item."""
        if isinstance(exc, httpx.HTTPStatusError):
            upstream = exc.response.status_code
            if upstream == 404:
                return 404, self._missing(key)
            return (502 if upstream >= 500 else upstream), f"{self.api_name} error"
        if isinstance(exc, _TIMEOUTS):
            return 504, self._timed_out(key)
        if isinstance(exc, httpx.HTTPError):
            return 502, f"{self.api_name} unavailable"
        if isinstance(exc, _BAD_PAYLOAD):
            return 502, f"Unexpected response from {self.api_name}"
        return 500, "Internal server error"

    def raise_http(self, exc: Exception, key: str | None = None) -> None:
        """Raise the HTTPException for ``exc``. Never returns."""
        status_code, detail = self.to_http(exc, key=key)
        raise HTTPException(status_code=status_code, detail=detail) from exc
