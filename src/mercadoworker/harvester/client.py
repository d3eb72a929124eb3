"""Mercado Libre REST API client.

Thin async wrapper over httpx: one GET per call, JSON body out, every
transport, status or decode failure surfaced as FetchError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import DEFAULT_API_HOST
from ..errors import FetchError

logger = logging.getLogger(__name__)


class MercadoLibreClient:
    """Async client for the public Mercado Libre endpoints used by the import."""

    def __init__(
        self,
        api_host: str = DEFAULT_API_HOST,
        timeout: Optional[float] = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_host = api_host.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.api_host,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )

    async def get_json(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """GET an endpoint and return its parsed JSON body."""
        endpoint = f"{self.api_host}{path}"
        logger.debug(f"GET {endpoint} params={params}")
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                endpoint, e.response.reason_phrase, e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(endpoint, str(e) or type(e).__name__) from e

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(endpoint, f"invalid JSON body: {e}") from e

    def search_endpoint(self, site_id: str, nickname: str) -> str:
        """Human-readable seller search URL, used in error reports."""
        return f"{self.api_host}/sites/{site_id}/search?nickname={nickname}"

    async def search(self, site_id: str, nickname: str, offset: int = 0) -> Dict[str, Any]:
        return await self.get_json(
            f"/sites/{site_id}/search",
            params={"nickname": nickname, "offset": offset},
        )

    async def item(self, item_id: str) -> Dict[str, Any]:
        return await self.get_json(f"/items/{item_id}")

    async def description(self, item_id: str) -> Dict[str, Any]:
        return await self.get_json(f"/items/{item_id}/description")

    async def category(self, category_id: str) -> Dict[str, Any]:
        return await self.get_json(f"/categories/{category_id}")

    async def picture(self, picture_id: str) -> Dict[str, Any]:
        return await self.get_json(f"/pictures/{picture_id}")

    async def user(self, user_id: Any) -> Dict[str, Any]:
        return await self.get_json(f"/users/{user_id}")

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
