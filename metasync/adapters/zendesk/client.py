"""Zendesk API client.

Implements ZendeskClientPort with httpx, authenticating with an agent
email and API token.
"""

import logging
from typing import Any

import httpx

from metasync.core.ports import ZendeskClientPort

logger = logging.getLogger(__name__)


class ZendeskClient(ZendeskClientPort):
    """httpx-backed Zendesk client."""

    def __init__(
        self,
        subdomain: str,
        email: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            subdomain: Account subdomain (``<subdomain>.zendesk.com``).
            email: Agent email used for token authentication.
            token: API token.
            timeout: Timeout in seconds of each HTTP request.
            transport: Optional httpx transport, mainly for tests.

        Raises:
            ValueError: If subdomain, email or token is empty.
        """
        if not subdomain or not email or not token:
            raise ValueError("Zendesk subdomain, email and token must be provided")
        self.base_url = f"https://{subdomain}.zendesk.com"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(f"{email}/token", token),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ZendeskClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def put(self, url: str, data: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.client.put(url, json=data)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Zendesk PUT {url} failed: {e}")
            raise
        if not response.content:
            return {}
        return response.json()
