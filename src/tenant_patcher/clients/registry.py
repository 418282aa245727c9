"""App registry and bundle download client."""

from __future__ import annotations

import json
import logging

import httpx

from tenant_patcher.errors import UpstreamError
from tenant_patcher.models import AppLocation

logger = logging.getLogger(__name__)


class RegistryClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, url: str, **kwargs: object) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(url, **kwargs)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamError(f"GET {url} failed: {exc}") from exc
        return response

    async def resolve_app(self, name: str) -> AppLocation:
        response = await self._get(f"{self.base_url}/app", params={"name": name})
        payload = response.json()
        if not isinstance(payload, dict):
            raise UpstreamError("registry response is not an object", retryable=False)
        download_url = payload.get("downloadUrl")
        config_url = payload.get("appConfigDownloadUrl")
        if not isinstance(download_url, str) or not isinstance(config_url, str):
            raise UpstreamError(f"registry has no download urls for {name!r}", retryable=False)
        logger.debug("Resolved app %s to %s", name, download_url)
        return AppLocation(download_url=download_url, app_config_download_url=config_url)

    async def download_bundle(self, url: str) -> bytes:
        response = await self._get(url)
        return response.content

    async def download_config(self, url: str) -> str:
        """Fetch the app config module text.

        The registry may serve the module as a JSON string; anything that is
        not a JSON string is returned as the raw body text.
        """
        response = await self._get(url, headers={"Accept": "application/json"})
        try:
            payload = response.json()
        except json.JSONDecodeError:
            return response.text
        if isinstance(payload, str):
            return payload
        return response.text
