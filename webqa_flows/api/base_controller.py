import logging
from typing import Any, Optional

import httpx

from webqa_flows.api.token_manager import TokenManager
from webqa_flows.config import ApiSettings


class BaseController:
    """Authenticated JSON requests against the order API.

    Every request acquires a fresh bearer token through ``TokenManager``.
    """

    def __init__(self, client: httpx.AsyncClient, token_manager: TokenManager, settings: ApiSettings):
        self.client = client
        self.token_manager = token_manager
        self.settings = settings

    async def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        headers.update(await self.token_manager.authorization_headers(self.settings.credentials))
        return headers

    async def post(self, url: str, payload: Any, timeout: Optional[float] = None) -> httpx.Response:
        headers = await self._headers()
        logging.debug(f"POST {url}")
        if timeout is None:
            return await self.client.post(url, json=payload, headers=headers)
        return await self.client.post(url, json=payload, headers=headers, timeout=timeout)

    async def get(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        headers = await self._headers()
        logging.debug(f"GET {url}")
        if timeout is None:
            return await self.client.get(url, headers=headers)
        return await self.client.get(url, headers=headers, timeout=timeout)
