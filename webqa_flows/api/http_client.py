from typing import Dict, Optional

import httpx

from webqa_flows.config import ApiSettings


def build_async_client(
    settings: Optional[ApiSettings] = None,
    *,
    extra_headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient`` used by TokenManager and the controllers.

    Per-request timeouts (e.g. the token exchange) override the default set here.
    """
    settings = settings or ApiSettings()
    headers = {"Accept": "application/json"}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout),
        headers=headers,
        transport=transport,
    )
