from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from report_issue.errors import TransportError

logger = logging.getLogger(__name__)


class WebhookTransport:
    """
    POSTs the submission JSON to the webhook.

    No client-side timeout is set beyond httpx defaults. Non-2xx responses raise
    TransportError carrying the status and body.
    """

    def __init__(self, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport

    async def post_json(self, url: str, body: Dict[str, Any], *, allow_insecure: bool = False) -> str:
        async with httpx.AsyncClient(verify=not allow_insecure, transport=self._transport) as client:
            try:
                resp = await client.post(url, json=body, headers={"Content-Type": "application/json"})
            except httpx.HTTPError as exc:
                raise TransportError(f"POST {url} failed: {exc}") from exc
        if resp.is_error:
            raise TransportError(f"POST {url} returned {resp.status_code}", status_code=resp.status_code, body=resp.text)
        logger.debug("Webhook responded %s", resp.status_code)
        return resp.text
