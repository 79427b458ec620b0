from __future__ import annotations

import logging
from typing import Optional

import httpx

from dinostats.config import CrawlSettings, SourceConfig
from dinostats.errors import FetchError
from dinostats.models.dino import DinoMap

logger = logging.getLogger(__name__)


class Spider:
    """Minimal spider contract.

    Subclasses implement fetch() to crawl their source and return a fresh
    record set. A `transport` can be injected (e.g. httpx.MockTransport) to
    run a crawl without touching the network.
    """

    name: str = "base"

    def __init__(
        self,
        source: SourceConfig,
        *,
        settings: Optional[CrawlSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.source = source
        self.settings = settings or CrawlSettings()
        self.transport = transport

    def fetch(self) -> DinoMap:
        raise NotImplementedError

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.timeout,
            headers=self.settings.headers,
            follow_redirects=True,
            transport=self.transport,
        )

    @staticmethod
    async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        logger.debug("GET %s -> %d (%d bytes)", url, resp.status_code, len(resp.content))
        return resp


def node_text(node) -> str:
    """Text of `node` and its descendants with whitespace runs collapsed to one space."""
    return " ".join(node.text().split())
