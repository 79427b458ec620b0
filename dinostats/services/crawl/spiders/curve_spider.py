from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

import httpx
from selectolax.parser import HTMLParser

from dinostats.config import CrawlSettings, SourceConfig
from dinostats.errors import FetchError, StatLineError
from dinostats.models.dino import DinoMap
from ..base import Spider, node_text
from ..line_parser import LineParseFailure, ParsedLine, parse_stat_line
from ..merger import RecordMerger, stat_count

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailRequest:
    """Identity of one detail page, fixed when the index is read."""
    name: str
    url: str


@dataclass
class DetailResult:
    request: DetailRequest
    lines: List[ParsedLine] = field(default_factory=list)
    error: Optional[StatLineError] = None
    fetched: bool = True


class CurveOverrideSpider(Spider):
    """Two-phase crawler for the curve-override guide.

    Phase 1 reads the index page and collects one DetailRequest per creature
    link. Phase 2 fetches every detail page concurrently and parses its stat
    lines. The first malformed line anywhere fails the whole crawl: no new
    detail fetches start, the ones already in flight are awaited, and the
    error is raised instead of returning partial data. Line elements holding
    only whitespace are not stat lines and are skipped rather than failing.

    Selectors (CSS):
      - anchor_sel: creature links on the index page
      - line_sel: stat lines on a detail page
    """

    name = "curve_overrides"

    def __init__(
        self,
        source: SourceConfig,
        *,
        settings: Optional[CrawlSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        anchor_sel: str = "main h3 a",
        line_sel: str = "main span.line",
    ) -> None:
        super().__init__(source, settings=settings, transport=transport)
        self.anchor_sel = anchor_sel
        self.line_sel = line_sel

    # --- Public API ---
    def fetch(self) -> DinoMap:
        return asyncio.run(self.crawl())

    async def crawl(self) -> DinoMap:
        logger.info("Crawling curve overrides from %s", self.source.source_url)
        async with self._client() as client:
            index = await self._get(client, self.source.source_url)
            requests = self.parse_index(index.text, base_url=str(index.url))
            logger.info("Found %d creature pages", len(requests))
            merger = await self._crawl_details(client, requests)

        dinos = merger.snapshot()
        logger.info("Collected %d stats for %d creatures", stat_count(dinos), len(dinos))
        return dinos

    def parse_index(self, html: str, *, base_url: str) -> List[DetailRequest]:
        doc = HTMLParser(html)
        seen = set()
        out: List[DetailRequest] = []
        for a in doc.css(self.anchor_sel):
            name = node_text(a)
            href = (a.attributes.get("href") or "").strip()
            if not name or not href:
                continue
            url = urljoin(base_url, href)
            if url in seen:
                continue
            seen.add(url)
            out.append(DetailRequest(name=name, url=url))
        return out

    def parse_detail(self, html: str, request: DetailRequest) -> DetailResult:
        doc = HTMLParser(html)
        result = DetailResult(request=request)
        for node in doc.css(self.line_sel):
            text = node.text()
            if not text.strip():
                continue
            parsed = parse_stat_line(text)
            if isinstance(parsed, LineParseFailure):
                result.error = StatLineError(parsed.kind, parsed.line, dino=request.name)
                break
            result.lines.append(parsed)
        return result

    # --- Internals ---
    async def _crawl_details(self, client: httpx.AsyncClient, requests: List[DetailRequest]) -> RecordMerger:
        merger = RecordMerger()
        abort = asyncio.Event()
        sem = asyncio.Semaphore(self.settings.max_concurrency)
        first_error: Optional[StatLineError] = None

        tasks = [asyncio.create_task(self._fetch_detail(client, req, sem, abort)) for req in requests]
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                if result.error is not None:
                    if first_error is None:
                        first_error = result.error
                        logger.error("Aborting crawl: %s", result.error)
                        abort.set()
                    continue
                if first_error is None and result.fetched:
                    merger.merge_lines(result.request.name, result.request.url, result.lines)
        finally:
            # queued requests see the flag and return unfetched; in-flight ones finish
            abort.set()
            await asyncio.gather(*tasks, return_exceptions=True)

        if first_error is not None:
            raise first_error
        return merger

    async def _fetch_detail(
        self,
        client: httpx.AsyncClient,
        request: DetailRequest,
        sem: asyncio.Semaphore,
        abort: asyncio.Event,
    ) -> DetailResult:
        async with sem:
            if abort.is_set():
                return DetailResult(request=request, fetched=False)
            try:
                resp = await self._get(client, request.url)
            except FetchError as exc:
                logger.warning("Skipping %s: %s", request.name, exc)
                return DetailResult(request=request, fetched=False)
            result = self.parse_detail(resp.text, request)
            if result.error is not None:
                # set before the slot is released so no queued fetch starts
                abort.set()
        return result
