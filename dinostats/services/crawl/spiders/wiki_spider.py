from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

import httpx
from selectolax.parser import HTMLParser, Node

from dinostats.config import CrawlSettings, SourceConfig
from dinostats.errors import TableShapeError
from dinostats.models.dino import DinoMap
from ..base import Spider, node_text
from ..merger import RecordMerger, stat_count
from ..tables import TableExtract, merge_table, reshape_rows

logger = logging.getLogger(__name__)

# caption -> [(headers, rows), ...] in document order
TableGroups = Dict[str, List[Tuple[List[str], List[List[str]]]]]


class WikiTableSpider(Spider):
    """Single-page crawler for wiki stat tables.

    Every table with a non-empty <caption> becomes one stat category named
    after the caption. Tables sharing a caption feed the same category.
    Tables without a caption are skipped.
    """

    name = "wiki_tables"

    def __init__(
        self,
        source: SourceConfig,
        *,
        settings: Optional[CrawlSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        table_sel: str = "table",
    ) -> None:
        super().__init__(source, settings=settings, transport=transport)
        self.table_sel = table_sel

    def fetch(self) -> DinoMap:
        return asyncio.run(self.crawl())

    async def crawl(self) -> DinoMap:
        logger.info("Crawling wiki tables from %s", self.source.source_url)
        async with self._client() as client:
            resp = await self._get(client, self.source.source_url)
        dinos = self.parse_html(resp.text)
        logger.info("Collected %d stats for %d creatures", stat_count(dinos), len(dinos))
        return dinos

    def parse_html(self, html: str) -> DinoMap:
        groups = self.group_tables(self.extract_tables(html))
        merger = RecordMerger()
        for title, shapes in groups.items():
            for headers, rows in shapes:
                merge_table(merger, title, headers, rows)
        return merger.snapshot()

    def extract_tables(self, html: str) -> List[TableExtract]:
        doc = HTMLParser(html)
        out: List[TableExtract] = []
        for table in doc.css(self.table_sel):
            caption = table.css_first("caption")
            title = node_text(caption) if caption is not None else ""
            if not title:
                continue
            out.append(TableExtract(title=title, headers=_header_cells(table), cells=_data_cells(table)))
        return out

    @staticmethod
    def group_tables(tables: List[TableExtract]) -> TableGroups:
        groups: TableGroups = {}
        for t in tables:
            try:
                rows = reshape_rows(t.headers, t.cells)
            except TableShapeError as exc:
                logger.warning("Skipping table %r: %s", t.title, exc)
                continue
            groups.setdefault(t.title, []).append((list(t.headers), rows))
        return groups


def _header_cells(table: Node) -> List[str]:
    # header texts come from the first row that carries <th> cells
    for tr in table.css("tr"):
        ths = tr.css("th")
        if ths:
            return [node_text(th) for th in ths]
    return []


def _data_cells(table: Node) -> List[str]:
    return [node_text(td) for td in table.css("td")]
