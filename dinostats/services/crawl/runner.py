from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional

from dinostats.config import CURVE, WIKI, CrawlSettings, SourceConfig, load_crawl_settings, load_sources
from dinostats.errors import DinoStatsError
from dinostats.services import record_store
from dinostats.services.query_service import COMBAT, CORE, MULTIPLIER, find
from .base import Spider
from .spiders.curve_spider import CurveOverrideSpider
from .spiders.wiki_spider import WikiTableSpider

logger = logging.getLogger(__name__)

SPIDERS = {
    CURVE: CurveOverrideSpider,
    WIKI: WikiTableSpider,
}


def build_spider(source: SourceConfig, settings: CrawlSettings) -> Spider:
    return SPIDERS[source.name](source, settings=settings)


def run_scrape(sources: Dict[str, SourceConfig], names: List[str], settings: CrawlSettings) -> int:
    """Crawl each named source and save it to its own output path.

    A failing source does not stop the others; the return code is 1 if any failed.
    """
    failed = 0
    for name in names:
        source = sources[name]
        try:
            dinos = build_spider(source, settings).fetch()
            record_store.save(dinos, source.output_path)
        except DinoStatsError as exc:
            logger.error("Scrape of %s failed: %s", name, exc)
            failed += 1
    return 1 if failed else 0


def run_find(source: SourceConfig, name: str, stat: Optional[str], categories: List[str]) -> str:
    dinos = record_store.load(source.output_path)
    return record_store.dump_records(find(dinos, name, stat, categories), indent=2)


def _selected_categories(args: argparse.Namespace) -> List[str]:
    out = []
    if args.ability:
        out.append(COMBAT)
    if args.core:
        out.append(CORE)
    if args.multiplier:
        out.append(MULTIPLIER)
    return out


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(prog="dinostats", description="Scrape and query creature stats")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    fnd = sub.add_parser("find", help="Show stats for creatures whose name contains NAME")
    fnd.add_argument("name", help="Case-insensitive substring of the creature name")
    fnd.add_argument("stat", nargs="?", help="Case-insensitive substring of '<category>.<stat>'")
    fnd.add_argument("-a", "--ability", action="store_true", help="Only Combat stats")
    fnd.add_argument("-c", "--core", action="store_true", help="Only Core stats")
    fnd.add_argument("-m", "--multiplier", action="store_true", help="Only Multiplier stats")
    fnd.add_argument("--source", choices=[CURVE, WIKI], default=CURVE, help="Which saved record set to query")

    scr = sub.add_parser("scrape", help="Crawl sources and replace their saved record sets")
    scr.add_argument("--source", choices=[CURVE, WIKI, "all"], default="all")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )
    sources = load_sources()

    if args.cmd == "scrape":
        names = [CURVE, WIKI] if args.source == "all" else [args.source]
        print("Scraping...", file=sys.stderr)
        code = run_scrape(sources, names, load_crawl_settings())
        if code == 0:
            print("Scraping complete!", file=sys.stderr)
        return code

    if args.cmd == "find":
        try:
            out = run_find(sources[args.source], args.name, args.stat, _selected_categories(args))
        except DinoStatsError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        print(out)
        return 0

    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
