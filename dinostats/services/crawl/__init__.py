"""Crawling subsystem for creature stats.

Structure:
- base.py: spider contract and shared HTTP fetch
- line_parser.py: one curve-override line -> (category, stat, value)
- tables.py: captioned wiki tables -> creature rows -> stats
- merger.py: accretes observations into one record per creature
- spiders/: one crawler per source (curve overrides, wiki tables)
- runner.py: CLI entrypoint (`find`, `scrape`)

Fetching uses httpx; HTML is read with selectolax.
"""

__all__ = [
    "base",
    "line_parser",
    "merger",
    "tables",
]
