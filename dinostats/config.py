"""Runtime configuration for crawls and record stores.

Configuration via environment variables (a `.env` file at the project root is
read too, without overriding anything already set):

- DINOSTATS_CURVE_URL / DINOSTATS_CURVE_OUTPUT
- DINOSTATS_WIKI_URL / DINOSTATS_WIKI_OUTPUT
- DINOSTATS_TIMEOUT (seconds, default 12)
- DINOSTATS_MAX_CONCURRENCY (detail fetches in flight, default 8)
- DINOSTATS_USER_AGENT
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CURVE = "curve"
WIKI = "wiki"

DEFAULT_CURVE_URL = "https://guides.gsh-servers.com/path-of-titans/guides/curve-overrides/alderons/"
DEFAULT_WIKI_URL = "https://pathoftitans.wiki.gg/wiki/Creature_Stats"
DEFAULT_USER_AGENT = "DinoStats-Crawler/0.1"


@dataclass(frozen=True)
class SourceConfig:
    name: str
    source_url: str
    output_path: str


@dataclass(frozen=True)
class CrawlSettings:
    timeout: float = 12.0
    max_concurrency: int = 8
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent}


def _load_env_from_file(root_dir: Optional[str] = None) -> None:
    """Load KEY=value pairs from a .env file if present.

    Only sets variables that aren't already present in the process environment.
    """
    root = root_dir or os.getcwd()
    env_path = os.path.join(root, ".env")
    if not os.path.isfile(env_path):
        return
    try:
        with open(env_path, "r", encoding="utf-8") as f:
            for line in f:
                s = line.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                key, val = s.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                if key and not os.environ.get(key):
                    os.environ[key] = val
    except OSError as exc:
        logger.warning("Could not read %s: %s", env_path, exc)


def load_sources(root_dir: Optional[str] = None) -> Dict[str, SourceConfig]:
    """Return the configured sources keyed by name ("curve", "wiki")."""
    _load_env_from_file(root_dir)
    return {
        CURVE: SourceConfig(
            name=CURVE,
            source_url=os.getenv("DINOSTATS_CURVE_URL") or DEFAULT_CURVE_URL,
            output_path=os.getenv("DINOSTATS_CURVE_OUTPUT") or os.path.join(".", "dinos.json"),
        ),
        WIKI: SourceConfig(
            name=WIKI,
            source_url=os.getenv("DINOSTATS_WIKI_URL") or DEFAULT_WIKI_URL,
            output_path=os.getenv("DINOSTATS_WIKI_OUTPUT") or os.path.join(".", "dinos_wiki.json"),
        ),
    }


def load_crawl_settings(root_dir: Optional[str] = None) -> CrawlSettings:
    _load_env_from_file(root_dir)
    defaults = CrawlSettings()
    try:
        timeout = float(os.getenv("DINOSTATS_TIMEOUT") or defaults.timeout)
    except ValueError:
        logger.warning("Ignoring invalid DINOSTATS_TIMEOUT=%r", os.getenv("DINOSTATS_TIMEOUT"))
        timeout = defaults.timeout
    try:
        max_concurrency = int(os.getenv("DINOSTATS_MAX_CONCURRENCY") or defaults.max_concurrency)
    except ValueError:
        logger.warning("Ignoring invalid DINOSTATS_MAX_CONCURRENCY=%r", os.getenv("DINOSTATS_MAX_CONCURRENCY"))
        max_concurrency = defaults.max_concurrency
    return CrawlSettings(
        timeout=timeout,
        max_concurrency=max(1, max_concurrency),
        user_agent=os.getenv("DINOSTATS_USER_AGENT") or defaults.user_agent,
    )
