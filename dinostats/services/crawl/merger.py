from __future__ import annotations

import threading
from typing import Dict, Iterable

from dinostats.models.dino import Dino, DinoMap
from .line_parser import ParsedLine


def ensure_dino(store: DinoMap, name: str, url: str = "") -> Dino:
    """Return the record for `name`, creating it if absent.

    An existing record only picks up `url` when it has none yet.
    """
    dino = store.get(name)
    if dino is None:
        dino = Dino(name=name, url=url or "", stats={})
        store[name] = dino
    elif url and not dino.url:
        dino.url = url
    return dino


def merge_stat(store: DinoMap, name: str, url: str, category: str, stat_name: str, value: str) -> None:
    """Upsert one observation; the last write for a category/stat pair wins."""
    dino = ensure_dino(store, name, url)
    dino.stats.setdefault(category, {})[stat_name] = value


class RecordMerger:
    """Owns the record set built during one crawl.

    All writes go through a lock so the merger can be shared by whatever
    produces observations; `snapshot()` hands back a copy the caller owns.
    """

    def __init__(self) -> None:
        self._store: DinoMap = {}
        self._lock = threading.Lock()

    def merge(self, name: str, url: str, category: str, stat_name: str, value: str) -> None:
        with self._lock:
            merge_stat(self._store, name, url, category, stat_name, value)

    def merge_lines(self, name: str, url: str, lines: Iterable[ParsedLine]) -> None:
        with self._lock:
            ensure_dino(self._store, name, url)
            for line in lines:
                merge_stat(self._store, name, url, line.category, line.stat_name, line.value)

    def touch(self, name: str, url: str = "") -> None:
        with self._lock:
            ensure_dino(self._store, name, url)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def snapshot(self) -> DinoMap:
        with self._lock:
            return {name: dino.model_copy(deep=True) for name, dino in self._store.items()}


def stat_count(store: Dict[str, Dino]) -> int:
    return sum(len(stats) for dino in store.values() for stats in dino.stats.values())
