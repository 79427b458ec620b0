"""Typed failures raised by the crawl, store and query layers.

Callers that only care about "something went wrong" can catch DinoStatsError;
the CLI does exactly that and turns it into a non-zero exit.
"""

from __future__ import annotations

MALFORMED_LINE = "malformed-line"
MISSING_VALUE_GROUP = "missing-value-group"


class DinoStatsError(Exception):
    pass


class FetchError(DinoStatsError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class StatLineError(DinoStatsError):
    def __init__(self, kind: str, line: str, *, dino: str = "") -> None:
        where = f" ({dino})" if dino else ""
        super().__init__(f"{kind}{where}: {line!r}")
        self.kind = kind
        self.line = line
        self.dino = dino


class TableShapeError(DinoStatsError):
    pass


class StoreIOError(DinoStatsError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot access record store {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreFormatError(DinoStatsError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"record store {path} is not valid: {reason}")
        self.path = path
        self.reason = reason
