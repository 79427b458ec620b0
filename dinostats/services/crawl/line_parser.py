"""Parser for one curve-override line.

A line looks like::

    Core.HealthPoints "Health at each growth stage" (100,150,200,250,300)

The key sits before the first double quote. The value is the content of the
first parenthesised group after it. A dotted key names its category; a bare
key belongs to "Combat".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from dinostats.errors import MALFORMED_LINE, MISSING_VALUE_GROUP

DEFAULT_CATEGORY = "Combat"


@dataclass(frozen=True)
class ParsedLine:
    category: str
    stat_name: str
    value: str


@dataclass(frozen=True)
class LineParseFailure:
    kind: str
    line: str


LineResult = Union[ParsedLine, LineParseFailure]


def _first_group(segment: str) -> Optional[str]:
    """Return the content of the first non-nested, non-empty (...) group."""
    start = -1
    for i, ch in enumerate(segment):
        if ch == "(":
            start = i
        elif ch == ")" and start >= 0:
            if i - start > 1:
                return segment[start + 1:i]
            start = -1
    return None


def _split_key(key: str) -> tuple:
    if "." in key:
        category, _, stat_name = key.partition(".")
        return category.strip(), stat_name.strip()
    return DEFAULT_CATEGORY, key


def parse_stat_line(text: str) -> LineResult:
    parts: List[str] = text.split('"')
    if len(parts) < 2:
        return LineParseFailure(kind=MALFORMED_LINE, line=text)

    value = None
    for segment in parts[1:]:
        value = _first_group(segment)
        if value is not None:
            break
    if value is None:
        return LineParseFailure(kind=MISSING_VALUE_GROUP, line=text)

    category, stat_name = _split_key(parts[0].strip())
    return ParsedLine(category=category, stat_name=stat_name, value=value)
