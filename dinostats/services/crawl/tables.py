"""Reshape captioned wiki tables into per-creature stats.

A table arrives as its caption, its header texts and every data cell in
document order. Rows are rebuilt by chunking the cells by header count; the
first column names the creature and the rest pair up with the headers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from dinostats.errors import TableShapeError
from .merger import RecordMerger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableExtract:
    title: str
    headers: List[str] = field(default_factory=list)
    cells: List[str] = field(default_factory=list)


def reshape_rows(headers: Sequence[str], cells: Sequence[str]) -> List[List[str]]:
    """Chunk `cells` into rows of len(headers).

    A trailing partial chunk is kept as a short row; nothing is padded.
    """
    width = len(headers)
    if width == 0:
        raise TableShapeError("cannot reshape a table without header cells")
    return [list(cells[i:i + width]) for i in range(0, len(cells), width)]


def merge_table(merger: RecordMerger, title: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> int:
    """Merge reshaped rows under category `title`.

    Returns the number of ragged rows (shorter than the header list); their
    missing columns are simply not merged.
    """
    ragged = 0
    for row in rows:
        if not row:
            continue
        name = row[0]
        if len(row) < len(headers):
            ragged += 1
            logger.warning(
                "Table %r: row for %r has %d of %d cells, merging what is there",
                title, name, len(row), len(headers),
            )
        merger.touch(name)
        for header, cell in zip(headers[1:], row[1:]):
            merger.merge(name, "", title, header, cell)
    return ragged
