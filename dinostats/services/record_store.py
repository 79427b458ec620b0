"""Persist and reload a record set as one JSON object keyed by creature name.

Shape on disk::

    {"Rex": {"name": "Rex", "url": "...", "stats": {"Core": {"Speed": "5,6,7"}}}}

Each save replaces the file wholesale; nothing is merged with what was there.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Optional

from pydantic import ValidationError

from dinostats.errors import StoreFormatError, StoreIOError
from dinostats.models.dino import DinoMap, DinoMapAdapter

logger = logging.getLogger(__name__)


def dump_records(dinos: DinoMap, *, indent: Optional[int] = None) -> str:
    payload = {name: dino.model_dump() for name, dino in dinos.items()}
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def save(dinos: DinoMap, path: str) -> None:
    text = dump_records(dinos)
    parent = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        os.makedirs(parent, exist_ok=True)
        # the target is only ever replaced whole
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", dir=parent, suffix=".tmp", delete=False) as f:
            tmp_path = f.name
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise StoreIOError(path, exc.strerror or str(exc)) from exc
    logger.info("Saved %d creatures to %s", len(dinos), path)


def load(path: str) -> DinoMap:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        raise StoreFormatError(path, "not UTF-8 text") from exc
    except OSError as exc:
        raise StoreIOError(path, exc.strerror or str(exc)) from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreFormatError(path, f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise StoreFormatError(path, f"expected a JSON object, got {type(payload).__name__}")

    try:
        dinos = DinoMapAdapter.validate_python(payload)
    except ValidationError as exc:
        raise StoreFormatError(path, f"{exc.error_count()} schema error(s): {exc.errors()[0]['msg']}") from exc
    logger.debug("Loaded %d creatures from %s", len(dinos), path)
    return dinos
