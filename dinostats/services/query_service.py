"""Filters over a loaded record set.

Every filter returns a new record set and leaves its input untouched. `find`
chains them in a fixed order: name, then stat, then category.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from dinostats.models.dino import DinoMap

COMBAT = "Combat"
CORE = "Core"
MULTIPLIER = "Multiplier"
CATEGORIES = (COMBAT, CORE, MULTIPLIER)


def filter_by_name(query: str, dinos: DinoMap) -> DinoMap:
    q = query.lower()
    return {name: dino.model_copy(deep=True) for name, dino in dinos.items() if q in name.lower()}


def filter_by_stat(query: str, dinos: DinoMap) -> DinoMap:
    """Keep only stats whose "<category>.<stat>" contains `query`.

    Creatures left without any matching stat are dropped.
    """
    q = query.lower()
    out: DinoMap = {}
    for name, dino in dinos.items():
        matched: Dict[str, Dict[str, str]] = {}
        for category, stats in dino.stats.items():
            for stat, value in stats.items():
                if q in f"{category}.{stat}".lower():
                    matched.setdefault(category, {})[stat] = value
        if matched:
            out[name] = dino.model_copy(update={"stats": matched})
    return out


def filter_by_category(selected: Iterable[str], dinos: DinoMap) -> DinoMap:
    keep = set(selected or ())
    if not keep:
        return {name: dino.model_copy(deep=True) for name, dino in dinos.items()}
    out: DinoMap = {}
    for name, dino in dinos.items():
        stats = {cat: dict(s) for cat, s in dino.stats.items() if cat in keep}
        out[name] = dino.model_copy(update={"stats": stats})
    return out


def find(
    dinos: DinoMap,
    name: str,
    stat: Optional[str] = None,
    categories: Iterable[str] = (),
) -> DinoMap:
    result = filter_by_name(name, dinos)
    if stat:
        result = filter_by_stat(stat, result)
    return filter_by_category(categories, result)
