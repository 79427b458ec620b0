from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from dinostats.config import CURVE, load_sources
from dinostats.errors import StoreFormatError, StoreIOError
from dinostats.models.dino import Dino, DinoMap
from dinostats.services import record_store
from dinostats.services.query_service import CATEGORIES, find

router = APIRouter(tags=["dinos"])


def _load(source: str) -> DinoMap:
    sources = load_sources()
    if source not in sources:
        raise HTTPException(status_code=400, detail=f"Unknown source '{source}'")
    try:
        return record_store.load(sources[source].output_path)
    except StoreIOError as exc:
        raise HTTPException(status_code=404, detail=f"No saved records for '{source}': {exc.reason}")
    except StoreFormatError as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/dinos", response_model=DinoMap)
def api_find_dinos(
    name: str = "",
    stat: Optional[str] = None,
    category: List[str] = Query(default=[]),
    source: str = CURVE,
):
    bad = [c for c in category if c not in CATEGORIES]
    if bad:
        raise HTTPException(status_code=400, detail=f"Unknown category: {', '.join(bad)}")
    return find(_load(source), name, stat, category)


@router.get("/dinos/{name}", response_model=Dino)
def api_get_dino(name: str, source: str = CURVE):
    dino = _load(source).get(name)
    if dino is None:
        raise HTTPException(status_code=404, detail="Dino not found")
    return dino
