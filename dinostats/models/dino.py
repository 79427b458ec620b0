from typing import Dict

from pydantic import BaseModel, Field, TypeAdapter


# category -> stat name -> raw value text
StatTable = Dict[str, Dict[str, str]]


class Dino(BaseModel):
    """One creature and every stat observed for it.

    Values are kept as the text found on the page (often a comma-separated
    list with one entry per growth stage); nothing here parses them.
    """
    name: str = Field(..., description="Display name, unique within a record set")
    url: str = Field("", description="Detail page URL; empty for sources without per-creature pages")
    stats: StatTable = Field(default_factory=dict)


DinoMap = Dict[str, Dino]

DinoMapAdapter = TypeAdapter(DinoMap)
