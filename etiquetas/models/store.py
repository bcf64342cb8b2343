from __future__ import annotations
from typing import List

from pydantic import BaseModel, Field


class Store(BaseModel):
    id: str
    name: str


class StoreConfig(BaseModel):
    stores: List[Store] = Field(default_factory=list)
