from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from ..catalog.models import CatalogItem, Product


@dataclass(frozen=True)
class ScoredItem:
    item: CatalogItem
    score: int | None
    source: Literal["scored", "fallback"] = "scored"


class RelatedProductOut(BaseModel):
    product: Product
    score: int | None
    source: Literal["scored", "fallback"]


class RelatedProductsResponse(BaseModel):
    product_id: str
    related: list[RelatedProductOut]
    cached: bool = False
