from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import CatalogItem, Product, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

TEXT_COLUMNS = ("name", "description", "category", "subcategory", "image", "created_at")
LIST_COLUMNS = ("sizes", "colors")
FLOAT_COLUMNS = ("price", "original_price", "rating")
FLAG_COLUMNS = (
    "is_active",
    "is_summer",
    "is_winter",
    "is_ethnic",
    "is_western",
    "is_bestseller",
    "is_new",
)
SORT_KEYS = {
    "price-low": ("price", True),
    "price-high": ("price", False),
    "latest": ("created_at", False),
    "rating": ("rating", False),
}

_df: pd.DataFrame | None = None


class CatalogError(Exception):
    """Base class for catalog failures."""


class ProductNotFound(CatalogError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: '{product_id}'")
        self.product_id = product_id


def _load(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> pd.DataFrame:
    df = pd.read_csv(config.processed_path, dtype={"id": str})

    for col in TEXT_COLUMNS + LIST_COLUMNS:
        df[col] = df[col].fillna("").astype(str)
    for col in FLOAT_COLUMNS:
        df[col] = df[col].astype(float)
    for col in FLAG_COLUMNS:
        df[col] = df[col].astype(bool)
    df["stock"] = df["stock"].fillna(0).astype(int)

    logger.info("Loaded %d products from %s", len(df), config.processed_path)
    return df


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory product DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = _load()
    return _df


def reset_catalog() -> None:
    """Drop in-memory edits; the next access reloads the catalog file."""
    global _df
    _df = None


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split("|") if part.strip()]


def _record_to_product(record: dict[str, Any]) -> Product:
    record = dict(record)
    for col in LIST_COLUMNS:
        record[col] = _split(record[col])
    return Product(**record)


def _record_at(df: pd.DataFrame, idx: int) -> Product:
    return _record_to_product(df.loc[[idx]].to_dict(orient="records")[0])


def _to_row(fields: dict[str, Any]) -> dict[str, Any]:
    row = dict(fields)
    for col in LIST_COLUMNS:
        if col in row:
            row[col] = "|".join(row[col])
    return row


def _index_of(product_id: str) -> int:
    df = get_dataframe()
    matches = df.index[df["id"] == product_id]
    if len(matches) == 0:
        raise ProductNotFound(product_id)
    return matches[0]


def list_products(
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    include_inactive: bool = False,
) -> list[Product]:
    df = get_dataframe()

    mask = pd.Series(True, index=df.index)
    if not include_inactive:
        mask = mask & df["is_active"]

    if category and category != "all":
        mask = mask & (df["category"] == category)

    if search:
        needle = search.strip().lower()
        mask = mask & (
            df["name"].str.lower().str.contains(needle, regex=False)
            | df["description"].str.lower().str.contains(needle, regex=False)
        )

    selected = df.loc[mask]
    if sort_by in SORT_KEYS:
        column, ascending = SORT_KEYS[sort_by]
        selected = selected.sort_values(column, ascending=ascending, kind="stable")

    return [_record_to_product(r) for r in selected.to_dict(orient="records")]


def list_categories() -> list[str]:
    df = get_dataframe()
    return sorted(df.loc[df["is_active"], "category"].dropna().unique().tolist())


def get_product(product_id: str) -> Product:
    df = get_dataframe()
    return _record_at(df, _index_of(product_id))


def get_catalog_items() -> list[CatalogItem]:
    """Active products as scorer records, in catalog order."""
    return [p.to_catalog_item() for p in list_products()]


def create_product(body: ProductCreate) -> Product:
    global _df
    fields = body.model_dump()
    if fields["original_price"] is None:
        fields["original_price"] = fields["price"]
    fields["id"] = f"p-{uuid.uuid4().hex[:8]}"
    fields["is_active"] = True
    fields["created_at"] = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    product = Product(**fields)
    new_row = pd.DataFrame([_to_row(product.model_dump())])
    _df = pd.concat([get_dataframe(), new_row], ignore_index=True)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


def update_product(product_id: str, body: ProductUpdate) -> Product:
    df = get_dataframe()
    idx = _index_of(product_id)
    changes = _to_row(body.model_dump(exclude_none=True))
    for column, value in changes.items():
        df.at[idx, column] = value
    return _record_at(df, idx)


def delete_product(product_id: str) -> None:
    global _df
    df = get_dataframe()
    idx = _index_of(product_id)
    _df = df.drop(index=idx).reset_index(drop=True)
    logger.info("Deleted product %s", product_id)
