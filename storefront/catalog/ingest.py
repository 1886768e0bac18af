from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import List

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig

logger = logging.getLogger(__name__)


CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "description",
    "price",
    "original_price",
    "category",
    "subcategory",
    "image",
    "sizes",
    "colors",
    "stock",
    "rating",
    "is_active",
    "is_summer",
    "is_winter",
    "is_ethnic",
    "is_western",
    "is_bestseller",
    "is_new",
    "created_at",
]

_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"0", "false", "no", "n", ""}


def _parse_price(raw: float | int | str | None) -> float | None:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return None
    cleaned = re.sub(r"[₹,\s]|Rs\.?", "", str(raw))
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_flag(raw: bool | int | str | None, default: bool = False) -> bool:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return default
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def _join_options(raw: str | None) -> str:
    """Normalise 'S, M ,L' or 'S|M|L' to 'S|M|L'."""
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ""
    parts = re.split(r"[|,]", str(raw))
    return "|".join(p.strip() for p in parts if p.strip())


def run_ingestion(
    source: Path | None = None,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> Path:
    """
    Normalise a raw product export into the canonical catalog table.

    Steps:
    - Read the raw CSV export.
    - Map raw fields into the canonical product schema.
    - Drop rows without a usable name, category or price.
    - Persist the cleaned table as CSV for the catalog data store.
    """
    source = source or config.raw_path
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    df = pd.read_csv(source, dtype=str)

    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    def _column(candidates: List[str], default: str = "") -> pd.Series:
        col = _first_present(candidates)
        if col is None:
            return pd.Series(default, index=df.index)
        return df[col].fillna(default).astype(str).str.strip()

    canonical = pd.DataFrame(index=df.index)

    col_id = _first_present(["id", "_id", "product_id", "sku"])
    if col_id:
        canonical["id"] = df[col_id].fillna("").astype(str).str.strip()
    else:
        canonical["id"] = ""
    missing_ids = canonical["id"] == ""
    canonical.loc[missing_ids, "id"] = [
        f"p-{uuid.uuid4().hex[:8]}" for _ in range(int(missing_ids.sum()))
    ]

    canonical["name"] = _column(["name", "title", "product_name"])
    canonical["description"] = _column(["description", "details"])

    col_price = _first_present(["price", "sale_price", "selling_price"])
    canonical["price"] = df[col_price].apply(_parse_price) if col_price else pd.NA
    col_mrp = _first_present(["original_price", "originalPrice", "mrp"])
    if col_mrp:
        canonical["original_price"] = df[col_mrp].apply(_parse_price)
        canonical["original_price"] = canonical["original_price"].fillna(canonical["price"])
    else:
        canonical["original_price"] = canonical["price"]

    canonical["category"] = _column(["category", "collection"])
    canonical["subcategory"] = _column(["subcategory", "sub_category", "subCategory"])
    canonical["image"] = _column(["image", "image_url", "thumbnail"])
    for target, candidates in (
        ("sizes", ["sizes", "size"]),
        ("colors", ["colors", "colours", "color"]),
    ):
        col = _first_present(candidates)
        canonical[target] = df[col].apply(_join_options) if col else ""

    col_stock = _first_present(["stock", "inventory", "quantity"])
    if col_stock:
        canonical["stock"] = (
            pd.to_numeric(df[col_stock], errors="coerce").fillna(0).clip(lower=0).astype(int)
        )
    else:
        canonical["stock"] = 0

    col_rating = _first_present(["rating", "avg_rating"])
    if col_rating:
        canonical["rating"] = (
            pd.to_numeric(df[col_rating], errors="coerce").fillna(0.0).clip(0.0, 5.0)
        )
    else:
        canonical["rating"] = 0.0

    flag_sources = {
        "is_active": ["is_active", "isActive", "active"],
        "is_summer": ["is_summer", "isSummer", "summer"],
        "is_winter": ["is_winter", "isWinter", "winter"],
        "is_ethnic": ["is_ethnic", "isEthnic", "ethnic"],
        "is_western": ["is_western", "isWestern", "western"],
        "is_bestseller": ["is_bestseller", "isBestseller", "bestseller"],
        "is_new": ["is_new", "isNew", "new_arrival"],
    }
    for flag, candidates in flag_sources.items():
        col = _first_present(candidates)
        default = flag == "is_active"
        if col:
            canonical[flag] = df[col].apply(_parse_flag, default=default)
        else:
            canonical[flag] = default

    canonical["created_at"] = _column(["created_at", "createdAt"], default="")
    canonical["created_at"] = canonical["created_at"].str.slice(0, 10)

    usable = (
        (canonical["name"] != "")
        & (canonical["category"] != "")
        & canonical["price"].notna()
    )
    dropped = int((~usable).sum())
    if dropped:
        logger.warning("Dropping %d product rows without name, category or price", dropped)
    canonical = canonical.loc[usable, CANONICAL_COLUMNS]

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d products to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    path = run_ingestion()
    print(f"Ingestion complete. Catalog saved to: {path}")
