from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class CatalogConfig:
    """
    Locations of the raw product export and the canonical catalog table.
    """

    raw_data_dir: Path = _PACKAGE_DIR / "data" / "raw"
    processed_data_dir: Path = _PACKAGE_DIR / "data"
    raw_filename: str = "products_export.csv"
    processed_filename: str = "catalog.csv"

    @property
    def raw_path(self) -> Path:
        return self.raw_data_dir / self.raw_filename

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
