from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PricingConfig:
    free_shipping_threshold: float = float(os.getenv("FREE_SHIPPING_THRESHOLD", "999"))
    flat_shipping_fee: float = float(os.getenv("FLAT_SHIPPING_FEE", "99"))


DEFAULT_PRICING_CONFIG = PricingConfig()
