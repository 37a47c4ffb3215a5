from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class CatalogConfig:
    refresh_interval_seconds: float = float(os.getenv("OFFERBOT_CATALOG_REFRESH_SECONDS", str(20 * 60)))


DEFAULT_CATALOG_CONFIG = CatalogConfig()
