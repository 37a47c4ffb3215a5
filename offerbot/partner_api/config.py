from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PartnerApiConfig:
    base_url: str = os.getenv("OFFERBOT_API_BASE_URL", "https://api.citymunchapp.com")
    api_key: str = os.getenv("OFFERBOT_API_KEY", "")
    accept: str = "application/vnd.citymunch.v14+json"
    timeout: float = float(os.getenv("OFFERBOT_API_TIMEOUT", "10.0"))
    link_base_url: str = os.getenv("OFFERBOT_LINK_BASE_URL", "https://cmun.ch")


DEFAULT_PARTNER_API_CONFIG = PartnerApiConfig()
