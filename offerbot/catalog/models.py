from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import pandas as pd
from pydantic import BaseModel

_SUFFIX_RE = r".+[(@]"
_SUFFIX_SPLIT_RE = r"[(@]"


class RestaurantRef(BaseModel):
    id: str
    name: str


@dataclass(frozen=True)
class CatalogSnapshot:
    """One complete, read-only copy of the partner catalog."""

    cuisine_types: tuple[str, ...]
    restaurants: pd.DataFrame
    version: int = 0
    loaded_at: float = field(default_factory=time.time)

    def restaurant_refs(self, mask: pd.Series | None = None) -> list[RestaurantRef]:
        rows = self.restaurants if mask is None else self.restaurants.loc[mask]
        return [RestaurantRef(id=row.id, name=row.name) for row in rows.itertuples(index=False)]


def _restaurant_frame(restaurants: list[dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(restaurants, columns=["id", "name"])
    df["id"] = df["id"].astype(str)
    df["name"] = df["name"].fillna("").astype(str)

    # Pre-compute the lowercase name variants used for matching
    name_lower = df["name"].str.lower()
    df["name_lower"] = name_lower
    df["name_and"] = (
        name_lower.str.replace("&", "and", regex=False)
        .str.strip()
        .where(name_lower.str.contains("&", regex=False), "")
    )
    has_suffix = name_lower.str.contains(_SUFFIX_RE, regex=True)
    df["name_base"] = (
        name_lower.str.split(_SUFFIX_SPLIT_RE, n=1, regex=True)
        .str[0]
        .str.strip()
        .where(has_suffix, "")
    )
    return df


def build_snapshot(payload: dict[str, Any], version: int = 0) -> CatalogSnapshot:
    """Build a snapshot from a ``/offers/search-hints`` response."""
    cuisine_types = tuple(
        str(item["name"]) if isinstance(item, dict) else str(item)
        for item in payload.get("cuisineTypes") or []
    )
    return CatalogSnapshot(
        cuisine_types=cuisine_types,
        restaurants=_restaurant_frame(list(payload.get("restaurants") or [])),
        version=version,
    )
