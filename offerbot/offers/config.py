from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..geo.distance import AREA_SEARCH_THRESHOLD_METERS


@dataclass(frozen=True)
class RankingConfig:
    """
    Fixed query and ranking constants.

    A bounding box at least ``area_search_threshold_meters`` across is
    searched as an area; anything smaller is searched as its center point
    plus ``search_radius_km``.
    """

    area_search_threshold_meters: float = AREA_SEARCH_THRESHOLD_METERS
    search_radius_km: float = 1.2
    late_night_cutoff: time = time(22, 0)
    next_window_minutes: int = 120
    max_lines: int = 10
    first_page_lines: int = 3
    low_covers_threshold: int = 5


DEFAULT_RANKING_CONFIG = RankingConfig()
