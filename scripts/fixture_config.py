#!/usr/bin/env python3
"""
Run settings for update_fixtures.py.

Defaults below, environment variables on top (handy in GitHub Actions),
command-line flags on top of those.
"""

import math
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from team_detection import Band, parse_band

CSV_URL = "https://www.football-data.co.uk/mmz4281/2526/E0.csv"
PUBLIC_DIR = "public"
DATA_DIR = "data"
ONGOING_WINDOW_HOURS = 2.0
TEAM_BAND = "count:30-40"


@dataclass(frozen=True)
class Settings:
    source: str = CSV_URL
    public_dir: str = PUBLIC_DIR
    data_dir: str = DATA_DIR
    ongoing_window_hours: float = ONGOING_WINDOW_HOURS
    team_band: str = TEAM_BAND

    @property
    def ongoing_window(self) -> timedelta:
        return timedelta(hours=self.ongoing_window_hours)

    @property
    def band(self) -> Band:
        return parse_band(self.team_band)

    def check(self) -> "Settings":
        hours = self.ongoing_window_hours
        if not math.isfinite(hours) or hours < 0:
            raise ValueError(f"ONGOING_WINDOW_HOURS must be a finite, non-negative number, got {hours}")
        try:
            timedelta(hours=hours)
        except OverflowError:
            raise ValueError(f"ONGOING_WINDOW_HOURS is too large: {hours}") from None
        parse_band(self.team_band)
        return self

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        hours = env.get("ONGOING_WINDOW_HOURS") or str(ONGOING_WINDOW_HOURS)
        try:
            window = float(hours)
        except ValueError:
            raise ValueError(f"ONGOING_WINDOW_HOURS must be a number, got {hours!r}") from None
        return Settings(
            source=env.get("FIXTURES_SOURCE") or env.get("FIXTURES_CSV_URL") or CSV_URL,
            public_dir=env.get("PUBLIC_DIR") or PUBLIC_DIR,
            data_dir=env.get("DATA_DIR") or DATA_DIR,
            ongoing_window_hours=window,
            team_band=env.get("TEAM_BAND") or TEAM_BAND,
        ).check()
