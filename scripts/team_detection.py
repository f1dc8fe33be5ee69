#!/usr/bin/env python3
"""
Work out which teams belong to the league in a mixed fixtures file.

Source files can carry cup ties, play-offs or a second division alongside
the league. League clubs are the ones that turn up often enough: a team's
appearance count (home + away) has to land inside an acceptance band.

Two bands are provided:

    MatchCountBand(30, 40)   absolute count, bounds inclusive
    ShareBand(0.6)           at least 60% of the busiest team's count

Any callable taking (count, counts) and returning a bool works as a band.
"""

from collections import Counter
from typing import Callable, Iterable, List, Optional

from match_records import RawMatch

Band = Callable[[int, Counter], bool]


class MatchCountBand:
    def __init__(self, low: int = 30, high: Optional[int] = 40):
        if low < 0 or (high is not None and high < low):
            raise ValueError(f"bad match count band {low}-{high}")
        self.low = low
        self.high = high

    def __call__(self, count: int, counts: Counter) -> bool:
        if count < self.low:
            return False
        return self.high is None or count <= self.high

    def __repr__(self):
        return f"MatchCountBand({self.low}, {self.high})"


class ShareBand:
    def __init__(self, min_share: float = 0.6):
        if not 0 < min_share <= 1:
            raise ValueError(f"share must be in (0, 1], got {min_share}")
        self.min_share = min_share

    def __call__(self, count: int, counts: Counter) -> bool:
        busiest = max(counts.values(), default=0)
        return busiest > 0 and count >= self.min_share * busiest

    def __repr__(self):
        return f"ShareBand({self.min_share})"


def parse_band(text: str) -> Band:
    """
    "count:30-40", "count:30-" (no upper bound) or "share:0.6".
    """
    kind, _, arg = (text or "").strip().partition(":")
    kind = kind.lower()
    try:
        if kind == "count":
            low, _, high = arg.partition("-")
            return MatchCountBand(int(low), int(high) if high.strip() else None)
        if kind == "share":
            return ShareBand(float(arg))
    except ValueError as e:
        raise ValueError(f"TEAM_BAND {text!r}: {e}") from e
    raise ValueError(f"TEAM_BAND {text!r}: expected count:LOW-HIGH or share:FRACTION")


def count_appearances(matches: Iterable[RawMatch]) -> Counter:
    counts = Counter()
    for m in matches:
        if not m.is_valid():
            continue
        counts[m.home_team] += 1
        counts[m.away_team] += 1
    return counts


def detect_active_teams(matches: Iterable[RawMatch], band: Optional[Band] = None) -> List[str]:
    band = band or MatchCountBand()
    counts = count_appearances(matches)
    return sorted(team for team, n in counts.items() if band(n, counts))
