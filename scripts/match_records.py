#!/usr/bin/env python3
"""
Match records shared by the fixture scripts.

A RawMatch is one row of source data, however it was fetched. A
ClassifiedMatch is a RawMatch from the league under analysis with its
calendar date, gameweek and status worked out for one run.
"""

from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from fixture_errors import ValidationSkip

# Source column names (football-data.co.uk first, then our own JSON output).
FIELD_ALIASES = {
    "date": ("Date", "date"),
    "time": ("Time", "time", "kickoff"),
    "home_team": ("HomeTeam", "homeTeam", "home"),
    "away_team": ("AwayTeam", "awayTeam", "away"),
    "home_goals": ("FTHG", "homeGoals", "scoreHome"),
    "away_goals": ("FTAG", "awayGoals", "scoreAway"),
}


class MatchStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    POSTPONED = "postponed"

    @property
    def terminal(self) -> bool:
        return self in (MatchStatus.COMPLETED, MatchStatus.POSTPONED)


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    "DD/MM/YY" -> date. Two-digit years below 50 are 20YY, the rest 19YY.
    Four-digit years are taken as written, and the ISO "YYYY-MM-DD" we
    publish reads back too. Anything else gives None.
    """
    if not text:
        return None
    text = str(text).strip()
    parts = text.split("-")
    if len(parts) == 3 and len(parts[0]) == 4:
        year_s, month, day = parts
    else:
        parts = text.split("/")
        if len(parts) != 3:
            return None
        day, month, year_s = (p.strip() for p in parts)
    if not all(p.isdecimal() for p in (day, month, year_s)):
        return None
    try:
        year = int(year_s)
        if len(year_s) <= 2:
            year += 2000 if year < 50 else 1900
        elif len(year_s) != 4:
            return None
        return date(year, int(month), int(day))
    except ValueError:
        return None


def parse_goals(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    s = str(value).strip()
    if not s.isdecimal():
        return None
    try:
        return int(s)
    except ValueError:
        return None


def _pick(row: Dict[str, Any], field: str) -> str:
    for key in FIELD_ALIASES[field]:
        v = row.get(key)
        if v is not None and str(v).strip() != "":
            return str(v).strip()
    return ""


@dataclass(frozen=True)
class RawMatch:
    date: str
    home_team: str
    away_team: str
    time: str = ""
    home_goals: str = ""
    away_goals: str = ""

    @staticmethod
    def from_row(row: Dict[str, Any]) -> "RawMatch":
        """Build from a CSV/JSON/HTML row; raises ValidationSkip if unusable."""
        m = RawMatch(
            date=_pick(row, "date"),
            home_team=_pick(row, "home_team"),
            away_team=_pick(row, "away_team"),
            time=_pick(row, "time"),
            home_goals=_pick(row, "home_goals"),
            away_goals=_pick(row, "away_goals"),
        )
        if not m.is_valid():
            raise ValidationSkip(f"unusable row: date={m.date!r} home={m.home_team!r} away={m.away_team!r}")
        return m

    def is_valid(self) -> bool:
        return bool(self.home_team and self.away_team and parse_date(self.date))

    @property
    def score(self) -> str:
        hg, ag = parse_goals(self.home_goals), parse_goals(self.away_goals)
        if hg is None or ag is None:
            return ""
        return f"{hg}-{ag}"


@dataclass(frozen=True, kw_only=True)
class ClassifiedMatch(RawMatch):
    parsed_date: date
    gameweek: int
    status: MatchStatus

    @classmethod
    def from_raw(cls, raw: RawMatch, parsed_date: date, gameweek: int, status: MatchStatus) -> "ClassifiedMatch":
        return cls(**asdict(raw), parsed_date=parsed_date, gameweek=gameweek, status=status)

    def to_json(self) -> Dict[str, Any]:
        return {
            "homeTeam": self.home_team,
            "awayTeam": self.away_team,
            "score": self.score,
            "homeGoals": self.home_goals,
            "awayGoals": self.away_goals,
            "date": self.parsed_date.isoformat(),
            "time": self.time,
            "status": self.status.value,
            "gameweek": self.gameweek,
        }
