#!/usr/bin/env python3
"""
Gameweek, kickoff and status derivation for a batch of fixtures.

Gameweeks are counted in 7-day steps from the first league match in the
batch, so rearranged fixtures and midweek rounds drift into neighbouring
weeks. Good enough for picking which round to show by default; not a
replacement for the official schedule.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from fixture_errors import EmptyResultError
from match_records import ClassifiedMatch, MatchStatus, RawMatch, parse_date, parse_goals
from team_detection import Band, detect_active_teams

UTC = timezone.utc
UK_TZ = ZoneInfo("Europe/London")

MAX_GAMEWEEK = 38
DEFAULT_KICKOFF = time(15, 0)
DEFAULT_ONGOING_WINDOW = timedelta(hours=2)


def calculate_gameweek(match_date: date, season_start: date) -> int:
    week = (match_date - season_start).days // 7 + 1
    return min(max(week, 1), MAX_GAMEWEEK)


def season_start(matches: Iterable[RawMatch]) -> Optional[date]:
    dates = [d for d in (parse_date(m.date) for m in matches) if d is not None]
    return min(dates) if dates else None


def parse_kickoff_time(text: Optional[str]) -> Optional[time]:
    parts = (text or "").strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdecimal() for p in parts):
        return None
    try:
        return time(*(int(p) for p in parts))
    except ValueError:
        return None


def kickoff_at(match_date: Optional[date], time_text: Optional[str] = None) -> Optional[datetime]:
    """Kickoff instant in UK time; 15:00 when the time is missing or garbled."""
    if match_date is None:
        return None
    t = parse_kickoff_time(time_text) or DEFAULT_KICKOFF
    return datetime.combine(match_date, t, tzinfo=UK_TZ)


def match_status(
    now: datetime,
    kickoff: Optional[datetime],
    home_goals=None,
    away_goals=None,
    window: timedelta = DEFAULT_ONGOING_WINDOW,
) -> MatchStatus:
    """
    First rule that fits wins:
      completed  both scores are numbers, whatever the date
      ongoing    no score, kickoff <= now <= kickoff + window
      postponed  no score, now past the ongoing window
      upcoming   no score, kickoff still ahead (or unknown)
    """
    if parse_goals(home_goals) is not None and parse_goals(away_goals) is not None:
        return MatchStatus.COMPLETED
    if kickoff is None:
        return MatchStatus.UPCOMING
    if now.tzinfo is None:
        now = now.replace(tzinfo=UK_TZ)
    if now < kickoff:
        return MatchStatus.UPCOMING
    if now <= kickoff + window:
        return MatchStatus.ONGOING
    return MatchStatus.POSTPONED


@dataclass
class FixtureSet:
    teams: List[str]
    season_start: date
    matches: List[ClassifiedMatch]
    excluded: int = 0


def classify_fixtures(
    raw_matches: Sequence[RawMatch],
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_ONGOING_WINDOW,
    band: Optional[Band] = None,
) -> FixtureSet:
    """
    Filter to league matches and give each a date, gameweek and status.

    Raises EmptyResultError when fewer than two teams qualify or no match is
    played between two league teams.
    """
    now = now or datetime.now(UTC)
    valid = [m for m in raw_matches if m.is_valid()]
    teams = detect_active_teams(valid, band)
    if len(teams) < 2:
        raise EmptyResultError(
            f"{len(teams)} team(s) passed team detection out of {len(valid)} valid matches; check TEAM_BAND"
        )

    members = set(teams)
    league = [m for m in valid if m.home_team in members and m.away_team in members]
    start = season_start(league)
    if start is None:
        raise EmptyResultError("no matches between detected league teams")

    classified = []
    for m in league:
        d = parse_date(m.date)
        status = match_status(now, kickoff_at(d, m.time), m.home_goals, m.away_goals, window)
        classified.append(ClassifiedMatch.from_raw(m, d, calculate_gameweek(d, start), status))
    # sorted() is stable, so same-day matches keep their input order
    classified = sorted(classified, key=lambda c: c.parsed_date)

    return FixtureSet(
        teams=teams,
        season_start=start,
        matches=classified,
        excluded=len(raw_matches) - len(league),
    )


def is_gameweek_complete(matches: Iterable[ClassifiedMatch]) -> bool:
    return all(m.status.terminal for m in matches)


@dataclass
class GameweekTable:
    buckets: Dict[int, List[ClassifiedMatch]] = field(default_factory=dict)
    current: int = 1
    empty: bool = True

    def is_complete(self, gameweek: int) -> bool:
        return is_gameweek_complete(self.buckets.get(gameweek, []))

    def payload(self, gameweek: int, updated: str) -> dict:
        return {
            "gameweek": gameweek,
            "isComplete": self.is_complete(gameweek),
            "fixtures": [m.to_json() for m in self.buckets.get(gameweek, [])],
            "lastUpdated": updated,
        }


def current_gameweek(buckets: Dict[int, List[ClassifiedMatch]]) -> int:
    for gw in range(1, MAX_GAMEWEEK + 1):
        matches = buckets.get(gw)
        if matches and not is_gameweek_complete(matches):
            return gw
    return 1


def aggregate_gameweeks(matches: Iterable[ClassifiedMatch]) -> GameweekTable:
    buckets: Dict[int, List[ClassifiedMatch]] = {}
    for m in sorted(matches, key=lambda c: c.parsed_date):
        buckets.setdefault(m.gameweek, []).append(m)
    buckets = dict(sorted(buckets.items()))
    return GameweekTable(buckets=buckets, current=current_gameweek(buckets), empty=not buckets)
