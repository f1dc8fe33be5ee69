from datetime import date, datetime, timedelta

import pytest

from gameweeks import UK_TZ
from match_records import RawMatch

SEASON_START = date(2025, 8, 16)
LEAGUE_TEAMS = [f"Club {i:02d}" for i in range(20)]
OTHER_TEAMS = ["Cup Side A", "Cup Side B", "Cup Side C", "Cup Side D"]


def double_round_robin(teams):
    n = len(teams)
    arr = list(teams)
    rounds = []
    for r in range(n - 1):
        pairs = []
        for i in range(n // 2):
            a, b = arr[i], arr[n - 1 - i]
            pairs.append((a, b) if r % 2 == 0 else (b, a))
        rounds.append(pairs)
        arr = [arr[0], arr[-1]] + arr[1:-1]
    return rounds + [[(b, a) for a, b in rnd] for rnd in rounds]


def build_season(played_rounds=0, extras=True):
    """20 clubs x 38 weekly rounds from SEASON_START, plus 4 non-league sides."""
    matches = []
    for r, pairs in enumerate(double_round_robin(LEAGUE_TEAMS)):
        d = SEASON_START + timedelta(days=7 * r)
        for home, away in pairs:
            scored = r < played_rounds
            matches.append(RawMatch(
                date=d.strftime("%d/%m/%y"),
                time="15:00",
                home_team=home,
                away_team=away,
                home_goals="2" if scored else "",
                away_goals="1" if scored else "",
            ))
    if extras:
        a, b, c, d_ = OTHER_TEAMS
        cup_day = (SEASON_START + timedelta(days=4)).strftime("%d/%m/%y")
        for home, away in [(a, b), (b, a), (c, d_), (d_, c)]:
            matches.append(RawMatch(date=cup_day, time="19:45", home_team=home, away_team=away))
    return matches


def to_csv(matches):
    lines = ["Div,Date,Time,HomeTeam,AwayTeam,FTHG,FTAG"]
    for m in matches:
        lines.append(f"E0,{m.date},{m.time},{m.home_team},{m.away_team},{m.home_goals},{m.away_goals}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def season():
    return build_season


@pytest.fixture
def season_csv():
    return lambda **kw: to_csv(build_season(**kw))


@pytest.fixture
def mid_october():
    # Round index 9 was on 18/10/25; index 10 is 25/10/25.
    return datetime(2025, 10, 20, 12, 0, tzinfo=UK_TZ)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("FIXTURES_SOURCE", "FIXTURES_CSV_URL", "PUBLIC_DIR", "DATA_DIR", "ONGOING_WINDOW_HOURS", "TEAM_BAND"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def league_teams():
    return list(LEAGUE_TEAMS)
