#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Build the public/ fixture JSON files from a season fixtures file.

    python scripts/update_fixtures.py
    python scripts/update_fixtures.py --source data/fixtures.csv --window-hours 4

Writes:
    data/fixtures.csv                  raw copy of the source (CSV sources only)
    public/fixtures-latest.json        every league fixture
    public/current-gameweek.json       the round to show by default
    public/fixtures-gameweek-<n>.json  one file per gameweek
    public/fixtures-matchweek-<n>.json same content, under the older name
    public/upcoming-fixtures.json      fixtures not kicked off yet

Nothing is written when loading or classification fails. Each file is
replaced atomically on its own, so a disk error partway through the write
loop can leave public/ with a mix of old and new files.
"""

import argparse
import dataclasses
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional

import requests

from fetch_helpers import now_iso, write_json_atomic, write_text
from fixture_config import Settings
from fixture_errors import EmptyResultError, InputError
from fixture_sources import load_source
from gameweeks import FixtureSet, GameweekTable, aggregate_gameweeks, classify_fixtures
from match_records import MatchStatus

TAG = "[fixtures]"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Classify fixtures into gameweeks and write public/ JSON.")
    ap.add_argument("--source", help="CSV/JSON/HTML path or URL (env FIXTURES_SOURCE / FIXTURES_CSV_URL)")
    ap.add_argument("--public-dir", help="output folder (env PUBLIC_DIR)")
    ap.add_argument("--data-dir", help="raw CSV copy folder (env DATA_DIR)")
    ap.add_argument("--window-hours", type=float, help="how long after kickoff a match counts as ongoing")
    ap.add_argument("--team-band", help="count:LOW-HIGH or share:FRACTION (env TEAM_BAND)")
    return ap.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    s = Settings.from_env()
    overrides = {
        "source": args.source,
        "public_dir": args.public_dir,
        "data_dir": args.data_dir,
        "ongoing_window_hours": args.window_hours,
        "team_band": args.team_band,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(s, **overrides).check()


def build_outputs(fixtures: FixtureSet, table: GameweekTable, updated: str) -> dict:
    """Map of file name -> JSON object for everything under public/."""
    out = {
        "fixtures-latest.json": {
            "updated": updated,
            "season_start": fixtures.season_start.isoformat(),
            "teams": fixtures.teams,
            "current_gameweek": table.current,
            "fixtures": [m.to_json() for m in fixtures.matches],
        },
        "current-gameweek.json": table.payload(table.current, updated),
        "upcoming-fixtures.json": {
            "updated": updated,
            "fixtures": [m.to_json() for m in fixtures.matches if m.status is MatchStatus.UPCOMING],
        },
    }
    for gw in table.buckets:
        payload = table.payload(gw, updated)
        out[f"fixtures-gameweek-{gw}.json"] = payload
        out[f"fixtures-matchweek-{gw}.json"] = payload
    return out


def run(settings: Settings, now: Optional[datetime] = None) -> GameweekTable:
    now = now or datetime.now(timezone.utc)
    text, (raw, skipped) = load_source(settings.source)
    print(f"{TAG} parsed {len(raw)} records from {settings.source}")
    if skipped:
        print(f"{TAG} WARN: skipped {skipped} rows without date/home/away")

    fixtures = classify_fixtures(raw, now=now, window=settings.ongoing_window, band=settings.band)
    table = aggregate_gameweeks(fixtures.matches)
    if table.empty:
        raise EmptyResultError("no gameweeks built from classified fixtures")
    print(
        f"{TAG} {len(fixtures.teams)} league teams, {len(fixtures.matches)} fixtures, "
        f"season start {fixtures.season_start.isoformat()}, current gameweek {table.current}"
    )

    if settings.source.split("?", 1)[0].lower().endswith(".csv") and settings.data_dir:
        raw_copy = os.path.join(settings.data_dir, "fixtures.csv")
        if os.path.abspath(raw_copy) != os.path.abspath(settings.source):
            write_text(raw_copy, text)

    outputs = build_outputs(fixtures, table, now_iso(now))
    for name, obj in outputs.items():
        write_json_atomic(os.path.join(settings.public_dir, name), obj)
    print(f"{TAG} OK wrote {len(outputs)} files to {settings.public_dir}")
    return table


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings(parse_args(argv))
        run(settings)
    except (InputError, EmptyResultError, ValueError, requests.RequestException) as e:
        print(f"{TAG} ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
