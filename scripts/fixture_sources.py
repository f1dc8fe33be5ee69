#!/usr/bin/env python3
"""
Turn fixture files into RawMatch records.

Three shapes are understood: the football-data.co.uk CSV, JSON we published
on an earlier run, and a saved HTML page with a fixtures <table>. Each
loader returns (matches, skipped) where skipped counts rows dropped for a
missing date/team. A source with nothing usable in it raises InputError;
no placeholder fixtures are ever made up.
"""

import csv
import io
import json
import os
from typing import Any, Dict, Iterable, List, Tuple

import requests
from bs4 import BeautifulSoup

from fetch_helpers import http_get_text
from fixture_errors import InputError, ValidationSkip
from match_records import FIELD_ALIASES, RawMatch

Loaded = Tuple[List[RawMatch], int]

REQUIRED = ("date", "home_team", "away_team")


def records_from_rows(rows: Iterable[Dict[str, Any]], label: str) -> Loaded:
    matches, skipped, seen = [], 0, 0
    for row in rows:
        seen += 1
        try:
            matches.append(RawMatch.from_row(row))
        except ValidationSkip:
            skipped += 1
    if not seen:
        raise InputError(f"{label}: no rows")
    return matches, skipped


def load_csv_text(text: str, label: str = "csv") -> Loaded:
    if not text or not text.strip():
        raise InputError(f"{label}: empty file")
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    header = set(reader.fieldnames or [])
    missing = [f for f in REQUIRED if not header.intersection(FIELD_ALIASES[f])]
    if missing:
        raise InputError(f"{label}: missing columns for {missing}. Found={sorted(header)}")
    return records_from_rows(reader, label)


def load_json_text(text: str, label: str = "json") -> Loaded:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InputError(f"{label}: not valid JSON ({e})") from e
    if isinstance(data, dict):
        data = data.get("fixtures") or data.get("matches")
    if not isinstance(data, list):
        raise InputError(f"{label}: expected a list of fixtures")
    return records_from_rows((r for r in data if isinstance(r, dict)), label)


def _is_fixture_header(cells: List[str]) -> bool:
    return all(set(cells).intersection(FIELD_ALIASES[f]) for f in REQUIRED)


def load_html_text(text: str, label: str = "html") -> Loaded:
    soup = BeautifulSoup(text or "", "lxml")
    for table in soup.find_all("table"):
        trs = table.find_all("tr")
        if not trs:
            continue
        header = [c.get_text(strip=True) for c in trs[0].find_all(["th", "td"])]
        if not _is_fixture_header(header):
            continue
        rows = []
        for tr in trs[1:]:
            cells = [c.get_text(strip=True) for c in tr.find_all(["th", "td"])]
            if cells:
                rows.append(dict(zip(header, cells)))
        return records_from_rows(rows, label)
    raise InputError(f"{label}: no fixtures table found")


LOADERS = {".csv": load_csv_text, ".json": load_json_text, ".html": load_html_text, ".htm": load_html_text}


def read_source(source: str) -> Tuple[str, str]:
    """Fetch a URL or read a file; returns (text, extension)."""
    if not source:
        raise InputError("no fixtures source given")
    ext = os.path.splitext(source.split("?", 1)[0])[1].lower() or ".csv"
    if source.startswith(("http://", "https://")):
        try:
            return http_get_text(source), ext
        except requests.RequestException as e:
            raise InputError(f"GET {source} failed: {e}") from e
        except UnicodeDecodeError as e:
            raise InputError(f"cannot decode {source}: {e}") from e
    try:
        with open(source, "r", encoding="utf-8-sig") as f:
            return f.read(), ext
    except UnicodeDecodeError as e:
        raise InputError(f"cannot decode {source}: {e}") from e
    except OSError as e:
        raise InputError(f"cannot read {source}: {e}") from e


def load_source(source: str) -> Tuple[str, Loaded]:
    text, ext = read_source(source)
    loader = LOADERS.get(ext)
    if loader is None:
        raise InputError(f"{source}: unsupported file type {ext}")
    return text, loader(text, label=source)
