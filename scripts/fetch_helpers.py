# scripts/fetch_helpers.py
import json, os, shutil, tempfile, datetime

import requests

HEADERS = {"User-Agent": "gh-actions/football-fixtures"}


def http_get_text(url, timeout=30, encoding="utf-8-sig"):
    # requests follows redirects itself; anything other than 2xx raises
    r = requests.get(url, headers=HEADERS, timeout=timeout)
    r.raise_for_status()
    return r.content.decode(encoding)


def write_json_atomic(path, obj):
    folder = os.path.dirname(path) or "."
    os.makedirs(folder, exist_ok=True)
    tmpfd, tmppath = tempfile.mkstemp(prefix=".tmp_", suffix=".json", dir=folder)
    with os.fdopen(tmpfd, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
        f.write("\n")
    shutil.move(tmppath, path)


def write_text(path, text):
    folder = os.path.dirname(path) or "."
    os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def now_iso(now=None):
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.astimezone(datetime.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
