import json
from datetime import datetime

from fixture_config import Settings
from fixture_sources import load_source
from gameweeks import UK_TZ
from update_fixtures import main, run


def _settings(tmp_path, source, **kw):
    return Settings(source=str(source), public_dir=str(tmp_path / "public"), data_dir=str(tmp_path / "data"), **kw)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_run_writes_public_files(tmp_path, season_csv, mid_october):
    src = tmp_path / "E0.csv"
    src.write_text(season_csv(played_rounds=9), encoding="utf-8")

    table = run(_settings(tmp_path, src), now=mid_october)
    assert table.current == 11

    public = tmp_path / "public"
    latest = _read(public / "fixtures-latest.json")
    assert latest["season_start"] == "2025-08-16"
    assert latest["current_gameweek"] == 11
    assert len(latest["teams"]) == 20
    assert len(latest["fixtures"]) == 380

    current = _read(public / "current-gameweek.json")
    assert current["gameweek"] == 11
    assert current["isComplete"] is False
    assert len(current["fixtures"]) == 10
    assert current["lastUpdated"] == "2025-10-20T11:00:00Z"

    week10 = _read(public / "fixtures-gameweek-10.json")
    assert week10["isComplete"] is True
    assert {f["status"] for f in week10["fixtures"]} == {"postponed"}
    assert _read(public / "fixtures-gameweek-1.json")["fixtures"][0]["score"] == "2-1"
    assert len(list(public.glob("fixtures-gameweek-*.json"))) == 38
    assert _read(public / "fixtures-matchweek-10.json") == week10

    upcoming = _read(public / "upcoming-fixtures.json")
    assert len(upcoming["fixtures"]) == 280

    assert (tmp_path / "data" / "fixtures.csv").read_text(encoding="utf-8").startswith("Div,Date")


def test_window_changes_output(tmp_path, season_csv):
    src = tmp_path / "E0.csv"
    src.write_text(season_csv(played_rounds=10), encoding="utf-8")
    now = datetime(2025, 10, 25, 18, 0, tzinfo=UK_TZ)

    assert run(_settings(tmp_path, src, ongoing_window_hours=4), now=now).current == 11
    # with the default window round 11 is already past and counted as postponed
    assert run(_settings(tmp_path, src), now=now).current == 12


def test_main_missing_source(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["--source", str(tmp_path / "missing.csv")]) == 1
    assert "[fixtures] ERROR: cannot read" in capsys.readouterr().err
    assert not (tmp_path / "public").exists()


def test_main_no_league_detected(tmp_path, monkeypatch, capsys, season_csv):
    monkeypatch.chdir(tmp_path)
    src = tmp_path / "E0.csv"
    src.write_text(season_csv(), encoding="utf-8")
    assert main(["--source", str(src), "--team-band", "count:100-200"]) == 1
    assert "team detection" in capsys.readouterr().err
    assert not (tmp_path / "public").exists()


def test_main_bad_flag_value(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["--source", "x.csv", "--team-band", "nonsense"]) == 1
    assert "TEAM_BAND" in capsys.readouterr().err


def test_main_success(tmp_path, monkeypatch, capsys, season_csv):
    monkeypatch.chdir(tmp_path)
    src = tmp_path / "E0.csv"
    src.write_text(season_csv(played_rounds=3), encoding="utf-8")
    assert main(["--source", str(src), "--public-dir", "out"]) == 0
    assert "[fixtures] OK wrote" in capsys.readouterr().out
    assert (tmp_path / "out" / "current-gameweek.json").exists()


def test_published_fixtures_read_back(tmp_path, season_csv, mid_october):
    src = tmp_path / "E0.csv"
    src.write_text(season_csv(played_rounds=9), encoding="utf-8")
    run(_settings(tmp_path, src), now=mid_october)

    latest = tmp_path / "public" / "fixtures-latest.json"
    _, (matches, skipped) = load_source(str(latest))
    assert skipped == 0
    assert len(matches) == 380
    assert sum(1 for m in matches if m.score == "2-1") == 90

    again = tmp_path / "again"
    table = run(Settings(source=str(latest), public_dir=str(again), data_dir=""), now=mid_october)
    assert table.current == 11
    assert _read(again / "fixtures-latest.json")["fixtures"] == _read(latest)["fixtures"]


def test_main_window_not_finite(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["--source", "x.csv", "--window-hours", "inf"]) == 1
    assert "ONGOING_WINDOW_HOURS" in capsys.readouterr().err
