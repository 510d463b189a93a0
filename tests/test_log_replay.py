from __future__ import annotations

from pathlib import Path

import pytest

from zpresence.zwift.model import FreeRide, Workout
from zpresence.zwift.replay import (
    describe_event,
    extract_time,
    format_bytes,
    format_duration,
    run_checks,
    seconds_to_time,
    simulate_file,
    time_to_seconds,
    timed_lines,
)

LOG = [
    "[10:00:00] Game starting",
    "[10:00:01] INFO LEVEL: [SaveActivityService] ZNet::SaveActivity calling "
    "zwift_network::save_activity with {name: Zwift - Watopia, uploadTo3P: False}",
    "[10:00:02] INFO LEVEL: [Route] Setting Route:   Volcano Circuit",
    "no timestamp here",
    "[10:00:12] INFO LEVEL: [Workouts] WorkoutDatabase::SetActiveWorkout(FTP Test)",
    "[10:00:30] INFO LEVEL: [SaveActivityService] EndCurrentActivity with "
    "{activityName: Zwift - FTP Test in Watopia}",
]


def test_time_helpers() -> None:
    assert extract_time("[23:19:29] INFO LEVEL") == "23:19:29"
    assert extract_time("no stamp") is None
    assert time_to_seconds("01:02:03") == 3723
    assert time_to_seconds("bad") == 0
    assert seconds_to_time(3723) == "01:02:03"


def test_format_helpers() -> None:
    assert format_duration(42) == "42s"
    assert format_duration(125) == "2m 5s"
    assert format_duration(7260) == "2h 1m"
    assert format_bytes(512) == "512 bytes"
    assert format_bytes(2048) == "2.0 KB"
    assert format_bytes(3 * 1024 * 1024) == "3.0 MB"


def test_timed_lines_skip_unstamped_lines() -> None:
    stamped = timed_lines(LOG)
    assert len(stamped) == 5
    assert stamped[3].index == 4
    assert stamped[3].time == "10:00:12"


def test_run_checks_reports_each_visible_change() -> None:
    final_state, changes = run_checks(timed_lines(LOG), check_interval=5)

    assert final_state is None
    assert [(c.before, c.after) for c in changes] == [
        (None, FreeRide(world="Watopia", route="Volcano Circuit")),
        (
            FreeRide(world="Watopia", route="Volcano Circuit"),
            Workout(world="Watopia", route="Volcano Circuit", workout_name="FTP Test"),
        ),
        (Workout(world="Watopia", route="Volcano Circuit", workout_name="FTP Test"), None),
    ]
    assert [c.timestamp for c in changes] == ["10:00:05", "10:00:15", "10:00:30"]
    assert changes[0].check == 1


def test_run_checks_empty_input() -> None:
    assert run_checks([]) == (None, [])


def test_describe_event() -> None:
    assert describe_event(LOG[1], "save_activity") == ' world="Watopia"'
    assert describe_event(LOG[2], "setting_route") == ' route="Volcano Circuit"'
    assert describe_event(LOG[4], "set_workout") == ' workout="FTP Test"'
    assert describe_event(LOG[5], "end_activity") == ""


def test_simulate_file_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log = tmp_path / "Log.txt"
    log.write_text("\n".join(LOG) + "\n", encoding="utf-8")

    assert simulate_file(log, check_interval=5) == 0
    out = capsys.readouterr().out

    assert f"log: {log}" in out
    assert "time range: 10:00:00 → 10:00:30 (30s)" in out
    assert "final state: idling" in out
    assert "state changes: 3" in out
    assert 'check 1: [10:00:05] idling → free_ride route="Volcano Circuit" world="Watopia"' in out
    assert '  [10:00:01] L1: save_activity world="Watopia"' in out
    assert "  [10:00:30] L5: end_activity" in out


def test_simulate_file_without_events(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log = tmp_path / "Log.txt"
    log.write_text("[10:00:00] Game starting\n", encoding="utf-8")

    assert simulate_file(log) == 0
    out = capsys.readouterr().out
    assert "state changes: 0" in out
    assert "events:\n  none" in out


def test_simulate_file_missing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert simulate_file(tmp_path / "missing.txt") == 1
    assert "file not found" in capsys.readouterr().out
