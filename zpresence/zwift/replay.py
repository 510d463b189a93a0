"""Offline replay of a Zwift log to debug activity detection.

The log is cut into windows of ``check_interval`` seconds using the
``[HH:MM:SS]`` line timestamps, mimicking what the live monitor would have
seen on each check, and every window is folded through the state machine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from zpresence.zwift.formatter import for_log
from zpresence.zwift.model import ActivityState
from zpresence.zwift.parser import (
    UNKNOWN_WORLD,
    extract_pacer_name,
    extract_route,
    extract_workout_name,
    extract_world,
    transition,
)
from zpresence.zwift.patterns import classify_line

DEFAULT_CHECK_INTERVAL_SEC = 5

_TIME_RE = re.compile(r"\[(\d+:\d+:\d+)\]")


@dataclass(frozen=True)
class TimedLine:
    time: str
    line: str
    index: int


@dataclass(frozen=True)
class StateChange:
    check: int
    timestamp: str
    before: ActivityState | None
    after: ActivityState | None


def extract_time(line: str) -> str | None:
    match = _TIME_RE.search(line)
    return match.group(1) if match else None


def time_to_seconds(value: str) -> int:
    parts = value.split(":")
    if len(parts) != 3:
        return 0
    try:
        hours, minutes, seconds = (int(part) for part in parts)
    except ValueError:
        return 0
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_time(seconds: int) -> str:
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def format_duration(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / 1024 / 1024:.1f} MB"


def timed_lines(lines: list[str]) -> list[TimedLine]:
    out: list[TimedLine] = []
    for index, line in enumerate(lines):
        stamp = extract_time(line)
        if stamp is not None:
            out.append(TimedLine(time=stamp, line=line, index=index))
    return out


def run_checks(
    lines: list[TimedLine], check_interval: int = DEFAULT_CHECK_INTERVAL_SEC
) -> tuple[ActivityState | None, list[StateChange]]:
    """Fold ``lines`` window by window and collect the visible state changes."""
    if not lines:
        return None, []

    interval = max(1, check_interval)
    boundary = time_to_seconds(lines[0].time) + interval
    state: ActivityState | None = None
    changes: list[StateChange] = []
    window: list[str] = []
    check = 0

    def flush(stamp: str) -> None:
        nonlocal state, window, check
        check += 1
        new_state = transition(window, state) if window else state
        if for_log(new_state) != for_log(state):
            changes.append(StateChange(check, stamp, state, new_state))
        state = new_state
        window = []

    for entry in lines:
        seconds = time_to_seconds(entry.time)
        while seconds >= boundary:
            flush(seconds_to_time(boundary))
            boundary += interval
        window.append(entry.line)
    flush(lines[-1].time)
    return state, changes


def describe_event(line: str, event: str) -> str:
    if event == "save_activity":
        world = extract_world(line)
        return f' world="{world}"' if world != UNKNOWN_WORLD else ""
    if event == "set_workout":
        workout = extract_workout_name(line)
        return f' workout="{workout}"' if workout else ""
    if event == "setting_route":
        route = extract_route(line)
        return f' route="{route}"' if route else ""
    if event in ("pacer_joined", "pacer_left"):
        name = extract_pacer_name(line)
        return f' pacer="{name}"' if name else ""
    return ""


def simulate_file(path: str | Path, check_interval: int = DEFAULT_CHECK_INTERVAL_SEC) -> int:
    log_path = Path(path).expanduser()
    try:
        content = log_path.read_bytes()
    except FileNotFoundError:
        print(f"file not found: {path}")
        return 1
    except OSError as exc:
        print(f"read error: {exc}")
        return 1

    lines = content.decode("utf-8", errors="replace").split("\n")
    print(f"log: {log_path}")
    print(f"size: {format_bytes(len(content))}, lines: {len(lines)}\n")
    print(f"simulating checks: every {check_interval}s\n")

    stamped = timed_lines(lines)
    if not stamped:
        print("no timestamps found")
        return 0

    first, last = stamped[0].time, stamped[-1].time
    duration = time_to_seconds(last) - time_to_seconds(first)
    print(f"time range: {first} → {last} ({format_duration(duration)})\n")

    final_state, changes = run_checks(stamped, check_interval)
    print(f"final state: {for_log(final_state)}")
    print(f"state changes: {len(changes)}\n")
    if changes:
        for change in changes:
            print(
                f"check {change.check}: [{change.timestamp}] "
                f"{for_log(change.before)} → {for_log(change.after)}"
            )
        print("")

    print("events:")
    events = [(entry, classify_line(entry.line)) for entry in stamped]
    events = [(entry, event) for entry, event in events if event is not None]
    if not events:
        print("  none")
    for entry, event in events:
        print(f"  [{entry.time}] L{entry.index}: {event}{describe_event(entry.line, event)}")
    return 0
