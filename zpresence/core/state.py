"""Shared runtime state for the presence monitor."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zpresence.zwift.model import ActivityState


@dataclass
class MonitorState:
    game_running: bool = False
    current_activity: ActivityState | None = None
    activity_start_time: int | None = None
    last_check: datetime | None = None


@dataclass(frozen=True)
class MonitorStatus:
    game_running: bool
    current_activity: ActivityState | None
    activity_start_time: int | None
    discord_connected: bool
