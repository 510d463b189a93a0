"""Zwift log activity state machine.

Lines are folded in order into an :data:`ActivityState` (or ``None`` when no
activity is active). Matching is plain substring containment against the
markers in :mod:`zpresence.zwift.patterns`; the first matching rule wins and
unmatched lines leave the state untouched.

Example activity start (autosave, not the final upload)::

    [23:19:29] INFO LEVEL: [SaveActivityService] ZNet::SaveActivity calling
    zwift_network::save_activity with {name: Zwift - Watopia, uploadTo3P: False}

RoboPacer join/leave::

    [22:01:50] DEBUG LEVEL: [StructuredEvents] Sending PacePartnerJoined structured event for D. Maria
    [22:04:33] DEBUG LEVEL: [StructuredEvents] Sending PacePartnerLeft structured event for D. Maria (exit: EXIT_RANGE)

Zwift keeps writing route changes after an activity ended (shutdown cleanup),
so route and pacer-join lines are ignored while no activity is active.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable

from zpresence.zwift.model import ActivityState, FreeRide, RoboPacer, Workout
from zpresence.zwift.patterns import (
    COMPLETED_WORKOUT,
    DISCARD_ACTIVITY,
    END_ACTIVITY,
    PACER_JOINED,
    PACER_LEFT,
    SAVE_ACTIVITY,
    SET_WORKOUT,
    SETTING_ROUTE,
    is_autosave,
)

UNKNOWN_WORLD = "Unknown"

_WORLD_RE = re.compile(r"\{name:\s*Zwift - ([^,]+),")
_ROUTE_RE = re.compile(r"Setting Route:(.*)$")
_WORKOUT_RE = re.compile(r"SetActiveWorkout\(([^)]+)\)")
_PACER_RE = re.compile(r"structured event for ([^(]+)")


def extract_world(line: str) -> str:
    match = _WORLD_RE.search(line)
    if match is None:
        return UNKNOWN_WORLD
    return match.group(1).strip()


def extract_route(line: str) -> str | None:
    match = _ROUTE_RE.search(line)
    if match is None:
        return None
    return match.group(1).strip() or None


def extract_workout_name(line: str) -> str | None:
    match = _WORKOUT_RE.search(line)
    if match is None:
        return None
    return match.group(1).strip() or None


def extract_pacer_name(line: str) -> str | None:
    match = _PACER_RE.search(line)
    if match is None:
        return None
    return match.group(1).strip() or None


def apply_line(state: ActivityState | None, line: str) -> ActivityState | None:
    """Apply a single log line to ``state`` and return the resulting state."""
    if DISCARD_ACTIVITY in line or END_ACTIVITY in line:
        return None

    if SAVE_ACTIVITY in line:
        if not is_autosave(line):
            return state
        world = extract_world(line)
        if state is None:
            return FreeRide(world=world)
        # Autosaves also arrive mid-workout/mid-pacer; only the world changes.
        return replace(state, world=world)

    if SET_WORKOUT in line:
        workout_name = extract_workout_name(line)
        if state is None:
            return Workout(workout_name=workout_name)
        return Workout(world=state.world, route=state.route, workout_name=workout_name)

    if COMPLETED_WORKOUT in line:
        if isinstance(state, Workout):
            return FreeRide(world=state.world, route=state.route)
        return state

    if PACER_JOINED in line:
        if state is None:
            return None
        return RoboPacer(
            world=state.world,
            route=state.route,
            pacer_name=extract_pacer_name(line),
        )

    if PACER_LEFT in line:
        if isinstance(state, RoboPacer):
            return FreeRide(world=state.world, route=state.route)
        return state

    if SETTING_ROUTE in line:
        if state is None:
            return None
        return replace(state, route=extract_route(line))

    return state


def transition(
    lines: Iterable[str], prior: ActivityState | None = None
) -> ActivityState | None:
    """Fold ``lines`` in order starting from ``prior``."""
    state = prior
    for line in lines:
        state = apply_line(state, line)
    return state
