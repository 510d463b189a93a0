"""Human-readable renderings of an activity state."""

from __future__ import annotations

from zpresence.zwift.model import ActivityState, Event, FreeRide, RoboPacer, Workout


def for_log(activity: ActivityState | None) -> str:
    """Concise ``key="value"`` rendering used in log messages."""
    if activity is None:
        return "idling"

    if isinstance(activity, Workout):
        name = activity.workout_name or "working hard"
        return f'workout name="{name}"'

    if isinstance(activity, RoboPacer):
        parts = [
            f'name="{activity.pacer_name}"' if activity.pacer_name else None,
            f'route="{activity.route}"' if activity.route else None,
        ]
        return _join_parts("robo_pacer", parts)

    if isinstance(activity, FreeRide):
        parts = [
            f'route="{activity.route}"' if activity.route else None,
            f'world="{activity.world}"' if activity.world else None,
        ]
        return _join_parts("free_ride", parts)

    if activity.event_name is None:
        return "event"
    return f'event name="{activity.event_name}"'


def for_discord(activity: ActivityState | None) -> tuple[str, str | None]:
    """Return ``(details, state)``: the top and bottom presence lines."""
    if activity is None:
        return "Idling", None

    if isinstance(activity, Workout):
        return activity.workout_name or "Working Hard", "Workout"

    if isinstance(activity, RoboPacer):
        name, route = activity.pacer_name, activity.route
        if name and route:
            details = f"{name} @ {route}"
        else:
            details = name or route or "RoboPacer"
        return details, "RoboPacer"

    if isinstance(activity, FreeRide):
        world, route = activity.world, activity.route
        if world and route:
            details = f"{route}, {world}"
        else:
            details = world or route or "Lost in Zwift"
        return details, "Free Ride"

    assert isinstance(activity, Event)
    return activity.event_name or "Event", "Event"


def _join_parts(label: str, parts: list[str | None]) -> str:
    present = [part for part in parts if part]
    if not present:
        return label
    return label + " " + " ".join(present)
