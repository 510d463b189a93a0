"""Activity domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, Union


ActivityKind = Literal["free_ride", "workout", "robo_pacer", "event"]


@dataclass(frozen=True)
class FreeRide:
    kind: ClassVar[ActivityKind] = "free_ride"

    world: str | None = None
    route: str | None = None


@dataclass(frozen=True)
class Workout:
    kind: ClassVar[ActivityKind] = "workout"

    world: str | None = None
    route: str | None = None
    workout_name: str | None = None


@dataclass(frozen=True)
class RoboPacer:
    kind: ClassVar[ActivityKind] = "robo_pacer"

    world: str | None = None
    route: str | None = None
    pacer_name: str | None = None


@dataclass(frozen=True)
class Event:
    kind: ClassVar[ActivityKind] = "event"

    world: str | None = None
    route: str | None = None
    event_name: str | None = None


# None stands for "no activity" (idling in the menus or game closed).
ActivityState = Union[FreeRide, Workout, RoboPacer, Event]
