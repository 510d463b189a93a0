"""Translate activity states into Discord presence snapshots."""

from __future__ import annotations

import random

from zpresence.ipc.protocol import PresenceSnapshot
from zpresence.zwift.formatter import for_discord
from zpresence.zwift.model import ActivityState

LOGO_IMAGE = "zwift_logo"
IDLE_STATE = "Idling"

# Only worlds with uploaded Discord art assets.
WORLD_IMAGES: dict[str, str] = {
    "makuri islands": "world_makuri",
    "new york": "world_newyork",
    "watopia": "world_watopia",
}

IDLE_MESSAGES: tuple[str, ...] = (
    "Adjusting bike seat",
    "Adjusting fan speed",
    "Admiring the garage setup",
    "Browsing the map",
    "Choosing a route",
    "Filling water bottles",
    "Picking a kit",
    "Psyching up",
    "Queuing up music",
    "Selecting a bike",
    "Warming up",
)


def world_image(world: str | None) -> str | None:
    if not world:
        return None
    return WORLD_IMAGES.get(world.lower())


def build_snapshot(
    activity: ActivityState | None,
    start_time: int | None,
    rng: random.Random | None = None,
) -> PresenceSnapshot:
    if activity is None:
        picker = rng or random.Random()
        return PresenceSnapshot(
            details=picker.choice(IDLE_MESSAGES),
            state=IDLE_STATE,
            start_timestamp=start_time,
            large_image=LOGO_IMAGE,
            large_text=picker.choice(IDLE_MESSAGES),
        )

    details, state = for_discord(activity)
    image = world_image(activity.world)
    if image is None:
        return PresenceSnapshot(
            details=details,
            state=state,
            start_timestamp=start_time,
            large_image=LOGO_IMAGE,
        )
    return PresenceSnapshot(
        details=details,
        state=state,
        start_timestamp=start_time,
        large_image=image,
        large_text=activity.world,
        small_image=LOGO_IMAGE,
    )
