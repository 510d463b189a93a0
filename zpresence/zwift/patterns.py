"""Zwift Log.txt marker strings for activity state detection."""

from __future__ import annotations

DISCARD_ACTIVITY = "DeleteCurrentActivity with {activityName:"
END_ACTIVITY = "[SaveActivityService] EndCurrentActivity with {activityName:"
SAVE_ACTIVITY = (
    "[SaveActivityService] ZNet::SaveActivity calling "
    "zwift_network::save_activity with {name:"
)
SET_WORKOUT = "[Workouts] WorkoutDatabase::SetActiveWorkout("
COMPLETED_WORKOUT = "[Workouts] WorkoutDatabase::HandleEvent(COMPLETED_WORKOUT)"
# Zwift renamed "Pace Partner" to "RoboPacer" but the log still uses the old name.
PACER_JOINED = "Sending PacePartnerJoined structured event for"
PACER_LEFT = "Sending PacePartnerLeft structured event for"
SETTING_ROUTE = "[Route] Setting Route:"

# Periodic autosave; the final upload after EndCurrentActivity says True.
AUTOSAVE_MARKER = "uploadTo3P: False"

# Rule order matters: the first matching key wins.
LOG_PATTERNS: dict[str, str] = {
    "discard_activity": DISCARD_ACTIVITY,
    "end_activity": END_ACTIVITY,
    "save_activity": SAVE_ACTIVITY,
    "set_workout": SET_WORKOUT,
    "completed_workout": COMPLETED_WORKOUT,
    "pacer_joined": PACER_JOINED,
    "pacer_left": PACER_LEFT,
    "setting_route": SETTING_ROUTE,
}


def classify_line(line: str) -> str | None:
    """Return the first pattern key contained in ``line``, if any."""
    for key, marker in LOG_PATTERNS.items():
        if marker in line:
            return key
    return None


def is_autosave(line: str) -> bool:
    return AUTOSAVE_MARKER in line
