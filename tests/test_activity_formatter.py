from __future__ import annotations

from zpresence.zwift.formatter import for_discord, for_log
from zpresence.zwift.model import Event, FreeRide, RoboPacer, Workout


def test_for_log_idle_and_workout() -> None:
    assert for_log(None) == "idling"
    assert for_log(Workout(workout_name="FTP Test")) == 'workout name="FTP Test"'
    assert for_log(Workout()) == 'workout name="working hard"'


def test_for_log_free_ride_parts() -> None:
    assert (
        for_log(FreeRide(world="Watopia", route="Volcano Circuit"))
        == 'free_ride route="Volcano Circuit" world="Watopia"'
    )
    assert for_log(FreeRide(world="Watopia")) == 'free_ride world="Watopia"'
    assert for_log(FreeRide(route="Volcano Circuit")) == 'free_ride route="Volcano Circuit"'
    assert for_log(FreeRide()) == "free_ride"


def test_for_log_robo_pacer_parts() -> None:
    assert (
        for_log(RoboPacer(pacer_name="Coco", route="Flat Route"))
        == 'robo_pacer name="Coco" route="Flat Route"'
    )
    assert for_log(RoboPacer(pacer_name="Coco")) == 'robo_pacer name="Coco"'
    assert for_log(RoboPacer(route="Flat Route")) == 'robo_pacer route="Flat Route"'
    assert for_log(RoboPacer()) == "robo_pacer"


def test_for_log_event() -> None:
    assert for_log(Event()) == "event"
    assert for_log(Event(event_name="Tour de Zwift")) == 'event name="Tour de Zwift"'


def test_for_discord_idle_and_workout() -> None:
    assert for_discord(None) == ("Idling", None)
    assert for_discord(Workout(workout_name="FTP Test")) == ("FTP Test", "Workout")
    assert for_discord(Workout()) == ("Working Hard", "Workout")


def test_for_discord_robo_pacer() -> None:
    assert for_discord(RoboPacer(pacer_name="Coco", route="Flat Route")) == (
        "Coco @ Flat Route",
        "RoboPacer",
    )
    assert for_discord(RoboPacer(pacer_name="Coco")) == ("Coco", "RoboPacer")
    assert for_discord(RoboPacer(route="Flat Route")) == ("Flat Route", "RoboPacer")
    assert for_discord(RoboPacer()) == ("RoboPacer", "RoboPacer")


def test_for_discord_free_ride() -> None:
    assert for_discord(FreeRide(world="Watopia", route="Volcano Circuit")) == (
        "Volcano Circuit, Watopia",
        "Free Ride",
    )
    assert for_discord(FreeRide(world="Watopia")) == ("Watopia", "Free Ride")
    assert for_discord(FreeRide(route="Volcano Circuit")) == ("Volcano Circuit", "Free Ride")
    assert for_discord(FreeRide()) == ("Lost in Zwift", "Free Ride")


def test_for_discord_event() -> None:
    assert for_discord(Event(event_name="Group Ride")) == ("Group Ride", "Event")
    assert for_discord(Event()) == ("Event", "Event")
