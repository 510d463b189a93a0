"""Async monitor that mirrors Zwift activity to Discord presence."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
import time
from datetime import datetime, timezone
from typing import Callable

from zpresence.core.config import PresenceConfig
from zpresence.core.presence import build_snapshot
from zpresence.core.process import always_running, is_zwift_running
from zpresence.core.state import MonitorState, MonitorStatus
from zpresence.ipc.discord_client import DiscordIPCClient
from zpresence.zwift.formatter import for_log
from zpresence.zwift.model import ActivityState
from zpresence.zwift.parser import transition
from zpresence.zwift.poller import LogPoller

LOGGER = logging.getLogger("zpresence.monitor")


class PresenceEngine:
    def __init__(
        self,
        config: PresenceConfig,
        client: DiscordIPCClient | None = None,
        process_probe: Callable[[], bool] | None = None,
        poller: LogPoller | None = None,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._client = client or DiscordIPCClient(config.application_id)
        if process_probe is None:
            process_probe = always_running if config.test_mode else is_zwift_running
        self._process_probe = process_probe
        self._poller = poller or LogPoller(config.log_path)
        self._clock = clock
        self._rng = rng or random.Random()
        self.state = MonitorState()
        self._stop_event = asyncio.Event()

    async def run(self) -> None:
        await self._client.start()
        LOGGER.info("Zwift monitor started")
        try:
            while not self._stop_event.is_set():
                await self.tick()
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(
                        self._stop_event.wait(),
                        timeout=self._config.check_interval_sec,
                    )
        finally:
            await self._client.close()
            LOGGER.info("Zwift monitor stopped")

    def stop(self) -> None:
        self._stop_event.set()

    def status(self) -> MonitorStatus:
        return MonitorStatus(
            game_running=self.state.game_running,
            current_activity=self.state.current_activity,
            activity_start_time=self.state.activity_start_time,
            discord_connected=self._client.is_connected,
        )

    async def tick(self) -> None:
        """Run one liveness/poll/diff/update cycle."""
        was_running = self.state.game_running
        is_running = await asyncio.to_thread(self._process_probe)

        if is_running and not was_running:
            await self._on_game_started()
        elif is_running:
            await self._on_game_running()
        elif was_running:
            self._on_game_stopped()

        self.state.last_check = datetime.now(tz=timezone.utc)

    async def _on_game_started(self) -> None:
        LOGGER.info("Zwift started")
        self._poller.reset()
        activity = await self._read_activity(self.state.current_activity)
        start_time = self._now()

        self.state.game_running = True
        self.state.current_activity = activity
        self.state.activity_start_time = start_time
        self._publish(activity, start_time)

    async def _on_game_running(self) -> None:
        previous = self.state.current_activity
        activity = await self._read_activity(previous)

        if activity is None:
            start_time = None
        elif previous is None:
            start_time = self._now()
        else:
            start_time = self.state.activity_start_time

        self.state.current_activity = activity
        self.state.activity_start_time = start_time
        if activity != previous:
            LOGGER.info("activity changed: %s", for_log(activity))
            LOGGER.debug("activity details: %r", activity)
            self._publish(activity, start_time)

    def _on_game_stopped(self) -> None:
        LOGGER.info("Zwift stopped")
        self._client.clear_presence()
        self.state.game_running = False
        self.state.current_activity = None
        self.state.activity_start_time = None

    async def _read_activity(
        self, current: ActivityState | None
    ) -> ActivityState | None:
        lines = await asyncio.to_thread(self._poller.poll)
        if not lines:
            return current
        return transition(lines, current)

    def _publish(self, activity: ActivityState | None, start_time: int | None) -> None:
        snapshot = build_snapshot(activity, start_time, rng=self._rng)
        LOGGER.debug("updating Discord presence: %r", snapshot)
        result = self._client.update_presence(snapshot)
        LOGGER.debug("presence request %s", result.value)

    def _now(self) -> int:
        return int(self._clock())
