"""Async Discord IPC client for Rich Presence updates."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence

from zpresence.ipc.constants import (
    CONNECT_TIMEOUT_SEC,
    OP_CLOSE,
    OP_FRAME,
    OP_HANDSHAKE,
    RECONNECT_DELAY_SEC,
    RECV_TIMEOUT_SEC,
    candidate_socket_paths,
)
from zpresence.ipc.protocol import (
    HEADER_SIZE,
    HandshakeError,
    IPCConnectionError,
    PresenceIPCError,
    PresenceSnapshot,
    ProtocolError,
    TransportNotImplementedError,
    build_activity,
    build_handshake,
    build_set_activity,
    decode_header,
    decode_payload,
    encode_frame,
    is_ready_event,
)

LOGGER = logging.getLogger("zpresence.ipc")

_CONNECT = "connect"
_UPDATE = "update"
_CLEAR = "clear"
_CLOSE = "close"

_Request = tuple[str, Optional[PresenceSnapshot]]


class PresenceResult(str, Enum):
    ACCEPTED = "accepted"
    DISCONNECTED = "disconnected"


class DiscordIPCClient:
    """Owns the Discord IPC socket; every socket operation runs on one task.

    Callers never block on the network: ``update_presence``/``clear_presence``
    only enqueue a request for the owner task. The last requested snapshot is
    kept and replayed after each successful (re)handshake.
    """

    def __init__(
        self,
        application_id: str,
        *,
        connect_timeout: float = CONNECT_TIMEOUT_SEC,
        recv_timeout: float = RECV_TIMEOUT_SEC,
        reconnect_delay: float = RECONNECT_DELAY_SEC,
        endpoints: Optional[Sequence[Path]] = None,
        platform: Optional[str] = None,
    ) -> None:
        self._application_id = application_id
        self._connect_timeout = connect_timeout
        self._recv_timeout = recv_timeout
        self._reconnect_delay = reconnect_delay
        self._endpoints = list(endpoints) if endpoints is not None else None
        self._platform = platform or sys.platform
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._connected = False
        self._snapshot: Optional[PresenceSnapshot] = None
        self._queue: Optional[asyncio.Queue[_Request]] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None
        self._closing = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def snapshot(self) -> Optional[PresenceSnapshot]:
        """Last requested snapshot (``None`` after a clear)."""
        return self._snapshot

    async def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._closing = False
        self._queue = asyncio.Queue()
        self._task = asyncio.create_task(self._run(), name="discord-ipc")
        self._queue.put_nowait((_CONNECT, None))
        LOGGER.info("initializing Discord RPC: app_id=%s", self._application_id)

    def update_presence(self, snapshot: PresenceSnapshot) -> PresenceResult:
        return self._submit(_UPDATE, snapshot)

    def clear_presence(self) -> PresenceResult:
        return self._submit(_CLEAR, None)

    async def wait_idle(self) -> None:
        """Wait until every queued request has been handled."""
        if self._queue is not None and self._task is not None and not self._task.done():
            await self._queue.join()

    async def close(self) -> None:
        """Send a Close frame if connected, then stop the owner task."""
        if self._task is None or self._queue is None:
            return
        if not self._task.done():
            self._queue.put_nowait((_CLOSE, None))
            await self._task
        self._task = None

    def _submit(self, op: str, snapshot: Optional[PresenceSnapshot]) -> PresenceResult:
        if self._queue is None or self._closing:
            self._snapshot = snapshot
            return PresenceResult.DISCONNECTED
        self._queue.put_nowait((op, snapshot))
        return PresenceResult.ACCEPTED if self._connected else PresenceResult.DISCONNECTED

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            op, snapshot = await self._queue.get()
            try:
                if op == _CLOSE:
                    await self._shutdown()
                    return
                try:
                    await self._dispatch(op, snapshot)
                except Exception:
                    LOGGER.exception("IPC request %r failed", op)
                    await self._drop_connection()
                    self._schedule_reconnect()
            finally:
                self._queue.task_done()

    async def _dispatch(self, op: str, snapshot: Optional[PresenceSnapshot]) -> None:
        if op == _CONNECT:
            await self._connect()
        elif op == _UPDATE:
            await self._apply(snapshot)
        elif op == _CLEAR:
            await self._apply(None)

    async def _connect(self) -> None:
        self._reconnect_handle = None
        if self._connected or self._closing:
            return

        try:
            reader, writer = await self._open_socket()
        except TransportNotImplementedError as exc:
            LOGGER.error("%s", exc)
            return
        except IPCConnectionError as exc:
            LOGGER.warning(
                "connection failed: %s, retrying in %.0fs", exc, self._reconnect_delay
            )
            self._schedule_reconnect()
            return

        self._reader, self._writer = reader, writer
        LOGGER.info("connected to Discord IPC")
        try:
            await self._handshake()
        except PresenceIPCError as exc:
            LOGGER.error("handshake failed: %s", exc)
            await self._drop_connection()
            self._schedule_reconnect()
            return

        self._connected = True
        LOGGER.info("handshake successful")
        if self._snapshot is not None:
            LOGGER.debug("resending last presence after handshake")
            await self._apply(self._snapshot)

    async def _open_socket(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        if self._platform.startswith("win"):
            raise TransportNotImplementedError(
                "Discord named pipe transport is not implemented on Windows"
            )

        paths = self._endpoints if self._endpoints is not None else candidate_socket_paths()
        failures: list[str] = []
        for path in paths:
            try:
                if not path.exists():
                    continue
                return await asyncio.wait_for(
                    asyncio.open_unix_connection(str(path)),
                    timeout=self._connect_timeout,
                )
            except (OSError, asyncio.TimeoutError) as exc:
                LOGGER.debug("IPC endpoint %s refused: %r", path, exc)
                failures.append(str(path))

        if failures:
            raise IPCConnectionError(f"no IPC endpoint accepted ({', '.join(failures)})")
        raise IPCConnectionError("no Discord IPC socket found")

    async def _handshake(self) -> None:
        await self._write(OP_HANDSHAKE, build_handshake(self._application_id))
        _opcode, message = await self._read_message(self._recv_timeout)
        if not is_ready_event(message):
            raise HandshakeError(
                f"unexpected response cmd={message.get('cmd')!r} evt={message.get('evt')!r}"
            )

    async def _apply(self, snapshot: Optional[PresenceSnapshot]) -> None:
        self._snapshot = snapshot
        if not self._connected:
            LOGGER.debug("presence update held: not connected")
            return

        activity = build_activity(snapshot) if snapshot is not None else None
        payload = build_set_activity(activity)
        LOGGER.debug("sending presence: %s", payload)
        try:
            await self._write(OP_FRAME, payload)
            response = await self._read_response(payload["nonce"])
        except PresenceIPCError as exc:
            LOGGER.error("presence send failed: %s", exc)
            await self._drop_connection()
            self._schedule_reconnect()
            return

        if response.get("evt") == "ERROR":
            LOGGER.warning("Discord rejected presence: %s", response.get("data"))
        elif snapshot is None:
            LOGGER.info("presence cleared")
        else:
            LOGGER.info("presence updated: %s", snapshot.details)

    async def _read_response(self, nonce: str) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._recv_timeout
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise IPCConnectionError("timed out waiting for presence response")
            _opcode, message = await self._read_message(remaining)
            if message.get("nonce") == nonce:
                return message
            LOGGER.debug("ignoring uncorrelated frame: cmd=%s", message.get("cmd"))

    async def _read_message(self, timeout: float) -> tuple[int, dict[str, Any]]:
        if self._reader is None:
            raise IPCConnectionError("not connected")
        try:
            header = await asyncio.wait_for(
                self._reader.readexactly(HEADER_SIZE), timeout=timeout
            )
            opcode, length = decode_header(header)
            body = await asyncio.wait_for(self._reader.readexactly(length), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise IPCConnectionError("timed out reading from Discord") from exc
        except (asyncio.IncompleteReadError, OSError) as exc:
            raise IPCConnectionError(f"socket read failed: {exc!r}") from exc

        if opcode == OP_CLOSE:
            raise ProtocolError(f"Discord closed the connection: {body[:200]!r}")
        return opcode, decode_payload(body)

    async def _write(self, opcode: int, payload: dict[str, Any]) -> None:
        if self._writer is None:
            raise IPCConnectionError("not connected")
        try:
            self._writer.write(encode_frame(opcode, payload))
            await asyncio.wait_for(self._writer.drain(), timeout=self._recv_timeout)
        except (OSError, asyncio.TimeoutError) as exc:
            raise IPCConnectionError(f"socket write failed: {exc!r}") from exc

    async def _drop_connection(self) -> None:
        self._connected = False
        writer = self._writer
        self._reader = None
        self._writer = None
        if writer is None:
            return
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()

    def _schedule_reconnect(self) -> None:
        if self._closing or self._queue is None or self._reconnect_handle is not None:
            return
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(
            self._reconnect_delay, self._queue.put_nowait, (_CONNECT, None)
        )

    async def _shutdown(self) -> None:
        self._closing = True
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None
        if self._connected:
            try:
                await self._write(OP_CLOSE, {})
            except IPCConnectionError as exc:
                LOGGER.warning("close send failed: %s", exc)
        await self._drop_connection()
