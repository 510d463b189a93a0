"""Discord IPC wire format and presence payload builders.

Every message is ``opcode (u32 LE) || length (u32 LE) || UTF-8 JSON``.
"""

from __future__ import annotations

import json
import os
import secrets
import struct
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from zpresence.ipc.constants import IPC_PROTOCOL_VERSION

HEADER = struct.Struct("<II")
HEADER_SIZE = HEADER.size


class PresenceIPCError(RuntimeError):
    """Base class for Discord IPC failures."""


class IPCConnectionError(PresenceIPCError):
    """Socket could not be opened, or failed/timed out mid-exchange."""


class HandshakeError(PresenceIPCError):
    """Discord did not answer the handshake with a READY dispatch."""


class ProtocolError(PresenceIPCError):
    """Malformed frame, undecodable JSON or an unsolicited Close."""


class TransportNotImplementedError(PresenceIPCError):
    """The platform's transport (Windows named pipes) is not supported."""


@dataclass(frozen=True)
class PresenceSnapshot:
    details: Optional[str]
    state: Optional[str]
    start_timestamp: Optional[int] = None
    large_image: Optional[str] = None
    large_text: Optional[str] = None
    small_image: Optional[str] = None
    small_text: Optional[str] = None


def encode_frame(opcode: int, payload: Mapping[str, Any]) -> bytes:
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return HEADER.pack(opcode, len(body)) + body


def decode_header(header: bytes) -> tuple[int, int]:
    if len(header) != HEADER_SIZE:
        raise ProtocolError(
            f"Invalid frame header: expected {HEADER_SIZE} bytes, got {len(header)}"
        )
    opcode, length = HEADER.unpack(header)
    return opcode, length


def decode_payload(body: bytes) -> dict[str, Any]:
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(f"Invalid JSON payload: {exc}") from exc
    if not isinstance(data, dict):
        raise ProtocolError("Frame payload must be a JSON object")
    return data


def build_handshake(application_id: str) -> dict[str, Any]:
    return {"v": IPC_PROTOCOL_VERSION, "client_id": application_id}


def is_ready_event(message: Mapping[str, Any]) -> bool:
    return message.get("cmd") == "DISPATCH" and message.get("evt") == "READY"


def new_nonce() -> str:
    return secrets.token_hex(16)


def build_activity(snapshot: PresenceSnapshot) -> dict[str, Any]:
    """Build the ``activity`` object; empty fields are left out entirely."""
    activity: dict[str, Any] = {}
    if snapshot.details is not None:
        activity["details"] = snapshot.details
    if snapshot.state is not None:
        activity["state"] = snapshot.state
    if snapshot.start_timestamp is not None:
        activity["timestamps"] = {"start": snapshot.start_timestamp}

    assets = {
        key: value
        for key, value in (
            ("large_image", snapshot.large_image),
            ("large_text", snapshot.large_text),
            ("small_image", snapshot.small_image),
            ("small_text", snapshot.small_text),
        )
        if value is not None
    }
    if assets:
        activity["assets"] = assets
    return activity


def build_set_activity(
    activity: Optional[Mapping[str, Any]],
    *,
    pid: Optional[int] = None,
    nonce: Optional[str] = None,
) -> dict[str, Any]:
    """Wrap ``activity`` (``None`` clears the presence) in a SET_ACTIVITY command."""
    return {
        "cmd": "SET_ACTIVITY",
        "args": {
            "pid": os.getpid() if pid is None else pid,
            "activity": dict(activity) if activity is not None else None,
        },
        "nonce": nonce or new_nonce(),
    }
