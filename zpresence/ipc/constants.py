"""Discord IPC constants and endpoint discovery helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

# Frame opcodes
OP_HANDSHAKE = 0
OP_FRAME = 1
OP_CLOSE = 2

IPC_PROTOCOL_VERSION = 1
IPC_ENDPOINT_COUNT = 10
IPC_SOCKET_PREFIX = "discord-ipc-"

CONNECT_TIMEOUT_SEC = 1.0
RECV_TIMEOUT_SEC = 5.0
RECONNECT_DELAY_SEC = 5.0

FALLBACK_RUNTIME_DIR = "/tmp"
RUNTIME_DIR_ENV_VARS: tuple[str, ...] = ("XDG_RUNTIME_DIR", "TMPDIR", "TMP", "TEMP")


def resolve_runtime_dir(env: Mapping[str, str] | None = None) -> str:
    """Return the first non-empty runtime directory variable, else ``/tmp``."""
    source = os.environ if env is None else env
    for name in RUNTIME_DIR_ENV_VARS:
        value = source.get(name)
        if value:
            return value
    return FALLBACK_RUNTIME_DIR


def candidate_socket_paths(env: Mapping[str, str] | None = None) -> list[Path]:
    """List Discord IPC socket paths in connection order."""
    runtime_dir = resolve_runtime_dir(env).rstrip("/") or "/"
    out: list[Path] = []
    seen: set[Path] = set()
    for index in range(IPC_ENDPOINT_COUNT):
        for base in (runtime_dir, FALLBACK_RUNTIME_DIR):
            path = Path(base) / f"{IPC_SOCKET_PREFIX}{index}"
            if path in seen:
                continue
            seen.add(path)
            out.append(path)
    return out
