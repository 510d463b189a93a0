"""Incremental reader for the append-only Zwift log."""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER = logging.getLogger("zpresence.poller")


def split_new_lines(content: bytes, offset: int) -> tuple[list[str], int]:
    """Return the lines appended after ``offset`` and the new offset.

    The new offset is the total byte length of ``content``. A file shorter than
    ``offset`` yields no lines and keeps the offset.
    """
    if offset > len(content):
        return [], offset
    new_bytes = content[offset:]
    if not new_bytes:
        return [], len(content)
    text = new_bytes.decode("utf-8", errors="replace")
    return text.split("\n"), len(content)


class LogPoller:
    """Tracks a byte offset into ``path`` and returns newly appended lines.

    Only newline-terminated lines are returned; a trailing fragment that Zwift
    is still writing is held back and joined with the next poll.
    """

    def __init__(self, path: Path, offset: int = 0) -> None:
        self.path = path
        self.offset = offset
        self._pending = ""

    def reset(self) -> None:
        self.offset = 0
        self._pending = ""

    def poll(self) -> list[str]:
        try:
            content = self.path.read_bytes()
        except OSError as exc:
            LOGGER.debug("log not readable (%s): %s", self.path, exc)
            return []

        lines, new_offset = split_new_lines(content, self.offset)
        if len(content) < self.offset:
            LOGGER.debug(
                "log shorter than cursor (%d < %d), waiting for new session",
                len(content),
                self.offset,
            )
        self.offset = new_offset
        if not lines:
            return []
        lines[0] = self._pending + lines[0]
        self._pending = lines.pop()
        return lines
