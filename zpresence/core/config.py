"""Runtime configuration, built once at startup and passed explicitly."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

LOGGER = logging.getLogger("zpresence.config")

DEFAULT_CHECK_INTERVAL_SEC = 5
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")


class ConfigError(ValueError):
    """Raised when the startup configuration is unusable."""


def default_log_path() -> Path:
    return Path.home() / "Documents" / "Zwift" / "Logs" / "Log.txt"


@dataclass(frozen=True)
class PresenceConfig:
    application_id: str
    check_interval_sec: int = DEFAULT_CHECK_INTERVAL_SEC
    log_path: Path = field(default_factory=default_log_path)
    log_level: str = DEFAULT_LOG_LEVEL
    test_mode: bool = False


def build_config(
    *,
    application_id: str | None,
    check_interval_sec: int | None = None,
    log_path: str | Path | None = None,
    log_level: str | None = None,
    test_mode: bool = False,
) -> PresenceConfig:
    app_id = (application_id or "").strip()
    if not app_id:
        raise ConfigError("--app-id required")

    interval = DEFAULT_CHECK_INTERVAL_SEC if check_interval_sec is None else check_interval_sec
    if interval <= 0:
        raise ConfigError("check interval must be > 0 seconds")

    level = DEFAULT_LOG_LEVEL
    if log_level is not None:
        normalized = log_level.strip().lower()
        if normalized in LOG_LEVELS:
            level = normalized
        else:
            LOGGER.warning("invalid log level '%s', using '%s'", log_level, DEFAULT_LOG_LEVEL)

    return PresenceConfig(
        application_id=app_id,
        check_interval_sec=interval,
        log_path=Path(log_path).expanduser() if log_path else default_log_path(),
        log_level=level,
        test_mode=test_mode,
    )
