"""Appending received game logs to disk."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from os import PathLike

from peril.routing import GameLog

LOGS_FILE = "game.log"
WRITE_TO_DISK_SLEEP = 1.0

_log = logging.getLogger(__name__)


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.replace(microsecond=0).isoformat()
    if moment.utcoffset() == timezone.utc.utcoffset(None):
        text = text[: -len("+00:00")] + "Z"
    return text


def format_log_line(gamelog: GameLog) -> str:
    """The line written to the log file for one game log."""
    return f"{_rfc3339(gamelog.current_time)} {gamelog.username}: {gamelog.message}\n"


def write_log(gamelog: GameLog, path: str | PathLike[str] = LOGS_FILE) -> None:
    """Append a game log to the log file, after a deliberate delay."""
    _log.info("received game log...")
    time.sleep(WRITE_TO_DISK_SLEEP)
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(format_log_line(gamelog))