from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from peril.logs import format_log_line, write_log
from peril.routing import GameLog


def _log(message="hello", moment=None):
    moment = moment or datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    return GameLog(current_time=moment, message=message, username="alice")


def test_format_utc():
    assert format_log_line(_log()) == "2024-01-02T03:04:05Z alice: hello\n"


def test_format_with_offset():
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    assert format_log_line(_log(moment=moment)) == "2024-01-02T03:04:05+02:00 alice: hello\n"


def test_fractional_seconds_are_dropped():
    with_micro = datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)
    without = with_micro.replace(microsecond=0)
    assert format_log_line(_log(moment=with_micro)) == format_log_line(_log(moment=without))


@mock.patch("peril.logs.time.sleep")
def test_write_log_appends(sleep, tmp_path):
    path = tmp_path / "game.log"
    first, second = _log("first"), _log("second")
    write_log(first, path)
    write_log(second, path)
    assert path.read_text(encoding="utf-8") == format_log_line(first) + format_log_line(second)
    assert sleep.call_count == 2


@mock.patch("peril.logs.time.sleep")
def test_write_log_to_directory_fails(sleep, tmp_path):
    with pytest.raises(OSError):
        write_log(_log(), tmp_path)