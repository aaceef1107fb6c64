from datetime import datetime, timedelta, timezone

import pytest

from peril.gob import GobError, decode_game_log, encode_game_log
from peril.routing import GameLog

TIME_DEFINITION = b"\x10\xff\x83\x05\x01\x01\x04Time\x01\xff\x84\x00\x00\x00"


def test_round_trip_utc():
    log = GameLog(
        datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone.utc), "attack!", "alice"
    )
    decoded = decode_game_log(encode_game_log(log))
    assert decoded == log
    assert decoded.current_time.tzinfo is timezone.utc


def test_round_trip_fixed_offset():
    zone = timezone(timedelta(hours=5, minutes=30))
    log = GameLog(datetime(2023, 1, 2, 3, 4, 5, tzinfo=zone), "hello", "bob")
    decoded = decode_game_log(encode_game_log(log))
    assert decoded == log
    assert decoded.current_time.utcoffset() == timedelta(hours=5, minutes=30)


def test_round_trip_sub_minute_offset():
    zone = timezone(timedelta(hours=1, seconds=30))
    log = GameLog(datetime(2020, 6, 7, 8, 9, 10, tzinfo=zone), "m", "u")
    decoded = decode_game_log(encode_game_log(log))
    assert decoded.current_time.utcoffset() == timedelta(hours=1, seconds=30)
    assert decoded == log


def test_round_trip_non_ascii_and_empty_strings():
    log = GameLog(datetime(2022, 2, 2, tzinfo=timezone.utc), "", "jürgen ┻━┻")
    assert decode_game_log(encode_game_log(log)) == log


def test_naive_time_is_local():
    moment = datetime(2021, 3, 4, 5, 6, 7)
    decoded = decode_game_log(encode_game_log(GameLog(moment, "x", "y")))
    assert decoded.current_time == moment.astimezone()


def test_zero_time_round_trip():
    log = GameLog(datetime(1, 1, 1, tzinfo=timezone.utc), "msg", "user")
    decoded = decode_game_log(encode_game_log(log))
    assert decoded.current_time == datetime(1, 1, 1, tzinfo=timezone.utc)
    assert decoded.message == "msg"


def test_stream_holds_time_definition():
    data = encode_game_log(GameLog(datetime(2024, 1, 1, tzinfo=timezone.utc), "a", "b"))
    assert TIME_DEFINITION in data


def test_epoch_time_payload():
    data = encode_game_log(GameLog(datetime(1970, 1, 1, tzinfo=timezone.utc), "a", "b"))
    assert b"\x0f\x01\x00\x00\x00\x0e\x77\x91\xf7\x00\x00\x00\x00\x00\xff\xff" in data


def test_encoding_is_deterministic():
    log = GameLog(datetime(2024, 1, 1, tzinfo=timezone.utc), "a", "b")
    first = encode_game_log(log)
    second = encode_game_log(log)
    assert first == second
    assert TIME_DEFINITION in first
    assert decode_game_log(second) == GameLog(
        datetime(2024, 1, 1, tzinfo=timezone.utc), "a", "b"
    )


def test_empty_stream_fails():
    with pytest.raises(GobError):
        decode_game_log(b"")


def test_truncated_stream_fails():
    data = encode_game_log(GameLog(datetime(2024, 1, 1, tzinfo=timezone.utc), "a", "b"))
    with pytest.raises(GobError):
        decode_game_log(data[:-3])


def test_struct_without_matching_fields_fails():
    definition = b"\xff\x81\x03\x01\x01\x05Other\x01\xff\x82\x00\x01\x01\x01\x01X\x01\x04\x00\x00\x00"
    value = b"\xff\x82\x01\x06\x00"
    data = bytes([len(definition)]) + definition + bytes([len(value)]) + value
    with pytest.raises(GobError):
        decode_game_log(data)


def test_minus_one_minute_offset_is_rejected():
    zone = timezone(timedelta(minutes=-1))
    with pytest.raises(GobError):
        encode_game_log(GameLog(datetime(2024, 1, 1, tzinfo=zone), "a", "b"))