"""Game logs in the gob stream format."""

import struct
from datetime import datetime, timedelta, timezone

from peril.routing import GameLog


class GobError(ValueError):
    """A gob stream could not be encoded or decoded."""


_BOOL, _INT, _UINT, _FLOAT, _BYTES, _STRING = range(1, 7)
_GAME_LOG_ID, _TIME_ID = 65, 66
_FIELDS = (("CurrentTime", _TIME_ID), ("Message", _STRING), ("Username", _STRING))
_YEAR_ONE = datetime(1, 1, 1, tzinfo=timezone.utc)
_STRUCT, _GOB_ENCODER = 2, 4


def _uint(value):
    if value < 0x80:
        return bytes([value])
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return bytes([256 - len(raw)]) + raw


def _int(value):
    return _uint((~value << 1) | 1 if value < 0 else value << 1)


def _string(text):
    raw = text.encode("utf-8", "surrogateescape")
    return _uint(len(raw)) + raw


def _struct(fields):
    """Delta-encode the fields that are not None, then the terminator."""
    out, last = bytearray(), -1
    for index, data in enumerate(fields):
        if data is not None:
            out += _uint(index - last) + data
            last = index
    return bytes(out + b"\x00")


def _common(name, type_id):
    return _struct([_string(name), _int(type_id)])


def _marshal_time(moment):
    """The binary form of a timestamp, or None for the zero time."""
    try:
        if moment.tzinfo is None:
            moment = moment.astimezone()
        offset = moment.utcoffset() or timedelta(0)
        delta = moment - _YEAR_ONE
    except (OverflowError, ValueError) as exc:
        raise GobError(f"cannot encode time: {exc}") from exc
    if not delta:
        return None
    version, extra, offset_min = 1, b"", -1
    if moment.tzinfo is not timezone.utc:
        total = int(offset.total_seconds())
        offset_min = (-1 if total < 0 else 1) * (abs(total) // 60)
        remainder = total - offset_min * 60
        if remainder:
            version, extra = 2, struct.pack(">b", remainder)
        if offset_min == -1 or not -32768 <= offset_min <= 32767:
            raise GobError("unexpected zone offset")
    seconds = delta.days * 86400 + delta.seconds
    return struct.pack(">Bqih", version, seconds, delta.microseconds * 1000, offset_min) + extra


def encode_game_log(gamelog):
    """Encode a game log as a complete gob stream, type definitions first."""
    fields = b"".join(_common(name, tid) for name, tid in _FIELDS)
    log_type = _int(-_GAME_LOG_ID) + _struct(
        [None, None, _struct([_common("GameLog", _GAME_LOG_ID), _uint(len(_FIELDS)) + fields])]
    )
    time_type = _int(-_TIME_ID) + _struct([None] * 4 + [_struct([_common("Time", _TIME_ID)])])
    time_data = _marshal_time(gamelog.current_time)
    value = _int(_GAME_LOG_ID) + _struct([
        None if time_data is None else _uint(len(time_data)) + time_data,
        _string(gamelog.message) if gamelog.message else None,
        _string(gamelog.username) if gamelog.username else None,
    ])
    return b"".join(_uint(len(m)) + m for m in (log_type, time_type, value))


class _Reader:
    def __init__(self, data):
        self.data, self.pos = data, 0

    def take(self, count):
        if self.pos + count > len(self.data):
            raise GobError("unexpected end of gob data")
        self.pos += count
        return self.data[self.pos - count:self.pos]

    def uint(self):
        first = self.take(1)[0]
        if first < 0x80:
            return first
        if 256 - first > 8:
            raise GobError("invalid unsigned integer")
        return int.from_bytes(self.take(256 - first), "big")

    def int(self):
        value = self.uint()
        return ~(value >> 1) if value & 1 else value >> 1

    def bytes(self):
        return self.take(self.uint())

    def string(self):
        return self.bytes().decode("utf-8", "surrogateescape")

    def fields(self, readers):
        values, index = {}, -1
        while delta := self.uint():
            index += delta
            if index >= len(readers):
                raise GobError("field number out of range")
            values[index] = readers[index](self)
        return values


def _pair(reader):
    values = reader.fields((_Reader.string, _Reader.int))
    return values.get(0, ""), values.get(1, 0)


def _unsupported(reader):
    raise GobError("unsupported type definition")


def _read_wire_type(reader):
    """Return (kind, fields) for a struct or gob-encoder type definition."""
    def struct_type(r):
        values = r.fields((_pair, lambda r2: [_pair(r2) for _ in range(r2.uint())]))
        return _STRUCT, tuple(values.get(1, ()))

    def encoder_type(r):
        r.fields((_pair,))
        return _GOB_ENCODER, ()

    parts = reader.fields((_unsupported, _unsupported, struct_type, _unsupported,
                           encoder_type, _unsupported, _unsupported))
    if len(parts) != 1:
        raise GobError("invalid type definition")
    return next(iter(parts.values()))


_SCALARS = {
    _BOOL: lambda r: r.uint() != 0,
    _INT: _Reader.int,
    _UINT: _Reader.uint,
    _FLOAT: lambda r: struct.unpack(">d", r.uint().to_bytes(8, "little"))[0],
    _BYTES: _Reader.bytes,
    _STRING: _Reader.string,
}


def _field_reader(type_id, types):
    if type_id in _SCALARS:
        return _SCALARS[type_id]
    kind = types.get(type_id, (None,))[0]
    if kind == _GOB_ENCODER:
        return _Reader.bytes
    raise GobError(f"unsupported field type id {type_id}")


def _unmarshal_time(data):
    if not data:
        raise GobError("time: no data")
    if data[0] not in (1, 2):
        raise GobError("time: unsupported version")
    if len(data) != 14 + data[0]:
        raise GobError("time: invalid length")
    _, seconds, nanos, offset_min = struct.unpack_from(">Bqih", data)
    offset = offset_min * 60 + (struct.unpack_from(">b", data, 15)[0] if data[0] == 2 else 0)
    try:
        moment = _YEAR_ONE + timedelta(seconds=seconds, microseconds=nanos // 1000)
        if offset == -60:
            return moment
        return moment.astimezone(timezone(timedelta(seconds=offset)))
    except (OverflowError, ValueError) as exc:
        raise GobError(f"time out of range: {exc}") from exc


def decode_game_log(data):
    """Decode the first game log in a gob stream."""
    types = {}
    stream = _Reader(bytes(data))
    while True:
        if stream.pos >= len(stream.data):
            raise GobError("EOF")
        message = _Reader(stream.take(stream.uint()))
        type_id = message.int()
        if type_id < 0:
            if -type_id in types:
                raise GobError("duplicate type received")
            types[-type_id] = _read_wire_type(message)
            continue
        kind, fields = types.get(type_id, (None, ()))
        if kind != _STRUCT:
            raise GobError("type mismatch: GameLog expects a struct")
        wanted = dict(_FIELDS)
        matched = [(name, tid) for name, tid in fields if name in wanted]
        if not matched:
            raise GobError("type mismatch: no fields matched compiling decoder for GameLog")
        for name, tid in matched:
            ok = (types.get(tid, (None,))[0] == _GOB_ENCODER) if name == "CurrentTime" else tid == _STRING
            if not ok:
                raise GobError(f"type mismatch in field {name}")
        raw = message.fields([_field_reader(tid, types) for _, tid in fields])
        values = {fields[i][0]: v for i, v in raw.items()}
        raw_time = values.get("CurrentTime")
        return GameLog(
            current_time=_YEAR_ONE if raw_time is None else _unmarshal_time(raw_time),
            message=values.get("Message", ""),
            username=values.get("Username", ""),
        )