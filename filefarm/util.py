"""Socket I/O helpers, number parsing and the record wire format."""

from __future__ import annotations

import os
import re
import socket
import struct

PATH_FIELD_SIZE = 255
"""Bytes reserved for the NUL-padded path field of a record."""

LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1

_RECORD = struct.Struct(f"={PATH_FIELD_SIZE}sq")
RECORD_SIZE = _RECORD.size
"""Total size of one encoded record: path field followed by a 64-bit value."""

_NUMBER = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")


def read_exact(sock: socket.socket, size: int) -> bytes:
    """Read up to ``size`` bytes, stopping early only at end of stream.

    An error before any byte is read is raised; an error after some bytes
    arrived ends the read and returns what was received.
    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        try:
            chunk = sock.recv(remaining)
        except OSError:
            if remaining == size:
                raise
            break
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def write_all(sock: socket.socket, data: bytes) -> int:
    """Write all of ``data`` and return the number of bytes written.

    An error before any byte is written is raised; an error after a partial
    write ends the loop and the partial count is returned.
    """
    view = memoryview(data)
    total = len(view)
    written = 0
    while written < total:
        try:
            sent = sock.send(view[written:])
        except OSError:
            if written == 0:
                raise
            break
        if sent == 0:
            break
        written += sent
    return written


def parse_number(text: str | None) -> int:
    """Parse a base-10 integer that must fit a signed 64-bit long.

    Leading whitespace and a sign are accepted; anything after the digits is
    not. Raises ``ValueError`` for text that is not a number and
    ``OverflowError`` for a number outside the long range.
    """
    if text is None or not _NUMBER.fullmatch(text):
        raise ValueError(f"not a number: {text!r}")
    value = int(text.lstrip(" \t\n\v\f\r"))
    if not LONG_MIN <= value <= LONG_MAX:
        raise OverflowError(f"number out of range: {text!r}")
    return value


def encode_record(path: str | os.PathLike[str], value: int) -> bytes:
    """Encode a path and its value as one fixed-size record."""
    raw = os.fsencode(path)
    if b"\x00" in raw:
        raise ValueError("path contains a NUL byte")
    if len(raw) >= PATH_FIELD_SIZE:
        raise ValueError(f"path longer than {PATH_FIELD_SIZE - 1} bytes: {raw!r}")
    if not LONG_MIN <= value <= LONG_MAX:
        raise OverflowError(f"value out of range: {value}")
    return _RECORD.pack(raw, value)


def decode_record(data: bytes) -> tuple[str, int]:
    """Decode one record into its path and value."""
    if len(data) != RECORD_SIZE:
        raise ValueError(f"record must be {RECORD_SIZE} bytes, got {len(data)}")
    raw, value = _RECORD.unpack(data)
    path = os.fsdecode(raw.split(b"\x00", 1)[0])
    return path, value