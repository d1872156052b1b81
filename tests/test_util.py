import socket

import pytest

from filefarm.util import (
    LONG_MAX,
    LONG_MIN,
    PATH_FIELD_SIZE,
    RECORD_SIZE,
    decode_record,
    encode_record,
    parse_number,
    read_exact,
    write_all,
)


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


def test_write_then_read_round_trip(pair):
    left, right = pair
    payload = bytes(range(256)) * 4
    assert write_all(left, payload) == len(payload)
    assert read_exact(right, len(payload)) == payload


def test_read_exact_stops_at_end_of_stream(pair):
    left, right = pair
    write_all(left, b"abc")
    left.shutdown(socket.SHUT_WR)
    assert read_exact(right, 10) == b"abc"


def test_read_exact_zero_bytes(pair):
    _, right = pair
    assert read_exact(right, 0) == b""


def test_read_exact_raises_when_nothing_read():
    left, right = socket.socketpair()
    right.close()
    left.close()
    with pytest.raises(OSError):
        read_exact(left, 4)


def test_write_all_raises_when_nothing_written():
    left, right = socket.socketpair()
    right.close()
    left.close()
    with pytest.raises(OSError):
        write_all(left, b"data")


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("  -7", -7), ("+15", 15), ("0", 0)],
)
def test_parse_number_accepts(text, expected):
    assert parse_number(text) == expected


def test_parse_number_limits():
    assert parse_number(str(LONG_MAX)) == LONG_MAX
    assert parse_number(str(LONG_MIN)) == LONG_MIN


@pytest.mark.parametrize("text", [None, "", "   ", "12a", "1 ", "0x10", "1_000", "-"])
def test_parse_number_rejects(text):
    with pytest.raises(ValueError):
        parse_number(text)


@pytest.mark.parametrize("text", [str(LONG_MAX + 1), str(LONG_MIN - 1)])
def test_parse_number_overflow(text):
    with pytest.raises(OverflowError):
        parse_number(text)


def test_record_layout():
    data = encode_record("a", 1)
    assert len(data) == RECORD_SIZE
    assert RECORD_SIZE == PATH_FIELD_SIZE + 8
    assert data[:2] == b"a\x00"
    assert data[1:PATH_FIELD_SIZE] == b"\x00" * (PATH_FIELD_SIZE - 1)


@pytest.mark.parametrize(
    "path, value",
    [("./data/file1.dat", 12345), ("x.dat", -9), ("d/e.dat", LONG_MAX), ("f.dat", LONG_MIN)],
)
def test_record_round_trip(path, value):
    assert decode_record(encode_record(path, value)) == (path, value)


def test_record_accepts_longest_path():
    path = "p" * (PATH_FIELD_SIZE - 1)
    assert decode_record(encode_record(path, 3)) == (path, 3)


def test_record_rejects_too_long_path():
    with pytest.raises(ValueError):
        encode_record("p" * PATH_FIELD_SIZE, 0)


def test_record_rejects_nul_in_path():
    with pytest.raises(ValueError):
        encode_record("a\x00b", 0)


def test_record_rejects_value_out_of_range():
    with pytest.raises(OverflowError):
        encode_record("a.dat", LONG_MAX + 1)


def test_decode_rejects_wrong_size():
    with pytest.raises(ValueError):
        decode_record(b"\x00" * (RECORD_SIZE - 1))


def test_record_over_socket(pair):
    left, right = pair
    write_all(left, encode_record("dir/file.dat", 77))
    assert decode_record(read_exact(right, RECORD_SIZE)) == ("dir/file.dat", 77)