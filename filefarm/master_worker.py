"""Compute weighted sums of .dat files on a thread pool and send them to the collector."""

from __future__ import annotations

import getopt
import logging
import os
import socket
import struct
import sys
import time
from dataclasses import dataclass, field
from typing import Iterator

from filefarm.threadpool import ThreadPool
from filefarm.util import encode_record, parse_number, write_all

DAT_EXTENSION = ".dat"
DEFAULT_SOCKET = "./farm.sck"

_LONG = struct.Struct("=q")
_log = logging.getLogger(__name__)


@dataclass
class Options:
    """Settings of a master-worker run."""

    threads: int = 4
    queue_size: int = 8
    directory: str | None = None
    delay_ms: int = 0
    files: list[str] = field(default_factory=list)
    socket_path: str = DEFAULT_SOCKET
    startup_delay: float = 1.0


def _wrap_long(value: int) -> int:
    return (value + 2**63) % 2**64 - 2**63


def weighted_sum(path: str | os.PathLike[str]) -> int:
    """Sum each 64-bit value of the file times its 1-based position.

    Trailing bytes that do not form a whole value are ignored; the sum wraps
    like a signed 64-bit integer.
    """
    with open(path, "rb") as fp:
        data = fp.read()
    usable = len(data) - len(data) % _LONG.size
    total = sum(
        value * position
        for position, (value,) in enumerate(_LONG.iter_unpack(data[:usable]), start=1)
    )
    return _wrap_long(total)


def is_dat_file(name: str) -> bool:
    """Tell whether ``name`` ends in ``.dat`` and has something before it."""
    return len(name) > len(DAT_EXTENSION) and name.endswith(DAT_EXTENSION)


def find_dat_files(directory: str) -> Iterator[str]:
    """Yield paths of regular .dat files under ``directory``, recursively.

    Directories that cannot be opened are reported and skipped.
    """
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        _log.warning("cannot open directory %s: %s", directory, exc)
        return
    for entry in entries:
        path = f"{directory}/{entry.name}"
        if entry.is_dir(follow_symlinks=False):
            yield from find_dat_files(path)
        elif entry.is_file(follow_symlinks=False) and is_dat_file(entry.name):
            yield path


def send_result(socket_path: str, path: str, value: int) -> None:
    """Send one record to the collector listening on ``socket_path``."""
    payload = encode_record(path, value)
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
        client.connect(socket_path)
        if write_all(client, payload) != len(payload):
            raise OSError(f"short write sending result for {path}")


def process_file(path: str, socket_path: str = DEFAULT_SOCKET) -> int:
    """Compute the weighted sum of ``path``, send it and return it."""
    value = weighted_sum(path)
    send_result(socket_path, path, value)
    return value


def _positive(flag: str, text: str) -> int:
    try:
        value = parse_number(text)
    except (ValueError, OverflowError):
        raise ValueError(f"-{flag} needs a number, got {text!r}") from None
    if value < 1:
        raise ValueError(f"-{flag} must be at least 1")
    return value


def parse_args(argv: list[str]) -> Options:
    """Parse ``-n threads -q queue -d directory -t delay_ms`` and file names."""
    if not argv:
        raise ValueError("invalid argument: nothing to do")
    try:
        opts, files = getopt.gnu_getopt(argv, "n:q:d:t:")
    except getopt.GetoptError as exc:
        raise ValueError(str(exc)) from None
    options = Options(files=list(files))
    for flag, value in opts:
        if flag == "-n":
            options.threads = _positive("n", value)
        elif flag == "-q":
            options.queue_size = _positive("q", value)
        elif flag == "-d":
            options.directory = value
        elif flag == "-t":
            try:
                delay = parse_number(value)
            except (ValueError, OverflowError):
                raise ValueError(f"-t needs a number, got {value!r}") from None
            if delay < 0:
                raise ValueError("-t must not be negative")
            options.delay_ms = delay
    return options


def run(options: Options) -> list[str]:
    """Process every .dat file named or found and return the submitted paths."""
    if options.startup_delay > 0:
        time.sleep(options.startup_delay)
    submitted: list[str] = []
    with ThreadPool(options.threads, options.queue_size) as pool:

        def dispatch(path: str) -> None:
            pool.submit(process_file, path, options.socket_path)
            submitted.append(path)
            if options.delay_ms:
                time.sleep(options.delay_ms / 1000)

        for name in options.files:
            if is_dat_file(name):
                dispatch(name)
        if options.directory is not None:
            for path in find_dat_files(options.directory):
                dispatch(path)
    return submitted


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point; ``argv`` excludes the program name."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        options = parse_args(argv)
    except ValueError as exc:
        print(f"masterWorker: {exc}", file=sys.stderr)
        return 1
    run(options)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())