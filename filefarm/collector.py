"""Collect (path, value) records from workers and print them sorted by value."""

from __future__ import annotations

import argparse
import bisect
import logging
import os
import selectors
import socket
import sys
from dataclasses import dataclass
from typing import Iterator

from filefarm.util import RECORD_SIZE, decode_record, read_exact

DEFAULT_SOCKET = "./farm.sck"
DEFAULT_TIMEOUT = 3.0
BACKLOG = 10

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    """A file path with the value computed for it."""

    path: str
    value: int


class OrderedList:
    """Records kept in ascending order of value; equal values keep arrival order."""

    def __init__(self) -> None:
        self._records: list[Record] = []

    def add(self, record: Record) -> None:
        """Insert ``record`` after every record whose value is not greater."""
        bisect.insort_right(self._records, record, key=lambda r: r.value)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def format(self) -> str:
        """Render the list the way the collector prints it."""
        lines = ["Ordered List:"]
        lines.extend(f"Value: {r.value}, Path: {r.path}" for r in self._records)
        return "\n".join(lines) + "\n"


class Collector:
    """Accept one record per connection on a Unix socket until idle for ``timeout``."""

    def __init__(self, socket_path: str = DEFAULT_SOCKET, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.socket_path = socket_path
        self.timeout = timeout

    def serve(self) -> OrderedList:
        """Listen, gather records and return them once no activity is seen."""
        records = OrderedList()
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as server, \
                selectors.DefaultSelector() as selector:
            server.bind(self.socket_path)
            try:
                server.listen(BACKLOG)
                selector.register(server, selectors.EVENT_READ)
                while True:
                    events = selector.select(self.timeout)
                    if not events:
                        break
                    for key, _ in events:
                        sock = key.fileobj
                        if sock is server:
                            self._accept(server, selector)
                        else:
                            selector.unregister(sock)
                            with sock:
                                self._receive(sock, records)
            finally:
                for key in list(selector.get_map().values()):
                    if key.fileobj is not server:
                        key.fileobj.close()
                os.unlink(self.socket_path)
        return records

    @staticmethod
    def _accept(server: socket.socket, selector: selectors.BaseSelector) -> None:
        try:
            conn, _ = server.accept()
        except OSError as exc:
            _log.warning("accept failed: %s", exc)
            return
        selector.register(conn, selectors.EVENT_READ)

    @staticmethod
    def _receive(conn: socket.socket, records: OrderedList) -> None:
        data = read_exact(conn, RECORD_SIZE)
        if len(data) != RECORD_SIZE:
            _log.warning("incomplete record of %d bytes discarded", len(data))
            return
        path, value = decode_record(data)
        records.add(Record(path, value))


def main(argv: list[str] | None = None) -> int:
    """Run the collector and print the ordered records."""
    parser = argparse.ArgumentParser(prog="collector", description=__doc__)
    parser.add_argument("--socket", default=DEFAULT_SOCKET, help="Unix socket path")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help="seconds of inactivity before stopping")
    args = parser.parse_args(argv)
    try:
        records = Collector(args.socket, args.timeout).serve()
    except OSError as exc:
        print(f"collector: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(records.format())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())