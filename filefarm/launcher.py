"""Start the master-worker and the collector as separate processes."""

from __future__ import annotations

import subprocess
import sys

USAGE = "Usage: farm [masterWorker arguments...]"


def build_commands(argv: list[str]) -> tuple[list[str], list[str]]:
    """Return the master-worker and collector command lines for ``argv``."""
    if not argv:
        raise ValueError(USAGE)
    master = [sys.executable, "-m", "filefarm.master_worker", *argv]
    collector = [sys.executable, "-m", "filefarm.collector"]
    return master, collector


def main(argv: list[str] | None = None) -> int:
    """Run both processes and return the collector's exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        master_cmd, collector_cmd = build_commands(argv)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    master = subprocess.Popen(master_cmd)
    try:
        collector = subprocess.Popen(collector_cmd)
    except OSError:
        master.kill()
        master.wait()
        raise
    status = collector.wait()
    master.wait()
    return status


if __name__ == "__main__":
    raise SystemExit(main())