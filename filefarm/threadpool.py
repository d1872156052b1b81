"""A fixed-size pool of worker threads fed from a bounded task queue."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Callable

_log = logging.getLogger(__name__)


class QueueFullError(RuntimeError):
    """Raised when no worker is free and the pool keeps no pending tasks."""


class PoolClosedError(RuntimeError):
    """Raised when a task is submitted to a pool that is shutting down."""


class ThreadPool:
    """Run callables on ``numthreads`` worker threads.

    ``pending_size`` bounds how many tasks may wait for a worker; submitting
    to a full queue blocks until a slot frees. With ``pending_size`` 0 the
    pool keeps no pending tasks: submitting while every worker is busy raises
    ``QueueFullError``.
    """

    def __init__(self, numthreads: int, pending_size: int) -> None:
        if numthreads <= 0:
            raise ValueError("numthreads must be positive")
        if pending_size < 0:
            raise ValueError("pending_size must not be negative")
        self.numthreads = numthreads
        self.no_pending = pending_size == 0
        self.capacity = 1 if self.no_pending else pending_size
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._lock = threading.Lock()
        self._has_work = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._in_flight = 0
        self._exiting = 0
        self._threads = [
            threading.Thread(target=self._work, name=f"pool-worker-{i}", daemon=True)
            for i in range(numthreads)
        ]
        for thread in self._threads:
            thread.start()

    def _work(self) -> None:
        while True:
            with self._lock:
                while not self._queue and not self._exiting:
                    self._has_work.wait()
                if self._exiting > 1:
                    return
                if self._exiting == 1 and not self._queue:
                    return
                fn, args = self._queue.popleft()
                self._not_full.notify()
                self._in_flight += 1
            try:
                fn(*args)
            except Exception:
                _log.exception("task %r failed", fn)
            finally:
                with self._lock:
                    self._in_flight -= 1

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue ``fn(*args)`` for a worker, waiting while the queue is full."""
        if not callable(fn):
            raise TypeError("fn must be callable")
        with self._lock:
            while len(self._queue) >= self.capacity and not self._exiting:
                self._not_full.wait()
            if self._exiting:
                raise PoolClosedError("pool is shutting down")
            if self.no_pending and self._in_flight >= self.numthreads:
                raise QueueFullError("all workers are busy")
            self._queue.append((fn, args))
            self._has_work.notify()

    def shutdown(self, force: bool = False) -> None:
        """Stop accepting tasks and join the workers.

        Without ``force`` the workers first drain the pending queue; with it
        they exit as soon as their current task is done.
        """
        with self._lock:
            self._exiting = max(self._exiting, 2 if force else 1)
            self._has_work.notify_all()
            self._not_full.notify_all()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(False)


def spawn_thread(fn: Callable[..., Any], *args: Any) -> threading.Thread:
    """Run ``fn(*args)`` on a new daemon thread outside any pool."""
    if not callable(fn):
        raise TypeError("fn must be callable")
    thread = threading.Thread(target=fn, args=args, daemon=True)
    thread.start()
    return thread