from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Any, Callable

Job = Callable[[], Any]


def _relay(target: Future, source: Future) -> None:
    exc = source.exception()
    if exc is not None:
        target.set_exception(exc)
    else:
        target.set_result(source.result())


class SyncQueue:
    """Single-slot write queue.

    At most one job runs at a time. Requests arriving while one runs share a
    single queued follow-up; the most recent job wins that slot, so a burst
    of mutations collapses into one extra write of the latest state.
    """

    def __init__(self, executor: Executor | None = None) -> None:
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="unbox-sync")
        self._lock = Lock()
        self._running: Future | None = None
        self._queued: Future | None = None
        self._queued_job: Job | None = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._running is not None

    def request(self, job: Job) -> Future:
        with self._lock:
            if self._running is not None:
                if self._queued is None:
                    self._queued = Future()
                self._queued_job = job
                return self._queued
            running = self._running = self._executor.submit(job)
        running.add_done_callback(self._on_done)
        return running

    def _on_done(self, finished: Future) -> None:
        with self._lock:
            if self._running is not finished:
                return
            waiter, job = self._queued, self._queued_job
            self._queued = None
            self._queued_job = None
            if waiter is None or job is None:
                self._running = None
                return
            running = self._running = self._executor.submit(job)
        running.add_done_callback(lambda f: _relay(waiter, f))
        running.add_done_callback(self._on_done)

    def flush(self, timeout: float | None = None) -> bool:
        """Block until nothing is running or queued. Used at shutdown and in tests."""
        while True:
            with self._lock:
                pending = self._queued or self._running
            if pending is None:
                return True
            done, _ = wait([pending], timeout=timeout)
            if not done:
                return False

    def shutdown(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)
