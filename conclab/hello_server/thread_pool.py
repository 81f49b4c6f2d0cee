"""Fixed-size thread pool that joins its workers on shutdown."""

from __future__ import annotations

import queue
import threading
from typing import Callable, List, Tuple

_STOP = object()


class ThreadPool:
    """Runs submitted jobs on a fixed number of worker threads."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("thread pool size must be positive")
        self._jobs: queue.SimpleQueue = queue.SimpleQueue()
        self._idle = threading.Condition()
        self._pending = 0
        self._closed = False
        self._errors: List[Tuple[str, BaseException]] = []
        self._workers = [
            threading.Thread(target=self._work, name=f"pool-worker-{i}", daemon=True)
            for i in range(size)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        name = threading.current_thread().name
        while True:
            job = self._jobs.get()
            if job is _STOP:
                return
            try:
                job()
            except BaseException as exc:
                self._errors.append((name, exc))
            finally:
                with self._idle:
                    self._pending -= 1
                    if self._pending == 0:
                        self._idle.notify_all()

    def execute(self, f: Callable[[], object]) -> None:
        """Queue ``f`` to run on a worker."""
        with self._idle:
            if self._closed:
                raise RuntimeError("thread pool has been shut down")
            self._pending += 1
            self._jobs.put(f)

    def join(self) -> None:
        """Block until every submitted job has finished."""
        with self._idle:
            self._idle.wait_for(lambda: self._pending == 0)

    def shutdown(self) -> None:
        """Wait for all jobs, stop the workers and join them.

        Raises ``RuntimeError`` if any job raised.
        """
        if self._closed:
            return
        self.join()
        with self._idle:
            self._closed = True
            for _ in self._workers:
                self._jobs.put(_STOP)
        for worker in self._workers:
            worker.join()
        if self._errors:
            name, exc = self._errors[0]
            raise RuntimeError(f"failed to join worker {name}: {exc!r}") from exc

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()