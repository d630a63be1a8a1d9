"""A fixed-size pool of worker threads fed from a FIFO queue."""

from __future__ import annotations

import os
import threading
from collections import deque
from collections.abc import Callable
from types import TracebackType


class ThreadPool:
    """Runs queued callables on a fixed set of worker threads.

    Shutting down lets the workers finish every queued task first. The first
    exception raised by a task is re-raised by :meth:`shutdown`.
    """

    def __init__(self, num_threads: int | None = None) -> None:
        if num_threads is None:
            num_threads = os.cpu_count() or 1
        if num_threads < 1:
            raise ValueError(f"a pool needs at least one thread, got {num_threads}")
        self._tasks: deque[Callable[[], object]] = deque()
        self._condition = threading.Condition()
        self._stopping = False
        self._errors: list[Exception] = []
        self._threads = [
            threading.Thread(target=self._work, daemon=True) for _ in range(num_threads)
        ]
        for thread in self._threads:
            thread.start()

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._tasks or self._stopping)
                if not self._tasks:
                    return
                task = self._tasks.popleft()
            try:
                task()
            except Exception as exc:
                with self._condition:
                    self._errors.append(exc)

    def enqueue(self, task: Callable[[], object]) -> None:
        """Queue ``task`` to run on a worker thread."""
        with self._condition:
            if self._stopping:
                raise RuntimeError("cannot enqueue on a pool that is shut down")
            self._tasks.append(task)
            self._condition.notify()

    def shutdown(self) -> None:
        """Finish all queued tasks and stop the workers."""
        with self._condition:
            self._stopping = True
            self._condition.notify_all()
        for thread in self._threads:
            thread.join()
        with self._condition:
            errors, self._errors = self._errors, []
        if errors:
            raise errors[0]

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()