import concurrent.futures
import threading
from typing import Callable, Optional

from src.benchmark.errors import ConfigError, PoolError


class WorkerPool:
    """
    Fixed set of worker threads fed through a bounded buffer.

    At most ``max_workers`` tasks run at once and at most ``max_capacity``
    more wait behind them. ``submit`` blocks once that limit is reached and
    resumes only when a running task finishes.

    Tasks are never retried. The first exception raised by a task fails the
    pool: tasks still waiting are skipped, later ``submit`` calls raise the
    same exception and ``stop_and_wait`` re-raises it once the workers are
    idle.
    """

    def __init__(self, max_workers: int, max_capacity: int):
        if max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {max_workers}")
        if max_capacity < 0:
            raise ConfigError(f"max_capacity must not be negative, got {max_capacity}")

        self.max_workers = max_workers
        self.max_capacity = max_capacity

        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="bench-worker",
        )
        self._slots = threading.BoundedSemaphore(max_workers + max_capacity)
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self._stopped = False

        self.submitted_count = 0
        self.completed_count = 0
        self.skipped_count = 0

    @property
    def has_failed(self) -> bool:
        with self._lock:
            return self._error is not None

    def submit(self, task: Callable[[], None]):
        self._check_usable()
        self._slots.acquire()

        try:
            # the pool may have failed or stopped while we were blocked
            self._check_usable()
            with self._lock:
                self.submitted_count += 1
            self._executor.submit(self._run, task)
        except BaseException:
            self._slots.release()
            raise

    def stop_and_wait(self):
        with self._lock:
            self._stopped = True

        self._executor.shutdown(wait=True)

        with self._lock:
            error = self._error
        if error is not None:
            raise error

    def _check_usable(self):
        with self._lock:
            if self._error is not None:
                raise self._error
            if self._stopped:
                raise PoolError("worker pool is stopped")

    def _run(self, task: Callable[[], None]):
        try:
            with self._lock:
                if self._error is not None:
                    self.skipped_count += 1
                    return

            try:
                task()
            except Exception as e:
                with self._lock:
                    if self._error is None:
                        self._error = e
                return

            with self._lock:
                self.completed_count += 1
        finally:
            self._slots.release()
