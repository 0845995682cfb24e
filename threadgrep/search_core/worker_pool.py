"""
Fixed-size thread pool fed from one bounded queue

Tasks are zero-argument callables; inputs are captured in the callable and
results, if any, are pushed somewhere by the task itself. A task that raises
is logged and counted as failed; the worker that ran it carries on.
"""

import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from threadgrep.exceptions import PoolClosedError
from threadgrep.parallel_config import ParallelConfig, detect_worker_count
from threadgrep.utils import get_logger

from .constants import QUEUE_MULTIPLIER

logger = get_logger(__name__)

Task = Callable[[], None]

# Queued once per worker by wait(); a worker exits when it takes one
_SHUTDOWN = object()


@dataclass(frozen=True)
class PoolStats:
    """Snapshot of task outcomes"""
    completed: int
    failed: int

    @property
    def total(self) -> int:
        return self.completed + self.failed


class WorkerPool:
    """
    Run tasks on ``num_workers`` long-lived threads

    ``execute`` blocks while the queue (``num_workers * queue_multiplier``
    slots) is full. ``wait`` lets the workers drain the queue and joins them;
    the pool cannot be used afterwards.
    """

    def __init__(self, num_workers: int, queue_multiplier: int = QUEUE_MULTIPLIER,
                 thread_name_prefix: str = "threadgrep-worker"):
        if num_workers <= 0:
            raise ValueError(f"WorkerPool expects a positive num_workers, but {num_workers} was provided")
        if queue_multiplier <= 0:
            raise ValueError(f"queue_multiplier must be positive, got {queue_multiplier}")

        self.num_workers = num_workers
        self.queue_size = num_workers * queue_multiplier
        self._queue: queue.Queue = queue.Queue(maxsize=self.queue_size)
        self._closed = False
        self._submit_lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self._completed = 0
        self._failed = 0

        self._threads: List[threading.Thread] = []
        for idx in range(num_workers):
            thread = threading.Thread(
                target=self._worker_loop,
                name=f"{thread_name_prefix}-{idx}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

        logger.debug(f"Started {num_workers} workers (queue size {self.queue_size})")

    @classmethod
    def all_cores(cls, queue_multiplier: int = QUEUE_MULTIPLIER) -> 'WorkerPool':
        """Pool with one worker per detected CPU, or 8 if detection fails"""
        return cls(detect_worker_count(), queue_multiplier)

    @classmethod
    def from_config(cls, config: ParallelConfig) -> 'WorkerPool':
        return cls(config.max_workers, config.queue_multiplier)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def stats(self) -> PoolStats:
        with self._stats_lock:
            return PoolStats(completed=self._completed, failed=self._failed)

    def execute(self, task: Task) -> None:
        """
        Queue a task, blocking while the queue is full

        Raises:
            PoolClosedError: wait() has already been called
        """
        with self._submit_lock:
            if self._closed:
                raise PoolClosedError("cannot execute tasks after wait()")
            self._queue.put(task)

    def wait(self) -> None:
        """Close submissions, let queued tasks finish, and join every worker"""
        with self._submit_lock:
            if self._closed:
                return
            self._closed = True
            # FIFO order puts these behind every task already queued
            for _ in self._threads:
                self._queue.put(_SHUTDOWN)

        for thread in self._threads:
            thread.join()

        stats = self.stats
        logger.debug(f"Workers finished: {stats.completed} tasks completed, {stats.failed} failed")

    def _worker_loop(self) -> None:
        while True:
            task = self._queue.get()
            try:
                if task is _SHUTDOWN:
                    return
                self._run_task(task)
            finally:
                self._queue.task_done()

    def _run_task(self, task: Task) -> None:
        try:
            task()
        except KeyboardInterrupt:
            raise
        except BaseException:
            # SystemExit too: every worker must live to take its shutdown sentinel
            logger.exception("Worker thread caught an exception in a task")
            with self._stats_lock:
                self._failed += 1
        else:
            with self._stats_lock:
                self._completed += 1

    def __enter__(self) -> 'WorkerPool':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> Optional[bool]:
        # On Ctrl-C the daemon workers are abandoned instead of drained
        if exc_type is not None and issubclass(exc_type, KeyboardInterrupt):
            return None
        self.wait()
        return None
