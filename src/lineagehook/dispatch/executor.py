"""Bounded worker pool that keeps lineage work off the engine's query path."""

import functools
import logging
import queue
import threading
import time
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class DispatchRejectedError(RuntimeError):
    """Raised when a task cannot be queued (backlog full or executor stopped)."""

    pass


class DispatchExecutor:
    """
    Run submitted tasks on a small pool of daemon worker threads.

    - ``min_workers`` threads start with the executor and stay alive.
    - Up to ``max_workers`` threads exist in total; extra threads are added
      when work arrives and no worker is idle, and exit after
      ``keep_alive_seconds`` without work.
    - The backlog holds at most ``queue_size`` tasks. Submitting past that
      fails immediately instead of blocking the caller.
    - ``shutdown`` stops intake, gives workers ``shutdown_wait_seconds`` to
      drain the backlog, then discards whatever is still queued.
    """

    def __init__(
        self,
        min_workers: int = 1,
        max_workers: int = 5,
        queue_size: int = 10000,
        keep_alive_seconds: float = 0.01,
        shutdown_wait_seconds: float = 3.0,
        thread_name_prefix: str = "lineage-hook",
    ):
        if min_workers < 1:
            raise ValueError("min_workers must be >= 1")
        if max_workers < min_workers:
            raise ValueError("max_workers must be >= min_workers")
        if queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        self.min_workers = min_workers
        self.max_workers = max_workers
        self.queue_size = queue_size
        self.keep_alive_seconds = keep_alive_seconds
        self.shutdown_wait_seconds = shutdown_wait_seconds
        self.thread_name_prefix = thread_name_prefix

        self._queue: "queue.Queue[Task]" = queue.Queue(maxsize=queue_size)
        self._lock = threading.Lock()
        self._workers: List[threading.Thread] = []
        self._idle = 0
        self._thread_counter = 0
        self._accepting = False
        self._started = False
        self._stopping = threading.Event()
        self._abandoning = threading.Event()
        self._poll_interval = 0.05
        self._stats: Dict[str, int] = {
            "submitted": 0,
            "completed": 0,
            "failed": 0,
            "rejected": 0,
            "abandoned": 0,
        }

    def start(self) -> "DispatchExecutor":
        """Start the core workers and begin accepting tasks."""
        with self._lock:
            if self._started:
                if self._stopping.is_set():
                    raise RuntimeError("Executor has been shut down and cannot restart")
                return self
            self._started = True
            self._accepting = True
            for _ in range(self.min_workers):
                self._spawn_worker(core=True)
        logger.info(
            "Dispatch executor started (workers=%d..%d, queue=%d)",
            self.min_workers,
            self.max_workers,
            self.queue_size,
        )
        return self

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """
        Queue a call for a worker thread.

        Raises:
            DispatchRejectedError: If the backlog is full or the executor is
                                   not accepting work.
        """
        task: Task = functools.partial(fn, *args, **kwargs)
        with self._lock:
            if not self._accepting:
                self._stats["rejected"] += 1
                raise DispatchRejectedError("Executor is not accepting work")
            try:
                self._queue.put_nowait(task)
            except queue.Full:
                self._stats["rejected"] += 1
                raise DispatchRejectedError(
                    f"Backlog queue is full ({self.queue_size} pending tasks)"
                ) from None
            self._stats["submitted"] += 1
            if self._idle == 0 and len(self._workers) < self.max_workers:
                self._spawn_worker(core=False)

    def shutdown(self, wait_seconds: Optional[float] = None) -> int:
        """
        Stop accepting tasks, drain for a bounded time, abandon the rest.

        Args:
            wait_seconds: Grace period; defaults to ``shutdown_wait_seconds``.

        Returns:
            Number of queued tasks that were abandoned.
        """
        wait = self.shutdown_wait_seconds if wait_seconds is None else wait_seconds
        with self._lock:
            self._accepting = False
            workers = list(self._workers)
        self._stopping.set()

        deadline = time.monotonic() + wait
        for worker in workers:
            worker.join(max(0.0, deadline - time.monotonic()))

        self._abandoning.set()
        abandoned = 0
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
            self._queue.task_done()
            abandoned += 1

        with self._lock:
            self._stats["abandoned"] += abandoned
            still_running = len(self._workers)

        if abandoned or still_running:
            logger.warning(
                "Dispatch executor stopped with %d abandoned task(s) and %d busy worker(s)",
                abandoned,
                still_running,
            )
        else:
            logger.info("Dispatch executor stopped. Stats: %s", self.stats)
        return abandoned

    @property
    def pending(self) -> int:
        """Tasks waiting in the backlog."""
        return self._queue.qsize()

    @property
    def worker_count(self) -> int:
        with self._lock:
            return len(self._workers)

    @property
    def accepting(self) -> bool:
        with self._lock:
            return self._accepting

    @property
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                **self._stats,
                "pending": self._queue.qsize(),
                "workers": len(self._workers),
            }

    def _spawn_worker(self, core: bool) -> None:
        """Start a worker thread (caller must hold the lock)."""
        self._thread_counter += 1
        thread = threading.Thread(
            target=self._run_worker,
            args=(core,),
            name=f"{self.thread_name_prefix}-{self._thread_counter}",
            daemon=True,
        )
        self._workers.append(thread)
        self._idle += 1
        thread.start()

    def _run_worker(self, core: bool) -> None:
        timeout = self._poll_interval if core else max(self.keep_alive_seconds, 0.001)
        retired = False
        try:
            while True:
                try:
                    task = self._queue.get(timeout=timeout)
                except queue.Empty:
                    if self._stopping.is_set():
                        break
                    if core:
                        continue
                    # submit() enqueues under the lock, so an empty backlog here
                    # means no task is counting on this worker being idle.
                    with self._lock:
                        if self._queue.empty():
                            self._retire_current()
                            retired = True
                            break
                    continue

                with self._lock:
                    self._idle -= 1
                try:
                    if self._abandoning.is_set():
                        with self._lock:
                            self._stats["abandoned"] += 1
                    else:
                        task()
                        with self._lock:
                            self._stats["completed"] += 1
                except Exception:
                    logger.exception("Dispatched task failed")
                    with self._lock:
                        self._stats["failed"] += 1
                finally:
                    self._queue.task_done()
                    with self._lock:
                        self._idle += 1
        finally:
            if not retired:
                with self._lock:
                    self._retire_current()

    def _retire_current(self) -> None:
        """Remove the calling worker from the pool (caller must hold the lock)."""
        self._idle -= 1
        self._workers.remove(threading.current_thread())
