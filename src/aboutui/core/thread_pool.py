"""
=============================================================================
WORKER THREAD POOL
=============================================================================

Worker threads that are allowed to block. Content loaders hand their disk
reads to this pool so the main context never waits on I/O.

=============================================================================
POST TASK AND REPLY
=============================================================================

The pool's main job for loaders is a two-hop call:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  post_task_and_reply(task, reply)                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   MAIN CONTEXT             WORKER                 MAIN CONTEXT       │
    │        │                     │                         │             │
    │        │── submit ─────────► │                         │             │
    │        │   (returns at once) │ task()   (may block)    │             │
    │        │                     │── post(reply) ────────► │             │
    │        │                     │                         │ reply()     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The reply is posted even when the task raises: the exception is logged on
the worker and the reply then observes whatever state the task left, which
for a loader means "nothing resolved, use the fallback". A loader therefore
always answers.

=============================================================================
PRIORITIES
=============================================================================

Tasks carry a TaskPriority. The queue is a priority queue ordered by
(priority, submission order), so USER_VISIBLE work (terms pages shown during
setup) runs ahead of BEST_EFFORT work (credits), and tasks of equal priority
keep FIFO order.

Shutdown uses the classic "poison pill": one None entry per worker, queued
behind every real task so pending work drains first.

=============================================================================
SCALING
=============================================================================

    MIN_WORKERS:
        └─ Created at start(), always running
    MAX_WORKERS:
        └─ Upper bound; a worker is added when every worker is busy and
           tasks are still waiting

=============================================================================
"""

import itertools
import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Optional, Tuple

from .main_context import MainContext


logger = logging.getLogger(__name__)


class TaskPriority(IntEnum):
    """Lower value runs first."""
    USER_BLOCKING = 0
    USER_VISIBLE = 1
    BEST_EFFORT = 2


# Sorts after every real priority so shutdown drains pending work first.
_SHUTDOWN_PRIORITY = max(TaskPriority) + 1


class WorkerState(Enum):
    """Worker thread states, used for stats and scaling."""
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """
    A deferred function call.

    Attributes:
        func: The function to execute.
        args: Positional arguments for the function.
        kwargs: Keyword arguments for the function.
        priority: Scheduling priority.
        name: Label used in log lines.
        submitted_at: Monotonic submit time, for queue-wait logging.
    """
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    priority: TaskPriority = TaskPriority.USER_VISIBLE
    name: str = ""
    submitted_at: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        if not self.name:
            self.name = getattr(self.func, "__qualname__", repr(self.func))


# Queue entries: (priority, sequence, task). The sequence number breaks ties
# so Task objects are never compared.
QueueEntry = Tuple[int, int, Optional[Task]]


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the shared queue.

    Loop:
        1. Block on the queue for the next entry
        2. None → exit (poison pill)
        3. Run the task, logging (not propagating) any exception
        4. task_done(), back to 1
    """

    def __init__(self, task_queue: "queue.PriorityQueue[QueueEntry]", worker_id: int):
        # daemon=True: a stuck read must not keep the process alive
        super().__init__(name=f"aboutui-worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id

        self.state = WorkerState.IDLE

        # Metrics
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            _, _, task = self.task_queue.get()
            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.monotonic()
        waited = start_time - task.submitted_at

        try:
            task.func(*task.args, **task.kwargs)
            elapsed = time.monotonic() - start_time
            logger.debug(
                f"Worker {self.worker_id} ran {task.name} "
                f"(waited {waited:.3f}s, ran {elapsed:.3f}s)"
            )
            self.tasks_completed += 1

        except Exception as e:
            # One bad task must not kill the worker.
            elapsed = time.monotonic() - start_time
            logger.exception(
                f"Worker {self.worker_id} task {task.name} failed after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1

        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Thread pool for blocking work.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      ThreadPool Usage                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   pool = ThreadPool(min_workers=1, max_workers=4)                   │
    │   pool.start()                                                       │
    │                                                                      │
    │   # Fire and forget                                                  │
    │   pool.submit(func, args=(x,))                                       │
    │                                                                      │
    │   # Run on a worker, then reply on the main context                 │
    │   pool.post_task_and_reply(read_file, on_read, reply_context=main)  │
    │                                                                      │
    │   pool.shutdown(wait=True)                                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, min_workers: int = 1, max_workers: int = 4):
        """
        Args:
            min_workers: Workers created at start() and kept running.
            max_workers: Upper bound on workers under load.
        """
        if min_workers < 1:
            raise ValueError("min_workers must be >= 1")
        if max_workers < min_workers:
            raise ValueError("max_workers must be >= min_workers")

        self.min_workers = min_workers
        self.max_workers = max_workers

        self._task_queue: "queue.PriorityQueue[QueueEntry]" = queue.PriorityQueue()
        self._sequence = itertools.count()

        self._workers: list[Worker] = []
        self._lock = threading.Lock()  # Protects _workers
        self._started = False
        self._shutdown = False
        self._next_worker_id = 0

    @property
    def is_started(self) -> bool:
        return self._started

    def start(self):
        """Create the minimum number of workers."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")
        self._shutdown = False
        for _ in range(self.min_workers):
            self._add_worker()

        self._started = True

    def _add_worker(self) -> Worker:
        with self._lock:
            if len(self._workers) >= self.max_workers:
                raise RuntimeError("Maximum workers reached")

            worker = Worker(task_queue=self._task_queue, worker_id=self._next_worker_id)
            self._next_worker_id += 1
            self._workers.append(worker)
            worker.start()
            return worker

    def _put(self, priority: int, task: Optional[Task]) -> None:
        self._task_queue.put((priority, next(self._sequence), task))

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        priority: TaskPriority = TaskPriority.USER_VISIBLE,
        name: str = "",
    ) -> None:
        """
        Submit a task for execution on a worker.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")

        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        task = Task(func=func, args=args, kwargs=kwargs or {}, priority=priority, name=name)
        self._put(task.priority, task)
        self._maybe_scale_up()

    def post_task_and_reply(
        self,
        task: Callable[[], Any],
        reply: Callable[[], Any],
        reply_context: MainContext,
        priority: TaskPriority = TaskPriority.USER_VISIBLE,
        name: str = "",
    ) -> None:
        """
        Run task() on a worker, then post reply() to reply_context.

        The reply is posted whether or not task() raised.
        """
        label = name or getattr(task, "__qualname__", "task")

        def run_then_reply() -> None:
            try:
                task()
            finally:
                reply_context.post(reply)

        self.submit(run_then_reply, priority=priority, name=label)

    def _maybe_scale_up(self):
        """Add a worker when all are busy and tasks are waiting."""
        with self._lock:
            busy_count = sum(1 for w in self._workers if w.state == WorkerState.BUSY)
            if busy_count < len(self._workers) or len(self._workers) >= self.max_workers:
                return
            if self._task_queue.qsize() == 0:
                return
            logger.debug(
                f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers"
            )

        self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Shut the pool down.

        Args:
            wait: Wait for queued tasks to finish before stopping workers.
            timeout: Per-worker join timeout when wait is True.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        with self._lock:
            workers = list(self._workers)

        # Poison pills sort behind every real task.
        for _ in workers:
            self._put(_SHUTDOWN_PRIORITY, None)

        if wait:
            for worker in workers:
                worker.join(timeout=timeout)

        with self._lock:
            self._workers.clear()
        self._started = False

        logger.info("Thread pool shutdown complete")

    # =========================================================================
    # MONITORING
    # =========================================================================

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def idle_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.IDLE)

    @property
    def queue_size(self) -> int:
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """Worker and task counts."""
        total_completed = sum(w.tasks_completed for w in self._workers)
        total_failed = sum(w.tasks_failed for w in self._workers)

        return {
            "workers": {
                "total": len(self._workers),
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "tasks": {
                "queued": self._task_queue.qsize(),
                "completed": total_completed,
                "failed": total_failed,
            },
        }
