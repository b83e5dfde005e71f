"""Fixed-size worker thread pool

Workers share one unbounded FIFO queue. Every queued item (a job or a control
message) is delivered to exactly one worker. Shutdown uses a stop broadcast:
stop() enqueues one STOP message per worker behind all pending jobs and then
joins every thread, so the pool drains before it exits.
"""

import logging
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from grrs import prometheus as prom
from grrs.errors import PoolStateError
from grrs.utils import get_worker_count


logger = logging.getLogger(__name__)

Job = Callable[[], Any]


class MessageKind(Enum):
    START = 'start'
    JOB = 'job'
    STOP = 'stop'


@dataclass(frozen=True)
class PoolMessage:
    """An item on the pool queue"""

    kind: MessageKind
    job: Job | None = None

    @classmethod
    def start(cls) -> 'PoolMessage':
        return cls(MessageKind.START)

    @classmethod
    def stop(cls) -> 'PoolMessage':
        return cls(MessageKind.STOP)

    @classmethod
    def run(cls, job: Job) -> 'PoolMessage':
        return cls(MessageKind.JOB, job)


class WorkerState(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    STOPPED = 'stopped'


class WorkerPool:
    """A fixed number of long-lived worker threads consuming a shared job queue.

    Usage:
        with WorkerPool('search', 4) as pool:
            pool.submit(lambda: do_work())
        # leaving the block calls stop(), which drains the queue and joins the workers

    The number of workers is fixed for the life of the pool. Jobs are plain
    zero-argument callables; an exception raised by a job is logged and counted,
    and the worker goes back to waiting for the next item.
    """

    def __init__(self, name: str = 'worker', num_workers: int | None = None):
        if num_workers is None:
            num_workers = get_worker_count()
        if num_workers < 1:
            raise ValueError(f'num_workers must be at least 1, got {num_workers}')

        self.name = name
        self.num_workers = num_workers

        self._queue: queue.Queue[PoolMessage] = queue.Queue()
        self._threads: list[threading.Thread] = []

        self._states: dict[str, WorkerState] = {}
        self._state_lock = threading.Lock()
        self.jobs_completed = 0
        self.jobs_failed = 0

        # Guards started/stopped transitions against concurrent submit()
        self._lifecycle_lock = threading.Lock()
        self._started = False
        self._stopped = False

    def start(self) -> 'WorkerPool':
        with self._lifecycle_lock:
            if self._started:
                raise PoolStateError(f'Pool {self.name} already started')
            self._started = True

            for i in range(self.num_workers):
                worker_name = f'{self.name}_{i}'
                self._states[worker_name] = WorkerState.IDLE
                thread = threading.Thread(target=self._run_worker, args=(worker_name,), name=worker_name, daemon=True)
                self._threads.append(thread)
                thread.start()
                self._queue.put(PoolMessage.start())

        logger.info(f'[POOL {self.name}] Started {self.num_workers} worker(s)')
        return self

    def submit(self, job: Job) -> None:
        """Enqueue a job. Never waits for a worker to become free."""
        with self._lifecycle_lock:
            if not self._started:
                raise PoolStateError(f'Pool {self.name} is not started')
            if self._stopped:
                raise PoolStateError(f'Pool {self.name} is stopped')
            self._queue.put(PoolMessage.run(job))

    def stop(self) -> None:
        """Send one STOP per worker, then block until every worker thread has exited.

        Jobs submitted before stop() are still executed. Calling stop() again is a no-op.
        """
        with self._lifecycle_lock:
            if self._stopped:
                logger.warning(f'[POOL {self.name}] stop() called more than once, ignoring')
                return
            self._stopped = True

            for _ in self._threads:
                self._queue.put(PoolMessage.stop())

        for thread in self._threads:
            thread.join()

        logger.info(
            f'[POOL {self.name}] Stopped: {self.jobs_completed} job(s) completed, {self.jobs_failed} failed'
        )

    @property
    def stopped(self) -> bool:
        return self._stopped

    def states(self) -> dict[str, WorkerState]:
        """Snapshot of every worker's state"""
        with self._state_lock:
            return dict(self._states)

    def _set_state(self, worker_name: str, state: WorkerState) -> None:
        with self._state_lock:
            self._states[worker_name] = state

    def _record_outcome(self, succeeded: bool) -> None:
        with self._state_lock:
            if succeeded:
                self.jobs_completed += 1
            else:
                self.jobs_failed += 1

    def _run_worker(self, worker_name: str) -> None:
        while True:
            message = self._queue.get()

            if message.kind is MessageKind.START:
                logger.debug(f'[WORKER {worker_name}] Started')
                continue

            if message.kind is MessageKind.STOP:
                self._set_state(worker_name, WorkerState.STOPPED)
                logger.debug(f'[WORKER {worker_name}] Terminating')
                break

            self._set_state(worker_name, WorkerState.RUNNING)
            prom.active_workers.inc()
            start_time = time.time()
            succeeded = False

            try:
                message.job()
                succeeded = True
            except Exception as e:
                logger.error(f'[WORKER {worker_name}] Job failed after {time.time() - start_time:.3f}s: {e}')
            finally:
                elapsed = time.time() - start_time
                prom.worker_job_seconds.observe(elapsed)
                prom.active_workers.dec()
                if succeeded:
                    prom.worker_jobs_completed.inc()
                else:
                    prom.worker_jobs_failed.inc()
                self._record_outcome(succeeded)
                self._set_state(worker_name, WorkerState.IDLE)

            if succeeded:
                logger.debug(f'[WORKER {worker_name}] Job completed in {elapsed:.3f}s')

    def __enter__(self) -> 'WorkerPool':
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
