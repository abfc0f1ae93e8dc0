"""Fixed-size pool executing blocking jobs with bounded parallelism."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Any, List, Optional

from ..utils.logging import LoggerMixin


Job = Callable[[], Any]

_STOP = object()


class WorkerPool(LoggerMixin):
    """Pool of ``size`` workers draining a shared job queue.

    Jobs are zero-argument callables run on a thread pool of the same size.
    The queue holds a single job, so ``submit`` waits while every worker
    is busy. Exceptions raised by jobs are collected in ``errors``; a
    failing job never stops its worker.
    """

    def __init__(self, size: int, queue_size: int = 1):
        if size < 1:
            raise ValueError("Worker pool needs at least one worker")
        self.size = size
        self.queue_size = queue_size
        self.errors: List[BaseException] = []
        self.submitted = 0
        self.completed = 0

        self._queue: Optional[asyncio.Queue] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._workers: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    async def start(self):
        """Start the workers."""
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self.queue_size)
        self._executor = ThreadPoolExecutor(max_workers=self.size, thread_name_prefix="bucketsync")
        self._workers = [
            asyncio.create_task(self._work(), name=f"worker-{i}")
            for i in range(self.size)
        ]
        self.logger.debug("Worker pool started", size=self.size)

    async def submit(self, job: Job):
        """Queue a job, waiting while the pool is saturated."""
        if not self.running:
            raise RuntimeError("Worker pool is not running")
        self.submitted += 1
        await self._queue.put(job)

    async def _work(self):
        loop = asyncio.get_running_loop()
        while True:
            job = await self._queue.get()
            if job is _STOP:
                return
            try:
                await loop.run_in_executor(self._executor, job)
            except Exception as e:
                self.errors.append(e)
                self.logger.error("Job failed", error=str(e))
            finally:
                self.completed += 1

    async def close(self):
        """Wait for every queued job to finish, then stop the workers."""
        if not self.running:
            return
        try:
            for _ in self._workers:
                await self._queue.put(_STOP)
            await asyncio.gather(*self._workers)
        finally:
            self._shutdown(wait=True)
        self.logger.debug(
            "Worker pool closed",
            submitted=self.submitted,
            completed=self.completed,
            failed=len(self.errors)
        )

    async def abort(self):
        """Stop the workers without waiting for queued jobs.

        Jobs already handed to a thread still run to completion.
        """
        if not self.running:
            return
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._shutdown(wait=False)

    def _shutdown(self, wait: bool):
        self._workers = []
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    async def __aenter__(self) -> "WorkerPool":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            await self.close()
        else:
            await self.abort()
