"""Region work queue, worker pool and completion barrier.

Regions are loaded into a queue and each one is handed to exactly one
worker thread. By default the pool is unbounded (one thread per region);
``max_workers`` caps the number of regions processed at the same time
without changing what each worker does. Nothing orders one region's work
relative to another's.
"""
import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, Optional


def region_queue(regions: Iterable[str]) -> "queue.Queue[str]":
    """Load every region into a work queue, once each."""
    work: "queue.Queue[str]" = queue.Queue()
    for region in regions:
        work.put(region)
    return work


class CompletionBarrier:
    """Counting join: blocks waiters until every registered worker is done."""

    def __init__(self):
        self._cond = threading.Condition()
        self._outstanding = 0

    @property
    def outstanding(self) -> int:
        with self._cond:
            return self._outstanding

    def add(self, count: int = 1) -> None:
        with self._cond:
            self._outstanding += count

    def done(self) -> None:
        with self._cond:
            if self._outstanding <= 0:
                raise RuntimeError("done() called more times than add()")
            self._outstanding -= 1
            if self._outstanding == 0:
                self._cond.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the outstanding count to reach zero.

        Returns False if ``timeout`` expired first.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._outstanding == 0, timeout=timeout)


class RegionPool:
    """Fan a region queue out to worker threads and join on all of them."""

    def __init__(self, max_workers: Optional[int] = None):
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers

    def run(self, regions: Iterable[str],
            worker: Callable[[str], Any],
            on_error: Optional[Callable[[str, BaseException], Any]] = None) -> Dict[str, Any]:
        """Run ``worker(region)`` for every region and return ``{region: result}``.

        Exceptions escaping a worker are logged and turned into a result by
        ``on_error`` (or stored as ``None``); they never reach sibling workers
        or the caller.
        """
        work = region_queue(regions)
        total = work.qsize()
        if total == 0:
            logging.info("No regions to process")
            return {}

        results: Dict[str, Any] = {}
        results_lock = threading.Lock()
        barrier = CompletionBarrier()

        def run_one(region: str) -> None:
            try:
                try:
                    result = worker(region)
                except Exception as ex:
                    logging.error(f"[{region}] Worker encountered fatal error: {ex}")
                    result = on_error(region, ex) if on_error else None
                with results_lock:
                    results[region] = result
            finally:
                barrier.done()

        workers = self.max_workers or total
        logging.debug(f"Dispatching {total} regions to {workers} workers")
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="region")
        try:
            while True:
                try:
                    region = work.get_nowait()
                except queue.Empty:
                    break
                barrier.add()
                executor.submit(run_one, region)
            barrier.wait()
        finally:
            executor.shutdown(wait=True)
        return results
