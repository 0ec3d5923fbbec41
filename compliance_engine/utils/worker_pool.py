"""Thread pool for scoring independent units (sections) side by side.

Sections have no cross-dependencies, so they can be scored concurrently
and joined before the overall aggregation. Outcomes always come back in
input order, whatever order the threads finish in.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, NamedTuple, Sequence


class Outcome(NamedTuple):
    """One item's result: value on success, the raised exception otherwise."""

    ok: bool
    item: Any
    value: Any


class WorkerPool:
    """Runs a function over items on up to `max_workers` threads.

    Counters accumulate across calls; read them with get_stats().
    """

    def __init__(self, max_workers: int = 4, logger: logging.Logger | None = None):
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._submitted = 0
        self._successful = 0
        self._failed = 0

    def _collect(self, item: Any, future: Future, desc: str) -> Outcome:
        error = future.exception()
        with self._lock:
            if error is None:
                self._successful += 1
            else:
                self._failed += 1
        if error is not None:
            self.logger.debug(f"{desc}: {item!r} raised {type(error).__name__}: {error}")
            return Outcome(False, item, error)
        return Outcome(True, item, future.result())

    def map(self, func: Callable[[Any], Any], items: Sequence, desc: str = "Processing") -> list[Outcome]:
        """Apply func to every item; exceptions are captured, never raised.

        Returns:
            One Outcome per item, in input order
        """
        with self._lock:
            self._submitted += len(items)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(func, item) for item in items]
            wait(futures)

        outcomes = [self._collect(item, future, desc) for item, future in zip(items, futures)]
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        self.logger.debug(f"{desc}: {len(outcomes) - failed}/{len(outcomes)} succeeded")
        return outcomes

    def map_all_or_raise(self, func: Callable[[Any], Any], items: Sequence, desc: str = "Processing") -> list:
        """Like map, but returns bare values and re-raises the first failure.

        "First" is by input position, so the error a caller sees does not
        depend on thread timing. No partial result is ever returned.
        """
        outcomes = self.map(func, items, desc)
        for outcome in outcomes:
            if not outcome.ok:
                raise outcome.value
        return [outcome.value for outcome in outcomes]

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "max_workers": self.max_workers,
                "total_submitted": self._submitted,
                "total_completed": self._successful + self._failed,
                "total_successful": self._successful,
                "total_failed": self._failed,
            }
