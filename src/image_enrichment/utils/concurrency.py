"""Concurrency helpers (fork-join batches + shared progress)."""

from __future__ import annotations

import threading
from concurrent.futures import Executor, as_completed
from typing import Callable, Iterable, Sequence, TypeVar

from tqdm import tqdm

from ..logging import get_logger
from ..schemas import ItemOutcome

logger = get_logger(__name__)

T = TypeVar("T")

__all__ = ["ProgressTracker", "partition", "run_batch"]


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive chunks of at most ``size``."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class ProgressTracker:
    """Completed-item counter shared by all in-flight items of a run.

    ``advance`` is the only mutation and is serialized by a lock; the optional
    tqdm bar is updated under the same lock.
    """

    def __init__(self, total: int, show: bool = True) -> None:
        self.total = total
        self.completed = 0
        self.succeeded = 0
        self.failed = 0
        self._lock = threading.Lock()
        self._bar = tqdm(total=total, unit="img", desc="caption", disable=not show)

    def advance(self, outcome: ItemOutcome) -> int:
        with self._lock:
            self.completed += 1
            if outcome.ok:
                self.succeeded += 1
            else:
                self.failed += 1
            self._bar.update(1)
            self._bar.set_postfix(ok=self.succeeded, failed=self.failed)
            return self.completed

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> "ProgressTracker":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def run_batch(
    func: Callable[[T], Iterable[ItemOutcome]],
    units: Iterable[T],
    executor: Executor,
    tracker: ProgressTracker,
) -> list[ItemOutcome]:
    """Submit one job per unit and join them all before returning.

    Each job yields the terminal outcomes of the items it owns; progress
    advances once per outcome as jobs finish, in completion order.
    """
    outcomes: list[ItemOutcome] = []
    futures = [executor.submit(func, unit) for unit in units]
    for fut in as_completed(futures):
        for outcome in fut.result():
            tracker.advance(outcome)
            outcomes.append(outcome)
    return outcomes
