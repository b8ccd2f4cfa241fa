"""Tests for batch partitioning and the shared progress tracker."""

from __future__ import annotations

import math
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from image_enrichment.schemas import ItemOutcome
from image_enrichment.utils.concurrency import ProgressTracker, partition, run_batch


def _ok(name: str) -> ItemOutcome:
    return ItemOutcome(source_path=Path(name), output_path=Path(name + ".json"))


def _bad(name: str) -> ItemOutcome:
    return ItemOutcome(source_path=Path(name), error="boom")


class TestPartition:
    @pytest.mark.parametrize("n", [0, 1, 2, 5, 7, 10])
    @pytest.mark.parametrize("size", [1, 2, 3, 10])
    def test_covers_list_exactly_once(self, n: int, size: int) -> None:
        items = list(range(n))
        batches = partition(items, size)

        assert len(batches) == math.ceil(n / size)
        assert all(1 <= len(b) <= size for b in batches)
        assert [x for b in batches for x in b] == items

    def test_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            partition([1, 2], 0)


class TestProgressTracker:
    def test_counts_success_and_failure(self) -> None:
        with ProgressTracker(3, show=False) as tracker:
            assert tracker.advance(_ok("a")) == 1
            assert tracker.advance(_bad("b")) == 2
            assert tracker.advance(_ok("c")) == 3

        assert (tracker.completed, tracker.succeeded, tracker.failed) == (3, 2, 1)

    def test_concurrent_advances_are_serialized(self) -> None:
        tracker = ProgressTracker(800, show=False)

        def worker() -> None:
            for _ in range(100):
                tracker.advance(_ok("x"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        tracker.close()

        assert tracker.completed == 800
        assert tracker.succeeded == 800


def test_run_batch_collects_every_outcome() -> None:
    tracker = ProgressTracker(4, show=False)
    with ThreadPoolExecutor(max_workers=2) as ex:
        outcomes = run_batch(lambda name: [_ok(name), _bad(name + "-b")], ["a", "b"], ex, tracker)

    assert len(outcomes) == 4
    assert tracker.completed == 4
    assert tracker.failed == 2
