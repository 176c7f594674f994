"""
Unit tests for the parallel executor.
"""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from pose_correspondence.acceleration import ParallelExecutor


# Module-level worker functions for pickling compatibility
def _scaling_worker(item, scale=1):
    return item * scale


def _error_worker(item):
    raise ValueError(f"Intentional error on item {item}")


class TestParallelExecutor:
    def test_executor_initialization(self):
        assert ParallelExecutor().n_workers >= 1
        assert ParallelExecutor(n_workers=4).n_workers == 4
        assert ParallelExecutor(n_workers=0).n_workers == 1

    def test_empty_items(self):
        assert ParallelExecutor(n_workers=2).map_items([], _scaling_worker) == []

    def test_sequential_fallback_one_worker(self):
        results = ParallelExecutor(n_workers=1).map_items(list(range(5)), _scaling_worker, {"scale": 2})
        assert results == [0, 2, 4, 6, 8]

    def test_parallel_order_preserved(self):
        results = ParallelExecutor(n_workers=2).map_items(list(range(20)), _scaling_worker, {"scale": 3})
        assert results == [i * 3 for i in range(20)]

    def test_progress_callback(self):
        calls = []
        ParallelExecutor(n_workers=1).map_items(
            [1, 2, 3], _scaling_worker, progress_callback=lambda done, total: calls.append((done, total))
        )
        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_sequential_error_raises_runtime_error(self):
        with pytest.raises(RuntimeError, match="Item processing failed"):
            ParallelExecutor(n_workers=1).map_items([1, 2], _error_worker)

    def test_parallel_error_raises_runtime_error(self):
        with pytest.raises(RuntimeError, match="items failed"):
            ParallelExecutor(n_workers=2).map_items([1, 2, 3], _error_worker)
