"""
Parallel execution infrastructure for per-candidate work.

Provides ParallelExecutor for distributing independent items (for example
candidate offsets awaiting validation) across CPU cores using multiprocessing.
"""

from __future__ import annotations

import time
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..utils.logging import setup_logger

logger = setup_logger(__name__)


def _worker_wrapper(args: Tuple[int, Any, Callable, Dict[str, Any]]) -> Tuple[int, Any, Optional[str]]:
    """
    Worker wrapper for parallel item processing.

    Must be at module level for pickling on Windows.

    Args:
        args: Tuple of (item_index, item, worker_fn, worker_kwargs)

    Returns:
        Tuple of (item_index, result, error_message)
    """
    idx, item, worker_fn, worker_kwargs = args
    try:
        result = worker_fn(item, **worker_kwargs)
        return (idx, result, None)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {str(e)}"
        logger.error(f"Worker error on item {idx}: {error_msg}")
        return (idx, None, error_msg)


class ParallelExecutor:
    """
    Parallel executor for independent items.

    Manages the worker pool, distributes items and collects results in input
    order. One worker or one item short-circuits to a plain loop.

    Example:
        executor = ParallelExecutor(n_workers=4)
        flags = executor.map_items(
            items=candidates,
            worker_fn=validate_candidate,
            worker_kwargs={'model': model, 'space': space, 'tolerance': 1e-4, 'strategy': strategy},
        )
    """

    def __init__(self, n_workers: Optional[int] = None):
        """
        Args:
            n_workers: Number of worker processes. If None, uses cpu_count - 1
                to leave one core for coordination. Minimum is 1.
        """
        if n_workers is None:
            n_workers = max(1, cpu_count() - 1)
        else:
            n_workers = max(1, int(n_workers))

        self.n_workers = n_workers
        logger.debug(
            f"Initialized ParallelExecutor with {self.n_workers} workers "
            f"(total CPUs: {cpu_count()})"
        )

    def map_items(
        self,
        items: List[Any],
        worker_fn: Callable,
        worker_kwargs: Optional[Dict[str, Any]] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> List[Any]:
        """
        Map worker_fn over items, returning results in input order.

        Args:
            items: Items to process
            worker_fn: Picklable callable with signature worker_fn(item, **worker_kwargs)
            worker_kwargs: Fixed keyword arguments passed to each call
            progress_callback: Optional callback(completed_count, total_count)

        Returns:
            List of results in the same order as items

        Raises:
            RuntimeError: If any item fails
        """
        worker_kwargs = worker_kwargs or {}
        n_items = len(items)

        if n_items == 0:
            logger.debug("No items to process")
            return []

        start_time = time.time()

        if self.n_workers == 1 or n_items == 1:
            results = []
            for i, item in enumerate(items):
                try:
                    results.append(worker_fn(item, **worker_kwargs))
                except Exception as e:
                    logger.error(f"Error processing item {i}: {e}", exc_info=True)
                    raise RuntimeError(f"Item processing failed: {e}") from e
                if progress_callback:
                    progress_callback(i + 1, n_items)
            logger.debug(f"Sequential processing complete: {n_items} items in {time.time() - start_time:.3f}s")
            return results

        results = self._parallel_map(items, worker_fn, worker_kwargs, progress_callback)
        logger.info(
            f"Parallel processing complete: {n_items} items with {self.n_workers} workers "
            f"in {time.time() - start_time:.3f}s"
        )
        return results

    def _parallel_map(
        self,
        items: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
        progress_callback: Optional[Callable[[int, int], None]],
    ) -> List[Any]:
        """
        Execute with multiprocessing.Pool.

        Uses imap_unordered for responsiveness, then reorders results to
        match input order.
        """
        n_items = len(items)
        worker_args = [(i, item, worker_fn, worker_kwargs) for i, item in enumerate(items)]

        results_dict: Dict[int, Any] = {}
        errors: List[Tuple[int, str]] = []
        with Pool(processes=min(self.n_workers, n_items)) as pool:
            for completed, (idx, result, error) in enumerate(
                pool.imap_unordered(_worker_wrapper, worker_args), start=1
            ):
                if error:
                    errors.append((idx, error))
                else:
                    results_dict[idx] = result
                if progress_callback:
                    progress_callback(completed, n_items)

        if errors:
            error_msg = f"{len(errors)} items failed out of {n_items}"
            logger.error(error_msg)
            for idx, error in errors[:5]:
                logger.error(f"  Item {idx}: {error}")
            if len(errors) > 5:
                logger.error(f"  ... and {len(errors) - 5} more errors")
            raise RuntimeError(error_msg)

        return [results_dict[i] for i in range(n_items)]
