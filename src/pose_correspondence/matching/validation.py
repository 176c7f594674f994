"""
Offset Validation

A candidate offset is accepted only if every model pose, once the offset is
applied, reproduces at least one space pose within tolerance.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..utils.logging import setup_logger
from .candidates import CandidateStrategy, get_strategy
from .pose import Offset, PoseSet

logger = setup_logger(__name__)


def validate_candidate(
    candidate: Offset,
    *,
    model: PoseSet,
    space: PoseSet,
    tolerance: float,
    strategy: CandidateStrategy,
) -> bool:
    """Check one candidate; stops at the first model pose without a match."""
    for m in model:
        transformed = strategy.apply(candidate, m)
        if not any(strategy.matches(transformed, s, tolerance) for s in space):
            return False
    return True


class OffsetValidator:
    """Filters candidate offsets down to those that explain the whole model."""

    def __init__(
        self,
        strategy: str | CandidateStrategy = "affine",
        tolerance: float = 0.01,
        *,
        parallel: bool = False,
        n_workers: Optional[int] = None,
    ):
        self.strategy = get_strategy(strategy)
        self.tolerance = tolerance
        self.parallel = parallel
        self.n_workers = n_workers

    def validate(
        self,
        candidates: Sequence[Offset],
        model: PoseSet,
        space: PoseSet,
        tolerance: Optional[float] = None,
    ) -> Tuple[Offset, ...]:
        """
        Return the accepted candidates in generation order.

        An empty model would accept every candidate vacuously, so it is
        reported and yields no offsets.
        """
        tol = self.tolerance if tolerance is None else tolerance
        candidates = list(candidates)

        if not candidates:
            logger.warning("No candidate offsets to validate.")
            return ()
        if model.is_empty:
            logger.warning("No model poses; nothing to validate candidates against.")
            return ()
        if space.is_empty:
            logger.warning("No space poses; every candidate is rejected.")
            return ()

        kwargs = dict(model=model, space=space, tolerance=tol, strategy=self.strategy)
        if self.parallel and len(candidates) > 1:
            from ..acceleration.parallel_executor import ParallelExecutor

            flags = ParallelExecutor(n_workers=self.n_workers).map_items(
                candidates, validate_candidate, kwargs
            )
        else:
            flags = [validate_candidate(c, **kwargs) for c in candidates]

        valid = tuple(c for c, ok in zip(candidates, flags) if ok)
        if valid:
            logger.info(f"Found {len(valid)} valid offsets out of {len(candidates)} candidates.")
        else:
            logger.warning(f"No valid offsets found among {len(candidates)} candidates.")
        return valid
