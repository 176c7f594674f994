"""
Candidate Offset Generation

Strategies that hypothesize rigid transforms mapping model poses onto space
poses. Both strategies pair poses whose rotation blocks agree within the
tolerance and derive an offset from each pair:

- affine: full 4x4 offsets S * inverse(M_ref) from the first model pose
- decomposed: translation-only offsets t(S) - t(M) for every model pose,
  assuming the relative rotation between the pair is the identity

Each strategy also knows how to apply its offsets to a model pose and how to
match the result against a space pose, which is what the validator uses.
Candidates are deduplicated at insertion; output order follows the input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Type

import numpy as np

from ..utils.logging import setup_logger
from .pose import Offset, Pose, PoseSet, TranslationOffset
from .tolerance import rotation_equal, transform_equal, translation_equal

logger = setup_logger(__name__)


class CandidateStrategy(ABC):
    """Common interface for candidate generation, application and matching."""

    name: str = ""

    @abstractmethod
    def generate(self, model: PoseSet, space: PoseSet, tolerance: float) -> Tuple[Offset, ...]:
        """Return deduplicated candidate offsets in generation order."""

    @abstractmethod
    def apply(self, offset: Offset, pose: Pose) -> Pose:
        """Apply a candidate offset to a model pose."""

    @abstractmethod
    def matches(self, transformed: Pose, target: Pose, tolerance: float) -> bool:
        """Whether a transformed model pose reproduces a space pose."""

    @abstractmethod
    def is_duplicate(self, a: Offset, b: Offset, tolerance: float) -> bool:
        """Whether two candidates are tolerance-equal."""

    def _insert_unique(self, candidates: List[Offset], candidate: Offset, tolerance: float) -> bool:
        for existing in candidates:
            if self.is_duplicate(existing, candidate, tolerance):
                return False
        candidates.append(candidate)
        return True

    @staticmethod
    def _report_inputs(model: PoseSet, space: PoseSet) -> bool:
        if model.is_empty:
            logger.warning("No model poses; cannot generate candidate offsets.")
            return False
        if space.is_empty:
            logger.warning("No space poses; no candidate offsets can match.")
            return False
        return True


class AffineStrategy(CandidateStrategy):
    """Full rigid offsets derived from the first model pose."""

    name = "affine"

    def generate(self, model: PoseSet, space: PoseSet, tolerance: float) -> Tuple[Offset, ...]:
        if not self._report_inputs(model, space):
            return ()

        reference = model[0]
        reference_inv = reference.inverse()
        candidates: List[Offset] = []
        for s in space:
            if not rotation_equal(reference, s, tolerance):
                continue
            candidate = s.compose(reference_inv)
            self._insert_unique(candidates, candidate, tolerance)

        logger.info(f"Generated {len(candidates)} candidate offsets (affine) "
                    f"from {len(space)} space poses.")
        return tuple(candidates)

    def apply(self, offset: Offset, pose: Pose) -> Pose:
        if isinstance(offset, TranslationOffset):
            offset = offset.as_pose()
        return offset.compose(pose)

    def matches(self, transformed: Pose, target: Pose, tolerance: float) -> bool:
        return transform_equal(transformed, target, tolerance)

    def is_duplicate(self, a: Offset, b: Offset, tolerance: float) -> bool:
        return transform_equal(_as_pose(a), _as_pose(b), tolerance)


class DecomposedStrategy(CandidateStrategy):
    """Translation-only offsets; matched pairs must share their rotation block."""

    name = "decomposed"

    def generate(self, model: PoseSet, space: PoseSet, tolerance: float) -> Tuple[Offset, ...]:
        if not self._report_inputs(model, space):
            return ()

        candidates: List[Offset] = []
        for m in model:
            m_t = m.matrix[:3, 3]
            for s in space:
                if not rotation_equal(m, s, tolerance):
                    continue
                candidate = TranslationOffset(s.matrix[:3, 3] - m_t)
                self._insert_unique(candidates, candidate, tolerance)

        logger.info(f"Generated {len(candidates)} candidate offsets (decomposed) "
                    f"from {len(model)} model x {len(space)} space poses.")
        return tuple(candidates)

    def apply(self, offset: Offset, pose: Pose) -> Pose:
        if isinstance(offset, Pose):
            # Only the translation of a full transform is meaningful here
            offset = TranslationOffset(offset.matrix[:3, 3])
        return pose.translated(offset.vector)

    def matches(self, transformed: Pose, target: Pose, tolerance: float) -> bool:
        return (rotation_equal(transformed, target, tolerance)
                and translation_equal(transformed.matrix[:3, 3], target.matrix[:3, 3], tolerance))

    def is_duplicate(self, a: Offset, b: Offset, tolerance: float) -> bool:
        return translation_equal(_as_vector(a), _as_vector(b), tolerance)


def _as_pose(offset: Offset) -> Pose:
    return offset.as_pose() if isinstance(offset, TranslationOffset) else offset


def _as_vector(offset: Offset) -> np.ndarray:
    return offset.vector if isinstance(offset, TranslationOffset) else offset.matrix[:3, 3]


_STRATEGIES: Dict[str, Type[CandidateStrategy]] = {
    AffineStrategy.name: AffineStrategy,
    DecomposedStrategy.name: DecomposedStrategy,
}


def get_strategy(name: str | CandidateStrategy) -> CandidateStrategy:
    """Look up a strategy by name ('affine' or 'decomposed')."""
    if isinstance(name, CandidateStrategy):
        return name
    try:
        return _STRATEGIES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown candidate strategy '{name}'. Choose one of: {', '.join(sorted(_STRATEGIES))}."
        ) from None


def generate_candidates(model: PoseSet, space: PoseSet, tolerance: float,
                        strategy: str | CandidateStrategy = "affine") -> Tuple[Offset, ...]:
    return get_strategy(strategy).generate(model, space, tolerance)
