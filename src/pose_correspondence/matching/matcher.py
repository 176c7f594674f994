"""
Pose Matcher

Ties loading, candidate generation, validation and export together for one
model/space pair. Every reported condition (missing files, empty sets, no
candidates, no valid offsets) is logged and produces an empty result.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from ..preprocessing.loader import PoseLoader
from ..utils.export import export_offsets_to_json
from ..utils.logging import setup_logger
from .candidates import CandidateStrategy, get_strategy
from .pose import Offset, PoseSet
from .validation import OffsetValidator

if TYPE_CHECKING:
    from ..utils.config import AppConfig

logger = setup_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    candidates: Tuple[Offset, ...]
    offsets: Tuple[Offset, ...]

    @property
    def found(self) -> bool:
        return len(self.offsets) > 0


class PoseMatcher:
    """
    Finds rigid offsets that map the model pose set onto the space pose set.

    Example:
        matcher = PoseMatcher("model.json", "space.json", tolerance=1e-4, strategy="decomposed")
        matcher.load_matrices()
        offsets = matcher.validate_offsets(matcher.generate_candidate_offsets())
        matcher.export_offsets(offsets, "offsetExport.json")
    """

    def __init__(
        self,
        model_path: Optional[str | Path] = None,
        space_path: Optional[str | Path] = None,
        tolerance: float = 0.01,
        strategy: str | CandidateStrategy = "affine",
        *,
        parallel: bool = False,
        n_workers: Optional[int] = None,
    ):
        """
        Args:
            model_path: JSON file with the model poses
            space_path: JSON file with the space poses
            tolerance: Default per-component tolerance for every comparison
            strategy: 'affine' or 'decomposed' (or a CandidateStrategy instance)
            parallel: Validate candidates in a process pool
            n_workers: Worker count for parallel validation (None = auto)
        """
        if tolerance < 0:
            raise ValueError(f"Tolerance must be non-negative, got {tolerance}")
        self.model_path = Path(model_path) if model_path is not None else None
        self.space_path = Path(space_path) if space_path is not None else None
        self.tolerance = float(tolerance)
        self.strategy = get_strategy(strategy)
        self.validator = OffsetValidator(
            self.strategy, self.tolerance, parallel=parallel, n_workers=n_workers
        )
        self._model = PoseSet.empty()
        self._space = PoseSet.empty()

    @classmethod
    def from_config(cls, cfg: "AppConfig") -> "PoseMatcher":
        return cls(
            cfg.paths.resolve(cfg.paths.model_file),
            cfg.paths.resolve(cfg.paths.space_file),
            tolerance=cfg.matching.tolerance,
            strategy=cfg.matching.strategy,
            parallel=cfg.parallel.enabled,
            n_workers=cfg.parallel.n_workers,
        )

    @classmethod
    def from_pose_sets(cls, model: PoseSet, space: PoseSet, **kwargs) -> "PoseMatcher":
        """Build a matcher over in-memory pose sets (no files involved)."""
        matcher = cls(**kwargs)
        matcher._model = model
        matcher._space = space
        return matcher

    @property
    def model(self) -> PoseSet:
        return self._model

    @property
    def space(self) -> PoseSet:
        return self._space

    def load_matrices(self) -> Tuple[PoseSet, PoseSet]:
        """Load model and space poses; missing files leave that set empty."""
        if self.model_path is not None:
            self._model = PoseLoader(label="model").load(self.model_path)
        else:
            logger.error("No model file configured.")
        if self.space_path is not None:
            self._space = PoseLoader(label="space").load(self.space_path)
        else:
            logger.error("No space file configured.")
        return self._model, self._space

    def generate_candidate_offsets(self) -> Tuple[Offset, ...]:
        return self.strategy.generate(self._model, self._space, self.tolerance)

    def validate_offsets(self, candidates: Sequence[Offset]) -> Tuple[Offset, ...]:
        return self.validator.validate(candidates, self._model, self._space)

    def export_offsets(self, offsets: Sequence[Offset], output_path: str | Path) -> Optional[Path]:
        return export_offsets_to_json(offsets, output_path)

    def run(self, *, load: bool = True) -> MatchResult:
        """Load (optionally), generate and validate in one call."""
        if load:
            self.load_matrices()
        candidates = self.generate_candidate_offsets()
        offsets = self.validate_offsets(candidates) if candidates else ()
        if not candidates:
            logger.warning("No candidate offsets were generated; nothing to validate.")
        return MatchResult(candidates=candidates, offsets=offsets)
