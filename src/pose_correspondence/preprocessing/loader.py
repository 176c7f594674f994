"""
Pose Data Loader

This module loads model and space pose sets from JSON files. Each file holds
an array of 16-float records whose field names give the matrix element as
m<row><col>, listed column by column:

    m00, m10, m20, m30, m01, m11, m21, m31, m02, m12, m22, m32, m03, m13, m23, m33

An object of the form {"matrices": [...]} is accepted as well.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import numpy as np
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..matching.pose import Pose, PoseSet
from ..utils.logging import setup_logger

logger = setup_logger(__name__)


class PoseRecord(BaseModel):
    """One serialized 4x4 pose, field mRC = element at row R, column C."""

    model_config = ConfigDict(extra="ignore")

    m00: float
    m10: float
    m20: float
    m30: float
    m01: float
    m11: float
    m21: float
    m31: float
    m02: float
    m12: float
    m22: float
    m32: float
    m03: float
    m13: float
    m23: float
    m33: float

    def to_matrix(self) -> np.ndarray:
        return np.array([[getattr(self, f"m{r}{c}") for c in range(4)] for r in range(4)], dtype=np.float64)

    def to_pose(self) -> Pose:
        return Pose(self.to_matrix())

    @classmethod
    def from_matrix(cls, matrix: Any) -> "PoseRecord":
        M = np.asarray(matrix.matrix if isinstance(matrix, Pose) else matrix, dtype=np.float64)
        if M.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {M.shape}")
        return cls(**{f"m{r}{c}": float(M[r, c]) for r in range(4) for c in range(4)})


_RECORD_LIST = TypeAdapter(List[PoseRecord])


class PoseLoader:
    """
    Loads PoseSets from JSON files.

    A missing file is reported and yields an empty PoseSet; a file that exists
    but cannot be parsed raises ValueError.
    """

    def __init__(self, *, label: str = "pose"):
        """
        Args:
            label: Name used in log messages (e.g. 'model' or 'space')
        """
        self.label = label

    def load(self, file_path: str | Path) -> PoseSet:
        """
        Load a pose set from a JSON file.

        Args:
            file_path: Path to the JSON file

        Returns:
            PoseSet in file order (empty if the file does not exist)

        Raises:
            ValueError: If the file content is not a valid list of pose records
        """
        file_path = Path(file_path)
        if not file_path.exists():
            logger.error(f"{self.label.capitalize()} file not found: {file_path}")
            return PoseSet.empty()

        text = file_path.read_text(encoding="utf-8")
        poses = self.parse(text, source=str(file_path))
        logger.info(f"Loaded {len(poses)} {self.label} matrices from {file_path}")
        return poses

    def parse(self, text: str, *, source: str = "<string>") -> PoseSet:
        """Parse JSON text into a PoseSet."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {source}: {e}") from e

        if isinstance(raw, dict) and "matrices" in raw:
            raw = raw["matrices"]
        if raw is None:
            raw = []

        try:
            records = _RECORD_LIST.validate_python(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid pose records in {source}: {e}") from e

        return PoseSet(tuple(r.to_pose() for r in records))


def load_pose_sets(model_path: str | Path, space_path: str | Path) -> tuple[PoseSet, PoseSet]:
    """Load the model and space pose sets."""
    model = PoseLoader(label="model").load(model_path)
    space = PoseLoader(label="space").load(space_path)
    return model, space


def save_pose_set(poses: PoseSet, output_path: str | Path) -> Path:
    """Write a PoseSet in the loader's input format."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    records = [PoseRecord.from_matrix(p).model_dump() for p in poses]
    output_path.write_text(json.dumps(records, indent=2), encoding="utf-8")
    logger.info(f"Wrote {len(records)} poses to {output_path}")
    return output_path
