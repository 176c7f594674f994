"""
Export utilities for accepted offsets.

Each offset is written as a full 4x4 matrix in a flat record with row-major
field names e00, e01, ..., e33. Translation-only offsets are lifted to a
transform with identity rotation first.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..matching.pose import Offset, Pose, TranslationOffset
from .logging import setup_logger

logger = setup_logger(__name__)


class ExportRecord(BaseModel):
    e00: float
    e01: float
    e02: float
    e03: float
    e10: float
    e11: float
    e12: float
    e13: float
    e20: float
    e21: float
    e22: float
    e23: float
    e30: float
    e31: float
    e32: float
    e33: float

    @classmethod
    def from_offset(cls, offset: Offset) -> "ExportRecord":
        pose = offset.as_pose() if isinstance(offset, TranslationOffset) else offset
        M = pose.matrix
        return cls(**{f"e{r}{c}": float(M[r, c]) for r in range(4) for c in range(4)})

    def to_pose(self) -> Pose:
        return Pose(np.array([[getattr(self, f"e{r}{c}") for c in range(4)] for r in range(4)]))


_EXPORT_LIST = TypeAdapter(List[ExportRecord])


def export_offsets_to_json(offsets: Optional[Sequence[Offset]], output_path: str | Path) -> Optional[Path]:
    """
    Write accepted offsets to a JSON file.

    Args:
        offsets: Offsets to export (4x4 poses or translation-only offsets)
        output_path: Destination file; parent directories are created

    Returns:
        Path to the written file, or None when there was nothing to export
    """
    if not offsets:
        logger.error("Offset list is empty; nothing to export.")
        return None

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = [ExportRecord.from_offset(o).model_dump() for o in offsets]
    output_path.write_text(json.dumps(records, indent=2), encoding="utf-8")
    logger.info(f"Exported {len(records)} offsets to {output_path}")
    return output_path


def load_offsets_from_json(input_path: str | Path) -> List[Pose]:
    """
    Read offsets written by export_offsets_to_json.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a list of export records
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Offset file not found: {input_path}")
    try:
        records = _EXPORT_LIST.validate_json(input_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid offset records in {input_path}: {e}") from e
    logger.info(f"Loaded {len(records)} offsets from {input_path}")
    return [r.to_pose() for r in records]
