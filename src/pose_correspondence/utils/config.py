"""
Configuration management for pose-correspondence.

Provides a typed pydantic model and YAML loader with sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Literal, Tuple, Any, Dict

from pydantic import BaseModel, Field, ValidationError
import yaml


# -----------------------
# Typed config structures
# -----------------------

RGBA = Tuple[float, float, float, float]


class PathsConfig(BaseModel):
    base_dir: str = Field(default="data")
    model_file: str = Field(default="model.json")
    space_file: str = Field(default="space.json")
    offset_export_file: str = Field(default="offsetExport.json")
    scene_export_file: Optional[str] = Field(
        default=None,
        description="If set, the scene primitives are written to this JSON file",
    )

    def resolve(self, file_name: str) -> Path:
        """Resolve a file name relative to base_dir (absolute names pass through)."""
        path = Path(file_name)
        if path.is_absolute():
            return path
        return Path(self.base_dir) / path


class MatchingConfig(BaseModel):
    tolerance: float = Field(
        default=0.0001,
        ge=0.0,
        description="Maximum per-component difference for two values to be considered equal",
    )
    strategy: Literal["affine", "decomposed"] = Field(
        default="decomposed",
        description="'affine' derives full 4x4 offsets from model[0]; 'decomposed' derives translation-only offsets",
    )
    quaternion_min_scale: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Clamp the Shepperd scale to this floor before dividing (None = raw behaviour)",
    )


class ParallelConfig(BaseModel):
    enabled: bool = Field(default=False, description="Validate candidates in a process pool")
    n_workers: Optional[int] = Field(default=None, description="Worker processes (None = cpu_count - 1)")


class VisualizationConfig(BaseModel):
    selected_offset_index: int = Field(default=0)
    model_color: RGBA = Field(default=(0.0, 0.0, 1.0, 1.0))
    transformed_color: RGBA = Field(default=(0.0, 1.0, 0.0, 1.0))
    space_color: RGBA = Field(default=(1.0, 1.0, 1.0, 1.0))
    cube_scale: Tuple[float, float, float] = Field(default=(0.5, 0.5, 0.5))
    space_scale_factor: float = Field(default=0.7, gt=0.0)


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    file: Optional[str] = Field(default=None)


class AppConfig(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# -----------------------
# Loader
# -----------------------


def _project_root() -> Path:
    """
    Resolve the repository root directory.

    File is at: repo_root/src/pose_correspondence/utils/config.py
    parents sequence:
      0 -> .../src/pose_correspondence/utils
      1 -> .../src/pose_correspondence
      2 -> .../src
      3 -> repo_root
    """
    return Path(__file__).resolve().parents[3]


def load_config(path: Optional[str | Path] = None, *, allow_missing: bool = True) -> AppConfig:
    """
    Load configuration from YAML into a typed AppConfig.

    Search order when path is None:
    1) repo_root/config/default.yaml
    2) if missing and allow_missing=True: return default AppConfig()

    Args:
        path: Explicit YAML file path.
        allow_missing: If True, returns defaults when file missing; otherwise raises.

    Returns:
        AppConfig instance
    """
    cfg_path: Path
    if path is None:
        cfg_path = _project_root() / "config" / "default.yaml"
    else:
        cfg_path = Path(path)

    if not cfg_path.exists():
        if allow_missing:
            return AppConfig()
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        # Re-raise with context to help users fix the YAML
        raise ValueError(f"Invalid configuration in {cfg_path}: {e}")
