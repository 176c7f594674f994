"""
Pose Scene Builder

This module turns pose sets and an accepted offset into colored cube
primitives that a downstream viewer can place in a scene. Nothing is drawn
here; the scene is plain data.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

from ..matching.candidates import CandidateStrategy, get_strategy
from ..matching.pose import Offset, Pose, PoseSet
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

RGBA = Tuple[float, float, float, float]


@dataclass(frozen=True)
class SceneStyle:
    model_color: RGBA = (0.0, 0.0, 1.0, 1.0)
    transformed_color: RGBA = (0.0, 1.0, 0.0, 1.0)
    space_color: RGBA = (1.0, 1.0, 1.0, 1.0)
    cube_scale: Tuple[float, float, float] = (0.5, 0.5, 0.5)
    space_scale_factor: float = 0.7

    @classmethod
    def from_config(cls, vis_cfg) -> "SceneStyle":
        return cls(
            model_color=tuple(vis_cfg.model_color),
            transformed_color=tuple(vis_cfg.transformed_color),
            space_color=tuple(vis_cfg.space_color),
            cube_scale=tuple(vis_cfg.cube_scale),
            space_scale_factor=vis_cfg.space_scale_factor,
        )


@dataclass(frozen=True)
class CubePrimitive:
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]  # (x, y, z, w)
    scale: Tuple[float, float, float]
    color: RGBA

    def to_dict(self) -> Dict[str, list]:
        return {
            "position": list(self.position),
            "rotation": list(self.rotation),
            "scale": list(self.scale),
            "color": list(self.color),
        }


@dataclass(frozen=True)
class Scene:
    model: Tuple[CubePrimitive, ...] = field(default_factory=tuple)
    transformed: Tuple[CubePrimitive, ...] = field(default_factory=tuple)
    space: Tuple[CubePrimitive, ...] = field(default_factory=tuple)
    selected_offset_index: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "selected_offset_index": self.selected_offset_index,
            "model": [c.to_dict() for c in self.model],
            "transformed": [c.to_dict() for c in self.transformed],
            "space": [c.to_dict() for c in self.space],
        }


class SceneBuilder:
    """Builds cube primitives for model, transformed model and space poses."""

    def __init__(self, style: Optional[SceneStyle] = None, *, quaternion_min_scale: Optional[float] = None):
        self.style = style or SceneStyle()
        self.quaternion_min_scale = quaternion_min_scale

    def build(
        self,
        model: PoseSet,
        space: PoseSet,
        offsets: Sequence[Offset] = (),
        selected_index: int = 0,
        strategy: Union[str, CandidateStrategy] = "decomposed",
    ) -> Scene:
        """
        Args:
            model: Model poses
            space: Space poses
            offsets: Accepted offsets
            selected_index: Which offset to apply for the transformed group;
                an index outside the list leaves that group empty
            strategy: Determines how an offset is applied to a model pose
        """
        style = self.style
        model_cubes = self._cubes(model, style.cube_scale, style.model_color)
        space_scale = tuple(v * style.space_scale_factor for v in style.cube_scale)
        space_cubes = self._cubes(space, space_scale, style.space_color)

        transformed: Tuple[CubePrimitive, ...] = ()
        chosen: Optional[int] = None
        if not offsets:
            logger.warning("No valid offsets; transformed model is not shown.")
        elif not 0 <= selected_index < len(offsets):
            logger.warning(
                f"Selected offset index {selected_index} is out of range "
                f"(0..{len(offsets) - 1}); transformed model is not shown."
            )
        else:
            applier = get_strategy(strategy)
            offset = offsets[selected_index]
            moved = PoseSet(tuple(applier.apply(offset, m) for m in model))
            transformed = self._cubes(moved, style.cube_scale, style.transformed_color)
            chosen = selected_index

        return Scene(model=model_cubes, transformed=transformed, space=space_cubes,
                     selected_offset_index=chosen)

    def _cubes(self, poses: PoseSet, scale, color) -> Tuple[CubePrimitive, ...]:
        return tuple(self._cube(p, scale, color) for p in poses)

    def _cube(self, pose: Pose, scale, color) -> CubePrimitive:
        t = pose.translation()
        return CubePrimitive(
            position=(float(t[0]), float(t[1]), float(t[2])),
            rotation=pose.rotation_as_quaternion(min_scale=self.quaternion_min_scale),
            scale=tuple(float(v) for v in scale),
            color=tuple(float(v) for v in color),
        )


def export_scene_to_json(scene: Scene, output_path: str | Path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = scene.to_dict()
    output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    n = len(scene.model) + len(scene.transformed) + len(scene.space)
    logger.info(f"Wrote scene with {n} primitives to {output_path}")
    return output_path
