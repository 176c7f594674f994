"""
Tests for scene primitive construction.
"""

from pathlib import Path
import json
import logging
import sys

import numpy as np
import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from pose_correspondence.matching.pose import Pose, PoseSet, TranslationOffset
from pose_correspondence.utils.config import VisualizationConfig
from pose_correspondence.visualization.scene import SceneBuilder, SceneStyle, export_scene_to_json


@pytest.fixture
def poses():
    model = PoseSet((Pose.identity(), Pose.from_components(np.eye(3), [1.0, 0.0, 0.0])))
    space = PoseSet((
        Pose.from_components(np.eye(3), [5.0, 5.0, 5.0]),
        Pose.from_components(np.eye(3), [6.0, 5.0, 5.0]),
        Pose.from_components(np.diag([1.0, -1.0, -1.0]), [0.0, 0.0, 0.0]),
    ))
    offsets = (TranslationOffset([5.0, 5.0, 5.0]),)
    return model, space, offsets


def test_groups_colors_and_scales(poses):
    model, space, offsets = poses
    scene = SceneBuilder().build(model, space, offsets, selected_index=0)

    assert len(scene.model) == 2
    assert len(scene.transformed) == 2
    assert len(scene.space) == 3
    assert scene.selected_offset_index == 0

    assert scene.model[0].color == (0.0, 0.0, 1.0, 1.0)
    assert scene.transformed[0].color == (0.0, 1.0, 0.0, 1.0)
    assert scene.space[0].color == (1.0, 1.0, 1.0, 1.0)
    assert scene.model[0].scale == (0.5, 0.5, 0.5)
    assert scene.space[0].scale == pytest.approx((0.35, 0.35, 0.35))


def test_transformed_positions_and_rotations(poses):
    model, space, offsets = poses
    scene = SceneBuilder().build(model, space, offsets)
    assert scene.transformed[1].position == pytest.approx((6.0, 5.0, 5.0))
    assert scene.transformed[0].rotation == pytest.approx((0.0, 0.0, 0.0, 1.0))
    # half turn about x
    assert scene.space[2].rotation == pytest.approx((1.0, 0.0, 0.0, 0.0))


def test_affine_offsets_are_applied_as_transforms(poses):
    model, space, _ = poses
    offset = Pose.from_components(np.eye(3), [5.0, 5.0, 5.0])
    scene = SceneBuilder().build(model, space, [offset], strategy="affine")
    assert scene.transformed[0].position == pytest.approx((5.0, 5.0, 5.0))


@pytest.mark.parametrize("index", [1, -1, 99])
def test_out_of_range_index_is_tolerated(poses, caplog, index):
    model, space, offsets = poses
    with caplog.at_level(logging.WARNING):
        scene = SceneBuilder().build(model, space, offsets, selected_index=index)
    assert scene.transformed == ()
    assert scene.selected_offset_index is None
    assert len(scene.model) == 2
    assert "out of range" in caplog.text


def test_no_offsets(poses):
    model, space, _ = poses
    scene = SceneBuilder().build(model, space, ())
    assert scene.transformed == ()


def test_style_from_config():
    vis = VisualizationConfig(model_color=(1.0, 0.0, 0.0, 1.0), cube_scale=(1.0, 2.0, 3.0), space_scale_factor=0.5)
    style = SceneStyle.from_config(vis)
    assert style.model_color == (1.0, 0.0, 0.0, 1.0)
    model = PoseSet((Pose.identity(),))
    scene = SceneBuilder(style).build(model, model, ())
    assert scene.space[0].scale == pytest.approx((0.5, 1.0, 1.5))


def test_export_scene(poses, tmp_path):
    model, space, offsets = poses
    scene = SceneBuilder().build(model, space, offsets)
    out = export_scene_to_json(scene, tmp_path / "scene" / "scene.json")
    data = json.loads(out.read_text())
    assert data["selected_offset_index"] == 0
    assert len(data["model"]) == 2
    assert len(data["transformed"]) == 2
    assert len(data["space"]) == 3
    assert data["transformed"][1]["position"] == [6.0, 5.0, 5.0]
