"""
Tests for the JSON pose loader.
"""

from pathlib import Path
import json
import logging
import sys

import numpy as np
import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from pose_correspondence.matching.pose import Pose, PoseSet
from pose_correspondence.preprocessing.loader import (
    PoseLoader,
    PoseRecord,
    load_pose_sets,
    save_pose_set,
)

# Column-major field order as written by the producing application
FIELDS = ["m00", "m10", "m20", "m30", "m01", "m11", "m21", "m31",
          "m02", "m12", "m22", "m32", "m03", "m13", "m23", "m33"]


def _record(matrix: np.ndarray) -> dict:
    return {name: float(matrix[int(name[1]), int(name[2])]) for name in FIELDS}


def _sample_matrix() -> np.ndarray:
    M = np.eye(4)
    M[:3, :3] = [[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]
    M[:3, 3] = [1.0, 2.0, 3.0]
    return M


def test_field_names_map_to_row_and_column(tmp_path):
    M = _sample_matrix()
    path = tmp_path / "model.json"
    path.write_text(json.dumps([_record(M)]))

    poses = PoseLoader().load(path)
    assert len(poses) == 1
    np.testing.assert_allclose(poses[0].matrix, M)
    np.testing.assert_allclose(poses[0].translation(), [1.0, 2.0, 3.0])


def test_record_values_in_file_order():
    text = json.dumps([dict(zip(FIELDS, range(16)))])
    pose = PoseLoader().parse(text)[0]
    # m10 is the second value listed, so row 1 column 0 holds 1
    assert pose.matrix[1, 0] == 1.0
    assert pose.matrix[0, 1] == 4.0
    assert pose.matrix[0, 3] == 12.0


def test_wrapped_matrices_object():
    M = _sample_matrix()
    poses = PoseLoader().parse(json.dumps({"matrices": [_record(M), _record(np.eye(4))]}))
    assert len(poses) == 2
    np.testing.assert_allclose(poses[1].matrix, np.eye(4))


def test_empty_array():
    assert PoseLoader().parse("[]").is_empty


def test_missing_file_yields_empty_set(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        poses = PoseLoader(label="space").load(tmp_path / "missing.json")
    assert isinstance(poses, PoseSet)
    assert poses.is_empty
    assert "Space file not found" in caplog.text


def test_invalid_json_raises():
    with pytest.raises(ValueError, match="Invalid JSON"):
        PoseLoader().parse("{not json")


def test_incomplete_record_raises():
    record = _record(np.eye(4))
    del record["m23"]
    with pytest.raises(ValueError, match="Invalid pose records"):
        PoseLoader().parse(json.dumps([record]))


def test_extra_fields_are_ignored():
    record = _record(np.eye(4))
    record["name"] = "marker-7"
    assert len(PoseLoader().parse(json.dumps([record]))) == 1


def test_save_then_load(tmp_path):
    poses = PoseSet((Pose(_sample_matrix()), Pose.identity()))
    save_pose_set(poses, tmp_path / "nested" / "space.json")
    model, space = load_pose_sets(tmp_path / "nope.json", tmp_path / "nested" / "space.json")
    assert model.is_empty
    assert len(space) == 2
    np.testing.assert_allclose(space[0].matrix, _sample_matrix())


def test_pose_record_from_matrix_shape_check():
    with pytest.raises(ValueError):
        PoseRecord.from_matrix(np.eye(3))
