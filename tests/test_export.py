"""
Tests for offset export utilities.
"""

from pathlib import Path
import json
import logging
import sys

import numpy as np
import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from pose_correspondence.matching.pose import Pose, TranslationOffset
from pose_correspondence.utils.export import (
    ExportRecord,
    export_offsets_to_json,
    load_offsets_from_json,
)


def _known_transform() -> Pose:
    th = np.deg2rad(33.0)
    R = np.array([[np.cos(th), -np.sin(th), 0.0], [np.sin(th), np.cos(th), 0.0], [0.0, 0.0, 1.0]])
    return Pose.from_components(R, [1.25, -2.5, 3.75])


class TestExportOffsets:
    def test_roundtrip_reproduces_all_scalars(self, tmp_path):
        pose = _known_transform()
        out = export_offsets_to_json([pose], tmp_path / "offsets.json")
        reloaded = load_offsets_from_json(out)
        assert len(reloaded) == 1
        np.testing.assert_allclose(reloaded[0].matrix, pose.matrix, rtol=0, atol=1e-12)

    def test_field_names_are_row_major(self, tmp_path):
        out = export_offsets_to_json([_known_transform()], tmp_path / "offsets.json")
        data = json.loads(out.read_text())
        assert list(data[0].keys()) == [f"e{r}{c}" for r in range(4) for c in range(4)]
        assert data[0]["e03"] == 1.25
        assert data[0]["e13"] == -2.5
        assert data[0]["e23"] == 3.75
        assert data[0]["e33"] == 1.0

    def test_translation_offset_is_lifted(self, tmp_path):
        out = export_offsets_to_json([TranslationOffset([1.0, 2.0, 3.0])], tmp_path / "o.json")
        pose = load_offsets_from_json(out)[0]
        np.testing.assert_allclose(pose.rotation(), np.eye(3))
        np.testing.assert_allclose(pose.translation(), [1.0, 2.0, 3.0])

    def test_creates_parent_directories(self, tmp_path):
        out = export_offsets_to_json([Pose.identity()], tmp_path / "a" / "b" / "o.json")
        assert out.exists()

    @pytest.mark.parametrize("offsets", [[], None])
    def test_empty_export_is_reported_noop(self, tmp_path, caplog, offsets):
        target = tmp_path / "o.json"
        with caplog.at_level(logging.ERROR):
            assert export_offsets_to_json(offsets, target) is None
        assert not target.exists()
        assert "nothing to export" in caplog.text


class TestLoadOffsets:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_offsets_from_json(tmp_path / "missing.json")

    def test_invalid_records_raise(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"e00": 1.0}]))
        with pytest.raises(ValueError, match="Invalid offset records"):
            load_offsets_from_json(path)

    def test_record_to_pose(self):
        record = ExportRecord.from_offset(_known_transform())
        np.testing.assert_allclose(record.to_pose().matrix, _known_transform().matrix)
