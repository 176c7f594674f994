"""
Pose Data Loading Module

Loads model and space pose sets from JSON arrays of 16-float records.
"""

from .loader import PoseLoader, PoseRecord, load_pose_sets, save_pose_set

__all__ = [
    "PoseLoader",
    "PoseRecord",
    "load_pose_sets",
    "save_pose_set",
]
