"""
Pose Matching Module

This module provides the pose-correspondence matcher:
- Pose / PoseSet value types
- Tolerance equality predicates
- Rotation to quaternion conversion (Shepperd's method)
- Candidate offset strategies (affine and decomposed)
- Offset validation
"""

from .pose import Pose, PoseSet, TranslationOffset, Offset
from .tolerance import rotation_equal, translation_equal, transform_equal
from .quaternion import rotation_to_quaternion, quaternion_branch
from .candidates import (
    CandidateStrategy,
    AffineStrategy,
    DecomposedStrategy,
    get_strategy,
    generate_candidates,
)
from .validation import OffsetValidator, validate_candidate
from .matcher import PoseMatcher, MatchResult

__all__ = [
    # Data model
    "Pose",
    "PoseSet",
    "TranslationOffset",
    "Offset",
    # Tolerance
    "rotation_equal",
    "translation_equal",
    "transform_equal",
    # Quaternion
    "rotation_to_quaternion",
    "quaternion_branch",
    # Candidates
    "CandidateStrategy",
    "AffineStrategy",
    "DecomposedStrategy",
    "get_strategy",
    "generate_candidates",
    # Validation
    "OffsetValidator",
    "validate_candidate",
    # Facade
    "PoseMatcher",
    "MatchResult",
]
