"""
Tolerance equality predicates.

Two values are equal when every pair of corresponding components differs by
at most the tolerance (inclusive). The tolerance is passed on every call.
"""

from __future__ import annotations

from typing import Union, TYPE_CHECKING

import numpy as np

from .pose import Pose

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

MatrixLike = Union[Pose, "ArrayLike"]


def _check_tolerance(tolerance: float) -> float:
    tol = float(tolerance)
    if not tol >= 0.0:
        raise ValueError(f"Tolerance must be non-negative, got {tolerance}")
    return tol


def _as_array(value: MatrixLike) -> "NDArray[np.float64]":
    if isinstance(value, Pose):
        return value.matrix
    return np.asarray(value, dtype=np.float64)


def _rotation_block(value: MatrixLike) -> "NDArray[np.float64]":
    arr = _as_array(value)
    if arr.shape == (4, 4):
        return arr[:3, :3]
    if arr.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 rotation block or 4x4 transform, got shape {arr.shape}")
    return arr


def _within(a: "NDArray[np.float64]", b: "NDArray[np.float64]", tol: float) -> bool:
    # NaN differences compare False, so non-finite values never match
    return bool(np.all(np.abs(a - b) <= tol))


def rotation_equal(a: MatrixLike, b: MatrixLike, tolerance: float) -> bool:
    """Compare only the 3x3 rotation blocks (4x4 inputs are sliced)."""
    tol = _check_tolerance(tolerance)
    return _within(_rotation_block(a), _rotation_block(b), tol)


def translation_equal(a: "ArrayLike", b: "ArrayLike", tolerance: float) -> bool:
    tol = _check_tolerance(tolerance)
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != (3,) or vb.shape != (3,):
        raise ValueError(f"Expected 3-vectors, got shapes {va.shape} and {vb.shape}")
    return _within(va, vb, tol)


def transform_equal(a: MatrixLike, b: MatrixLike, tolerance: float) -> bool:
    """Compare all 16 components of two 4x4 transforms."""
    tol = _check_tolerance(tolerance)
    ma = _as_array(a)
    mb = _as_array(b)
    if ma.shape != (4, 4) or mb.shape != (4, 4):
        raise ValueError(f"Expected 4x4 transforms, got shapes {ma.shape} and {mb.shape}")
    return _within(ma, mb, tol)
