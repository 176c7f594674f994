"""
Rotation block to quaternion conversion (Shepperd's method).

The branch is chosen from the trace and the dominant diagonal entry so the
divisor stays away from zero for orthonormal input. Input is not checked for
orthonormality and the result is not normalized. Degenerate input yields
IEEE nan/inf components unless a min_scale floor is given.
"""

from __future__ import annotations

from typing import Optional, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike

Quaternion = Tuple[float, float, float, float]


def _block(rotation: "ArrayLike") -> np.ndarray:
    R = np.asarray(rotation, dtype=np.float64)
    if R.shape == (4, 4):
        R = R[:3, :3]
    if R.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 rotation block, got shape {R.shape}")
    return R


def quaternion_branch(rotation: "ArrayLike") -> str:
    """Name of the branch used for this block: 'trace', 'x', 'y' or 'z'."""
    R = _block(rotation)
    a00, a11, a22 = R[0, 0], R[1, 1], R[2, 2]
    if a00 + a11 + a22 > 0:
        return "trace"
    if a00 > a11 and a00 > a22:
        return "x"
    if a11 > a22:
        return "y"
    return "z"


def rotation_to_quaternion(rotation: "ArrayLike", min_scale: Optional[float] = None) -> Quaternion:
    """
    Convert a 3x3 rotation block to an (x, y, z, w) quaternion.

    Args:
        rotation: 3x3 rotation block (a 4x4 transform is sliced)
        min_scale: If given, the computed scale s is clamped to at least this
            value before dividing. None reproduces the raw behaviour.

    Returns:
        Tuple (x, y, z, w)
    """
    R = _block(rotation)
    a00, a01, a02 = R[0]
    a10, a11, a12 = R[1]
    a20, a21, a22 = R[2]

    branch = quaternion_branch(R)
    with np.errstate(divide="ignore", invalid="ignore"):
        if branch == "trace":
            s = np.sqrt(a00 + a11 + a22 + 1.0) * 2.0
        elif branch == "x":
            s = np.sqrt(1.0 + a00 - a11 - a22) * 2.0
        elif branch == "y":
            s = np.sqrt(1.0 + a11 - a00 - a22) * 2.0
        else:
            s = np.sqrt(1.0 + a22 - a00 - a11) * 2.0

        if min_scale is not None:
            s = np.fmax(s, np.float64(min_scale))

        if branch == "trace":
            w = 0.25 * s
            x = (a21 - a12) / s
            y = (a02 - a20) / s
            z = (a10 - a01) / s
        elif branch == "x":
            x = 0.25 * s
            w = (a21 - a12) / s
            y = (a01 + a10) / s
            z = (a02 + a20) / s
        elif branch == "y":
            y = 0.25 * s
            w = (a02 - a20) / s
            x = (a01 + a10) / s
            z = (a12 + a21) / s
        else:
            z = 0.25 * s
            w = (a10 - a01) / s
            x = (a02 + a20) / s
            y = (a12 + a21) / s

    return float(x), float(y), float(z), float(w)
