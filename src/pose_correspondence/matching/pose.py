"""
Pose Data Model

Plain value types for rigid transforms:

- Pose: a 4x4 matrix with a 3x3 rotation block and a translation column
- PoseSet: an ordered, read-only collection of poses (model or space)
- TranslationOffset: a translation-only offset with rotation left unchanged

Rotation blocks are taken as they come from the data; nothing here
re-orthonormalizes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence, Tuple, Union, TYPE_CHECKING, overload

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


def _frozen_array(values: "ArrayLike", shape: Tuple[int, ...], what: str) -> "NDArray[np.float64]":
    arr = np.array(values, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"{what} must have shape {shape}, got {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Pose:
    """Rigid transform stored as a read-only 4x4 matrix.

    Example:
        >>> pose = Pose.from_components(np.eye(3), [1.0, 2.0, 3.0])
        >>> pose.translation()
        array([1., 2., 3.])
    """

    matrix: "NDArray[np.float64]"

    def __post_init__(self) -> None:
        object.__setattr__(self, "matrix", _frozen_array(self.matrix, (4, 4), "Pose matrix"))

    @classmethod
    def from_components(cls, rotation: "ArrayLike", translation: "ArrayLike") -> "Pose":
        R = _frozen_array(rotation, (3, 3), "Rotation block")
        t = _frozen_array(translation, (3,), "Translation")
        T = np.eye(4)
        T[:3, :3] = R
        T[:3, 3] = t
        return cls(T)

    @classmethod
    def identity(cls) -> "Pose":
        return cls(np.eye(4))

    def rotation(self) -> "NDArray[np.float64]":
        """Return a copy of the 3x3 rotation block."""
        return self.matrix[:3, :3].copy()

    def translation(self) -> "NDArray[np.float64]":
        """Return a copy of the translation column as a 3-vector."""
        return self.matrix[:3, 3].copy()

    def as_matrix(self) -> "NDArray[np.float64]":
        return self.matrix.copy()

    def rotation_as_quaternion(self, min_scale: float | None = None) -> Tuple[float, float, float, float]:
        """Rotation block as an (x, y, z, w) quaternion via Shepperd's method."""
        from .quaternion import rotation_to_quaternion

        return rotation_to_quaternion(self.matrix[:3, :3], min_scale=min_scale)

    def compose(self, other: "Pose") -> "Pose":
        """Matrix product self * other."""
        return Pose(self.matrix @ other.matrix)

    def __matmul__(self, other: "Pose") -> "Pose":
        if not isinstance(other, Pose):
            return NotImplemented
        return self.compose(other)

    def inverse(self) -> "Pose":
        """Full 4x4 inverse; raises numpy.linalg.LinAlgError on a singular matrix."""
        return Pose(np.linalg.inv(self.matrix))

    def translated(self, offset: "ArrayLike") -> "Pose":
        """Same rotation, translation shifted by offset."""
        T = self.as_matrix()
        T[:3, 3] = T[:3, 3] + _frozen_array(offset, (3,), "Offset")
        return Pose(T)

    def to_list(self) -> list[float]:
        """Row-major list of the 16 components."""
        return [float(v) for v in self.matrix.ravel(order="C")]

    def __repr__(self) -> str:
        t = self.matrix[:3, 3]
        return f"Pose(translation=({t[0]:.6g}, {t[1]:.6g}, {t[2]:.6g}))"


@dataclass(frozen=True, eq=False)
class TranslationOffset:
    """Translation-only candidate produced by the decomposed strategy."""

    vector: "NDArray[np.float64]"

    def __post_init__(self) -> None:
        object.__setattr__(self, "vector", _frozen_array(self.vector, (3,), "Offset"))

    def as_pose(self) -> Pose:
        """Lift to a 4x4 transform with identity rotation."""
        return Pose.from_components(np.eye(3), self.vector)

    def to_list(self) -> list[float]:
        return [float(v) for v in self.vector]

    def __repr__(self) -> str:
        x, y, z = self.vector
        return f"TranslationOffset({x:.6g}, {y:.6g}, {z:.6g})"


Offset = Union[Pose, TranslationOffset]


@dataclass(frozen=True)
class PoseSet:
    """Ordered, read-only sequence of poses."""

    poses: Tuple[Pose, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "poses", tuple(self.poses))

    @classmethod
    def empty(cls) -> "PoseSet":
        return cls(())

    @classmethod
    def from_matrices(cls, matrices: Iterable["ArrayLike"]) -> "PoseSet":
        return cls(tuple(Pose(m) for m in matrices))

    @property
    def is_empty(self) -> bool:
        return len(self.poses) == 0

    def translations(self) -> "NDArray[np.float64]":
        """Nx3 array of translations (empty sets give a (0, 3) array)."""
        if self.is_empty:
            return np.empty((0, 3), dtype=np.float64)
        return np.stack([p.matrix[:3, 3] for p in self.poses])

    def __len__(self) -> int:
        return len(self.poses)

    def __iter__(self) -> Iterator[Pose]:
        return iter(self.poses)

    @overload
    def __getitem__(self, index: int) -> Pose: ...

    @overload
    def __getitem__(self, index: slice) -> "PoseSet": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return PoseSet(self.poses[index])
        return self.poses[index]


def as_pose_set(poses: Union[PoseSet, Sequence[Pose]]) -> PoseSet:
    if isinstance(poses, PoseSet):
        return poses
    return PoseSet(tuple(poses))
