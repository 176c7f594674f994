"""
Generate a synthetic model/space pose pair with known offsets.

- The model is a small rigid cluster of poses with random axis-aligned rotations.
- The space contains the model placed at each requested offset plus random
  distractor poses.
- Writes model.json and space.json in the loader's record format.

Offsets are translation-only, so both the affine and decomposed strategies
should recover them.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

sys.path.append(str(Path(__file__).parent.parent / "src"))

from pose_correspondence.matching.pose import Pose, PoseSet
from pose_correspondence.preprocessing.loader import save_pose_set


def random_axis_rotation(rng: np.random.Generator) -> np.ndarray:
    """Random rotation from the 24 axis-aligned orientations."""
    while True:
        perm = rng.permutation(3)
        signs = rng.choice([-1.0, 1.0], size=3)
        R = np.zeros((3, 3))
        R[np.arange(3), perm] = signs
        if np.linalg.det(R) > 0:
            return R


def make_model(n_poses: int, extent: float, rng: np.random.Generator) -> PoseSet:
    poses = []
    for _ in range(n_poses):
        R = random_axis_rotation(rng)
        t = np.round(rng.uniform(-extent, extent, size=3), 3)
        poses.append(Pose.from_components(R, t))
    return PoseSet(tuple(poses))


def make_space(model: PoseSet, offsets: np.ndarray, n_distractors: int, extent: float,
               rng: np.random.Generator) -> PoseSet:
    poses = [m.translated(o) for o in offsets for m in model]
    for _ in range(n_distractors):
        R = random_axis_rotation(rng)
        t = np.round(rng.uniform(-extent, extent, size=3), 3)
        poses.append(Pose.from_components(R, t))
    order = rng.permutation(len(poses))
    return PoseSet(tuple(poses[i] for i in order))


def main():
    parser = argparse.ArgumentParser(description="Generate synthetic model/space poses")
    parser.add_argument("--out-dir", type=str, default="data/synthetic")
    parser.add_argument("--model-poses", type=int, default=4)
    parser.add_argument("--placements", type=int, default=2, help="Copies of the model in the space")
    parser.add_argument("--distractors", type=int, default=20)
    parser.add_argument("--extent", type=float, default=5.0)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    model = make_model(args.model_poses, args.extent, rng)
    offsets = np.round(rng.uniform(-10 * args.extent, 10 * args.extent, size=(args.placements, 3)), 3)
    space = make_space(model, offsets, args.distractors, 10 * args.extent, rng)

    out = Path(args.out_dir)
    save_pose_set(model, out / "model.json")
    save_pose_set(space, out / "space.json")

    print(f"Wrote {len(model)} model poses and {len(space)} space poses to {out}")
    for i, o in enumerate(offsets):
        print(f"  offset[{i}] = ({o[0]:.3f}, {o[1]:.3f}, {o[2]:.3f})")


if __name__ == "__main__":
    main()
