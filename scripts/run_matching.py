"""
Pose correspondence workflow

Loads the model and space pose sets, generates and validates candidate
offsets, exports the accepted offsets and optionally the scene primitives.
"""

import sys
import argparse
from pathlib import Path

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from pose_correspondence.matching import PoseMatcher
from pose_correspondence.utils.config import load_config, AppConfig
from pose_correspondence.utils.logging import setup_logger, set_package_level
from pose_correspondence.visualization import SceneBuilder, SceneStyle, export_scene_to_json


def main(argv=None) -> int:
    """
    Run the matching workflow. Returns 0 when at least one offset was found,
    1 otherwise.
    """
    parser = argparse.ArgumentParser(description="Pose Correspondence Matching")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument(
        "--base-dir",
        type=str,
        default=None,
        help="Directory containing the model/space files",
    )
    parser.add_argument("--model", type=str, default=None, help="Model poses JSON file")
    parser.add_argument("--space", type=str, default=None, help="Space poses JSON file")
    parser.add_argument("--output", type=str, default=None, help="Offset export JSON file")
    parser.add_argument("--scene", type=str, default=None, help="Write scene primitives to this JSON file")
    parser.add_argument("--tolerance", type=float, default=None, help="Override matching tolerance")
    parser.add_argument(
        "--strategy",
        choices=["affine", "decomposed"],
        default=None,
        help="Override candidate strategy",
    )
    parser.add_argument("--offset-index", type=int, default=None, help="Offset shown in the scene")
    parser.add_argument("--parallel", action="store_true", help="Validate candidates in a process pool")
    args = parser.parse_args(argv)

    cfg: AppConfig = load_config(args.config)
    if args.base_dir:
        cfg.paths.base_dir = args.base_dir
    if args.model:
        cfg.paths.model_file = args.model
    if args.space:
        cfg.paths.space_file = args.space
    if args.output:
        cfg.paths.offset_export_file = args.output
    if args.scene:
        cfg.paths.scene_export_file = args.scene
    if args.tolerance is not None:
        cfg.matching.tolerance = args.tolerance
    if args.strategy:
        cfg.matching.strategy = args.strategy
    if args.offset_index is not None:
        cfg.visualization.selected_offset_index = args.offset_index
    if args.parallel:
        cfg.parallel.enabled = True

    logger = setup_logger(__name__, level=cfg.logging.level, log_file=cfg.logging.file)
    set_package_level(cfg.logging.level, cfg.logging.file)

    logger.info("Pose Correspondence Matching")
    logger.info("============================")
    logger.info(f"Strategy: {cfg.matching.strategy}, tolerance: {cfg.matching.tolerance}")

    matcher = PoseMatcher.from_config(cfg)
    result = matcher.run()

    if result.found:
        logger.info(f"Found {len(result.offsets)} valid offsets")
        for i, offset in enumerate(result.offsets):
            logger.info(f"  [{i}] {offset!r}")
        matcher.export_offsets(result.offsets, cfg.paths.resolve(cfg.paths.offset_export_file))
    else:
        logger.warning("No valid offsets found")

    if cfg.paths.scene_export_file:
        builder = SceneBuilder(
            SceneStyle.from_config(cfg.visualization),
            quaternion_min_scale=cfg.matching.quaternion_min_scale,
        )
        scene = builder.build(
            matcher.model,
            matcher.space,
            result.offsets,
            selected_index=cfg.visualization.selected_offset_index,
            strategy=matcher.strategy,
        )
        export_scene_to_json(scene, cfg.paths.resolve(cfg.paths.scene_export_file))

    return 0 if result.found else 1


if __name__ == "__main__":
    sys.exit(main())
