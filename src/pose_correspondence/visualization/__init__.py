"""
Visualization Module

Builds colored cube primitives for model, transformed model and space poses.
Rendering is left to the consuming viewer.
"""

from .scene import CubePrimitive, Scene, SceneBuilder, SceneStyle, export_scene_to_json

__all__ = [
    "CubePrimitive",
    "Scene",
    "SceneBuilder",
    "SceneStyle",
    "export_scene_to_json",
]
