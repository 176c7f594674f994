"""
Pose Correspondence Package

A Python package for registering a small rigid model of 3D poses against a
larger space of observed poses. Candidate rigid offsets are generated from
poses whose rotation blocks agree within a tolerance, then validated by
requiring every model pose to land on some space pose.
"""

__version__ = "0.1.0"

from .matching import *
from .preprocessing import *
from .utils import *
from .visualization import *

__all__ = [
    "matching",
    "preprocessing",
    "utils",
    "visualization",
    "acceleration",
]
