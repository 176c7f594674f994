"""
Acceleration Module

Process-pool execution for embarrassingly parallel per-candidate work.
"""

from .parallel_executor import ParallelExecutor

__all__ = [
    "ParallelExecutor",
]
