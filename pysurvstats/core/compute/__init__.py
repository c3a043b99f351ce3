"""
Shared compute infrastructure for pysurvstats.

Submodules:
    timing: Execution timing utilities
"""

from pysurvstats.core.compute.timing import Timer

__all__ = [
    "Timer",
]
