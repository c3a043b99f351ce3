"""
pysurvstats: survival statistics from first principles.

Life tables, Kaplan-Meier curves with Greenwood variance, and the
log-rank test over censored time-to-event data.

Submodules:
    survival: Subject datasets and the survival estimators
    core: Result envelope, exceptions, validation
"""

__version__ = "0.1.0"

from pysurvstats import core
from pysurvstats import survival

__all__ = [
    "__version__",
    "core",
    "survival",
]
