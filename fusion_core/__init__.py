"""
fusion_core: numerical substrate for multi-sensor error-state filtering.

Rotation kernels, covariance checks and the timestamped buffer entry
consumed by the filter timeline.
"""

__version__ = "0.1.0"

from . import core
from . import settings

__all__ = ['core', 'settings']
