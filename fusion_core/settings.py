"""
Kernel settings for the fusion core.

Tolerances are read from a YAML file. Without an explicit path the packaged
``config/defaults.yaml`` is used.
"""
import logging
import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from typing import Optional

import yaml


_LOG = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config', 'defaults.yaml')


@dataclass(frozen=True)
class KernelSettings:
    """Numerical tolerances for covariance checks, relative to max(1, max|P_ij|)."""
    symmetry_tolerance: float = 1e-9
    eigenvalue_tolerance: float = 1e-12
    max_condition_number: float = 1e12

    def __post_init__(self):
        if self.symmetry_tolerance < 0:
            raise ValueError("symmetry_tolerance must be non-negative")
        if self.eigenvalue_tolerance < 0:
            raise ValueError("eigenvalue_tolerance must be non-negative")
        if self.max_condition_number <= 1:
            raise ValueError("max_condition_number must be greater than 1")


def load_settings(path: Optional[str] = None) -> KernelSettings:
    """
    Load kernel settings from a YAML file.

    Args:
        path: YAML file (default: packaged defaults)

    Returns:
        Kernel settings; keys missing from the file keep their defaults
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    _LOG.debug("Loading kernel settings from %s", path)
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    known = {f.name for f in fields(KernelSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path}: unknown settings {', '.join(unknown)}")

    values = {}
    for key, value in data.items():
        # PyYAML reads exponents without a dot (1e-6) as strings
        try:
            number = None if isinstance(value, bool) else float(value)
        except (TypeError, ValueError):
            number = None
        if number is None:
            raise ValueError(f"{path}: {key} must be a number, got {value!r}")
        values[key] = number

    return replace(KernelSettings(), **values)


@lru_cache(maxsize=1)
def default_settings() -> KernelSettings:
    """Packaged default settings, loaded once."""
    return load_settings()
