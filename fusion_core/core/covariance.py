"""
Covariance matrix validation and conditioning.
"""
import logging
from typing import Callable, List, Optional

import numpy as np

from ..settings import KernelSettings


_LOG = logging.getLogger(__name__)

Reporter = Callable[[str], None]


def covariance_violations(cov_mat: np.ndarray,
                          check_cond: bool = False,
                          settings: Optional[KernelSettings] = None) -> List[str]:
    """
    List the properties a covariance matrix violates.

    Args:
        cov_mat: Covariance matrix
        check_cond: Also check the condition number
        settings: Tolerances (default: KernelSettings())

    Returns:
        Violation descriptions, empty if the matrix is a valid covariance
    """
    if settings is None:
        settings = KernelSettings()

    try:
        cov = np.asarray(cov_mat, dtype=np.float64)
    except (TypeError, ValueError):
        return ["not a numeric matrix"]

    if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
        return [f"not square (shape {cov.shape})"]

    if not np.all(np.isfinite(cov)):
        return ["contains non-finite values"]

    violations = []

    # Tolerances are relative to the largest entry, as in Eigen::isApprox
    scale = max(1.0, float(np.max(np.abs(cov)))) if cov.size else 1.0

    # Symmetry
    asymmetry = np.max(np.abs(cov - cov.T)) if cov.size else 0.0
    if asymmetry > settings.symmetry_tolerance * scale:
        violations.append(f"not symmetric (max |P - P^T| = {asymmetry:.3e})")

    # Positive semi-definite, on the symmetric part
    eigenvalues = np.linalg.eigvalsh(0.5 * (cov + cov.T)) if cov.size else np.zeros(0)
    if eigenvalues.size and eigenvalues[0] < -settings.eigenvalue_tolerance * scale:
        violations.append(
            f"not positive semi-definite (min eigenvalue = {eigenvalues[0]:.3e})"
        )

    if check_cond and cov.size:
        cond = np.linalg.cond(cov)
        if not np.isfinite(cond) or cond > settings.max_condition_number:
            violations.append(
                f"ill-conditioned (condition number = {cond:.3e}, "
                f"bound = {settings.max_condition_number:.3e})"
            )

    return violations


def check_cov(cov_mat: np.ndarray,
              description: str,
              check_cond: bool = False,
              reporter: Optional[Reporter] = None,
              settings: Optional[KernelSettings] = None) -> bool:
    """
    Performs tests for the properties of a given covariance matrix.

    Each failed property is reported as a separate message. The matrix is
    never modified and no exception is raised for invalid content.

    Args:
        cov_mat: Covariance matrix
        description: Used to associate the warning with the given covariance
        check_cond: Check the condition number of the covariance matrix
        reporter: Receives warning messages (default: module logger)
        settings: Tolerances (default: KernelSettings())

    Returns:
        True if the covariance matrix is valid, False otherwise
    """
    if reporter is None:
        reporter = _LOG.warning

    violations = covariance_violations(cov_mat, check_cond=check_cond, settings=settings)
    for violation in violations:
        reporter(f"Covariance '{description}' is {violation}")

    return not violations


def enforce_matrix_symmetry(mat_in: np.ndarray) -> np.ndarray:
    """Return (M + M^T) / 2."""
    mat = np.asarray(mat_in, dtype=np.float64)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {mat.shape}")
    return 0.5 * (mat + mat.T)
