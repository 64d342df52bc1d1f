"""
Rotation kernels for error-state filtering.

Quaternions follow the Hamilton convention with layout [w, x, y, z].

Reference:
    J. Sola, "Quaternion kinematics for the error-state Kalman filter", 2017
"""
from typing import Sequence

import numpy as np
from scipy import linalg

from .types import Quaternion, as_vector3


def skew(v: np.ndarray) -> np.ndarray:
    """
    Skew-symmetric matrix of v.

    Args:
        v: 3D vector

    Returns:
        3x3 matrix S with S @ w == cross(v, w)
    """
    v = as_vector3(v, "v")
    return np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0]
    ])


def mat_exp(A: np.ndarray, order: int = 4) -> np.ndarray:
    """
    Matrix exponential by Taylor series cut-off at the given order.

    Args:
        A: 4x4 matrix
        order: Highest power of A in the series (>= 1)

    Returns:
        sum_{k=0}^{order} A^k / k!
    """
    A = np.asarray(A, dtype=np.float64)
    if A.shape != (4, 4):
        raise ValueError(f"mat_exp expects a 4x4 matrix, got shape {A.shape}")
    if order < 1:
        raise ValueError(f"mat_exp order must be at least 1, got {order}")

    result = np.eye(4)
    term = np.eye(4)
    for k in range(1, order + 1):
        term = term @ A / k
        result = result + term

    return result


def omega_mat(v: np.ndarray) -> np.ndarray:
    """
    Right-multiplication matrix for quaternion kinematics.

    q_dot = 0.5 * omega_mat(w) @ q  (Sola, eq. 199)

    Args:
        v: Angular velocity (3,)

    Returns:
        4x4 matrix [[0, -v^T], [v, -[v]x]]
    """
    v = as_vector3(v, "v")
    res = np.zeros((4, 4))
    res[0, 1:] = -v
    res[1:, 0] = v
    res[1:, 1:] = -skew(v)
    return res


def quat_from_small_angle(d_theta_vec: np.ndarray) -> Quaternion:
    """
    Quaternion from a small rotation vector.

    Args:
        d_theta_vec: Rotation vector (3,)

    Returns:
        Unit quaternion approximating the rotation
    """
    d_theta_vec = as_vector3(d_theta_vec, "d_theta_vec")
    q_squared = float(d_theta_vec @ d_theta_vec) / 4.0

    if q_squared < 1.0:
        w = np.sqrt(1.0 - q_squared)
        xyz = d_theta_vec * 0.5
    else:
        w = 1.0 / np.sqrt(1.0 + q_squared)
        xyz = d_theta_vec * (w * 0.5)

    # Quaternion() normalizes
    return Quaternion(w, xyz[0], xyz[1], xyz[2])


def apply_small_angle_quat_corr(q_prior: Quaternion, correction: np.ndarray) -> Quaternion:
    """Compose a small-angle correction onto a prior orientation."""
    return q_prior.multiply(quat_from_small_angle(correction))


def rpy_from_rot_mat(rot_mat: np.ndarray) -> np.ndarray:
    """
    Roll, pitch and yaw (in that order) from a rotation matrix.

    Uses the ZYX convention, R = Rz(yaw) @ Ry(pitch) @ Rx(roll).

    Args:
        rot_mat: 3x3 rotation matrix

    Returns:
        [roll, pitch, yaw] in radians
    """
    R = np.asarray(rot_mat, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"expected a 3x3 rotation matrix, got shape {R.shape}")

    roll = np.arctan2(R[2, 1], R[2, 2])
    # Rounding can push |R[2, 0]| slightly above 1 near pitch = +-90 deg
    pitch = np.arcsin(np.clip(-R[2, 0], -1.0, 1.0))
    yaw = np.arctan2(R[1, 0], R[0, 0])

    return np.array([roll, pitch, yaw])


def quaternion_average(quats: Sequence[Quaternion]) -> Quaternion:
    """
    Unweighted quaternion average.

    Args:
        quats: Non-empty sequence of unit quaternions

    Returns:
        Averaged quaternion with non-negative scalar part

    Note:
        Markley et al., Averaging Quaternions, Journal of Guidance, Control,
        and Dynamics, 30(4):1193-1196, June 2007
    """
    if len(quats) == 0:
        raise ValueError("quaternion_average requires at least one quaternion")

    M = np.zeros((4, 4))
    for q in quats:
        q_arr = q.to_array()
        M += np.outer(q_arr, q_arr)

    # Eigenvector of the largest eigenvalue (eigh sorts ascending)
    _, eigenvectors = linalg.eigh(M, subset_by_index=[3, 3])
    avg = eigenvectors[:, 0]

    if avg[0] < 0:
        avg = -avg

    return Quaternion.from_array(avg)
