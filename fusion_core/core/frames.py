"""
Frame transformations for inertial data.

Coordinate Frames:
- A: Frame the IMU measurements are expressed in
- B: Target frame, rigidly attached to A with translation p_ab and
  rotation q_ab (both of B w.r.t. A)
"""
import numpy as np

from .rotation import skew
from .types import IMUMeasurement, Quaternion, as_vector3


def transform_imu(now: IMUMeasurement,
                  p_ab: np.ndarray,
                  q_ab: Quaternion) -> IMUMeasurement:
    """
    Transform an IMU measurement from frame A to frame B.

    The angular acceleration is not taken into account, so neither a
    previous measurement nor dt is needed.

    Args:
        now: Current IMU measurement expressed in frame A
        p_ab: Translation of frame B w.r.t. frame A
        q_ab: Rotation of frame B w.r.t. frame A

    Returns:
        Current IMU measurement expressed in frame B
    """
    p_ab = as_vector3(p_ab, "p_ab")
    R_ab = q_ab.to_rotation_matrix()
    w_a = now.angular_velocity

    # Centripetal term of the lever arm
    a_a = now.linear_acceleration + skew(w_a) @ skew(w_a) @ p_ab

    return IMUMeasurement(
        angular_velocity=R_ab.T @ w_a,
        linear_acceleration=R_ab.T @ a_a
    )


def transform_imu_with_angular_acceleration(prev: IMUMeasurement,
                                            now: IMUMeasurement,
                                            dt: float,
                                            p_ab: np.ndarray,
                                            q_ab: Quaternion) -> IMUMeasurement:
    """
    Transform an IMU measurement from frame A to frame B.

    The angular acceleration is estimated by finite difference of the
    angular velocities of both measurements.

    Args:
        prev: Previous IMU measurement expressed in frame A
        now: Current IMU measurement expressed in frame A
        dt: Delta time between both IMU measurements
        p_ab: Translation of frame B w.r.t. frame A
        q_ab: Rotation of frame B w.r.t. frame A

    Returns:
        Current IMU measurement expressed in frame B
    """
    if dt == 0:
        raise ValueError("dt must be non-zero to estimate angular acceleration")

    p_ab = as_vector3(p_ab, "p_ab")
    R_ab = q_ab.to_rotation_matrix()
    w_a = now.angular_velocity
    w_a_dot = (now.angular_velocity - prev.angular_velocity) / dt

    # Tangential and centripetal terms of the lever arm
    a_a = (now.linear_acceleration
           + skew(w_a_dot) @ p_ab
           + skew(w_a) @ skew(w_a) @ p_ab)

    return IMUMeasurement(
        angular_velocity=R_ab.T @ w_a,
        linear_acceleration=R_ab.T @ a_a
    )


class CoordinateFrame:
    """Elementary rotations."""

    @staticmethod
    def rotation_matrix_x(angle: float) -> np.ndarray:
        """Rotation matrix around x-axis."""
        c, s = np.cos(angle), np.sin(angle)
        return np.array([
            [1, 0, 0],
            [0, c, -s],
            [0, s, c]
        ])

    @staticmethod
    def rotation_matrix_y(angle: float) -> np.ndarray:
        """Rotation matrix around y-axis."""
        c, s = np.cos(angle), np.sin(angle)
        return np.array([
            [c, 0, s],
            [0, 1, 0],
            [-s, 0, c]
        ])

    @staticmethod
    def rotation_matrix_z(angle: float) -> np.ndarray:
        """Rotation matrix around z-axis."""
        c, s = np.cos(angle), np.sin(angle)
        return np.array([
            [c, -s, 0],
            [s, c, 0],
            [0, 0, 1]
        ])

    @staticmethod
    def rotation_matrix_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
        """R = Rz(yaw) @ Ry(pitch) @ Rx(roll)."""
        return (CoordinateFrame.rotation_matrix_z(yaw)
                @ CoordinateFrame.rotation_matrix_y(pitch)
                @ CoordinateFrame.rotation_matrix_x(roll))


class FrameTransforms:
    """Utility class for common frame transformations."""

    transform_imu = staticmethod(transform_imu)
    transform_imu_with_angular_acceleration = staticmethod(
        transform_imu_with_angular_acceleration
    )

    @staticmethod
    def rotate_vector(q: Quaternion, v: np.ndarray) -> np.ndarray:
        """Rotate vector by quaternion."""
        return q.rotate(v)

    @staticmethod
    def euler_to_quaternion(roll: float, pitch: float, yaw: float) -> Quaternion:
        """
        Convert Euler angles to quaternion.

        Args:
            roll: Roll angle in radians
            pitch: Pitch angle in radians
            yaw: Yaw angle in radians

        Returns:
            Quaternion
        """
        cy = np.cos(yaw * 0.5)
        sy = np.sin(yaw * 0.5)
        cp = np.cos(pitch * 0.5)
        sp = np.sin(pitch * 0.5)
        cr = np.cos(roll * 0.5)
        sr = np.sin(roll * 0.5)

        w = cr * cp * cy + sr * sp * sy
        x = sr * cp * cy - cr * sp * sy
        y = cr * sp * cy + sr * cp * sy
        z = cr * cp * sy - sr * sp * cy

        return Quaternion(w, x, y, z)
