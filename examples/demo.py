#!/usr/bin/env python3
"""
Fusion core demo: a minimal timeline driven by simulated IMU and pose data.

IMU entries propagate the orientation with the quaternion kinematics kernels,
pose entries correct the attitude with a small-angle update and check the
covariance.
The container tie-break for equal timestamps is insertion order.
"""
import heapq
import itertools
import logging
import os
import sys

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fusion_core.core import (
    BufferEntry,
    BufferMetadataType,
    CoreState,
    IMUMeasurement,
    PoseMeasurement,
    Quaternion,
    SensorDescriptor,
    check_cov,
    enforce_matrix_symmetry,
    mat_exp,
    omega_mat,
    apply_small_angle_quat_corr,
    quaternion_average,
    rpy_from_rot_mat,
    transform_imu,
)
from fusion_core.core.frames import FrameTransforms


def simulate_entries(imu_sensor, pose_sensor, duration=2.0, imu_rate=200.0, pose_rate=10.0):
    """
    Create IMU and pose entries for a constant yaw rate.

    The gyro carries a constant bias, so integrating it alone drifts away from
    the pose orientation.
    """
    yaw_rate = 0.5
    gyro_bias = np.array([0.002, -0.001, 0.02])
    entries = []

    for k in range(int(duration * imu_rate)):
        meas = IMUMeasurement(
            angular_velocity=np.array([0.0, 0.0, yaw_rate]) + gyro_bias,
            linear_acceleration=[0.0, 0.0, 9.81]
        )
        entries.append(BufferEntry(k / imu_rate, meas, imu_sensor, BufferMetadataType.measurement))

    # Orientation in the body frame, which is rotated 180 deg about x w.r.t. the IMU
    for k in range(int(duration * pose_rate)):
        t = k / pose_rate
        meas = PoseMeasurement(
            position=[0.0, 0.0, 0.0],
            orientation=FrameTransforms.euler_to_quaternion(0.0, 0.0, -yaw_rate * t)
        )
        entries.append(BufferEntry(t, meas, pose_sensor, BufferMetadataType.measurement))

    return entries


def run(duration=2.0, pose_rate=10.0):
    """
    Process the simulated timeline.

    Returns:
        (final orientation, propagation steps, updates, last IMU timestamp)
    """
    imu_sensor = SensorDescriptor(name="imu", sensor_type="imu")
    pose_sensor = SensorDescriptor(name="pose", sensor_type="pose")

    # IMU mounted with a small lever arm, rotated 180 deg about x
    p_ab = np.array([0.02, 0.0, -0.01])
    q_ab = FrameTransforms.euler_to_quaternion(np.pi, 0.0, 0.0)

    # Initial orientation from a handful of noisy attitude samples
    rng = np.random.default_rng(42)
    init_samples = [
        FrameTransforms.euler_to_quaternion(*rng.normal(scale=0.01, size=3))
        for _ in range(20)
    ]
    state = CoreState(orientation=quaternion_average(init_samples))
    covariance = 0.01 * np.eye(3)
    # Process noise large enough to absorb the uncalibrated gyro bias
    process_noise = 1e-3 * np.eye(3)
    meas_noise = 1e-4 * np.eye(3)

    timeline = []
    counter = itertools.count()
    heapq.heappush(timeline, (0.0, next(counter),
                              BufferEntry(0.0, state, imu_sensor, BufferMetadataType.init_state)))
    entries = simulate_entries(imu_sensor, pose_sensor, duration=duration, pose_rate=pose_rate)
    for entry in entries:
        heapq.heappush(timeline, (entry.timestamp, next(counter), entry))

    q = state.orientation
    last_t = None
    n_propagated = 0
    n_updated = 0

    while timeline:
        _, _, entry = heapq.heappop(timeline)

        if entry.is_state():
            last_t = entry.timestamp
            continue

        if not entry.is_measurement():
            logging.warning("Skipping unclassified entry %r", entry)
            continue

        if isinstance(entry.data, IMUMeasurement):
            imu_body = transform_imu(entry.data, p_ab, q_ab)
            dt = entry.timestamp - last_t if last_t is not None else 0.0
            last_t = entry.timestamp
            if dt <= 0:
                continue
            q_arr = mat_exp(0.5 * omega_mat(imu_body.angular_velocity) * dt) @ q.to_array()
            q = Quaternion.from_array(q_arr)
            covariance = enforce_matrix_symmetry(covariance + process_noise * dt)
            n_propagated += 1
        elif isinstance(entry.data, PoseMeasurement):
            # Attitude residual as a rotation vector in the body frame
            q_err = q.conjugate() * entry.data.orientation
            residual = 2.0 * q_err.vec if q_err.w >= 0 else -2.0 * q_err.vec

            gain = covariance @ np.linalg.inv(covariance + meas_noise)
            correction = gain @ residual
            q = apply_small_angle_quat_corr(q, correction)
            covariance = enforce_matrix_symmetry((np.eye(3) - gain) @ covariance)
            check_cov(covariance, "orientation_cov", check_cond=True)
            logging.debug("t=%.2f attitude residual %.4f rad", entry.timestamp,
                          np.linalg.norm(residual))
            n_updated += 1
        else:
            logging.warning("No update model for %r", entry)

    return q, n_propagated, n_updated, last_t


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    q, n_propagated, n_updated, _ = run()

    roll, pitch, yaw = np.rad2deg(rpy_from_rot_mat(q.to_rotation_matrix()))
    print(f"Propagation steps: {n_propagated}, updates: {n_updated}")
    print(f"Final attitude [deg]: roll={roll:.2f} pitch={pitch:.2f} yaw={yaw:.2f}")


if __name__ == "__main__":
    main()
