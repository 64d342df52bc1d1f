"""
Core components for the fusion core.
"""
from .types import (
    Quaternion,
    SensorDescriptor,
    PositionMeasurement,
    PoseMeasurement,
    IMUMeasurement,
    MeasurementPayload,
    CoreState,
    BufferData
)

from .buffer import (
    BufferMetadataType,
    BufferEntry,
    STATE_METADATA,
    MEASUREMENT_METADATA
)

from .rotation import (
    skew,
    mat_exp,
    omega_mat,
    quat_from_small_angle,
    apply_small_angle_quat_corr,
    rpy_from_rot_mat,
    quaternion_average
)

from .covariance import (
    check_cov,
    covariance_violations,
    enforce_matrix_symmetry
)

from .frames import (
    CoordinateFrame,
    FrameTransforms,
    transform_imu,
    transform_imu_with_angular_acceleration
)

from .utils import vec_extract_every_nth_elm

__all__ = [
    # Types
    'Quaternion',
    'SensorDescriptor',
    'PositionMeasurement',
    'PoseMeasurement',
    'IMUMeasurement',
    'MeasurementPayload',
    'CoreState',
    'BufferData',
    # Buffer
    'BufferMetadataType',
    'BufferEntry',
    'STATE_METADATA',
    'MEASUREMENT_METADATA',
    # Rotation
    'skew',
    'mat_exp',
    'omega_mat',
    'quat_from_small_angle',
    'apply_small_angle_quat_corr',
    'rpy_from_rot_mat',
    'quaternion_average',
    # Covariance
    'check_cov',
    'covariance_violations',
    'enforce_matrix_symmetry',
    # Frames
    'CoordinateFrame',
    'FrameTransforms',
    'transform_imu',
    'transform_imu_with_angular_acceleration',
    # Utils
    'vec_extract_every_nth_elm',
]
