"""
Data type definitions for the fusion core.

Payloads stored in the timeline buffer are immutable value objects. The set
of measurement payloads is closed: a new sensor kind is added by extending
the ``MeasurementPayload`` union, not by subclassing.
"""
import numpy as np
from dataclasses import dataclass, field
from typing import Optional, Union


def as_vector3(value, name: str) -> np.ndarray:
    """Convert ``value`` to a read-only float64 3-vector."""
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 elements, got {vec.size}")
    vec.setflags(write=False)
    return vec


@dataclass(frozen=True)
class Quaternion:
    """Quaternion representation for rotation (w, x, y, z), Hamilton convention."""
    w: float
    x: float
    y: float
    z: float

    def __post_init__(self):
        # Normalize
        norm = np.sqrt(self.w**2 + self.x**2 + self.y**2 + self.z**2)
        if norm > 0:
            object.__setattr__(self, 'w', float(self.w / norm))
            object.__setattr__(self, 'x', float(self.x / norm))
            object.__setattr__(self, 'y', float(self.y / norm))
            object.__setattr__(self, 'z', float(self.z / norm))

    def to_rotation_matrix(self) -> np.ndarray:
        """Convert quaternion to rotation matrix."""
        w, x, y, z = self.w, self.x, self.y, self.z

        return np.array([
            [1 - 2*(y*y + z*z), 2*(x*y - w*z), 2*(x*z + w*y)],
            [2*(x*y + w*z), 1 - 2*(x*x + z*z), 2*(y*z - w*x)],
            [2*(x*z - w*y), 2*(y*z + w*x), 1 - 2*(x*x + y*y)]
        ])

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [w, x, y, z]."""
        return np.array([self.w, self.x, self.y, self.z])

    @property
    def vec(self) -> np.ndarray:
        """Imaginary part [x, y, z]."""
        return np.array([self.x, self.y, self.z])

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """Hamilton product ``self * other``."""
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z

        return Quaternion(
            w=w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            x=w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            y=w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            z=w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2
        )

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.multiply(other)

    def conjugate(self) -> 'Quaternion':
        """Inverse rotation."""
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def rotate(self, v: np.ndarray) -> np.ndarray:
        """Rotate a 3-vector."""
        return self.to_rotation_matrix() @ np.asarray(v, dtype=np.float64)

    def is_close(self, other: 'Quaternion', atol: float = 1e-9) -> bool:
        """True if both describe the same rotation (q and -q are equal)."""
        a = self.to_array()
        b = other.to_array()
        return bool(np.allclose(a, b, atol=atol) or np.allclose(a, -b, atol=atol))

    @staticmethod
    def from_array(q: np.ndarray) -> 'Quaternion':
        """Create quaternion from array [w, x, y, z]."""
        q = np.asarray(q, dtype=np.float64).reshape(-1)
        if q.shape != (4,):
            raise ValueError(f"quaternion array must have 4 elements, got {q.size}")
        return Quaternion(*q)

    @staticmethod
    def from_rotation_matrix(R: np.ndarray) -> 'Quaternion':
        """Create quaternion from rotation matrix."""
        trace = np.trace(R)

        if trace > 0:
            s = 0.5 / np.sqrt(trace + 1.0)
            w = 0.25 / s
            x = (R[2, 1] - R[1, 2]) * s
            y = (R[0, 2] - R[2, 0]) * s
            z = (R[1, 0] - R[0, 1]) * s
        elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
            s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
            w = (R[2, 1] - R[1, 2]) / s
            x = 0.25 * s
            y = (R[0, 1] + R[1, 0]) / s
            z = (R[0, 2] + R[2, 0]) / s
        elif R[1, 1] > R[2, 2]:
            s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
            w = (R[0, 2] - R[2, 0]) / s
            x = (R[0, 1] + R[1, 0]) / s
            y = 0.25 * s
            z = (R[1, 2] + R[2, 1]) / s
        else:
            s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
            w = (R[1, 0] - R[0, 1]) / s
            x = (R[0, 2] + R[2, 0]) / s
            y = (R[1, 2] + R[2, 1]) / s
            z = 0.25 * s

        return Quaternion(w, x, y, z)

    @staticmethod
    def identity() -> 'Quaternion':
        """Return identity quaternion."""
        return Quaternion(1.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class SensorDescriptor:
    """
    Identifies the sensor an entry originates from.

    Owned by the sensor registry; buffer entries only hold a reference.
    """
    name: str
    sensor_type: str = ""


@dataclass(frozen=True, eq=False)
class PositionMeasurement:
    """Position measurement [x y z] in meters."""
    position: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, 'position', as_vector3(self.position, 'position'))


@dataclass(frozen=True, eq=False)
class PoseMeasurement:
    """Position and orientation measurement."""
    position: np.ndarray
    orientation: Quaternion

    def __post_init__(self):
        object.__setattr__(self, 'position', as_vector3(self.position, 'position'))


@dataclass(frozen=True, eq=False)
class IMUMeasurement:
    """IMU measurement data."""
    angular_velocity: np.ndarray  # rad/s (3,)
    linear_acceleration: np.ndarray  # m/s^2 (3,)

    def __post_init__(self):
        object.__setattr__(self, 'angular_velocity',
                           as_vector3(self.angular_velocity, 'angular_velocity'))
        object.__setattr__(self, 'linear_acceleration',
                           as_vector3(self.linear_acceleration, 'linear_acceleration'))


MeasurementPayload = Union[PositionMeasurement, PoseMeasurement, IMUMeasurement]


@dataclass(frozen=True, eq=False)
class CoreState:
    """
    Core state snapshot stored in the buffer.

    Nominal state of the error-state filter:
    - Position in world frame (3,)
    - Velocity in world frame (3,)
    - Orientation of the body w.r.t. world
    - Gyroscope bias (3,)
    - Accelerometer bias (3,)
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: Quaternion = field(default_factory=Quaternion.identity)
    gyro_bias: np.ndarray = field(default_factory=lambda: np.zeros(3))
    accel_bias: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Error-state covariance (optional)
    covariance: Optional[np.ndarray] = None

    def __post_init__(self):
        """Ensure arrays are read-only numpy arrays."""
        for name in ('position', 'velocity', 'gyro_bias', 'accel_bias'):
            object.__setattr__(self, name, as_vector3(getattr(self, name), name))
        if self.covariance is not None:
            cov = np.array(self.covariance, dtype=np.float64)
            cov.setflags(write=False)
            object.__setattr__(self, 'covariance', cov)

    @property
    def rotation_matrix(self) -> np.ndarray:
        """Get rotation matrix of the body w.r.t. world."""
        return self.orientation.to_rotation_matrix()


BufferData = Union[CoreState, MeasurementPayload]
