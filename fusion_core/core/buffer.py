"""
Timestamped entries of the filter timeline.

Each entry tags its data as either a state snapshot or a measurement.
Entries are ordered by timestamp only. Entries with equal timestamps are
neither less nor greater than each other; the container holding them has
to define its own tie-break (e.g. insertion order).
"""
from dataclasses import dataclass
from enum import IntEnum

from .types import BufferData, SensorDescriptor


class BufferMetadataType(IntEnum):
    """Tag describing the role of a buffer entry."""
    core_state = 0
    sensor_state = 1
    init_state = 2
    measurement = 3
    measurement_ooo = 4  # out-of-order measurement


STATE_METADATA = frozenset({
    BufferMetadataType.core_state,
    BufferMetadataType.sensor_state,
    BufferMetadataType.init_state,
})

MEASUREMENT_METADATA = frozenset({
    BufferMetadataType.measurement,
    BufferMetadataType.measurement_ooo,
})


@dataclass(frozen=True, eq=False)
class BufferEntry:
    """
    Entry of the filter timeline.

    ``metadata`` is not validated; a value outside ``BufferMetadataType`` is
    neither a state nor a measurement.
    """
    timestamp: float
    data: BufferData
    sensor: SensorDescriptor  # shared, owned by the sensor registry
    metadata: int

    def __lt__(self, other: 'BufferEntry') -> bool:
        if not isinstance(other, BufferEntry):
            return NotImplemented
        return self.timestamp < other.timestamp

    def __le__(self, other: 'BufferEntry') -> bool:
        if not isinstance(other, BufferEntry):
            return NotImplemented
        return self.timestamp <= other.timestamp

    def __gt__(self, other: 'BufferEntry') -> bool:
        if not isinstance(other, BufferEntry):
            return NotImplemented
        return self.timestamp > other.timestamp

    def __ge__(self, other: 'BufferEntry') -> bool:
        if not isinstance(other, BufferEntry):
            return NotImplemented
        return self.timestamp >= other.timestamp

    def is_state(self) -> bool:
        """True for core, sensor and init states."""
        return self.metadata in STATE_METADATA

    def is_measurement(self) -> bool:
        """True for in-order and out-of-order measurements."""
        return self.metadata in MEASUREMENT_METADATA

    @property
    def metadata_name(self) -> str:
        """Name of the metadata tag, for diagnostics."""
        try:
            return BufferMetadataType(self.metadata).name
        except ValueError:
            return f"unknown({self.metadata})"

    def __str__(self) -> str:
        return f"{self.sensor.name}\t{self.timestamp}\t{int(self.metadata)}\t"

    def __repr__(self) -> str:
        return (
            f"BufferEntry(sensor={self.sensor.name!r}, "
            f"timestamp={self.timestamp}, "
            f"metadata={self.metadata_name})"
        )
