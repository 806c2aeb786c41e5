"""System data models for the metric sampler."""
from dataclasses import dataclass
from enum import Enum


class MetricKind(Enum):
    CPU = "cpu"
    RAM = "ram"
    DISK = "disk"
    BATTERY = "battery"

    @property
    def label(self) -> str:
        """Display name, e.g. "CPU" or "Disk"."""
        if self in (MetricKind.CPU, MetricKind.RAM):
            return self.name
        return self.name.title()


@dataclass(frozen=True)
class BatteryState:
    percent: float = 0.0
    is_charging: bool = False


@dataclass(frozen=True)
class SystemReading:
    """Raw results of one sampling pass."""
    cpu: float = 0.0
    ram: float = 0.0
    disk: float = 0.0
    battery: BatteryState = BatteryState()


@dataclass(frozen=True)
class SystemDetails:
    os_name: str
    hostname: str
    storage_gb: float  # total size of the monitored volume
    memory_gb: float
    cpu_count: int
