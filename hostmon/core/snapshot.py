"""Immutable view of all metrics at one commit."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from ..collectors.system_models import MetricKind


@dataclass(frozen=True)
class Snapshot:
    """Current values and histories (most recent last) as of one tick.

    Instances are never mutated, so readers can hold on to one while
    the store publishes the next.
    """
    cpu_history: Tuple[float, ...] = ()
    ram_history: Tuple[float, ...] = ()
    disk_history: Tuple[float, ...] = ()
    battery_history: Tuple[float, ...] = ()
    disk_usage: float = 0.0
    battery_percentage: float = 0.0
    battery_is_charging: bool = False
    tick: int = 0
    timestamp: Optional[datetime] = field(default=None, compare=False)

    @property
    def cpu_usage(self) -> float:
        return self.cpu_history[-1] if self.cpu_history else 0.0

    @property
    def ram_usage(self) -> float:
        return self.ram_history[-1] if self.ram_history else 0.0

    def history(self, kind: MetricKind) -> Tuple[float, ...]:
        return {
            MetricKind.CPU: self.cpu_history,
            MetricKind.RAM: self.ram_history,
            MetricKind.DISK: self.disk_history,
            MetricKind.BATTERY: self.battery_history,
        }[kind]

    def current(self, kind: MetricKind) -> float:
        return {
            MetricKind.CPU: self.cpu_usage,
            MetricKind.RAM: self.ram_usage,
            MetricKind.DISK: self.disk_usage,
            MetricKind.BATTERY: self.battery_percentage,
        }[kind]
