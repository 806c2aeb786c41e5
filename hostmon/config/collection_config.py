"""Collection timing and sampling configuration."""
from dataclasses import dataclass

from ..collectors.system_sampler import CPU_MODES


@dataclass
class CollectionConfig:
    """Sampling cadence, history depth and sampler options."""
    interval: float = 1.0
    history_size: int = 60
    cpu_mode: str = "delta"
    disk_path: str = "~"
    sample_timeout: float = 5.0

    def __post_init__(self):
        """Fix invalid values."""
        if self.interval <= 0:
            self.interval = 1.0
        if self.history_size <= 0:
            self.history_size = 60
        if self.sample_timeout <= 0:
            self.sample_timeout = 5.0
        if not self.disk_path:
            self.disk_path = "~"
        if self.cpu_mode not in CPU_MODES:
            raise ValueError(f"Unknown cpu_mode: {self.cpu_mode}")
