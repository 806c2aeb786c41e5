"""Threshold configuration data structure."""
from dataclasses import dataclass


@dataclass
class ThresholdConfig:
    """Usage levels at which the display changes colour."""
    warn: float = 60.0
    error: float = 80.0

    def __post_init__(self):
        """Fix invalid values."""
        if self.warn <= 0 or self.warn >= 100:
            self.warn = 60.0
        if self.error <= 0 or self.error >= 100:
            self.error = 80.0
        if self.error < self.warn:
            self.error = self.warn
