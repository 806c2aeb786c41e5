"""Main configuration data structure."""
from dataclasses import dataclass, field

from .collection_config import CollectionConfig
from .display_config import DisplayConfig
from .threshold_config import ThresholdConfig


@dataclass
class Config:
    """Main configuration class."""
    refresh_rate: float = 1.0
    collection: CollectionConfig = field(default_factory=CollectionConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def __post_init__(self):
        """Fix invalid values."""
        if self.refresh_rate <= 0:
            self.refresh_rate = 1.0
