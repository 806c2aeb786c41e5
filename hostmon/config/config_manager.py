"""Configuration loading and management."""
import os
from typing import Optional

import yaml

from .collection_config import CollectionConfig
from .config import Config
from .display_config import DisplayConfig
from .threshold_config import ThresholdConfig

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.yaml")


class ConfigManager:
    """Configuration loading and management."""

    @staticmethod
    def load_config(config_path: Optional[str] = None) -> Config:
        """Load configuration from YAML file - let it crash if bad."""
        with open(config_path or DEFAULT_CONFIG_PATH, "r") as f:
            config_data = yaml.safe_load(f) or {}
        return ConfigManager.from_dict(config_data)

    @staticmethod
    def from_dict(config_data: dict) -> Config:
        """Build a Config from parsed YAML; missing sections use defaults."""
        # Parse collection settings
        collection = CollectionConfig(**config_data.get("collection", {}))

        # Parse thresholds
        thresholds = ThresholdConfig(**config_data.get("thresholds", {}))

        # Parse display config
        display = DisplayConfig(**config_data.get("display", {}))

        return Config(
            refresh_rate=config_data.get("refresh_rate", 1.0),
            collection=collection,
            thresholds=thresholds,
            display=display,
        )
