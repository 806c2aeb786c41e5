"""Display configuration data structure."""
from dataclasses import dataclass


@dataclass
class DisplayConfig:
    """Display preferences configuration."""
    show_colors: bool = True
    show_details: bool = True
    bar_width: int = 20

    def __post_init__(self):
        """Fix invalid values."""
        if self.bar_width <= 0:
            self.bar_width = 20
