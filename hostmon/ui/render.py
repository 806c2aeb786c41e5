"""Rendering helpers shared by the Textual and console displays."""
from typing import Optional, Sequence

from rich.table import Table
from rich.text import Text

from ..collectors.system_details import format_gb
from ..collectors.system_models import MetricKind, SystemDetails
from ..config.config import Config
from ..config.threshold_config import ThresholdConfig
from ..core.snapshot import Snapshot

SPARK_CHARS = "▁▂▃▄▅▆▇█"


def make_progress_bar(value: float, width: int = 15) -> str:
    """Create a simple text-based progress bar."""
    filled = int(min(max(value, 0.0), 100.0) * width / 100)
    bar = "█" * filled + "░" * (width - filled)
    return f"[{bar}] {value:5.1f}%"


def make_sparkline(values: Sequence[float], width: Optional[int] = None) -> str:
    """Render the most recent values as block characters on a 0-100 scale."""
    if width is not None:
        values = values[-width:] if width > 0 else ()
    top = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[int(round(min(max(v, 0.0), 100.0) / 100 * top))] for v in values)


def level_style(kind: MetricKind, value: float, thresholds: ThresholdConfig) -> str:
    """Colour for a reading; battery is inverted since low charge is the bad case."""
    level = 100.0 - value if kind is MetricKind.BATTERY else value
    if level >= thresholds.error:
        return "red"
    if level >= thresholds.warn:
        return "yellow"
    return "green"


def has_battery(snapshot: Snapshot) -> bool:
    """False on machines reporting no power source (all zero, never charging)."""
    return snapshot.battery_is_charging or any(snapshot.battery_history)


def metric_style(kind: MetricKind, snapshot: Snapshot, config: Config) -> str:
    """Style for a metric's current value; empty when colours are off or there is no battery."""
    if not config.display.show_colors:
        return ""
    if kind is MetricKind.BATTERY and not has_battery(snapshot):
        return ""
    return level_style(kind, snapshot.current(kind), config.thresholds)


def metric_label(kind: MetricKind, snapshot: Snapshot) -> str:
    if kind is MetricKind.BATTERY and snapshot.battery_is_charging:
        return "Battery ⚡"
    return kind.label


def render_metric(kind: MetricKind, snapshot: Snapshot, config: Config) -> Text:
    """One gauge line: label, bar, current value and history sparkline."""
    value = snapshot.current(kind)
    style = metric_style(kind, snapshot, config)
    line = Text(f"{metric_label(kind, snapshot):<10} ")
    line.append(make_progress_bar(value, config.display.bar_width), style=style)
    line.append("  ")
    line.append(make_sparkline(snapshot.history(kind), config.collection.history_size), style=style)
    return line


def render_metrics(snapshot: Snapshot, config: Config) -> Text:
    return Text("\n").join(render_metric(kind, snapshot, config) for kind in MetricKind)


def render_details(details: SystemDetails) -> str:
    return "\n".join([
        f"OS:      {details.os_name}",
        f"Host:    {details.hostname}",
        f"CPUs:    {details.cpu_count}",
        f"Storage: {format_gb(details.storage_gb)}",
        f"Memory:  {format_gb(details.memory_gb)}",
    ])


def render_table(snapshot: Snapshot, config: Config) -> Table:
    """Table of current values and history for the console display."""
    time_str = snapshot.timestamp.strftime("%H:%M:%S") if snapshot.timestamp else "--:--:--"
    table = Table(title=f"System Resources - {time_str}", expand=False)
    table.add_column("Metric")
    table.add_column("Usage", justify="right")
    table.add_column("History")

    for kind in MetricKind:
        value = snapshot.current(kind)
        style = metric_style(kind, snapshot, config)
        table.add_row(
            metric_label(kind, snapshot),
            Text(f"{value:5.1f}%", style=style),
            Text(make_sparkline(snapshot.history(kind), config.collection.history_size), style=style),
        )
    return table
