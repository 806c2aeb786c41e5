from datetime import datetime
from io import StringIO

from rich.console import Console

from hostmon.collectors.system_models import BatteryState, MetricKind, SystemDetails, SystemReading
from hostmon.config.config import Config
from hostmon.config.threshold_config import ThresholdConfig
from hostmon.core.shared_data import HistoryStore
from hostmon.core.snapshot import Snapshot
from hostmon.ui.render import (
    level_style,
    make_progress_bar,
    make_sparkline,
    metric_label,
    metric_style,
    render_details,
    render_metrics,
    render_table,
)


def test_progress_bar():
    assert make_progress_bar(50.0, width=10) == "[█████░░░░░]  50.0%"
    assert make_progress_bar(0.0, width=4) == "[░░░░]   0.0%"
    assert make_progress_bar(100.0, width=4) == "[████] 100.0%"


def test_sparkline_scale_and_width():
    assert make_sparkline([0.0, 100.0]) == "▁█"
    assert make_sparkline([0.0, 50.0, 100.0], width=2) == make_sparkline([50.0, 100.0])
    assert make_sparkline([]) == ""
    assert make_sparkline([10.0], width=0) == ""


def test_level_style():
    thresholds = ThresholdConfig(warn=60.0, error=80.0)
    assert level_style(MetricKind.CPU, 10.0, thresholds) == "green"
    assert level_style(MetricKind.RAM, 65.0, thresholds) == "yellow"
    assert level_style(MetricKind.DISK, 95.0, thresholds) == "red"
    # Low battery is the alarming case
    assert level_style(MetricKind.BATTERY, 95.0, thresholds) == "green"
    assert level_style(MetricKind.BATTERY, 10.0, thresholds) == "red"


def test_missing_battery_is_not_coloured_as_low():
    config = Config()
    no_battery = Snapshot(battery_history=(0.0, 0.0))
    assert metric_style(MetricKind.BATTERY, no_battery, config) == ""
    assert metric_style(MetricKind.CPU, no_battery, config) == "green"

    draining = Snapshot(battery_history=(12.0, 10.0))
    assert metric_style(MetricKind.BATTERY, draining, config) == "red"
    # Flat but plugged in: a real battery at 0%
    assert metric_style(MetricKind.BATTERY, Snapshot(battery_history=(0.0,), battery_is_charging=True), config) == "red"


def test_render_metrics_keeps_missing_battery_unstyled():
    snapshot = HistoryStore().commit(SystemReading(cpu=12.0, ram=34.0, disk=56.0, battery=BatteryState()))
    text = render_metrics(snapshot, Config())
    battery_line = text.plain.splitlines()[-1]
    assert battery_line.startswith("Battery")
    assert not any(span.style == "red" for span in text.spans)


def test_metric_label():
    assert metric_label(MetricKind.CPU, Snapshot()) == "CPU"
    assert metric_label(MetricKind.DISK, Snapshot()) == "Disk"
    assert metric_label(MetricKind.BATTERY, Snapshot(battery_is_charging=True)) == "Battery ⚡"


def test_render_metrics_lists_every_metric():
    store = HistoryStore()
    snapshot = store.commit(SystemReading(cpu=12.0, ram=34.0, disk=56.0, battery=BatteryState(78.0, False)))

    text = render_metrics(snapshot, Config()).plain

    for label in ("CPU", "RAM", "Disk", "Battery"):
        assert label in text
    assert "12.0%" in text
    assert "78.0%" in text


def test_render_table():
    snapshot = Snapshot(cpu_history=(5.0,), timestamp=datetime(2024, 1, 1, 12, 30, 15))
    table = render_table(snapshot, Config())
    assert table.row_count == len(MetricKind)

    console = Console(file=StringIO(), width=120)
    console.print(table)
    output = console.file.getvalue()
    assert "12:30:15" in output
    assert "5.0%" in output


def test_render_details():
    details = SystemDetails(os_name="Linux 6.1", hostname="box", storage_gb=512.1, memory_gb=0.0, cpu_count=8)
    text = render_details(details)
    assert "Linux 6.1" in text
    assert "512.1 GB" in text
    assert "Memory:  N/A" in text
