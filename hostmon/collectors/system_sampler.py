"""System metric sampler for CPU, memory, disk, and battery."""
import logging
import math
import os
import threading
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

import psutil

from .system_models import BatteryState, SystemReading

logger = logging.getLogger(__name__)

CPU_MODES = ("delta", "cumulative")

# Expected platform errors - degrade to the default reading
SAMPLING_ERRORS = (psutil.Error, OSError, AttributeError, ValueError, TypeError, ZeroDivisionError)

_TENTH = Decimal("0.1")


def clamp_percent(value: float) -> float:
    """Clamp a percentage into [0, 100]; NaN becomes 0.0."""
    if value is None or math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 100.0)


def round_percent(value: float) -> float:
    """Round to one decimal, half away from zero (23.45 -> 23.5)."""
    if not math.isfinite(value):
        return value
    return float(Decimal(repr(float(value))).quantize(_TENTH, rounding=ROUND_HALF_UP))


def normalize_percent(value: float) -> float:
    """Clamp then round a percentage for storage."""
    return round_percent(clamp_percent(value))


def percent_of(part: float, whole: float) -> float:
    """Return part/whole as a normalized percentage, 0.0 for an empty whole."""
    if not whole:
        return 0.0
    return normalize_percent(part / whole * 100.0)


class MetricSampler:
    """Reads one instantaneous value per metric kind from the OS via psutil."""

    def __init__(self, cpu_mode: str = "delta", disk_path: str = "~"):
        if cpu_mode not in CPU_MODES:
            raise ValueError(f"Unknown cpu_mode {cpu_mode!r}, expected one of {CPU_MODES}")
        self.cpu_mode = cpu_mode
        self.disk_path = os.path.expanduser(disk_path)
        self._cpu_lock = threading.Lock()
        self._last_cpu_ticks: Optional[Tuple[float, float, float]] = None

    def sample_cpu(self) -> float:
        """CPU busy share from the user/system/idle tick counters."""
        try:
            times = psutil.cpu_times()
            ticks = (float(times.user), float(times.system), float(times.idle))
        except SAMPLING_ERRORS as e:
            logger.debug("CPU sample failed: %s", e)
            return 0.0

        with self._cpu_lock:
            previous = self._last_cpu_ticks
            self._last_cpu_ticks = ticks

        if self.cpu_mode == "delta" and previous is not None:
            user, system, idle = (now - before for now, before in zip(ticks, previous))
            if user + system + idle > 0:
                return percent_of(user + system, user + system + idle)

        user, system, idle = ticks
        return percent_of(user + system, user + system + idle)

    def sample_ram(self) -> float:
        """Share of active, inactive and wired memory against those plus free."""
        try:
            memory = psutil.virtual_memory()
            used = memory.active + memory.inactive + getattr(memory, "wired", 0)
            return percent_of(used, used + memory.free)
        except SAMPLING_ERRORS as e:
            logger.debug("RAM sample failed: %s", e)
            return 0.0

    def sample_disk(self) -> float:
        """Used share of the volume holding disk_path."""
        try:
            usage = psutil.disk_usage(self.disk_path)
            return percent_of(usage.total - usage.free, usage.total)
        except SAMPLING_ERRORS as e:
            logger.debug("Disk sample failed for %s: %s", self.disk_path, e)
            return 0.0

    def sample_battery(self) -> BatteryState:
        """First power source's charge level and charging flag."""
        try:
            battery = psutil.sensors_battery()
        except SAMPLING_ERRORS as e:
            logger.debug("Battery sample failed: %s", e)
            return BatteryState()

        if battery is None:
            # No power source, e.g. a desktop machine
            return BatteryState()

        try:
            percent = normalize_percent(float(battery.percent))
        except SAMPLING_ERRORS as e:
            logger.debug("Battery reading malformed: %s", e)
            return BatteryState()
        charging = bool(battery.power_plugged) and percent < 100.0
        return BatteryState(percent=percent, is_charging=charging)

    def sample_all(self) -> SystemReading:
        """Sample every metric sequentially."""
        return SystemReading(
            cpu=self.sample_cpu(),
            ram=self.sample_ram(),
            disk=self.sample_disk(),
            battery=self.sample_battery(),
        )
