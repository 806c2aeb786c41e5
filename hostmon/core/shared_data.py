"""Shared history store for thread-safe metric access."""
import logging
import threading
from datetime import datetime
from typing import Callable, List

from ..collectors.system_models import MetricKind, SystemReading
from ..collectors.system_sampler import normalize_percent
from .history import DEFAULT_CAPACITY, MetricHistory
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

Subscriber = Callable[[Snapshot], None]


class HistoryStore:
    """Single-writer store of rolling metric histories.

    Writers go through commit(), which holds the lock for the whole
    update. Readers get the last published Snapshot without locking.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """Initialize empty histories for every metric kind."""
        self._lock = threading.Lock()
        self.capacity = capacity
        self._histories = {kind: MetricHistory(capacity) for kind in MetricKind}
        self._disk_usage = 0.0
        self._battery_percentage = 0.0
        self._battery_is_charging = False
        self._tick = 0
        self._snapshot = Snapshot()
        self._subscribers: List[Subscriber] = []
        self._subscribers_lock = threading.Lock()

    def commit(self, reading: SystemReading, notify: bool = True) -> Snapshot:
        """Append one tick's reading to every history and publish it.

        With notify=False the caller must pass the result to notify()
        itself, once it holds no locks of its own.
        """
        cpu = normalize_percent(reading.cpu)
        ram = normalize_percent(reading.ram)
        disk = normalize_percent(reading.disk)
        battery = normalize_percent(reading.battery.percent)

        with self._lock:
            self._histories[MetricKind.CPU].append(cpu)
            self._histories[MetricKind.RAM].append(ram)
            self._histories[MetricKind.DISK].append(disk)
            self._histories[MetricKind.BATTERY].append(battery)
            self._disk_usage = disk
            self._battery_percentage = battery
            self._battery_is_charging = bool(reading.battery.is_charging)
            self._tick += 1
            snapshot = self._build_snapshot()
            self._snapshot = snapshot

        if notify:
            self.notify(snapshot)
        return snapshot

    def snapshot(self) -> Snapshot:
        """Latest published snapshot."""
        return self._snapshot

    def clear(self):
        """Drop all history and current values."""
        with self._lock:
            for history in self._histories.values():
                history.clear()
            self._disk_usage = 0.0
            self._battery_percentage = 0.0
            self._battery_is_charging = False
            self._tick = 0
            self._snapshot = Snapshot()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call callback with each new snapshot; returns an unsubscribe function."""
        with self._subscribers_lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._subscribers_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _build_snapshot(self) -> Snapshot:
        return Snapshot(
            cpu_history=self._histories[MetricKind.CPU].as_tuple(),
            ram_history=self._histories[MetricKind.RAM].as_tuple(),
            disk_history=self._histories[MetricKind.DISK].as_tuple(),
            battery_history=self._histories[MetricKind.BATTERY].as_tuple(),
            disk_usage=self._disk_usage,
            battery_percentage=self._battery_percentage,
            battery_is_charging=self._battery_is_charging,
            tick=self._tick,
            timestamp=datetime.now(),
        )

    def notify(self, snapshot: Snapshot):
        """Hand a committed snapshot to every subscriber."""
        with self._subscribers_lock:
            subscribers = self._subscribers.copy()
        for callback in subscribers:
            try:
                callback(snapshot)
            except Exception:
                logger.warning("Snapshot subscriber %r failed", callback, exc_info=True)
