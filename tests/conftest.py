import threading

import pytest

from hostmon.collectors.system_models import BatteryState
from hostmon.core.shared_data import HistoryStore
from hostmon.core.update_loop import UpdateLoop


class FakeSampler:
    """Sampler returning fixed readings, optionally blocking or failing."""

    def __init__(self, cpu=23.45, ram=61.0, disk=72.3, battery=BatteryState(88.0, True)):
        self.cpu = cpu
        self.ram = ram
        self.disk = disk
        self.battery = battery
        self.gate = None  # threading.Event the CPU sampler waits on
        self.calls = 0
        self._lock = threading.Lock()

    def sample_cpu(self):
        with self._lock:
            self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        return self.cpu() if callable(self.cpu) else self.cpu

    def sample_ram(self):
        return self.ram

    def sample_disk(self):
        return self.disk

    def sample_battery(self):
        return self.battery


@pytest.fixture
def sampler():
    return FakeSampler()


@pytest.fixture
def store():
    return HistoryStore()


@pytest.fixture
def idle_loop(store, sampler):
    """Loop whose timer never fires during a test; ticks are driven by hand."""
    loop = UpdateLoop(store, sampler, interval=3600)
    yield loop
    loop.stop()
