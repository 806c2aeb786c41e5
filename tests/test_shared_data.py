import threading

from hostmon.collectors.system_models import BatteryState, MetricKind, SystemReading
from hostmon.core.shared_data import HistoryStore
from hostmon.core.snapshot import Snapshot


def _reading(value, charging=False):
    return SystemReading(cpu=value, ram=value, disk=value, battery=BatteryState(value, charging))


def test_initial_state(store):
    snapshot = store.snapshot()
    assert snapshot.cpu_history == ()
    assert snapshot.ram_history == ()
    assert snapshot.disk_history == ()
    assert snapshot.battery_history == ()
    assert snapshot.disk_usage == 0.0
    assert snapshot.battery_percentage == 0.0
    assert snapshot.battery_is_charging is False
    assert snapshot.tick == 0


def test_commit_updates_histories_and_current_values(store):
    reading = SystemReading(cpu=23.45, ram=61.0, disk=72.3, battery=BatteryState(88.0, True))

    snapshot = store.commit(reading)

    assert snapshot.cpu_history == (23.5,)
    assert snapshot.ram_history == (61.0,)
    assert snapshot.disk_history == (72.3,)
    assert snapshot.disk_usage == 72.3
    assert snapshot.battery_history == (88.0,)
    assert snapshot.battery_percentage == 88.0
    assert snapshot.battery_is_charging is True
    assert snapshot.tick == 1
    assert store.snapshot() is snapshot


def test_commit_clamps_out_of_range_values(store):
    snapshot = store.commit(SystemReading(cpu=150, ram=-5, disk=float("nan"), battery=BatteryState(101.0)))
    assert snapshot.cpu_history == (100.0,)
    assert snapshot.ram_history == (0.0,)
    assert snapshot.disk_history == (0.0,)
    assert snapshot.battery_percentage == 100.0


def test_history_rolls_after_capacity(store):
    for value in range(1, 62):
        store.commit(_reading(float(value)))

    snapshot = store.snapshot()
    assert snapshot.cpu_history == tuple(float(v) for v in range(2, 62))
    assert len(snapshot.cpu_history) == 60
    assert snapshot.tick == 61


def test_small_capacity():
    store = HistoryStore(capacity=2)
    for value in (1.0, 2.0, 3.0):
        store.commit(_reading(value))
    assert store.snapshot().history(MetricKind.RAM) == (2.0, 3.0)


def test_published_snapshot_is_not_mutated_by_later_commits(store):
    first = store.commit(_reading(10.0))
    store.commit(_reading(20.0))
    assert first.cpu_history == (10.0,)
    assert first.tick == 1


def test_snapshot_accessors(store):
    snapshot = store.commit(SystemReading(cpu=1.0, ram=2.0, disk=3.0, battery=BatteryState(4.0)))
    assert [snapshot.current(kind) for kind in MetricKind] == [1.0, 2.0, 3.0, 4.0]
    assert snapshot.history(MetricKind.DISK) == (3.0,)
    assert snapshot.cpu_usage == 1.0
    assert snapshot.ram_usage == 2.0
    assert Snapshot().cpu_usage == 0.0


def test_clear(store):
    store.commit(_reading(50.0, charging=True))
    store.clear()
    assert store.snapshot() == Snapshot()


def test_subscribers_receive_each_snapshot(store):
    received = []
    unsubscribe = store.subscribe(received.append)

    first = store.commit(_reading(1.0))
    second = store.commit(_reading(2.0))
    unsubscribe()
    store.commit(_reading(3.0))

    assert received == [first, second]
    # Second unsubscribe is harmless
    unsubscribe()


def test_failing_subscriber_does_not_break_commit(store):
    received = []

    def broken(snapshot):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(received.append)

    snapshot = store.commit(_reading(5.0))

    assert received == [snapshot]
    assert store.snapshot().tick == 1


def test_readers_never_see_a_partial_commit(store):
    commits = 2000
    stop = threading.Event()
    errors = []

    def writer():
        for i in range(1, commits + 1):
            store.commit(_reading(float(i % 101)))
        stop.set()

    def reader():
        while not stop.is_set():
            snapshot = store.snapshot()
            histories = [snapshot.history(kind) for kind in MetricKind]
            if any(h != histories[0] for h in histories):
                errors.append(snapshot)
            if len(histories[0]) != min(snapshot.tick, store.capacity):
                errors.append(snapshot)
            if snapshot.tick and snapshot.disk_usage != histories[0][-1]:
                errors.append(snapshot)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for thread in readers:
        thread.start()
    writer_thread = threading.Thread(target=writer)
    writer_thread.start()

    writer_thread.join(timeout=30)
    stop.set()
    for thread in readers:
        thread.join(timeout=5)

    assert not errors
    assert store.snapshot().tick == commits


def test_deferred_notification(store):
    received = []
    store.subscribe(received.append)

    snapshot = store.commit(_reading(10.0), notify=False)
    assert received == []
    assert store.snapshot() is snapshot

    store.notify(snapshot)
    assert received == [snapshot]
