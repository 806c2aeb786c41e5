"""Periodic sampling loop feeding the history store."""
import functools
import logging
import threading
import time
from concurrent.futures import Future, wait
from typing import Any, Callable, Dict, Optional

from ..collectors.system_models import BatteryState, MetricKind, SystemReading
from .shared_data import HistoryStore
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], Any]], Any]


def run_inline(callback: Callable[[], Any]) -> Any:
    """Default dispatcher: commit on the loop's own thread."""
    return callback()


class UpdateLoop:
    """Samples all metrics every interval and commits them to a HistoryStore.

    Each sampler runs on its own daemon thread. The commit is handed to
    ``dispatch``, which must run the callable on the consumer's thread and
    return its result (Textual's ``App.call_from_thread`` fits). Ticks never overlap:
    a slow tick delays the next one and missed ticks are skipped.
    """

    def __init__(
        self,
        store: HistoryStore,
        sampler,
        interval: float = 1.0,
        sample_timeout: float = 5.0,
        dispatch: Optional[Dispatcher] = None,
    ):
        """Initialize an idle loop; call start() to begin ticking."""
        if interval <= 0:
            raise ValueError(f"Update interval must be positive, got {interval}")
        self.store = store
        self.sampler = sampler
        self.interval = interval
        self.sample_timeout = sample_timeout
        self.dispatch = dispatch or run_inline

        self._lock = threading.RLock()
        self._tick_lock = threading.Lock()
        self._session = 0
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._pending: Dict[MetricKind, Future] = {}

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None

    def start(self):
        """Start ticking. No-op if already running."""
        with self._lock:
            if self._thread is not None:
                return
            self._session += 1
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._session, self._stop_event),
                name="hostmon-update-loop",
                daemon=True,
            )
            self._thread.start()
        logger.info("Update loop started (interval %.2fs)", self.interval)

    def stop(self):
        """Stop ticking. No commit happens after this returns."""
        with self._lock:
            if self._thread is None:
                return
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
            self._session += 1
            stop_event.set()

        if thread is not threading.current_thread():
            thread.join(timeout=1)
        logger.info("Update loop stopped")

    def tick(self) -> Optional[Snapshot]:
        """Run one sampling and commit cycle now.

        Returns the committed snapshot, or None when the loop is idle.
        """
        with self._lock:
            if self._thread is None:
                return None
            session = self._session
        return self._tick(session)

    def _run(self, session: int, stop_event: threading.Event):
        """Timer thread body."""
        next_tick = time.monotonic() + self.interval
        while not stop_event.wait(max(0.0, next_tick - time.monotonic())):
            try:
                self._tick(session)
            except Exception:
                logger.warning("Update tick failed", exc_info=True)

            next_tick += self.interval
            now = time.monotonic()
            if next_tick <= now:
                skipped = int((now - next_tick) // self.interval) + 1
                next_tick += skipped * self.interval
                logger.debug("Tick overran, skipping %d tick(s)", skipped)

    def _tick(self, session: int) -> Optional[Snapshot]:
        with self._tick_lock:
            reading = self._sample(session)
            if reading is None:
                return None
            return self.dispatch(functools.partial(self._commit, session, reading))

    def _sample(self, session: int) -> Optional[SystemReading]:
        """Run all samplers concurrently and wait for every one of them."""
        with self._lock:
            if session != self._session or self._thread is None:
                return None

        futures = {
            MetricKind.CPU: self._submit(MetricKind.CPU, self.sampler.sample_cpu),
            MetricKind.RAM: self._submit(MetricKind.RAM, self.sampler.sample_ram),
            MetricKind.DISK: self._submit(MetricKind.DISK, self.sampler.sample_disk),
            MetricKind.BATTERY: self._submit(MetricKind.BATTERY, self.sampler.sample_battery),
        }
        wait(futures.values(), timeout=self.sample_timeout)
        return SystemReading(
            cpu=self._result(MetricKind.CPU, futures[MetricKind.CPU], 0.0),
            ram=self._result(MetricKind.RAM, futures[MetricKind.RAM], 0.0),
            disk=self._result(MetricKind.DISK, futures[MetricKind.DISK], 0.0),
            battery=self._result(MetricKind.BATTERY, futures[MetricKind.BATTERY], BatteryState()),
        )

    def _submit(self, kind: MetricKind, sample: Callable[[], Any]) -> Future:
        """Run one sampler on a daemon thread.

        A sampler stuck in the kernel (e.g. a dead network mount) keeps its
        thread; later ticks wait on that same call instead of piling up
        more threads behind it.
        """
        pending = self._pending.get(kind)
        if pending is not None and not pending.done():
            return pending

        future = Future()
        self._pending[kind] = future
        threading.Thread(
            target=_run_sampler,
            args=(future, sample),
            name=f"hostmon-sampler-{kind.value}",
            daemon=True,
        ).start()
        return future

    def _result(self, kind: MetricKind, future: Future, default):
        if not future.done():
            logger.warning("%s sampler timed out after %.1fs", kind.label, self.sample_timeout)
            return default
        try:
            return _coerce(kind, future.result())
        except (TypeError, ValueError):
            logger.warning("%s sampler returned malformed data", kind.label, exc_info=True)
            return default
        except Exception:
            logger.warning("%s sampler raised", kind.label, exc_info=True)
            return default

    def _commit(self, session: int, reading: SystemReading) -> Optional[Snapshot]:
        with self._lock:
            if session != self._session or self._thread is None:
                logger.debug("Discarding reading from a stopped session")
                return None
            snapshot = self.store.commit(reading, notify=False)
        # Subscribers run outside the loop lock so they may call back into it
        self.store.notify(snapshot)
        return snapshot


def _run_sampler(future: Future, sample: Callable[[], Any]):
    if not future.set_running_or_notify_cancel():
        return
    try:
        future.set_result(sample())
    except Exception as e:
        future.set_exception(e)


def _coerce(kind: MetricKind, value) -> Any:
    """Validate one sampler result; raises TypeError/ValueError if malformed."""
    if kind is MetricKind.BATTERY:
        if isinstance(value, BatteryState):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            percent, charging = value
            return BatteryState(percent=float(percent), is_charging=bool(charging))
        raise TypeError(f"Expected BatteryState or (percent, charging), got {value!r}")
    if isinstance(value, bool):
        raise TypeError(f"Expected a percentage, got {value!r}")
    return float(value)
