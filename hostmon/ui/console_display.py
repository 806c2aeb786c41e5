"""Plain console display using Rich Live, redrawn on each commit."""
import threading

from rich.console import Console
from rich.live import Live

from ..config.config import Config
from ..core.shared_data import HistoryStore
from ..core.snapshot import Snapshot
from .render import render_table


class ConsoleDisplay:
    """Redraws a metrics table whenever the store publishes a snapshot."""

    def __init__(self, config: Config, store: HistoryStore, console: Console = None):
        self.config = config
        self.store = store
        self.console = console or Console(no_color=not config.display.show_colors)
        self._changed = threading.Event()

    def _on_snapshot(self, snapshot: Snapshot):
        self._changed.set()

    def run(self, stop_event: threading.Event):
        """Block until stop_event is set, redrawing on every change."""
        unsubscribe = self.store.subscribe(self._on_snapshot)
        try:
            with Live(render_table(self.store.snapshot(), self.config),
                      console=self.console, auto_refresh=False) as live:
                while not stop_event.is_set():
                    if self._changed.wait(timeout=0.2):
                        self._changed.clear()
                        live.update(render_table(self.store.snapshot(), self.config), refresh=True)
                live.update(render_table(self.store.snapshot(), self.config), refresh=True)
        finally:
            unsubscribe()
