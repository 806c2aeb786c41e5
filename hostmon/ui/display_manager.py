"""Display management using Textual for a live terminal UI."""
from typing import Optional

from textual.app import App
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from .. import __version__
from ..collectors.system_models import SystemDetails
from ..config.config import Config
from ..core.shared_data import HistoryStore
from ..core.update_loop import UpdateLoop
from .render import render_details, render_metrics

HELP_TEXT = "p=pause/resume  r=refresh  x/q=exit"


class DisplayManager(App):
    """Polls the history store and redraws gauges and sparklines."""

    CSS = """
    #header {
        height: 1;
        background: $primary;
        color: $text;
    }

    #body {
        height: auto;
    }

    #metrics {
        width: 1fr;
        padding: 1 2;
        border: round $primary;
    }

    #details {
        width: 34;
        padding: 1 2;
        border: round $secondary;
    }

    #help {
        color: $text-muted;
        text-style: italic;
    }
    """

    def __init__(
        self,
        config: Config,
        store: HistoryStore,
        update_loop: UpdateLoop,
        details: Optional[SystemDetails] = None,
    ):
        """Initialize the display manager."""
        super().__init__()
        self.config = config
        self.store = store
        self.update_loop = update_loop
        self.details = details

    def compose(self):
        """Create the layout structure."""
        with Vertical():
            yield Static(self._header_text(), id="header", markup=False)
            with Horizontal(id="body"):
                yield Static("Waiting for first sample...", id="metrics")
                if self.config.display.show_details and self.details:
                    yield Static(render_details(self.details), id="details", markup=False)
            yield Static(HELP_TEXT, id="help", markup=False)

    def on_mount(self):
        """Start the display refresh timer when the app mounts."""
        self.set_interval(self.config.refresh_rate, self._update_display)

    def on_key(self, event):
        """Handle key press events."""
        if event.key in ("x", "q"):
            self.exit()
        elif event.key == "p":
            self._toggle_pause()
        elif event.key == "r":
            self.run_worker(self.update_loop.tick, thread=True)

    def _toggle_pause(self):
        if self.update_loop.is_running:
            self.update_loop.stop()
        else:
            self.update_loop.start()
        self._update_display()

    def _header_text(self) -> str:
        state = "running" if self.update_loop.is_running else "paused"
        snapshot = self.store.snapshot()
        time_str = snapshot.timestamp.strftime("%H:%M:%S") if snapshot.timestamp else "--:--:--"
        return f"hostmon v{__version__} - {time_str} - {state} (every {self.update_loop.interval:g}s)"

    def _update_display(self):
        """Update all widgets with the latest snapshot."""
        snapshot = self.store.snapshot()
        self.query_one("#header", Static).update(self._header_text())
        if snapshot.tick:
            self.query_one("#metrics", Static).update(render_metrics(snapshot, self.config))
