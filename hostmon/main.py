"""Main entry point for the hostmon system monitor."""
import argparse
import logging
import threading

from .collectors.system_details import get_system_details
from .collectors.system_sampler import MetricSampler
from .config.config_manager import DEFAULT_CONFIG_PATH, ConfigManager
from .core.shared_data import HistoryStore
from .core.update_loop import UpdateLoop
from .ui.console_display import ConsoleDisplay
from .ui.display_manager import DisplayManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Host resource monitor")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--interval", type=float, help="seconds between samples")
    parser.add_argument("--refresh-rate", type=float, help="seconds between display refreshes")
    parser.add_argument("--plain", action="store_true", help="scrolling console output instead of the full-screen UI")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--log-file", help="write logs here (the terminal belongs to the UI)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, args.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Load configuration - let it crash if bad
    config = ConfigManager.load_config(args.config)
    if args.interval is not None and args.interval > 0:
        config.collection.interval = args.interval
    if args.refresh_rate is not None and args.refresh_rate > 0:
        config.refresh_rate = args.refresh_rate
    if args.no_color:
        config.display.show_colors = False

    collection = config.collection
    store = HistoryStore(capacity=collection.history_size)
    sampler = MetricSampler(cpu_mode=collection.cpu_mode, disk_path=collection.disk_path)
    update_loop = UpdateLoop(
        store,
        sampler,
        interval=collection.interval,
        sample_timeout=collection.sample_timeout,
    )

    update_loop.start()
    try:
        if args.plain:
            stop_event = threading.Event()
            try:
                ConsoleDisplay(config, store).run(stop_event)
            except KeyboardInterrupt:
                stop_event.set()
        else:
            details = get_system_details(collection.disk_path)
            DisplayManager(config, store, update_loop, details).run()
    finally:
        update_loop.stop()


if __name__ == "__main__":
    main()
