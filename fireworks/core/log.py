"""
Fireworks Logging

Sets up the dedicated "fireworks" logger and turns bus events into log lines.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from .events import (
    EventBus, ShellLaunchedEvent, ShellBurstEvent, SequenceEvent,
    ConfigChangedEvent, ReloadEvent,
)

LOGGER_NAME = "fireworks"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(level: Union[int, str] = "INFO", log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Configure the application logger (not the root logger).

    Logs go to the console and, if `log_file` is given, to that file.
    Calling this again replaces the previous handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # Keep third-party log records out of our output and vice versa
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    if logger.hasHandlers():
        logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class LoggerHandler:
    """Logs simulation events."""

    def __init__(self, bus: EventBus, verbose: bool = False):
        self.bus = bus
        self.verbose = verbose
        self.logger = logging.getLogger(LOGGER_NAME)
        bus.subscribe(SequenceEvent, self.on_sequence)
        bus.subscribe(ConfigChangedEvent, self.on_config)
        bus.subscribe(ReloadEvent, self.on_reload)
        if verbose:
            bus.subscribe(ShellLaunchedEvent, self.on_launch)
            bus.subscribe(ShellBurstEvent, self.on_burst)

    def detach(self) -> None:
        self.bus.unsubscribe(SequenceEvent, self.on_sequence)
        self.bus.unsubscribe(ConfigChangedEvent, self.on_config)
        self.bus.unsubscribe(ReloadEvent, self.on_reload)
        self.bus.unsubscribe(ShellLaunchedEvent, self.on_launch)
        self.bus.unsubscribe(ShellBurstEvent, self.on_burst)

    def on_sequence(self, event: SequenceEvent) -> None:
        self.logger.info(f"[SEQUENCE] {event.name}, next in {event.delay:.0f}ms")

    def on_config(self, event: ConfigChangedEvent) -> None:
        self.logger.info(f"[CONFIG] {event.config}")

    def on_reload(self, event: ReloadEvent) -> None:
        self.logger.info("[RELOAD] Simulation flushed")

    def on_launch(self, event: ShellLaunchedEvent) -> None:
        self.logger.info(f"[LAUNCH] {event.name} from x={event.x:.0f}, bursting at y={event.burst_y:.0f}")

    def on_burst(self, event: ShellBurstEvent) -> None:
        kind = "nested" if event.depth else "shell"
        self.logger.info(f"[BURST] {event.name} ({kind}) at ({event.x:.0f}, {event.y:.0f}), "
                         f"{event.star_count:.0f} stars")
