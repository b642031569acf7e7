"""
Fireworks Events

Event types published by the simulation core. Logging and tests hook in
through the EventBus without the core knowing about them.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List


# === Event Dataclasses ===

@dataclass
class ShellLaunchedEvent:
    """Fired when a shell's comet leaves the ground."""
    name: str
    x: float
    y: float
    burst_y: float
    velocity: float


@dataclass
class ShellBurstEvent:
    """Fired when a shell bursts (nested pistil/streamer shells included)."""
    name: str
    x: float
    y: float
    size: float
    star_life: float
    star_count: float
    depth: int = 0  # 0 for the main shell, 1 for nested shells


@dataclass
class SequenceEvent:
    """Fired when the sequencer starts a sequence."""
    name: str
    delay: float  # ms until the next sequence is considered


@dataclass
class ConfigChangedEvent:
    """Fired after the config has been applied."""
    config: Any


@dataclass
class ReloadEvent:
    """Fired after the simulation has been flushed."""
    pass


# === EventBus ===

class EventBus:
    """Per-simulation publish/subscribe hub.

    Handlers run synchronously, in subscription order, inside `publish`.
    A handler may unsubscribe itself while an event is being delivered.
    """

    def __init__(self):
        self._handlers: DefaultDict[type, List[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        """Drop a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Any) -> None:
        for handler in tuple(self._handlers.get(type(event), ())):
            handler(event)
