"""
Fireworks Simulation - Frame Driven Core

Ties the pieces together behind a single update entry point:
- SimulationContext: config, stage size, RNG and derived quality constants
- Simulation: update loop, launch requests, pause/speed, reload

One update call per display frame. The core never drives its own timing.
"""
import logging
import math
import random
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional, Tuple

from .colors import ColorPicker
from .config import (
    Config, QualitySettings, quality_settings, SHELL_NAMES,
    SCREEN_WIDTH, SCREEN_HEIGHT, DESKTOP_MIN_WIDTH, MAX_FRAME_TIME, MAX_LAG,
)
from .effects import EffectDispatcher
from .events import EventBus, ConfigChangedEvent, ReloadEvent
from .particles import ParticleSystem
from .sequencer import Sequencer
from .shells import Shell, make_shell
from .sky import SkyColorAccumulator
from .timers import DelayedEventQueue

logger = logging.getLogger("fireworks")


def _clamp(value: float, low: float, high: float) -> float:
    """Clamp to [low, high]; NaN and infinities collapse to low."""
    if not math.isfinite(value):
        return low
    return min(max(value, low), high)


@dataclass
class SimulationContext:
    """State shared by every simulation operation."""
    config: Config
    width: float
    height: float
    rng: random.Random
    colors: ColorPicker
    settings: QualitySettings
    sim_speed: float = 1.0
    clock: float = 0.0  # Simulated ms since construction

    @property
    def is_desktop(self) -> bool:
        return self.width > DESKTOP_MIN_WIDTH


class Simulation:
    """The firework show: particles, shells, sequencer and sky."""

    def __init__(self, config: Optional[Config] = None, width: float = SCREEN_WIDTH,
                 height: float = SCREEN_HEIGHT, seed: Optional[int] = None):
        config = (config or Config()).coerced()
        rng = random.Random(seed)
        self.ctx = SimulationContext(
            config=config,
            width=width,
            height=height,
            rng=rng,
            colors=ColorPicker(rng),
            settings=quality_settings(config.quality),
        )
        self.events = EventBus()
        self.effects = EffectDispatcher(self)
        self.particles = ParticleSystem(rng, on_star_death=self.effects.dispatch)
        self.timers = DelayedEventQueue()
        self.sequencer = Sequencer(self)
        self.sky = SkyColorAccumulator()
        self.paused = False
        self.running = False

    def start(self) -> None:
        """Attach to the frame clock; update() is a no-op until called."""
        self.running = True
        logger.info(f"Simulation started ({self.ctx.width:.0f}x{self.ctx.height:.0f}, "
                    f"quality {self.ctx.config.quality})")

    def update(self, frame_time: float, lag: float = 1.0) -> None:
        """Advance the show by one frame.

        Args:
            frame_time: Real milliseconds since the previous frame
            lag: Frame time relative to a 60 FPS frame
        """
        if not self.running or self.paused:
            return

        frame_time = _clamp(frame_time, 0, MAX_FRAME_TIME)
        lag = _clamp(lag, 0, MAX_LAG)

        # Flashes are only valid for the frame that queued them
        self.particles.expire_burst_flashes()

        ctx = self.ctx
        ctx.sim_speed = _clamp(ctx.sim_speed, 0, 1)
        time_step = frame_time * ctx.sim_speed
        speed = ctx.sim_speed * lag

        self.timers.advance(time_step)
        ctx.clock = self.timers.now

        self.sequencer.update(time_step)
        self.particles.update(time_step, speed)
        self.sky.update(self.particles.stars, ctx.config.sky_lighting, speed)

    # === Controls ===

    def set_config(self, config: Optional[Config] = None, **changes: Any) -> Config:
        """Apply a new config (or field changes) and re-derive quality constants."""
        new_config = replace(config or self.ctx.config, **changes).coerced()
        self.ctx.config = new_config
        self.ctx.settings = quality_settings(new_config.quality)
        logger.info(f"Config applied: {new_config}")
        self.events.publish(ConfigChangedEvent(config=new_config))
        return new_config

    def set_speed(self, speed: float) -> float:
        if math.isnan(speed):
            logger.warning("Ignoring NaN simulation speed")
            return self.ctx.sim_speed
        self.ctx.sim_speed = min(max(speed, 0), 1)
        return self.ctx.sim_speed

    def toggle_pause(self, paused: Optional[bool] = None) -> bool:
        self.paused = (not self.paused) if paused is None else paused
        logger.info("Paused" if self.paused else "Resumed")
        return self.paused

    def resize(self, width: float, height: float) -> None:
        self.ctx.width = width
        self.ctx.height = height

    def launch_shell(self, position: Optional[float] = None, height: Optional[float] = None,
                     shell: Optional[str] = None, size: Optional[float] = None) -> Shell:
        """Launch exactly one shell.

        Position and height are normalized (0..1, height measured from the
        bottom); either left out is chosen at random. Shell name and size
        default to the configured ones.
        """
        name = shell or self.ctx.config.shell
        if name not in SHELL_NAMES:
            logger.warning(f"Unknown shell {name!r}, launching a random one")
            name = "Random"
        size = self.ctx.config.size if size is None else size

        if position is None or height is None:
            random_x, random_height = self.sequencer.random_position()
            position = random_x if position is None else position
            height = random_height if height is None else height

        instance = make_shell(self, name, size)
        instance.launch(position, height)
        return instance

    def launch_at(self, x: float, y: float) -> Shell:
        """Launch a configured shell bursting at a stage pixel position."""
        return self.launch_shell(x / self.ctx.width, 1 - y / self.ctx.height)

    def reload(self) -> None:
        """Stop the show and return every particle, timer and counter to empty."""
        self.running = False
        self.particles.clear()
        self.timers.cancel_all()
        self.sequencer.reset()
        self.sky.reset()
        logger.info("Simulation reloaded")
        self.events.publish(ReloadEvent())

    # === Renderer access ===

    def drain_burst_flashes(self) -> Iterator[Tuple[float, float, float]]:
        return self.particles.drain_burst_flashes()

    @property
    def sky_color(self) -> Tuple[int, int, int]:
        return self.sky.rgb

    def active_particle_count(self) -> int:
        return self.particles.star_count() + self.particles.spark_count() + len(self.particles.burst_flashes)
