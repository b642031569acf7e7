"""
Fireworks Star Effects

Death effects attached to stars by tag. When a tagged star dies the
dispatcher looks the tag up and spawns the child particles:
- Crossette: four same-color stars in a cross
- Floral: a miniature shell
- Falling leaves: invisible stars trailing gold glitter
- Crackle: a cloud of short gold sparks
"""
import math
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Dict

from .colors import COLOR, INVISIBLE

if TYPE_CHECKING:
    from .particles import Star
    from .simulation import Simulation

PI_2 = math.pi * 2
PI_HALF = math.pi * 0.5


class Effect(Enum):
    """What happens when a star dies."""
    NONE = auto()
    SHELL_BURST = auto()  # Comet reaching its burst point
    CROSSETTE = auto()
    FLORAL = auto()
    FALLING_LEAVES = auto()
    CRACKLE = auto()


def create_particle_arc(rng, start: float, arc_length: float, count: float, randomness: float,
                        factory: Callable[[float], object]) -> None:
    """Spread `count` particles over an arc, jittering each angle.

    `start` and `arc_length` may be negative. `randomness` scales the
    random offset, in units of the spacing between particles.
    """
    if count <= 0 or arc_length == 0:
        return

    angle_delta = arc_length / count
    # Skip a trailing particle that would land on top of the first
    end = start + arc_length - angle_delta * 0.5

    angle = start
    if end > start:
        while angle < end:
            factory(angle + rng.random() * angle_delta * randomness)
            angle = angle + angle_delta
    else:
        while angle > end:
            factory(angle + rng.random() * angle_delta * randomness)
            angle = angle + angle_delta


def crossette_effect(sim: "Simulation", star: "Star") -> None:
    rng = sim.ctx.rng
    start_angle = rng.random() * PI_HALF
    create_particle_arc(rng, start_angle, PI_2, 4, 0.5, lambda angle: sim.particles.add_star(
        star.x, star.y, star.color, angle, rng.random() * 0.6 + 0.75, 600
    ))


def floral_effect(sim: "Simulation", star: "Star") -> None:
    rng = sim.ctx.rng
    start_angle = rng.random() * PI_HALF
    count = sim.ctx.settings.floral_count

    def factory(angle: float) -> None:
        sim.particles.add_star(
            star.x,
            star.y,
            star.color,
            angle,
            # Near cubic falloff puts more stars toward the outside
            rng.random() ** 0.45 * 2.4,
            1000 + rng.random() * 300,
            star.speed_x,
            star.speed_y,
        )

    create_particle_arc(rng, start_angle, PI_2, count, 1, factory)
    sim.particles.add_burst_flash(star.x, star.y, 46)


def falling_leaves_effect(sim: "Simulation", star: "Star") -> None:
    rng = sim.ctx.rng
    start_angle = rng.random() * PI_HALF
    spark_freq = sim.ctx.settings.falling_leaves_spark_freq

    def factory(angle: float) -> None:
        leaf = sim.particles.add_star(
            star.x,
            star.y,
            INVISIBLE,
            angle,
            rng.random() ** 0.45 * 2.4,
            2400 + rng.random() * 600,
            star.speed_x,
            star.speed_y,
        )
        leaf.spark_color = COLOR["Gold"]
        leaf.spark_freq = spark_freq
        leaf.spark_speed = 0.28
        leaf.spark_life = 750
        leaf.spark_life_variation = 3.2

    create_particle_arc(rng, start_angle, PI_2, 12, 1, factory)
    sim.particles.add_burst_flash(star.x, star.y, 46)


def crackle_effect(sim: "Simulation", star: "Star") -> None:
    rng = sim.ctx.rng
    count = sim.ctx.settings.crackle_count
    create_particle_arc(rng, 0, PI_2, count, 1.8, lambda angle: sim.particles.add_spark(
        star.x, star.y, COLOR["Gold"], angle, rng.random() ** 0.45 * 2.4, 300 + rng.random() * 200
    ))


def shell_burst_effect(sim: "Simulation", star: "Star") -> None:
    if star.shell is not None:
        star.shell.burst(star.x, star.y)


class EffectDispatcher:
    """Runs the effect matching a dying star's tag."""

    HANDLERS: Dict[Effect, Callable[["Simulation", "Star"], None]] = {
        Effect.SHELL_BURST: shell_burst_effect,
        Effect.CROSSETTE: crossette_effect,
        Effect.FLORAL: floral_effect,
        Effect.FALLING_LEAVES: falling_leaves_effect,
        Effect.CRACKLE: crackle_effect,
    }

    def __init__(self, sim: "Simulation"):
        self.sim = sim

    def dispatch(self, star: "Star") -> None:
        """Pool release hook for stars."""
        handler = self.HANDLERS.get(star.on_death)
        if handler:
            handler(self.sim, star)
