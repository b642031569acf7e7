"""
Fireworks Particles - Stars, Sparks and Burst Flashes

Handles the pooled particle kinds and the per-frame physics step:
- Stars: drag (weaker for heavy comets), gravity, spin, spark emission,
  second color transition, death effects
- Sparks: drag and gravity only
- Burst flashes: one-frame render events
"""
import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .colors import COLOR_CODES, COLOR_CODES_W_INVIS, INVISIBLE
from .config import GRAVITY, STAR_AIR_DRAG, STAR_AIR_DRAG_HEAVY, SPARK_AIR_DRAG
from .effects import Effect
from .pool import ParticlePool

PI_2 = math.pi * 2


@dataclass(eq=False)
class Star:
    """A burst star or shell comet."""
    slot: int
    x: float = 0.0
    y: float = 0.0
    prev_x: float = 0.0
    prev_y: float = 0.0
    speed_x: float = 0.0
    speed_y: float = 0.0
    color: str = INVISIBLE
    life: float = 0.0
    full_life: float = 0.0
    heavy: bool = False
    spin_angle: float = 0.0
    spin_speed: float = 0.8
    spin_radius: float = 0.0
    spark_freq: float = 0.0  # ms between spark emissions
    spark_speed: float = 1.0
    spark_timer: float = 0.0
    spark_color: str = INVISIBLE
    spark_life: float = 750
    spark_life_variation: float = 0.25
    second_color: Optional[str] = None
    second_color_time: float = 0.0  # Remaining life at which the color changes
    color_changed: bool = False
    on_death: Effect = Effect.NONE
    shell: Any = None  # Shell to burst when a comet dies
    update_frame: int = -1
    pooled: bool = True

    def reset_effects(self) -> None:
        self.on_death = Effect.NONE
        self.shell = None
        self.second_color = None
        self.second_color_time = 0.0
        self.color_changed = False


@dataclass(eq=False)
class Spark:
    """A glitter or trail particle."""
    slot: int
    x: float = 0.0
    y: float = 0.0
    prev_x: float = 0.0
    prev_y: float = 0.0
    speed_x: float = 0.0
    speed_y: float = 0.0
    color: str = INVISIBLE
    life: float = 0.0
    pooled: bool = True

    def reset_effects(self) -> None:
        pass


@dataclass(eq=False)
class BurstFlash:
    """A radial flash drawn for exactly one frame."""
    slot: int
    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0
    pooled: bool = True

    def reset_effects(self) -> None:
        pass


def create_particle_collection() -> Dict[str, List]:
    """One empty list per color bucket (invisible included)."""
    return {color: [] for color in COLOR_CODES_W_INVIS}


class ParticleSystem:
    """Owns the particle pools and the active per-color buckets."""

    def __init__(self, rng: random.Random, on_star_death: Optional[Callable[[Star], None]] = None,
                 star_capacity: int = 0, spark_capacity: int = 0):
        self.rng = rng
        self.star_pool: ParticlePool[Star] = ParticlePool(Star, star_capacity, on_release=on_star_death)
        self.spark_pool: ParticlePool[Spark] = ParticlePool(Spark, spark_capacity)
        self.flash_pool: ParticlePool[BurstFlash] = ParticlePool(BurstFlash)
        self.stars: Dict[str, List[Star]] = create_particle_collection()
        self.sparks: Dict[str, List[Spark]] = create_particle_collection()
        self.burst_flashes: List[BurstFlash] = []
        self.frame = 0

    def add_star(self, x: float, y: float, color: str, angle: float, speed: float, life: float,
                 speed_off_x: float = 0.0, speed_off_y: float = 0.0) -> Star:
        """Spawn a star moving at `angle` (0 points down, pi points up)."""
        star = self.star_pool.acquire()

        star.heavy = False
        star.x = x
        star.y = y
        star.prev_x = x
        star.prev_y = y
        star.color = color
        star.speed_x = math.sin(angle) * speed + (speed_off_x or 0.0)
        star.speed_y = math.cos(angle) * speed + (speed_off_y or 0.0)
        star.life = life
        star.full_life = life
        star.spin_angle = self.rng.random() * PI_2
        star.spin_speed = 0.8
        star.spin_radius = 0.0
        star.spark_freq = 0.0
        star.spark_speed = 1.0
        star.spark_timer = 0.0
        star.spark_color = color
        star.spark_life = 750
        star.spark_life_variation = 0.25

        self.stars[color].append(star)
        return star

    def add_spark(self, x: float, y: float, color: str, angle: float, speed: float, life: float) -> Spark:
        spark = self.spark_pool.acquire()

        spark.x = x
        spark.y = y
        spark.prev_x = x
        spark.prev_y = y
        spark.color = color
        spark.speed_x = math.sin(angle) * speed
        spark.speed_y = math.cos(angle) * speed
        spark.life = life

        self.sparks[color].append(spark)
        return spark

    def add_burst_flash(self, x: float, y: float, radius: float) -> BurstFlash:
        """Queue a flash for the next render."""
        flash = self.flash_pool.acquire()
        flash.x = x
        flash.y = y
        flash.radius = radius
        self.burst_flashes.append(flash)
        return flash

    def drain_burst_flashes(self) -> Iterator[Tuple[float, float, float]]:
        """Pop every queued flash as (x, y, radius), returning each to its pool."""
        while self.burst_flashes:
            flash = self.burst_flashes.pop()
            self.flash_pool.release(flash)
            yield flash.x, flash.y, flash.radius

    def expire_burst_flashes(self) -> None:
        """Drop flashes the renderer did not consume last frame."""
        for _ in self.drain_burst_flashes():
            pass

    def update(self, time_step: float, speed: float) -> None:
        """Advance every active particle by one frame.

        Args:
            time_step: Simulated milliseconds elapsed (frame time x sim speed)
            speed: Integration multiplier (sim speed x lag)
        """
        self.frame += 1
        frame = self.frame

        star_drag = 1 - (1 - STAR_AIR_DRAG) * speed
        star_drag_heavy = 1 - (1 - STAR_AIR_DRAG_HEAVY) * speed
        spark_drag = 1 - (1 - SPARK_AIR_DRAG) * speed
        g_acc = time_step / 1000 * GRAVITY

        for color in COLOR_CODES_W_INVIS:
            stars = self.stars[color]
            for i in range(len(stars) - 1, -1, -1):
                star = stars[i]
                # A color change can move a star into a bucket not yet visited
                if star.update_frame == frame:
                    continue
                star.update_frame = frame

                star.life -= time_step
                if star.life <= 0:
                    del stars[i]
                    self.star_pool.release(star)
                    continue

                burn_rate = (star.life / star.full_life) ** 0.5
                burn_rate_inverse = 1 - burn_rate

                star.prev_x = star.x
                star.prev_y = star.y
                star.x += star.speed_x * speed
                star.y += star.speed_y * speed
                drag = star_drag_heavy if star.heavy else star_drag
                star.speed_x *= drag
                star.speed_y *= drag
                star.speed_y += g_acc

                if star.spin_radius:
                    star.spin_angle += star.spin_speed * speed
                    star.x += math.sin(star.spin_angle) * star.spin_radius * speed
                    star.y += math.cos(star.spin_angle) * star.spin_radius * speed

                if star.spark_freq:
                    star.spark_timer -= time_step
                    while star.spark_timer < 0:
                        star.spark_timer += star.spark_freq * 0.75 + star.spark_freq * burn_rate_inverse * 4
                        self.add_spark(
                            star.x,
                            star.y,
                            star.spark_color,
                            self.rng.random() * PI_2,
                            self.rng.random() * star.spark_speed * burn_rate,
                            star.spark_life * 0.8 + self.rng.random() * star.spark_life_variation * star.spark_life
                        )

                if star.second_color and not star.color_changed and star.life < star.second_color_time:
                    star.color_changed = True
                    star.color = star.second_color
                    del stars[i]
                    self.stars[star.second_color].append(star)
                    if star.second_color == INVISIBLE:
                        star.spark_freq = 0

            sparks = self.sparks[color]
            for i in range(len(sparks) - 1, -1, -1):
                spark = sparks[i]
                spark.life -= time_step
                if spark.life <= 0:
                    del sparks[i]
                    self.spark_pool.release(spark)
                    continue

                spark.prev_x = spark.x
                spark.prev_y = spark.y
                spark.x += spark.speed_x * speed
                spark.y += spark.speed_y * speed
                spark.speed_x *= spark_drag
                spark.speed_y *= spark_drag
                spark.speed_y += g_acc

    def clear(self) -> None:
        """Flush every bucket and pool without firing death effects."""
        for bucket in self.stars.values():
            bucket.clear()
        for bucket in self.sparks.values():
            bucket.clear()
        self.burst_flashes.clear()
        self.star_pool.reset()
        self.spark_pool.reset()
        self.flash_pool.reset()

    def visible_stars(self) -> Iterator[Tuple[str, List[Star]]]:
        """Yield (color, stars) for every rendered bucket."""
        for color in COLOR_CODES:
            yield color, self.stars[color]

    def visible_sparks(self) -> Iterator[Tuple[str, List[Spark]]]:
        for color in COLOR_CODES:
            yield color, self.sparks[color]

    def star_count(self) -> int:
        return sum(len(bucket) for bucket in self.stars.values())

    def spark_count(self) -> int:
        return sum(len(bucket) for bucket in self.sparks.values())
