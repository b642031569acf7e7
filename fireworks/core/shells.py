"""
Fireworks Shells

A Shell is a one-shot recipe for a firework: `launch` sends a comet up,
and when the comet dies `burst` lays out the star pattern. Shell types
are factories returning the options for one Shell.

Shell options:
- size: Size of the burst
- star_count: Optional, derived from size and star_density if omitted
- star_life, star_life_variation
- color: A color code, "random", or a [color, color] pair
- second_color: Color stars switch to late in life
- glitter: One of light, medium, heavy, thick, streamer, willow
- glitter_color
- pistil, pistil_color, streamers
- crossette, floral, crackle, falling_leaves, ring, horsetail
"""
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

from .colors import COLOR, INVISIBLE
from .config import SHELL_NAMES, QualitySettings
from .effects import Effect, PI_2, PI_HALF, create_particle_arc
from .events import ShellBurstEvent, ShellLaunchedEvent

if TYPE_CHECKING:
    from .simulation import Simulation, SimulationContext

logger = logging.getLogger("fireworks")


@dataclass(frozen=True)
class GlitterProfile:
    """Spark emission settings for burst stars."""
    freq: float  # ms between sparks at normal quality
    speed: float
    life: float
    life_variation: float


GLITTER_STYLES: Dict[str, GlitterProfile] = {
    "light": GlitterProfile(freq=400, speed=0.3, life=300, life_variation=2),
    "medium": GlitterProfile(freq=200, speed=0.44, life=700, life_variation=2),
    "heavy": GlitterProfile(freq=82, speed=0.8, life=1400, life_variation=2),
    "thick": GlitterProfile(freq=15, speed=1.42, life=2000, life_variation=3),
    "streamer": GlitterProfile(freq=40, speed=0.92, life=400, life_variation=2),
    "willow": GlitterProfile(freq=120, speed=0.34, life=1400, life_variation=3.8),
}


def glitter_params(style: str, settings: QualitySettings) -> Optional[GlitterProfile]:
    """Look up a glitter style, scaling spark frequency by quality."""
    profile = GLITTER_STYLES.get(style)
    if profile is None:
        return None
    speed = profile.speed
    if style == "thick" and settings.is_high:
        speed = 1.65
    return GlitterProfile(
        freq=profile.freq / settings.quality,
        speed=speed,
        life=profile.life,
        life_variation=profile.life_variation,
    )


# === Shell Types ===

def crysanthemum_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    colors = ctx.colors
    rng = ctx.rng
    glitter = rng.random() < 0.25
    single_color = rng.random() < 0.72
    if single_color:
        color = colors.random(limit_white=True)
    else:
        color = [colors.random(), colors.random(not_same=True)]
    pistil = single_color and rng.random() < 0.42
    pistil_color = colors.pistil_color(color) if pistil else None
    second_color = None
    if single_color and (rng.random() < 0.42 or color == COLOR["White"]):
        second_color = pistil_color or colors.random(not_color=color, limit_white=True)
    streamers = not pistil and color != COLOR["White"] and rng.random() < 0.42

    star_density = 1.1 if glitter else 1.5
    if ctx.settings.is_low:
        star_density *= 0.8
    if ctx.settings.is_high:
        star_density = 1.5

    return dict(
        size=300 + size * 100,
        star_life=900 + size * 200,
        star_density=star_density,
        color=color,
        second_color=second_color,
        glitter="light" if glitter else "",
        glitter_color=colors.white_or_gold(),
        pistil=pistil,
        pistil_color=pistil_color,
        streamers=streamers,
    )


def palm_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    color = ctx.colors.random()
    thick = ctx.rng.random() < 0.5
    return dict(
        color=color,
        size=250 + size * 75,
        star_density=0.3 if thick else 0.6,
        star_life=1800 + size * 200,
        glitter="thick" if thick else "heavy",
    )


def ring_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    color = ctx.colors.random()
    pistil = ctx.rng.random() < 0.75
    return dict(
        ring=True,
        color=color,
        size=300 + size * 100,
        star_life=900 + size * 200,
        # Scales with the size selector, not the burst size
        star_count=2.2 * PI_2 * (size + 1),
        pistil=pistil,
        pistil_color=ctx.colors.pistil_color(color),
        glitter="" if pistil else "light",
        glitter_color=COLOR["Gold"] if color == COLOR["Gold"] else COLOR["White"],
        streamers=ctx.rng.random() < 0.3,
    )


def crossette_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    color = ctx.colors.random(limit_white=True)
    return dict(
        size=300 + size * 100,
        star_life=900 + size * 200,
        star_life_variation=0.22,
        color=color,
        crossette=True,
        pistil=ctx.rng.random() < 0.5,
        pistil_color=ctx.colors.pistil_color(color),
    )


def floral_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    rng = ctx.rng
    if rng.random() < 0.65:
        color = "random"
    elif rng.random() < 0.15:
        color = ctx.colors.random()
    else:
        color = [ctx.colors.random(), ctx.colors.random(not_same=True)]
    return dict(
        size=300 + size * 120,
        star_density=0.38,
        star_life=500 + size * 50,
        star_life_variation=0.5,
        color=color,
        floral=True,
    )


def falling_leaves_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    return dict(
        color=INVISIBLE,
        size=300 + size * 120,
        star_density=0.38,
        star_life=500 + size * 50,
        star_life_variation=0.5,
        glitter="medium",
        glitter_color=COLOR["Gold"],
        falling_leaves=True,
    )


def willow_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    return dict(
        size=300 + size * 100,
        star_density=0.7,
        star_life=3000 + size * 300,
        glitter="willow",
        glitter_color=COLOR["Gold"],
        color=INVISIBLE,
    )


def crackle_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    # Favor gold
    color = COLOR["Gold"] if ctx.rng.random() < 0.75 else ctx.colors.random()
    return dict(
        size=380 + size * 75,
        star_density=0.65 if ctx.settings.is_low else 1,
        star_life=600 + size * 100,
        star_life_variation=0.32,
        glitter="light",
        glitter_color=COLOR["Gold"],
        color=color,
        crackle=True,
        pistil=ctx.rng.random() < 0.65,
        pistil_color=ctx.colors.pistil_color(color),
    )


def horsetail_shell(ctx: "SimulationContext", size: float = 1) -> Dict[str, Any]:
    color = ctx.colors.random()
    return dict(
        horsetail=True,
        color=color,
        size=250 + size * 38,
        star_density=0.85 + size * 0.1,
        star_life=2500 + size * 300,
        glitter="medium",
        glitter_color=ctx.colors.white_or_gold() if ctx.rng.random() < 0.5 else color,
    )


ShellFactory = Callable[["SimulationContext", float], Dict[str, Any]]

SHELL_TYPES: Dict[str, ShellFactory] = {
    "Crackle": crackle_shell,
    "Crossette": crossette_shell,
    "Crysanthemum": crysanthemum_shell,
    "Falling Leaves": falling_leaves_shell,
    "Floral": floral_shell,
    "Horse Tail": horsetail_shell,
    "Palm": palm_shell,
    "Ring": ring_shell,
    "Willow": willow_shell,
}

# Too processing intensive for rapid sequences
FAST_SHELL_BLACKLIST = ("Falling Leaves", "Floral", "Willow")


def random_shell_name(ctx: "SimulationContext") -> str:
    """Crysanthemum 60% of the time, otherwise any catalogue entry."""
    if ctx.rng.random() < 0.6:
        return "Crysanthemum"
    return SHELL_NAMES[int(ctx.rng.random() * (len(SHELL_NAMES) - 1) + 1)]


def resolve_shell_name(ctx: "SimulationContext", name: str) -> str:
    return random_shell_name(ctx) if name == "Random" else name


def random_fast_shell(ctx: "SimulationContext") -> str:
    """Shell name for rapid sequences.

    Only random when "Random" is configured; the configured shell wins otherwise.
    """
    if ctx.config.shell != "Random":
        return ctx.config.shell
    name = random_shell_name(ctx)
    while name in FAST_SHELL_BLACKLIST:
        name = random_shell_name(ctx)
    return name


def shell_options(ctx: "SimulationContext", name: str, size: float) -> Tuple[str, Dict[str, Any]]:
    """Resolve `name` ("Random" allowed) and build its options."""
    name = resolve_shell_name(ctx, name)
    return name, SHELL_TYPES[name](ctx, size)


def make_shell(sim: "Simulation", name: str, size: float) -> "Shell":
    name, options = shell_options(sim.ctx, name, size)
    return Shell(sim, name=name, **options)


class Shell:
    """One firework: a comet on launch, a star pattern on burst."""

    def __init__(self, sim: "Simulation", size: float, star_life: float, name: str = "Custom",
                 star_life_variation: float = 0, star_density: float = 0, star_count: float = 0,
                 color: Any = None, second_color: Optional[str] = None,
                 glitter: str = "", glitter_color: Optional[str] = None,
                 pistil: bool = False, pistil_color: Optional[str] = None, streamers: bool = False,
                 crossette: bool = False, floral: bool = False, crackle: bool = False,
                 falling_leaves: bool = False, ring: bool = False, horsetail: bool = False,
                 depth: int = 0):
        self.sim = sim
        self.name = name
        self.size = size
        self.star_life = star_life
        self.star_life_variation = star_life_variation or 0.125
        self.color = color or sim.ctx.colors.random()
        self.second_color = second_color
        self.glitter = glitter
        self.glitter_color = glitter_color or self.color
        self.pistil = pistil
        self.pistil_color = pistil_color
        self.streamers = streamers
        self.crossette = crossette
        self.floral = floral
        self.crackle = crackle
        self.falling_leaves = falling_leaves
        self.ring = ring
        self.horsetail = horsetail
        self.depth = depth
        self.comet = None

        # Scale with size like a sphere's surface area
        self.star_count = star_count
        if not self.star_count:
            density = star_density or 1
            scaled_size = self.size / 50 * density
            self.star_count = max(6, scaled_size * scaled_size)

    def launch(self, position: float, launch_height: float) -> None:
        """Fire the comet.

        Args:
            position: Horizontal launch point, 0..1 across the stage
            launch_height: Burst height, 0 (lowest) .. 1 (highest)
        """
        ctx = self.sim.ctx
        settings = ctx.settings
        width = ctx.width
        height = ctx.height
        # Distance from sides of screen to keep shells
        hpad = 60
        # Distance from top of screen to keep shell bursts
        vpad = 50
        # Minimum burst height, as a fraction of stage height
        min_height_percent = 0.45
        min_height = height - height * min_height_percent

        launch_x = position * (width - hpad * 2) + hpad
        launch_y = height
        burst_y = min_height - launch_height * (min_height - vpad)

        launch_distance = launch_y - burst_y
        # Power curve approximating the initial velocity needed to cover
        # launch_distance under gravity and air drag
        launch_velocity = (launch_distance * 0.04) ** 0.64

        if isinstance(self.color, str) and self.color not in ("random", INVISIBLE):
            comet_color = self.color
        else:
            comet_color = COLOR["White"]

        comet = self.sim.particles.add_star(
            launch_x,
            launch_y,
            comet_color,
            math.pi,
            launch_velocity * (1.2 if self.horsetail else 1),
            # Hang time is linear in launch velocity
            launch_velocity * (100 if self.horsetail else 400),
        )
        self.comet = comet

        # Heavy comets barely feel air drag
        comet.heavy = True
        comet.spin_radius = 0.78
        comet.spark_freq = settings.comet_spark_freq
        comet.spark_life = 320
        comet.spark_life_variation = 3
        if self.glitter == "willow" or self.falling_leaves:
            comet.spark_freq = settings.willow_comet_spark_freq
            comet.spark_speed = 0.5
            comet.spark_life = 500
        if self.color == INVISIBLE:
            comet.spark_color = COLOR["Gold"]

        if ctx.rng.random() > 0.5:
            comet.second_color = INVISIBLE
            comet.second_color_time = ctx.rng.random() ** 1.5 * 700 + 500

        comet.on_death = Effect.SHELL_BURST
        comet.shell = self

        logger.debug(f"Launched {self.name} shell at x={launch_x:.0f}, burst_y={burst_y:.0f}")
        self.sim.events.publish(ShellLaunchedEvent(
            name=self.name,
            x=launch_x,
            y=launch_y,
            burst_y=burst_y,
            velocity=launch_velocity,
        ))

    def burst(self, x: float, y: float) -> None:
        """Lay out the star pattern at (x, y)."""
        sim = self.sim
        ctx = sim.ctx
        rng = ctx.rng
        particles = sim.particles

        sim.events.publish(ShellBurstEvent(
            name=self.name,
            x=x,
            y=y,
            size=self.size,
            star_life=self.star_life,
            star_count=self.star_count,
            depth=self.depth,
        ))

        # Burst speed tuned so the burst grows to `size` under air drag
        speed = self.size / 96

        on_death = Effect.NONE
        if self.crossette:
            on_death = Effect.CROSSETTE
        if self.floral:
            on_death = Effect.FLORAL
        if self.crackle:
            on_death = Effect.CRACKLE
        if self.falling_leaves:
            on_death = Effect.FALLING_LEAVES

        glitter = glitter_params(self.glitter, ctx.settings) if self.glitter else None

        speed_off_x = speed_off_y = 0.0
        if self.horsetail and self.comet is not None:
            # Horsetails carry on in the comet's direction of travel
            speed_off_x = self.comet.speed_x
            speed_off_y = self.comet.speed_y

        def apply_glitter(star) -> None:
            star.spark_freq = glitter.freq
            star.spark_speed = glitter.speed
            star.spark_life = glitter.life
            star.spark_life_variation = glitter.life_variation
            star.spark_color = self.glitter_color
            # Desynchronize the first spark
            star.spark_timer = rng.random() * star.spark_freq

        def star_factory(angle: float, color: Optional[str]) -> None:
            star = particles.add_star(
                x,
                y,
                color or ctx.colors.random(),
                angle,
                # Near cubic falloff puts more stars toward the outside
                rng.random() ** 0.45 * speed,
                self.star_life + rng.random() * self.star_life * self.star_life_variation,
                speed_off_x,
                speed_off_y,
            )

            star.second_color = self.second_color
            if self.second_color:
                star.second_color_time = self.star_life * (rng.random() * 0.05 + 0.32)
            star.on_death = on_death

            if glitter:
                apply_glitter(star)

        if isinstance(self.color, str):
            color = None if self.color == "random" else self.color

            if self.ring:
                # Rings are squashed horizontally, then rotated randomly
                ring_start_angle = rng.random() * math.pi
                ring_squash = rng.random() ** 0.45 * 0.992 + 0.008

                def ring_factory(angle: float) -> None:
                    init_speed_x = math.sin(angle) * speed * ring_squash
                    init_speed_y = math.cos(angle) * speed
                    new_speed = math.hypot(init_speed_x, init_speed_y)
                    new_angle = PI_HALF + math.atan2(init_speed_y, init_speed_x) + ring_start_angle
                    star = particles.add_star(
                        x,
                        y,
                        color or ctx.colors.random(),
                        new_angle,
                        new_speed,
                        self.star_life + rng.random() * self.star_life * self.star_life_variation,
                    )
                    if glitter:
                        apply_glitter(star)

                create_particle_arc(rng, 0, PI_2, self.star_count, 0, ring_factory)
            else:
                create_particle_arc(rng, 0, PI_2, self.star_count, 1,
                                    lambda angle: star_factory(angle, color))
        else:
            if rng.random() < 0.5:
                start = rng.random() * math.pi
                start2 = start + math.pi
                arc = math.pi
            else:
                start = 0
                start2 = 0
                arc = PI_2
            first, second = self.color[0], self.color[1]
            create_particle_arc(rng, start, arc, self.star_count / 2, 1,
                                lambda angle: star_factory(angle, first))
            create_particle_arc(rng, start2, arc, self.star_count / 2, 1,
                                lambda angle: star_factory(angle, second))

        if self.pistil:
            inner = Shell(
                sim,
                name=f"{self.name} pistil",
                size=self.size * 0.5,
                star_life=self.star_life * 0.7,
                star_life_variation=self.star_life_variation,
                star_density=1.65,
                color=self.pistil_color,
                glitter="light",
                glitter_color=COLOR["Gold"] if self.pistil_color == COLOR["Gold"] else COLOR["White"],
                depth=self.depth + 1,
            )
            inner.burst(x, y)

        if self.streamers:
            inner = Shell(
                sim,
                name=f"{self.name} streamers",
                size=self.size,
                star_life=self.star_life * 0.8,
                star_life_variation=self.star_life_variation,
                star_count=int(max(6, self.size / 45)),
                color=COLOR["White"],
                glitter="streamer",
                depth=self.depth + 1,
            )
            inner.burst(x, y)

        particles.add_burst_flash(x, y, self.size / 4)
