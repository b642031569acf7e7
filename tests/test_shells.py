"""Test shell construction, launch and burst."""
import math

import pytest

from fireworks.core.colors import COLOR, INVISIBLE
from fireworks.core.config import quality_settings
from fireworks.core.effects import Effect
from fireworks.core.events import ShellBurstEvent, ShellLaunchedEvent
from fireworks.core.shells import (
    FAST_SHELL_BLACKLIST, SHELL_TYPES, Shell, glitter_params, make_shell,
    random_fast_shell, resolve_shell_name, ring_shell, shell_options,
)

RED = COLOR["Red"]
BLUE = COLOR["Blue"]
WHITE = COLOR["White"]
FRAME = 1000 / 60


def bursts_of(sim):
    events = []
    sim.events.subscribe(ShellBurstEvent, events.append)
    return events


class TestStarCount:
    """Tests for the star count derived from size and density."""

    def test_default_density(self, sim):
        assert Shell(sim, size=300, star_life=1000, color=RED).star_count == 36

    def test_minimum_of_six(self, sim):
        assert Shell(sim, size=100, star_life=1000, color=RED).star_count == 6

    def test_density_scales(self, sim):
        shell = Shell(sim, size=300, star_life=1000, star_density=2, color=RED)
        assert shell.star_count == pytest.approx(144)

    def test_explicit_count_wins(self, sim):
        assert Shell(sim, size=300, star_life=1000, star_count=10, color=RED).star_count == 10

    def test_ring_uses_size_selector(self, sim):
        options = ring_shell(sim.ctx, 1)
        assert options["star_count"] == pytest.approx(2.2 * 2 * math.pi * 2)
        assert options["star_count"] == pytest.approx(27.646, abs=1e-3)
        assert options["size"] == 400

    def test_ring_burst_star_count(self, sim):
        _, options = shell_options(sim.ctx, "Ring", 1)
        options.update(pistil=False, streamers=False, color=RED)
        Shell(sim, **options).burst(400, 300)
        assert len(sim.particles.stars[RED]) == 28


class TestShellDefaults:
    """Tests for option fallbacks."""

    def test_random_color_when_missing(self, sim):
        shell = Shell(sim, size=300, star_life=1000)
        assert shell.color in COLOR.values()

    def test_glitter_color_follows_color(self, sim):
        shell = Shell(sim, size=300, star_life=1000, color=BLUE)
        assert shell.glitter_color == BLUE

    def test_default_life_variation(self, sim):
        assert Shell(sim, size=300, star_life=1000, color=RED).star_life_variation == 0.125


class TestLaunch:
    """Tests for Shell.launch."""

    def test_comet_rises_from_bottom(self, sim):
        launches = []
        sim.events.subscribe(ShellLaunchedEvent, launches.append)
        shell = Shell(sim, size=300, star_life=1000, color=RED)
        shell.launch(0.5, 0.5)

        assert len(launches) == 1
        assert launches[0].x == pytest.approx(640)
        assert launches[0].y == 720
        comet = shell.comet
        assert comet.heavy
        assert comet.on_death == Effect.SHELL_BURST
        assert comet.shell is shell
        assert comet.speed_y < 0
        assert comet.color == RED

    def test_higher_bursts_launch_faster(self, sim):
        low = Shell(sim, size=300, star_life=1000, color=RED)
        high = Shell(sim, size=300, star_life=1000, color=RED)
        low.launch(0.5, 0)
        high.launch(0.5, 1)
        assert high.comet.speed_y < low.comet.speed_y

    def test_invisible_shell_comet(self, sim):
        shell = Shell(sim, size=300, star_life=3000, color=INVISIBLE, glitter="willow",
                      glitter_color=COLOR["Gold"])
        shell.launch(0.5, 0.5)
        assert shell.comet.color == WHITE
        assert shell.comet.spark_color == COLOR["Gold"]
        assert shell.comet.spark_freq == pytest.approx(sim.ctx.settings.willow_comet_spark_freq)

    def test_multi_color_comet_is_white(self, sim):
        shell = Shell(sim, size=300, star_life=1000, color=[RED, BLUE])
        shell.launch(0.5, 0.5)
        assert shell.comet.color == WHITE

    def test_horsetail_comet_is_faster_and_shorter_lived(self, sim):
        plain = Shell(sim, size=300, star_life=1000, color=RED)
        horsetail = Shell(sim, size=300, star_life=1000, color=RED, horsetail=True)
        plain.launch(0.5, 0.5)
        horsetail.launch(0.5, 0.5)
        assert horsetail.comet.speed_y == pytest.approx(plain.comet.speed_y * 1.2)
        assert horsetail.comet.full_life == pytest.approx(plain.comet.full_life / 4)


class TestBurst:
    """Tests for Shell.burst."""

    def test_launch_to_burst_single_color(self, sim):
        """A size-1 single-color shell bursts into its full star count."""
        bursts = bursts_of(sim)
        shell = Shell(sim, name="Crysanthemum", size=400, star_life=1100, star_density=1.5, color=RED)
        shell.launch(0.5, 0.5)

        for _ in range(1000):
            sim.update(FRAME)
            if bursts:
                break

        assert len(bursts) == 1
        stars = sim.particles.stars[RED]
        assert len(stars) == shell.star_count == 144
        for star in stars:
            assert 1100 <= star.life <= 1100 * 1.125
            assert star.spark_freq == 0
            assert star.on_death == Effect.NONE

    def test_glitter_sets_spark_params(self, sim):
        Shell(sim, size=300, star_life=1000, color=RED, glitter="heavy",
              glitter_color=COLOR["Gold"]).burst(100, 100)
        expected = glitter_params("heavy", sim.ctx.settings)
        for star in sim.particles.stars[RED]:
            assert star.spark_freq == expected.freq
            assert star.spark_color == COLOR["Gold"]
            assert 0 <= star.spark_timer <= expected.freq

    def test_pistil_nests_one_burst(self, sim):
        bursts = bursts_of(sim)
        Shell(sim, size=400, star_life=1000, color=RED, pistil=True, pistil_color=WHITE).burst(500, 300)

        assert [b.depth for b in bursts] == [0, 1]
        inner = bursts[1]
        assert (inner.x, inner.y) == (500, 300)
        assert inner.size == pytest.approx(200)
        assert inner.star_life == pytest.approx(700)
        assert len(sim.particles.stars[WHITE]) > 0

    def test_streamers_nest_one_sparse_burst(self, sim):
        bursts = bursts_of(sim)
        Shell(sim, size=450, star_life=1000, color=RED, streamers=True).burst(500, 300)

        assert [b.depth for b in bursts] == [0, 1]
        assert bursts[1].star_count == 10
        assert bursts[1].star_life == pytest.approx(800)
        assert len(sim.particles.stars[WHITE]) == 10

    def test_two_color_burst_splits_stars(self, sim):
        Shell(sim, size=300, star_life=1000, color=[RED, BLUE]).burst(100, 100)
        assert len(sim.particles.stars[RED]) == 18
        assert len(sim.particles.stars[BLUE]) == 18

    def test_second_color_time(self, sim):
        Shell(sim, size=300, star_life=1000, color=RED, second_color=BLUE).burst(100, 100)
        for star in sim.particles.stars[RED]:
            assert star.second_color == BLUE
            assert 320 <= star.second_color_time <= 370

    def test_horsetail_stars_inherit_comet_velocity(self, sim):
        shell = Shell(sim, size=300, star_life=1000, color=RED, horsetail=True)
        shell.launch(0.5, 0.5)
        shell.comet.speed_x = 3.0
        shell.comet.speed_y = -2.0
        shell.burst(100, 100)

        burst_speed = 300 / 96
        stars = [s for s in sim.particles.stars[RED] if s is not shell.comet]
        assert len(stars) == 36
        for star in stars:
            assert math.hypot(star.speed_x - 3.0, star.speed_y + 2.0) <= burst_speed + 1e-9

    def test_plain_burst_ignores_comet_velocity(self, sim):
        shell = Shell(sim, size=300, star_life=1000, color=RED)
        shell.launch(0.5, 0.5)
        shell.comet.speed_x = 3.0
        shell.burst(100, 100)
        stars = [s for s in sim.particles.stars[RED] if s is not shell.comet]
        assert all(math.hypot(s.speed_x, s.speed_y) <= 300 / 96 + 1e-9 for s in stars)

    def test_effect_flags_tag_stars(self, sim):
        Shell(sim, size=300, star_life=1000, color=RED, crossette=True).burst(100, 100)
        assert all(s.on_death == Effect.CROSSETTE for s in sim.particles.stars[RED])

    def test_burst_flash_scales_with_size(self, sim):
        Shell(sim, size=400, star_life=1000, color=RED).burst(100, 100)
        assert [f.radius for f in sim.particles.burst_flashes] == [100]

    def test_nesting_never_exceeds_one_level(self, sim):
        bursts = bursts_of(sim)
        for name in SHELL_TYPES:
            for _ in range(15):
                make_shell(sim, name, 4).burst(300, 300)
                sim.particles.clear()
        assert bursts
        assert max(b.depth for b in bursts) <= 1


class TestShellSelection:
    """Tests for shell name resolution."""

    def test_unknown_name_raises(self, sim):
        with pytest.raises(KeyError):
            shell_options(sim.ctx, "Bogus", 1)

    def test_random_resolves_to_catalogue(self, sim):
        for _ in range(100):
            assert resolve_shell_name(sim.ctx, "Random") in SHELL_TYPES

    def test_fast_shell_skips_blacklist(self, sim):
        for _ in range(200):
            assert random_fast_shell(sim.ctx) not in FAST_SHELL_BLACKLIST

    def test_fast_shell_honors_configured_shell(self, sim):
        sim.set_config(shell="Willow")
        assert random_fast_shell(sim.ctx) == "Willow"

    def test_every_factory_builds_a_shell(self, sim):
        for name in SHELL_TYPES:
            shell = make_shell(sim, name, 2)
            assert shell.name == name
            assert shell.size > 0
            assert shell.star_count >= 6


class TestGlitter:
    """Tests for glitter profiles."""

    def test_frequency_scales_with_quality(self):
        assert glitter_params("light", quality_settings(1)).freq == 400
        assert glitter_params("light", quality_settings(2)).freq == 200

    def test_thick_is_faster_at_high_quality(self):
        assert glitter_params("thick", quality_settings(2)).speed == 1.42
        assert glitter_params("thick", quality_settings(3)).speed == 1.65

    def test_unknown_style(self):
        assert glitter_params("sparkly", quality_settings(2)) is None
