"""Test sky lighting."""
import pytest

from fireworks.core.colors import COLOR
from fireworks.core.config import SKY_LIGHT_DIM, SKY_LIGHT_NONE, SKY_LIGHT_NORMAL
from fireworks.core.particles import create_particle_collection
from fireworks.core.sky import SkyColorAccumulator


def buckets_with(**counts):
    """Star buckets holding `count` placeholder stars per color name."""
    stars = create_particle_collection()
    for name, count in counts.items():
        stars[COLOR[name]] = [object()] * count
    return stars


class TestIntensity:
    """Tests for the brightness curve."""

    def test_zero_stars(self):
        assert SkyColorAccumulator.intensity(0) == 0

    def test_saturates_at_max_star_count(self):
        assert SkyColorAccumulator.intensity(500) == 1
        assert SkyColorAccumulator.intensity(10000) == 1

    def test_bounded_and_monotonic(self):
        previous = 0
        for total in range(0, 2000, 7):
            value = SkyColorAccumulator.intensity(total)
            assert 0 <= value <= 1
            assert value >= previous
            previous = value

    def test_few_stars_still_light_the_sky(self):
        assert SkyColorAccumulator.intensity(5) > 0.2


class TestSkyColor:
    """Tests for SkyColorAccumulator.update."""

    def test_empty_sky_stays_black(self):
        sky = SkyColorAccumulator()
        assert sky.update(buckets_with(), SKY_LIGHT_NORMAL, 1) == (0, 0, 0)

    def test_eases_a_tenth_per_frame(self):
        sky = SkyColorAccumulator()
        sky.update(buckets_with(Red=500), SKY_LIGHT_NORMAL, 1)
        # Red is (255, 0, 67); the largest component scales to 2 * 15
        assert sky.target == pytest.approx([30, 0, 67 / 255 * 30])
        assert sky.current == pytest.approx([3, 0, 67 / 255 * 3])

    def test_converges_to_target(self):
        sky = SkyColorAccumulator()
        stars = buckets_with(Blue=100, Green=100)
        for _ in range(300):
            sky.update(stars, SKY_LIGHT_DIM, 1)
        assert sky.current == pytest.approx(sky.target, abs=0.01)
        assert max(sky.target) == pytest.approx(15 * SkyColorAccumulator.intensity(200))

    def test_speed_zero_freezes_color(self):
        sky = SkyColorAccumulator()
        sky.update(buckets_with(Gold=50), SKY_LIGHT_NORMAL, 0)
        assert sky.rgb == (0, 0, 0)

    def test_invisible_stars_ignored(self):
        sky = SkyColorAccumulator()
        stars = buckets_with()
        stars["_INVISIBLE_"] = [object()] * 400
        sky.update(stars, SKY_LIGHT_NORMAL, 1)
        assert sky.target == [0, 0, 0]

    def test_lighting_off_resets(self):
        sky = SkyColorAccumulator()
        for _ in range(20):
            sky.update(buckets_with(Red=500), SKY_LIGHT_NORMAL, 1)
        assert sky.rgb != (0, 0, 0)
        assert sky.update(buckets_with(Red=500), SKY_LIGHT_NONE, 1) == (0, 0, 0)
