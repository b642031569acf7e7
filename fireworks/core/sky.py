"""
Fireworks Sky Lighting

Tints the background with the combined color of all live stars.
"""
from typing import Dict, List, Tuple

from .colors import COLOR_CODES, COLOR_TUPLES
from .config import SKY_LIGHT_NONE


class SkyColorAccumulator:
    """Eases the sky color toward the aggregate color of the active stars."""

    # Stars needed in total to reach maximum sky brightness
    MAX_STAR_COUNT = 500
    # Fraction of the remaining distance covered per unit of speed is 1 / COLOR_CHANGE
    COLOR_CHANGE = 10
    SATURATION_PER_TIER = 15

    def __init__(self):
        self.current = [0.0, 0.0, 0.0]
        self.target = [0.0, 0.0, 0.0]

    @classmethod
    def intensity(cls, total_star_count: int) -> float:
        """Non-linear brightness: few stars still light the sky, many add less."""
        return min(1, total_star_count / cls.MAX_STAR_COUNT) ** 0.3

    def update(self, stars: Dict[str, List], sky_lighting: int, speed: float) -> Tuple[int, int, int]:
        """Recompute the target color and ease toward it.

        Args:
            stars: Active star buckets keyed by color code
            sky_lighting: Sky lighting tier (0 disables tinting)
            speed: Integration multiplier for this frame
        """
        if sky_lighting == SKY_LIGHT_NONE:
            self.reset()
            return self.rgb

        # The maximum r, g or b value the sky can reach
        max_sky_saturation = sky_lighting * self.SATURATION_PER_TIER

        total = 0
        r = g = b = 0.0
        # Wildly out of range until scaled back below
        for color in COLOR_CODES:
            count = len(stars[color])
            cr, cg, cb = COLOR_TUPLES[color]
            total += count
            r += cr * count
            g += cg * count
            b += cb * count

        intensity = self.intensity(total)
        # Scale by the largest component so hue ratios survive
        max_component = max(1, r, g, b)
        scale = max_sky_saturation * intensity / max_component
        self.target = [r * scale, g * scale, b * scale]

        for i in range(3):
            self.current[i] += (self.target[i] - self.current[i]) / self.COLOR_CHANGE * speed

        return self.rgb

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return int(self.current[0]), int(self.current[1]), int(self.current[2])

    def reset(self) -> None:
        self.current = [0.0, 0.0, 0.0]
        self.target = [0.0, 0.0, 0.0]
