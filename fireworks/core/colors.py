"""
Fireworks Colors

Particles are stored in buckets keyed by color code, so every color a
particle can have must be listed here. The invisible sentinel gets a
bucket too: invisible stars still obey physics but are never drawn.
"""
import random
from typing import Dict, Optional, Tuple

COLOR = {
    "Red": "#ff0043",
    "Green": "#14fc56",
    "Blue": "#1e7fff",
    "Purple": "#e60aff",
    "Gold": "#ffae00",
    "White": "#ffffff",
}

INVISIBLE = "_INVISIBLE_"

COLOR_NAMES = list(COLOR.keys())
COLOR_CODES = [COLOR[name] for name in COLOR_NAMES]
COLOR_CODES_W_INVIS = COLOR_CODES + [INVISIBLE]


def hex_to_rgb(code: str) -> Tuple[int, int, int]:
    """Convert '#rrggbb' to an (r, g, b) tuple."""
    code = code.lstrip('#')
    return int(code[0:2], 16), int(code[2:4], 16), int(code[4:6], 16)


COLOR_TUPLES: Dict[str, Tuple[int, int, int]] = {code: hex_to_rgb(code) for code in COLOR_CODES}


class ColorPicker:
    """Random color choice with a memory of the last pick."""

    def __init__(self, rng: random.Random):
        self.rng = rng
        self.last_color: Optional[str] = None

    def simple(self) -> str:
        return COLOR_CODES[int(self.rng.random() * len(COLOR_CODES))]

    def random(self, not_same: bool = False, not_color: Optional[str] = None,
               limit_white: bool = False) -> str:
        """Pick a random color.

        Args:
            not_same: Never repeat the previous pick
            not_color: Never return this color (ignored when not_same is set)
            limit_white: Re-roll white 60% of the time
        """
        color = self.simple()

        if limit_white and color == COLOR["White"] and self.rng.random() < 0.6:
            color = self.simple()

        if not_same:
            while color == self.last_color:
                color = self.simple()
        elif not_color:
            while color == not_color:
                color = self.simple()

        self.last_color = color
        return color

    def white_or_gold(self) -> str:
        return COLOR["Gold"] if self.rng.random() < 0.5 else COLOR["White"]

    def pistil_color(self, shell_color) -> str:
        """White and gold shells get a colored pistil, the rest white or gold."""
        if shell_color in (COLOR["White"], COLOR["Gold"]):
            return self.random(not_color=shell_color)
        return self.white_or_gold()
