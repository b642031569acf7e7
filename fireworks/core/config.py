"""
Fireworks Configuration
Contains physics constants, quality tiers, and the runtime config.
"""
import json
import logging
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger("fireworks")

# Quality tiers
QUALITY_LOW = 1
QUALITY_NORMAL = 2
QUALITY_HIGH = 3

# Sky lighting tiers
SKY_LIGHT_NONE = 0
SKY_LIGHT_DIM = 1
SKY_LIGHT_NORMAL = 2

# Physics
GRAVITY = 0.9  # Acceleration in px/s
STAR_AIR_DRAG = 0.98
STAR_AIR_DRAG_HEAVY = 0.992  # Comets
SPARK_AIR_DRAG = 0.9

# Frame timing (milliseconds)
FRAME_DURATION = 1000 / 60
MAX_FRAME_TIME = 68.0
MAX_LAG = MAX_FRAME_TIME / FRAME_DURATION

# Display
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
FPS = 60
DESKTOP_MIN_WIDTH = 800  # Stages wider than this count as desktop

# Shell catalogue, in menu order
SHELL_NAMES = [
    "Random",
    "Crackle",
    "Crossette",
    "Crysanthemum",
    "Falling Leaves",
    "Floral",
    "Horse Tail",
    "Palm",
    "Ring",
    "Willow",
]
SHELL_SIZE_LABELS = ['3"', '5"', '6"', '8"', '12"']
MAX_SHELL_SIZE = len(SHELL_SIZE_LABELS) - 1

CONFIG_SCHEMA_VERSION = "1.1"

# camelCase keys used by saved configs
_KEY_ALIASES = {
    "autoLaunch": "auto_launch",
    "skyLighting": "sky_lighting",
}


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass
class Config:
    """Runtime settings supplied by the configuration provider."""
    quality: int = QUALITY_NORMAL
    shell: str = "Random"
    size: float = 3
    auto_launch: bool = True
    finale: bool = False
    sky_lighting: int = SKY_LIGHT_NORMAL

    def coerced(self) -> "Config":
        """Return a copy with every value moved to the nearest valid option."""
        fixed = replace(self)

        try:
            quality = int(round(float(self.quality)))
        except (TypeError, ValueError):
            quality = QUALITY_NORMAL
        fixed.quality = int(_clamp(quality, QUALITY_LOW, QUALITY_HIGH))

        try:
            sky = int(round(float(self.sky_lighting)))
        except (TypeError, ValueError):
            sky = SKY_LIGHT_NORMAL
        fixed.sky_lighting = int(_clamp(sky, SKY_LIGHT_NONE, SKY_LIGHT_NORMAL))

        try:
            size = float(self.size)
        except (TypeError, ValueError):
            size = 0.0
        fixed.size = _clamp(size, 0, MAX_SHELL_SIZE)

        if self.shell not in SHELL_NAMES:
            fixed.shell = "Random"

        fixed.auto_launch = bool(self.auto_launch)
        fixed.finale = bool(self.finale)

        for name, value in asdict(self).items():
            if getattr(fixed, name) != value:
                logger.warning(f"Config value {name}={value!r} coerced to {getattr(fixed, name)!r}")
        return fixed

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a config from a dict, ignoring unknown keys."""
        known = {f for f in cls.__dataclass_fields__}
        values = {}
        for key, value in data.items():
            key = _KEY_ALIASES.get(key, key)
            if key in known:
                values[key] = value
        return cls(**values).coerced()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QualitySettings:
    """Constants derived from the quality tier."""
    quality: int
    is_low: bool
    is_normal: bool
    is_high: bool
    star_draw_width: float
    spark_draw_width: float
    comet_spark_freq: float
    willow_comet_spark_freq: float
    falling_leaves_spark_freq: float
    floral_count: int
    crackle_count: int


def quality_settings(quality: int) -> QualitySettings:
    """Derive every quality-dependent constant from the quality tier."""
    is_high = quality == QUALITY_HIGH
    return QualitySettings(
        quality=quality,
        is_low=quality == QUALITY_LOW,
        is_normal=quality == QUALITY_NORMAL,
        is_high=is_high,
        star_draw_width=3,
        spark_draw_width=0.5 if is_high else 0.75,
        comet_spark_freq=8 if is_high else 32 / quality,
        willow_comet_spark_freq=20 / quality,
        falling_leaves_spark_freq=144 / quality,
        floral_count=12 + 6 * quality,
        crackle_count=26 if is_high else 12,
    )


def load_config(path: Union[str, Path], base: Optional[Config] = None) -> Config:
    """Load persisted settings on top of `base` (defaults if omitted).

    Only quality, size and sky lighting are persisted. Missing or broken
    files fall back to the base config.
    """
    config = replace(base) if base else Config()
    path = Path(path)
    if not path.exists():
        return config

    try:
        with open(path, "r") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read config {path}: {e}. Falling back to defaults.")
        return config

    schema_version = document.get("schemaVersion") if isinstance(document, dict) else None
    if schema_version != CONFIG_SCHEMA_VERSION:
        logger.error(f"Unknown config schema version {schema_version!r}. Falling back to defaults.")
        return config

    data = document.get("data", {})
    if not isinstance(data, dict):
        logger.error(f"Config data in {path} is not an object. Falling back to defaults.")
        return config
    for key in ("quality", "size", "skyLighting"):
        if key in data:
            setattr(config, _KEY_ALIASES.get(key, key), data[key])
    logger.info(f"Loaded config (schema version {schema_version})")
    return config.coerced()


def save_config(config: Config, path: Union[str, Path]) -> None:
    """Persist the user-facing subset of the config."""
    document = {
        "schemaVersion": CONFIG_SCHEMA_VERSION,
        "data": {
            "quality": config.quality,
            "size": config.size,
            "skyLighting": config.sky_lighting,
        },
    }
    with open(path, "w") as f:
        json.dump(document, f, indent=2)
