import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from .coords import GridCoordinate
from .errors import ConfigurationError

# env var -> (field, caster)
ENV_OVERRIDES = {
    "ROOMGRID_WIDTH": ("width", int),
    "ROOMGRID_HEIGHT": ("height", int),
    "ROOMGRID_MAX_ROOMS": ("max_rooms", int),
    "ROOMGRID_MIN_ROOMS": ("min_rooms", int),
    "ROOMGRID_SKIP_CHANCE": ("skip_chance", float),
    "ROOMGRID_TICK_INTERVAL": ("tick_interval", float),
    "ROOMGRID_MIN_ROOMS_RETRIES": ("min_rooms_retries", int),
    "ROOMGRID_MAX_GRID": ("max_grid", int),
    "ROOMGRID_MAX_ROOMS_LIMIT": ("max_rooms_limit", int),
}

# Ceiling for min_rooms_retries; each retry is a full run.
MAX_MIN_ROOMS_RETRIES = 25


@dataclass
class LayoutConfig:
    width: int = 10
    height: int = 10
    seed_x: Optional[int] = None
    seed_y: Optional[int] = None
    max_rooms: int = 15
    min_rooms: int = 7
    skip_chance: float = 0.3
    room_width: int = 20
    room_height: int = 12
    tick_interval: float = 0.1
    rng_seed: Optional[int] = None
    min_rooms_retries: int = 0
    # upper bounds applied by validate(); width/height <= max_grid, rooms <= max_rooms_limit
    max_grid: int = 50
    max_rooms_limit: int = 100

    @property
    def seed_coordinate(self) -> GridCoordinate:
        sx = self.width // 2 if self.seed_x is None else self.seed_x
        sy = self.height // 2 if self.seed_y is None else self.seed_y
        return GridCoordinate(sx, sy)

    def validate(self, enforce_limits: bool = True) -> "LayoutConfig":
        """Raise ConfigurationError on invalid values; returns self.

        With ``enforce_limits`` the service ceilings (``max_grid``,
        ``max_rooms_limit``, MAX_MIN_ROOMS_RETRIES) are applied as well.
        """
        if self.width <= 0:
            raise ConfigurationError(f"grid width must be positive (got {self.width})", "width")
        if self.height <= 0:
            raise ConfigurationError(f"grid height must be positive (got {self.height})", "height")
        sx, sy = self.seed_coordinate
        if not (0 <= sx < self.width and 0 <= sy < self.height):
            raise ConfigurationError(f"seed coordinate {(sx, sy)} outside {self.width}x{self.height} grid", "seed")
        if self.max_rooms < 1:
            raise ConfigurationError("max_rooms must be at least 1", "max_rooms")
        if self.min_rooms < 0:
            raise ConfigurationError("min_rooms must not be negative", "min_rooms")
        if not (0.0 <= self.skip_chance <= 1.0):
            raise ConfigurationError("skip_chance must be within [0, 1]", "skip_chance")
        if self.tick_interval < 0:
            raise ConfigurationError("tick_interval must not be negative", "tick_interval")
        if self.min_rooms_retries < 0:
            raise ConfigurationError("min_rooms_retries must not be negative", "min_rooms_retries")
        if enforce_limits:
            self._check_limits()
        return self

    def _check_limits(self) -> None:
        if self.max_grid < 1:
            raise ConfigurationError("max_grid must be at least 1", "max_grid")
        if self.max_rooms_limit < 1:
            raise ConfigurationError("max_rooms_limit must be at least 1", "max_rooms_limit")
        if self.width > self.max_grid:
            raise ConfigurationError(f"grid width must be at most {self.max_grid} (got {self.width})", "width")
        if self.height > self.max_grid:
            raise ConfigurationError(f"grid height must be at most {self.max_grid} (got {self.height})", "height")
        if self.max_rooms > self.max_rooms_limit:
            raise ConfigurationError(f"max_rooms must be at most {self.max_rooms_limit}", "max_rooms")
        if self.min_rooms > self.max_rooms_limit:
            raise ConfigurationError(f"min_rooms must be at most {self.max_rooms_limit}", "min_rooms")
        if self.min_rooms_retries > MAX_MIN_ROOMS_RETRIES:
            raise ConfigurationError(
                f"min_rooms_retries must be at most {MAX_MIN_ROOMS_RETRIES}", "min_rooms_retries"
            )

    def with_overrides(self, **overrides) -> "LayoutConfig":
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            name = sorted(unknown)[0]
            raise ConfigurationError(f"unknown layout option {name!r}", name)
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls, **overrides) -> "LayoutConfig":
        """Build a config from ROOMGRID_* environment variables; explicit overrides win."""
        values = {}
        for env_key, (attr, caster) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                values[attr] = caster(raw)
            except ValueError:
                raise ConfigurationError(f"{env_key}={raw!r} is not a valid {caster.__name__}", attr)
        return cls(**values).with_overrides(**overrides)


__all__ = ["LayoutConfig", "ENV_OVERRIDES", "MAX_MIN_ROOMS_RETRIES"]
