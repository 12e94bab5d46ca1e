"""Public layout package interface."""

from .config import LayoutConfig
from .coords import EXPANSION_ORDER, Direction, GridCoordinate
from .doors import link_doors
from .driver import TickDriver
from .errors import ConfigurationError, ConsistencyViolation, LayoutError
from .generator import GenerationScheduler, GenerationState, Phase
from .grid import OccupancyGrid
from .listeners import CompositeListener, LayoutListener, room_position
from .pipeline import RegenerationController
from .placement import PlacementPolicy
from .render import layout_snapshot, render_ascii
from .rooms import RoomRecord, RoomRegistry

__all__ = [
    "LayoutConfig",
    "Direction",
    "GridCoordinate",
    "EXPANSION_ORDER",
    "link_doors",
    "TickDriver",
    "ConfigurationError",
    "ConsistencyViolation",
    "LayoutError",
    "GenerationScheduler",
    "GenerationState",
    "Phase",
    "OccupancyGrid",
    "LayoutListener",
    "CompositeListener",
    "room_position",
    "RegenerationController",
    "PlacementPolicy",
    "layout_snapshot",
    "render_ascii",
    "RoomRecord",
    "RoomRegistry",
]
