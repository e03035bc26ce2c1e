"""
engine/
-------
Playback & recording layer.

    from engine import PlaybackController, Recorder, compare
"""

from engine.controller import (
    PlaybackController,
    ControllerState,
    speed_to_delay,
    clamp_speed,
    SPEED_MIN,
    SPEED_MAX,
    DEFAULT_SPEED,
)
from engine.recorder import Recorder, RunMetrics, ComparisonResult, compare

__all__ = [
    "PlaybackController",
    "ControllerState",
    "speed_to_delay",
    "clamp_speed",
    "SPEED_MIN",
    "SPEED_MAX",
    "DEFAULT_SPEED",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
]
