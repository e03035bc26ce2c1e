"""
ui/
---
Presentation layer.

    from ui import SvgRenderer, render_bars
    from ui import playback_controls, algorithm_selector, compare_selector, …
"""

from ui.canvas import render_bars, CanvasConfig, SvgRenderer

from ui.controls import (
    control_flags,
    playback_controls,
    algorithm_selector,
    compare_selector,
    parameter_sliders,
    stats_panel,
    analytics_panel,
    comparison_panel,
    pseudocode_viewer,
)

__all__ = [
    "render_bars",
    "CanvasConfig",
    "SvgRenderer",
    "control_flags",
    "playback_controls",
    "algorithm_selector",
    "compare_selector",
    "parameter_sliders",
    "stats_panel",
    "analytics_panel",
    "comparison_panel",
    "pseudocode_viewer",
]
