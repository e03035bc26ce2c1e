"""
canvas.py — SVG Bar Renderer
==============================
Pure rendering function: array snapshot + highlight set → SVG string,
plus SvgRenderer, the stateful wrapper the PlaybackController draws into.

The renderer consumes:
  • elements     – the array snapshot (bar heights)
  • highlighted  – indices under comparison / write
  • config       – visual config (canvas size, margins, colors)

Design decisions:
  - render_bars() is stateless: same input, same SVG.
  - Bars sit on a band scale (10% inner padding) and a linear height
    scale from 0 to max(elements), so the tallest bar fills the plot.
  - SvgRenderer keeps the last frame so a resize can repaint it without
    asking the controller for anything.
"""

from typing import Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Visual Config — color palette, dimensions, margins
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 900
    height: int = 420
    bg:     str = "#0d1117"

    # plot margins
    margin_top:    int = 20
    margin_right:  int = 20
    margin_bottom: int = 30
    margin_left:   int = 20

    # bars
    bar_color:        str   = "#38bdf8"   # sky blue
    bar_highlight:    str   = "#f59e0b"   # amber — compared / written
    bar_padding:      float = 0.1         # fraction of each band left empty
    label_color:      str   = "#7d8590"
    label_size:       int   = 11
    max_labelled:     int   = 40          # above this many bars, skip value labels

    def __init__(self, width: Optional[int] = None, height: Optional[int] = None):
        if width is not None:
            self.width = width
        if height is not None:
            self.height = height

    @property
    def plot_width(self) -> float:
        return max(0, self.width - self.margin_left - self.margin_right)

    @property
    def plot_height(self) -> float:
        return max(0, self.height - self.margin_top - self.margin_bottom)


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_bars(
    elements: Sequence[float],
    highlighted: Sequence[int] = (),
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string with one <rect> per element.

    Args:
        elements    : Values to draw, left to right.
        highlighted : Indices drawn in the highlight color.
        config      : Visual config.
    """
    w, h = config.plot_width, config.plot_height
    n    = len(elements)
    hl   = set(highlighted)

    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
        f'<g transform="translate({config.margin_left},{config.margin_top})">',
    ]

    if n:
        step      = w / max(1.0, n - config.bar_padding)
        bandwidth = step * (1 - config.bar_padding)
        top       = max(elements) or 1

        for i, value in enumerate(elements):
            svg_parts.append(_render_bar(i, value, i in hl, step, bandwidth, top, h, config))
            if n <= config.max_labelled:
                svg_parts.append(_render_label(i, value, step, bandwidth, h, config))

    svg_parts.append("</g>")
    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


def _render_bar(
    i: int,
    value: float,
    is_highlighted: bool,
    step: float,
    bandwidth: float,
    top: float,
    h: float,
    config: CanvasConfig,
) -> str:
    bar_h = max(0.0, h * value / top)
    fill  = config.bar_highlight if is_highlighted else config.bar_color
    return (
        f'  <rect class="bar" data-index="{i}" x="{step * i:.2f}" y="{h - bar_h:.2f}" '
        f'width="{bandwidth:.2f}" height="{bar_h:.2f}" fill="{fill}"/>'
    )


def _render_label(i: int, value: float, step: float, bandwidth: float, h: float, config: CanvasConfig) -> str:
    return (
        f'  <text x="{step * i + bandwidth / 2:.2f}" y="{h + 16}" text-anchor="middle" '
        f'font-size="{config.label_size}" font-family="\'JetBrains Mono\', monospace" '
        f'fill="{config.label_color}">{value}</text>'
    )


# ---------------------------------------------------------------------------
# Stateful renderer — the controller's draw target
# ---------------------------------------------------------------------------
class SvgRenderer:
    """
    Attributes:
        svg         : Latest rendered SVG string.
        elements    : Snapshot of the latest frame.
        highlighted : Highlight set of the latest frame.
        frames      : Number of draw() calls so far.
    """

    def __init__(self, config: Optional[CanvasConfig] = None):
        self.config = config or CanvasConfig()
        self.elements:    Tuple[float, ...] = ()
        self.highlighted: Tuple[int, ...]   = ()
        self.frames = 0
        self.svg    = render_bars((), (), self.config)

    def draw(self, snapshot: Sequence[float], highlighted: Sequence[int] = ()) -> None:
        self.elements    = tuple(snapshot)
        self.highlighted = tuple(highlighted)
        self.svg         = render_bars(self.elements, self.highlighted, self.config)
        self.frames     += 1

    def resize(self, width: int, height: int) -> None:
        """Change the viewport.  The caller asks the controller to redraw afterwards."""
        self.config.width  = max(1, int(width))
        self.config.height = max(1, int(height))
