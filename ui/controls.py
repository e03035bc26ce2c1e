"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls       – generate / run / pause-resume / stop
  • algorithm_selector      – dropdown of registered algorithms
  • compare_selector        – the two algorithms for comparison mode
  • parameter_sliders       – size and speed ranges
  • stats_panel             – live comparisons / swaps / writes
  • analytics_panel         – recorded metrics of one run
  • comparison_panel        – side-by-side metrics of two runs
  • pseudocode_viewer       – with live line highlighting

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from typing import Dict, List, Optional

from algorithms import AlgoInfo
from algorithms.step import RunCounters
from engine import ComparisonResult, ControllerState, RunMetrics


# ---------------------------------------------------------------------------
# Button enablement
# ---------------------------------------------------------------------------
def control_flags(state: ControllerState) -> Dict[str, object]:
    """Which controls are usable in `state`, and the pause button label."""
    busy = state is not ControllerState.IDLE
    return {
        "generate_disabled": busy,
        "size_disabled":     busy,
        "algo_disabled":     busy,
        "run_disabled":      busy,
        "pause_disabled":    not busy,
        "pause_label":       "Resume" if state is ControllerState.PAUSED else "Pause",
        "stop_disabled":     not busy,
    }


def _disabled(flag: object) -> str:
    return "disabled" if flag else ""


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(state: ControllerState = ControllerState.IDLE) -> str:
    flags = control_flags(state)
    run_label = "Running…" if state is not ControllerState.IDLE else "Run"

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-generate" {_disabled(flags['generate_disabled'])}>New Data</button>
        <button id="btn-run" class="btn-primary" {_disabled(flags['run_disabled'])}>{run_label}</button>
        <button id="btn-pause" {_disabled(flags['pause_disabled'])}>{flags['pause_label']}</button>
        <button id="btn-stop" {_disabled(flags['stop_disabled'])}>Stop</button>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(
    algorithms: List[AlgoInfo],
    selected_key: str = "bubble",
    disabled: bool = False,
) -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        options.append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector" {_disabled(disabled)}>
        {''.join(options)}
      </select>
    </div>
    """


def _options(algorithms: List[AlgoInfo], selected_key: str) -> str:
    return ''.join(
        f'<option value="{algo.key}" {"selected" if algo.key == selected_key else ""}>{algo.label}</option>'
        for algo in algorithms
    )


def compare_selector(
    algorithms: List[AlgoInfo],
    left_key: str = "bubble",
    right_key: str = "merge",
) -> str:
    return f"""
    <div class="panel compare-selector">
      <h3>⚖️ Compare</h3>
      <select id="compare-left">{_options(algorithms, left_key)}</select>
      <select id="compare-right">{_options(algorithms, right_key)}</select>
      <button id="btn-compare">Compare on current data</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Size / Speed sliders
# ---------------------------------------------------------------------------
def parameter_sliders(
    size: int,
    size_range: tuple,
    speed: float,
    speed_range: tuple,
    size_disabled: bool = False,
) -> str:
    return f"""
    <div class="panel parameter-sliders">
      <h3>🎚 Parameters</h3>
      <label>Size: <input type="range" id="size" min="{size_range[0]}" max="{size_range[1]}"
             value="{size}" {_disabled(size_disabled)}> <span id="size-val">{size}</span></label>
      <label>Speed: <input type="range" id="speed" min="{speed_range[0]}" max="{speed_range[1]}"
             value="{int(speed)}"> <span id="speed-val">{int(speed)}</span></label>
    </div>
    """


# ---------------------------------------------------------------------------
# Live counters
# ---------------------------------------------------------------------------
def stats_panel(counters: Optional[RunCounters] = None) -> str:
    c = counters or RunCounters()
    return f"""
    <div class="panel stats-panel">
      <h3>🔢 Counters</h3>
      <table>
        <tr><td>Comparisons:</td><td><strong id="comparisons">{c.comparisons}</strong></td></tr>
        <tr><td>Swaps:</td><td><strong id="swaps">{c.swaps}</strong></td></tr>
        <tr><td>Writes:</td><td><strong id="writes">{c.writes}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Compare two algorithms to see recorded metrics.</p>
        </div>
        """

    status = "✅ Sorted" if metrics.sorted_ok else "❌ Not sorted"

    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics — {metrics.algo_label}</h3>
      <table>
        <tr><td>Elements:</td><td><strong>{metrics.size}</strong></td></tr>
        <tr><td>Comparisons:</td><td><strong>{metrics.comparisons}</strong></td></tr>
        <tr><td>Swaps:</td><td><strong>{metrics.swaps}</strong></td></tr>
        <tr><td>Writes:</td><td><strong>{metrics.writes}</strong></td></tr>
        <tr><td>Total Steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Wall Time:</td><td><strong>{metrics.wall_time_ms:.2f} ms</strong></td></tr>
        <tr><td>Memory:</td><td><strong>{metrics.memory_bytes // 1024} KB</strong></td></tr>
        <tr><td>Result:</td><td><strong>{status}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_panel(comp: Optional[ComparisonResult] = None) -> str:
    if not comp:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Comparison Mode</h3>
          <p class="placeholder">Run two algorithms on the same data to compare.</p>
        </div>
        """

    left = comp.left
    right = comp.right

    def winner_badge(winner_label):
        if winner_label == "tie":
            return "🟰 Tie"
        return f"👑 {winner_label}"

    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ Comparison: {left.algo_label} vs {right.algo_label}</h3>
      <table class="comparison-table">
        <thead>
          <tr>
            <th>Metric</th>
            <th>{left.algo_label}</th>
            <th>{right.algo_label}</th>
            <th>Winner</th>
          </tr>
        </thead>
        <tbody>
          <tr>
            <td>Comparisons</td>
            <td>{left.comparisons}</td>
            <td>{right.comparisons}</td>
            <td>{winner_badge(comp.winner_comparisons)}</td>
          </tr>
          <tr>
            <td>Swaps + Writes</td>
            <td>{left.moves}</td>
            <td>{right.moves}</td>
            <td>{winner_badge(comp.winner_moves)}</td>
          </tr>
          <tr>
            <td>Steps</td>
            <td>{left.total_steps}</td>
            <td>{right.total_steps}</td>
            <td>{winner_badge(comp.winner_steps)}</td>
          </tr>
          <tr>
            <td>Wall Time</td>
            <td>{left.wall_time_ms:.2f} ms</td>
            <td>{right.wall_time_ms:.2f} ms</td>
            <td>—</td>
          </tr>
        </tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(
    pseudocode_lines: List[str],
    current_line: int = -1,
    algo_label: str = "",
) -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div style="color: #7d8590; padding: 20px; text-align: center;">
            Select an algorithm to view pseudocode
          </div>
        </div>
        """

    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = 'highlight' if i == current_line else ''
        line_escaped = line.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{line_escaped}</div>')

    return f"""
    <div class="code-block" data-algo="{algo_label}">
      {''.join(lines_html)}
    </div>
    """
