"""
main.py — Sorting Visualizer Flask App
========================================
The web server that powers the visualizer.

Routes:
  GET  /                       – main UI
  GET  /api/state              – current app state (polled by the page)
  POST /api/run                – start the selected algorithm
  POST /api/pause              – toggle pause / resume
  POST /api/stop               – abandon the current run
  POST /api/generate           – new random data of the given size
  POST /api/config/speed       – change playback speed
  POST /api/config/algo        – change the selected algorithm
  POST /api/resize             – canvas size changed; redraw last frame
  POST /api/compare            – record two algorithms on the current data

State management:
  One PlaybackController per server process, living on a dedicated
  asyncio event loop thread.  Request handlers never touch it directly:
  every call is marshalled onto the loop with run_coroutine_threadsafe,
  so the controller only ever runs on that one thread.  The page polls
  /api/state for the latest SVG frame and counters.
"""

from flask import Flask, render_template_string, request, jsonify
import argparse
import asyncio
import logging
import threading
from typing import Any, Callable, Dict

from algorithms import UnknownAlgorithmError, get_algorithm, list_algorithms
from algorithms.step import RunCounters
from arrays import DataSource
from config import Settings
from engine import ControllerState, PlaybackController, Recorder, compare
from ui import (
    SvgRenderer,
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

logger = logging.getLogger(__name__)

CALL_TIMEOUT = 5.0   # seconds a request waits for the loop thread


# ---------------------------------------------------------------------------
# Event-loop thread
# ---------------------------------------------------------------------------
class LoopThread:
    """Runs one asyncio loop forever in a daemon thread."""

    def __init__(self):
        self.loop    = asyncio.new_event_loop()
        self._thread = None
        self._lock   = threading.Lock()

    def ensure_started(self) -> None:
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._run, name="playback-loop", daemon=True,
                )
                self._thread.start()

    def call(self, fn: Callable, *args, **kwargs) -> Any:
        """Run fn(*args, **kwargs) on the loop thread and return its result."""
        self.ensure_started()

        async def _invoke():
            return fn(*args, **kwargs)

        future = asyncio.run_coroutine_threadsafe(_invoke(), self.loop)
        return future.result(timeout=CALL_TIMEOUT)

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()


# ---------------------------------------------------------------------------
# App state
# ---------------------------------------------------------------------------
settings   = Settings.from_env()
app        = Flask(__name__)
loop       = LoopThread()
renderer   = SvgRenderer()
controller = PlaybackController(
    renderer=renderer,
    data_source=DataSource(seed=settings.seed),
    speed=settings.default_speed,
    poll_interval=settings.poll_interval,
)
selection: Dict[str, Any] = {
    "algo": settings.default_algo,
    "size": settings.default_size,
}

# the loop thread isn't running yet, so touching the controller here is safe
controller.regenerate(settings.default_size)


def get_state() -> Dict[str, Any]:
    """Return current app state as a dict.  Runs on the loop thread."""
    step = controller.last_step
    return {
        "state":           controller.state.value,
        "svg":             renderer.svg,
        "counters":        controller.counters.as_dict(),
        "speed":           controller.speed,
        "size":            len(controller.data),
        "algo":            selection["algo"],
        "running_algo":    controller.algo_key,
        "pseudocode_line": step.pseudocode_line if step else -1,
        "controls":        control_flags(controller.state),
    }


def state_response(**extra) -> Any:
    payload = loop.call(get_state)
    payload.update(extra)
    return jsonify(payload)


def _json() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bad_algo_key(value: Any):
    """400 response for a non-string algorithm key, else None."""
    if isinstance(value, str):
        return None
    logger.warning("rejected algorithm key of type %s", type(value).__name__)
    return jsonify({"error": "algorithm key must be a string"}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    state = loop.call(get_state)
    algo_info = get_algorithm(selection["algo"])
    flags = state["controls"]

    html = render_template_string(INDEX_TEMPLATE,
        svg=state["svg"],
        playback=playback_controls(ControllerState(state["state"])),
        algo_selector=algorithm_selector(
            algorithms=list_algorithms(),
            selected_key=selection["algo"],
            disabled=flags["algo_disabled"],
        ),
        compare=compare_selector(list_algorithms()),
        sliders=parameter_sliders(
            size=state["size"],
            size_range=settings.size_range,
            speed=state["speed"],
            speed_range=settings.speed_range,
            size_disabled=flags["size_disabled"],
        ),
        stats=stats_panel(RunCounters(**state["counters"])),
        pseudocode=pseudocode_viewer(
            pseudocode_lines=algo_info.pseudocode if algo_info else [],
            current_line=state["pseudocode_line"],
            algo_label=algo_info.label if algo_info else "",
        ),
        analytics=analytics_panel(),
        comparison=comparison_panel(),
    )
    return html


@app.route("/api/state")
def api_state():
    return state_response()


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    algo_key = _json().get("algo", selection["algo"])
    bad = _bad_algo_key(algo_key)
    if bad:
        return bad
    try:
        started = loop.call(controller.start, None, algo_key)
    except UnknownAlgorithmError as e:
        logger.warning("rejected run request: %s", e)
        return jsonify({"error": str(e)}), 400
    if started:
        selection["algo"] = algo_key
    return state_response(started=started)


@app.route("/api/pause", methods=["POST"])
def api_pause():
    changed = loop.call(controller.toggle_pause)
    return state_response(changed=changed)


@app.route("/api/stop", methods=["POST"])
def api_stop():
    stopped = loop.call(controller.stop)
    return state_response(stopped=stopped)


@app.route("/api/generate", methods=["POST"])
def api_generate():
    try:
        size = settings.clamp_size(_json().get("size", selection["size"]))
    except (TypeError, ValueError, OverflowError):
        return jsonify({"error": "size must be a number"}), 400

    generated = loop.call(controller.regenerate, size)
    if generated:
        selection["size"] = size
    return state_response(generated=generated)


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    try:
        speed = float(_json().get("speed", settings.default_speed))
    except (TypeError, ValueError):
        return jsonify({"error": "speed must be a number"}), 400
    loop.call(controller.set_speed, speed)
    return state_response()


@app.route("/api/config/algo", methods=["POST"])
def api_config_algo():
    algo_key = _json().get("algo_key", settings.default_algo)
    bad = _bad_algo_key(algo_key)
    if bad:
        return bad
    algo_info = get_algorithm(algo_key)
    if algo_info is None:
        return jsonify({"error": f"Unknown algorithm: {algo_key}"}), 400

    selection["algo"] = algo_key
    pseudocode_html = pseudocode_viewer(
        pseudocode_lines=algo_info.pseudocode,
        current_line=-1,
        algo_label=algo_info.label,
    )
    return jsonify({"algo": algo_key, "pseudocode": pseudocode_html})


@app.route("/api/resize", methods=["POST"])
def api_resize():
    data = _json()
    try:
        width  = int(data.get("width", renderer.config.width))
        height = int(data.get("height", renderer.config.height))
    except (TypeError, ValueError, OverflowError):
        return jsonify({"error": "width and height must be numbers"}), 400

    def _resize():
        renderer.resize(width, height)
        controller.redraw()

    loop.call(_resize)
    return state_response()


# ---------------------------------------------------------------------------
# API: Comparison Mode
# ---------------------------------------------------------------------------
@app.route("/api/compare", methods=["POST"])
def api_compare():
    data  = _json()
    left  = data.get("left", "bubble")
    right = data.get("right", "merge")
    bad = _bad_algo_key(left) or _bad_algo_key(right)
    if bad:
        return bad
    values = loop.call(lambda: list(controller.data))

    recorders = []
    try:
        for key in (left, right):
            rec = Recorder()
            rec.start(key, values)
            rec.run_to_completion()
            recorders.append(rec)
    except UnknownAlgorithmError as e:
        return jsonify({"error": str(e)}), 400

    result = compare(recorders[0], recorders[1])
    return jsonify({
        "comparison": comparison_panel(result),
        "analytics":  analytics_panel(result.left) + analytics_panel(result.right),
        "winners": {
            "comparisons": result.winner_comparisons,
            "moves":       result.winner_moves,
            "steps":       result.winner_steps,
        },
    })


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sorting Algorithm Visualizer</title>
  <link href="https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;700&family=DM+Sans:wght@400;500;700&display=swap" rel="stylesheet">
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
      --glow-cyan: rgba(14, 165, 233, 0.4);
    }

    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 340px;
      background: linear-gradient(180deg, var(--bg-dark) 0%, var(--bg-darker) 100%);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    #main { flex: 1; display: flex; flex-direction: column; }

    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }

    #bottom-panel {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
      max-height: 360px;
      overflow: auto;
    }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
    }
    .panel h3 {
      font-size: 13px;
      font-weight: 700;
      margin-bottom: 14px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
    }

    .button-row { display: flex; gap: 8px; flex-wrap: wrap; }
    button {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      color: #fff;
      border: none;
      padding: 10px 16px;
      border-radius: 8px;
      cursor: pointer;
      font-size: 13px;
      font-weight: 600;
    }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    .btn-primary { background: linear-gradient(135deg, var(--accent-emerald), #059669); }

    select, input[type="range"] {
      width: 100%;
      margin: 6px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
      padding: 8px;
    }
    label {
      display: block;
      margin: 10px 0 4px;
      font-size: 12px;
      color: var(--text-secondary);
      text-transform: uppercase;
    }

    table { width: 100%; font-size: 13px; }
    table td:last-child, table td + td {
      text-align: right;
      color: var(--accent-cyan);
      font-family: 'JetBrains Mono', monospace;
    }

    .code-block {
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      padding: 16px;
      font-family: 'JetBrains Mono', monospace;
      font-size: 13px;
      line-height: 1.6;
      white-space: pre;
    }
    .code-line.highlight {
      background: linear-gradient(90deg, rgba(6, 182, 212, 0.15) 0%, transparent 100%);
      border-left: 3px solid var(--accent-cyan);
    }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="algo-selector-wrap">{{ algo_selector|safe }}</div>
    <div id="sliders">{{ sliders|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="stats">{{ stats|safe }}</div>
    <div id="compare-wrap">{{ compare|safe }}</div>
  </div>
  <div id="main">
    <div id="canvas-container">{{ svg|safe }}</div>
    <div id="bottom-panel">
      <div id="pseudocode">{{ pseudocode|safe }}</div>
      <div>
        <div id="comparison">{{ comparison|safe }}</div>
        <div id="analytics">{{ analytics|safe }}</div>
      </div>
    </div>
  </div>

  <script>
    async function post(url, body = {}) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(body),
      });
      return res.json();
    }

    function applyState(s) {
      if (!s || s.error) return;
      document.getElementById('canvas-container').innerHTML = s.svg;
      document.getElementById('comparisons').textContent = s.counters.comparisons;
      document.getElementById('swaps').textContent = s.counters.swaps;
      document.getElementById('writes').textContent = s.counters.writes;

      const c = s.controls;
      document.getElementById('btn-generate').disabled = c.generate_disabled;
      document.getElementById('btn-run').disabled = c.run_disabled;
      document.getElementById('btn-run').textContent = s.state === 'idle' ? 'Run' : 'Running…';
      document.getElementById('btn-pause').disabled = c.pause_disabled;
      document.getElementById('btn-pause').textContent = c.pause_label;
      document.getElementById('btn-stop').disabled = c.stop_disabled;
      document.getElementById('size').disabled = c.size_disabled;
      document.getElementById('algo-selector').disabled = c.algo_disabled;

      document.querySelectorAll('.code-line').forEach(el => {
        el.classList.toggle('highlight', +el.dataset.line === s.pseudocode_line);
      });
    }

    // polling: fast while a run is active, slow otherwise
    let polling = false;
    async function poll() {
      if (polling) return;
      polling = true;
      try {
        const res = await fetch('/api/state');
        const s = await res.json();
        applyState(s);
        setTimeout(() => { polling = false; poll(); }, s.state === 'idle' ? 500 : 50);
      } catch (e) {
        setTimeout(() => { polling = false; poll(); }, 1000);
      }
    }

    document.getElementById('btn-generate').onclick = async () => {
      applyState(await post('/api/generate', {size: +document.getElementById('size').value}));
    };
    document.getElementById('btn-run').onclick = async () => {
      applyState(await post('/api/run', {algo: document.getElementById('algo-selector').value}));
    };
    document.getElementById('btn-pause').onclick = async () => applyState(await post('/api/pause'));
    document.getElementById('btn-stop').onclick = async () => applyState(await post('/api/stop'));

    document.getElementById('size').addEventListener('input', async (e) => {
      document.getElementById('size-val').textContent = e.target.value;
      applyState(await post('/api/generate', {size: +e.target.value}));
    });
    document.getElementById('speed').addEventListener('input', async (e) => {
      document.getElementById('speed-val').textContent = e.target.value;
      await post('/api/config/speed', {speed: +e.target.value});
    });
    document.getElementById('algo-selector').addEventListener('change', async (e) => {
      const data = await post('/api/config/algo', {algo_key: e.target.value});
      if (data.pseudocode) document.getElementById('pseudocode').innerHTML = data.pseudocode;
    });
    document.getElementById('btn-compare').onclick = async () => {
      const data = await post('/api/compare', {
        left: document.getElementById('compare-left').value,
        right: document.getElementById('compare-right').value,
      });
      if (data.comparison) document.getElementById('comparison').innerHTML = data.comparison;
      if (data.analytics) document.getElementById('analytics').innerHTML = data.analytics;
    };

    function sendSize() {
      const box = document.getElementById('canvas-container');
      post('/api/resize', {width: box.clientWidth, height: box.clientHeight}).then(applyState);
    }
    window.addEventListener('resize', sendSize);

    sendSize();
    poll();
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
def parse_args():
    parser = argparse.ArgumentParser(description="Sorting Algorithm Visualizer")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--debug", action="store_true", default=settings.debug, help="Flask debug mode")
    return parser.parse_args()


def cli():
    args = parse_args()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  Sorting Algorithm Visualizer")
    print("  Starting Flask server...")
    print(f"  Open http://localhost:{args.port}")
    print("=" * 60)
    # the reloader would fork a second process with its own controller
    app.run(debug=args.debug, host=args.host, port=args.port, use_reloader=False)


if __name__ == "__main__":
    cli()
