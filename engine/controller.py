"""
controller.py — Playback Controller
====================================
The PlaybackController is the ONLY object the UI talks to during a run.
It owns the data between runs, binds one StepProducer per run, and
drives it forward on an asyncio task at a speed-dependent pace.

State machine:
    IDLE     →  start()            →  RUNNING
    RUNNING  →  pause()            →  PAUSED
    PAUSED   →  resume()           →  RUNNING
    RUNNING  →  (steps exhausted)  →  IDLE      (final record shown, counters kept)
    RUNNING / PAUSED  →  stop()    →  IDLE      (producer dropped, not drained)

Every entry point called in a state where it means nothing is a no-op
that returns False.  An unknown algorithm key is a wiring bug and raises
UnknownAlgorithmError from start().

Concurrency:
  Everything runs on ONE event loop.  start() must be called from code
  running on that loop (a coroutine or a loop callback); the Flask layer
  marshals calls onto the loop thread.  The drive task sleeps between
  steps and polls every `poll_interval` seconds while paused, so no
  step is pulled while PAUSED and no thread ever busy-waits.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

from algorithms import require_algorithm
from algorithms.step import PullKind, RunCounters, Step, StepProducer
from arrays import DataSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class ControllerState(Enum):
    IDLE    = "idle"
    RUNNING = "running"
    PAUSED  = "paused"


# ---------------------------------------------------------------------------
# Speed → delay
# ---------------------------------------------------------------------------
SPEED_MIN          = 1
SPEED_MAX          = 100
DEFAULT_SPEED      = 50
BASE_DELAY_MS      = 500
DELAY_PER_SPEED_MS = 5
MIN_DELAY_MS       = 20
PAUSE_POLL_INTERVAL = 0.05    # seconds


def clamp_speed(speed: float) -> float:
    return max(SPEED_MIN, min(SPEED_MAX, speed))


def speed_to_delay(speed: float, min_delay: float = MIN_DELAY_MS / 1000) -> float:
    """Seconds to wait after a step.  Faster speed → shorter delay, never below `min_delay`."""
    delay_ms = BASE_DELAY_MS - DELAY_PER_SPEED_MS * speed
    return max(min_delay, delay_ms / 1000)


# ---------------------------------------------------------------------------
# PlaybackController
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        state       : Current ControllerState.
        data        : The sequence on display (last published snapshot).
        algo_key    : Key of the algorithm of the current / last run.
        speed       : Speed setting in [SPEED_MIN, SPEED_MAX].
        renderer    : Object with draw(snapshot, highlighted).  Optional.
        data_source : Object with generate(n) used by regenerate().
        on_step     : Optional callback(Step) fired for every published step
                      (counters display, recorders, tests).
        last_step   : Most recently published Step, or None.
    """

    def __init__(
        self,
        renderer=None,
        data_source: Optional[DataSource] = None,
        on_step: Optional[Callable[[Step], None]] = None,
        speed: float = DEFAULT_SPEED,
        poll_interval: float = PAUSE_POLL_INTERVAL,
        min_delay: float = MIN_DELAY_MS / 1000,
    ):
        self.state:       ControllerState = ControllerState.IDLE
        self.data:        List[float]     = []
        self.algo_key:    Optional[str]   = None
        self.speed:       float           = clamp_speed(speed)
        self.renderer                     = renderer
        self.data_source: DataSource      = data_source or DataSource()
        self.on_step:     Optional[Callable[[Step], None]] = on_step
        self.last_step:   Optional[Step]  = None

        self.poll_interval = poll_interval
        self.min_delay     = min_delay

        self._producer:  Optional[StepProducer] = None
        self._counters:  Optional[RunCounters]  = None     # live, owned by the active run
        self._published: RunCounters            = RunCounters()
        self._task:      Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, data: Optional[Sequence[float]] = None, algo_key: str = "bubble") -> bool:
        """Begin a run over `data` (or the current data).  No-op unless IDLE."""
        if self.state is not ControllerState.IDLE:
            logger.debug("start ignored: controller is %s", self.state.value)
            return False

        info = require_algorithm(algo_key)
        loop = asyncio.get_running_loop()

        if data is not None:
            self.data = list(data)
        self._counters  = RunCounters()
        self._published = RunCounters()
        self._producer  = StepProducer(info.fn(list(self.data), self._counters))
        self.algo_key   = algo_key
        self.last_step  = None
        self.state      = ControllerState.RUNNING

        self._task = loop.create_task(self._drive(self._producer))
        self._task.add_done_callback(self._on_task_done)
        logger.info("run started: %s on %d elements", info.label, len(self.data))
        return True

    def stop(self) -> bool:
        """Abandon the active run immediately.  No-op from IDLE."""
        if self.state is ControllerState.IDLE:
            return False

        task = self._task
        self._release()
        if task is not None and not task.done():
            task.cancel()
        self._draw(())
        logger.info("run stopped by user at %s", self._published.as_dict())
        return True

    def regenerate(self, n: int) -> bool:
        """Replace the data with `n` fresh values and zero the counters.  IDLE only."""
        if self.state is not ControllerState.IDLE:
            return False
        self.data       = list(self.data_source.generate(n))
        self._published = RunCounters()
        self.last_step  = None
        self._draw(())
        return True

    # ------------------------------------------------------------------
    # Pause / Resume
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        if self.state is not ControllerState.RUNNING:
            return False
        self.state = ControllerState.PAUSED
        logger.info("run paused")
        return True

    def resume(self) -> bool:
        if self.state is not ControllerState.PAUSED:
            return False
        self.state = ControllerState.RUNNING
        logger.info("run resumed")
        return True

    def toggle_pause(self) -> bool:
        if self.state is ControllerState.PAUSED:
            return self.resume()
        return self.pause()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, speed: float) -> None:
        self.speed = clamp_speed(speed)

    @property
    def delay(self) -> float:
        return speed_to_delay(self.speed, self.min_delay)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def redraw(self) -> None:
        """Repaint the last published snapshot (window resize).  Leaves state alone."""
        self._draw(())

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def counters(self) -> RunCounters:
        """Counters as of the latest published step (a copy)."""
        return self._published.copy()

    @property
    def active_producer(self) -> Optional[StepProducer]:
        return self._producer

    @property
    def is_running(self) -> bool:
        return self.state is ControllerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.state is ControllerState.PAUSED

    async def wait_idle(self) -> None:
        """Wait until the current drive task (if any) has finished."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    async def _drive(self, producer: StepProducer) -> None:
        while self._producer is producer:
            if self.state is ControllerState.PAUSED:
                await asyncio.sleep(self.poll_interval)
                continue

            result = producer.pull()
            if result.kind is PullKind.STEP:
                self._publish(result.record)
                await asyncio.sleep(self.delay)
                continue

            if result.kind is PullKind.FINAL:
                self._publish(result.record)
            self._release()
            logger.info("run finished: %s", self._published.as_dict())
            return

    def _publish(self, step: Step) -> None:
        self.data       = list(step.elements)
        self.last_step  = step
        self._published = step.counters()
        logger.debug("step %d highlight=%s", step.step_number, step.highlighted)
        self._draw(step.highlighted)
        if self.on_step:
            self.on_step(step)

    def _release(self) -> None:
        self._producer = None
        self._counters = None
        self._task     = None
        self.state     = ControllerState.IDLE

    def _draw(self, highlighted: Sequence[int]) -> None:
        if self.renderer is not None:
            self.renderer.draw(list(self.data), tuple(highlighted))

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("drive loop crashed", exc_info=exc)
            if self._task is task:
                self._release()
