"""
Tests for the PlaybackController state machine and drive loop.

The controller runs with a zero minimum delay and a 1 ms pause poll so
whole runs finish in a handful of event-loop iterations.
"""

import asyncio
import unittest

from algorithms import UnknownAlgorithmError
from arrays import DataSource
from engine import ControllerState, PlaybackController, speed_to_delay, SPEED_MAX, SPEED_MIN


class FakeRenderer:
    def __init__(self):
        self.calls = []

    def draw(self, snapshot, highlighted):
        self.calls.append((list(snapshot), tuple(highlighted)))


class TestSpeedToDelay(unittest.TestCase):

    def test_faster_is_shorter(self):
        self.assertAlmostEqual(speed_to_delay(1), 0.495)
        self.assertAlmostEqual(speed_to_delay(50), 0.25)
        self.assertGreater(speed_to_delay(10), speed_to_delay(90))

    def test_delay_is_clamped(self):
        self.assertAlmostEqual(speed_to_delay(100), 0.02)
        self.assertAlmostEqual(speed_to_delay(1000), 0.02)
        self.assertEqual(speed_to_delay(100, min_delay=0), 0)


class ControllerTestCase(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.renderer = FakeRenderer()
        self.published = []
        self.ctl = PlaybackController(
            renderer=self.renderer,
            data_source=DataSource(seed=7),
            on_step=self.published.append,
            speed=SPEED_MAX,
            poll_interval=0.001,
            min_delay=0,
        )

    async def asyncTearDown(self):
        self.ctl.stop()

    async def until(self, predicate, limit=500):
        for _ in range(limit):
            if predicate():
                return
            await asyncio.sleep(0)
        self.fail("condition never became true")


class TestRun(ControllerTestCase):

    async def test_full_run_publishes_steps_then_final(self):
        self.assertTrue(self.ctl.start([3, 1, 2], "bubble"))
        self.assertEqual(self.ctl.state, ControllerState.RUNNING)
        await self.ctl.wait_idle()

        self.assertEqual(self.ctl.state, ControllerState.IDLE)
        self.assertIsNone(self.ctl.active_producer)
        self.assertEqual(len(self.published), 6)
        self.assertTrue(self.published[-1].is_final)
        self.assertEqual(self.ctl.data, [1, 2, 3])
        self.assertEqual(self.renderer.calls[-1], ([1, 2, 3], ()))
        self.assertEqual(self.renderer.calls[0], ([3, 1, 2], (0, 1)))

    async def test_counters_kept_after_exhaustion(self):
        self.ctl.start([3, 1, 2], "bubble")
        await self.ctl.wait_idle()
        counters = self.ctl.counters
        self.assertEqual((counters.comparisons, counters.swaps, counters.writes), (3, 2, 0))

    async def test_empty_input_goes_straight_to_final(self):
        self.ctl.start([], "merge")
        await self.ctl.wait_idle()
        self.assertEqual(len(self.published), 1)
        self.assertTrue(self.published[0].is_final)
        self.assertEqual(self.published[0].elements, ())
        self.assertEqual(self.renderer.calls, [([], ())])

    async def test_start_uses_current_data_when_none_given(self):
        self.ctl.regenerate(6)
        data = list(self.ctl.data)
        self.ctl.start(None, "insertion")
        await self.ctl.wait_idle()
        self.assertEqual(self.ctl.data, sorted(data))

    async def test_counters_readout_tracks_published_step(self):
        self.ctl.start([4, 3, 2, 1], "merge")
        await self.until(lambda: len(self.published) >= 3)
        self.ctl.pause()
        self.assertEqual(self.ctl.counters, self.published[-1].counters())


class TestGuards(ControllerTestCase):

    async def test_second_start_is_ignored(self):
        self.ctl.start([3, 1, 2], "bubble")
        producer = self.ctl.active_producer
        counters = self.ctl.counters

        self.assertFalse(self.ctl.start([9, 8, 7], "merge"))
        self.assertIs(self.ctl.active_producer, producer)
        self.assertEqual(self.ctl.counters, counters)
        self.assertEqual(self.ctl.algo_key, "bubble")
        self.assertEqual(self.ctl.state, ControllerState.RUNNING)

    async def test_start_while_paused_is_ignored(self):
        self.ctl.start([3, 1, 2], "bubble")
        self.ctl.pause()
        self.assertFalse(self.ctl.start([1], "merge"))
        self.assertEqual(self.ctl.state, ControllerState.PAUSED)

    async def test_idle_entry_points_are_noops(self):
        self.assertFalse(self.ctl.stop())
        self.assertFalse(self.ctl.pause())
        self.assertFalse(self.ctl.resume())
        self.assertFalse(self.ctl.toggle_pause())
        self.assertEqual(self.ctl.state, ControllerState.IDLE)
        self.assertEqual(self.renderer.calls, [])

    async def test_unknown_algorithm_fails_fast(self):
        with self.assertRaises(UnknownAlgorithmError):
            self.ctl.start([1, 2], "bogosort")
        self.assertEqual(self.ctl.state, ControllerState.IDLE)
        self.assertIsNone(self.ctl.active_producer)

    async def test_regenerate_blocked_during_run(self):
        self.ctl.start([5, 4, 3, 2, 1], "bubble")
        self.assertFalse(self.ctl.regenerate(10))
        self.assertEqual(len(self.ctl.data), 5)

    async def test_resume_while_running_is_noop(self):
        self.ctl.start([2, 1], "bubble")
        self.assertFalse(self.ctl.resume())
        self.assertTrue(self.ctl.pause())
        self.assertFalse(self.ctl.pause())


class TestPauseAndStop(ControllerTestCase):

    async def test_nothing_published_while_paused(self):
        self.ctl.start([5, 4, 3, 2, 1], "bubble")
        self.ctl.pause()
        await asyncio.sleep(0.02)
        self.assertEqual(self.published, [])

        self.ctl.resume()
        await self.until(lambda: len(self.published) >= 2)
        self.ctl.pause()
        seen = len(self.published)
        await asyncio.sleep(0.02)
        self.assertEqual(len(self.published), seen)

        self.ctl.resume()
        await self.ctl.wait_idle()
        self.assertEqual(self.ctl.data, [1, 2, 3, 4, 5])

    async def test_pause_resume_stop_then_restart_resets_counters(self):
        self.ctl.start([5, 4, 3, 2, 1], "insertion")
        await self.until(lambda: len(self.published) >= 2)
        self.ctl.pause()
        self.ctl.resume()
        self.assertTrue(self.ctl.stop())

        self.assertEqual(self.ctl.state, ControllerState.IDLE)
        self.assertIsNone(self.ctl.active_producer)
        self.assertGreater(self.ctl.counters.comparisons, 0)

        self.ctl.start(None, "bubble")
        self.assertEqual(self.ctl.counters.as_dict(), {"comparisons": 0, "swaps": 0, "writes": 0})

    async def test_stop_abandons_generator(self):
        self.ctl.start(list(range(20, 0, -1)), "bubble")
        await self.until(lambda: len(self.published) >= 3)
        self.ctl.stop()
        seen = len(self.published)
        snapshot = list(self.ctl.data)
        await asyncio.sleep(0.02)

        self.assertEqual(len(self.published), seen)
        self.assertFalse(self.published[-1].is_final)
        self.assertEqual(self.ctl.data, snapshot)
        self.assertEqual(self.renderer.calls[-1], (snapshot, ()))

    async def test_stop_from_paused(self):
        self.ctl.start([3, 2, 1], "merge")
        self.ctl.pause()
        self.assertTrue(self.ctl.stop())
        self.assertEqual(self.ctl.state, ControllerState.IDLE)
        await asyncio.sleep(0.01)
        self.assertEqual(self.published, [])


class TestDisplayAndSpeed(ControllerTestCase):

    async def test_redraw_leaves_counters_and_state(self):
        self.ctl.start([2, 3, 1], "bubble")
        await self.ctl.wait_idle()
        before = self.ctl.counters
        self.ctl.redraw()
        self.assertEqual(self.ctl.counters, before)
        self.assertEqual(self.ctl.state, ControllerState.IDLE)
        self.assertEqual(self.renderer.calls[-1], ([1, 2, 3], ()))

    async def test_regenerate_resets_counters(self):
        self.ctl.start([2, 1], "bubble")
        await self.ctl.wait_idle()
        self.assertTrue(self.ctl.regenerate(8))
        self.assertEqual(len(self.ctl.data), 8)
        self.assertEqual(self.ctl.counters.comparisons, 0)
        self.assertIsNone(self.ctl.last_step)

    async def test_set_speed_clamps(self):
        self.ctl.set_speed(500)
        self.assertEqual(self.ctl.speed, SPEED_MAX)
        self.ctl.set_speed(-4)
        self.assertEqual(self.ctl.speed, SPEED_MIN)
        self.ctl.min_delay = 0.02
        self.assertAlmostEqual(self.ctl.delay, 0.495)


class TestSpeedChangeMidRun(unittest.IsolatedAsyncioTestCase):
    """A new speed applies from the next delay; the sleep already under way finishes."""

    async def asyncSetUp(self):
        self.arrivals = []
        self.ctl = PlaybackController(
            renderer=FakeRenderer(),
            on_step=lambda step: self.arrivals.append(asyncio.get_running_loop().time()),
            speed=SPEED_MIN,
            poll_interval=0.001,
            min_delay=0,
        )

    async def asyncTearDown(self):
        self.ctl.stop()

    async def wait_for_arrivals(self, n, timeout=2.0):
        deadline = asyncio.get_running_loop().time() + timeout
        while len(self.arrivals) < n:
            if asyncio.get_running_loop().time() > deadline:
                self.fail(f"only {len(self.arrivals)} of {n} steps arrived")
            await asyncio.sleep(0.005)

    async def test_faster_speed_shortens_the_next_delay(self):
        slow = speed_to_delay(SPEED_MIN, min_delay=0)
        self.ctl.start([5, 4, 3, 2, 1], "bubble")
        await self.wait_for_arrivals(1)

        self.ctl.set_speed(SPEED_MAX)
        self.assertEqual(self.ctl.delay, 0)

        await self.wait_for_arrivals(3)
        first, second, third = self.arrivals[:3]
        self.assertGreaterEqual(second - first, slow * 0.9)
        self.assertLess(third - second, slow / 2)

    async def test_lower_floor_shortens_the_next_delay(self):
        self.ctl.set_speed(SPEED_MAX)
        self.ctl.min_delay = 0.3
        self.ctl.start([5, 4, 3, 2, 1], "insertion")
        await self.wait_for_arrivals(1)

        self.ctl.min_delay = 0
        await self.wait_for_arrivals(3)
        first, second, third = self.arrivals[:3]
        self.assertGreaterEqual(second - first, 0.27)
        self.assertLess(third - second, 0.15)


if __name__ == "__main__":
    unittest.main()
