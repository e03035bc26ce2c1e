"""
Tests for the Flask routes.

The app keeps one controller on its loop thread, so every test starts
from a stopped controller with small data and maximum speed.
"""

import time
import unittest

import main


class AppTestCase(unittest.TestCase):

    def setUp(self):
        self.client = main.app.test_client()
        self.client.post("/api/stop")
        self.client.post("/api/config/speed", json={"speed": 100})
        self.client.post("/api/generate", json={"size": 5})

    def tearDown(self):
        self.client.post("/api/stop")

    def state(self):
        return self.client.get("/api/state").get_json()

    def wait_until_idle(self, timeout=5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            s = self.state()
            if s["state"] == "idle":
                return s
            time.sleep(0.02)
        self.fail("run did not finish in time")


class TestPages(AppTestCase):

    def test_index(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 200)
        body = res.get_data(as_text=True)
        self.assertIn("Sorting Algorithm Visualizer", body)
        self.assertIn('id="btn-run"', body)
        self.assertIn("<svg", body)
        self.assertIn('id="compare-left"', body)
        self.assertIn('<option value="insertion"', body)

    def test_state_payload(self):
        s = self.state()
        self.assertEqual(s["state"], "idle")
        self.assertEqual(s["size"], 5)
        self.assertEqual(s["counters"], {"comparisons": 0, "swaps": 0, "writes": 0})
        self.assertEqual(s["speed"], 100)
        self.assertFalse(s["controls"]["run_disabled"])


class TestPlayback(AppTestCase):

    def test_run_to_completion(self):
        res = self.client.post("/api/run", json={"algo": "merge"})
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.get_json()["started"])

        s = self.wait_until_idle()
        self.assertGreater(s["counters"]["writes"], 0)
        self.assertEqual(s["counters"]["swaps"], 0)
        self.assertEqual(s["running_algo"], "merge")

    def test_second_run_is_ignored(self):
        self.client.post("/api/config/speed", json={"speed": 1})
        self.assertTrue(self.client.post("/api/run", json={"algo": "bubble"}).get_json()["started"])
        second = self.client.post("/api/run", json={"algo": "merge"}).get_json()
        self.assertFalse(second["started"])
        self.assertEqual(second["running_algo"], "bubble")

    def test_pause_toggle_and_stop(self):
        self.client.post("/api/config/speed", json={"speed": 1})
        self.client.post("/api/run", json={"algo": "insertion"})

        paused = self.client.post("/api/pause").get_json()
        self.assertEqual(paused["state"], "paused")
        self.assertEqual(paused["controls"]["pause_label"], "Resume")

        resumed = self.client.post("/api/pause").get_json()
        self.assertEqual(resumed["state"], "running")

        blocked = self.client.post("/api/generate", json={"size": 30}).get_json()
        self.assertFalse(blocked["generated"])
        self.assertEqual(blocked["size"], 5)

        stopped = self.client.post("/api/stop").get_json()
        self.assertTrue(stopped["stopped"])
        self.assertEqual(stopped["state"], "idle")

        again = self.client.post("/api/stop").get_json()
        self.assertFalse(again["stopped"])

    def test_unknown_algorithm_is_rejected(self):
        res = self.client.post("/api/run", json={"algo": "bogosort"})
        self.assertEqual(res.status_code, 400)
        self.assertIn("error", res.get_json())
        self.assertEqual(self.state()["state"], "idle")


class TestConfigRoutes(AppTestCase):

    def test_generate_clamps_size(self):
        s = self.client.post("/api/generate", json={"size": 1}).get_json()
        self.assertEqual(s["size"], main.settings.size_min)

    def test_generate_rejects_garbage(self):
        res = self.client.post("/api/generate", json={"size": "lots"})
        self.assertEqual(res.status_code, 400)

    def test_speed_is_clamped(self):
        s = self.client.post("/api/config/speed", json={"speed": 1000}).get_json()
        self.assertEqual(s["speed"], 100)
        res = self.client.post("/api/config/speed", json={"speed": "fast"})
        self.assertEqual(res.status_code, 400)

    def test_select_algorithm(self):
        res = self.client.post("/api/config/algo", json={"algo_key": "insertion"})
        self.assertEqual(res.status_code, 200)
        self.assertIn("key ← a[i]", res.get_json()["pseudocode"])
        self.assertEqual(self.state()["algo"], "insertion")

        bad = self.client.post("/api/config/algo", json={"algo_key": "heap"})
        self.assertEqual(bad.status_code, 400)

    def test_resize_redraws_without_touching_counters(self):
        before = self.state()
        s = self.client.post("/api/resize", json={"width": 640, "height": 300}).get_json()
        self.assertIn('width="640"', s["svg"])
        self.assertEqual(s["counters"], before["counters"])
        self.assertEqual(s["state"], "idle")


class TestCompareRoute(AppTestCase):

    def test_compare(self):
        res = self.client.post("/api/compare", json={"left": "bubble", "right": "merge"})
        self.assertEqual(res.status_code, 200)
        data = res.get_json()
        self.assertIn("Bubble Sort vs Merge Sort", data["comparison"])
        self.assertEqual(set(data["winners"]), {"comparisons", "moves", "steps"})

    def test_compare_unknown(self):
        res = self.client.post("/api/compare", json={"left": "bubble", "right": "tim"})
        self.assertEqual(res.status_code, 400)


class TestMalformedInput(AppTestCase):

    def post_raw(self, url, body):
        return self.client.post(url, data=body, content_type="application/json")

    def test_non_string_algorithm_keys(self):
        for url, body in [
            ("/api/run",         {"algo": ["bubble"]}),
            ("/api/config/algo", {"algo_key": {"k": 1}}),
            ("/api/compare",     {"left": 3, "right": "merge"}),
        ]:
            with self.subTest(url=url):
                res = self.client.post(url, json=body)
                self.assertEqual(res.status_code, 400)
                self.assertIn("error", res.get_json())
        self.assertEqual(self.state()["state"], "idle")

    def test_overflowing_numbers(self):
        res = self.post_raw("/api/generate", '{"size": 1e400}')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.state()["size"], 5)

        res = self.post_raw("/api/resize", '{"width": 1e400, "height": 300}')
        self.assertEqual(res.status_code, 400)

    def test_non_object_body_uses_defaults(self):
        res = self.post_raw("/api/generate", "[1, 2, 3]")
        self.assertEqual(res.status_code, 200)


if __name__ == "__main__":
    unittest.main()
