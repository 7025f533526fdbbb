"""
Unit tests for RepeatingTask and Scheduler.
"""

import threading
import time
import unittest

from mocktrade.engine import RepeatingTask, Scheduler


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class TestRepeatingTask(unittest.TestCase):
    """Test RepeatingTask lifecycle."""

    def test_runs_until_cancelled(self):
        """The callback runs repeatedly and stops after cancel."""
        calls = []
        task = RepeatingTask("counter", 0.01, lambda: calls.append(1))
        task.start()
        self.assertTrue(wait_until(lambda: task.runs >= 3))
        task.cancel()

        self.assertFalse(task.running)
        count = len(calls)
        time.sleep(0.05)
        self.assertEqual(len(calls), count)

    def test_failing_callback_keeps_running(self):
        """An exception is logged and counted; the loop continues."""
        def boom():
            raise RuntimeError("boom")

        task = RepeatingTask("failing", 0.01, boom)
        with self.assertLogs("mocktrade.engine.scheduler", level="ERROR"):
            task.start()
            self.assertTrue(wait_until(lambda: task.failures >= 2))
            task.cancel()
        self.assertEqual(task.runs, 0)

    def test_start_twice_is_noop(self):
        """Starting a running task keeps a single thread."""
        task = RepeatingTask("once", 0.01, lambda: None)
        task.start()
        thread = task._thread
        task.start()
        self.assertIs(task._thread, thread)
        task.cancel()

    def test_callbacks_never_overlap(self):
        """A slow callback delays the next run instead of overlapping it."""
        active = []
        overlaps = []
        lock = threading.Lock()

        def slow():
            with lock:
                if active:
                    overlaps.append(1)
                active.append(1)
            time.sleep(0.02)
            with lock:
                active.pop()

        task = RepeatingTask("slow", 0.001, slow)
        task.start()
        self.assertTrue(wait_until(lambda: task.runs >= 3))
        task.cancel()
        self.assertEqual(overlaps, [])

    def test_restart_after_timed_out_cancel(self):
        """Restarting while a slow callback outlives cancel never runs two callbacks at once."""
        active = []
        peak = []
        lock = threading.Lock()

        def slow():
            with lock:
                active.append(1)
                peak.append(len(active))
            time.sleep(0.3)
            with lock:
                active.pop()

        task = RepeatingTask("slow", 0.01, slow)
        task.start()
        self.assertTrue(wait_until(lambda: len(peak) >= 1))
        with self.assertLogs("mocktrade.engine.scheduler", level="WARNING"):
            task.cancel(timeout=0.05)

        task.start()
        self.assertTrue(wait_until(lambda: task.runs >= 3))
        task.cancel()

        self.assertEqual(max(peak), 1)
        self.assertFalse(task.running)

    def test_invalid_interval(self):
        """Non-positive intervals are rejected."""
        for interval in (0, -1):
            with self.assertRaises(ValueError):
                RepeatingTask("bad", interval, lambda: None)


class TestScheduler(unittest.TestCase):
    """Test Scheduler task registry."""

    def test_start_and_stop_all(self):
        """start/stop drive every registered task."""
        scheduler = Scheduler()
        first = scheduler.every("first", 0.01, lambda: None)
        second = scheduler.every("second", 0.02, lambda: None)

        scheduler.start()
        self.assertTrue(scheduler.running)
        self.assertTrue(wait_until(lambda: first.runs >= 1 and second.runs >= 1))
        scheduler.stop()

        self.assertFalse(scheduler.running)
        self.assertEqual(scheduler.tasks(), [first, second])

    def test_duplicate_name(self):
        """Registering the same name twice fails."""
        scheduler = Scheduler()
        scheduler.every("tick", 1.0, lambda: None)
        with self.assertRaises(ValueError):
            scheduler.every("tick", 2.0, lambda: None)

    def test_restart(self):
        """A stopped scheduler can be started again."""
        scheduler = Scheduler()
        task = scheduler.every("tick", 0.01, lambda: None)
        scheduler.start()
        scheduler.stop()
        runs = task.runs

        scheduler.start()
        self.assertTrue(wait_until(lambda: task.runs > runs))
        scheduler.stop()


if __name__ == "__main__":
    unittest.main()
