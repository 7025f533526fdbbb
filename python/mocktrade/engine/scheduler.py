"""
Repeating task scheduler.

Each task runs its callback on a fixed cadence in a daemon thread. A task
never overlaps itself: the next wait starts only after the callback returns.
Separate tasks run independently of each other.
"""

from typing import Callable, Dict, List, Optional
import logging
import threading

logger = logging.getLogger(__name__)


class RepeatingTask:
    """Cancellable handle for a callback invoked every ``interval`` seconds."""

    def __init__(self, name: str, interval: float, callback: Callable[[], object]):
        """
        Initialize repeating task.

        Args:
            name: Task name (used for the thread name and logs).
            interval: Seconds between the end of one run and the start of the next.
            callback: Zero-argument callable.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self.callback = callback
        self.runs = 0
        self.failures = 0
        self._stop = threading.Event()
        self._callback_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the task thread; no-op when already running."""
        if self.running:
            return
        # Per-start event; a thread outliving a timed-out cancel keeps its own (set) one
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run_loop, args=(self._stop,), name=f"mocktrade-{self.name}", daemon=True
        )
        self._thread.start()
        logger.debug(f"Task {self.name} started (every {self.interval}s)")

    def cancel(self, timeout: Optional[float] = 3.0) -> None:
        """Stop the task and wait for an in-flight callback to finish."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning(f"Task {self.name} did not stop within {timeout}s")
        self._thread = None
        logger.debug(f"Task {self.name} cancelled after {self.runs} runs")

    def _run_loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            with self._callback_lock:
                if stop.is_set():
                    break
                try:
                    self.callback()
                    self.runs += 1
                except Exception:
                    self.failures += 1
                    logger.exception(f"Task {self.name} callback failed")


class Scheduler:
    """Registry of named repeating tasks started and stopped together."""

    def __init__(self):
        self._tasks: Dict[str, RepeatingTask] = {}

    def every(self, name: str, interval: float, callback: Callable[[], object]) -> RepeatingTask:
        """
        Register a repeating task (not started until ``start``).

        Raises:
            ValueError: If a task with this name already exists.
        """
        if name in self._tasks:
            raise ValueError(f"Task already registered: {name}")
        task = RepeatingTask(name, interval, callback)
        self._tasks[name] = task
        return task

    def start(self) -> None:
        for task in self._tasks.values():
            task.start()

    def stop(self, timeout: Optional[float] = 3.0) -> None:
        for task in self._tasks.values():
            task.cancel(timeout=timeout)

    def tasks(self) -> List[RepeatingTask]:
        return list(self._tasks.values())

    @property
    def running(self) -> bool:
        return any(task.running for task in self._tasks.values())
