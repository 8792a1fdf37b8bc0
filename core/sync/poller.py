"""
Premise Sync — Poll Timer
=========================
One background thread per owning view. Each tick calls the view's
refresh callback; a failing tick is logged and the timer keeps going.
A poll that overlaps a user-triggered refresh is harmless: the last
full refresh wins.

on_exit runs on the polling thread after the last tick, which is where
thread-bound resources such as database connections must be released.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger("premise.sync")


class Poller:
    """Fixed-interval timer driving a refresh callback."""

    def __init__(
        self,
        callback: Callable[[], object],
        interval_seconds: float,
        *,
        name: str = "poller",
        fire_immediately: bool = True,
        on_exit: Optional[Callable[[], object]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        self._callback = callback
        self._interval = float(interval_seconds)
        self._name = name
        self._fire_immediately = fire_immediately
        self._on_exit = on_exit
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ticks = 0
        self._failures = 0

    def _run(self) -> None:
        try:
            if self._fire_immediately:
                self._tick()
            while not self._stop_event.wait(self._interval):
                self._tick()
        finally:
            if self._on_exit is not None:
                self._release()

    def _release(self) -> None:
        try:
            self._on_exit()
        except Exception as e:
            logger.error(f"{self._name}: exit hook failed: {e}", exc_info=True)

    def _tick(self) -> None:
        self._ticks += 1
        try:
            self._callback()
        except Exception as e:
            self._failures += 1
            logger.error(f"{self._name}: poll tick failed: {e}", exc_info=True)

    def start(self) -> bool:
        if self.is_running():
            logger.warning(f"{self._name}: already running")
            return False
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name=self._name, daemon=True,
        )
        self._thread.start()
        logger.info(f"{self._name}: started ({self._interval:g}s interval)")
        return True

    def stop(self, timeout: float = 2.0) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
        self._thread = None
        logger.info(f"{self._name}: stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def failures(self) -> int:
        return self._failures

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
