"""
One-time build lifecycle: idle -> loading -> ready.

Every path (async preload, sync fallback, search awaiting readiness) goes
through a single claimed future, so the build function runs at most once per
coordinator. A failed build is logged and leaves the coordinator in LOADING;
waiters are expected to apply their own timeout.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from concurrent.futures import Future
from typing import Callable, Generic, Optional, TypeVar

from place_search.models import LoadState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadCoordinator(Generic[T]):
    def __init__(self, build: Callable[[], T], name: str = "index"):
        self._build = build
        self._name = name
        self._lock = threading.Lock()
        self._state = LoadState.IDLE
        self._future: Optional[Future] = None
        self._started = False
        self._value: Optional[T] = None
        self.build_count = 0

    # ── Observers ──────────────────────────────────────────────────────

    @property
    def state(self) -> LoadState:
        return self._state

    def is_ready(self) -> bool:
        return self._state is LoadState.READY

    def is_loading(self) -> bool:
        return self._state is LoadState.LOADING

    @property
    def value(self) -> Optional[T]:
        """The built value, or None until ready."""
        return self._value

    # ── Build paths ────────────────────────────────────────────────────

    async def preload(self) -> T:
        """
        Start the build off the event loop if nobody has, then wait for it.
        Concurrent callers share the same in-flight build.
        """
        if self._state is LoadState.READY:
            return self._value

        future, owner = self._claim()
        if owner:
            # Already-scheduled callbacks run before the build is handed off
            loop = asyncio.get_running_loop()
            loop.call_soon(loop.run_in_executor, None, self._run, future)
        return await asyncio.wrap_future(future)

    def ensure_ready_sync(self, timeout: Optional[float] = None) -> T:
        """
        Blocking fallback. Builds inline unless a build is already running,
        otherwise waits for it (raises TimeoutError past `timeout`).
        A preload that has claimed the build but not yet handed it to the
        executor is taken over here, since blocking on the loop thread would
        keep that hand-off from ever running.
        """
        if self._state is LoadState.READY:
            return self._value

        future, _ = self._claim()
        self._run(future)
        return future.result(timeout)

    async def wait_ready(self) -> T:
        """
        Readiness for async callers: await an in-flight build, or build inline
        when idle. A failed inline build leaves the caller awaiting rather
        than blocking the loop.
        """
        if self._state is LoadState.READY:
            return self._value

        future, owner = self._claim()
        if owner:
            logger.info("%s queried before preload; building synchronously", self._name)
            self._run(future)
        return await asyncio.wrap_future(future)

    def _claim(self) -> tuple[Future, bool]:
        with self._lock:
            if self._future is not None:
                return self._future, False
            future: Future = Future()
            # A running future cannot be cancelled by one of its waiters
            future.set_running_or_notify_cancel()
            self._future = future
            self._state = LoadState.LOADING
            return future, True

    def _run(self, future: Future) -> None:
        """Run the claimed build, unless some caller already started it."""
        with self._lock:
            if self._started:
                return
            self._started = True
            self.build_count += 1

        start = time.monotonic()
        logger.info("Building %s...", self._name)
        try:
            value = self._build()
        except Exception:
            logger.exception("Building %s failed; it will stay unavailable", self._name)
            return

        with self._lock:
            self._value = value
            self._state = LoadState.READY
        logger.info("%s ready in %.2fs", self._name.capitalize(), time.monotonic() - start)
        future.set_result(value)
