"""
Background Pusher

A single asyncio task that performs pushes on request.

DESIGN DECISION: Rapid edits must not fan out into many concurrent
remote calls. Requests made while a push is already pending collapse
into that one pending push, and requests made while a push is running
cause exactly one follow-up push. The push reads the latest snapshot when
it starts, so nothing is lost by collapsing.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog


logger = structlog.get_logger(__name__)


class BackgroundPusher:
    """Runs at most one push at a time, with at most one push queued."""

    def __init__(self, push: Callable[[], Awaitable[None]]):
        self._push = push
        self._pending = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the worker on the running event loop."""
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(
                self._run(), name="background-pusher"
            )

    def request(self) -> None:
        """Ask for a push. Must be called on the worker's event loop."""
        self._idle.clear()
        self._pending.set()

    async def _run(self) -> None:
        while True:
            await self._pending.wait()
            self._pending.clear()
            try:
                await self._push()
            except Exception:
                # Keep the worker alive; the next write will try again
                logger.exception("background_push_crashed")
            finally:
                if not self._pending.is_set():
                    self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until no push is pending or running."""
        await self._idle.wait()

    async def stop(self, drain_timeout: float = 0.0) -> None:
        """Give outstanding work up to drain_timeout seconds, then cancel the worker."""
        if self._task is None:
            return
        if drain_timeout > 0 and not self._idle.is_set():
            try:
                await asyncio.wait_for(self._idle.wait(), timeout=drain_timeout)
            except asyncio.TimeoutError:
                logger.warning("background_push_abandoned", drain_timeout=drain_timeout)
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._idle.set()
