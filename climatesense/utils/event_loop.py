"""Background event loop for ClimateSense workflows.

Flask handlers are synchronous. Every workflow coroutine is submitted to one
long-lived asyncio loop running in a daemon thread, so clients cached across
requests (ChatOpenAI and its pooled httpx connections) always see the loop
they were created on.

Usage:
    runner = BackgroundLoop()
    state = runner.run(controller.generate(request))
"""

import asyncio
import threading
from typing import Any, Coroutine, Optional

import structlog

logger = structlog.get_logger()


class BackgroundLoop:
    """An asyncio loop owned by a daemon thread."""

    def __init__(self, name: str = "climatesense-workflows"):
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._serve, name=name, daemon=True)
        self._thread.start()
        logger.info("event_loop_started", thread=name)

    def _serve(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._loop.is_closed()

    def run(self, coro: Coroutine[Any, Any, Any], timeout: Optional[float] = None) -> Any:
        """Run a coroutine on the background loop and wait for its result.

        Raises:
            RuntimeError: If the loop has been closed.
        """
        if not self.is_running:
            coro.close()
            raise RuntimeError("Workflow event loop is not running")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout)

    def close(self) -> None:
        """Stop the loop and wait for its thread to exit."""
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()
        logger.info("event_loop_stopped")
