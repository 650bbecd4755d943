from __future__ import annotations

import threading
from asyncio import (
    AbstractEventLoop,
    Event,
    all_tasks,
    current_task,
    gather,
    new_event_loop,
    run_coroutine_threadsafe,
    set_event_loop,
)
from concurrent.futures import Future
from typing import Any, Awaitable, Callable

from aiohttp import ClientSession, ClientTimeout
from loguru import logger

from .config import MOCK_FAILURE_RATE, MOCK_SERVER_ENABLED, MOCK_SERVER_PORT, REQUEST_TIMEOUT_S
from .mock_server import MockSensorServer

Job = Callable[[ClientSession], Awaitable[Any]]


class NetworkThread(threading.Thread):
    """
    Runs an asyncio event loop in the background so that sensor calls never
    block the frame loop. Work is handed over with `submit()`, which can be
    called from any thread.
    """

    def __init__(
        self,
        mock_server: bool = MOCK_SERVER_ENABLED,
        mock_port: int = MOCK_SERVER_PORT,
        mock_failure_rate: float = MOCK_FAILURE_RATE,
    ):
        super().__init__(name="network")

        self.daemon = True
        self._loop: AbstractEventLoop | None = None
        self._session: ClientSession | None = None
        self._mock_server = MockSensorServer(mock_port, mock_failure_rate) if mock_server else None
        self._ready = threading.Event()
        self._stop_event: Event | None = None
        self._error: BaseException | None = None

    def start(self) -> None:
        """Starts the thread and blocks until it accepts work."""

        super().start()
        self._ready.wait()

        if self._error is not None:
            raise RuntimeError("Network thread failed to start") from self._error

    def run(self) -> None:
        self._loop = new_event_loop()
        set_event_loop(self._loop)

        try:
            self._loop.run_until_complete(self._main())

        finally:
            self._loop.close()
            self._ready.set()

    def submit(self, job: Job) -> Future:
        assert self._loop is not None and self._session is not None, "thread not started"

        return run_coroutine_threadsafe(job(self._session), self._loop)

    def stop(self, timeout: float = 3.0) -> None:
        if self._loop is None or self._stop_event is None or not self.is_alive():
            return

        self._loop.call_soon_threadsafe(self._stop_event.set)
        self.join(timeout)

        if self.is_alive():
            logger.warning("Network thread did not stop in time")

    # == Private == #

    async def _main(self) -> None:
        self._stop_event = Event()

        try:
            if self._mock_server is not None:
                await self._mock_server.start()

            self._session = ClientSession(timeout=ClientTimeout(total=REQUEST_TIMEOUT_S))

        except Exception as e:
            logger.error(f"Network thread failed to start: {e!r}")
            self._error = e
            return

        self._ready.set()
        logger.debug("Network thread ready")

        try:
            await self._stop_event.wait()

        finally:
            # Sensor calls must be finished before the loop is closed
            pending = [t for t in all_tasks() if t is not current_task()]

            for task in pending:
                task.cancel()

            await gather(*pending, return_exceptions=True)
            await self._session.close()

            if self._mock_server is not None:
                await self._mock_server.stop()

            logger.debug("Network thread stopped")
