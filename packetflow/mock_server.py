from __future__ import annotations

import random

from aiohttp import web
from loguru import logger

from .config import IMX_ENDPOINT, MOCK_FAILURE_RATE, MOCK_SERVER_PORT, MPU_ENDPOINT, TFLUNA_ENDPOINT


class MockSensorApplication(web.Application):
    """
    Stand-in for the sensor ingestion API. Accepts any JSON object on the
    sensor endpoints and randomly fails a share of the requests so that the
    error path of the animation can be seen.
    """

    def __init__(self, failure_rate: float = MOCK_FAILURE_RATE, rng: random.Random | None = None):
        super().__init__()

        self._failure_rate = failure_rate
        self._rng = rng or random.Random()

        self.add_routes([web.get("/", self.hello)])
        self.add_routes(
            [web.post(path, self.sensor_handler) for path in (IMX_ENDPOINT, MPU_ENDPOINT, TFLUNA_ENDPOINT)]
        )

    async def hello(self, *_):
        return web.Response(text="Mock Sensor Server")

    async def sensor_handler(self, request: web.Request) -> web.Response:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        try:
            body = await request.json()
        except ValueError:
            return web.json_response({"error": "invalid json"}, status=400)

        if not isinstance(body, dict):
            return web.json_response({"error": "expected an object"}, status=400)

        if self._rng.random() < self._failure_rate:
            logger.debug(f"Mock server failing {request.path}")
            return web.json_response({"error": "simulated failure"}, status=500)

        return web.json_response({"status": "ok"})


class MockSensorServer:
    def __init__(self, port: int = MOCK_SERVER_PORT, failure_rate: float = MOCK_FAILURE_RATE):
        self._port = port
        self._app = MockSensorApplication(failure_rate)
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        assert self._runner is None

        logger.info("Starting mock sensor server...")

        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, "localhost", self._port)
        await site.start()

        logger.info(f"Mock sensor server started at http://localhost:{self._port}")

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Mock sensor server stopped")
