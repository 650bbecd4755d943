from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol

import numpy as np
from loguru import logger

from .config import IMX_ENDPOINT, MPU_ENDPOINT, SERVER_URL, TFLUNA_ENDPOINT
from .network import Job
from .sensors import generate_imx, generate_mpu, generate_tfluna
from .state import VisualState
from .types import BLUE, GREEN, RED, Controls
from .worker import SensorWorker


class Launcher(Protocol):
    def submit(self, job: Job) -> Future:
        ...


class Simulation:
    """
    Starts runs and applies user input to the visual state. A run fans out
    one SensorWorker per sensor; their futures are kept so that unfinished
    calls can be cancelled.
    """

    def __init__(
        self,
        state: VisualState,
        launcher: Launcher,
        server_url: str = SERVER_URL,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.state = state

        self._launcher = launcher
        self._server_url = server_url
        self._rng = rng if rng is not None else np.random.default_rng()
        self._futures: list[Future] = []

    def handle(self, controls: Controls) -> None:
        if controls.tilt != 0:
            self.state.adjust_tilt(controls.tilt)

        if controls.start:
            self.start()

    def start(self) -> bool:
        """
        Begins a new run. Returns `False` without creating packets or
        launching workers if a run is still in progress.
        """

        with self.state.lock:
            if not self.state.try_begin_run():
                return False

            workers = self._create_workers(self.state.tilt)

            # Packets exist before the lock is released, so the frame loop
            # never sees an empty, running simulation.
            for worker in workers:
                worker.register()

        logger.info(f"🚀 Starting run with {len(workers)} sensors")

        self._futures = [self._launcher.submit(worker.run) for worker in workers]
        return True

    def cancel(self) -> None:
        """Cancels any sensor call that has not completed yet."""

        pending = [f for f in self._futures if not f.done()]

        for future in pending:
            future.cancel()

        if pending:
            logger.warning(f"Cancelled {len(pending)} pending sensor calls")

        self._futures = []

    # == Private == #

    def _create_workers(self, tilt: float) -> list[SensorWorker]:
        url = self._server_url
        state = self.state

        return [
            SensorWorker(url + IMX_ENDPOINT, generate_imx(self._rng), "imx", state, 200.0, GREEN),
            SensorWorker(url + MPU_ENDPOINT, generate_mpu(tilt, self._rng), "mpu", state, 230.0, BLUE),
            SensorWorker(url + TFLUNA_ENDPOINT, generate_tfluna(self._rng), "tfluna", state, 260.0, RED),
        ]
