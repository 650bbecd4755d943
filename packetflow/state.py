from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace

from loguru import logger

from .config import SHARPNESS_RANGE, TILT_EXTREME, TILT_LIMIT, TILT_SLIGHT, TILT_STEP
from .types import Packet
from .utils.math import clip, normalise


@dataclass
class IconTimers:
    """Frames left in each pipeline icon's "active" animation."""

    api: int = 0
    rabbit: int = 0
    websocket: int = 0

    def tick(self) -> None:
        if self.api > 0:
            self.api -= 1
        if self.rabbit > 0:
            self.rabbit -= 1
        if self.websocket > 0:
            self.websocket -= 1


@dataclass
class Dashboard:
    """Last values delivered to the frontend."""

    distance_m: float = 0.0
    roll: float = 0.0
    sharpness: float = 0.0

    def sharpness_ratio(self) -> float:
        return normalise(self.sharpness, *SHARPNESS_RANGE)


@dataclass
class Frame:
    """Copy of the visual state handed to the renderer, safe to read unlocked."""

    packets: list[Packet]
    timers: IconTimers
    dashboard: Dashboard
    tilt: float
    running: bool

    def tilt_frame(self) -> int:
        """
        Index of the tripod sprite matching the tilt: 0 centred, 1/2 slight
        left/right, 3/4 extreme left/right.
        """

        if self.tilt < -TILT_EXTREME:
            return 3
        if self.tilt < -TILT_SLIGHT:
            return 1
        if self.tilt > TILT_EXTREME:
            return 4
        if self.tilt > TILT_SLIGHT:
            return 2
        return 0


@dataclass
class VisualState:
    """
    State shared between the sensor workers (network thread) and the frame
    loop (main thread).

    Every access to the fields below MUST ACQUIRE `lock`. The lock is
    re-entrant so that a run can be reset and its packets registered inside
    a single critical section.
    """

    lock: threading.RLock = field(default_factory=threading.RLock)

    packets: dict[str, Packet] = field(default_factory=dict)
    timers: IconTimers = field(default_factory=IconTimers)
    dashboard: Dashboard = field(default_factory=Dashboard)
    tilt: float = 0.0
    running: bool = False

    def try_begin_run(self) -> bool:
        """
        Resets the packets and the dashboard for a new run. Returns `False`,
        leaving everything untouched, if a run is already in progress.
        """

        with self.lock:
            if self.running:
                return False

            self.packets = {}
            self.dashboard = Dashboard()
            self.running = True

        logger.debug("Visual state reset for a new run")
        return True

    def add_packet(self, packet: Packet) -> None:
        with self.lock:
            if packet.key in self.packets:
                raise ValueError(f"Packet {packet.key!r} is already in flight")

            self.packets[packet.key] = packet

    def adjust_tilt(self, direction: int) -> float:
        with self.lock:
            self.tilt = clip(self.tilt + direction * TILT_STEP, -TILT_LIMIT, TILT_LIMIT)
            return self.tilt

    def snapshot(self) -> Frame:
        with self.lock:
            return Frame(
                packets=[replace(p) for p in self.packets.values()],
                timers=replace(self.timers),
                dashboard=replace(self.dashboard),
                tilt=self.tilt,
                running=self.running,
            )
