from __future__ import annotations

from aiohttp import ClientError, ClientSession
from loguru import logger

from .config import API_ICON_POSITION, PIPELINE_Y
from .state import VisualState
from .types import Color, Packet, PacketStatus, Reading


class SensorWorker:
    """
    Sends one sensor reading to its endpoint and reports the outcome on the
    packet it owns. A worker is used for a single run.

    The packet is created by `register()` on the launching thread, the call
    itself happens in `run()` on the network thread. The lock is never held
    while waiting for the server.
    """

    def __init__(
        self,
        url: str,
        reading: Reading,
        key: str,
        state: VisualState,
        start_x: float,
        color: Color,
    ) -> None:
        self.url = url
        self.reading = reading
        self.key = key

        self._state = state
        self._start_x = start_x
        self._color = color
        self._packet: Packet | None = None

    def register(self) -> None:
        (target_x, target_y) = API_ICON_POSITION

        self._packet = Packet(
            key=self.key,
            x=self._start_x,
            y=PIPELINE_Y,
            target_x=target_x,
            target_y=target_y,
            color=self._color,
            status=PacketStatus.SendingToAPI,
        )

        self._state.add_packet(self._packet)

    async def run(self, session: ClientSession) -> None:
        assert self._packet is not None, "register() must be called before run()"

        ok = False

        try:
            async with session.post(self.url, json=self.reading.to_json()) as resp:
                ok = 200 <= resp.status < 300

                if not ok:
                    logger.warning(f"Sensor {self.key} rejected with HTTP {resp.status}")

        except (ClientError, OSError) as e:
            logger.warning(f"Sensor {self.key} call failed: {e!r}")

        self._complete(ok)

    # == Private == #

    def _complete(self, ok: bool) -> None:
        with self._state.lock:
            packet = self._state.packets.get(self.key)

            # Only the packet of this run, and only once
            if packet is not self._packet or packet.status != PacketStatus.SendingToAPI:
                logger.debug(f"Dropping stale result for sensor {self.key}")
                return

            if ok:
                packet.payload = self.reading
                packet.status = PacketStatus.ArrivedAtAPI
            else:
                packet.status = PacketStatus.Error

        if ok:
            logger.info(f"📨 Sensor {self.key} accepted by the API")
