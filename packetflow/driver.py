from loguru import logger

from .config import (
    ICON_ACTIVE_FRAMES,
    MONITOR_POSITION,
    PACKET_SPEED,
    RABBIT_ICON_POSITION,
    WEBSOCKET_ICON_POSITION,
)
from .state import Dashboard, VisualState
from .types import (
    DistanceReading,
    OrientationReading,
    Packet,
    PacketStatus,
    Reading,
    SharpnessReading,
)
from .utils.math import step_towards


class PacketDriver:
    """
    The PacketDriver advances the finite-state machine of every packet once
    per frame. Transitions only happen when a packet sits exactly on its
    target; apart from the first hop (which waits for the sensor worker) the
    journey is driven by position alone.
    """

    def __init__(self, state: VisualState) -> None:
        self._state = state

    def update(self) -> None:
        """
        Runs one simulation step. The state lock is held for the whole step,
        so workers see either the previous or the next frame, never a mix.
        """

        with self._state.lock:
            self._state.timers.tick()

            all_done = True

            for packet in self._state.packets.values():
                if packet.status.is_terminal():
                    continue

                all_done = False

                packet.x = step_towards(packet.x, packet.target_x, PACKET_SPEED)
                packet.y = packet.target_y

                if packet.x == packet.target_x:
                    self._on_arrival(packet)

            if all_done and self._state.running:
                self._state.running = False
                logger.info("🏁 Run finished")

    # == Private == #

    def _on_arrival(self, packet: Packet) -> None:
        timers = self._state.timers

        match packet.status:
            case PacketStatus.ArrivedAtAPI:
                timers.api = ICON_ACTIVE_FRAMES
                self._send(packet, PacketStatus.SendingToRabbit, RABBIT_ICON_POSITION)

            case PacketStatus.SendingToRabbit:
                packet.status = PacketStatus.ArrivedAtRabbit

            case PacketStatus.ArrivedAtRabbit:
                timers.rabbit = ICON_ACTIVE_FRAMES
                self._send(packet, PacketStatus.SendingToWebsocket, WEBSOCKET_ICON_POSITION)

            case PacketStatus.SendingToWebsocket:
                packet.status = PacketStatus.ArrivedAtWebsocket

            case PacketStatus.ArrivedAtWebsocket:
                timers.websocket = ICON_ACTIVE_FRAMES
                self._send(packet, PacketStatus.SendingToFrontend, MONITOR_POSITION)

            case PacketStatus.SendingToFrontend:
                packet.status = PacketStatus.Done
                packet.active = False

                if packet.payload is not None:
                    display(self._state.dashboard, packet.payload)

                logger.debug(f"Packet {packet.key} delivered to the frontend")

            case _:
                # SendingToAPI waits at the API icon for its worker
                pass

    def _send(self, packet: Packet, status: PacketStatus, target: tuple[float, float]) -> None:
        packet.status = status
        (packet.target_x, packet.target_y) = target


def display(dashboard: Dashboard, reading: Reading) -> None:
    """Writes the one dashboard field that corresponds to the reading."""

    match reading:
        case DistanceReading(distance_m=distance):
            dashboard.distance_m = distance

        case OrientationReading(roll=roll):
            dashboard.roll = roll

        case SharpnessReading(sharpness=sharpness):
            dashboard.sharpness = sharpness
