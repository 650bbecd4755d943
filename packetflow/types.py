from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

Coords = tuple[float, float]

# OpenCV colour order
Color = tuple[int, int, int]

GREEN: Color = (0, 255, 0)
BLUE: Color = (255, 0, 0)
RED: Color = (0, 0, 255)


class PacketStatus(Enum):
    """Pipeline stages of a packet, in travel order."""

    Idle = 0
    SendingToAPI = 1
    ArrivedAtAPI = 2
    SendingToRabbit = 3
    ArrivedAtRabbit = 4
    SendingToWebsocket = 5
    ArrivedAtWebsocket = 6
    SendingToFrontend = 7
    Done = 8
    Error = 9

    def is_terminal(self) -> bool:
        return self in (PacketStatus.Done, PacketStatus.Error)


# == Readings == #


@dataclass(frozen=True)
class DistanceReading:
    """TF-Luna LiDAR sample."""

    distance_m: float
    signal_strength: int
    temperature_c: float
    timestamp: float

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OrientationReading:
    """MPU-6050 sample, angles in degrees and acceleration in g."""

    roll: float
    pitch: float
    yaw: float
    accel_x: float
    accel_y: float
    accel_z: float
    timestamp: float

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SharpnessReading:
    """IMX477 focus sample."""

    sharpness: float
    brightness: float
    timestamp: float

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


Reading = Union[DistanceReading, OrientationReading, SharpnessReading]


@dataclass
class Controls:
    """User input collected during one frame."""

    start: bool = False
    tilt: int = 0  # -1 left, +1 right
    button_down: bool = False
    fullscreen: bool = False
    quit: bool = False


@dataclass
class Packet:
    """
    One sensor reading travelling through the pipeline. The payload stays
    empty until the sensor call succeeds.
    """

    key: str
    x: float
    y: float
    target_x: float
    target_y: float
    color: Color
    status: PacketStatus = PacketStatus.Idle
    active: bool = True
    payload: Reading | None = None
