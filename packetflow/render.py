from __future__ import annotations

from math import cos, sin

import cv2  # type: ignore
import numpy as np
import numpy.typing as npt

from .config import (
    API_ICON_POSITION,
    BACKGROUND_COLOR,
    BUTTON_RECT,
    DASHBOARD_POSITION,
    MONITOR_POSITION,
    RABBIT_ICON_POSITION,
    TILT_LIMIT,
    TILT_METER_POSITION,
    TRIPOD_POSITION,
    WEBSOCKET_ICON_POSITION,
    WINDOW_SIZE,
)
from .state import Frame
from .types import Color, PacketStatus
from .utils.math import deg_to_rad

FONT = cv2.FONT_HERSHEY_SIMPLEX
WHITE: Color = (230, 230, 230)
GREY: Color = (110, 110, 110)
ACCENT: Color = (0, 200, 255)

ICON_SIZE = 48
PACKET_RADIUS = 8
BAR_SIZE = (160, 14)

# Tripod head angle per tilt frame (centre, slight l/r, extreme l/r)
TRIPOD_ANGLES = (0.0, -6.0, 6.0, -15.0, 15.0)


def _pt(x: float, y: float) -> tuple[int, int]:
    return (int(round(x)), int(round(y)))


class Renderer:
    """
    Draws a Frame onto a BGR canvas with OpenCV primitives. Holds only
    animation counters, never the visual state itself.
    """

    def __init__(self) -> None:
        self._tick = 0

    def draw(self, frame: Frame, button_down: bool = False) -> npt.NDArray:
        self._tick = (self._tick + 1) % 360

        (w, h) = WINDOW_SIZE
        canvas = np.full((h, w, 3), BACKGROUND_COLOR, dtype=np.uint8)

        self._draw_tripod(canvas, frame)
        self._draw_tilt_meter(canvas, frame.tilt)
        self._draw_button(canvas, button_down, frame.running)

        self._draw_icon(canvas, "API", API_ICON_POSITION, frame.timers.api)
        self._draw_icon(canvas, "Rabbit", RABBIT_ICON_POSITION, frame.timers.rabbit)
        self._draw_icon(canvas, "WS", WEBSOCKET_ICON_POSITION, frame.timers.websocket)
        self._draw_icon(canvas, "Monitor", MONITOR_POSITION, 0)

        self._draw_packets(canvas, frame)
        self._draw_dashboard(canvas, frame)

        return canvas

    # == Private == #

    def _draw_tripod(self, canvas: npt.NDArray, frame: Frame) -> None:
        (x, y) = TRIPOD_POSITION
        base = _pt(x, y + 60)

        for dx in (-30, 0, 30):
            cv2.line(canvas, base, _pt(x + dx, y + 110), GREY, 3)

        angle = deg_to_rad(TRIPOD_ANGLES[frame.tilt_frame()])
        head = _pt(x + 40 * sin(angle), y + 60 - 40 * cos(angle))
        cv2.line(canvas, base, head, WHITE, 4)
        cv2.circle(canvas, head, 10, ACCENT, -1)

    def _draw_tilt_meter(self, canvas: npt.NDArray, tilt: float) -> None:
        (x, y) = TILT_METER_POSITION
        centre = _pt(x, y + 40)

        cv2.ellipse(canvas, centre, (40, 40), 0, 180, 360, GREY, 2)

        angle = deg_to_rad(tilt / TILT_LIMIT * 90.0)
        tip = _pt(x + 36 * sin(angle), y + 40 - 36 * cos(angle))
        cv2.line(canvas, centre, tip, ACCENT, 2)
        cv2.putText(canvas, f"{tilt:+.1f} deg", _pt(x - 30, y + 60), FONT, 0.4, WHITE, 1)

    def _draw_button(self, canvas: npt.NDArray, down: bool, running: bool) -> None:
        (bx, by, bw, bh) = BUTTON_RECT

        fill = GREY if running else (60, 140, 60) if down else (80, 180, 80)
        offset = 2 if down else 0

        cv2.rectangle(canvas, (bx, by + offset), (bx + bw, by + bh + offset), fill, -1)
        cv2.putText(canvas, "Crear", (bx + 36, by + 29 + offset), FONT, 0.7, WHITE, 2)

    def _draw_icon(self, canvas: npt.NDArray, label: str, position: tuple[float, float], timer: int) -> None:
        (x, y) = position
        top_left = _pt(x - ICON_SIZE / 2, y - ICON_SIZE / 2)
        bottom_right = _pt(x + ICON_SIZE / 2, y + ICON_SIZE / 2)

        if timer > 0:
            pulse = 2 + (self._tick // 6) % 3
            cv2.rectangle(canvas, top_left, bottom_right, ACCENT, -1)
            cv2.rectangle(canvas, top_left, bottom_right, WHITE, pulse)
        else:
            cv2.rectangle(canvas, top_left, bottom_right, GREY, 2)

        cv2.putText(canvas, label, _pt(x - ICON_SIZE / 2, y + ICON_SIZE / 2 + 16), FONT, 0.4, WHITE, 1)

    def _draw_packets(self, canvas: npt.NDArray, frame: Frame) -> None:
        radius = PACKET_RADIUS + (self._tick // 6) % 2

        for packet in frame.packets:
            if not packet.active:
                continue

            centre = _pt(packet.x, packet.y)
            cv2.circle(canvas, centre, radius, packet.color, -1)

            if packet.status == PacketStatus.Error:
                cv2.putText(canvas, "X", _pt(packet.x + 10, packet.y - 10), FONT, 0.6, (0, 0, 255), 2)

    def _draw_dashboard(self, canvas: npt.NDArray, frame: Frame) -> None:
        (x, y) = DASHBOARD_POSITION
        d = frame.dashboard

        cv2.putText(canvas, "--- Dashboard de Resultados ---", _pt(x, y), FONT, 0.5, WHITE, 1)
        cv2.putText(canvas, f"Distancia: {d.distance_m:.2f} m", _pt(x, y + 24), FONT, 0.5, WHITE, 1)

        cv2.putText(canvas, "Nitidez:", _pt(x, y + 48), FONT, 0.5, WHITE, 1)
        (bw, bh) = BAR_SIZE
        bar = _pt(x + 80, y + 36)
        cv2.rectangle(canvas, bar, (bar[0] + bw, bar[1] + bh), GREY, 1)

        fill = int(bw * d.sharpness_ratio())
        if fill > 0:
            cv2.rectangle(canvas, bar, (bar[0] + fill, bar[1] + bh), (0, 200, 0), -1)

        cv2.putText(canvas, f"Inclinacion (Roll): {d.roll:.1f} deg", _pt(x, y + 72), FONT, 0.5, WHITE, 1)
