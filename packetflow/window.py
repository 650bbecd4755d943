from __future__ import annotations

import cv2  # type: ignore
import numpy.typing as npt

from .config import BUTTON_RECT, WINDOW_NAME
from .types import Controls

# cv2.waitKeyEx codes differ between HighGUI backends (GTK, Win32, Cocoa)
KEYS_LEFT = {65361, 2424832, 63234, ord("a")}
KEYS_RIGHT = {65363, 2555904, 63235, ord("d")}
KEYS_FULLSCREEN = {65480, 7995392, ord("f")}
KEYS_QUIT = {27, ord("q")}


def in_button(x: int, y: int) -> bool:
    (bx, by, bw, bh) = BUTTON_RECT
    return bx <= x < bx + bw and by <= y < by + bh


class Window:
    """
    OpenCV HighGUI window. Mouse events arrive through a callback while
    `poll()` pumps the event queue, and are folded into one Controls per frame.
    """

    def __init__(self, name: str = WINDOW_NAME) -> None:
        self.name = name

        self._clicked = False
        self._button_down = False
        self._fullscreen = False

        cv2.namedWindow(self.name, cv2.WINDOW_NORMAL)
        cv2.setMouseCallback(self.name, self._on_mouse)

    def show(self, canvas: npt.NDArray) -> None:
        cv2.imshow(self.name, canvas)

    def poll(self, delay_ms: int) -> Controls:
        key = cv2.waitKeyEx(max(1, delay_ms))

        controls = Controls(
            start=self._clicked,
            button_down=self._button_down,
            tilt=-1 if key in KEYS_LEFT else 1 if key in KEYS_RIGHT else 0,
            fullscreen=key in KEYS_FULLSCREEN,
            quit=key in KEYS_QUIT or self.is_closed(),
        )

        self._clicked = False
        return controls

    def toggle_fullscreen(self) -> None:
        self._fullscreen = not self._fullscreen

        mode = cv2.WINDOW_FULLSCREEN if self._fullscreen else cv2.WINDOW_NORMAL
        cv2.setWindowProperty(self.name, cv2.WND_PROP_FULLSCREEN, mode)

    def is_closed(self) -> bool:
        return cv2.getWindowProperty(self.name, cv2.WND_PROP_VISIBLE) < 1

    def close(self) -> None:
        cv2.destroyWindow(self.name)

    # == Callbacks == #

    def _on_mouse(self, event: int, x: int, y: int, *_) -> None:
        match event:
            case cv2.EVENT_LBUTTONDOWN:
                self._button_down = in_button(x, y)
                self._clicked = self._clicked or self._button_down

            case cv2.EVENT_LBUTTONUP:
                self._button_down = False

            case _:
                pass
