"""Display/input capability used by the interpreter core.

The core only ever talks to a ``Display``. ``Framebuffer`` holds the
XOR-drawn pixels for any implementation; ``HeadlessDisplay`` is a
windowless implementation driven programmatically.
"""

from collections import deque
from enum import IntEnum
from typing import Deque, List, Optional, Protocol

import numpy as np

from .constants import DISPLAY_H, DISPLAY_W, NUM_KEYS
from .errors import NoKeyAvailable


class Key(IntEnum):
    """Hex keypad keys.

    Keypad:    Keyboard:
    1 2 3 C    1 2 3 4
    4 5 6 D    Q W E R
    7 8 9 E    A S D F
    A 0 B F    Z X C V
    """
    K0 = 0x0
    K1 = 0x1
    K2 = 0x2
    K3 = 0x3
    K4 = 0x4
    K5 = 0x5
    K6 = 0x6
    K7 = 0x7
    K8 = 0x8
    K9 = 0x9
    KA = 0xA
    KB = 0xB
    KC = 0xC
    KD = 0xD
    KE = 0xE
    KF = 0xF


class Display(Protocol):
    def clear(self) -> None:
        ...

    def set_pixel(self, x: int, y: int, value: bool) -> bool:
        """XOR pixel (x, y) with ``value``; True if it went from set to unset."""
        ...

    def is_key_pressed(self, key: int) -> bool:
        ...

    def next_key(self, block: bool = True) -> Optional[int]:
        """Next mapped key press; None if ``block`` is False and none is pending."""
        ...

    def signal_audio(self) -> None:
        ...


class Framebuffer:
    """64x32 monochrome pixel buffer with wrapping XOR writes."""

    def __init__(self, width: int = DISPLAY_W, height: int = DISPLAY_H):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)

    def clear(self) -> None:
        self.pixels.fill(0)

    def set_pixel(self, x: int, y: int, value: bool) -> bool:
        px = x % self.width
        py = y % self.height

        old = bool(self.pixels[py, px])
        new = old ^ bool(value)
        self.pixels[py, px] = new

        # collision only when a lit pixel goes dark
        return old and not new

    def get_pixel(self, x: int, y: int) -> bool:
        return bool(self.pixels[y % self.height, x % self.width])

    def lit_count(self) -> int:
        return int(np.count_nonzero(self.pixels))


class HeadlessDisplay:
    """Display without a window: keys are fed in, audio requests are counted."""

    def __init__(self, width: int = DISPLAY_W, height: int = DISPLAY_H):
        self.framebuffer = Framebuffer(width, height)
        self.keys: List[bool] = [False] * NUM_KEYS
        self.pending: Deque[int] = deque()
        self.audio_signals = 0

    def press(self, key: int) -> None:
        self.keys[key] = True
        self.pending.append(key)

    def release(self, key: int) -> None:
        self.keys[key] = False

    def clear(self) -> None:
        self.framebuffer.clear()

    def set_pixel(self, x: int, y: int, value: bool) -> bool:
        return self.framebuffer.set_pixel(x, y, value)

    def is_key_pressed(self, key: int) -> bool:
        return self.keys[key]

    def next_key(self, block: bool = True) -> Optional[int]:
        if self.pending:
            return self.pending.popleft()
        if block:
            # nothing can ever arrive without a window to deliver it
            raise NoKeyAvailable("no key press pending on a headless display")
        return None

    def signal_audio(self) -> None:
        self.audio_signals += 1
