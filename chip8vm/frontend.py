"""pygame window implementing the display/input capability."""

import logging
import time
from collections import deque
from typing import Deque, List, Optional, Tuple

import numpy as np
import pygame

from .constants import (
    BEEP_FREQUENCY,
    BEEP_SECONDS,
    BLOOM_STRENGTH,
    BLUR_RADIUS,
    COLORS,
    DISPLAY_H,
    DISPLAY_W,
    FRAME_HZ,
    GLOW_UPSCALE,
    MAX_ADDRESS,
    NS_PER_SECOND,
    NUM_KEYS,
    SAMPLE_RATE,
    SCALE,
)
from .display import Framebuffer
from .instructions import disassemble
from .scheduler import Scheduler
from .vm import Chip8VM

logger = logging.getLogger(__name__)

# Keyboard mapping (QWERTY -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


# ═══════════════════════════════════════════════════════════════════════════════
# GLOW EFFECT SYSTEM
# ═══════════════════════════════════════════════════════════════════════════════

class GlowRenderer:
    """Phosphor glow/bloom post-processing effect"""

    def __init__(self, width: int, height: int, scale: int,
                 fg_color: Tuple[int, int, int] = COLORS['fg_green'],
                 bg_color: Tuple[int, int, int] = COLORS['bg_dark']):
        self.width = width
        self.height = height
        self.fg_color = fg_color
        self.bg_color = bg_color
        self.bloom_strength = BLOOM_STRENGTH
        self.blur_radius = BLUR_RADIUS
        self.glow_upscale = GLOW_UPSCALE

        self.final_size = (width * scale, height * scale)

    @staticmethod
    def box_blur(arr: np.ndarray, passes: int = 1) -> np.ndarray:
        """Fast box blur using rolling averages"""
        a = arr.copy()
        for _ in range(passes):
            a = (np.roll(a, 1, axis=0) + a + np.roll(a, -1, axis=0)) / 3.0
            a = (np.roll(a, 1, axis=1) + a + np.roll(a, -1, axis=1)) / 3.0
        return a

    def colorize(self, intensity: np.ndarray) -> np.ndarray:
        """(w, h) intensities in 0..1 -> (w, h, 3) RGB bytes."""
        color = np.array(self.fg_color, dtype=np.float32)
        return (intensity[:, :, np.newaxis] * color).astype(np.uint8)

    def render(self, pixels: np.ndarray) -> Tuple[pygame.Surface, pygame.Surface]:
        """
        Convert a (height, width) 0/1 framebuffer to glow surfaces

        Returns:
            (base_surface, glow_surface) tuple
        """
        # surfarray is indexed [x, y]
        base = pixels.T.astype(np.float32)

        up = np.repeat(np.repeat(base, self.glow_upscale, axis=0), self.glow_upscale, axis=1)
        glow = self.box_blur(up, passes=1 + self.blur_radius)
        glow = np.clip(glow * self.bloom_strength, 0.0, 1.0)

        base_surf = pygame.surfarray.make_surface(self.colorize(base))
        glow_surf = pygame.surfarray.make_surface(self.colorize(glow))

        base_final = pygame.transform.scale(base_surf, self.final_size)
        glow_final = pygame.transform.smoothscale(glow_surf, self.final_size)
        return base_final, glow_final

    def create_background(self) -> pygame.Surface:
        """Create CRT-style background with scanlines"""
        surf = pygame.Surface(self.final_size)
        surf.fill(self.bg_color)

        scanline = tuple(min(c + 5, 255) for c in self.bg_color)
        for y in range(0, self.final_size[1], 2):
            pygame.draw.line(surf, scanline, (0, y), (self.final_size[0], y))
        return surf


def build_beep(frequency: int = BEEP_FREQUENCY, seconds: float = BEEP_SECONDS) -> np.ndarray:
    """Square wave matching the mixer's sample rate and channel count."""
    rate, size, channels = pygame.mixer.get_init()
    amplitude = 2 ** (abs(size) - 1) - 1
    t = np.arange(int(rate * seconds))
    half_periods = (t * frequency * 2) // rate
    wave = np.where(half_periods % 2 == 0, amplitude, -amplitude).astype(np.int16)
    if channels > 1:
        wave = np.repeat(wave[:, np.newaxis], channels, axis=1)
    return np.ascontiguousarray(wave)


# ═══════════════════════════════════════════════════════════════════════════════
# WINDOW
# ═══════════════════════════════════════════════════════════════════════════════

class PygameDisplay:
    """Window, keyboard and speaker for the interpreter."""

    def __init__(self, scale: int = SCALE, title: str = "CHIP-8"):
        pygame.mixer.pre_init(frequency=SAMPLE_RATE, size=-16, channels=1)
        pygame.init()
        pygame.display.set_caption(title)

        self.framebuffer = Framebuffer(DISPLAY_W, DISPLAY_H)
        self.renderer = GlowRenderer(DISPLAY_W, DISPLAY_H, scale)
        self.screen = pygame.display.set_mode(self.renderer.final_size)
        self.background = self.renderer.create_background()
        self.font = pygame.font.Font(None, 20)

        self.keys: List[bool] = [False] * NUM_KEYS
        self.pending: Deque[int] = deque()
        self.want_key = False

        self.open = True
        self.paused = False
        self.show_debug = False

        self._beep: Optional[pygame.mixer.Sound] = None
        self._channel: Optional[pygame.mixer.Channel] = None
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            self._beep = pygame.sndarray.make_sound(build_beep())
        except pygame.error as e:
            logger.warning("audio unavailable, running silent: %s", e)

    # ─── Display capability ───

    def clear(self) -> None:
        self.framebuffer.clear()

    def set_pixel(self, x: int, y: int, value: bool) -> bool:
        return self.framebuffer.set_pixel(x, y, value)

    def is_key_pressed(self, key: int) -> bool:
        return self.keys[key]

    def next_key(self, block: bool = True) -> Optional[int]:
        """Next key pressed after the wait started.

        Presses made before the first call of a wait are not queued, and
        only the first press of a wait is kept.
        """
        if self.pending:
            return self._take_key()

        self.want_key = True
        if not block:
            return None

        while self.open:
            self.handle_event(pygame.event.wait())
            if self.pending:
                return self._take_key()
        return None

    def _take_key(self) -> int:
        key = self.pending.popleft()
        self.pending.clear()
        self.want_key = False
        return key

    def signal_audio(self) -> None:
        if self._beep is None:
            return
        if self._channel is None or not self._channel.get_busy():
            self._channel = self._beep.play()

    # ─── Events ───

    def is_open(self) -> bool:
        return self.open

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.open = False

        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.open = False
            elif event.key == pygame.K_p:
                self.paused = not self.paused
            elif event.key == pygame.K_F1:
                self.show_debug = not self.show_debug
            elif event.key in KEY_MAP:
                key = KEY_MAP[event.key]
                self.keys[key] = True
                if self.want_key and not self.pending:
                    self.pending.append(key)

        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAP:
                self.keys[KEY_MAP[event.key]] = False

    def pump(self) -> None:
        """Process input events"""
        for event in pygame.event.get():
            self.handle_event(event)

    # ─── Drawing ───

    def render(self, overlay: Optional[List[str]] = None) -> None:
        self.screen.fill(COLORS['bg_dark'])
        self.screen.blit(self.background, (0, 0))

        base_surf, glow_surf = self.renderer.render(self.framebuffer.pixels)
        self.screen.blit(glow_surf, (0, 0), special_flags=pygame.BLEND_ADD)
        self.screen.blit(base_surf, (0, 0), special_flags=pygame.BLEND_ADD)

        if overlay:
            self._render_overlay(overlay)

        pygame.display.flip()

    def _render_overlay(self, lines: List[str]) -> None:
        width = 230
        panel = pygame.Surface((width, 10 + 18 * len(lines)), pygame.SRCALPHA)
        panel.fill(COLORS['overlay'])
        left = self.screen.get_width() - width - 10
        self.screen.blit(panel, (left, 10))

        for i, line in enumerate(lines):
            text = self.font.render(line, True, COLORS['fg_green'])
            self.screen.blit(text, (left + 5, 15 + i * 18))

    def close(self) -> None:
        pygame.quit()


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN LOOP
# ═══════════════════════════════════════════════════════════════════════════════

def debug_lines(vm: Chip8VM) -> List[str]:
    """Register dump and the next instruction."""
    s = vm.state
    lines = [
        f"PC: ${s.PC:03X}  I: ${s.I:03X}",
        f"SP: {s.SP}  DT: {s.delay_timer:02X}  ST: {s.sound_timer:02X}",
        "V0-V7: " + " ".join(f"{v:02X}" for v in s.V[:8]),
        "V8-VF: " + " ".join(f"{v:02X}" for v in s.V[8:]),
    ]
    if s.waiting_for_key:
        lines.append(f"waiting for key -> V{s.key_register:X}")
    elif s.PC < MAX_ADDRESS:
        opcode = vm.fetch()
        lines.append(f"OP: ${opcode:04X} {disassemble(opcode)}")
    return lines


class Emulator:
    """Runs the scheduler against a pygame window until it is closed."""

    def __init__(self, vm: Chip8VM, display: PygameDisplay):
        self.vm = vm
        self.display = display
        self.scheduler = Scheduler(vm)
        self.frame_ns = NS_PER_SECOND // FRAME_HZ
        self.last_frame = 0

    def update(self) -> None:
        was_paused = self.display.paused
        self.display.pump()

        if self.display.paused:
            return
        if was_paused:
            self.scheduler.resync()
        self.scheduler.poll()

    def render(self) -> None:
        now = time.monotonic_ns()
        if now - self.last_frame < self.frame_ns:
            return
        self.last_frame = now
        self.display.render(debug_lines(self.vm) if self.display.show_debug else None)

    def run(self) -> None:
        """Main loop"""
        try:
            while self.display.is_open():
                self.update()
                self.render()

                if self.display.paused:
                    idle = self.frame_ns
                else:
                    idle = self.scheduler.time_until_next()
                if idle > 0:
                    time.sleep(min(idle, self.frame_ns) / NS_PER_SECOND)
        finally:
            self.display.close()
