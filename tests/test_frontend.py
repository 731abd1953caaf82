"""Tests for the pygame frontend, run against SDL's dummy drivers."""

import os

import numpy as np
import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

pygame = pytest.importorskip("pygame")

from chip8vm import Chip8VM, MachineConfig  # noqa: E402
from chip8vm.frontend import (  # noqa: E402
    KEY_MAP,
    Emulator,
    GlowRenderer,
    PygameDisplay,
    debug_lines,
)
from tests.helpers import program  # noqa: E402


@pytest.fixture
def window():
    display = PygameDisplay(scale=2)
    yield display
    display.close()


def key_event(kind, key):
    return pygame.event.Event(kind, key=key, mod=0, unicode="", scancode=0)


class TestGlowRenderer:
    """Renderer math."""

    def test_box_blur_preserves_total(self):
        arr = np.zeros((8, 8), dtype=np.float32)
        arr[4, 4] = 9.0
        blurred = GlowRenderer.box_blur(arr, passes=1)
        assert blurred.sum() == pytest.approx(9.0)
        assert blurred[4, 4] == pytest.approx(1.0)

    def test_colorize(self):
        renderer = GlowRenderer(4, 2, 1, fg_color=(200, 100, 0))
        rgb = renderer.colorize(np.array([[1.0, 0.5]], dtype=np.float32))
        assert rgb.shape == (1, 2, 3)
        assert rgb[0, 0].tolist() == [200, 100, 0]
        assert rgb[0, 1].tolist() == [100, 50, 0]


class TestPygameDisplay:
    """Window-backed display capability."""

    def test_keymap_covers_keypad(self):
        assert sorted(KEY_MAP.values()) == list(range(16))

    def test_key_state_follows_events(self, window):
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_q))
        assert window.is_key_pressed(0x4)
        window.handle_event(key_event(pygame.KEYUP, pygame.K_q))
        assert not window.is_key_pressed(0x4)

    def test_presses_before_wait_are_ignored(self, window):
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_v))
        assert window.next_key(block=False) is None
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_x))
        assert window.next_key(block=False) == 0x0
        assert not window.want_key

    def test_extra_presses_do_not_answer_the_next_wait(self, window):
        vm = Chip8VM(window, MachineConfig(seed=1))
        vm.load(program(0xF00A, 0x6255, 0xF10A))
        vm.step()
        vm.step()
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_c))
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_v))
        vm.step()
        assert vm.state.V[0] == 0xB
        vm.step()
        vm.step()
        vm.step()
        assert vm.state.waiting_for_key
        assert vm.state.V[1] == 0

    def test_unmapped_keys_do_not_resume_wait(self, window):
        assert window.next_key(block=False) is None
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_m))
        assert window.next_key(block=False) is None

    def test_control_keys(self, window):
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_p))
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_F1))
        assert window.paused and window.show_debug
        window.handle_event(key_event(pygame.KEYDOWN, pygame.K_ESCAPE))
        assert not window.is_open()

    def test_quit_event_closes(self, window):
        window.handle_event(pygame.event.Event(pygame.QUIT))
        assert not window.is_open()

    def test_pixels_and_render(self, window):
        assert window.set_pixel(1, 1, True) is False
        assert window.set_pixel(1, 1, True) is True
        window.set_pixel(5, 5, True)
        window.render(["PC: $200"])
        window.clear()
        assert window.framebuffer.lit_count() == 0

    def test_signal_audio_without_error(self, window):
        window.signal_audio()
        window.signal_audio()


class TestEmulator:
    """Host loop pieces."""

    def test_debug_lines(self, window):
        vm = Chip8VM(window, MachineConfig(seed=1))
        vm.load(program(0x6012))
        lines = debug_lines(vm)
        assert lines[0] == "PC: $200  I: $000"
        assert lines[-1] == "OP: $6012 LD V0, $12"

    def test_run_stops_when_window_closes(self, window):
        vm = Chip8VM(window, MachineConfig(seed=1))
        vm.load(program(0x1200))
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        Emulator(vm, window).run()
        assert not window.is_open()
