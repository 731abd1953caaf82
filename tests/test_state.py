"""Tests for machine state, stack, timers and arithmetic."""

import pytest

from chip8vm.constants import PROGRAM_START, STACK_SIZE
from chip8vm.errors import MemoryFault, StackOverflow, StackUnderflow
from chip8vm.state import CPUState, wrapping_add, wrapping_sub


class TestArithmetic:
    """Exhaustive checks of the flag-setting helpers."""

    def test_wrapping_add_all_pairs(self):
        for a in range(256):
            for b in range(256):
                result, carry = wrapping_add(a, b)
                assert result == (a + b) % 256
                assert carry == (1 if a + b > 255 else 0)

    def test_wrapping_sub_all_pairs(self):
        for a in range(256):
            for b in range(256):
                result, no_borrow = wrapping_sub(a, b)
                assert result == (a - b) % 256
                assert no_borrow == (1 if a >= b else 0)

    def test_equal_operands_do_not_borrow(self):
        assert wrapping_sub(5, 5) == (0, 1)


class TestCPUState:
    """CPUState tests."""

    def test_initial_state(self):
        state = CPUState(seed=1)
        assert state.PC == PROGRAM_START
        assert state.I == 0
        assert state.SP == 0
        assert state.V == [0] * 16
        assert state.stack == [0] * STACK_SIZE
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert state.waiting_for_key is False

    def test_push_pop_clears_slot(self):
        state = CPUState(seed=1)
        state.push(0x202)
        state.push(0x304)
        assert state.peek() == 0x304
        assert state.pop() == 0x304
        assert state.stack[1] == 0
        assert state.pop() == 0x202
        assert state.SP == 0

    def test_stack_overflow(self):
        state = CPUState(seed=1)
        for i in range(STACK_SIZE):
            state.push(0x200 + 2 * i)
        with pytest.raises(StackOverflow):
            state.push(0x400)
        assert state.SP == STACK_SIZE

    def test_custom_stack_depth(self):
        state = CPUState(stack_depth=2, seed=1)
        state.push(1)
        state.push(2)
        with pytest.raises(StackOverflow):
            state.push(3)

    def test_stack_underflow(self):
        state = CPUState(seed=1)
        with pytest.raises(StackUnderflow):
            state.pop()
        with pytest.raises(StackUnderflow):
            state.peek()

    def test_set_index_bounds(self):
        state = CPUState(seed=1)
        state.set_index(0xFFF)
        assert state.I == 0xFFF
        with pytest.raises(MemoryFault):
            state.set_index(0x1000)
        assert state.I == 0xFFF

    def test_seeded_generators_agree(self):
        """Same seed, same sequence; instances do not share state."""
        a = CPUState(seed=99)
        b = CPUState(seed=99)
        first = [a.random_byte() for _ in range(32)]
        assert first == [b.random_byte() for _ in range(32)]
        assert all(0 <= v <= 255 for v in first)

    def test_unseeded_state_draws_a_seed(self):
        state = CPUState()
        assert isinstance(state.seed, int)

    def test_tick_timers(self):
        state = CPUState(seed=1)
        state.delay_timer = 2
        state.sound_timer = 1
        assert state.tick_timers() is True
        assert (state.delay_timer, state.sound_timer) == (1, 0)
        assert state.tick_timers() is False
        assert (state.delay_timer, state.sound_timer) == (0, 0)
        assert state.tick_timers() is False
        assert (state.delay_timer, state.sound_timer) == (0, 0)

    def test_snapshot(self):
        state = CPUState(seed=1)
        state.V[3] = 9
        state.push(0x20A)
        snap = state.snapshot()
        assert snap["pc"] == PROGRAM_START
        assert snap["v"][3] == 9
        assert snap["stack"] == [0x20A]
        assert snap["sp"] == 1
