"""Tests for the dual-rate scheduler."""

from chip8vm import Chip8VM, HeadlessDisplay, MachineConfig
from chip8vm.scheduler import Scheduler
from tests.helpers import INSTRUCTION_NS, TIMER_NS, FakeClock, program


class TestScheduler:
    """Scheduler tests."""

    def test_periods_from_config(self, scheduler):
        assert scheduler.instruction_period == INSTRUCTION_NS
        assert scheduler.timer_period == TIMER_NS

    def test_nothing_fires_before_a_period(self, vm, scheduler, clock):
        vm.load(program(0x6001))
        clock.advance(INSTRUCTION_NS - 1)
        tick = scheduler.poll()
        assert not tick.instruction
        assert not tick.timers
        assert vm.state.PC == 0x200

    def test_scenario_two_instruction_ticks(self, vm, scheduler, clock):
        vm.load(bytes([0x60, 0x0A, 0x70, 0x05]))
        for _ in range(2):
            clock.advance(INSTRUCTION_NS)
            assert scheduler.poll().instruction
        assert vm.state.V[0] == 0x0F
        assert vm.state.PC == 0x204

    def test_elapsed_time_is_absorbed_not_caught_up(self, vm, scheduler, clock):
        """A long stall runs one instruction, not one per missed period."""
        vm.load(program(*([0x7001] * 20)))
        clock.advance(INSTRUCTION_NS * 10)
        scheduler.poll()
        assert vm.state.V[0] == 1
        scheduler.poll()
        assert vm.state.V[0] == 1
        clock.advance(INSTRUCTION_NS)
        scheduler.poll()
        assert vm.state.V[0] == 2

    def test_timer_clock_is_independent(self, vm, display, scheduler, clock):
        vm.load(program(*([0x7001] * 20)))
        vm.state.delay_timer = 5
        vm.state.sound_timer = 5

        ticks = []
        for _ in range(9):
            clock.advance(INSTRUCTION_NS)
            ticks.append(scheduler.poll())

        assert all(t.instruction for t in ticks)
        assert [t.timers for t in ticks] == [False] * 8 + [True]
        assert vm.state.V[0] == 9
        assert vm.state.delay_timer == 4
        assert vm.state.sound_timer == 4
        assert display.audio_signals == 1

    def test_both_clocks_can_fire_together(self, vm, scheduler, clock):
        vm.load(program(0x6001))
        clock.advance(TIMER_NS)
        tick = scheduler.poll()
        assert tick.instruction and tick.timers

    def test_timers_keep_running_while_awaiting_key(self, vm, display, scheduler, clock):
        vm.load(program(0xF00A, 0x6101))
        vm.state.delay_timer = 10

        clock.advance(INSTRUCTION_NS)
        assert scheduler.poll().instruction
        assert scheduler.awaiting_key

        for _ in range(3):
            clock.advance(TIMER_NS)
            tick = scheduler.poll()
            assert tick.timers
            assert not tick.instruction

        assert vm.state.delay_timer == 7
        assert vm.state.V[1] == 0

        display.press(4)
        clock.advance(INSTRUCTION_NS)
        scheduler.poll()
        assert vm.state.V[0] == 4
        assert not scheduler.awaiting_key
        clock.advance(INSTRUCTION_NS)
        scheduler.poll()
        assert vm.state.V[1] == 1

    def test_time_until_next(self, scheduler, clock):
        assert scheduler.time_until_next() == INSTRUCTION_NS
        clock.advance(INSTRUCTION_NS // 2)
        assert scheduler.time_until_next() == INSTRUCTION_NS // 2
        clock.advance(INSTRUCTION_NS * 3)
        assert scheduler.time_until_next() == 0

    def test_resync_restarts_both_clocks(self, vm, scheduler, clock):
        vm.load(program(0x6001))
        clock.advance(TIMER_NS * 5)
        scheduler.resync()
        tick = scheduler.poll()
        assert not tick.instruction and not tick.timers

    def test_custom_clock_rate(self):
        clock = FakeClock()
        vm = Chip8VM(HeadlessDisplay(), MachineConfig(seed=1, clock_hz=1000))
        vm.load(program(0x7001, 0x7001))
        scheduler = Scheduler(vm, clock=clock)
        clock.advance(1_000_000)
        scheduler.poll()
        assert vm.state.V[0] == 1
