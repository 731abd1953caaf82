"""Dual-rate clock driving instruction execution and timer decay.

Both clocks are checked against one monotonic reading per call. A clock
that has fallen behind fires once and resynchronises to the current
reading; missed periods are dropped, not caught up.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .vm import Chip8VM


@dataclass
class Tick:
    """What a single ``Scheduler.poll`` did."""
    instruction: bool = False   # an instruction executed
    timers: bool = False


class Scheduler:
    """Interleaves the ~500Hz instruction clock and the 60Hz timer clock."""

    def __init__(
        self,
        vm: Chip8VM,
        clock: Callable[[], int] = time.monotonic_ns,
    ):
        self.vm = vm
        self.clock = clock
        self.instruction_period = vm.config.instruction_period_ns
        self.timer_period = vm.config.timer_period_ns

        now = clock()
        self.last_instruction = now
        self.last_timer = now

    @property
    def awaiting_key(self) -> bool:
        return self.vm.state.waiting_for_key

    def poll(self, now: Optional[int] = None) -> Tick:
        """Run whichever clocks have elapsed."""
        if now is None:
            now = self.clock()
        tick = Tick()

        if now >= self.last_instruction + self.instruction_period:
            self.last_instruction = now
            tick.instruction = self.vm.step()

        if now >= self.last_timer + self.timer_period:
            self.last_timer = now
            self.vm.tick_timers()
            tick.timers = True

        return tick

    def resync(self) -> None:
        """Restart both clocks from now, e.g. after a pause."""
        now = self.clock()
        self.last_instruction = now
        self.last_timer = now

    def time_until_next(self, now: Optional[int] = None) -> int:
        """Nanoseconds until either clock is due (0 if one already is)."""
        if now is None:
            now = self.clock()
        due = min(
            self.last_instruction + self.instruction_period,
            self.last_timer + self.timer_period,
        )
        return max(0, due - now)
