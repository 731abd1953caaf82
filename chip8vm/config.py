"""Run-time options for the interpreter."""

from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_CLOCK_HZ, NS_PER_SECOND, STACK_SIZE, TIMER_HZ


@dataclass
class MachineConfig:
    """Options for program execution."""
    clock_hz: int = DEFAULT_CLOCK_HZ
    timer_hz: int = TIMER_HZ
    stack_depth: int = STACK_SIZE
    seed: Optional[int] = None
    # Fx0A blocks the whole loop (timers included) instead of polling
    blocking_key_wait: bool = False
    # Unsupported opcodes are fatal instead of no-ops
    strict_opcodes: bool = False

    @property
    def instruction_period_ns(self) -> int:
        return NS_PER_SECOND // self.clock_hz

    @property
    def timer_period_ns(self) -> int:
        return NS_PER_SECOND // self.timer_hz
