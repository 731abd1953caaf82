"""CHIP-8 machine state and flag-setting arithmetic."""

import os
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constants import MAX_ADDRESS, NUM_REGISTERS, PROGRAM_START, STACK_SIZE
from .errors import MemoryFault, StackOverflow, StackUnderflow
from .memory import Memory


def wrapping_add(a: int, b: int) -> Tuple[int, int]:
    """8-bit add, returns ``(sum mod 256, carry)``."""
    result = a + b
    return result & 0xFF, 1 if result > 0xFF else 0


def wrapping_sub(a: int, b: int) -> Tuple[int, int]:
    """8-bit subtract, returns ``(difference mod 256, not borrow)``."""
    result = a - b
    if result < 0:
        return result + 256, 0
    return result, 1


def entropy_seed() -> int:
    return int.from_bytes(os.urandom(8), "big")


@dataclass
class CPUState:
    """CHIP-8 CPU state container"""
    # Memory
    memory: Memory = field(default_factory=Memory)

    # Registers
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0              # Index register
    PC: int = PROGRAM_START # Program counter
    SP: int = 0             # Stack pointer

    # Stack
    stack_depth: int = STACK_SIZE
    stack: List[int] = field(init=False)

    # Timers (60Hz)
    delay_timer: int = 0
    sound_timer: int = 0

    # Wait for key state
    waiting_for_key: bool = False
    key_register: int = 0

    # Random source, seeded once
    seed: Optional[int] = None
    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self):
        self.stack = [0] * self.stack_depth
        if self.seed is None:
            self.seed = entropy_seed()
        self.rng = random.Random(self.seed)

    # ─── Stack ───

    def push(self, address: int) -> None:
        if self.SP >= self.stack_depth:
            raise StackOverflow(f"call stack full ({self.stack_depth} levels)")
        self.stack[self.SP] = address
        self.SP += 1

    def pop(self) -> int:
        """Return the top address and clear its slot."""
        if self.SP == 0:
            raise StackUnderflow("return with an empty call stack")
        self.SP -= 1
        address = self.stack[self.SP]
        self.stack[self.SP] = 0
        return address

    def peek(self) -> int:
        if self.SP == 0:
            raise StackUnderflow("peek at an empty call stack")
        return self.stack[self.SP - 1]

    # ─── Registers ───

    def set_index(self, value: int) -> None:
        if not 0 <= value <= MAX_ADDRESS:
            raise MemoryFault(f"index register out of range: 0x{value:X}")
        self.I = value

    def random_byte(self) -> int:
        return self.rng.randrange(256)

    # ─── Timers ───

    def tick_timers(self) -> bool:
        """Decay both timers by one; True when the sound timer was running."""
        if self.delay_timer > 0:
            self.delay_timer -= 1

        buzzing = self.sound_timer > 0
        if buzzing:
            self.sound_timer -= 1
        return buzzing

    def snapshot(self) -> dict:
        """Register and stack state as a plain dict."""
        return {
            "pc": self.PC,
            "i": self.I,
            "sp": self.SP,
            "v": list(self.V),
            "stack": self.stack[:self.SP],
            "delay": self.delay_timer,
            "sound": self.sound_timer,
            "waiting_for_key": self.waiting_for_key,
        }
