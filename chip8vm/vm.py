"""The CHIP-8 virtual machine: program loading, instruction stepping, timers."""

import logging
from pathlib import Path
from typing import Optional, Union

from .config import MachineConfig
from .constants import MAX_ADDRESS
from .display import Display
from .dispatch import execute_instruction
from .errors import Chip8Error, LoadError, MemoryFault, UnsupportedOpcode
from .instructions import decode, disassemble
from .memory import check_program_size
from .state import CPUState

logger = logging.getLogger(__name__)


def read_program(path: Union[str, Path]) -> bytes:
    """Read and size-check a program file; failures raise LoadError."""
    try:
        with open(path, "rb") as f:
            program = f.read()
    except OSError as e:
        raise LoadError(f"cannot read {path}: {e.strerror or e}") from e
    check_program_size(program)
    return program


class Chip8VM:
    """Machine state plus the display it draws to."""

    def __init__(self, display: Display, config: Optional[MachineConfig] = None):
        self.display = display
        self.config = config or MachineConfig()
        self.state = CPUState(stack_depth=self.config.stack_depth, seed=self.config.seed)
        self.steps = 0
        logger.debug("machine created, rng seed %d", self.state.seed)

    def load(self, program: bytes) -> None:
        """Load ROM data into memory at 0x200."""
        self.state.memory.load_program(program)
        logger.info("loaded %d byte program", len(program))

    def load_file(self, path: Union[str, Path]) -> None:
        self.load(read_program(path))

    def fetch(self) -> int:
        """Fetch the 16-bit opcode at PC without advancing."""
        return self.state.memory.read_word(self.state.PC)

    def step(self) -> bool:
        """Execute one instruction.

        While a key wait is pending the display is polled instead, and
        no instruction runs. Returns True if an instruction executed.
        """
        state = self.state

        if state.waiting_for_key:
            key = self.display.next_key(block=False)
            if key is None:
                return False
            self._deliver_key(key)
            return False

        pc = state.PC
        try:
            word = self.fetch()
            instr = decode(word)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "executing 0x%04X %-16s pc: %03X  i: %03X  sp: %d",
                    word, disassemble(word), pc, state.I, state.SP,
                )

            try:
                new_pc = execute_instruction(instr, state, self.display)
            except UnsupportedOpcode:
                if self.config.strict_opcodes:
                    raise
                logger.warning("unsupported instruction 0x%04X at $%03X, skipped", word, pc)
                new_pc = None

            if new_pc is None:
                new_pc = pc + 2
            if new_pc > MAX_ADDRESS:
                raise MemoryFault(f"program counter out of range: 0x{new_pc:X}")
            state.PC = new_pc
            self.steps += 1

            if state.waiting_for_key and self.config.blocking_key_wait:
                key = self.display.next_key()
                if key is not None:
                    self._deliver_key(key)
        except Chip8Error as e:
            e.attach(step=self.steps, addr=pc, state=state.snapshot())
            raise

        return True

    def _deliver_key(self, key: int) -> None:
        self.state.V[self.state.key_register] = key & 0xF
        self.state.waiting_for_key = False
        logger.debug("key %X delivered to V%X", key, self.state.key_register)

    def tick_timers(self) -> None:
        """Decrement timers (call at 60Hz)"""
        if self.state.tick_timers():
            logger.debug("buzz")
            self.display.signal_audio()
