"""CHIP-8 interpreter core package."""

from .config import MachineConfig
from .display import Display, Framebuffer, HeadlessDisplay, Key
from .errors import (
    Chip8Error,
    LoadError,
    MachineFault,
    MemoryFault,
    NoKeyAvailable,
    StackOverflow,
    StackUnderflow,
    UnsupportedOpcode,
)
from .instructions import Instruction, Op, decode, disassemble
from .scheduler import Scheduler, Tick
from .vm import Chip8VM, read_program

__all__ = [
    "Chip8VM",
    "read_program",
    "MachineConfig",
    "Scheduler",
    "Tick",
    "Display",
    "Framebuffer",
    "HeadlessDisplay",
    "Key",
    "Instruction",
    "Op",
    "decode",
    "disassemble",
    "Chip8Error",
    "LoadError",
    "UnsupportedOpcode",
    "MachineFault",
    "StackOverflow",
    "StackUnderflow",
    "MemoryFault",
    "NoKeyAvailable",
]
