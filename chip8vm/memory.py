"""Bounds-checked 4KB memory."""

from .constants import (
    FONT_ADDRESS,
    FONTSET,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
)
from .errors import LoadError, MemoryFault


def check_program_size(program: bytes) -> None:
    if len(program) > MAX_PROGRAM_SIZE:
        raise LoadError(
            f"program is {len(program)} bytes, the limit is {MAX_PROGRAM_SIZE}"
        )


class Memory:
    """Byte-addressable memory with the font table preloaded at 0x000."""

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._data = bytearray(size)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = FONTSET

    def _check_bounds(self, addr: int, length: int = 1) -> None:
        if addr < 0 or addr + length > self.size:
            if length == 1:
                raise MemoryFault(f"memory address out of range: 0x{addr:X}")
            raise MemoryFault(
                f"memory range out of bounds: 0x{addr:X}-0x{addr + length - 1:X}"
            )

    def read(self, addr: int) -> int:
        self._check_bounds(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        self._check_bounds(addr)
        self._data[addr] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian instruction word: high byte at ``addr``."""
        self._check_bounds(addr, 2)
        return (self._data[addr] << 8) | self._data[addr + 1]

    def read_block(self, addr: int, length: int) -> bytes:
        self._check_bounds(addr, length)
        return bytes(self._data[addr:addr + length])

    def write_block(self, addr: int, data: bytes) -> None:
        self._check_bounds(addr, len(data))
        self._data[addr:addr + len(data)] = data

    def load_program(self, program: bytes) -> None:
        """Copy ``program`` verbatim to 0x200.

        Oversized programs are rejected before anything is written.
        """
        check_program_size(program)
        self.write_block(PROGRAM_START, program)

    def snapshot(self) -> bytes:
        """Return a copy of the entire memory."""
        return bytes(self._data)
