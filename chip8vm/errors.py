"""Exceptions raised by the CHIP-8 interpreter."""

from typing import Optional


class Chip8Error(Exception):
    """Base exception for all interpreter errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        state: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.state = state

    def attach(self, step: int, addr: int, state: dict) -> None:
        """Record where the error happened and what the machine looked like."""
        self.step = step
        self.addr = addr
        self.state = state

    def describe(self) -> str:
        lines = [f"{self.__class__.__name__}: {self.message}"]
        if self.state is None:
            return lines[0]

        s = self.state
        lines.append(f"  at ${self.addr:03X} after {self.step} instructions")
        lines.append(f"  PC: ${s['pc']:03X}  I: ${s['i']:03X}  SP: {s['sp']}")
        lines.append(f"  DT: {s['delay']:02X}  ST: {s['sound']:02X}")
        lines.append("  V0-V7: " + " ".join(f"{v:02X}" for v in s['v'][:8]))
        lines.append("  V8-VF: " + " ".join(f"{v:02X}" for v in s['v'][8:]))
        lines.append("  stack: [" + ", ".join(f"${a:03X}" for a in s['stack']) + "]")
        return "\n".join(lines)


class LoadError(Chip8Error):
    """Program file unreadable or larger than the program region."""
    pass


class UnsupportedOpcode(Chip8Error):
    """Instruction word matches no known opcode."""

    def __init__(self, word: int, **kwargs):
        super().__init__(f"unsupported instruction: 0x{word:04X}", **kwargs)
        self.word = word


class MachineFault(Chip8Error):
    """Fatal fault while executing a program."""
    pass


class StackOverflow(MachineFault):
    """Call nested deeper than the stack allows."""
    pass


class StackUnderflow(MachineFault):
    """Return or peek with an empty stack."""
    pass


class MemoryFault(MachineFault):
    """Address outside 0x000-0xFFF."""
    pass


class NoKeyAvailable(Chip8Error):
    """A blocking key wait on a display that can never deliver a key."""
    pass
