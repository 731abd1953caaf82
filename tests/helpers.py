"""Test helpers shared across modules."""

INSTRUCTION_NS = 2_000_000
TIMER_NS = 16_666_666


class FakeClock:
    """Monotonic nanosecond clock advanced by hand."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ns: int) -> int:
        self.now += ns
        return self.now


def program(*words: int) -> bytes:
    """Assemble instruction words into big-endian bytes."""
    return b"".join(w.to_bytes(2, "big") for w in words)
