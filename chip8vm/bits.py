"""Field extraction for 16-bit instruction words and 8-bit values.

Nibbles are numbered from the most significant end: given ``0xABCD``,
nibble 1 is ``A`` and nibble 4 is ``D``.
"""


def nibble(word: int, n: int) -> int:
    """Return the n-th 4-bit chunk of ``word`` (1 = most significant)."""
    shift = 4 * (4 - n)
    return (word >> shift) & 0xF


def family(word: int) -> int:
    """Top nibble, selects the opcode group."""
    return (word >> 12) & 0xF


def nnn(word: int) -> int:
    """Bottom 12 bits, an address operand."""
    return word & 0x0FFF


def nn(word: int) -> int:
    """Bottom byte, an immediate operand."""
    return word & 0x00FF


def lsb(value: int) -> int:
    return value & 0x1


def msb(value: int) -> int:
    return (value >> 7) & 0x1


def nth_bit(byte: int, n: int) -> bool:
    """Treat ``byte`` as 8 pixels, 0 = leftmost (msb), 7 = rightmost (lsb)."""
    return bool((byte >> (7 - n)) & 0x1)
