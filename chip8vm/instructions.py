"""Decoding of 16-bit instruction words into a closed set of operations."""

from dataclasses import dataclass
from enum import Enum

from . import bits


class Op(Enum):
    """Every documented CHIP-8 operation, plus a catch-all."""
    SYS = "0nnn"
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_BYTE = "3xnn"
    SNE_BYTE = "4xnn"
    SE_REG = "5xy0"
    LD_BYTE = "6xnn"
    ADD_BYTE = "7xnn"
    LD_REG = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_REG = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxnn"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I_VX = "Fx1E"
    LD_F_VX = "Fx29"
    LD_B_VX = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"
    UNSUPPORTED = "????"


# Ops that set PC themselves
JUMPS = frozenset({Op.JP, Op.CALL, Op.RET, Op.JP_V0})

_ALU_OPS = {
    0x0: Op.LD_REG, 0x1: Op.OR, 0x2: Op.AND, 0x3: Op.XOR, 0x4: Op.ADD_REG,
    0x5: Op.SUB, 0x6: Op.SHR, 0x7: Op.SUBN, 0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT, 0x0A: Op.LD_VX_K, 0x15: Op.LD_DT_VX, 0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX, 0x29: Op.LD_F_VX, 0x33: Op.LD_B_VX, 0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}

# Families with a single operation
_SIMPLE_OPS = {
    0x1: Op.JP, 0x2: Op.CALL, 0x3: Op.SE_BYTE, 0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE, 0x7: Op.ADD_BYTE, 0xA: Op.LD_I, 0xB: Op.JP_V0,
    0xC: Op.RND, 0xD: Op.DRW,
}


@dataclass(frozen=True)
class Instruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def _classify(word: int) -> Op:
    group = bits.family(word)
    last = bits.nibble(word, 4)

    if group in _SIMPLE_OPS:
        return _SIMPLE_OPS[group]
    if group == 0x0:
        if word == 0x00E0:
            return Op.CLS
        if word == 0x00EE:
            return Op.RET
        return Op.SYS
    if group == 0x5:
        return Op.SE_REG if last == 0 else Op.UNSUPPORTED
    if group == 0x8:
        return _ALU_OPS.get(last, Op.UNSUPPORTED)
    if group == 0x9:
        return Op.SNE_REG if last == 0 else Op.UNSUPPORTED
    if group == 0xE:
        return _KEY_OPS.get(bits.nn(word), Op.UNSUPPORTED)
    return _MISC_OPS.get(bits.nn(word), Op.UNSUPPORTED)


def decode(word: int) -> Instruction:
    """Decode a 16-bit instruction word."""
    return Instruction(
        raw=word,
        op=_classify(word),
        x=bits.nibble(word, 2),
        y=bits.nibble(word, 3),
        n=bits.nibble(word, 4),
        nn=bits.nn(word),
        nnn=bits.nnn(word),
    )


_MNEMONICS = {
    Op.SYS: "SYS ${nnn:03X}",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP ${nnn:03X}",
    Op.CALL: "CALL ${nnn:03X}",
    Op.SE_BYTE: "SE V{x:X}, ${nn:02X}",
    Op.SNE_BYTE: "SNE V{x:X}, ${nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_BYTE: "LD V{x:X}, ${nn:02X}",
    Op.ADD_BYTE: "ADD V{x:X}, ${nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, ${nnn:03X}",
    Op.JP_V0: "JP V0, ${nnn:03X}",
    Op.RND: "RND V{x:X}, ${nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_MEM_VX: "LD [I], V{x:X}",
    Op.LD_VX_MEM: "LD V{x:X}, [I]",
    Op.UNSUPPORTED: "??? ${raw:04X}",
}


def disassemble(word: int) -> str:
    """Disassemble opcode to human-readable string"""
    instr = decode(word)
    return _MNEMONICS[instr.op].format(
        raw=instr.raw, x=instr.x, y=instr.y, n=instr.n, nn=instr.nn, nnn=instr.nnn
    )
