"""Instruction execution for the CHIP-8 interpreter.

Each executor mutates the machine state (and possibly the display) and
returns the new PC for operations that redirect control, or None to let
the caller apply the default advance of 2.
"""

import logging
from typing import Callable, Dict, Optional

from . import bits
from .constants import FONT_ADDRESS, FONT_GLYPH_SIZE, MAX_ADDRESS, VF
from .display import Display
from .errors import MemoryFault, UnsupportedOpcode
from .instructions import Instruction, Op
from .state import CPUState, wrapping_add, wrapping_sub

logger = logging.getLogger(__name__)


# Instruction executor type
InstructionExecutor = Callable[[Instruction, CPUState, Display], Optional[int]]


def _skip_if(condition: bool, state: CPUState) -> Optional[int]:
    if condition:
        return state.PC + 4
    return None


# ─── 0x0XXX ───

def execute_sys(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SYS nnn: machine-code call, ignored"""
    logger.debug("SYS $%03X ignored", instr.nnn)
    return None


def execute_cls(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """CLS: clear the display"""
    display.clear()
    return None


def execute_ret(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """RET: PC := pop()"""
    return state.pop()


# ─── Flow control ───

def execute_jp(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """JP nnn: PC := nnn"""
    return instr.nnn


def execute_call(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """CALL nnn: push return address, PC := nnn"""
    state.push(state.PC + 2)
    return instr.nnn


def execute_jp_v0(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """JP V0, nnn: PC := V0 + nnn"""
    target = state.V[0] + instr.nnn
    if target > MAX_ADDRESS:
        raise MemoryFault(f"jump target out of range: 0x{target:X}")
    return target


def execute_se_byte(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SE Vx, nn: skip if Vx == nn"""
    return _skip_if(state.V[instr.x] == instr.nn, state)


def execute_sne_byte(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SNE Vx, nn: skip if Vx != nn"""
    return _skip_if(state.V[instr.x] != instr.nn, state)


def execute_se_reg(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SE Vx, Vy: skip if Vx == Vy"""
    return _skip_if(state.V[instr.x] == state.V[instr.y], state)


def execute_sne_reg(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SNE Vx, Vy: skip if Vx != Vy"""
    return _skip_if(state.V[instr.x] != state.V[instr.y], state)


# ─── Immediate loads ───

def execute_ld_byte(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD Vx, nn"""
    state.V[instr.x] = instr.nn
    return None


def execute_add_byte(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """ADD Vx, nn: VF untouched"""
    state.V[instr.x] = (state.V[instr.x] + instr.nn) & 0xFF
    return None


# ─── 8XYN: ALU operations ───
# The flag is always written after Vx so that VF holds the flag when x == F.

def execute_ld_reg(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD Vx, Vy"""
    state.V[instr.x] = state.V[instr.y]
    return None


def execute_or(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """OR Vx, Vy"""
    state.V[instr.x] |= state.V[instr.y]
    return None


def execute_and(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """AND Vx, Vy"""
    state.V[instr.x] &= state.V[instr.y]
    return None


def execute_xor(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """XOR Vx, Vy"""
    state.V[instr.x] ^= state.V[instr.y]
    return None


def execute_add_reg(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """ADD Vx, Vy: VF = carry"""
    V = state.V
    V[instr.x], V[VF] = wrapping_add(V[instr.x], V[instr.y])
    return None


def execute_sub(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SUB Vx, Vy: Vx := Vx - Vy, VF = NOT borrow"""
    V = state.V
    V[instr.x], V[VF] = wrapping_sub(V[instr.x], V[instr.y])
    return None


def execute_subn(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SUBN Vx, Vy: Vx := Vy - Vx, VF = NOT borrow"""
    V = state.V
    V[instr.x], V[VF] = wrapping_sub(V[instr.y], V[instr.x])
    return None


def execute_shr(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SHR Vx: VF = old lsb"""
    V = state.V
    V[instr.x], V[VF] = V[instr.x] >> 1, bits.lsb(V[instr.x])
    return None


def execute_shl(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SHL Vx: VF = old msb"""
    V = state.V
    V[instr.x], V[VF] = (V[instr.x] << 1) & 0xFF, bits.msb(V[instr.x])
    return None


# ─── Index, random, drawing ───

def execute_ld_i(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD I, nnn"""
    state.set_index(instr.nnn)
    return None


def execute_rnd(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """RND Vx, nn: Vx := random & nn"""
    state.V[instr.x] = state.random_byte() & instr.nn
    return None


def execute_drw(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """DRW Vx, Vy, n: XOR an n-row sprite from [I] onto the display"""
    V = state.V
    x, y = V[instr.x], V[instr.y]
    sprite = state.memory.read_block(state.I, instr.n)

    V[VF] = 0
    collided = False
    for row, byte in enumerate(sprite):
        for col in range(8):
            if not bits.nth_bit(byte, col):
                continue
            if display.set_pixel(x + col, y + row, True):
                collided = True

    V[VF] = 1 if collided else 0
    return None


# ─── EX9E/EXA1: Key operations ───

def execute_skp(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SKP Vx: skip if key Vx is down"""
    return _skip_if(display.is_key_pressed(state.V[instr.x] & 0xF), state)


def execute_sknp(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """SKNP Vx: skip if key Vx is up"""
    return _skip_if(not display.is_key_pressed(state.V[instr.x] & 0xF), state)


# ─── FX00-FX65: Misc operations ───

def execute_ld_vx_dt(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD Vx, DT"""
    state.V[instr.x] = state.delay_timer
    return None


def execute_ld_vx_k(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD Vx, K: suspend until a key is pressed"""
    state.waiting_for_key = True
    state.key_register = instr.x
    return None


def execute_ld_dt_vx(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD DT, Vx"""
    state.delay_timer = state.V[instr.x]
    return None


def execute_ld_st_vx(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD ST, Vx"""
    state.sound_timer = state.V[instr.x]
    return None


def execute_add_i_vx(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """ADD I, Vx: VF untouched"""
    state.set_index(state.I + state.V[instr.x])
    return None


def execute_ld_f_vx(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD F, Vx: I := address of the glyph for Vx"""
    state.set_index(FONT_ADDRESS + state.V[instr.x] * FONT_GLYPH_SIZE)
    return None


def execute_ld_b_vx(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD B, Vx: hundreds, tens, ones of Vx to [I], [I+1], [I+2]"""
    value = state.V[instr.x]
    state.memory.write_block(state.I, bytes([value // 100, (value // 10) % 10, value % 10]))
    return None


def execute_ld_mem_vx(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD [I], Vx: store V0..Vx"""
    state.memory.write_block(state.I, bytes(state.V[:instr.x + 1]))
    return None


def execute_ld_vx_mem(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    """LD Vx, [I]: load V0..Vx"""
    for i, value in enumerate(state.memory.read_block(state.I, instr.x + 1)):
        state.V[i] = value
    return None


def execute_unsupported(instr: Instruction, state: CPUState, display: Display) -> Optional[int]:
    raise UnsupportedOpcode(instr.raw)


# Instruction dispatch table
INSTRUCTION_EXECUTORS: Dict[Op, InstructionExecutor] = {
    Op.SYS: execute_sys,
    Op.CLS: execute_cls,
    Op.RET: execute_ret,
    Op.JP: execute_jp,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_se_byte,
    Op.SNE_BYTE: execute_sne_byte,
    Op.SE_REG: execute_se_reg,
    Op.LD_BYTE: execute_ld_byte,
    Op.ADD_BYTE: execute_add_byte,
    Op.LD_REG: execute_ld_reg,
    Op.OR: execute_or,
    Op.AND: execute_and,
    Op.XOR: execute_xor,
    Op.ADD_REG: execute_add_reg,
    Op.SUB: execute_sub,
    Op.SHR: execute_shr,
    Op.SUBN: execute_subn,
    Op.SHL: execute_shl,
    Op.SNE_REG: execute_sne_reg,
    Op.LD_I: execute_ld_i,
    Op.JP_V0: execute_jp_v0,
    Op.RND: execute_rnd,
    Op.DRW: execute_drw,
    Op.SKP: execute_skp,
    Op.SKNP: execute_sknp,
    Op.LD_VX_DT: execute_ld_vx_dt,
    Op.LD_VX_K: execute_ld_vx_k,
    Op.LD_DT_VX: execute_ld_dt_vx,
    Op.LD_ST_VX: execute_ld_st_vx,
    Op.ADD_I_VX: execute_add_i_vx,
    Op.LD_F_VX: execute_ld_f_vx,
    Op.LD_B_VX: execute_ld_b_vx,
    Op.LD_MEM_VX: execute_ld_mem_vx,
    Op.LD_VX_MEM: execute_ld_vx_mem,
    Op.UNSUPPORTED: execute_unsupported,
}


def execute_instruction(
    instr: Instruction,
    state: CPUState,
    display: Display,
) -> Optional[int]:
    """Execute a single instruction.

    Returns:
        New PC value if the instruction redirects control, None otherwise
    """
    return INSTRUCTION_EXECUTORS[instr.op](instr, state, display)
