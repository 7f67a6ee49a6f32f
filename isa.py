"""ISA: instruction encodings and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class OpCode(IntEnum):
    """Keeps opcodes from all operations.

    The value of each member is the opcode word with every operand field
    zeroed, so ``OpCode.SKP == 0xE09E`` and ``OpCode.JP == 0x1000``.
    """

    SYS = 0x0000  # legacy machine call, ignored
    CLS = 0x00E0
    RET = 0x00EE

    JP = 0x1000  # PC = nnn
    CALL = 0x2000  # push PC; PC = nnn
    SE_VB = 0x3000  # skip if Vx == kk
    SNE_VB = 0x4000  # skip if Vx != kk
    SE_VV = 0x5000  # skip if Vx == Vy
    LD_VB = 0x6000  # Vx = kk
    ADD_VB = 0x7000  # Vx += kk (no flag)

    LD_VV = 0x8000
    OR = 0x8001
    AND = 0x8002
    XOR = 0x8003
    ADD_VV = 0x8004  # VF = carry
    SUB = 0x8005  # VF = not borrow
    SHR = 0x8006  # VF = low bit
    SUBN = 0x8007  # VF = not borrow
    SHL = 0x800E  # VF = high bit

    SNE_VV = 0x9000
    LD_I = 0xA000
    JP_V0 = 0xB000
    RND = 0xC000
    DRW = 0xD000

    SKP = 0xE09E
    SKNP = 0xE0A1

    LD_VDT = 0xF007
    LD_VK = 0xF00A  # wait for key
    LD_DTV = 0xF015
    LD_STV = 0xF018
    ADD_IV = 0xF01E
    LD_FV = 0xF029
    LD_BV = 0xF033
    LD_IV = 0xF055  # store V0..Vx at I
    LD_VI = 0xF065  # load V0..Vx from I

    INVALID = 0xFFFF


# Every instruction is two bytes, high byte first.
INSTR_SIZE = 2

# Families whose top nibble alone selects the operation.
_SINGLE_FAMILIES: dict[int, OpCode] = {
    0x1: OpCode.JP,
    0x2: OpCode.CALL,
    0x3: OpCode.SE_VB,
    0x4: OpCode.SNE_VB,
    0x6: OpCode.LD_VB,
    0x7: OpCode.ADD_VB,
    0xA: OpCode.LD_I,
    0xB: OpCode.JP_V0,
    0xC: OpCode.RND,
    0xD: OpCode.DRW,
}

# Families that also need the low nibble (5, 8, 9) or the low byte (E, F).
_NIBBLE_FAMILIES = (0x5, 0x8, 0x9)
_BYTE_FAMILIES = (0xE, 0xF)

_BY_VALUE: dict[int, OpCode] = {int(op): op for op in OpCode if op is not OpCode.INVALID}


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word.

    Operand fields are always extracted from ``raw``, whether or not the
    operation actually uses them.
    """

    opcode: OpCode
    raw: int
    x: int
    y: int
    kk: int
    nnn: int
    n: int


def _classify(word: int) -> OpCode:
    family = word >> 12
    if family == 0x0:
        # full-word match: 0x01E0 is a SYS call, not CLS
        if word == 0x00E0:
            return OpCode.CLS
        if word == 0x00EE:
            return OpCode.RET
        return OpCode.SYS
    if family in _SINGLE_FAMILIES:
        return _SINGLE_FAMILIES[family]
    if family in _NIBBLE_FAMILIES:
        key = (family << 12) | (word & 0x000F)
    elif family in _BYTE_FAMILIES:
        key = (family << 12) | (word & 0x00FF)
    else:
        return OpCode.INVALID
    return _BY_VALUE.get(key, OpCode.INVALID)


def decode_instr(hi: int, lo: int) -> Instruction:
    """Decode the two instruction bytes ``hi`` and ``lo``.

    Never raises: a pattern with no defined operation decodes to
    ``OpCode.INVALID`` and is rejected later by the control unit.
    """
    word = ((hi & 0xFF) << 8) | (lo & 0xFF)
    return Instruction(
        opcode=_classify(word),
        raw=word,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
        n=word & 0xF,
    )


def encode_instr(opcode: OpCode, x: int = 0, y: int = 0, kk: int = 0, nnn: int = 0, n: int = 0) -> bytes:
    """Encode an instruction into its two bytes (high byte first).

    Operands are OR-ed into the opcode template, so only the fields the
    operation actually uses should be given.
    """
    if opcode is OpCode.INVALID:
        msg = "INVALID has no encoding"
        raise ValueError(msg)
    word = int(opcode) | ((x & 0xF) << 8) | ((y & 0xF) << 4) | (kk & 0xFF) | (nnn & 0xFFF) | (n & 0xF)
    return word.to_bytes(INSTR_SIZE, byteorder="big")


def mnemonic(instr: Instruction) -> str:  # noqa: C901
    """Get operation mnemonic."""
    op = instr.opcode
    vx = f"V{instr.x:X}"
    vy = f"V{instr.y:X}"
    kk = f"0x{instr.kk:02X}"
    nnn = f"0x{instr.nnn:03X}"

    if op is OpCode.SYS:
        return f"SYS {nnn}"
    if op is OpCode.CLS:
        return "CLS"
    if op is OpCode.RET:
        return "RET"
    if op is OpCode.JP:
        return f"JP {nnn}"
    if op is OpCode.CALL:
        return f"CALL {nnn}"
    if op is OpCode.SE_VB:
        return f"SE {vx}, {kk}"
    if op is OpCode.SNE_VB:
        return f"SNE {vx}, {kk}"
    if op is OpCode.SE_VV:
        return f"SE {vx}, {vy}"
    if op is OpCode.LD_VB:
        return f"LD {vx}, {kk}"
    if op is OpCode.ADD_VB:
        return f"ADD {vx}, {kk}"
    if op is OpCode.LD_VV:
        return f"LD {vx}, {vy}"
    if op in (OpCode.OR, OpCode.AND, OpCode.XOR, OpCode.SUB, OpCode.SUBN):
        return f"{op.name} {vx}, {vy}"
    if op is OpCode.ADD_VV:
        return f"ADD {vx}, {vy}"
    if op in (OpCode.SHR, OpCode.SHL):
        return f"{op.name} {vx}"
    if op is OpCode.SNE_VV:
        return f"SNE {vx}, {vy}"
    if op is OpCode.LD_I:
        return f"LD I, {nnn}"
    if op is OpCode.JP_V0:
        return f"JP V0, {nnn}"
    if op is OpCode.RND:
        return f"RND {vx}, {kk}"
    if op is OpCode.DRW:
        return f"DRW {vx}, {vy}, {instr.n}"
    if op in (OpCode.SKP, OpCode.SKNP):
        return f"{op.name} {vx}"

    # F family: LD with a special operand on one side
    f_forms = {
        OpCode.LD_VDT: f"LD {vx}, DT",
        OpCode.LD_VK: f"LD {vx}, K",
        OpCode.LD_DTV: f"LD DT, {vx}",
        OpCode.LD_STV: f"LD ST, {vx}",
        OpCode.ADD_IV: f"ADD I, {vx}",
        OpCode.LD_FV: f"LD F, {vx}",
        OpCode.LD_BV: f"LD B, {vx}",
        OpCode.LD_IV: f"LD [I], {vx}",
        OpCode.LD_VI: f"LD {vx}, [I]",
    }
    if op in f_forms:
        return f_forms[op]
    return f"??? 0x{instr.raw:04X}"
