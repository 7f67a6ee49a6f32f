from __future__ import annotations

import pytest

from isa import INSTR_SIZE, Instruction, OpCode, decode_instr, encode_instr, mnemonic


def _decode(word: int) -> Instruction:
    return decode_instr(word >> 8, word & 0xFF)


def test_fields_extracted_from_word() -> None:
    instr = _decode(0xD12A)
    assert instr.opcode is OpCode.DRW
    assert instr.raw == 0xD12A
    assert (instr.x, instr.y, instr.n) == (0x1, 0x2, 0xA)
    assert instr.kk == 0x2A
    assert instr.nnn == 0x12A


@pytest.mark.parametrize(
    ("word", "opcode"),
    [
        (0x00E0, OpCode.CLS),
        (0x00EE, OpCode.RET),
        (0x0123, OpCode.SYS),
        (0x0000, OpCode.SYS),
        (0x01E0, OpCode.SYS),
        (0x0FEE, OpCode.SYS),
        (0x1ABC, OpCode.JP),
        (0x2ABC, OpCode.CALL),
        (0x3A12, OpCode.SE_VB),
        (0x4A12, OpCode.SNE_VB),
        (0x5AB0, OpCode.SE_VV),
        (0x6A12, OpCode.LD_VB),
        (0x7A12, OpCode.ADD_VB),
        (0x8AB0, OpCode.LD_VV),
        (0x8AB1, OpCode.OR),
        (0x8AB2, OpCode.AND),
        (0x8AB3, OpCode.XOR),
        (0x8AB4, OpCode.ADD_VV),
        (0x8AB5, OpCode.SUB),
        (0x8AB6, OpCode.SHR),
        (0x8AB7, OpCode.SUBN),
        (0x8ABE, OpCode.SHL),
        (0x9AB0, OpCode.SNE_VV),
        (0xA123, OpCode.LD_I),
        (0xB123, OpCode.JP_V0),
        (0xC1FF, OpCode.RND),
        (0xD125, OpCode.DRW),
        (0xE59E, OpCode.SKP),
        (0xE5A1, OpCode.SKNP),
        (0xF507, OpCode.LD_VDT),
        (0xF50A, OpCode.LD_VK),
        (0xF515, OpCode.LD_DTV),
        (0xF518, OpCode.LD_STV),
        (0xF51E, OpCode.ADD_IV),
        (0xF529, OpCode.LD_FV),
        (0xF533, OpCode.LD_BV),
        (0xF555, OpCode.LD_IV),
        (0xF565, OpCode.LD_VI),
    ],
)
def test_decode_selects_operation(word: int, opcode: OpCode) -> None:
    assert _decode(word).opcode is opcode


@pytest.mark.parametrize("word", [0x5AB1, 0x8AB8, 0x8ABF, 0x9AB1, 0xE5FF, 0xF5FF, 0xF500])
def test_undefined_patterns_decode_to_invalid(word: int) -> None:
    instr = _decode(word)
    assert instr.opcode is OpCode.INVALID
    # operands are still extracted
    assert instr.x == (word >> 8) & 0xF


def test_decode_never_raises() -> None:
    for hi in range(256):
        for lo in (0x00, 0x0E, 0x55, 0x9E, 0xA1, 0xFF):
            assert isinstance(decode_instr(hi, lo), Instruction)


def test_thirty_five_operations() -> None:
    assert len([op for op in OpCode if op is not OpCode.INVALID]) == 35


def test_encode_places_operands() -> None:
    assert encode_instr(OpCode.LD_VB, x=0, kk=0x0A) == b"\x60\x0a"
    assert encode_instr(OpCode.ADD_VV, x=0, y=1) == b"\x80\x14"
    assert encode_instr(OpCode.DRW, x=1, y=2, n=5) == b"\xd1\x25"
    assert encode_instr(OpCode.SKP, x=3) == b"\xe3\x9e"
    assert len(encode_instr(OpCode.JP, nnn=0x234)) == INSTR_SIZE


def test_encode_invalid_rejected() -> None:
    with pytest.raises(ValueError, match="INVALID"):
        encode_instr(OpCode.INVALID)


def test_encode_decode_agree_on_family_members() -> None:
    for op, operands in (
        (OpCode.SHL, {"x": 2, "y": 3}),
        (OpCode.SE_VV, {"x": 2, "y": 3}),
        (OpCode.SKNP, {"x": 2}),
        (OpCode.LD_VI, {"x": 2}),
        (OpCode.RET, {}),
    ):
        raw = encode_instr(op, **operands)
        assert decode_instr(raw[0], raw[1]).opcode is op


@pytest.mark.parametrize(
    ("word", "text"),
    [
        (0x00E0, "CLS"),
        (0x1234, "JP 0x234"),
        (0x600A, "LD V0, 0x0A"),
        (0x8014, "ADD V0, V1"),
        (0x8AB5, "SUB VA, VB"),
        (0x8A06, "SHR VA"),
        (0xA300, "LD I, 0x300"),
        (0xB200, "JP V0, 0x200"),
        (0xD125, "DRW V1, V2, 5"),
        (0xF30A, "LD V3, K"),
        (0xF233, "LD B, V2"),
        (0xF355, "LD [I], V3"),
        (0xF365, "LD V3, [I]"),
        (0x5011, "??? 0x5011"),
    ],
)
def test_mnemonic(word: int, text: str) -> None:
    assert mnemonic(_decode(word)) == text
