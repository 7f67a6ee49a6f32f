from __future__ import annotations

from pathlib import Path

import pytest
import yaml

import generate_golden_fields
from generate_golden_fields import build_from_record, capture_expect, program_bytes, run_record


def test_program_bytes_forms() -> None:
    assert program_bytes("600A 6105\n8014") == bytes.fromhex("600A61058014")
    assert program_bytes([0x600A, 0x00EE]) == b"\x60\x0a\x00\xee"
    with pytest.raises(ValueError):
        program_bytes(12)


def test_setup_is_applied() -> None:
    cu = build_from_record(
        {
            "program": "1200",
            "setup": {"V": {3: 9}, "I": 0x300, "delay_timer": 4, "memory": {0x300: [1, 2]}},
            "keys": [2],
        }
    )
    dp = cu.dp
    assert dp.V[3] == 9
    assert dp.I == 0x300
    assert dp.delay_timer == 4
    assert list(dp.memory[0x300:0x302]) == [1, 2]
    assert dp.keys[2] is True


def test_capture_expect_after_fault() -> None:
    cu, error = run_record({"program": "6007 00EE", "ticks": 2})
    assert error == "StackUnderflow"
    expect = capture_expect(cu, error)
    assert expect["V"] == {0: 7}
    assert expect["PC"] == 0x202
    assert expect["error"] == "StackUnderflow"


def test_main_rewrites_expect(tmp_path: Path) -> None:
    p = tmp_path / "rec.yaml"
    p.write_text('program: "600A 6105 8014"\nticks: 3\n', encoding="utf-8")
    generate_golden_fields.main(str(p))
    doc = yaml.safe_load(p.read_text(encoding="utf-8"))
    assert doc["expect"]["V"] == {0: 0x0F, 1: 0x05}
    assert doc["expect"]["PC"] == 0x206
    assert "error" not in doc["expect"]
