"""Golden-test runner for the VM.

Each golden YAML record describes a program, how long to run it and the
machine state expected afterwards (registers, PC, I, stack, memory, display,
timers, key wait, or the fault that stopped it).
"""

from __future__ import annotations

from typing import Any

import pytest

from generate_golden_fields import capture_expect, run_record


def _mismatch(title: str, got: Any, expected: Any) -> str:
    return f"{title}\n--- got ---\n{got}\n--- expected ---\n{expected}"


@pytest.mark.golden_test("golden/*.yaml")
def test_golden_record(golden: Any) -> None:  # noqa: C901
    """Run one golden record and compare the state it leaves behind."""
    cu, error = run_record(golden)
    dp = cu.dp
    expect = golden.get("expect") or {}
    got = capture_expect(cu, error)

    # 1) fault (or lack of one)
    exp_error = expect.get("error")
    assert error == exp_error, _mismatch("fault mismatch", error, exp_error)

    # 2) registers: only the listed ones are checked
    for reg, value in (expect.get("V") or {}).items():
        r = int(reg)
        assert dp.V[r] == int(value), f"V{r:X} mismatch: got 0x{dp.V[r]:02X} expected 0x{int(value):02X}"

    # 3) scalar state
    for key in ("PC", "I", "delay_timer", "sound_timer", "lit", "redraw", "awaiting_key"):
        if key in expect:
            assert got[key] == expect[key], _mismatch(f"{key} mismatch", got[key], expect[key])

    if "stack" in expect:
        assert dp.stack == list(expect["stack"]), _mismatch("stack mismatch", dp.stack, expect["stack"])

    # 4) memory: addr -> byte or addr -> list of consecutive bytes
    for addr, data in (expect.get("memory") or {}).items():
        chunk = data if isinstance(data, list) else [data]
        start = int(addr)
        actual = list(dp.memory[start : start + len(chunk)])
        assert actual == [int(b) for b in chunk], _mismatch(f"memory at 0x{start:03X}", actual, chunk)

    # 5) lit pixels
    for x, y in expect.get("pixels") or []:
        assert dp.display.pixel(x, y) == 1, f"pixel ({x}, {y}) expected lit\n{dp.display.render_text()}"
