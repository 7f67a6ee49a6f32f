#!/usr/bin/env python3
"""
Fill the `expect` block of a golden YAML record from an actual run.
Usage: python generate_golden_fields.py path/to/golden.yaml
"""

from __future__ import annotations

import os
import sys
from typing import Any

import yaml

from config import load_config
from processor import PROGRAM_START, ControlUnit, ReplayRandom, VMError, build_machine


def program_bytes(program: Any) -> bytes:
    """Turn a record's `program` (hex words string or list of ints) into bytes."""
    if isinstance(program, str):
        return bytes.fromhex("".join(program.split()))
    if isinstance(program, list):
        out = bytearray()
        for word in program:
            out += int(word).to_bytes(2, byteorder="big")
        return bytes(out)
    msg = f"Unsupported program field: {program!r}"
    raise ValueError(msg)


def _apply_setup(cu: ControlUnit, setup: dict[str, Any]) -> None:
    dp = cu.dp
    for reg, value in (setup.get("V") or {}).items():
        dp.V[int(reg)] = int(value) & 0xFF
    if "I" in setup:
        dp.I = int(setup["I"])
    if "delay_timer" in setup:
        dp.delay_timer = int(setup["delay_timer"])
    if "sound_timer" in setup:
        dp.sound_timer = int(setup["sound_timer"])
    for addr, data in (setup.get("memory") or {}).items():
        chunk = data if isinstance(data, list) else [data]
        for off, b in enumerate(chunk):
            dp.write_byte(int(addr) + off, int(b))


def build_from_record(doc: dict[str, Any]) -> ControlUnit:
    """Build a machine as described by a golden record (program, config, keys, setup)."""
    cfg = load_config(doc.get("config") or {})
    rnd = doc.get("random")
    rng = ReplayRandom(rnd) if rnd else None
    cu = build_machine(program_bytes(doc.get("program", "")), cfg, keys=doc.get("keys"), rng=rng)
    _apply_setup(cu, doc.get("setup") or {})
    return cu


def run_record(doc: dict[str, Any]) -> tuple[ControlUnit, str | None]:
    """Run a golden record; return the machine and the fault class name, if any."""
    cu = build_from_record(doc)
    cfg = load_config(doc.get("config") or {})
    if "dt" in doc:
        dt = float(doc["dt"])
    else:
        dt = 1.0 / float(doc.get("tick_hz", cfg["instructions_per_second"]))
    try:
        cu.run(int(doc.get("ticks", 1)), dt)
    except VMError as e:
        return cu, type(e).__name__
    return cu, None


def capture_expect(cu: ControlUnit, error: str | None) -> dict[str, Any]:
    """Capture the observable machine state in golden `expect` form."""
    dp = cu.dp
    expect: dict[str, Any] = {
        "V": {r: dp.V[r] for r in range(len(dp.V)) if dp.V[r]},
        "PC": dp.PC,
        "I": dp.I,
        "stack": list(dp.stack),
        "delay_timer": dp.delay_timer,
        "sound_timer": dp.sound_timer,
        "lit": dp.display.lit_count(),
        "redraw": dp.display.redraw,
        "awaiting_key": dp.awaiting_key,
    }
    if error is not None:
        expect["error"] = error
    return expect


def main(path: str) -> None:
    if not os.path.exists(path):
        print("File not found:", path)
        sys.exit(2)

    with open(path, encoding="utf-8") as f:
        doc = yaml.safe_load(f)

    if not isinstance(doc, dict) or "program" not in doc:
        print("No 'program' found in YAML, nothing to run")
        sys.exit(2)

    cu, error = run_record(doc)
    doc["expect"] = capture_expect(cu, error)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(doc, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    print(f"Updated {path}: PC=0x{cu.dp.PC:03X} (program at 0x{PROGRAM_START:03X}), error={error}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: generate_golden_fields.py path/to/golden.yaml")
        sys.exit(1)
    main(sys.argv[1])
