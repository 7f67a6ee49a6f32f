"""Processor (Datapath + ControlUnit) and CLI wrapper.

The Datapath owns the whole machine state (memory, registers, call stack,
timers, keys and display). The ControlUnit advances it one instruction per
``tick`` and decrements the timers at a fixed real-time rate, independent of
how often ``tick`` is called.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any, Protocol

from config import ConfigError, load_config
from display import Display
from isa import INSTR_SIZE, Instruction, OpCode, decode_instr, mnemonic

LOGFILE = "processor.log"

MEM_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEM_SIZE - PROGRAM_START
NUM_REGISTERS = 16
NUM_KEYS = 16
FLAG = 0xF

# 16 glyphs (0-F), 5 bytes each, stored at address 0.
FONT_SET = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0x80,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)
GLYPH_SIZE = 5


def init_logging(logfile: str = LOGFILE, debug: bool = False, console: bool = False) -> None:
    """Configure root logger to write to `logfile`.

    If debug=True set DEBUG level (one line per tick). If console=True also
    echo logs to stdout.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    lvl = logging.DEBUG if debug else logging.WARNING
    root.setLevel(lvl)

    if debug:
        file_fmt = "%(levelname)s %(name)s:%(filename)s:%(lineno)d %(message)s"
    else:
        file_fmt = "%(levelname)-5s %(message)s"

    fh = logging.FileHandler(logfile, mode="w", encoding="utf-8")
    fh.setLevel(lvl)
    fh.setFormatter(logging.Formatter(file_fmt))
    root.addHandler(fh)

    if console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(lvl)
        ch.setFormatter(logging.Formatter("%(levelname)5s %(message)s"))
        root.addHandler(ch)


# ---------- Errors ----------
class VMError(Exception):
    """Base class for faults raised by the running machine."""


class UnknownOpcode(VMError):
    """The word at PC decodes to no defined operation."""

    def __init__(self, word: int, pc: int) -> None:
        self.word = word
        self.pc = pc
        super().__init__(f"Unknown opcode 0x{word:04X} at PC 0x{pc:03X}")


class StackUnderflow(VMError):
    """RET executed with an empty call stack."""


class StackOverflow(VMError):
    """CALL executed with a full call stack."""


class MemoryBoundsViolation(VMError):
    """A computed address falls outside memory."""

    def __init__(self, address: int) -> None:
        self.address = address
        super().__init__(f"Address 0x{address:X} outside memory (0x000..0x{MEM_SIZE - 1:03X})")


class ProgramTooLarge(VMError):
    """The program image does not fit between PROGRAM_START and the end of memory."""


# ---------- Random sources ----------
class RandomSource(Protocol):
    """Anything that hands out random bytes."""

    def next_byte(self) -> int: ...


class SeededRandom:
    """Uniform random bytes from a (optionally seeded) `random.Random`."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def next_byte(self) -> int:
        return self._rng.randrange(256)


class ReplayRandom:
    """Replays a fixed byte sequence, cycling when exhausted."""

    def __init__(self, values: Sequence[int]) -> None:
        if not values:
            msg = "ReplayRandom needs at least one value"
            raise ValueError(msg)
        self._values = [int(v) & 0xFF for v in values]
        self._pos = 0

    def next_byte(self) -> int:
        v = self._values[self._pos % len(self._values)]
        self._pos += 1
        return v


class Datapath:
    """Datapath (memory + registers + stack + timers + keys + display)."""

    memory: bytearray
    program_len: int
    V: bytearray
    I: int  # noqa: E741
    PC: int

    stack: list[int]
    stack_depth: int

    delay_timer: int
    sound_timer: int
    time_step: float
    time_acc: float

    keys: list[bool]
    awaiting_key: int | None
    display: Display

    tick: int
    lenient_log: bool

    def __init__(
        self,
        program: bytes,
        stack_depth: int = 16,
        timer_hz: float = 60,
        sprite_policy: str = "clamp",
        lenient_log: bool = False,
    ) -> None:
        """Initialize machine state with the font and `program` loaded."""
        program = bytes(program or b"")
        if len(program) > MAX_PROGRAM_SIZE:
            msg = f"Program is {len(program)} bytes; at most {MAX_PROGRAM_SIZE} fit in memory"
            raise ProgramTooLarge(msg)

        self.memory = bytearray(MEM_SIZE)
        self.memory[0 : len(FONT_SET)] = FONT_SET
        self.memory[PROGRAM_START : PROGRAM_START + len(program)] = program
        self.program_len = len(program)

        self.V = bytearray(NUM_REGISTERS)
        self.I = 0
        self.PC = PROGRAM_START

        self.stack = []
        self.stack_depth = int(stack_depth)

        self.delay_timer = 0
        self.sound_timer = 0
        self.time_step = 1.0 / float(timer_hz)
        self.time_acc = 0.0

        self.keys = [False] * NUM_KEYS
        self.awaiting_key = None
        self.display = Display(policy=sprite_policy)

        self.tick = 0
        self.lenient_log = bool(lenient_log)
        logging.debug("Datapath: loaded %d program bytes at 0x%03X", self.program_len, PROGRAM_START)

    # --- memory ---
    def _check_addr(self, addr: int) -> int:
        if not (0 <= addr < MEM_SIZE):
            raise MemoryBoundsViolation(addr)
        return addr

    def read_byte(self, addr: int) -> int:
        """Read one byte, raising MemoryBoundsViolation outside memory."""
        return self.memory[self._check_addr(addr)]

    def write_byte(self, addr: int, value: int) -> None:
        """Write one byte (low 8 bits of `value`)."""
        self.memory[self._check_addr(addr)] = value & 0xFF

    # --- call-stack ---
    def call_push(self, addr: int) -> None:
        """Push a return address onto the call stack."""
        if len(self.stack) >= self.stack_depth:
            msg = f"Call stack full ({self.stack_depth} entries) at PC 0x{self.PC:03X}"
            raise StackOverflow(msg)
        self.stack.append(addr)

    def call_pop(self) -> int:
        """Pop a return address from the call stack."""
        if not self.stack:
            msg = f"Return with empty call stack at PC 0x{self.PC:03X}"
            raise StackUnderflow(msg)
        return self.stack.pop()

    # --- keys ---
    def set_keys(self, pressed: Iterable[int]) -> None:
        """Replace the key state: keys listed in `pressed` are down, all others up."""
        state = [False] * NUM_KEYS
        for k in pressed:
            k = int(k)
            if not (0 <= k < NUM_KEYS):
                msg = f"Key index {k} out of range 0..{NUM_KEYS - 1}"
                raise ValueError(msg)
            state[k] = True
        self.keys = state

    def first_pressed_key(self) -> int | None:
        """Return the lowest pressed key index, or None when no key is down."""
        for k, down in enumerate(self.keys):
            if down:
                return k
        return None


class ControlUnit:
    """Control unit implementing the FETCH-DECODE-EXEC loop for the Datapath."""

    dp: Datapath
    rng: RandomSource

    def __init__(self, dp: Datapath, rng: RandomSource | None = None) -> None:
        """Create a ControlUnit bound to `dp`, drawing random bytes from `rng`."""
        self.dp = dp
        self.rng = rng if rng is not None else SeededRandom()
        self._jumped = False
        self.handlers: dict[OpCode, Callable[[Instruction], None]] = {
            OpCode.SYS: self._sys,
            OpCode.CLS: self._cls,
            OpCode.RET: self._ret,
            OpCode.JP: self._jp,
            OpCode.CALL: self._call,
            OpCode.SE_VB: self._se_vb,
            OpCode.SNE_VB: self._sne_vb,
            OpCode.SE_VV: self._se_vv,
            OpCode.LD_VB: self._ld_vb,
            OpCode.ADD_VB: self._add_vb,
            OpCode.LD_VV: self._ld_vv,
            OpCode.OR: self._or,
            OpCode.AND: self._and,
            OpCode.XOR: self._xor,
            OpCode.ADD_VV: self._add_vv,
            OpCode.SUB: self._sub,
            OpCode.SHR: self._shr,
            OpCode.SUBN: self._subn,
            OpCode.SHL: self._shl,
            OpCode.SNE_VV: self._sne_vv,
            OpCode.LD_I: self._ld_i,
            OpCode.JP_V0: self._jp_v0,
            OpCode.RND: self._rnd,
            OpCode.DRW: self._drw,
            OpCode.SKP: self._skp,
            OpCode.SKNP: self._sknp,
            OpCode.LD_VDT: self._ld_vdt,
            OpCode.LD_VK: self._ld_vk,
            OpCode.LD_DTV: self._ld_dtv,
            OpCode.LD_STV: self._ld_stv,
            OpCode.ADD_IV: self._add_iv,
            OpCode.LD_FV: self._ld_fv,
            OpCode.LD_BV: self._ld_bv,
            OpCode.LD_IV: self._ld_iv,
            OpCode.LD_VI: self._ld_vi,
        }

    def fetch(self) -> Instruction:
        """Decode the instruction at PC without executing it."""
        dp = self.dp
        return decode_instr(dp.read_byte(dp.PC), dp.read_byte(dp.PC + 1))

    def _log_step(self, instr: Instruction) -> None:
        # skip verbose per-step logs in lenient mode to reduce log size
        if self.dp.lenient_log or not logging.getLogger().isEnabledFor(logging.DEBUG):
            return
        dp = self.dp
        logging.debug(
            "TICK: %6d PC: 0x%03X I: 0x%03X SP: %2d DT: %3d ST: %3d\tINSTR: %04X %s",
            dp.tick,
            dp.PC,
            dp.I,
            len(dp.stack),
            dp.delay_timer,
            dp.sound_timer,
            instr.raw,
            mnemonic(instr),
        )

    def tick(self, elapsed: float) -> None:
        """Advance the machine by one instruction and `elapsed` seconds of timer time."""
        if elapsed < 0:
            msg = f"elapsed time must be non-negative, got {elapsed}"
            raise ValueError(msg)
        dp = self.dp
        dp.display.redraw = False

        if dp.awaiting_key is not None:
            self._poll_key()
        else:
            try:
                instr = self.fetch()
                self._log_step(instr)
                self._jumped = False
                self.exec(instr)
            except VMError as e:
                logging.error("[tick %d] fault at PC 0x%03X: %s", dp.tick, dp.PC, e)
                raise
            if not self._jumped:
                dp.PC = (dp.PC + INSTR_SIZE) & 0xFFFF

        self.advance_timers(elapsed)
        dp.tick += 1

    def run(self, ticks: int, elapsed: float) -> tuple[int, str]:
        """Call `tick(elapsed)` `ticks` times; return (ticks so far, state)."""
        for _ in range(ticks):
            self.tick(elapsed)
        state = "waiting" if self.dp.awaiting_key is not None else "stopped"
        return self.dp.tick, state

    def advance_timers(self, elapsed: float) -> None:
        """Decrement delay/sound timers once per elapsed time-step."""
        if elapsed < 0:
            msg = f"elapsed time must be non-negative, got {elapsed}"
            raise ValueError(msg)
        dp = self.dp
        dp.time_acc += elapsed
        while dp.time_acc >= dp.time_step:
            if dp.delay_timer > 0:
                dp.delay_timer -= 1
            if dp.sound_timer > 0:
                dp.sound_timer -= 1
            dp.time_acc -= dp.time_step

    def _poll_key(self) -> None:
        dp = self.dp
        x = dp.awaiting_key
        key = dp.first_pressed_key()
        if x is None or key is None:
            return
        dp.V[x] = key
        dp.awaiting_key = None
        dp.PC = (dp.PC + INSTR_SIZE) & 0xFFFF
        logging.debug("[tick %d] key %X pressed -> V%X, wait released", dp.tick, key, x)

    def exec(self, instr: Instruction) -> None:
        """Execute a single decoded instruction."""
        handler = self.handlers.get(instr.opcode)
        if handler is None:
            raise UnknownOpcode(instr.raw, self.dp.PC)
        handler(instr)

    def _skip_if(self, cond: bool) -> None:
        if cond:
            self.dp.PC += INSTR_SIZE

    # --- control flow ---
    def _sys(self, instr: Instruction) -> None:
        # native machine calls are not supported; treated as no-op
        return

    def _cls(self, instr: Instruction) -> None:
        self.dp.display.clear()
        self.dp.display.redraw = True

    def _ret(self, instr: Instruction) -> None:
        # returns to the CALL itself; the normal advance steps past it
        self.dp.PC = self.dp.call_pop()

    def _jp(self, instr: Instruction) -> None:
        self.dp.PC = instr.nnn
        self._jumped = True

    def _call(self, instr: Instruction) -> None:
        self.dp.call_push(self.dp.PC)
        self.dp.PC = instr.nnn
        self._jumped = True

    def _jp_v0(self, instr: Instruction) -> None:
        self.dp.PC = self.dp.V[0] + instr.nnn
        self._jumped = True

    # --- skips ---
    def _se_vb(self, instr: Instruction) -> None:
        self._skip_if(self.dp.V[instr.x] == instr.kk)

    def _sne_vb(self, instr: Instruction) -> None:
        self._skip_if(self.dp.V[instr.x] != instr.kk)

    def _se_vv(self, instr: Instruction) -> None:
        self._skip_if(self.dp.V[instr.x] == self.dp.V[instr.y])

    def _sne_vv(self, instr: Instruction) -> None:
        self._skip_if(self.dp.V[instr.x] != self.dp.V[instr.y])

    def _skp(self, instr: Instruction) -> None:
        self._skip_if(self.dp.keys[self.dp.V[instr.x] & 0xF])

    def _sknp(self, instr: Instruction) -> None:
        self._skip_if(not self.dp.keys[self.dp.V[instr.x] & 0xF])

    # --- registers ---
    def _ld_vb(self, instr: Instruction) -> None:
        self.dp.V[instr.x] = instr.kk

    def _add_vb(self, instr: Instruction) -> None:
        self.dp.V[instr.x] = (self.dp.V[instr.x] + instr.kk) & 0xFF

    def _ld_vv(self, instr: Instruction) -> None:
        self.dp.V[instr.x] = self.dp.V[instr.y]

    def _or(self, instr: Instruction) -> None:
        self.dp.V[instr.x] |= self.dp.V[instr.y]

    def _and(self, instr: Instruction) -> None:
        self.dp.V[instr.x] &= self.dp.V[instr.y]

    def _xor(self, instr: Instruction) -> None:
        self.dp.V[instr.x] ^= self.dp.V[instr.y]

    # Flag-setting ops write Vx first and VF last, so VF wins when x == F.
    def _add_vv(self, instr: Instruction) -> None:
        v = self.dp.V
        total = v[instr.x] + v[instr.y]
        v[instr.x] = total & 0xFF
        v[FLAG] = 1 if total > 0xFF else 0

    def _sub(self, instr: Instruction) -> None:
        v = self.dp.V
        a, b = v[instr.x], v[instr.y]
        v[instr.x] = (a - b) & 0xFF
        v[FLAG] = 1 if a > b else 0

    def _subn(self, instr: Instruction) -> None:
        v = self.dp.V
        a, b = v[instr.x], v[instr.y]
        v[instr.x] = (b - a) & 0xFF
        v[FLAG] = 1 if b > a else 0

    def _shr(self, instr: Instruction) -> None:
        v = self.dp.V
        old = v[instr.x]
        v[instr.x] = old >> 1
        v[FLAG] = old & 0x01

    def _shl(self, instr: Instruction) -> None:
        v = self.dp.V
        old = v[instr.x]
        v[instr.x] = (old << 1) & 0xFF
        v[FLAG] = (old >> 7) & 0x01

    def _rnd(self, instr: Instruction) -> None:
        self.dp.V[instr.x] = self.rng.next_byte() & instr.kk

    # --- index / memory ---
    def _ld_i(self, instr: Instruction) -> None:
        self.dp.I = instr.nnn

    def _add_iv(self, instr: Instruction) -> None:
        # 12-bit wraparound, VF untouched
        self.dp.I = (self.dp.I + self.dp.V[instr.x]) & 0xFFF

    def _ld_fv(self, instr: Instruction) -> None:
        self.dp.I = (self.dp.V[instr.x] & 0xF) * GLYPH_SIZE

    def _ld_bv(self, instr: Instruction) -> None:
        dp = self.dp
        value = dp.V[instr.x]
        dp.write_byte(dp.I, value // 100)
        dp.write_byte(dp.I + 1, (value // 10) % 10)
        dp.write_byte(dp.I + 2, value % 10)

    def _ld_iv(self, instr: Instruction) -> None:
        dp = self.dp
        for r in range(instr.x + 1):
            dp.write_byte(dp.I + r, dp.V[r])

    def _ld_vi(self, instr: Instruction) -> None:
        dp = self.dp
        for r in range(instr.x + 1):
            dp.V[r] = dp.read_byte(dp.I + r)

    # --- timers ---
    def _ld_vdt(self, instr: Instruction) -> None:
        self.dp.V[instr.x] = self.dp.delay_timer

    def _ld_dtv(self, instr: Instruction) -> None:
        self.dp.delay_timer = self.dp.V[instr.x]

    def _ld_stv(self, instr: Instruction) -> None:
        self.dp.sound_timer = self.dp.V[instr.x]

    # --- input ---
    def _ld_vk(self, instr: Instruction) -> None:
        dp = self.dp
        key = dp.first_pressed_key()
        if key is not None:
            dp.V[instr.x] = key
            return
        # stay on this instruction until a key goes down
        dp.awaiting_key = instr.x
        self._jumped = True
        logging.debug("[tick %d] waiting for key -> V%X", dp.tick, instr.x)

    # --- display ---
    def _drw(self, instr: Instruction) -> None:
        dp = self.dp
        rows = [dp.read_byte(dp.I + r) for r in range(instr.n)]
        # coordinates are read before VF is reset: x or y may name VF
        vx, vy = dp.V[instr.x], dp.V[instr.y]
        dp.V[FLAG] = 0
        collision = dp.display.draw_sprite(vx, vy, rows)
        dp.V[FLAG] = 1 if collision else 0


# ---------- Debug snapshot ----------
def format_snapshot(dp: Datapath) -> str:
    """Format PC, the instruction at PC, registers, timers and I for single-stepping tools."""
    try:
        instr = decode_instr(dp.read_byte(dp.PC), dp.read_byte(dp.PC + 1))
        instr_txt = f"{instr.raw:04X}  {mnemonic(instr)}"
    except MemoryBoundsViolation:
        instr_txt = "----  <PC outside memory>"

    lines = [f"TICK: {dp.tick}  PC: 0x{dp.PC:03X}  INSTR: {instr_txt}"]
    for base in (0, 8):
        regs = "  ".join(f"V{r:X}: 0x{dp.V[r]:02X}" for r in range(base, base + 8))
        lines.append(regs)
    lines.append(
        f"I: 0x{dp.I:03X}  DT: {dp.delay_timer}  ST: {dp.sound_timer}  "
        f"SP: {len(dp.stack)}/{dp.stack_depth}"
    )
    if dp.awaiting_key is not None:
        lines.append(f"WAITING FOR KEY -> V{dp.awaiting_key:X}")
    return "\n".join(lines)


# ---------- Public API ----------
def load_program(path: str | Path) -> bytes:
    """Read a raw program image, rejecting images that do not fit in memory."""
    data = Path(path).read_bytes()
    if len(data) > MAX_PROGRAM_SIZE:
        msg = f"{path}: {len(data)} bytes, at most {MAX_PROGRAM_SIZE} fit in memory"
        raise ProgramTooLarge(msg)
    return data


def build_machine(
    program: bytes,
    config: dict[str, Any] | None = None,
    keys: Iterable[int] | None = None,
    rng: RandomSource | None = None,
) -> ControlUnit:
    """Create a Datapath for `program` from `config` and bind a ControlUnit to it."""
    cfg = load_config(config)
    dp = Datapath(
        program,
        stack_depth=cfg["stack_depth"],
        timer_hz=cfg["timer_hz"],
        sprite_policy=cfg["sprite_policy"],
        lenient_log=cfg["lenient_log"],
    )
    if keys is not None:
        dp.set_keys(keys)
    return ControlUnit(dp, rng if rng is not None else SeededRandom(cfg["seed"]))


def run_bytes(
    program: bytes,
    config: dict[str, Any] | None = None,
    keys: Iterable[int] | None = None,
    rng: RandomSource | None = None,
) -> tuple[Datapath, int, str]:
    """Run `tick_limit` ticks of `program`; return (datapath, ticks, state)."""
    cfg = load_config(config)
    cu = build_machine(program, cfg, keys=keys, rng=rng)
    ticks, state = cu.run(cfg["tick_limit"], 1.0 / cfg["instructions_per_second"])
    return cu.dp, ticks, state


# ---------- CLI ----------
def parse_keys(text: str) -> list[int]:
    """Parse a comma separated list of hex key names ("1,A,f")."""
    keys: list[int] = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            k = int(token, 16)
        except ValueError as e:
            msg = f"Bad key {token!r}: expected a hex digit 0-F"
            raise ValueError(msg) from e
        if not (0 <= k < NUM_KEYS):
            msg = f"Bad key {token!r}: expected a hex digit 0-F"
            raise ValueError(msg)
        keys.append(k)
    return keys


def main(argv: list[str] | None = None) -> int:
    """Run a program headless and print the final machine state."""
    ap = argparse.ArgumentParser(
        description="Processor VM runner. Loads a raw program image at 0x200 and runs it headless."
    )
    ap.add_argument("program", help="raw program image")
    ap.add_argument("--config", help="path to yaml config", default=None)
    ap.add_argument("--ticks", type=int, default=None, help="number of ticks to run (overrides tick_limit)")
    ap.add_argument("--keys", default="", help="keys held down for the whole run, e.g. '1,A'")
    ap.add_argument("--debug", action="store_true", help="enable debug logging to logfile (one line per tick).")
    ap.add_argument("--logfile", default=LOGFILE, help="path to processor log")
    ap.add_argument("--console", action="store_true", help="also echo logs to console")
    ap.add_argument("--show-display", action="store_true", help="print the display buffer as text")
    args = ap.parse_args(argv)

    init_logging(logfile=args.logfile, debug=args.debug, console=args.console)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print("Bad config:", e)
        return 2
    if args.ticks is not None:
        if args.ticks < 0:
            print("--ticks must be non-negative")
            return 2
        cfg["tick_limit"] = args.ticks

    try:
        keys = parse_keys(args.keys)
    except ValueError as e:
        print(e)
        return 2

    try:
        program = load_program(args.program)
    except FileNotFoundError:
        print("Program file not found:", args.program)
        return 2
    except ProgramTooLarge as e:
        print("Program too large:", e)
        return 2

    cu = build_machine(program, cfg, keys=keys)
    try:
        ticks, state = cu.run(cfg["tick_limit"], 1.0 / cfg["instructions_per_second"])
    except VMError as e:
        print(f"VM fault ({type(e).__name__}): {e}")
        print(format_snapshot(cu.dp))
        return 1

    print(format_snapshot(cu.dp))
    if args.show_display:
        print(cu.dp.display.render_text())
    print(f"TICKS: {ticks} ({state})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
