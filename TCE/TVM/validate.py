#!/usr/bin/env python3
# =============================================================================
# validate.py — TCE Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m TCE.TVM.validate
#             or python TCE/TVM/validate.py (from project root)
#
# Tests:
#   1. Constants integrity   — layout sizes, code alphabet, unit table
#   2. Bit addressing        — byte/bit decomposition, no aliasing
#   3. Identifier codes      — single and two-symbol ranges, overflow
#   4. Control interpreter   — time-scale split, directive validation
#   5. Trace encoder         — end-to-end on synthetic captures
# =============================================================================

import sys
import os

# Allow running from project root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import numpy as np

from TCE.TMM.constants import (
    NUM_STEPS, STEP_BYTES, NUM_BITS, RAW_FILE_BYTES,
    NUM_CODES, MAX_CODE_NUMBER, MAX_SIGNALS, TIME_UNITS,
)
from TCE.TMM.errors import (
    InputAccessError, ScriptSyntaxError, ScriptCompletenessError,
    InternalInvariantError,
)
from TCE.TLM.sample_store import RawSampleMatrix, bit_location
from TCE.TIM.id_codes import number_to_code, code_to_number
from TCE.TIM.control_script import parse, normalize_timescale
from TCE.TGM.vcd_writer import encode, encode_with_stats

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

FIXED_DATE = "Thu Jan  1 00:00:00 1970"

failures = 0

def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


def raises(exc_type, fn, *args) -> bool:
    try:
        fn(*args)
    except exc_type:
        return True
    return False


def blank_matrix() -> np.ndarray:
    return np.zeros((NUM_STEPS, STEP_BYTES), dtype=np.uint8)


# =============================================================================
# TEST 1 — Constants Integrity
# =============================================================================
print("\n" + "="*60)
print("TEST 1 — Constants Integrity")
print("="*60)

check("NUM_STEPS = 512",             NUM_STEPS == 512)
check("NUM_BITS = 128",              NUM_BITS == 128)
check("RAW_FILE_BYTES = 8192",       RAW_FILE_BYTES == 8192)
check("NUM_CODES = 94",              NUM_CODES == 94, f"got {NUM_CODES}")
check("MAX_CODE_NUMBER = 94 + 94*94", MAX_CODE_NUMBER == 94 + 94 * 94)
check("MAX_SIGNALS fits the code space", MAX_SIGNALS < MAX_CODE_NUMBER)
check("Six time units",              len(TIME_UNITS) == 6)


# =============================================================================
# TEST 2 — Bit Addressing
# =============================================================================
print("\n" + "="*60)
print("TEST 2 — Bit Addressing")
print("="*60)

locations = {bit_location(b) for b in range(NUM_BITS)}
check("All 128 bits map to distinct (byte, shift)", len(locations) == NUM_BITS)
check("Bit 0 lives in byte 15, shift 0",   bit_location(0) == (15, 0))
check("Bit 127 lives in byte 0, shift 7",  bit_location(127) == (0, 7))

# One bit set per step, walking through every bit position
walk = blank_matrix()
for t in range(NUM_STEPS):
    byte_index, shift = bit_location(t % NUM_BITS)
    walk[t, byte_index] = 1 << shift
samples = RawSampleMatrix(walk)
ok = all(
    samples.bit_at(t, b) == (1 if b == t % NUM_BITS else 0)
    for t in range(0, NUM_STEPS, 7)
    for b in range(NUM_BITS)
)
check("Walking-one pattern reads back exactly one set bit", ok)
check("Bit planes agree with bit_at",
      all(samples.bits[t, b] == samples.bit_at(t, b)
          for t in range(0, NUM_STEPS, 7) for b in range(NUM_BITS)))
check("change_steps flags every step of the walk for a 128-bit field",
      samples.change_steps(NUM_BITS - 1, 0)[1:].all())
check("Matrix is read-only", not samples.data.flags.writeable)
check("Illegal time rejected",
      raises(InternalInvariantError, samples.bit_at, NUM_STEPS, 0))
check("Illegal bit rejected",
      raises(InternalInvariantError, samples.bit_at, 0, NUM_BITS))
check("Short input rejected",
      raises(InputAccessError, RawSampleMatrix.from_bytes, bytes(RAW_FILE_BYTES - 1)))


# =============================================================================
# TEST 3 — Identifier Codes
# =============================================================================
print("\n" + "="*60)
print("TEST 3 — Identifier Codes")
print("="*60)

single = [number_to_code(n) for n in range(NUM_CODES)]
check("First 94 codes are single symbols", all(len(c) == 1 for c in single))
check("First code is '!', last single is '~'", single[0] == "!" and single[-1] == "~")
double = [number_to_code(n) for n in range(NUM_CODES, MAX_CODE_NUMBER)]
check("Next 94*94 codes are two symbols", all(len(c) == 2 for c in double))
check("All codes unique", len(set(single + double)) == MAX_CODE_NUMBER)
check("Code 94 is '!!'", number_to_code(94) == "!!")
check("Codes decode back to their number",
      all(code_to_number(number_to_code(n)) == n for n in range(0, MAX_CODE_NUMBER, 97)))
check("Overflow raises InternalInvariantError",
      raises(InternalInvariantError, number_to_code, MAX_CODE_NUMBER))


# =============================================================================
# TEST 4 — Control Interpreter
# =============================================================================
print("\n" + "="*60)
print("TEST 4 — Control Interpreter")
print("="*60)

split_ok = True
for requested in range(1, 5001):
    ts = normalize_timescale(requested, "ns")
    if ts.magnitude * ts.factor != requested or ts.magnitude not in (1, 10, 100):
        split_ok = False
        print(f"  {INFO} bad split for {requested}: {ts}")
        break
check("magnitude * factor == requested for 1..5000", split_ok)
check("250 -> 10 x 25",  normalize_timescale(250, "ps")[1:3] == (10, 25))
check("300 -> 100 x 3",  normalize_timescale(300, "ps")[1:3] == (100, 3))
check("7 -> 1 x 7",      normalize_timescale(7, "ps")[1:3] == (1, 7))

good = "timescale 10 ns\nmodule m\nwire a 0\nwire bus 7 : 0\n"
config = parse(good, "good.ctl")
check("Valid script parses",           config.module == "m")
check("Signals kept in order",         [s.name for s in config.signals] == ["a", "bus"])
check("Codes assigned in order",       [s.code for s in config.signals] == ["!", '"'])

check("Unknown directive rejected",
      raises(ScriptSyntaxError, parse, "reg x 1\n", "bad.ctl"))
check("Low-first range rejected",
      raises(ScriptSyntaxError, parse, "timescale 1 ns\nmodule m\nwire a 0 : 7\n", "bad.ctl"))
check("Bad unit rejected",
      raises(ScriptSyntaxError, parse, "timescale 1 xs\n", "bad.ctl"))
check("Missing wire rejected",
      raises(ScriptCompletenessError, parse, "timescale 1 ns\nmodule m\n", "bad.ctl"))


# =============================================================================
# TEST 5 — Trace Encoder
# =============================================================================
print("\n" + "="*60)
print("TEST 5 — Trace Encoder")
print("="*60)

script = parse("timescale 10 ns\nmodule m\nwire a 0\n", "e2e.ctl")

quiet = RawSampleMatrix(blank_matrix())
text = encode(script, quiet, date=FIXED_DATE)
lines = text.splitlines()
check("Constant capture: initial value 0!", lines[lines.index("$dumpvars") + 1] == "0!")
check("Constant capture: only closing marker after dump",
      lines[lines.index("$dumpvars") + 3:] == ["#512"],
      f"tail = {lines[lines.index('$dumpvars') + 3:]}")

step1 = blank_matrix()
step1[1, 15] = 0x01
text, stats = encode_with_stats(script, RawSampleMatrix(step1), date=FIXED_DATE)
tail = text.splitlines()[text.splitlines().index("$dumpvars") + 3:]
check("Bit 0 set at step 1 and cleared at step 2",
      tail == ["#1", "1!", "#2", "0!", "#512"], f"tail = {tail}")
check("Stats count two markers", stats.change_markers == 2)

check("Encoding is reproducible with a fixed date",
      encode(script, quiet, date=FIXED_DATE) == encode(script, quiet, date=FIXED_DATE))


# =============================================================================
# Summary
# =============================================================================
print("\n" + "="*60)
if failures == 0:
    print(f"  ALL TESTS PASSED")
else:
    print(f"  {failures} TEST(S) FAILED")
print("="*60 + "\n")
sys.exit(0 if failures == 0 else 1)
