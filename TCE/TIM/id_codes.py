# =============================================================================
# id_codes.py — VCD Identifier Code Assignment
# =============================================================================
#
# Each signal gets a short printable code, derived only from its zero-based
# declaration number n:
#
#   n <  94              -> one symbol:  chr(33 + n)
#   n <  94 + 94 * 94    -> two symbols: base-94 digits of (n - 94), MS first
#   otherwise            -> InternalInvariantError ("number too big")
#
# With MAX_SIGNALS = 128 only the first two-symbol codes are ever reached by
# a real script; the whole two-symbol range is still valid and tested.
# =============================================================================

from __future__ import annotations

from TCE.TMM.constants import CODE_MIN, NUM_CODES
from TCE.TMM.errors import InternalInvariantError

_BASE = ord(CODE_MIN)


def number_to_code(n: int) -> str:
    if n < 0:
        raise InternalInvariantError(f"negative number {n} in number_to_code()")
    if n < NUM_CODES:
        return chr(_BASE + n)
    n -= NUM_CODES
    if n < NUM_CODES * NUM_CODES:
        hi, lo = divmod(n, NUM_CODES)
        return chr(_BASE + hi) + chr(_BASE + lo)
    raise InternalInvariantError("number too big in number_to_code()")


def code_to_number(code: str) -> int:
    """Inverse of number_to_code(); used by the validators."""
    if len(code) == 1:
        return ord(code) - _BASE
    if len(code) == 2:
        return NUM_CODES + (ord(code[0]) - _BASE) * NUM_CODES + (ord(code[1]) - _BASE)
    raise InternalInvariantError(f"malformed identifier code {code!r}")
