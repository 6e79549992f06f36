# =============================================================================
# control_script.py — Control Script Interpreter
# =============================================================================
#
# Turns the line-oriented control script into a validated Configuration.
#
# SCRIPT LANGUAGE
# ---------------
#   # comment                       (first token starts with '#')
#   timescale <number> <unit>       unit in s, ms, us, ns, ps, fs
#   module <name>
#   wire <name> <hi>                scalar, lo = hi
#   wire <name> <hi> : <lo>         vector, hi >= lo, both in 0..127
#
# Directives may appear in any order.  timescale and module are declared
# exactly once; at least one wire is required.  The first problem found
# stops the parse with a ScriptError carrying the script name and line.
#
# TIME SCALE NORMALISATION
# ------------------------
#   requested % 100 == 0  ->  magnitude 100, factor requested // 100
#   requested %  10 == 0  ->  magnitude  10, factor requested //  10
#   otherwise             ->  magnitude   1, factor requested
# The header prints "<magnitude> <unit>"; body timestamps are t * factor.
# =============================================================================

from __future__ import annotations

import re
from typing import NamedTuple

from TCE.TMM.constants import (
    DIR_TIMESCALE, DIR_MODULE, DIR_WIRE,
    COMMENT_PREFIX, RANGE_SEPARATOR,
    MAX_TOKENS, MAX_SIGNALS, NUM_BITS,
    TIME_UNITS,
)
from TCE.TMM.errors import (
    InputAccessError, ScriptSyntaxError, ScriptCompletenessError,
)
from .id_codes import number_to_code

_NAME_RE   = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"[0-9]+")


class TimeScale(NamedTuple):
    requested: int      # interval as written in the script
    magnitude: int      # 1, 10 or 100
    factor:    int      # magnitude * factor == requested
    unit:      str


class Signal(NamedTuple):
    name:     str
    hi_index: int
    lo_index: int
    code:     str

    @property
    def width(self) -> int:
        return self.hi_index - self.lo_index + 1

    @property
    def is_scalar(self) -> bool:
        return self.hi_index == self.lo_index


class Configuration(NamedTuple):
    timescale: TimeScale
    module:    str
    signals:   tuple[Signal, ...]
    source:    str      # script name, for messages


def is_name(token: str) -> bool:
    return _NAME_RE.fullmatch(token) is not None


def is_number(token: str) -> bool:
    """Non-empty run of decimal digits; no sign, no whitespace."""
    return _NUMBER_RE.fullmatch(token) is not None


def normalize_timescale(requested: int, unit: str) -> TimeScale:
    """Split `requested` into magnitude * factor, preferring the largest magnitude."""
    if requested % 100 == 0:
        magnitude = 100
    elif requested % 10 == 0:
        magnitude = 10
    else:
        magnitude = 1
    return TimeScale(requested, magnitude, requested // magnitude, unit)


# ── Builder ───────────────────────────────────────────────────────────────────

class ConfigBuilder:
    """
    Mutable parse state for one script.  Lives only for the duration of one
    parse() call; finalize() turns it into an immutable Configuration.
    """

    def __init__(self, source: str) -> None:
        self.source    = source
        self.timescale: TimeScale | None = None
        self.module:    str | None = None
        self.signals:   list[Signal] = []
        self._names:    set[str] = set()
        self._lineno   = 0

    def error(self, reason: str) -> ScriptSyntaxError:
        return ScriptSyntaxError(reason, self.source, self._lineno)

    # ── Line dispatch ────────────────────────────────────────────────────────

    def feed_line(self, lineno: int, line: str) -> None:
        self._lineno = lineno
        tokens = line.split()
        if not tokens or tokens[0].startswith(COMMENT_PREFIX):
            return
        if len(tokens) > MAX_TOKENS:
            raise self.error("too many tokens")

        directive, args = tokens[0], tokens[1:]
        if directive == DIR_TIMESCALE:
            self._timescale(args)
        elif directive == DIR_MODULE:
            self._module(args)
        elif directive == DIR_WIRE:
            self._wire(args)
        else:
            raise self.error("unknown directive")

    # ── Directives ───────────────────────────────────────────────────────────

    def _timescale(self, args: list[str]) -> None:
        if len(args) != 2:
            raise self.error("wrong number of tokens for 'timescale' directive")
        number, unit = args
        if not is_number(number):
            raise self.error("'timescale' directive needs a number")
        requested = int(number)
        if requested == 0:
            raise self.error("'timescale' directive needs a positive number")
        if unit not in TIME_UNITS:
            raise self.error(
                f"'timescale' must use one of ({', '.join(TIME_UNITS)})"
            )
        if self.timescale is not None:
            raise self.error("duplicate 'timescale' directive")
        self.timescale = normalize_timescale(requested, unit)

    def _module(self, args: list[str]) -> None:
        if len(args) != 1:
            raise self.error("wrong number of tokens for 'module' directive")
        if not is_name(args[0]):
            raise self.error("'module' directive needs a name")
        if self.module is not None:
            raise self.error("duplicate 'module' directive")
        self.module = args[0]

    def _wire(self, args: list[str]) -> None:
        if len(args) not in (2, 4):
            raise self.error("wrong number of tokens for 'wire' directive")
        name = args[0]
        if not is_name(name):
            raise self.error("'wire' needs a name")
        if not is_number(args[1]):
            raise self.error("high index must be a number")
        hi = int(args[1])
        if len(args) == 4:
            if args[2] != RANGE_SEPARATOR:
                raise self.error("separator ':' between high and low index missing")
            if not is_number(args[3]):
                raise self.error("low index must be a number")
            lo = int(args[3])
        else:
            lo = hi
        if hi >= NUM_BITS:
            raise self.error("high index out of range")
        if lo >= NUM_BITS:
            raise self.error("low index out of range")
        if hi < lo:
            raise self.error("range must be specified as high : low")
        if name in self._names:
            raise self.error(f"duplicate wire name '{name}'")
        if len(self.signals) >= MAX_SIGNALS:
            raise self.error(f"too many wires (at most {MAX_SIGNALS})")

        self._names.add(name)
        self.signals.append(Signal(name, hi, lo, number_to_code(len(self.signals))))

    # ── Finalisation ─────────────────────────────────────────────────────────

    def finalize(self) -> Configuration:
        if self.timescale is None:
            raise ScriptCompletenessError(DIR_TIMESCALE, self.source)
        if self.module is None:
            raise ScriptCompletenessError(DIR_MODULE, self.source)
        if not self.signals:
            raise ScriptCompletenessError(DIR_WIRE, self.source, plural=True)
        return Configuration(
            timescale=self.timescale,
            module=self.module,
            signals=tuple(self.signals),
            source=self.source,
        )


# ── Entry points ──────────────────────────────────────────────────────────────

def parse(text: str, source: str = "<script>") -> Configuration:
    """Interpret a whole control script and return its Configuration."""
    builder = ConfigBuilder(source)
    # Only \n ends a line; form feeds and other separators stay inside it.
    for lineno, line in enumerate(text.split("\n"), start=1):
        builder.feed_line(lineno, line.rstrip("\r"))
    return builder.finalize()


def read_script(path: str) -> Configuration:
    try:
        with open(path, "r", encoding="ascii", errors="replace") as f:
            text = f.read()
    except OSError as e:
        raise InputAccessError(f"cannot open ctrl file '{path}'", path=path) from e
    return parse(text, source=str(path))
