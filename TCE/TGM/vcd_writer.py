# =============================================================================
# vcd_writer.py — VCD Trace Encoder
# =============================================================================
#
# Produces the value-change trace from a Configuration and a RawSampleMatrix.
#
# OUTPUT LAYOUT
#   $date / $version / $timescale          header boilerplate
#   $scope module <m> $end
#   $var wire <w> <code> <name> [..] $end   one per signal, table order
#   $upscope $end
#   $enddefinitions $end
#   #0 / $dumpvars / <all values> / $end   initial dump
#   #<t*factor> + changed values           only for steps with a change
#   #<512*factor>                          always, closes the timeline
#
# TIMESTAMP RULE:
#   At most one marker per time step, written lazily just before the first
#   changed signal of that step.  Steps without changes produce nothing.
#
# The $date line is the only non-reproducible field; pass `date=` to pin it.
# =============================================================================

from __future__ import annotations

import os
import tempfile
import time as _time
from typing import Iterator, NamedTuple

import numpy as np

from TCE.TMM.constants import NUM_STEPS, TOOL_VERSION, VAR_TYPE, HEADER_INDENT
from TCE.TMM.errors import OutputAccessError
from TCE.TIM.control_script import Configuration, Signal
from TCE.TLM.sample_store import RawSampleMatrix


class TraceStats(NamedTuple):
    signals:        int     # declared variables
    change_markers: int     # '#t' markers between #0 and the closing marker
    value_changes:  int     # value lines written after the initial dump
    end_time:       int     # scaled time of the closing marker


# ── Line formatting ───────────────────────────────────────────────────────────

def var_definition(signal: Signal) -> str:
    width = signal.width
    line = f"$var {VAR_TYPE} {width} {signal.code} {signal.name} "
    if width > 1:
        line += f"[{width - 1}:0] "
    return line + "$end"


def value_line(signal: Signal, samples: RawSampleMatrix, time: int) -> str:
    bits = samples.field(time, signal.hi_index, signal.lo_index)
    if signal.is_scalar:
        return f"{bits}{signal.code}"
    return f"b{bits} {signal.code}"


# ── Trace generation ──────────────────────────────────────────────────────────

class TraceEncoder:
    """
    Walks the capture once and yields trace lines (without newlines).
    Counters are filled in as lines are produced; read `stats` after the
    generator is exhausted.

    Usage:
        enc = TraceEncoder(config, samples)
        text = "".join(line + "\\n" for line in enc.lines())
        print(enc.stats)
    """

    def __init__(
        self,
        config:  Configuration,
        samples: RawSampleMatrix,
        date:    str | None = None,
    ) -> None:
        self.config  = config
        self.samples = samples
        self.date    = date
        self._markers = 0
        self._changes = 0

    @property
    def stats(self) -> TraceStats:
        return TraceStats(
            signals=len(self.config.signals),
            change_markers=self._markers,
            value_changes=self._changes,
            end_time=NUM_STEPS * self.config.timescale.factor,
        )

    def lines(self) -> Iterator[str]:
        self._markers = 0
        self._changes = 0
        yield from self._header()
        yield from self._initial_dump()
        yield from self._changes_body()

    # ── Sections ─────────────────────────────────────────────────────────────

    def _header(self) -> Iterator[str]:
        ts = self.config.timescale
        date = self.date if self.date is not None else _time.ctime()

        yield "$date"
        yield f"{HEADER_INDENT}{date}"
        yield "$end"
        yield "$version"
        yield f"{HEADER_INDENT}{TOOL_VERSION}"
        yield "$end"
        yield "$timescale"
        yield f"{HEADER_INDENT}{ts.magnitude} {ts.unit}"
        yield "$end"
        yield f"$scope module {self.config.module} $end"
        for signal in self.config.signals:
            yield var_definition(signal)
        yield "$upscope $end"
        yield "$enddefinitions $end"

    def _initial_dump(self) -> Iterator[str]:
        yield "#0"
        yield "$dumpvars"
        for signal in self.config.signals:
            yield value_line(signal, self.samples, 0)
        yield "$end"

    def _changes_body(self) -> Iterator[str]:
        factor = self.config.timescale.factor
        signals = self.config.signals
        changed = [self.samples.change_steps(s.hi_index, s.lo_index) for s in signals]
        any_changed = np.logical_or.reduce(changed, axis=0)
        for t in np.flatnonzero(any_changed).tolist():
            marker_written = False
            for signal, steps in zip(signals, changed):
                if not steps[t]:
                    continue
                if not marker_written:
                    yield f"#{t * factor}"
                    marker_written = True
                    self._markers += 1
                yield value_line(signal, self.samples, t)
                self._changes += 1
        yield f"#{NUM_STEPS * factor}"


# ── Entry points ──────────────────────────────────────────────────────────────

def iter_trace(
    config: Configuration, samples: RawSampleMatrix, date: str | None = None,
) -> Iterator[str]:
    """Yield the trace line by line, each terminated by a newline."""
    for line in TraceEncoder(config, samples, date).lines():
        yield line + "\n"


def encode(
    config: Configuration, samples: RawSampleMatrix, date: str | None = None,
) -> str:
    """Return the complete trace text."""
    return "".join(iter_trace(config, samples, date))


def encode_with_stats(
    config: Configuration, samples: RawSampleMatrix, date: str | None = None,
) -> tuple[str, TraceStats]:
    enc = TraceEncoder(config, samples, date)
    text = "".join(line + "\n" for line in enc.lines())
    return text, enc.stats


def write_trace(
    path:    str,
    config:  Configuration,
    samples: RawSampleMatrix,
    date:    str | None = None,
) -> TraceStats:
    """
    Write the trace to `path`.

    The text is written to a temporary file next to `path` and renamed over
    it only once complete, so a failed run never leaves a trace behind.
    The finished file gets the usual 0o666 & ~umask permissions rather than
    mkstemp's private 0o600.
    Raises OutputAccessError on any I/O failure.
    """
    text, stats = encode_with_stats(config, samples, date)

    directory = os.path.dirname(os.path.abspath(path))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".data2vcd-", suffix=".tmp", dir=directory)
    except OSError as e:
        raise OutputAccessError(f"cannot open vcd file '{path}'", path=path) from e

    try:
        with os.fdopen(fd, "w", encoding="ascii", newline="\n") as f:
            f.write(text)
        mask = os.umask(0)
        os.umask(mask)
        os.chmod(tmp_path, 0o666 & ~mask)
        os.replace(tmp_path, path)
    except (OSError, UnicodeEncodeError) as e:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise OutputAccessError(f"cannot write vcd file '{path}'", path=path) from e

    return stats
