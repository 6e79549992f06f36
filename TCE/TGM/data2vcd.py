#!/usr/bin/env python3
# =============================================================================
# data2vcd.py — Raw Capture to VCD Converter (CLI)
# =============================================================================
#
# Usage:
#   python -m TCE.TGM.data2vcd <data file> <ctrl file> <vcd file>
#   python -m TCE.TGM.data2vcd <data file> <ctrl file> <vcd file> --quiet
#   data2vcd <data file> <ctrl file> <vcd file>        (installed script)
#
# Output sections:
#   [1] Inputs             — data file, ctrl file, destination
#   [2] Configuration      — time scale, module, signal table with codes
#   [3] Conversion report  — change markers, value changes, end time
#   [4] VERDICT            — DONE / error message
#
# Any failure prints "Error: <message>" and exits with status 1.  No trace
# file is left behind unless the conversion finished.
# =============================================================================

from __future__ import annotations
import sys, os, argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from TCE.TMM.constants import RAW_FILE_BYTES, NUM_STEPS
from TCE.TMM.errors import TraceError
from TCE.TLM.sample_store import load
from TCE.TIM.control_script import read_script, Configuration
from TCE.TGM.vcd_writer import write_trace, TraceStats

DIVIDER = "=" * 68


def print_config(config: Configuration) -> None:
    ts = config.timescale
    print(f"\n  -- Configuration --")
    print(f"  Time scale        : {ts.requested} {ts.unit}"
          f"  (header {ts.magnitude} {ts.unit}, factor {ts.factor})")
    print(f"  Module            : {config.module}")
    print(f"  Signals           : {len(config.signals)}")
    print(f"  {'Name':<24} {'Code':>4}  {'Range':>9}  {'Width':>5}")
    print(f"  {'-'*24}  {'-'*4}  {'-'*9}  {'-'*5}")
    for s in config.signals:
        rng = f"{s.hi_index}" if s.is_scalar else f"{s.hi_index}:{s.lo_index}"
        print(f"  {s.name:<24} {s.code:>4}  {rng:>9}  {s.width:>5}")


def print_stats(stats: TraceStats) -> None:
    print(f"\n  -- Conversion Report --")
    print(f"  Change markers    : {stats.change_markers:,}  (of {NUM_STEPS - 1} steps)")
    print(f"  Value changes     : {stats.value_changes:,}")
    print(f"  End time          : #{stats.end_time}")


def convert(data_path: str, ctrl_path: str, vcd_path: str, quiet: bool = False) -> TraceStats:
    """
    Run the full pipeline.  Raises TraceError on any failure; never exits.
    """
    if not quiet:
        print(f"\n{DIVIDER}")
        print(f"  data2vcd — Raw Capture to VCD")
        print(DIVIDER)
        print(f"  Data file : {data_path}  ({RAW_FILE_BYTES} bytes expected)")
        print(f"  Ctrl file : {ctrl_path}")
        print(f"  VCD file  : {vcd_path}")

    samples = load(data_path)
    config  = read_script(ctrl_path)
    if not quiet:
        print_config(config)

    stats = write_trace(vcd_path, config, samples)
    if not quiet:
        print_stats(stats)
        print(f"\n{DIVIDER}")
        print(f"  DONE — wrote {os.path.basename(vcd_path)}")
        print(f"{DIVIDER}\n")
    return stats


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="data2vcd",
        description="Convert a raw 512 x 128-bit capture into a VCD trace",
    )
    parser.add_argument("data", help="Raw sample file (512 x 16 bytes)")
    parser.add_argument("ctrl", help="Control script (timescale / module / wire)")
    parser.add_argument("vcd",  help="Destination VCD file")
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Only report errors",
    )
    args = parser.parse_args(argv)

    try:
        convert(args.data, args.ctrl, args.vcd, quiet=args.quiet)
    except TraceError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
