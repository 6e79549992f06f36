# =============================================================================
# sample_store.py — Raw Sample Store
# =============================================================================
#
# Loads the fixed-size raw capture and answers bit queries against it.
#
# RAW LAYOUT (fixed by the capture hardware, reproduced exactly):
#   512 time steps x 16 bytes, no header, no trailer.
#   For bit b (0..127) of a time step:
#       byte  = 15 - b // 8
#       shift = b % 8
#   so byte 0 carries bits 127..120 and byte 15 carries bits 7..0.
#
# The matrix is loaded all-or-nothing.  A short file never yields a padded
# matrix; it raises InputAccessError instead.  Once built, the backing numpy
# array is flagged read-only.
# =============================================================================

from __future__ import annotations

import numpy as np

from TCE.TMM.constants import (
    NUM_STEPS, STEP_BYTES, NUM_BITS, RAW_FILE_BYTES, LAST_BYTE,
)
from TCE.TMM.errors import InputAccessError, InternalInvariantError


def bit_location(bit_index: int) -> tuple[int, int]:
    """Return (byte_index, shift) holding `bit_index` within one time step."""
    return LAST_BYTE - bit_index // 8, bit_index % 8


class RawSampleMatrix:
    """
    Immutable 512 x 128-bit capture.

    Usage:
        samples = load("capture.raw")
        samples.bit_at(0, 127)         # -> 0 or 1
        samples.field(3, 7, 0)         # -> "01001100"
    """

    def __init__(self, matrix: np.ndarray, source: str = "<memory>") -> None:
        if matrix.shape != (NUM_STEPS, STEP_BYTES) or matrix.dtype != np.uint8:
            raise InternalInvariantError(
                f"raw matrix must be uint8 of shape ({NUM_STEPS}, {STEP_BYTES}), "
                f"got {matrix.dtype} {matrix.shape}"
            )
        self._data = matrix.copy()
        self._data.setflags(write=False)
        # Bit planes: column b is bit b.  Reversing the byte order puts byte 15
        # (bits 7..0) first; little bit order unpacks each byte LSB first.
        self._bits = np.unpackbits(self._data[:, ::-1], axis=1, bitorder="little")
        self._bits.setflags(write=False)
        self.source = source

    # ── Construction ────────────────────────────────────────────────────────

    @classmethod
    def from_bytes(cls, raw: bytes, source: str = "<memory>") -> RawSampleMatrix:
        """
        Build a matrix from the first RAW_FILE_BYTES of `raw`.
        Trailing bytes are ignored; fewer bytes raise InputAccessError.
        """
        if len(raw) < RAW_FILE_BYTES:
            raise InputAccessError(
                f"cannot read from data file '{source}' "
                f"(got {len(raw)} of {RAW_FILE_BYTES} bytes)",
                path=source,
            )
        flat = np.frombuffer(raw, dtype=np.uint8, count=RAW_FILE_BYTES)
        return cls(flat.reshape(NUM_STEPS, STEP_BYTES), source)

    # ── Queries ─────────────────────────────────────────────────────────────

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the (NUM_STEPS, STEP_BYTES) byte matrix."""
        return self._data

    @property
    def bits(self) -> np.ndarray:
        """Read-only (NUM_STEPS, NUM_BITS) array of 0/1; column b is bit b."""
        return self._bits

    def bit_at(self, time: int, bit_index: int) -> int:
        """Return bit `bit_index` (0..127) of time step `time` (0..511)."""
        self._check_time(time)
        if bit_index < 0 or bit_index >= NUM_BITS:
            raise InternalInvariantError(f"illegal bit number {bit_index} in bit_at()")
        byte_index, shift = bit_location(bit_index)
        return (int(self._data[time, byte_index]) >> shift) & 1

    def field(self, time: int, hi: int, lo: int) -> str:
        """Bits hi..lo of time step `time` as a '0'/'1' string, high bit first."""
        self._check_time(time)
        self._check_range(hi, lo)
        row = self._bits[time, lo:hi + 1][::-1]
        return (row + ord("0")).tobytes().decode("ascii")

    def field_changed(self, time: int, hi: int, lo: int) -> bool:
        """True if any bit of hi..lo differs between `time - 1` and `time`."""
        self._check_time(time - 1)
        self._check_time(time)
        self._check_range(hi, lo)
        return bool(np.any(self._bits[time - 1, lo:hi + 1] != self._bits[time, lo:hi + 1]))

    def change_steps(self, hi: int, lo: int) -> np.ndarray:
        """
        Boolean array of length NUM_STEPS; entry t is field_changed(t, hi, lo)
        for t >= 1.  Entry 0 is always False.
        """
        self._check_range(hi, lo)
        window = self._bits[:, lo:hi + 1]
        changed = np.zeros(NUM_STEPS, dtype=bool)
        changed[1:] = np.any(window[1:] != window[:-1], axis=1)
        return changed

    # ── Helpers ─────────────────────────────────────────────────────────────

    @staticmethod
    def _check_time(time: int) -> None:
        if time < 0 or time >= NUM_STEPS:
            raise InternalInvariantError(f"illegal time {time} in bit_at()")

    @staticmethod
    def _check_range(hi: int, lo: int) -> None:
        if lo < 0 or hi >= NUM_BITS or hi < lo:
            raise InternalInvariantError(f"illegal bit range {hi}:{lo}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawSampleMatrix):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"RawSampleMatrix(source={self.source!r})"


def load(path: str) -> RawSampleMatrix:
    """Read a raw capture file.  Raises InputAccessError on any failure."""
    try:
        with open(path, "rb") as f:
            raw = f.read(RAW_FILE_BYTES)
    except OSError as e:
        raise InputAccessError(f"cannot open data file '{path}'", path=path) from e
    return RawSampleMatrix.from_bytes(raw, source=str(path))
