import numpy as np
import pytest

from TCE.TMM.constants import NUM_STEPS, STEP_BYTES
from TCE.TLM.sample_store import RawSampleMatrix, bit_location

FIXED_DATE = "Thu Jan  1 00:00:00 1970"


def set_bit(matrix, time, bit_index, value=1):
    byte_index, shift = bit_location(bit_index)
    if value:
        matrix[time, byte_index] |= (1 << shift)
    else:
        matrix[time, byte_index] &= ~(1 << shift) & 0xFF


@pytest.fixture
def blank():
    return np.zeros((NUM_STEPS, STEP_BYTES), dtype=np.uint8)


@pytest.fixture
def write_raw(tmp_path):
    def write(matrix, name="capture.raw"):
        path = tmp_path / name
        path.write_bytes(matrix.tobytes())
        return path
    return write


@pytest.fixture
def write_ctl(tmp_path):
    def write(text, name="capture.ctl"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return write


@pytest.fixture
def samples_of():
    return lambda matrix: RawSampleMatrix(matrix, source="test")
