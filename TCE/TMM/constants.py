# =============================================================================
# constants.py — TMM Format Constants
# =============================================================================
#
# Every value here is fixed by the raw capture format or by the VCD output
# conventions of the data2vcd converter.  Do not redefine any of these in
# another module; import them from here.

# -----------------------------------------------------------------------------
# RAW CAPTURE LAYOUT
# -----------------------------------------------------------------------------

NUM_STEPS  = 512                    # time steps per capture (0..511)
STEP_BYTES = 16                     # bytes per time step
NUM_BITS   = STEP_BYTES * 8         # = 128 bits per time step
RAW_FILE_BYTES = NUM_STEPS * STEP_BYTES   # = 8192, no header, no trailer

# Bit b of a time step lives in byte (LAST_BYTE - b // 8), at position b % 8.
# Byte 0 therefore holds bits 127..120, byte 15 holds bits 7..0.
LAST_BYTE = STEP_BYTES - 1          # = 15


# -----------------------------------------------------------------------------
# CONTROL SCRIPT
# -----------------------------------------------------------------------------

DIR_TIMESCALE = "timescale"
DIR_MODULE    = "module"
DIR_WIRE      = "wire"

COMMENT_PREFIX = "#"
RANGE_SEPARATOR = ":"

MAX_TOKENS  = 20                    # tokens per script line
MAX_SIGNALS = 128                   # capacity of the signal table

TIME_UNITS = ("s", "ms", "us", "ns", "ps", "fs")


# -----------------------------------------------------------------------------
# VCD IDENTIFIER CODES
# -----------------------------------------------------------------------------
# Codes are drawn from the visible ASCII range '!'..'~'.  One symbol covers
# the first NUM_CODES signals, two symbols the next NUM_CODES ** 2.

CODE_MIN  = "!"
CODE_MAX  = "~"
NUM_CODES = ord(CODE_MAX) - ord(CODE_MIN) + 1      # = 94
MAX_CODE_NUMBER = NUM_CODES + NUM_CODES * NUM_CODES  # = 8930, exclusive


# -----------------------------------------------------------------------------
# VCD OUTPUT
# -----------------------------------------------------------------------------

TOOL_VERSION = "data2vcd converter"
VAR_TYPE     = "wire"
HEADER_INDENT = "\t"
