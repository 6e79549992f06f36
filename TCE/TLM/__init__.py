# =============================================================================
# TCE/TLM/__init__.py — Trace Load Module
# =============================================================================
#
# Loads the 512 x 128-bit raw capture and exposes the bit-addressing rule.
#
# Sub-modules:
#   sample_store.py  — RawSampleMatrix, load(), bit_location()
# =============================================================================
