# =============================================================================
# TCE/TMM/__init__.py — Trace Mapping Module
# =============================================================================
#
# Single source of truth for the raw capture layout, the control-script
# vocabulary and the VCD identifier alphabet, plus the error types every
# other module raises.
#
# Sub-modules:
#   constants.py  — all format constants
#   errors.py     — TraceError hierarchy
# =============================================================================
