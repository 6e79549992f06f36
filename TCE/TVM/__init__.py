# =============================================================================
# TCE/TVM/__init__.py — Trace Verification Module
# =============================================================================
#
# Checks that the addressing rule, the identifier codes, the time-scale
# normalisation and the encoder agree with the format before a trace is
# trusted.
#
# Sub-modules:
#   validate.py  — self-validation suite  (python -m TCE.TVM.validate)
# =============================================================================
