# =============================================================================
# TCE/TIM/__init__.py — Trace Interpreter Module
# =============================================================================
#
# Reads the control script (timescale / module / wire directives) and turns
# it into an immutable Configuration with a compact code per signal.
#
# Sub-modules:
#   control_script.py  — parse(), read_script(), TimeScale, Signal
#   id_codes.py        — number_to_code() over the '!'..'~' alphabet
# =============================================================================
