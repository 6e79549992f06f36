# =============================================================================
# TCE/TGM/__init__.py — Trace Generation Module
# =============================================================================
#
# Emits the VCD trace: header, declarations, initial dump, change body.
#
# Modules:
#   vcd_writer.py  — TraceEncoder, encode(), write_trace()
#   data2vcd.py    — command-line front end  (python -m TCE.TGM.data2vcd)
#
# Constants live in TCE/TMM/constants.py
# Verification tools live in TCE/TVM/
# =============================================================================
