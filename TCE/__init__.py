# =============================================================================
# Trace Conversion Engine (TCE)
# =============================================================================
#
# Converts a fixed-size raw logic capture into a VCD value-change trace that
# any waveform viewer can open.
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   control script  → TIM.control_script.parse()  → Configuration
#   raw capture     → TLM.sample_store.load()      → RawSampleMatrix
#   (Configuration, RawSampleMatrix)
#                   → TGM.vcd_writer.write_trace() → .vcd file
#
# Nothing flows backwards: no stage mutates the output of an earlier one, and
# nothing ever reads a generated trace back in.
#
# ── Module layout ─────────────────────────────────────────────────────────────
#   TMM/  — Trace Mapping Module: format constants and error types
#   TLM/  — Trace Load Module: raw sample store and bit addressing
#   TIM/  — Trace Interpreter Module: control script and identifier codes
#   TGM/  — Trace Generation Module: VCD encoder and the data2vcd CLI
#   TVM/  — Trace Verification Module: self-validation suite
# =============================================================================
