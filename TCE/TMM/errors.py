# =============================================================================
# errors.py — TMM Error Types
# =============================================================================
#
# Every failure in the conversion pipeline is fatal, but none of the library
# code terminates the process.  Errors are raised as one of the types below
# and travel up to the CLI (TCE/TGM/data2vcd.py), which is the only place
# that turns them into an exit status.
#
#   TraceError
#     ├── InputAccessError        raw or script file unreadable / too short
#     ├── ScriptError             anything wrong inside the control script
#     │     ├── ScriptSyntaxError        bad line (has a line number)
#     │     └── ScriptCompletenessError  mandatory directive never seen
#     ├── InternalInvariantError  contract violation inside the engine
#     └── OutputAccessError       trace file cannot be created / written
# =============================================================================

from __future__ import annotations


class TraceError(Exception):
    """Base class for all conversion failures."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InputAccessError(TraceError, OSError):
    kind = "input-access"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ScriptError(TraceError, ValueError):
    """
    A problem in the control script.

    `path` is the script's name as given to the interpreter; `lineno` is the
    1-based line number, or None when the error concerns the script as a
    whole.
    """

    kind = "script"

    def __init__(self, reason: str, path: str, lineno: int | None = None) -> None:
        if lineno is None:
            message = f"{reason} in file '{path}'"
        else:
            message = f"{reason} in file '{path}', line {lineno}"
        super().__init__(message)
        self.reason = reason
        self.path = path
        self.lineno = lineno


class ScriptSyntaxError(ScriptError):
    kind = "script-syntax"


class ScriptCompletenessError(ScriptError):
    kind = "script-completeness"

    def __init__(self, directive: str, path: str, plural: bool = False) -> None:
        label = f"'{directive}' directive(s)" if plural else f"'{directive}' directive"
        super().__init__(f"{label} missing", path)
        self.directive = directive


class InternalInvariantError(TraceError, RuntimeError):
    kind = "internal"


class OutputAccessError(TraceError, OSError):
    kind = "output-access"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
