import pytest

from TCE.TMM.constants import MAX_SIGNALS, TIME_UNITS
from TCE.TMM.errors import (
    InputAccessError, ScriptError, ScriptSyntaxError, ScriptCompletenessError,
)
from TCE.TIM.control_script import (
    parse, read_script, normalize_timescale, is_name, is_number,
)

HEADER = "timescale 10 ns\nmodule top\n"


def syntax_error(text, source="bad.ctl"):
    with pytest.raises(ScriptSyntaxError) as info:
        parse(text, source)
    return info.value


# ── Time scale ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("requested,magnitude,factor", [
    (1, 1, 1), (7, 1, 7), (10, 10, 1), (30, 10, 3), (100, 100, 1),
    (250, 10, 25), (300, 100, 3), (1000, 100, 10), (12345, 1, 12345),
])
def test_normalize_timescale(requested, magnitude, factor):
    ts = normalize_timescale(requested, "us")
    assert (ts.magnitude, ts.factor, ts.unit) == (magnitude, factor, "us")


def test_normalize_timescale_invariant():
    for requested in range(1, 20001):
        ts = normalize_timescale(requested, "ns")
        assert ts.magnitude in (1, 10, 100)
        assert ts.magnitude * ts.factor == requested


@pytest.mark.parametrize("unit", TIME_UNITS)
def test_all_units_accepted(unit):
    config = parse(f"timescale 5 {unit}\nmodule m\nwire a 0\n")
    assert config.timescale.unit == unit


@pytest.mark.parametrize("line,reason", [
    ("timescale 10", "wrong number of tokens for 'timescale' directive"),
    ("timescale 10 ns extra", "wrong number of tokens for 'timescale' directive"),
    ("timescale ten ns", "'timescale' directive needs a number"),
    ("timescale -5 ns", "'timescale' directive needs a number"),
    ("timescale 0 ns", "'timescale' directive needs a positive number"),
    ("timescale 10 sec", "'timescale' must use one of (s, ms, us, ns, ps, fs)"),
    ("timescale 10 NS", "'timescale' must use one of (s, ms, us, ns, ps, fs)"),
])
def test_timescale_errors(line, reason):
    err = syntax_error(line + "\n")
    assert err.reason == reason
    assert err.lineno == 1


# ── Module ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("line,reason", [
    ("module", "wrong number of tokens for 'module' directive"),
    ("module a b", "wrong number of tokens for 'module' directive"),
    ("module 9lives", "'module' directive needs a name"),
    ("module a-b", "'module' directive needs a name"),
])
def test_module_errors(line, reason):
    assert syntax_error(line + "\n").reason == reason


def test_duplicate_module():
    err = syntax_error("module a\nmodule b\n")
    assert err.reason == "duplicate 'module' directive"
    assert err.lineno == 2


def test_duplicate_timescale():
    err = syntax_error("timescale 1 ns\ntimescale 2 ns\n")
    assert err.reason == "duplicate 'timescale' directive"


# ── Wire ─────────────────────────────────────────────────────────────────────

def test_scalar_and_vector_wires():
    config = parse(HEADER + "wire clk 0\nwire data 15 : 8\nwire top_bit 127\n")
    clk, data, top = config.signals
    assert (clk.hi_index, clk.lo_index, clk.width, clk.is_scalar) == (0, 0, 1, True)
    assert (data.hi_index, data.lo_index, data.width, data.is_scalar) == (15, 8, 8, False)
    assert top.width == 1


def test_vector_may_cover_everything():
    config = parse(HEADER + "wire all 127 : 0\n")
    assert config.signals[0].width == 128


def test_codes_follow_declaration_order():
    wires = "".join(f"wire w{i} {i % 128}\n" for i in range(100))
    config = parse(HEADER + wires)
    codes = [s.code for s in config.signals]
    assert codes[0] == "!"
    assert codes[93] == "~"
    assert codes[94] == "!!"
    assert codes[99] == "!&"
    assert len(set(codes)) == 100


@pytest.mark.parametrize("line,reason", [
    ("wire a", "wrong number of tokens for 'wire' directive"),
    ("wire a 1 :", "wrong number of tokens for 'wire' directive"),
    ("wire a 1 : 0 0", "wrong number of tokens for 'wire' directive"),
    ("wire 1a 1", "'wire' needs a name"),
    ("wire a x", "high index must be a number"),
    ("wire a 7 - 0", "separator ':' between high and low index missing"),
    ("wire a 7 : y", "low index must be a number"),
    ("wire a 128", "high index out of range"),
    ("wire a 200 : 0", "high index out of range"),
    ("wire a 127 : 128", "low index out of range"),
    ("wire a 0 : 7", "range must be specified as high : low"),
    ("wire a +1", "high index must be a number"),
])
def test_wire_errors(line, reason):
    assert syntax_error(HEADER + line + "\n").reason == reason


def test_duplicate_wire_name():
    err = syntax_error(HEADER + "wire a 0\nwire a 1\n")
    assert err.reason == "duplicate wire name 'a'"
    assert err.lineno == 4


def test_signal_table_capacity():
    wires = "".join(f"wire w{i} 0\n" for i in range(MAX_SIGNALS))
    assert len(parse(HEADER + wires).signals) == MAX_SIGNALS
    err = syntax_error(HEADER + wires + "wire extra 0\n")
    assert err.reason == f"too many wires (at most {MAX_SIGNALS})"


# ── Lines, comments, directives ──────────────────────────────────────────────

def test_comments_and_blank_lines_ignored():
    text = (
        "# capture of the bus interface\n"
        "\n"
        "   \t  \n"
        "#timescale 1 s\n"
        "timescale 1 ns   # trailing tokens are not comments\n"
    )
    err = syntax_error(text)
    assert err.lineno == 5


def test_free_directive_order():
    config = parse("wire a 3\n# later\nmodule m\n\ntimescale 100 ps\n")
    assert config.module == "m"
    assert config.timescale.magnitude == 100
    assert config.timescale.factor == 1


def test_unknown_directive_reports_line_and_file():
    err = syntax_error(HEADER + "\nreg a 1\n", source="cap.ctl")
    assert err.reason == "unknown directive"
    assert err.lineno == 4
    assert err.path == "cap.ctl"
    assert str(err) == "unknown directive in file 'cap.ctl', line 4"


def test_directives_are_case_sensitive():
    assert syntax_error("Module m\n").reason == "unknown directive"


def test_too_many_tokens():
    assert syntax_error("wire " + "a " * 25 + "\n").reason == "too many tokens"


def test_only_newline_ends_a_line():
    # a form feed inside a comment must not start a new line
    err = syntax_error("# note\x0ccontinued\nbogus\n")
    assert err.reason == "unknown directive"
    assert err.lineno == 2


def test_form_feed_does_not_shift_line_numbers():
    err = syntax_error(HEADER + "# a\x0cb\x1cc\u2028d\nreg x 1\n")
    assert err.lineno == 4


def test_crlf_line_endings():
    config = parse("timescale 10 ns\r\nmodule top\r\nwire a 0\r\n")
    assert config.module == "top"
    assert [s.name for s in config.signals] == ["a"]
    assert syntax_error(HEADER.replace("\n", "\r\n") + "reg a 1\r\n").lineno == 3


# ── Completeness ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("text,directive,message", [
    ("module m\nwire a 0\n", "timescale",
     "'timescale' directive missing in file 'cap.ctl'"),
    ("timescale 1 ns\nwire a 0\n", "module",
     "'module' directive missing in file 'cap.ctl'"),
    ("timescale 1 ns\nmodule m\n", "wire",
     "'wire' directive(s) missing in file 'cap.ctl'"),
    ("", "timescale",
     "'timescale' directive missing in file 'cap.ctl'"),
])
def test_completeness_errors(text, directive, message):
    with pytest.raises(ScriptCompletenessError) as info:
        parse(text, "cap.ctl")
    assert info.value.directive == directive
    assert info.value.lineno is None
    assert str(info.value) == message


def test_errors_are_script_errors():
    with pytest.raises(ScriptError):
        parse("bogus\n")
    with pytest.raises(ValueError):
        parse("bogus\n")


def test_parse_calls_are_independent():
    first = parse(HEADER + "wire a 0\nwire b 1\n")
    second = parse(HEADER + "wire c 2\n")
    assert [s.code for s in first.signals] == ["!", '"']
    assert [s.code for s in second.signals] == ["!"]


def test_configuration_is_immutable():
    config = parse(HEADER + "wire a 0\n")
    assert isinstance(config.signals, tuple)
    with pytest.raises(AttributeError):
        config.module = "other"


# ── Tokens and files ─────────────────────────────────────────────────────────

def test_token_predicates():
    assert is_name("_x9") and is_name("Abc") and not is_name("") and not is_name("a.b")
    assert is_number("0") and is_number("0127") and not is_number("") and not is_number("1e3")


def test_read_script(write_ctl):
    path = write_ctl(HEADER + "wire a 0\n")
    config = read_script(str(path))
    assert config.source == str(path)
    assert config.module == "top"


def test_read_script_missing(tmp_path):
    with pytest.raises(InputAccessError) as info:
        read_script(str(tmp_path / "missing.ctl"))
    assert "cannot open ctrl file" in str(info.value)
