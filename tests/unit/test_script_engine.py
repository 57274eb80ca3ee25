"""
Unit tests for the script engine and the regex helpers scripts can call.
"""

import pytest

from forne.errors import CompileError, ScriptPhase, ScriptRuntimeError
from forne.scripting import ScriptEngine
from forne.scripting.helpers import (
    captures,
    is_match,
    matches,
    regexp_to_pairs,
    replace_all,
    replace_one,
)


class TestCompile:
    """Test compiling scripts."""

    def test_functions_and_constants_available(self, engine):
        script = engine.compile("LIMIT = 3\ndef double(x):\n    return x * 2\n", "doubler")

        assert script.defines("double")
        assert script.constant("LIMIT") == 3
        assert script.constant("MISSING") is None
        assert script.constant("MISSING", "fallback") == "fallback"
        assert script.call("double", 21, phase=ScriptPhase.WEIGHTING) == 42

    def test_syntax_error_has_location(self, engine):
        """Syntax errors should say where they are."""
        with pytest.raises(CompileError) as excinfo:
            engine.compile("x = 1\ndef broken(:\n    pass\n", "broken")

        err = excinfo.value
        assert err.script == "broken"
        assert err.line == 2
        assert "line 2" in str(err)
        assert "def broken(:" in str(err)

    def test_failing_top_level_is_compile_error(self, engine):
        """A top level that raises never yields a script."""
        with pytest.raises(CompileError) as excinfo:
            engine.compile("A = 1\nB = 1 / 0\n", "divider")

        assert excinfo.value.line == 2
        assert "ZeroDivisionError" in str(excinfo.value)

    def test_constants_bound_before_top_level(self, engine):
        script = engine.compile("UPPER = SOURCE.upper()\n", "upper", {"SOURCE": "abc"})
        assert script.constant("UPPER") == "ABC"

    def test_scripts_do_not_share_state(self, engine):
        engine.compile("LEAKED = 1\n", "first")
        second = engine.compile("", "second")
        assert not second.defines("LEAKED")


class TestCall:
    """Test calling script functions."""

    def test_missing_function(self, engine):
        script = engine.compile("", "empty")
        with pytest.raises(ScriptRuntimeError) as excinfo:
            script.call("get_weight", {}, False, phase=ScriptPhase.WEIGHTING)

        assert excinfo.value.phase is ScriptPhase.WEIGHTING
        assert excinfo.value.function == "get_weight"

    def test_non_callable_is_missing(self, engine):
        script = engine.compile("get_weight = 3\n", "constant")
        with pytest.raises(ScriptRuntimeError):
            script.call("get_weight", phase=ScriptPhase.WEIGHTING)

    def test_raising_function_wrapped(self, engine):
        script = engine.compile("def adjust_card(r, m, d):\n    raise KeyError('weight')\n", "bad")
        with pytest.raises(ScriptRuntimeError) as excinfo:
            script.call("adjust_card", "y", {}, False, phase=ScriptPhase.ADJUSTMENT)

        err = excinfo.value
        assert err.phase is ScriptPhase.ADJUSTMENT
        assert err.script == "bad"
        assert "KeyError" in err.message
        assert isinstance(err.__cause__, KeyError)


class TestHelperRegistration:
    """Test helper functions in scripts."""

    def test_standard_helpers_registered(self, engine):
        assert set(engine.helpers) == {
            "is_match",
            "matches",
            "captures",
            "replace_one",
            "replace_all",
            "regexp_to_pairs",
        }

    def test_bare_engine_has_no_helpers(self):
        assert ScriptEngine().helpers == ()

    def test_scripts_call_helpers(self, engine):
        script = engine.compile(
            "def get_pairs(source):\n    return regexp_to_pairs(r'(\\w+)=(\\w+)', 1, 2, source)\n",
            "kv",
        )
        assert script.call("get_pairs", "a=1 b=2", phase=ScriptPhase.ADAPTATION) == [
            ["a", "1"],
            ["b", "2"],
        ]

    def test_custom_helper(self):
        engine = ScriptEngine()
        engine.register("shout", lambda text: text.upper())
        script = engine.compile("LOUD = shout('hi')\n", "loud")
        assert script.constant("LOUD") == "HI"


class TestRegexHelpers:
    """Test the regex helpers directly."""

    def test_is_match(self):
        assert is_match(r"\d+", "abc 123")
        assert not is_match(r"\d+", "abc")

    def test_matches(self):
        assert matches(r"\d+", "1 22 333") == ["1", "22", "333"]

    def test_captures_include_whole_match(self):
        assert captures(r"(\w)=(\d)", "a=1 b=2") == [["a=1", "a", "1"], ["b=2", "b", "2"]]

    def test_captures_missing_group(self):
        with pytest.raises(ValueError, match="invalid capture found"):
            captures(r"(a)|(b)", "a")

    def test_replace_one_and_all(self):
        assert replace_one(r"o", "0", "foo") == "f0o"
        assert replace_all(r"o", "0", "foo") == "f00"
        assert replace_all(r"(\w+)@(\w+)", r"\2 at \1", "me@home") == "home at me"

    def test_regexp_to_pairs_bad_index(self):
        with pytest.raises(IndexError, match="did you start from 1"):
            regexp_to_pairs(r"(a)(b)", 1, 3, "ab")

    def test_regexp_to_pairs_order(self):
        assert regexp_to_pairs(r"(\w)(\d)", 2, 1, "a1 b2") == [["1", "a"], ["2", "b"]]
