"""Tests for loop and break generation.

Loops become a stage returning a loop driver call; break becomes a stage
resolving the iteration chain with the innermost loop's token.
"""

import pytest

from blockgen.codegen import CodeGenerator, GenerationError, UnsupportedOperationError
from blockgen.config_loader import GeneratorConfig
from blockgen.errors import ErrorCode
from blockgen.workspace import Workspace


def number(value: float) -> dict:
    return {"kind": "math_number", "fields": {"NUM": value}}


def var(name: str) -> dict:
    return {"kind": "variables_get", "fields": {"VAR": name}}


def brk() -> dict:
    return {"kind": "controls_flow_statements", "fields": {"FLOW": "BREAK"}}


def repeat(times: dict, body: dict | None = None, **extra: object) -> dict:
    return {
        "kind": "controls_repeat_ext",
        "values": {"TIMES": times},
        "statements": {"DO": body},
        **extra,
    }


def generate(*blocks: dict, **config: object) -> str:
    workspace = Workspace.model_validate({"blocks": list(blocks)})
    return CodeGenerator(GeneratorConfig(**config)).generate(workspace)


# =============================================================================
# Repeat Tests
# =============================================================================


class TestRepeat:
    """Test counting repeat loops."""

    def test_repeat_with_break(self) -> None:
        """Break out of a repeat loop with its own token."""
        code = generate(repeat(number(3), brk()))
        assert code == (
            "Promise.resolve()\n"
            ".then(flowStage(function() {\n"
            "    return promiseTimes(3, function(loop, count) {\n"
            "        return Promise.resolve()\n"
            "        .then(flowStage(function() {\n"
            "            return flowBreak(loop);\n"
            "        }));\n"
            "    });\n"
            "}));\n"
        )

    def test_repeat_field_count(self) -> None:
        """Accept the repeat count as a field."""
        code = generate({"kind": "controls_repeat", "fields": {"TIMES": 10}})
        assert "return promiseTimes(10, function(loop, count) {" in code

    def test_blank_field_count_is_zero(self) -> None:
        """Read a blank repeat count as zero."""
        code = generate({"kind": "controls_repeat", "fields": {"TIMES": ""}})
        assert "return promiseTimes(0, function(loop, count) {" in code

    def test_non_numeric_field_count_is_nan(self) -> None:
        """Read a non-numeric repeat count as NaN instead of failing."""
        code = generate({"kind": "controls_repeat", "fields": {"TIMES": "many"}})
        assert "return promiseTimes(NaN, function(loop, count) {" in code

    def test_identifier_count_not_hoisted(self) -> None:
        """Use a bare identifier count directly."""
        code = generate(repeat(var("n")))
        assert "promiseTimes(n, " in code
        assert "repeat_end" not in code

    def test_expression_count_hoisted(self) -> None:
        """Evaluate a compound count once, inside the loop stage."""
        times = {
            "kind": "math_arithmetic",
            "fields": {"OP": "ADD"},
            "values": {"A": var("n"), "B": number(1)},
        }
        code = generate(repeat(times))
        assert "    var repeat_end = n + 1;\n" in code
        assert "promiseTimes(repeat_end, " in code

    def test_empty_body(self) -> None:
        """Run an empty chain for an empty body."""
        code = generate(repeat(number(2)))
        assert "        return Promise.resolve();\n" in code

    def test_statements_after_loop_chain_after_it(self) -> None:
        """Chain the statement after the loop as the next stage."""
        after = {"kind": "variables_set", "fields": {"VAR": "x"}, "values": {"VALUE": number(1)}}
        code = generate(repeat(number(2), next=after))
        loop_end = code.index("    });\n}))\n")
        assert code.index("x = 1;") > loop_end
        assert code.endswith("    x = 1;\n}));\n")


# =============================================================================
# Break Token Tests
# =============================================================================


class TestBreakTokens:
    """Test that break leaves only the innermost enclosing loop."""

    def test_nested_loops_use_distinct_tokens(self) -> None:
        """Give each nested loop its own token."""
        inner = repeat(number(2), brk(), next=brk())
        code = generate(repeat(number(3), inner))
        assert "function(loop, count)" in code
        assert "function(loop2, count2)" in code
        assert "return flowBreak(loop2);" in code
        # The break after the inner loop belongs to the outer loop.
        assert code.index("return flowBreak(loop);") > code.index("return flowBreak(loop2);")

    def test_token_avoids_user_variable(self) -> None:
        """Never shadow a user variable named like the token."""
        body = {"kind": "variables_set", "fields": {"VAR": "loop"}, "values": {"VALUE": number(0)}}
        code = generate(repeat(number(2), body, next=None))
        assert code.startswith("var loop;\n")
        assert "function(loop2, count)" in code

    def test_break_outside_loop(self) -> None:
        """Fail the pass for a break with no enclosing loop."""
        with pytest.raises(GenerationError) as exc_info:
            generate({**brk(), "id": "stray"})
        assert exc_info.value.code == ErrorCode.E0004
        assert exc_info.value.block_id == "stray"

    def test_continue_unsupported(self) -> None:
        """Reject continue explicitly."""
        block = {"kind": "controls_flow_statements", "fields": {"FLOW": "CONTINUE"}}
        with pytest.raises(UnsupportedOperationError) as exc_info:
            generate(repeat(number(2), block))
        assert exc_info.value.code == ErrorCode.E0003

    def test_unknown_flow(self) -> None:
        """Fail the pass for unknown flow statements."""
        block = {"kind": "controls_flow_statements", "fields": {"FLOW": "JUMP"}}
        with pytest.raises(GenerationError) as exc_info:
            generate(repeat(number(2), block))
        assert exc_info.value.code == ErrorCode.E0002


# =============================================================================
# While / Until Tests
# =============================================================================


class TestWhileUntil:
    """Test condition loops."""

    def test_while(self) -> None:
        """Wrap the condition in a guard function."""
        loop = {
            "kind": "controls_whileUntil",
            "fields": {"MODE": "WHILE"},
            "values": {"BOOL": var("running")},
            "statements": {"DO": brk()},
        }
        code = generate(loop)
        assert (
            "    return promiseWhile(function() {\n"
            "        return running;\n"
            "    }, function(loop) {\n"
            "        return Promise.resolve()\n"
            "        .then(flowStage(function() {\n"
            "            return flowBreak(loop);\n"
            "        }));\n"
            "    });\n"
        ) in code

    def test_until_negates_grouped_condition(self) -> None:
        """Negate the condition in until mode."""
        condition = {
            "kind": "logic_compare",
            "fields": {"OP": "GT"},
            "values": {"A": var("x"), "B": number(5)},
        }
        loop = {
            "kind": "controls_whileUntil",
            "fields": {"MODE": "UNTIL"},
            "values": {"BOOL": condition},
        }
        assert "return !(x > 5);" in generate(loop)

    def test_missing_condition(self) -> None:
        """Never run a loop without condition."""
        loop = {"kind": "controls_whileUntil", "fields": {"MODE": "WHILE"}}
        assert "return false;" in generate(loop)


# =============================================================================
# Counting For Tests
# =============================================================================


def counting(start: dict, end: dict, step: dict, body: dict | None = None) -> dict:
    return {
        "kind": "controls_for",
        "fields": {"VAR": "i"},
        "values": {"FROM": start, "TO": end, "BY": step},
        "statements": {"DO": body},
    }


class TestCountingFor:
    """Test counting loops with literal and dynamic bounds."""

    def test_literal_ascending(self) -> None:
        """Count up with the increment as the last stage."""
        code = generate(counting(number(1), number(10), number(1)))
        assert code == (
            "var i;\n"
            "\n"
            "\n"
            "Promise.resolve()\n"
            ".then(flowStage(function() {\n"
            "    i = 1;\n"
            "    return promiseWhile(function() {\n"
            "        return i <= 10;\n"
            "    }, function(loop) {\n"
            "        return Promise.resolve()\n"
            "        .then(flowStage(function() {\n"
            "            i++;\n"
            "        }));\n"
            "    });\n"
            "}));\n"
        )

    def test_literal_descending_with_step(self) -> None:
        """Count down by the step magnitude."""
        code = generate(counting(number(10), number(1), number(-2)))
        assert "return i >= 1;" in code
        assert "i -= 2;" in code

    def test_exponent_literal_bounds(self) -> None:
        """Treat numbers printed with an exponent as literal bounds."""
        code = generate(counting(number(0), number(1e-07), number(1)))
        assert "return i <= 1e-07;" in code
        assert "i_inc" not in code

    def test_literal_descending_unit_step(self) -> None:
        """Decrement by one."""
        code = generate(counting(number(5), number(0), number(1)))
        assert "i--;" in code

    def test_increment_runs_after_body(self) -> None:
        """Run the body stages before the increment stage."""
        body = {"kind": "math_change", "fields": {"VAR": "total"}, "values": {"DELTA": var("i")}}
        code = generate(counting(number(1), number(3), number(1), body))
        assert code.index("total += i;") < code.index("i++;")

    def test_dynamic_bounds(self) -> None:
        """Decide the direction once, before the first iteration."""
        code = generate(counting(var("a"), var("b"), number(1)))
        assert (
            "    var i_inc = 1;\n"
            "    if (a > b) {\n"
            "        i_inc = -i_inc;\n"
            "    }\n"
            "    i = a;\n"
            "    return promiseWhile(function() {\n"
            "        return i_inc >= 0 ? i <= b : i >= b;\n"
            "    }, function(loop) {\n"
        ) in code
        assert "i += i_inc;" in code

    def test_dynamic_bounds_hoisted(self) -> None:
        """Evaluate compound bounds and step once."""
        start = {
            "kind": "math_arithmetic",
            "fields": {"OP": "ADD"},
            "values": {"A": var("a"), "B": number(1)},
        }
        code = generate(counting(start, number(10), var("step")))
        assert "var i_start = a + 1;" in code
        assert "var i_inc = Math.abs(step);" in code
        assert "if (i_start > 10) {" in code
        assert "i = i_start;" in code


# =============================================================================
# For Each Tests
# =============================================================================


class TestForEach:
    """Test collection iteration."""

    def test_literal_list_hoisted(self) -> None:
        """Hoist a list literal and walk it by index."""
        items = {"kind": "lists_create_with", "values": {"ADD0": number(1), "ADD1": number(2)}}
        loop = {
            "kind": "controls_forEach",
            "fields": {"VAR": "item"},
            "values": {"LIST": items},
        }
        code = generate(loop)
        assert (
            "    var item_list = [1, 2];\n"
            "    var item_index = 0;\n"
            "    return promiseWhile(function() {\n"
            "        return item_index < item_list.length;\n"
            "    }, function(loop) {\n"
            "        item = item_list[item_index];\n"
            "        item_index++;\n"
            "        return Promise.resolve();\n"
            "    });\n"
        ) in code

    def test_variable_list_not_hoisted(self) -> None:
        """Walk a list variable directly."""
        loop = {
            "kind": "controls_forEach",
            "fields": {"VAR": "item"},
            "values": {"LIST": var("things")},
        }
        code = generate(loop)
        assert "item_list" not in code
        assert "item = things[item_index];" in code


# =============================================================================
# Instrumentation Tests
# =============================================================================


class TestLoopInstrumentation:
    """Test the optional loop trap and statement prefix."""

    def test_trap_first_prefix_last(self) -> None:
        """Run the trap before and the prefix after the body."""
        body = {"kind": "variables_set", "fields": {"VAR": "x"}, "values": {"VALUE": number(1)}}
        code = generate(
            repeat(number(2), body, id="r1"),
            infinite_loop_trap="checkTrap(%1);",
            statement_prefix="highlight(%1);",
        )
        trap = code.index("checkTrap('r1');")
        assignment = code.index("x = 1;")
        prefix = code.index("highlight('r1');")
        assert trap < assignment < prefix

    def test_no_instrumentation_by_default(self) -> None:
        """Emit nothing extra without templates."""
        code = generate(repeat(number(2), brk()))
        assert code.count("flowStage") == 2
