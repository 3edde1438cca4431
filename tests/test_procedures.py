"""Tests for procedure definitions, calls and early returns."""

import pytest

from blockgen.codegen import CodeGenerator, GenerationError
from blockgen.config_loader import GeneratorConfig
from blockgen.errors import ErrorCode
from blockgen.workspace import Workspace


def number(value: float) -> dict:
    return {"kind": "math_number", "fields": {"NUM": value}}


def var(name: str) -> dict:
    return {"kind": "variables_get", "fields": {"VAR": name}}


def generate(*blocks: dict, **config: object) -> str:
    workspace = Workspace.model_validate({"blocks": list(blocks)})
    return CodeGenerator(GeneratorConfig(**config)).generate(workspace)


TWICE = {
    "kind": "procedures_defreturn",
    "fields": {"NAME": "twice"},
    "arguments": ["n"],
    "values": {
        "RETURN": {
            "kind": "math_arithmetic",
            "fields": {"OP": "MULTIPLY"},
            "values": {"A": var("n"), "B": number(2)},
        },
    },
}


# =============================================================================
# Definition Tests
# =============================================================================


class TestDefinition:
    """Test procedure definitions."""

    def test_definition_with_return_value(self) -> None:
        """Settle the result from the return signal."""
        code = generate(TWICE)
        assert code == (
            "var n;\n"
            "\n"
            "function twice(n) {\n"
            "    return new Promise(function(funcResolve, funcReject) {\n"
            "        Promise.resolve()\n"
            "        .then(flowStage(function() {\n"
            "            return flowReturn(n * 2);\n"
            "        }))\n"
            "        .then(function(signal) {\n"
            "            if (isFlowReturn(signal)) {\n"
            "                funcResolve(signal.value);\n"
            "            } else {\n"
            "                funcResolve();\n"
            "            }\n"
            "        }, function(reason) {\n"
            "            funcReject(reason);\n"
            "        });\n"
            "    });\n"
            "}\n"
        )

    def test_definition_adds_nothing_to_body(self) -> None:
        """Keep definitions out of the top-level chain."""
        code = generate(TWICE)
        assert "Promise.resolve()\n.then" not in code

    def test_definition_without_return_value(self) -> None:
        """Emit no return stage for procedures without result."""
        block = {
            "kind": "procedures_defnoreturn",
            "fields": {"NAME": "beep"},
            "statements": {
                "STACK": {
                    "kind": "variables_set",
                    "fields": {"VAR": "x"},
                    "values": {"VALUE": number(1)},
                },
            },
        }
        code = generate(block)
        assert "function beep() {" in code
        assert "x = 1;" in code
        assert "flowReturn" not in code

    def test_procedure_name_avoids_reserved_words(self) -> None:
        """Rename procedures that collide with reserved words."""
        block = {"kind": "procedures_defnoreturn", "fields": {"NAME": "delete"}}
        assert "function delete2() {" in generate(block)

    def test_definitions_precede_body(self) -> None:
        """Put variable declarations, then definitions, then the chain."""
        call = {
            "kind": "procedures_callnoreturn",
            "fields": {"NAME": "twice"},
            "arguments": ["n"],
            "values": {"ARG0": number(4)},
        }
        code = generate(call, TWICE)
        declarations = code.index("var n;")
        definition = code.index("function twice(n) {")
        body = code.index("Promise.resolve()\n.then")
        assert declarations < definition < body
        assert "}\n\n\nPromise.resolve()" in code

    def test_instrumentation_precedes_body(self) -> None:
        """Run the loop trap, then the statement prefix, before the body."""
        block = {**TWICE, "id": "p1"}
        code = generate(block, statement_prefix="highlight(%1);", infinite_loop_trap="trap(%1);")
        assert code.index("trap('p1');") < code.index("highlight('p1');")
        assert code.index("highlight('p1');") < code.index("flowReturn(n * 2)")


# =============================================================================
# Call Tests
# =============================================================================


class TestCalls:
    """Test calls with and without result."""

    def test_call_with_result(self) -> None:
        """Translate a call used as a value."""
        call = {
            "kind": "procedures_callreturn",
            "fields": {"NAME": "twice"},
            "arguments": ["n"],
            "values": {"ARG0": number(21)},
        }
        setter = {"kind": "variables_set", "fields": {"VAR": "y"}, "values": {"VALUE": call}}
        code = generate(TWICE, setter)
        assert "    y = twice(21);\n" in code

    def test_missing_argument_is_null(self) -> None:
        """Pass null for empty argument slots."""
        call = {
            "kind": "procedures_callreturn",
            "fields": {"NAME": "mix"},
            "arguments": ["a", "b"],
            "values": {"ARG1": var("x")},
        }
        code = generate(call)
        assert "return mix(null, x);" in code

    def test_call_without_result_waits(self) -> None:
        """Chain the next statement after the call settles."""
        call = {"kind": "procedures_callnoreturn", "fields": {"NAME": "beep"}}
        code = generate(call)
        assert "    return beep().then(function() {});\n" in code


# =============================================================================
# Early Return Tests
# =============================================================================


def if_return(condition: dict, value: dict | None, *, has_value: bool) -> dict:
    values = {"CONDITION": condition}
    if value is not None:
        values["VALUE"] = value
    return {
        "kind": "procedures_ifreturn",
        "values": values,
        "has_return_value": has_value,
    }


class TestEarlyReturn:
    """Test conditional early returns."""

    def test_return_with_value(self) -> None:
        """Resolve the chain with a return signal carrying the value."""
        body = if_return(var("done"), number(1), has_value=True)
        block = {**TWICE, "statements": {"STACK": body}}
        code = generate(block)
        assert (
            "        .then(flowStage(function() {\n"
            "            if (done) {\n"
            "                return flowReturn(1);\n"
            "            }\n"
            "        }))\n"
        ) in code

    def test_return_without_value(self) -> None:
        """Resolve the chain with an empty return signal."""
        body = if_return(var("done"), None, has_value=False)
        block = {
            "kind": "procedures_defnoreturn",
            "fields": {"NAME": "stop"},
            "statements": {"STACK": body},
        }
        assert "return flowReturn();" in generate(block)

    def test_missing_value_is_null(self) -> None:
        """Return null when the value slot is empty."""
        body = if_return(var("done"), None, has_value=True)
        block = {**TWICE, "statements": {"STACK": body}}
        assert "return flowReturn(null);" in generate(block)

    def test_return_inside_loop_of_procedure(self) -> None:
        """Allow returns from loops nested in a procedure."""
        loop = {
            "kind": "controls_whileUntil",
            "fields": {"MODE": "WHILE"},
            "values": {"BOOL": {"kind": "logic_boolean", "fields": {"BOOL": "TRUE"}}},
            "statements": {"DO": if_return(var("done"), None, has_value=False)},
        }
        block = {
            "kind": "procedures_defnoreturn",
            "fields": {"NAME": "wait"},
            "statements": {"STACK": loop},
        }
        code = generate(block)
        assert "return promiseWhile(function() {" in code
        assert "return flowReturn();" in code

    def test_return_outside_procedure(self) -> None:
        """Fail the pass for a return outside any procedure."""
        block = {**if_return(var("done"), None, has_value=False), "id": "r9"}
        with pytest.raises(GenerationError) as exc_info:
            generate(block)
        assert exc_info.value.code == ErrorCode.E0005
        assert exc_info.value.block_id == "r9"
