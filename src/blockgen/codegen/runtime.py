"""Calling convention of the runtime helpers used by generated code.

Generated programs run on a single-threaded cooperative scheduler. Every
statement is a chain stage, and early exits travel through the chain as
tagged signal values instead of jump keywords:

- ``flowStage(fn)`` wraps a stage body. When the incoming value is a
  break or return signal the stage is skipped and the signal passed on,
  otherwise ``fn()`` runs and its result (a value or a pending result)
  becomes the stage result.
- ``promiseTimes(count, body)`` calls ``body(token, index)`` ``count``
  times, strictly one iteration after the other.
- ``promiseWhile(condition, body)`` calls ``body(token)`` while
  ``condition()`` holds, strictly one iteration after the other.
- Both drivers create a fresh ``token`` per loop invocation. An
  iteration resolving with ``flowBreak(token)`` for their own token ends
  the loop normally; a return signal ends the loop and is passed on; a
  failure is passed on unchanged.
- ``flowReturn(value)`` builds the return signal and ``isFlowReturn``
  recognizes it; its payload is ``signal.value``.

These names are emitted verbatim and must match the runtime.
"""

PROMISE = "Promise"
MATH = "Math"
PROMISE_TIMES = "promiseTimes"
PROMISE_WHILE = "promiseWhile"
FLOW_STAGE = "flowStage"
FLOW_BREAK = "flowBreak"
FLOW_RETURN = "flowReturn"
IS_FLOW_RETURN = "isFlowReturn"
FUNC_RESOLVE = "funcResolve"
FUNC_REJECT = "funcReject"
SIGNAL_PARAM = "signal"
REASON_PARAM = "reason"

RUNTIME_NAMES = frozenset(
    {
        PROMISE,
        MATH,
        PROMISE_TIMES,
        PROMISE_WHILE,
        FLOW_STAGE,
        FLOW_BREAK,
        FLOW_RETURN,
        IS_FLOW_RETURN,
        FUNC_RESOLVE,
        FUNC_REJECT,
        SIGNAL_PARAM,
        REASON_PARAM,
    },
)
"""Identifiers user names must never be mapped to."""

CHAIN_KEYWORDS = frozenset(
    {"function", "var", "return", "new", "if", "else", "null", "true", "false"},
)
"""Keywords of the chain dialect itself, reserved in every target."""


def stage_open() -> str:
    """Opening line of a chain stage."""
    return f".then({FLOW_STAGE}(function() {{"


def stage_close() -> str:
    """Closing line of a chain stage."""
    return "}))"


def chain_start() -> str:
    """Expression that starts a fresh chain."""
    return f"{PROMISE}.resolve()"
