"""
Error taxonomy for forne.

Every error a host is expected to recover from derives from ForneError.
BundledScriptDefect deliberately does not: a bundled method or adapter
failing means forne itself is broken.
"""

from __future__ import annotations

from enum import Enum


class ScriptPhase(str, Enum):
    """Which script entry point was running when a failure happened."""

    WEIGHTING = "weighting"
    ADJUSTMENT = "adjustment"
    DEFAULT_METADATA = "default-metadata"
    ADAPTATION = "adaptation"


class ForneError(Exception):
    """Base class for recoverable forne errors."""


class CompileError(ForneError):
    """A script could not be compiled (or its top level failed to run)."""

    def __init__(
        self,
        script: str,
        message: str,
        line: int | None = None,
        column: int | None = None,
        source_line: str | None = None,
    ):
        self.script = script
        self.message = message
        self.line = line
        self.column = column
        self.source_line = source_line
        super().__init__(self._render())

    def _render(self) -> str:
        location = f"{self.script}"
        if self.line is not None:
            location += f", line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
        text = f"compiling script '{location}' failed: {self.message}"
        if self.source_line:
            text += f"\n    {self.source_line.rstrip()}"
            if self.column is not None and self.column > 0:
                text += "\n    " + " " * (self.column - 1) + "^"
        return text


class ContractViolation(ForneError):
    """A script compiled but does not define what its contract requires."""

    def __init__(self, script: str, message: str):
        self.script = script
        self.message = message
        super().__init__(f"script '{script}' violates its contract: {message}")


class ScriptRuntimeError(ForneError):
    """A script entry point failed or returned malformed data at call time."""

    def __init__(self, phase: ScriptPhase, function: str, script: str, message: str):
        self.phase = phase
        self.function = function
        self.script = script
        self.message = message
        super().__init__(
            f"{phase.value} failed in '{function}' of script '{script}': {message}"
        )


class MethodMismatch(ForneError):
    """A learn session was started with a method other than the set's."""

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(
            f"given method '{found}' is not the same as the one that has been previously "
            f"used for this set ('{expected}'); reset the set before using a new method"
        )


class InvalidResponse(ForneError):
    """The response given to a driver is not one of its allowed responses."""

    def __init__(self, response: str, allowed: tuple[str, ...]):
        self.response = response
        self.allowed = allowed
        super().__init__(
            f"invalid response '{response}' (expected one of: {', '.join(allowed)})"
        )


class ProtocolViolation(ForneError):
    """The driver was polled out of order."""


class PersistenceError(ForneError):
    """A stored set could not be read."""


class UnknownScript(ForneError):
    """A bundled method or adapter was requested that does not exist."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(
            f"'{name}' is not an inbuilt {kind} (are you using the latest version of forne?)"
        )


class BundledScriptDefect(RuntimeError):
    """A trusted bundled script failed. This is a bug in forne."""

    def __init__(self, name: str, cause: Exception):
        self.name = name
        super().__init__(f"bundled script '{name}' failed (this is a bug in forne!): {cause}")
