"""
Python script engine for methods and adapters.

Scripts are plain Python source. Compiling one runs its top level inside a
fresh namespace that already holds the engine's registered helpers and any
constants the caller binds (adapters get ``SOURCE``). The resulting
CompiledScript can then have its functions called by name and its
top-level constants read.

Scripts are not sandboxed: they run with the full privileges of the host.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from forne.errors import CompileError, ScriptPhase, ScriptRuntimeError

from .helpers import register_regex_helpers


class CompiledScript:
    """The namespace left behind after a script's top level has run."""

    def __init__(self, name: str, namespace: dict[str, Any]):
        self.name = name
        self._namespace = namespace

    def defines(self, name: str) -> bool:
        return name in self._namespace

    def constant(self, name: str, default: Any = None) -> Any:
        """Read a top-level name, or `default` if the script never set it."""
        return self._namespace.get(name, default)

    def call(self, function: str, *args: Any, phase: ScriptPhase) -> Any:
        """
        Call a function the script defines.

        Args:
            function: Name of the function
            *args: Positional arguments to pass
            phase: What the call is for, recorded on failure

        Raises:
            ScriptRuntimeError: If the function is missing or raises.
        """
        target = self._namespace.get(function)
        if target is None or not callable(target):
            raise ScriptRuntimeError(
                phase, function, self.name, f"script does not define a function named '{function}'"
            )
        try:
            return target(*args)
        except Exception as err:
            logger.warning(f"Script '{self.name}' raised in {function}(): {err!r}")
            raise ScriptRuntimeError(
                phase, function, self.name, f"{type(err).__name__}: {err}"
            ) from err


class ScriptEngine:
    """Compiles scripts with a shared set of registered helper functions."""

    def __init__(self):
        self._helpers: dict[str, Callable[..., Any]] = {}

    @classmethod
    def with_helpers(cls) -> ScriptEngine:
        """Create an engine with the standard regex helpers registered."""
        engine = cls()
        register_regex_helpers(engine)
        return engine

    @property
    def helpers(self) -> tuple[str, ...]:
        return tuple(self._helpers)

    def register(self, name: str, function: Callable[..., Any]) -> None:
        """Make a function available to every script compiled afterwards."""
        self._helpers[name] = function

    def compile(
        self,
        source: str,
        name: str,
        constants: Mapping[str, Any] | None = None,
    ) -> CompiledScript:
        """
        Compile a script and run its top level.

        Args:
            source: Python source text
            name: Name used in error messages
            constants: Extra names bound before the top level runs

        Raises:
            CompileError: On a syntax error or if the top level raises.
        """
        filename = f"<forne script {name}>"
        try:
            code = compile(source, filename, "exec")
        except SyntaxError as err:
            raise CompileError(name, err.msg, err.lineno, err.offset, err.text) from err
        except ValueError as err:
            raise CompileError(name, str(err)) from err

        namespace: dict[str, Any] = {"__name__": "__forne_script__"}
        namespace.update(self._helpers)
        if constants:
            namespace.update(constants)

        try:
            exec(code, namespace)
        except Exception as err:
            line = _failing_line(err, filename)
            source_line = None
            if line is not None:
                lines = source.splitlines()
                if 0 < line <= len(lines):
                    source_line = lines[line - 1]
            raise CompileError(
                name, f"top level raised {type(err).__name__}: {err}", line, None, source_line
            ) from err

        logger.debug(f"Compiled script '{name}'")
        return CompiledScript(name, namespace)


def _failing_line(err: Exception, filename: str) -> int | None:
    """Innermost line of the script itself in an exception's traceback."""
    line = None
    for frame in traceback.extract_tb(err.__traceback__):
        if frame.filename == filename:
            line = frame.lineno
    return line
