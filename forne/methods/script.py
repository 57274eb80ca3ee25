"""
Learning methods backed by a compiled script.

The script's RESPONSES constant is checked as soon as the method is built.
Its functions are only looked up when first called, so a missing or broken
get_weight surfaces on the first draw, tagged with the phase that failed.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any, TypeVar

from forne.core.set import MethodData
from forne.errors import BundledScriptDefect, ScriptPhase, ScriptRuntimeError
from forne.scripting import CompiledScript

from .base import (
    ADJUST_CARD,
    GET_DEFAULT_METADATA,
    GET_WEIGHT,
    RESPONSES,
    check_adjustment,
    check_metadata,
    check_responses,
    check_weight,
    checked,
)

T = TypeVar("T")


class ScriptMethod:
    """
    A method whose logic lives in a compiled script.

    Trusted (bundled) methods turn every failure into a BundledScriptDefect;
    custom ones raise recoverable ScriptRuntimeErrors.
    """

    def __init__(
        self,
        name: str,
        script: CompiledScript,
        responses: tuple[str, ...],
        trusted: bool = False,
    ):
        self.name = name
        self.responses = responses
        self.trusted = trusted
        self._script = script

    @classmethod
    def from_script(cls, name: str, script: CompiledScript, trusted: bool = False) -> ScriptMethod:
        """
        Bind a compiled script to the method contract.

        Raises:
            ContractViolation: If RESPONSES is missing or malformed.
        """
        responses = check_responses(script.name, script.constant(RESPONSES))
        return cls(name, script, responses, trusted=trusted)

    def weight(self, method_data: MethodData, difficult: bool) -> float:
        return self._invoke(
            ScriptPhase.WEIGHTING, GET_WEIGHT, check_weight, copy.deepcopy(method_data), difficult
        )

    def adjust(
        self, response: str, method_data: MethodData, difficult: bool
    ) -> tuple[MethodData, bool]:
        return self._invoke(
            ScriptPhase.ADJUSTMENT,
            ADJUST_CARD,
            check_adjustment,
            response,
            copy.deepcopy(method_data),
            difficult,
        )

    def default_metadata(self) -> MethodData:
        return self._invoke(ScriptPhase.DEFAULT_METADATA, GET_DEFAULT_METADATA, check_metadata)

    def _invoke(
        self, phase: ScriptPhase, function: str, check: Callable[[Any], T], *args: Any
    ) -> T:
        try:
            result = self._script.call(function, *args, phase=phase)
            return checked(phase, function, self._script.name, check, result)
        except ScriptRuntimeError as err:
            if not self.trusted:
                raise
            raise BundledScriptDefect(self.name, err) from err

    def __repr__(self) -> str:
        kind = "inbuilt" if self.trusted else "custom"
        return f"ScriptMethod({self.name!r}, {kind}, responses={self.responses!r})"
