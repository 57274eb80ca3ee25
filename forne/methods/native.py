"""
Learning methods implemented directly in Python.

Hosts embedding forne can supply a method as a table of plain callables
keyed by the same names a script would define. Entries are looked up at
call time, exactly like script functions.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from forne.core.set import MethodData
from forne.errors import ScriptPhase, ScriptRuntimeError

from .base import (
    ADJUST_CARD,
    GET_DEFAULT_METADATA,
    GET_WEIGHT,
    check_adjustment,
    check_metadata,
    check_responses,
    check_weight,
    checked,
)

T = TypeVar("T")


class NativeMethod:
    """A method backed by a table of Python callables."""

    def __init__(
        self,
        name: str,
        responses: Sequence[str],
        functions: Mapping[str, Callable[..., Any]],
    ):
        """
        Initialize a native method.

        Args:
            name: Name recorded on sets learned with this method
            responses: Allowed responses, in display order
            functions: get_weight, adjust_card and get_default_metadata

        Raises:
            ContractViolation: If the responses are malformed.
        """
        self.name = name
        self.responses = check_responses(name, list(responses))
        self._functions = dict(functions)

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
        target = self._functions.get(function)
        if target is None:
            raise ScriptRuntimeError(phase, function, self.name, f"no '{function}' was provided")
        try:
            result = target(*args)
        except Exception as err:
            raise ScriptRuntimeError(
                phase, function, self.name, f"{type(err).__name__}: {err}"
            ) from err
        return checked(phase, function, self.name, check, result)
