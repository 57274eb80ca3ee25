"""
Base protocol and result checks for learning methods.

A method decides how likely each card is to be shown next and how a card's
metadata changes after the user responds. Anything with the attributes
below is a method; the two implementations (compiled scripts and native
callables) share no base class.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from forne.core.set import MethodData, normalize_method_data
from forne.errors import ContractViolation, ScriptPhase, ScriptRuntimeError

T = TypeVar("T")

# Entry point names every method implements
GET_WEIGHT = "get_weight"
ADJUST_CARD = "adjust_card"
GET_DEFAULT_METADATA = "get_default_metadata"
RESPONSES = "RESPONSES"


class Method(Protocol):
    """Protocol for learning methods."""

    name: str
    responses: tuple[str, ...]

    def weight(self, method_data: MethodData, difficult: bool) -> float:
        """Relative likelihood of the card being drawn next. 0 retires it."""
        ...

    def adjust(
        self, response: str, method_data: MethodData, difficult: bool
    ) -> tuple[MethodData, bool]:
        """New metadata and difficulty flag after the user responded."""
        ...

    def default_metadata(self) -> MethodData:
        """Metadata for a card that has never been learned."""
        ...


def check_responses(script: str, value: Any) -> tuple[str, ...]:
    """
    Validate a RESPONSES value.

    Raises:
        ContractViolation: Unless it is a non-empty sequence of unique strings.
    """
    if value is None:
        raise ContractViolation(script, f"no constant '{RESPONSES}' is defined")
    if not isinstance(value, (list, tuple)):
        raise ContractViolation(
            script, f"'{RESPONSES}' must be a list of strings, not {type(value).__name__}"
        )
    if not value:
        raise ContractViolation(script, f"'{RESPONSES}' must contain at least one response")

    seen: set[str] = set()
    for response in value:
        if not isinstance(response, str):
            raise ContractViolation(script, f"'{RESPONSES}' contains non-string {response!r}")
        if response in seen:
            raise ContractViolation(script, f"'{RESPONSES}' contains '{response}' more than once")
        seen.add(response)
    return tuple(value)


def check_weight(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    weight = float(value)
    if not math.isfinite(weight) or weight < 0:
        raise ValueError(f"weight must be finite and non-negative, got {value!r}")
    return weight


def check_adjustment(value: Any) -> tuple[MethodData, bool]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise TypeError("expected a pair of [metadata, difficult]")
    metadata, difficult = value
    if not isinstance(difficult, bool):
        raise TypeError(f"difficulty flag must be a bool, got {type(difficult).__name__}")
    return normalize_method_data(metadata), difficult


def check_metadata(value: Any) -> MethodData:
    return normalize_method_data(value)


def checked(
    phase: ScriptPhase, function: str, script: str, check: Callable[[Any], T], value: Any
) -> T:
    """
    Run a result check, reporting a failure as the entry point's fault.

    Raises:
        ScriptRuntimeError: If the value is malformed.
    """
    try:
        return check(value)
    except (TypeError, ValueError, OverflowError, RecursionError) as err:
        raise ScriptRuntimeError(phase, function, script, f"returned malformed data: {err}") from err
