"""Forne: a scriptable spaced repetition engine.

Usage:
    from forne import Forne, InbuiltScript

    forne = Forne.new_set(text, InbuiltScript("org"), InbuiltScript("speed"))
    driver = forne.learn(InbuiltScript("speed"))
    card = driver.first()
    while card is not None:
        print(f"Q: {card.question}")
        card = driver.next("y")
"""
from forne.core import Card, CardSet, CardType, Driver, SlimCard
from forne.errors import (
    BundledScriptDefect,
    CompileError,
    ContractViolation,
    ForneError,
    InvalidResponse,
    MethodMismatch,
    PersistenceError,
    ProtocolViolation,
    ScriptPhase,
    ScriptRuntimeError,
    UnknownScript,
)
from forne.methods import NativeMethod, ScriptMethod
from forne.resources import CustomScript, InbuiltScript, ResourceTable
from forne.scripting import ScriptEngine
from forne.session import Forne

__version__ = "0.1.0"

__all__ = [
    "BundledScriptDefect",
    "Card",
    "CardSet",
    "CardType",
    "CompileError",
    "ContractViolation",
    "CustomScript",
    "Driver",
    "Forne",
    "ForneError",
    "InbuiltScript",
    "InvalidResponse",
    "MethodMismatch",
    "NativeMethod",
    "PersistenceError",
    "ProtocolViolation",
    "ResourceTable",
    "ScriptEngine",
    "ScriptMethod",
    "ScriptPhase",
    "ScriptRuntimeError",
    "SlimCard",
    "UnknownScript",
]
