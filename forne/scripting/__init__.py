"""
Scripting capability: compile script text, call its functions by name, and
read its top-level constants.
"""

from .engine import CompiledScript, ScriptEngine

__all__ = [
    "CompiledScript",
    "ScriptEngine",
]
