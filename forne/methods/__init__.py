"""
Learning methods for forne sessions.

Each method provides:
- responses: the tokens a user may answer with, in display order
- weight(): how likely a card is to be drawn next
- adjust(): the card's new metadata and difficulty after a response
- default_metadata(): metadata for a card that has never been learned
"""

from .base import Method
from .native import NativeMethod
from .resolve import resolve_method
from .script import ScriptMethod

__all__ = [
    "Method",
    "NativeMethod",
    "ScriptMethod",
    "resolve_method",
]
