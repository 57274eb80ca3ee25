"""
Regex utilities made available to every method and adapter script.

Scripts call these as plain functions, e.g.
``regexp_to_pairs(r"Q: (.*)\\nA: (.*)", 1, 2, SOURCE)``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import ScriptEngine


def is_match(regex: str, text: str) -> bool:
    """Whether the regex matches anywhere in the text."""
    return re.search(regex, text) is not None


def matches(regex: str, text: str) -> list[str]:
    """Every non-overlapping match of the regex, as whole strings."""
    return [match.group(0) for match in re.finditer(regex, text)]


def captures(regex: str, text: str) -> list[list[str]]:
    """
    The capture groups of every match, group 0 (the whole match) first.

    Raises:
        ValueError: If a group did not take part in a match.
    """
    groups = []
    for match in re.finditer(regex, text):
        caps = []
        for index in range(len(match.groups()) + 1):
            cap = match.group(index)
            if cap is None:
                raise ValueError("invalid capture found")
            caps.append(cap)
        groups.append(caps)
    return groups


def replace_one(regex: str, replacement: str, text: str) -> str:
    """Replace the first match. Group references use Python's ``\\1`` syntax."""
    return re.sub(regex, replacement, text, count=1)


def replace_all(regex: str, replacement: str, text: str) -> str:
    """Replace every match."""
    return re.sub(regex, replacement, text)


def regexp_to_pairs(regex: str, question_idx: int, answer_idx: int, text: str) -> list[list[str]]:
    """
    Turn every match into a [question, answer] pair.

    Args:
        regex: Pattern with at least two capture groups
        question_idx: 1-based group holding the question
        answer_idx: 1-based group holding the answer
        text: Text to scan

    Raises:
        IndexError: If either index does not name a group.
        ValueError: If a named group did not take part in a match.
    """
    pattern = re.compile(regex)
    if not 0 <= question_idx <= pattern.groups:
        raise IndexError("question index did not exist (did you start from 1?)")
    if not 0 <= answer_idx <= pattern.groups:
        raise IndexError("answer index did not exist (did you start from 1?)")

    pairs = []
    for match in pattern.finditer(text):
        question = match.group(question_idx)
        answer = match.group(answer_idx)
        if question is None or answer is None:
            raise ValueError("question or answer group did not participate in a match")
        pairs.append([question, answer])
    return pairs


def register_regex_helpers(engine: ScriptEngine) -> None:
    """Register every helper in this module with an engine."""
    for function in (is_match, matches, captures, replace_one, replace_all, regexp_to_pairs):
        engine.register(function.__name__, function)
