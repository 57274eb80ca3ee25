"""
Building card sets from source documents with adapter scripts.

An adapter script is compiled with the raw document bound to ``SOURCE`` and
must define ``get_pairs(source)``, returning the document's
[question, answer] pairs in order. Forne does the rest: every pair becomes
a fresh card carrying the method's default metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from forne.core.set import Card, CardSet
from forne.errors import (
    BundledScriptDefect,
    CompileError,
    ScriptPhase,
    ScriptRuntimeError,
)
from forne.methods.base import Method, checked
from forne.resources import CustomScript, InbuiltScript, RawAdapter, ResourceTable
from forne.scripting import ScriptEngine

GET_PAIRS = "get_pairs"
SOURCE_CONSTANT = "SOURCE"


@dataclass(frozen=True)
class UpdateSummary:
    """What re-importing a document did to a set."""

    added: int
    replaced: int


def check_pairs(value: Any) -> list[tuple[str, str]]:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"expected a list of [question, answer] pairs, got {type(value).__name__}")
    pairs = []
    for index, pair in enumerate(value):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise TypeError(f"item {index} is not a [question, answer] pair")
        question, answer = pair
        if not isinstance(question, str) or not isinstance(answer, str):
            raise TypeError(f"item {index} must hold two strings")
        pairs.append((question, answer))
    return pairs


def run_adapter(
    adapter: RawAdapter,
    source: str,
    engine: ScriptEngine,
    resources: ResourceTable,
) -> list[tuple[str, str]]:
    """
    Extract question/answer pairs from a document.

    Raises:
        UnknownScript: If an inbuilt adapter name is not bundled.
        CompileError: If a custom adapter does not compile.
        ScriptRuntimeError: If a custom adapter fails or returns bad pairs.
        BundledScriptDefect: If a bundled adapter fails in any way.
    """
    constants = {SOURCE_CONSTANT: source}
    if isinstance(adapter, InbuiltScript):
        body = resources.adapter_source(adapter.name)
        trusted = True
    elif isinstance(adapter, CustomScript):
        body = adapter.body
        trusted = False
    else:
        raise TypeError(f"expected an InbuiltScript or CustomScript, got {type(adapter).__name__}")

    try:
        script = engine.compile(body, adapter.name, constants)
        result = script.call(GET_PAIRS, source, phase=ScriptPhase.ADAPTATION)
        pairs = checked(ScriptPhase.ADAPTATION, GET_PAIRS, adapter.name, check_pairs, result)
    except (CompileError, ScriptRuntimeError) as err:
        if not trusted:
            raise
        raise BundledScriptDefect(adapter.name, err) from err

    logger.info(f"Adapter '{adapter.name}' found {len(pairs)} card(s)")
    return pairs


def new_set_with_adapter(
    source: str,
    adapter: RawAdapter,
    method: Method,
    engine: ScriptEngine,
    resources: ResourceTable,
) -> CardSet:
    """Create a set for a method from a document."""
    pairs = run_adapter(adapter, source, engine, resources)
    default = method.default_metadata()

    card_set = CardSet.empty(method.name)
    for question, answer in pairs:
        card_set.add_card(Card.fresh(question, answer, default))
    return card_set


def update_with_adapter(
    card_set: CardSet,
    source: str,
    adapter: RawAdapter,
    method: Method,
    engine: ScriptEngine,
    resources: ResourceTable,
) -> UpdateSummary:
    """
    Re-import a document into an existing set.

    A pair whose question matches an existing card replaces that card
    outright under the same id: its stars, difficulty, test progress and
    method data are all discarded. Pairs with new questions become new
    cards. Cards whose questions no longer appear are left alone.
    """
    pairs = run_adapter(adapter, source, engine, resources)
    default = method.default_metadata()

    by_question = {card.question: card_id for card_id, card in card_set.cards.items()}
    added = replaced = 0
    for question, answer in pairs:
        card = Card.fresh(question, answer, default)
        card_id = by_question.get(question)
        if card_id is None:
            by_question[question] = card_set.add_card(card)
            added += 1
        else:
            card_set.cards[card_id] = card
            replaced += 1

    logger.info(f"Updated set: {added} card(s) added, {replaced} replaced")
    return UpdateSummary(added=added, replaced=replaced)
