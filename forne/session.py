"""
Forne: the library entry point.

A Forne instance owns one card set together with the script engine and
bundled resources used to resolve methods and adapters. It hands out
drivers for learn and test sessions and performs the explicit resets.
"""

from __future__ import annotations

import random

from loguru import logger

from forne.adapters import UpdateSummary, new_set_with_adapter, update_with_adapter
from forne.core import CardSet, CardType, Driver, SlimCard
from forne.errors import MethodMismatch
from forne.methods import ScriptMethod, resolve_method
from forne.resources import RawAdapter, RawMethod, ResourceTable
from forne.scripting import ScriptEngine


class Forne:
    """Backend for every operation on one set."""

    def __init__(
        self,
        card_set: CardSet,
        engine: ScriptEngine | None = None,
        resources: ResourceTable | None = None,
        rng: random.Random | None = None,
    ):
        """
        Wrap an existing set.

        Args:
            card_set: The set to operate on
            engine: Script engine (regex helpers registered if None)
            resources: Bundled scripts (loaded from the package if None)
            rng: Randomness for every driver this instance creates
        """
        self.card_set = card_set
        self.engine = engine or ScriptEngine.with_helpers()
        self.resources = resources or ResourceTable.bundled()
        self.rng = rng

    @classmethod
    def from_set(cls, card_set: CardSet, **kwargs) -> Forne:
        return cls(card_set, **kwargs)

    @classmethod
    def from_json(cls, text: str | bytes, **kwargs) -> Forne:
        """
        Load a stored set.

        Raises:
            PersistenceError: If the text is not a well-formed set.
        """
        return cls(CardSet.from_json(text), **kwargs)

    @classmethod
    def new_set(
        cls,
        source: str,
        adapter: RawAdapter,
        method: RawMethod,
        engine: ScriptEngine | None = None,
        resources: ResourceTable | None = None,
        rng: random.Random | None = None,
    ) -> Forne:
        """Create a new set from a document, for the given method."""
        engine = engine or ScriptEngine.with_helpers()
        resources = resources or ResourceTable.bundled()
        resolved = resolve_method(method, engine, resources)
        card_set = new_set_with_adapter(source, adapter, resolved, engine, resources)
        logger.info(f"Created set of {len(card_set.cards)} card(s) for method '{resolved.name}'")
        return cls(card_set, engine=engine, resources=resources, rng=rng)

    def resolve(self, method: RawMethod) -> ScriptMethod:
        return resolve_method(method, self.engine, self.resources)

    def learn(self, method: RawMethod) -> Driver:
        """
        Start or resume a learn session.

        Raises:
            MethodMismatch: If the set was learned with a different method.
                Reset learn progress with the new method to switch.
        """
        return Driver.new_learn(self.card_set, self.resolve(method), rng=self.rng)

    def test(self) -> Driver:
        """Start or resume a test."""
        return Driver.new_test(self.card_set, rng=self.rng)

    def save_set(self, indent: int | None = None) -> str:
        return self.card_set.to_json(indent=indent)

    def list(self, target: CardType = CardType.ALL) -> list[SlimCard]:
        return self.card_set.list_cards(target)

    def update_set(self, source: str, adapter: RawAdapter, method: RawMethod) -> UpdateSummary:
        """
        Re-import a document into this set.

        Raises:
            MethodMismatch: If the method is not the one the set uses.
        """
        resolved = self.resolve(method)
        if resolved.name != self.card_set.method:
            raise MethodMismatch(expected=self.card_set.method, found=resolved.name)
        return update_with_adapter(
            self.card_set, source, adapter, resolved, self.engine, self.resources
        )

    # ========================================
    # Resets (all irreversible)
    # ========================================

    def reset_learn(self, method: RawMethod) -> None:
        """
        Discard all learn progress, preparing the set for a method.

        This is also how a set moves to a different method: every card gets
        that method's default metadata and the set records its name.
        """
        resolved = self.resolve(method)
        default = resolved.default_metadata()
        self.card_set.reset_learn(default)
        if self.card_set.method != resolved.name:
            logger.info(f"Set method changed from '{self.card_set.method}' to '{resolved.name}'")
            self.card_set.method = resolved.name

    def reset_test(self) -> None:
        """Discard test progress. Stars are kept."""
        self.card_set.reset_test()

    def reset_stars(self) -> None:
        self.card_set.reset_stars()
