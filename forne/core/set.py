"""
Card set data model.

A set is created once by an adapter import and then mutated card by card
by every session run against it. Only the serialized format lives here;
reading and writing files is the host's business.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from uuid import UUID, uuid4

from loguru import logger
from pydantic import BaseModel, JsonValue, ValidationError

from forne.errors import PersistenceError

# Opaque per-card state owned by whichever method the set was made for.
MethodData = JsonValue


def normalize_method_data(value: object) -> MethodData:
    """
    Copy a value into the shape method data must have.

    Method data is restricted to what survives a JSON round trip
    unchanged: None, bools, ints, finite floats, strings, lists and
    string-keyed mappings. Tuples are accepted and become lists.

    Raises:
        TypeError: For unsupported types or non-string mapping keys.
        ValueError: For NaN and infinities.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"non-finite number {value!r} cannot be stored")
        return float(value)
    if isinstance(value, (list, tuple)):
        return [normalize_method_data(item) for item in value]
    if isinstance(value, dict):
        normalized: dict[str, MethodData] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"mapping keys must be strings, not {type(key).__name__}")
            normalized[key] = normalize_method_data(item)
        return normalized
    raise TypeError(f"values of type {type(value).__name__} cannot be stored as method data")


class CardType(str, Enum):
    """Which cards an operation targets."""

    ALL = "all"
    DIFFICULT = "difficult"
    STARRED = "starred"

    def includes(self, card: Card) -> bool:
        """Check whether a card belongs to this subset."""
        if self is CardType.DIFFICULT:
            return card.difficult
        if self is CardType.STARRED:
            return card.starred
        return True


@dataclass(frozen=True)
class SlimCard:
    """A card without its method data, as handed to callers for display."""

    question: str
    answer: str
    difficult: bool
    starred: bool


class Card(BaseModel):
    """One question/answer pair and everything learned about it."""

    question: str
    answer: str
    # Whether the card has been shown in the active test
    seen_in_test: bool
    # Set and cleared by the learning method, never by tests
    difficult: bool
    # Set when the user gets the card wrong in a test, cleared when they get it right
    starred: bool
    method_data: MethodData

    @classmethod
    def fresh(cls, question: str, answer: str, method_data: MethodData) -> Card:
        """Create a card with no learn or test history."""
        return cls(
            question=question,
            answer=answer,
            seen_in_test=False,
            difficult=False,
            starred=False,
            method_data=copy.deepcopy(method_data),
        )

    def slim(self) -> SlimCard:
        """Project this card for display."""
        return SlimCard(
            question=self.question,
            answer=self.answer,
            difficult=self.difficult,
            starred=self.starred,
        )


class CardSet(BaseModel):
    """
    A set of cards with the bookkeeping of learn and test sessions.

    `method` names the learning method that owns every card's
    `method_data`. Switching methods means discarding that data, so a
    learn session with a different method is refused while `run_state`
    records an unfinished pass.
    """

    method: str
    cards: dict[UUID, Card]
    # Name of the method with an unfinished learn pass, if any
    run_state: str | None = None
    test_in_progress: bool

    @classmethod
    def empty(cls, method: str) -> CardSet:
        return cls(method=method, cards={}, run_state=None, test_in_progress=False)

    @classmethod
    def from_json(cls, text: str | bytes) -> CardSet:
        """
        Load a set from its JSON form.

        Raises:
            PersistenceError: If the text is not a well-formed set.
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as err:
            logger.warning(f"Rejected stored set with {err.error_count()} problem(s)")
            raise PersistenceError(f"stored set is malformed: {err}") from err

    def to_json(self, indent: int | None = None) -> str:
        """Serialize this set, preserving all progress."""
        return self.model_dump_json(indent=indent)

    def add_card(self, card: Card) -> UUID:
        """Insert a card under a freshly generated id."""
        card_id = uuid4()
        self.cards[card_id] = card
        return card_id

    def targeted(self, target: CardType) -> Iterator[tuple[UUID, Card]]:
        """Iterate over the cards in a target subset, with their ids."""
        for card_id, card in self.cards.items():
            if target.includes(card):
                yield card_id, card

    def list_cards(self, target: CardType = CardType.ALL) -> list[SlimCard]:
        """List the cards of a subset without their method data."""
        return [card.slim() for _, card in self.targeted(target)]

    # ========================================
    # Resets (all irreversible)
    # ========================================

    def reset_test(self) -> None:
        """Forget which cards have been seen in a test. Stars are kept."""
        for card in self.cards.values():
            card.seen_in_test = False
        logger.debug(f"Reset test progress on {len(self.cards)} card(s)")

    def reset_stars(self) -> None:
        """Unstar every card."""
        for card in self.cards.values():
            card.starred = False
        logger.debug(f"Reset stars on {len(self.cards)} card(s)")

    def reset_learn(self, default_metadata: MethodData) -> None:
        """
        Put every card back to the method's default metadata and end any
        unfinished learn pass. Stars, difficulty and test progress are kept.
        """
        for card in self.cards.values():
            card.method_data = copy.deepcopy(default_metadata)
        self.run_state = None
        logger.debug(f"Reset learn progress on {len(self.cards)} card(s)")
