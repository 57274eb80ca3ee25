"""
Driver: re-entrant polling over a card set.

The caller asks for a card with first(), shows it, collects the user's
response and hands it to next(), which updates the set and returns the
following card. Both return None once the session is over. The caller keeps
full control of display and timing, and can persist the set between any two
calls.

A learn driver weights and adjusts cards through a Method. A test driver
ignores method data entirely: every card in the target is shown once, and
the answers only star or unstar cards.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING
from uuid import UUID

from loguru import logger

from forne.errors import InvalidResponse, MethodMismatch, ProtocolViolation

from .sampler import Exhausted, WeightedSampler
from .set import Card, CardSet, CardType, SlimCard

if TYPE_CHECKING:
    from forne.methods.base import Method

TEST_RESPONSES = ("y", "n")
TEST_CORRECT = "y"
TEST_WRONG = "n"

# Test weights: unseen starred cards come up slightly more often
TEST_WEIGHT_UNSEEN = 1.0
TEST_WEIGHT_UNSEEN_STARRED = 1.5


class Driver:
    """
    Drives one learn or test session over a set.

    A driver has exclusive use of its set for as long as it lives. It
    remembers the id of the card in flight, never the card itself.
    """

    def __init__(
        self,
        card_set: CardSet,
        method: Method | None = None,
        rng: random.Random | None = None,
    ):
        self.card_set = card_set
        # None means this driver runs a test
        self.method = method
        self.sampler = WeightedSampler(rng)

        self.target = CardType.ALL
        self.max_count: int | None = None
        self.mark_starred = True
        self.mark_unstarred = True
        self.mutate_difficulty = True

        self._latest: UUID | None = None
        self._count = 0

    @classmethod
    def new_learn(
        cls, card_set: CardSet, method: Method, rng: random.Random | None = None
    ) -> Driver:
        """
        Start or resume a learn session with a method.

        Raises:
            MethodMismatch: If the set belongs to another method, or has an
                unfinished pass with one. Resetting the set's learn progress
                is the only way to switch.
        """
        if card_set.run_state is not None and card_set.run_state != method.name:
            raise MethodMismatch(expected=card_set.run_state, found=method.name)
        if card_set.method != method.name:
            raise MethodMismatch(expected=card_set.method, found=method.name)
        return cls(card_set, method, rng)

    @classmethod
    def new_test(cls, card_set: CardSet, rng: random.Random | None = None) -> Driver:
        """Start or resume a test. This cannot fail."""
        return cls(card_set, None, rng)

    @property
    def is_test(self) -> bool:
        return self.method is None

    # ========================================
    # Configuration
    # ========================================

    def set_target(self, target: CardType) -> Driver:
        """Only draw cards from this subset (all cards by default)."""
        self.target = CardType(target)
        return self

    def set_max_count(self, count: int) -> Driver:
        """
        Stop after this many cards, e.g. to review 30 cards a day.

        If the pass runs out first, the session simply ends early.
        """
        if count < 0:
            raise ValueError("max count cannot be negative")
        self.max_count = count
        return self

    def no_mark_starred(self) -> Driver:
        """In a test, leave cards the user gets wrong unstarred."""
        self.mark_starred = False
        return self

    def no_mark_unstarred(self) -> Driver:
        """In a test, keep cards starred even when the user gets them right."""
        self.mark_unstarred = False
        return self

    def no_mutate_difficulty(self) -> Driver:
        """In a learn session, never let the method change the difficult flag."""
        self.mutate_difficulty = False
        return self

    # ========================================
    # Polling
    # ========================================

    def allowed_responses(self) -> tuple[str, ...]:
        """Responses next() accepts, in display order."""
        if self.method is None:
            return TEST_RESPONSES
        return self.method.responses

    def get_count(self) -> int:
        """Number of cards shown so far, answered or not."""
        return self._count

    def first(self) -> SlimCard | None:
        """
        Draw the first card of this run, continuing any unfinished one.

        Returns:
            The card to show, or None if the session is over. When it is over
            because every weight reached zero, the pass is complete and its
            progress is reset for next time.

        Raises:
            ScriptRuntimeError: If the method fails while weighting cards.
        """
        if self.method is None:
            self.card_set.test_in_progress = True
        else:
            self.card_set.run_state = self.method.name

        if self.max_count is not None and self._count >= self.max_count:
            logger.debug(f"Reached max count of {self.max_count}")
            return None

        try:
            card_id = self.sampler.draw(self._weighted_candidates())
        except Exhausted:
            self._complete_pass()
            return None

        self._latest = card_id
        self._count += 1
        return self.card_set.cards[card_id].slim()

    def next(self, response: str) -> SlimCard | None:
        """
        Record the response to the card in flight and draw the next one.

        Raises:
            InvalidResponse: If the response is not allowed. Nothing changes.
            ProtocolViolation: If no card is in flight.
            ScriptRuntimeError: If the method fails. A failed adjustment
                changes nothing and leaves the card in flight.
        """
        allowed = self.allowed_responses()
        if response not in allowed:
            raise InvalidResponse(response, allowed)
        if self._latest is None:
            raise ProtocolViolation(
                "called next() before first(), or without handling an earlier error"
            )

        card = self.card_set.cards[self._latest]
        if self.method is None:
            self._record_test_response(card, response)
        else:
            method_data, difficult = self.method.adjust(response, card.method_data, card.difficult)
            card.method_data = method_data
            if self.mutate_difficulty:
                card.difficult = difficult

        # Cleared before drawing so the response can never be applied twice
        self._latest = None
        return self.first()

    def save_to_text(self) -> str:
        """Serialize the set. Call this between cards to keep progress safe."""
        return self.card_set.to_json()

    # ========================================
    # Internals
    # ========================================

    def _weighted_candidates(self):
        for card_id, card in self.card_set.targeted(self.target):
            yield card_id, self._weight(card)

    def _weight(self, card: Card) -> float:
        if self.method is not None:
            return self.method.weight(card.method_data, card.difficult)
        if card.seen_in_test:
            return 0.0
        if card.starred:
            return TEST_WEIGHT_UNSEEN_STARRED
        return TEST_WEIGHT_UNSEEN

    def _record_test_response(self, card: Card, response: str) -> None:
        card.seen_in_test = True
        if response == TEST_WRONG and self.mark_starred:
            card.starred = True
        elif response == TEST_CORRECT and self.mark_unstarred:
            card.starred = False

    def _complete_pass(self) -> None:
        if self.method is None:
            self.card_set.test_in_progress = False
            self.card_set.reset_test()
            logger.info("Test complete, test progress reset")
        else:
            default = self.method.default_metadata()
            self.card_set.reset_learn(default)
            logger.info(f"Learn pass with '{self.method.name}' complete, learn progress reset")
