"""
Unit tests for the Forne facade.
"""

import random

import pytest

from forne import CardType, CustomScript, Forne, InbuiltScript, MethodMismatch

OTHER_METHOD = """
RESPONSES = ["ok"]

def get_weight(metadata, difficult):
    return 0 if metadata["done"] else 1

def adjust_card(response, metadata, difficult):
    return [{"done": True}, difficult]

def get_default_metadata():
    return {"done": False}
"""


@pytest.fixture
def forne(sample_qa_document):
    return Forne.new_set(
        sample_qa_document, InbuiltScript("qa"), InbuiltScript("speed"), rng=random.Random(3)
    )


class TestForne:
    """Test set-level operations."""

    def test_new_set_uses_method_defaults(self, forne):
        assert forne.card_set.method == "speed"
        assert len(forne.list()) == 2
        for card in forne.card_set.cards.values():
            assert card.method_data == {"weight": 1.0, "misses": 0}

    def test_save_and_reload(self, forne):
        reloaded = Forne.from_json(forne.save_set(indent=2))
        assert reloaded.card_set == forne.card_set

    def test_full_learn_pass(self, forne):
        """With speed, two correct answers per card finish the pass."""
        driver = forne.learn(InbuiltScript("speed"))
        card = driver.first()
        answered = 0
        while card is not None:
            card = driver.next("y")
            answered += 1

        assert answered == 4
        assert forne.card_set.run_state is None

    def test_full_test(self, forne):
        driver = forne.test()
        card = driver.first()
        while card is not None:
            card = driver.next("n")

        assert [card.question for card in forne.list(CardType.STARRED)] == [
            "What is the capital of France?",
            "What is 2 + 2?",
        ]
        forne.reset_stars()
        assert forne.list(CardType.STARRED) == []

    def test_learn_with_other_method_refused(self, forne):
        with pytest.raises(MethodMismatch):
            forne.learn(CustomScript("tester/other.py", OTHER_METHOD))

    def test_reset_learn_switches_method(self, forne):
        """Resetting with a new method is how a set changes hands."""
        other = CustomScript("tester/other.py", OTHER_METHOD)
        forne.learn(InbuiltScript("speed")).first()

        forne.reset_learn(other)

        assert forne.card_set.method == "tester/other.py"
        assert forne.card_set.run_state is None
        assert all(c.method_data == {"done": False} for c in forne.card_set.cards.values())
        driver = forne.learn(other)
        assert driver.allowed_responses() == ("ok",)

    def test_reset_test(self, forne):
        driver = forne.test()
        driver.first()
        driver.next("n")

        forne.reset_test()

        assert all(not c.seen_in_test for c in forne.card_set.cards.values())
        assert len(forne.list(CardType.STARRED)) == 1

    def test_update_set(self, forne):
        summary = forne.update_set(
            "Q: What is 3 + 3?\nA: 6\n", InbuiltScript("qa"), InbuiltScript("speed")
        )
        assert summary.added == 1
        assert len(forne.list()) == 3

    def test_update_with_other_method_refused(self, forne):
        with pytest.raises(MethodMismatch):
            forne.update_set("", InbuiltScript("qa"), CustomScript("tester/other.py", OTHER_METHOD))
