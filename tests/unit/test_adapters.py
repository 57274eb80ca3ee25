"""
Unit tests for adapters: the bundled org and qa scripts, custom adapters,
and importing pairs into new and existing sets.
"""

import pytest

from forne.adapters import new_set_with_adapter, run_adapter, update_with_adapter
from forne.errors import BundledScriptDefect, CompileError, ScriptRuntimeError, UnknownScript
from forne.resources import CustomScript, InbuiltScript, ResourceTable

ORG_DOCUMENT = """\
#+title: Capitals

* [ ] What is the capital of France? :drill:
** Answer
Paris
* [ ] What is the capital of Italy? :drill:
** Answer
Rome
"""


def pairs_of(card_set):
    return [(card.question, card.answer) for card in card_set.cards.values()]


class TestBundledAdapters:
    """Test the adapters shipped with forne."""

    def test_bundled_names(self, resources):
        assert resources.adapter_names() == ["org", "qa"]
        assert resources.method_names() == ["speed"]

    def test_qa(self, engine, resources, sample_qa_document):
        pairs = run_adapter(InbuiltScript("qa"), sample_qa_document, engine, resources)
        assert pairs == [
            ("What is the capital of France?", "Paris"),
            ("What is 2 + 2?", "4"),
        ]

    def test_qa_multiline_answer_without_blank_line(self, engine, resources):
        document = "Q: Primary colours?\nA: red\nyellow\nblue\nQ: Secondary?\nA: green\n"
        pairs = run_adapter(InbuiltScript("qa"), document, engine, resources)
        assert pairs == [("Primary colours?", "red\nyellow\nblue"), ("Secondary?", "green")]

    def test_qa_windows_line_endings(self, engine, resources):
        pairs = run_adapter(InbuiltScript("qa"), "Q: one\r\nA: 1\r\n", engine, resources)
        assert pairs == [("one", "1")]

    def test_org(self, engine, resources):
        pairs = run_adapter(InbuiltScript("org"), ORG_DOCUMENT, engine, resources)
        assert pairs == [
            ("What is the capital of France?", "Paris"),
            ("What is the capital of Italy?", "Rome"),
        ]

    def test_empty_document(self, engine, resources):
        assert run_adapter(InbuiltScript("qa"), "", engine, resources) == []

    def test_unknown_bundled_adapter(self, engine, resources):
        with pytest.raises(UnknownScript):
            run_adapter(InbuiltScript("csv"), "", engine, resources)

    def test_broken_bundled_adapter_is_defect(self, engine):
        broken = ResourceTable(adapters={"broken": "def get_pairs(source):\n    return 3\n"})
        with pytest.raises(BundledScriptDefect):
            run_adapter(InbuiltScript("broken"), "", engine, broken)


class TestCustomAdapters:
    """Test user-supplied adapters."""

    def test_source_bound_as_constant(self, engine, resources):
        adapter = CustomScript(
            "lines.py",
            "LINES = SOURCE.splitlines()\n"
            "def get_pairs(source):\n"
            "    return [line.split('=', 1) for line in LINES]\n",
        )
        pairs = run_adapter(adapter, "a=1\nb=2", engine, resources)
        assert pairs == [("a", "1"), ("b", "2")]

    def test_compile_error(self, engine, resources):
        with pytest.raises(CompileError):
            run_adapter(CustomScript("bad.py", "def get_pairs(:\n"), "", engine, resources)

    def test_missing_get_pairs(self, engine, resources):
        with pytest.raises(ScriptRuntimeError):
            run_adapter(CustomScript("empty.py", ""), "", engine, resources)

    @pytest.mark.parametrize(
        "result",
        ["'not a list'", "[['only one']]", "[['q', 2]]"],
    )
    def test_malformed_pairs(self, engine, resources, result):
        adapter = CustomScript("bad.py", f"def get_pairs(source):\n    return {result}\n")
        with pytest.raises(ScriptRuntimeError, match="malformed"):
            run_adapter(adapter, "", engine, resources)


class TestImport:
    """Test building and updating sets from pairs."""

    def test_new_set(self, engine, resources, countdown_method, sample_qa_document):
        card_set = new_set_with_adapter(
            sample_qa_document, InbuiltScript("qa"), countdown_method, engine, resources
        )

        assert card_set.method == "countdown"
        assert card_set.run_state is None
        assert card_set.test_in_progress is False
        assert pairs_of(card_set) == [
            ("What is the capital of France?", "Paris"),
            ("What is 2 + 2?", "4"),
        ]
        for card in card_set.cards.values():
            assert card.method_data == {"left": 1}
            assert not (card.starred or card.difficult or card.seen_in_test)

    def test_update_replaces_matching_cards(
        self, engine, resources, countdown_method, sample_qa_document
    ):
        """Re-imported questions lose all progress but keep their ids."""
        card_set = new_set_with_adapter(
            sample_qa_document, InbuiltScript("qa"), countdown_method, engine, resources
        )
        ids = list(card_set.cards)
        paris = card_set.cards[ids[0]]
        paris.starred = True
        paris.method_data = {"left": 0}

        summary = update_with_adapter(
            card_set,
            "Q: What is the capital of France?\nA: Paris, France\n\nQ: New?\nA: Yes\n",
            InbuiltScript("qa"),
            countdown_method,
            engine,
            resources,
        )

        assert summary.added == 1
        assert summary.replaced == 1
        assert list(card_set.cards)[:2] == ids
        replaced = card_set.cards[ids[0]]
        assert replaced.answer == "Paris, France"
        assert replaced.starred is False
        assert replaced.method_data == {"left": 1}
        # Cards missing from the new document stay
        assert card_set.cards[ids[1]].question == "What is 2 + 2?"
        assert pairs_of(card_set)[-1] == ("New?", "Yes")

    def test_failed_update_leaves_set_alone(
        self, engine, resources, countdown_method, sample_qa_document
    ):
        card_set = new_set_with_adapter(
            sample_qa_document, InbuiltScript("qa"), countdown_method, engine, resources
        )
        before = card_set.model_copy(deep=True)

        with pytest.raises(ScriptRuntimeError):
            update_with_adapter(
                card_set,
                "",
                CustomScript("bad.py", "def get_pairs(source):\n    raise ValueError\n"),
                countdown_method,
                engine,
                resources,
            )
        assert card_set == before
