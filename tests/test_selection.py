"""Tests for the selection adapter and its strategies."""

from __future__ import annotations

import click
import pytest
from conftest import ScriptedStrategy

from projx.config import Config
from projx.errors import SelectionCancelledError
from projx.services import selection
from projx.services.selection import (
    NarrowingPromptStrategy,
    Selector,
    StrictPromptStrategy,
    make_selector,
    narrow,
    register_strategy,
)


class TestSelector:
    def test_returns_value_paired_with_label(self) -> None:
        strategy = ScriptedStrategy("beta")
        selector = Selector(strategy)
        assert selector.select("Pick: ", [("alpha", 1), ("beta", 2)]) == 2
        assert strategy.seen == [("Pick: ", ["alpha", "beta"])]

    def test_duplicate_labels_are_shown_and_first_wins(self) -> None:
        strategy = ScriptedStrategy("same")
        selector = Selector(strategy)
        assert selector.select("Pick: ", [("same", "first"), ("same", "second")]) == "first"
        assert strategy.seen[0][1] == ["same", "same"]

    def test_cancel_raises(self) -> None:
        with pytest.raises(SelectionCancelledError):
            Selector(ScriptedStrategy(None)).select("Pick: ", [("a", 1)])

    def test_unknown_label_raises(self) -> None:
        with pytest.raises(SelectionCancelledError):
            Selector(ScriptedStrategy("zzz")).select("Pick: ", [("a", 1)])

    def test_empty_choices_raise_without_prompting(self) -> None:
        strategy = ScriptedStrategy("a")
        with pytest.raises(SelectionCancelledError):
            Selector(strategy).select("Pick: ", [])
        assert strategy.seen == []


class TestMakeSelector:
    def test_builds_configured_strategy(self) -> None:
        selector = make_selector(Config(selection_strategy="narrowing"))
        assert isinstance(selector._strategy, NarrowingPromptStrategy)

    def test_default_is_strict(self) -> None:
        assert isinstance(make_selector(Config())._strategy, StrictPromptStrategy)

    def test_unknown_strategy(self) -> None:
        with pytest.raises(ValueError, match="Unknown selection strategy"):
            make_selector(Config(selection_strategy="telepathy"))

    def test_registered_strategy_is_used(self, monkeypatch) -> None:
        monkeypatch.setattr(selection, "SELECTION_STRATEGIES", dict(selection.SELECTION_STRATEGIES))
        scripted = ScriptedStrategy("b")
        register_strategy("scripted", lambda: scripted)
        selector = make_selector(Config(selection_strategy="scripted"))
        assert selector.select("Pick: ", [("a", 1), ("b", 2)]) == 2


class TestStrictPromptStrategy:
    def test_prompts_with_exact_choice(self, monkeypatch) -> None:
        captured: dict[str, object] = {}

        def fake_prompt(text, **kwargs):  # type: ignore[no-untyped-def]
            captured["text"] = text
            captured["type"] = kwargs["type"]
            return "beta"

        monkeypatch.setattr("projx.services.selection.typer.prompt", fake_prompt)
        chosen = StrictPromptStrategy().select("Project: ", ["alpha", "beta"])
        assert chosen == "beta"
        assert captured["text"] == "Project"
        choice = captured["type"]
        assert isinstance(choice, click.Choice)
        assert list(choice.choices) == ["alpha", "beta"]

    def test_abort_cancels(self, monkeypatch) -> None:
        def fake_prompt(text, **kwargs):  # type: ignore[no-untyped-def]
            raise click.Abort()

        monkeypatch.setattr("projx.services.selection.typer.prompt", fake_prompt)
        assert StrictPromptStrategy().select("Project: ", ["alpha"]) is None


class TestNarrowingPromptStrategy:
    def _script(self, monkeypatch, *answers: str) -> None:
        queue = list(answers)
        monkeypatch.setattr(
            "projx.services.selection.typer.prompt", lambda text, **kwargs: queue.pop(0)
        )

    def test_narrows_until_single_candidate(self, monkeypatch) -> None:
        self._script(monkeypatch, "src", "view")
        labels = ["src/model.py", "src/view.py", "docs/view.md"]
        assert NarrowingPromptStrategy().select("File: ", labels) == "src/view.py"

    def test_exact_label_wins_over_narrowing(self, monkeypatch) -> None:
        self._script(monkeypatch, "app")
        assert NarrowingPromptStrategy().select("Project: ", ["app", "app-server"]) == "app"

    def test_no_match_keeps_candidates(self, monkeypatch) -> None:
        self._script(monkeypatch, "zzz", "server")
        assert NarrowingPromptStrategy().select("Project: ", ["app", "app-server"]) == "app-server"

    def test_empty_answer_cancels(self, monkeypatch) -> None:
        self._script(monkeypatch, "")
        assert NarrowingPromptStrategy().select("Project: ", ["app"]) is None


def test_narrow_matches_every_term_case_insensitively() -> None:
    labels = ["Core/Engine.py", "core/tests/test_engine.py", "ui/window.py"]
    assert narrow(labels, "core ENGINE") == ["Core/Engine.py", "core/tests/test_engine.py"]
    assert narrow(labels, "test eng") == ["core/tests/test_engine.py"]
    assert narrow(labels, "nothing") == []


def test_qt_strategy_uses_input_dialog(monkeypatch) -> None:
    from projx.ui import desktop

    monkeypatch.setattr(desktop, "_ensure_application", lambda: None)
    monkeypatch.setattr(
        desktop.QInputDialog, "getItem", lambda *args: ("beta", True), raising=False
    )
    selector = make_selector(Config(selection_strategy="qt"))
    assert selector.select("Project: ", [("alpha", "/a"), ("beta", "/b")]) == "/b"

    monkeypatch.setattr(desktop.QInputDialog, "getItem", lambda *args: ("", False), raising=False)
    with pytest.raises(SelectionCancelledError):
        selector.select("Project: ", [("alpha", "/a")])
