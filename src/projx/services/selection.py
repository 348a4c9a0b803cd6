"""Selection adapter: one prompting contract over interchangeable strategies."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

import click
import typer

from projx.errors import SelectionCancelledError

if TYPE_CHECKING:
    from projx.config import Config

logger = logging.getLogger(__name__)

_NARROWING_PREVIEW = 10


class SelectionStrategy(Protocol):
    """Shows ``labels`` and returns the one picked, or None when cancelled."""

    def select(self, prompt: str, labels: Sequence[str]) -> str | None: ...


type StrategyFactory = Callable[[], SelectionStrategy]


class StrictPromptStrategy:
    """Blocking prompt that only accepts an exact label."""

    def select(self, prompt: str, labels: Sequence[str]) -> str | None:
        for label in labels:
            typer.echo(f"  {label}")
        try:
            return typer.prompt(
                prompt.rstrip(": "),
                type=click.Choice(list(labels)),
                show_choices=False,
            )
        except click.Abort:
            return None


class NarrowingPromptStrategy:
    """Prompts for fragments, narrowing the candidates until one is left.

    Every whitespace-separated term of an answer must occur in a label,
    case-insensitively. An empty answer cancels.
    """

    def select(self, prompt: str, labels: Sequence[str]) -> str | None:
        candidates = list(labels)
        while True:
            for label in candidates[:_NARROWING_PREVIEW]:
                typer.echo(f"  {label}")
            if len(candidates) > _NARROWING_PREVIEW:
                typer.echo(f"  ... {len(candidates) - _NARROWING_PREVIEW} more")
            try:
                answer = typer.prompt(prompt.rstrip(": "), default="", show_default=False)
            except click.Abort:
                return None
            answer = answer.strip()
            if not answer:
                return None
            if answer in candidates:
                return answer
            narrowed = narrow(candidates, answer)
            if not narrowed:
                typer.echo(f"No match for {answer!r}")
                continue
            if len(narrowed) == 1:
                return narrowed[0]
            candidates = narrowed


def narrow(labels: Sequence[str], query: str) -> list[str]:
    """Labels containing every term of ``query``, case-insensitively."""
    terms = query.lower().split()
    return [label for label in labels if all(term in label.lower() for term in terms)]


def _qt_strategy() -> SelectionStrategy:
    from projx.ui.desktop import QtDialogStrategy

    return QtDialogStrategy()


SELECTION_STRATEGIES: dict[str, StrategyFactory] = {
    "strict": StrictPromptStrategy,
    "narrowing": NarrowingPromptStrategy,
    "qt": _qt_strategy,
}


def register_strategy(name: str, factory: StrategyFactory) -> None:
    """Make a selection strategy available under ``name``."""
    SELECTION_STRATEGIES[name] = factory


class Selector:
    """Single-choice selection over ``(label, value)`` pairs."""

    def __init__(self, strategy: SelectionStrategy) -> None:
        self._strategy = strategy

    def select[T](self, prompt: str, choices: Sequence[tuple[str, T]]) -> T:
        """Prompt for one of ``choices`` and return the value paired with its label.

        Duplicate labels are shown as given; the first pair with the chosen
        label wins.

        Raises:
            SelectionCancelledError: nothing to choose from, the prompt was
                aborted, or the strategy returned a label not on offer.
        """
        if not choices:
            raise SelectionCancelledError("Nothing to select from")
        labels = [label for label, _ in choices]
        chosen = self._strategy.select(prompt, labels)
        if chosen is None:
            raise SelectionCancelledError()
        for label, value in choices:
            if label == chosen:
                return value
        logger.debug("Strategy returned unknown label %r", chosen)
        raise SelectionCancelledError(f"{chosen!r} is not one of the choices")


def make_selector(config: Config) -> Selector:
    """Build the selector for the strategy named in ``config``."""
    try:
        factory = SELECTION_STRATEGIES[config.selection_strategy]
    except KeyError:
        known = ", ".join(sorted(SELECTION_STRATEGIES))
        msg = f"Unknown selection strategy {config.selection_strategy!r} (known: {known})"
        raise ValueError(msg) from None
    return Selector(factory())
