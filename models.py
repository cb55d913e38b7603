"""
Dialogue state models for Wordle conversations.
"""
from dataclasses import dataclass
from typing import Tuple, Union

from game_logic import parse


@dataclass(frozen=True)
class StartState:
    """No game running; the resting state of every conversation."""

    def to_dict(self):
        return {"state": "start"}


@dataclass(frozen=True)
class GuessState:
    """A game in progress."""
    answer: str
    # (rendered tiles, attempted word) per accepted guess
    guesses: Tuple[Tuple[str, str], ...] = ()
    # tokens of the previous message
    last_input: Tuple[str, ...] = ()

    @property
    def tries(self) -> int:
        return len(self.guesses)

    def grid(self) -> str:
        return "\n".join(tiles for tiles, _ in self.guesses)

    def to_dict(self):
        return {
            "state": "guessing",
            "answer": self.answer,
            "guesses": [list(g) for g in self.guesses],
            "last_input": list(self.last_input),
        }

    def __repr__(self):
        return f"<GuessState(tries={self.tries}, last_input={list(self.last_input)})>"


Dialogue = Union[StartState, GuessState]


def dialogue_from_dict(data) -> Dialogue:
    """Rebuild a dialogue state from to_dict() output. Raises ValueError on bad data."""
    kind = data.get("state")
    if kind == "start":
        return StartState()
    if kind == "guessing":
        guesses = tuple((tiles, word) for tiles, word in data.get("guesses", []))
        for tiles, _ in guesses:
            parse(tiles)
        return GuessState(
            answer=data["answer"],
            guesses=guesses,
            last_input=tuple(data.get("last_input", [])),
        )
    raise ValueError(f"unknown dialogue state {kind!r}")
