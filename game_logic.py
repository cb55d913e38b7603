"""
Guess evaluation for Wordle games.
"""
from enum import Enum

WORD_LENGTH = 5
MAX_GUESSES = 6


class Tile(Enum):
    """Scoring outcome for a single letter of a guess."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


GLYPHS = {
    Tile.CORRECT: "\U0001F7E9",  # green square
    Tile.PRESENT: "\U0001F7E8",  # yellow square
    Tile.ABSENT: "⬛",       # black square
}
TILES_BY_GLYPH = {glyph: tile for tile, glyph in GLYPHS.items()}


# Evaluate an attempt against the secret answer.
def evaluate(attempt: str, answer: str) -> list:
    if len(attempt) != len(answer):
        raise ValueError(f"attempt {attempt!r} and answer {answer!r} differ in length")

    result = [Tile.ABSENT] * len(answer)
    remaining = list(answer)

# First pass: exact matches consume their letter from the answer
    for i, (a, s) in enumerate(zip(attempt, answer)):
        if a == s:
            result[i] = Tile.CORRECT
            remaining[i] = None

# Second pass: letters in the wrong position, each answer letter used at most once
    for i, a in enumerate(attempt):
        if result[i] is Tile.CORRECT:
            continue
        if a in remaining:
            result[i] = Tile.PRESENT
            remaining[remaining.index(a)] = None

    return result


def is_win(tiles) -> bool:
    return all(tile is Tile.CORRECT for tile in tiles)


# Tiles to a row of coloured squares, e.g. for chat replies.
def render(tiles) -> str:
    return "".join(GLYPHS[tile] for tile in tiles)


def parse(rendered: str) -> list:
    """
    Inverse of render().

    Raises:
        ValueError: if the string contains anything but tile glyphs
    """
    try:
        return [TILES_BY_GLYPH[glyph] for glyph in rendered]
    except KeyError as e:
        raise ValueError(f"not a tile glyph: {e.args[0]!r}") from None
