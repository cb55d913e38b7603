"""
Per-conversation Wordle state machine.

A conversation is either at rest (StartState) or playing (GuessState).
DialogueEngine.react() takes the current state and the text of one
incoming message and returns the reply (None when the message is not
meant for us) along with the next state. It never talks to the
transport, so delivering the reply cannot influence the game.
"""
import logging
from typing import NamedTuple, Optional

from game_logic import MAX_GUESSES, WORD_LENGTH, evaluate, is_win, render
from models import Dialogue, GuessState, StartState
from wordstore import EditRejected

logger = logging.getLogger(__name__)

START_MESSAGE = f"Wordle game started - /guess any {WORD_LENGTH} letter word"
REMOVE_USAGE = "Usage: /removeword <WORD> [..WORD2]"
KEEP_ONE_PLAYABLE = "Cannot remove every playable word"
EXIT_COMMANDS = ("/exit", "/end", "/stop")


class Transition(NamedTuple):
    reply: Optional[str]
    state: Dialogue


def format_words(verb: str, words) -> str:
    if not words:
        return f"{verb} nothing"
    return f"{verb} {', '.join(sorted(words))}"


class DialogueEngine:
    """
    Args:
        store: shared WordStore
        bot_username: when set, "/cmd@<bot_username>" is read as "/cmd"
    """

    def __init__(self, store, bot_username=None):
        self.store = store
        self.bot_username = bot_username

    def tokenize(self, text: str) -> list:
        tokens = text.split()
        if tokens and self.bot_username:
            command, at, name = tokens[0].partition("@")
            if at and name == self.bot_username:
                tokens[0] = command
        return tokens

    def react(self, state: Dialogue, text: str) -> Transition:
        tokens = self.tokenize(text)
        if isinstance(state, StartState):
            return self.start_state(state, tokens)
        if isinstance(state, GuessState):
            return self.guess_state(state, tokens)
        raise TypeError(f"unknown dialogue state {state!r}")

    # --------------------
    # Start
    # --------------------
    def start_state(self, state: StartState, tokens) -> Transition:
        if tokens and tokens[0] == "/wordle":
            answer = self.store.pick_random_playable()
            return Transition(START_MESSAGE, GuessState(answer=answer, last_input=tuple(tokens)))
        return Transition(None, state)

    # --------------------
    # Guessing
    # --------------------
    def guess_state(self, state: GuessState, tokens) -> Transition:
        if not tokens:
            return Transition(None, state)

        command, args = tokens[0], tokens[1:]
        new_state = GuessState(state.answer, state.guesses, tuple(tokens))

        if command == "/addword":
            # A bare /addword adds the word from the previous message, e.g. a rejected guess
            if not args and len(state.last_input) == 2:
                args = [state.last_input[1]]
            added = self.store.add(args)
            return Transition(format_words("Added", added), new_state)

        if command == "/removeword":
            if not args:
                return Transition(REMOVE_USAGE, new_state)
            try:
                removed = self.store.remove(args)
            except EditRejected:
                return Transition(KEEP_ONE_PLAYABLE, new_state)
            return Transition(format_words("Removed", removed), new_state)

        if command in EXIT_COMMANDS:
            return Transition(f"Ending game. Word was {state.answer}", StartState())

        if command == "/guess":
            if len(args) != 1:
                return Transition("Invalid guess", state)
            return self.guess(new_state, args[0])

        # Not meant for us
        return Transition(None, state)

    def guess(self, state: GuessState, attempt: str) -> Transition:
        if len(attempt) != WORD_LENGTH:
            return Transition(f"Guess was not {WORD_LENGTH} characters", state)

        if not self.store.contains_in_dictionary(attempt):
            return Transition(f"{attempt} is not in the dictionary. /addword?", state)

        tiles = evaluate(attempt, state.answer)
        played = GuessState(
            answer=state.answer,
            guesses=state.guesses + ((render(tiles), attempt),),
            last_input=state.last_input,
        )
        tries = played.tries

        if is_win(tiles):
            logger.debug("Game won in %s tries", tries)
            return Transition(f"You won. {tries}/{MAX_GUESSES}\n{played.grid()}", StartState())

        if tries < MAX_GUESSES:
            return Transition(f"{tries}/{MAX_GUESSES}\n{played.grid()}", played)

        logger.debug("Game lost")
        return Transition(
            f"You lost. {MAX_GUESSES}/{MAX_GUESSES}.\nAnswer was {state.answer}\n{played.grid()}",
            StartState(),
        )
