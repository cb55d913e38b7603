"""
Shared, mutable word storage.

Holds the two word sets every conversation reads from and edits:
the playable words (candidate answers) and the dictionary words
(accepted guesses). Both sets are guarded by one read/write lock so a
batch edit is never seen half-applied, and a dirty marker tells the
persistence worker when the sets differ from what is on disk.
"""
import logging
import random
import threading
from enum import Enum

from game_logic import WORD_LENGTH

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one writer. Waiting writers go first."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writers_waiting = 0
        self._writing = False

    def acquire_read(self):
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True

    def release_write(self):
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    def reading(self):
        return _Held(self.acquire_read, self.release_read)

    def writing(self):
        return _Held(self.acquire_write, self.release_write)


class _Held:
    def __init__(self, acquire, release):
        self._acquire = acquire
        self._release = release

    def __enter__(self):
        self._acquire()
        return self

    def __exit__(self, *exc):
        self._release()
        return False


class EditAction(Enum):
    ADD = "add"
    REMOVE = "remove"


class EditRejected(ValueError):
    """A dictionary edit was refused as a whole."""


def is_storable(word: str) -> bool:
    """True if word can go into the word lists."""
    if len(word) != WORD_LENGTH:
        return False
    try:
        word.encode("utf-8")
    except UnicodeEncodeError:
        # e.g. lone surrogates smuggled in through JSON escapes
        return False
    return True


class WordStore:
    """
    Playable and dictionary word sets shared by every conversation.

    Args:
        playable: words that can be picked as a secret answer
        dictionary: words accepted as guesses
        rng: random source for picking answers
    """

    def __init__(self, playable=(), dictionary=(), rng=None):
        self._playable = set(playable)
        self._dictionary = set(dictionary)
        self._rng = rng or random.Random()
        self._lock = ReadWriteLock()
        self._dirty = False
        self._dirty_lock = threading.Lock()

    def pick_random_playable(self) -> str:
        """Pick a secret answer uniformly from the playable words."""
        with self._lock.reading():
            if not self._playable:
                raise RuntimeError("playable word list is empty")
            # sorted so a seeded rng gives the same word regardless of hash seed
            return self._rng.choice(sorted(self._playable))

    def contains_in_dictionary(self, word: str) -> bool:
        with self._lock.reading():
            return word in self._dictionary

    def contains_playable(self, word: str) -> bool:
        with self._lock.reading():
            return word in self._playable

    def edit(self, action: EditAction, words) -> set:
        """
        Add words to, or remove words from, both sets as one batch.

        Added words must be exactly WORD_LENGTH characters long and
        encodable as UTF-8; others are skipped. Removal takes any word.

        Returns:
            The words that actually changed in at least one of the sets

        Raises:
            EditRejected: if a removal would leave no playable words; neither
                set is changed
        """
        words = list(words)
        if action is EditAction.ADD:
            words = [word for word in words if is_storable(word)]

        changed = set()
        with self._lock.writing():
            if action is EditAction.REMOVE and self._playable and self._playable <= set(words):
                raise EditRejected("cannot remove every playable word")

            for word_set in (self._playable, self._dictionary):
                for word in words:
                    if action is EditAction.ADD:
                        if word in word_set:
                            continue
                        word_set.add(word)
                        changed.add(word)
                    elif word in word_set:
                        word_set.remove(word)
                        changed.add(word)
            if changed:
                self.mark_dirty()

        if changed:
            logger.info("%s words: %r", action.value.capitalize(), sorted(changed))
        return changed

    def add(self, words) -> set:
        return self.edit(EditAction.ADD, words)

    def remove(self, words) -> set:
        return self.edit(EditAction.REMOVE, words)

    def snapshot(self):
        """Consistent copies of (playable, dictionary)."""
        with self._lock.reading():
            return frozenset(self._playable), frozenset(self._dictionary)

    def counts(self):
        with self._lock.reading():
            return len(self._playable), len(self._dictionary)

    @property
    def dirty(self) -> bool:
        with self._dirty_lock:
            return self._dirty

    def mark_dirty(self):
        with self._dirty_lock:
            self._dirty = True

    def take_dirty(self) -> bool:
        """Test-and-clear the dirty marker."""
        with self._dirty_lock:
            was_dirty = self._dirty
            self._dirty = False
            return was_dirty
