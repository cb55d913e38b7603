"""
Word list files: where they live, how they are read and written.

Each list has a shipped default (words.txt, dictionary.txt) and an
override (words_custom.txt, dictionary_custom.txt) that is preferred
when present. Overrides are what the persistence worker writes.
"""
import logging
import os
import tempfile
from pathlib import Path

from wordstore.store import WordStore

logger = logging.getLogger(__name__)

# Shipped word lists (relative to project root)
DEFAULT_WORDS_DIR = Path(__file__).resolve().parent.parent / "data"

PLAYABLE = "words"
DICTIONARY = "dictionary"


class WordListError(Exception):
    """A word list could not be loaded at startup."""


def default_path(words_dir, name: str) -> Path:
    return Path(words_dir) / f"{name}.txt"


def custom_path(words_dir, name: str) -> Path:
    return Path(words_dir) / f"{name}_custom.txt"


def resolve_path(words_dir, name: str) -> Path:
    """Override file if present, else the shipped default."""
    custom = custom_path(words_dir, name)
    if custom.exists():
        return custom
    return default_path(words_dir, name)


def load_word_list(path) -> set:
    """Load a newline-separated word list into a set."""
    with open(path, "r", encoding="utf-8") as f:
        words = set(line.strip() for line in f if line.strip())
    logger.info("Loaded %s words from %s", len(words), path)
    return words


def save_word_list(path, words):
    """
    Overwrite path with words, sorted, one per line.

    The words are written to a temporary file in the same directory
    first and moved into place, so path is either fully rewritten or
    left as it was.
    """
    path = Path(path)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            for word in sorted(words):
                f.write(word)
                f.write("\n")
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


def load_store(words_dir=DEFAULT_WORDS_DIR, rng=None) -> WordStore:
    """
    Build the WordStore from the words directory.

    Raises:
        WordListError: if a list cannot be read, or no playable words exist
    """
    lists = {}
    for name in (PLAYABLE, DICTIONARY):
        path = resolve_path(words_dir, name)
        try:
            lists[name] = load_word_list(path)
        except (OSError, UnicodeDecodeError) as e:
            raise WordListError(f"could not load {name} list from {path}: {e}") from e

    if not lists[PLAYABLE]:
        raise WordListError(f"no playable words in {resolve_path(words_dir, PLAYABLE)}")

    return WordStore(lists[PLAYABLE], lists[DICTIONARY], rng=rng)


def flush_store(store: WordStore, words_dir=DEFAULT_WORDS_DIR):
    """Write both sets to their override files."""
    playable, dictionary = store.snapshot()
    save_word_list(custom_path(words_dir, PLAYABLE), playable)
    save_word_list(custom_path(words_dir, DICTIONARY), dictionary)
