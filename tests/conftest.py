import random

import pytest

from app import create_app
from wordstore import load_store

PLAYABLE = ["crane", "erase", "abcde", "slate"]
EXTRA_DICTIONARY = ["speed", "pilot", "ghost", "mouse", "vivid", "quake", "tulip"]


@pytest.fixture
def words_dir(tmp_path):
    """Words directory holding small default lists."""
    (tmp_path / "words.txt").write_text("\n".join(PLAYABLE) + "\n", encoding="utf-8")
    (tmp_path / "dictionary.txt").write_text(
        "\n".join(PLAYABLE + EXTRA_DICTIONARY) + "\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def store(words_dir):
    return load_store(words_dir, rng=random.Random(1234))


@pytest.fixture
def app(words_dir):
    app = create_app({
        "TESTING": True,
        "WORDS_DIR": str(words_dir),
        "REDIS_URL": None,
        "SOCKETIO_MESSAGE_QUEUE": None,
        "BOT_USERNAME": "wordlebot",
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()
