import random
import threading

import pytest

from wordstore import EditAction, EditRejected, WordListError, WordStore, flush_store, load_store
from wordstore.files import custom_path, load_word_list, resolve_path, save_word_list
from wordstore.init_store import reset_custom_lists, seed_custom_lists


def test_load_prefers_defaults_without_overrides(store, words_dir):
    playable, dictionary = store.snapshot()
    assert playable == {"crane", "erase", "abcde", "slate"}
    assert "speed" in dictionary
    assert resolve_path(words_dir, "words") == words_dir / "words.txt"


def test_load_prefers_override_files(words_dir):
    (words_dir / "words_custom.txt").write_text("zebra\n", encoding="utf-8")
    store = load_store(words_dir)
    playable, dictionary = store.snapshot()
    assert playable == {"zebra"}
    # dictionary has no override, default still used
    assert "speed" in dictionary


def test_missing_word_list_is_fatal(tmp_path):
    with pytest.raises(WordListError):
        load_store(tmp_path)


def test_empty_playable_list_is_fatal(words_dir):
    (words_dir / "words.txt").write_text("\n", encoding="utf-8")
    with pytest.raises(WordListError):
        load_store(words_dir)


def test_pick_random_playable(store):
    playable, _ = store.snapshot()
    for _ in range(20):
        assert store.pick_random_playable() in playable


def test_pick_random_is_reproducible_with_seed():
    a = WordStore(["crane", "slate", "erase"], rng=random.Random(7))
    b = WordStore(["slate", "erase", "crane"], rng=random.Random(7))
    assert [a.pick_random_playable() for _ in range(5)] == [b.pick_random_playable() for _ in range(5)]


def test_pick_from_empty_store_raises():
    with pytest.raises(RuntimeError):
        WordStore().pick_random_playable()


def test_add_then_remove(store):
    assert store.edit(EditAction.ADD, ["zebra"]) == {"zebra"}
    assert store.contains_in_dictionary("zebra")
    assert store.contains_playable("zebra")
    assert store.dirty

    assert store.edit(EditAction.REMOVE, ["zebra"]) == {"zebra"}
    assert not store.contains_in_dictionary("zebra")
    assert not store.contains_playable("zebra")


def test_add_is_idempotent(store):
    store.add(["zebra"])
    store.take_dirty()
    assert store.add(["zebra"]) == set()
    assert not store.dirty


def test_add_skips_wrong_length(store):
    assert store.add(["zebras", "zeb", "zebra"]) == {"zebra"}
    assert not store.contains_in_dictionary("zebras")
    assert not store.contains_in_dictionary("zeb")


def test_add_counts_unicode_characters(store):
    assert store.add(["ñandú"]) == {"ñandú"}


def test_add_word_only_in_dictionary_reports_it_once(store):
    # speed is a dictionary word but not playable
    assert store.add(["speed", "speed"]) == {"speed"}
    assert store.contains_playable("speed")


def test_remove_unknown_word_changes_nothing(store):
    assert store.remove(["zzzzz"]) == set()
    assert not store.dirty


def test_remove_accepts_any_length():
    store = WordStore(["crane"], ["crane", "abcdef"])
    assert store.remove(["abcdef"]) == {"abcdef"}
    assert not store.contains_in_dictionary("abcdef")


def test_take_dirty_clears_marker(store):
    assert not store.take_dirty()
    store.add(["zebra"])
    assert store.take_dirty()
    assert not store.take_dirty()


def test_readers_never_see_half_applied_batch(store):
    batch = [f"w{i:04d}" for i in range(400)]
    seen = []
    done = threading.Event()

    def reader():
        while not done.is_set():
            playable, dictionary = store.snapshot()
            seen.append(sum(w in dictionary for w in batch) + sum(w in playable for w in batch))

    t = threading.Thread(target=reader)
    t.start()
    store.add(batch)
    store.remove(batch)
    done.set()
    t.join()

    assert set(seen) <= {0, 2 * len(batch)}


def test_save_word_list_overwrites(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old\nwords\nhere\n", encoding="utf-8")
    save_word_list(path, {"slate", "crane"})
    assert path.read_text(encoding="utf-8") == "crane\nslate\n"
    assert list(tmp_path.iterdir()) == [path]


def test_flush_then_reload_reproduces_sets(store, words_dir):
    store.add(["zebra", "ñandú"])
    store.remove(["crane", "pilot"])
    flush_store(store, words_dir)

    reloaded = load_store(words_dir)
    assert reloaded.snapshot() == store.snapshot()
    assert load_word_list(custom_path(words_dir, "dictionary")) == set(store.snapshot()[1])


def test_seed_and_reset_custom_lists(words_dir):
    written = seed_custom_lists(words_dir)
    assert sorted(p.name for p in written) == ["dictionary_custom.txt", "words_custom.txt"]
    assert resolve_path(words_dir, "words") == words_dir / "words_custom.txt"

    # existing overrides are left alone
    assert seed_custom_lists(words_dir) == []

    removed = reset_custom_lists(words_dir)
    assert len(removed) == 2
    assert resolve_path(words_dir, "words") == words_dir / "words.txt"


def test_add_skips_words_that_cannot_be_written(store):
    assert store.add(["ab\ud800cd", "zebra"]) == {"zebra"}
    assert not store.contains_in_dictionary("ab\ud800cd")
    assert not store.contains_playable("ab\ud800cd")


def test_remove_refuses_to_empty_playable_words():
    store = WordStore(["crane", "slate"], ["crane", "slate", "speed"])
    with pytest.raises(EditRejected):
        store.remove(["crane", "slate", "speed"])

    assert store.snapshot() == ({"crane", "slate"}, {"crane", "slate", "speed"})
    assert not store.dirty
    assert store.remove(["crane"]) == {"crane"}
    assert store.pick_random_playable() == "slate"
