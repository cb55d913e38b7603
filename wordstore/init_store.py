"""
Seed (or reset) the override word lists from the shipped defaults.
"""
import argparse
import shutil

from wordstore.files import DEFAULT_WORDS_DIR, DICTIONARY, PLAYABLE, custom_path, default_path


def seed_custom_lists(words_dir=DEFAULT_WORDS_DIR, overwrite=False):
    """Copy each default list to its override file. Returns the paths written."""
    written = []
    for name in (PLAYABLE, DICTIONARY):
        target = custom_path(words_dir, name)
        if target.exists() and not overwrite:
            continue
        shutil.copyfile(default_path(words_dir, name), target)
        written.append(target)
    return written


def reset_custom_lists(words_dir=DEFAULT_WORDS_DIR):
    """Delete the override files so the defaults are loaded again."""
    removed = []
    for name in (PLAYABLE, DICTIONARY):
        target = custom_path(words_dir, name)
        if target.exists():
            target.unlink()
            removed.append(target)
    return removed


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--words-dir", default=DEFAULT_WORDS_DIR)
    parser.add_argument("--reset", action="store_true", help="delete the override lists")
    parser.add_argument("--force", action="store_true", help="overwrite existing override lists")
    args = parser.parse_args()

    if args.reset:
        paths = reset_custom_lists(args.words_dir)
        print(f"Removed {len(paths)} override list(s) in {args.words_dir}")
    else:
        paths = seed_custom_lists(args.words_dir, overwrite=args.force)
        print(f"Seeded {len(paths)} override list(s) in {args.words_dir}")
